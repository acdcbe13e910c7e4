#!/usr/bin/env python3
"""Simulate a token launch on the bonding curve.

Creates a pool (optionally seeded by the creator), runs a series of equal
buys and prints how price and reserves evolve, then sells everything bought
back into the pool.

Usage:
    python scripts/simulate_launch.py
    python scripts/simulate_launch.py --buys 20 --buy-size 500 --seed 100
    python scripts/simulate_launch.py --json
"""

import argparse
import json
import logging
from dataclasses import asdict, dataclass, field

import structlog

from bondcurve.constants import DEFAULT_SUPPLY, UNIT
from bondcurve.events import RecordingEventSink
from bondcurve.exchange import Exchange

logger = structlog.get_logger()

TOKEN_TYPE = "0x1::launch::SIM"


def spot_price(exchange: Exchange) -> float:
    """Settlement units per whole token for a one-token sell, ignoring fees."""
    return exchange.quote_token_for_settlement(TOKEN_TYPE, UNIT) / UNIT


@dataclass
class LaunchReport:
    creator_tokens: int
    total_bought: int
    settlement_spent: int
    settlement_back: int
    fees_collected: int
    events: int
    buys: list[dict[str, float]] = field(default_factory=list)


def simulate(buys: int, buy_size: int, seed: int) -> LaunchReport:
    sink = RecordingEventSink()
    exchange, cap = Exchange.initialize(event_sink=sink)
    creation_fee = exchange.vault.creation_fee

    if seed > 0:
        creator_tokens = exchange.create_and_seed(
            TOKEN_TYPE, DEFAULT_SUPPLY, creation_fee + 1 + seed * UNIT
        )
    else:
        exchange.create(TOKEN_TYPE, DEFAULT_SUPPLY, creation_fee + 1)
        creator_tokens = 0

    rows: list[dict[str, float]] = []
    bought = 0
    for i in range(buys):
        tokens_out = exchange.swap_settlement_for_token(TOKEN_TYPE, buy_size * UNIT)
        bought += tokens_out
        pool = exchange.get_pool(TOKEN_TYPE)
        rows.append(
            {
                "buy": i + 1,
                "tokens_out": tokens_out,
                "settlement_reserve": pool.settlement_reserve,
                "token_reserve": pool.token_reserve,
                "spot_price": spot_price(exchange),
            }
        )

    settlement_back = exchange.swap_token_for_settlement(TOKEN_TYPE, bought) if bought else 0
    fees = exchange.withdraw_fees(cap)

    return LaunchReport(
        creator_tokens=creator_tokens,
        total_bought=bought,
        settlement_spent=buys * buy_size * UNIT,
        settlement_back=settlement_back,
        fees_collected=fees,
        events=len(sink.events),
        buys=rows,
    )


def print_report(report: LaunchReport) -> None:
    print(f"Creator seed tokens: {report.creator_tokens / UNIT:,.2f}")
    print()
    print(f"{'buy':>4} {'tokens out':>20} {'settlement reserve':>20} {'spot price':>14}")
    for row in report.buys:
        print(
            f"{row['buy']:>4} {row['tokens_out'] / UNIT:>20,.2f} "
            f"{row['settlement_reserve'] / UNIT:>20,.4f} {row['spot_price']:>14.10f}"
        )
    print()
    spent = report.settlement_spent / UNIT
    back = report.settlement_back / UNIT
    print(f"Spent {spent:,.4f}, sold back for {back:,.4f} (loss {spent - back:,.4f})")
    print(f"Fees collected: {report.fees_collected / UNIT:,.4f}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate a bonding-curve token launch")
    parser.add_argument("--buys", type=int, default=10, help="Number of buys (default: 10)")
    parser.add_argument(
        "--buy-size",
        type=int,
        default=1_000,
        help="Whole settlement units per buy (default: 1000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Whole settlement units the creator swaps in at creation (default: 0, no seed)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    logger.info("simulation_started", buys=args.buys, buy_size=args.buy_size, seed=args.seed)
    report = simulate(args.buys, args.buy_size, args.seed)

    if args.json:
        print(json.dumps(asdict(report), indent=2))
    else:
        print_report(report)


if __name__ == "__main__":
    main()
