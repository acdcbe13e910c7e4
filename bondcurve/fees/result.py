"""Fee split result types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FeeSplit:
    """An amount divided into the protocol fee and what remains.

    Attributes:
        gross: Amount before the fee was taken
        fee: Portion routed to the fee vault
        net: Portion left for the trader or the pool (gross - fee)

    Examples:
        split = FeeSplit(gross=1_000, fee=10, net=990)
        assert split.fee + split.net == split.gross
    """

    gross: int
    fee: int
    net: int

    def __post_init__(self) -> None:
        if self.fee + self.net != self.gross:
            raise ValueError(f"fee split does not add up: {self.fee} + {self.net} != {self.gross}")
