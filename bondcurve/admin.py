"""Admin capability and the gate that checks it.

Holding an AdminCap is the only authorization an exchange asks for: whoever
presents it may toggle trading, withdraw fees, change the creation fee and
remove pool liquidity. The exchange does not track who holds it.

Each exchange gets exactly one cap, normally minted by
``Exchange.initialize``. Caps cannot be copied, pickled or constructed
directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn

from bondcurve.errors import InvalidCapability

if TYPE_CHECKING:
    from bondcurve.exchange import Exchange

_MINT_KEY = object()


class AdminCap:
    """Opaque, non-copyable admin credential bound to one exchange."""

    __slots__ = ("_issuer_id",)

    def __init__(self, issuer_id: str, *, _key: object = None) -> None:
        if _key is not _MINT_KEY:
            raise TypeError("AdminCap can only be minted by Exchange.initialize")
        self._issuer_id = issuer_id

    def __repr__(self) -> str:
        return "AdminCap(<opaque>)"

    def __copy__(self) -> NoReturn:
        raise TypeError("AdminCap cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        raise TypeError("AdminCap cannot be copied")

    def __reduce__(self) -> NoReturn:
        raise TypeError("AdminCap cannot be serialized")


def mint_admin_cap(exchange: Exchange) -> AdminCap:
    """Mint the single capability for an exchange.

    Raises:
        InvalidCapability: If the exchange already has its capability
    """
    if exchange.admin_cap_minted:
        raise InvalidCapability(
            f"admin capability already minted for {exchange.exchange_id}"
        )
    exchange.admin_cap_minted = True
    return AdminCap(exchange.exchange_id, _key=_MINT_KEY)


def is_valid_cap(cap: object, issuer_id: str) -> bool:
    """Check whether ``cap`` is an AdminCap minted for ``issuer_id``."""
    return isinstance(cap, AdminCap) and cap._issuer_id == issuer_id


def require_admin(cap: object, issuer_id: str) -> None:
    """Abort unless a valid admin capability is presented.

    Raises:
        InvalidCapability: If cap is missing, of the wrong type, or minted elsewhere
    """
    if not is_valid_cap(cap, issuer_id):
        raise InvalidCapability("a valid admin capability is required")
