"""Test helpers module for shared test utilities.

- constants: Token types, actors and common amounts
- factories: Pool launch and state snapshot helpers
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CREATION_FEE,
    LAUNCH_RESERVE,
    MEME,
    OFFSET,
    PEPE,
    SUPPLY,
    UNIT,
)
from tests.helpers.factories import launch_pool, snapshot

__all__ = [
    # Constants
    "MEME",
    "PEPE",
    "UNIT",
    "SUPPLY",
    "CREATION_FEE",
    "OFFSET",
    "LAUNCH_RESERVE",
    "ALICE",
    "BOB",
    # Factories
    "launch_pool",
    "snapshot",
]
