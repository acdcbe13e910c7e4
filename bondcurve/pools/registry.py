"""Pool registry keyed by token type.

There is at most one pool per traded token. Pools are never removed: a
pool drained by liquidity removal stays registered with empty reserves.
"""

from __future__ import annotations

import structlog

from bondcurve.errors import PoolAlreadyExists, PoolNotFound
from bondcurve.pools.pool import Pool, normalize_token_type

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of bonding-curve pools."""

    def __init__(self) -> None:
        self._pools: dict[str, Pool] = {}

    def add_pool(self, pool: Pool) -> None:
        """Register a pool.

        Raises:
            PoolAlreadyExists: If a pool for the same token type exists
        """
        if pool.token_type in self._pools:
            raise PoolAlreadyExists(f"pool already exists for {pool.token_type}")
        self._pools[pool.token_type] = pool
        logger.debug("pool_registered", pool_id=pool.pool_id, token_type=pool.token_type)

    def get_pool(self, token_type: str) -> Pool:
        """Look up the pool for a token type.

        Raises:
            InvalidTokenType: If token_type is blank
            PoolNotFound: If no pool exists for the token type
        """
        pool = self._pools.get(normalize_token_type(token_type))
        if pool is None:
            raise PoolNotFound(f"no pool for {token_type}")
        return pool

    def has_pool(self, token_type: str) -> bool:
        return normalize_token_type(token_type) in self._pools
