"""Pool management package.

Provides the Pool reserve pair and the PoolRegistry holding one pool per token.
"""

from .pool import Pool, derive_pool_id, normalize_token_type
from .registry import PoolRegistry

__all__ = [
    "Pool",
    "PoolRegistry",
    "derive_pool_id",
    "normalize_token_type",
]
