"""
PORTS - Interfaces that infrastructure implements

- store.py         → persistence engine executing named operations
- server_cache.py  → whole-response cache used by the contract decorator
"""

from convos.domain.ports.store import Store, StoreResult, Table
from convos.domain.ports.server_cache import (
    CachedResponse,
    ServerCache,
    ancestor_paths,
    is_within,
)

__all__ = [
    "Store",
    "StoreResult",
    "Table",
    "CachedResponse",
    "ServerCache",
    "ancestor_paths",
    "is_within",
]
