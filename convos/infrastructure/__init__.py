"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- persistence/: Store implementations (in-memory, PostgreSQL)
- cache/: ServerCache implementations (in-memory, Redis) and CachedConvoContract
"""

from convos.infrastructure.cache import (
    CachedConvoContract,
    InMemoryServerCache,
    RedisServerCache,
)
from convos.infrastructure.persistence import InMemoryStore, PostgresStore

__all__ = [
    "CachedConvoContract",
    "InMemoryServerCache",
    "RedisServerCache",
    "InMemoryStore",
    "PostgresStore",
]
