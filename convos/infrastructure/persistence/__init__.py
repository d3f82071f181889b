"""
Persistence Layer - Store implementations.

Contains the process-local store and the PostgreSQL function-call store.
"""

from convos.infrastructure.persistence.in_memory_store import InMemoryStore
from convos.infrastructure.persistence.postgres_store import PostgresStore

__all__ = [
    "InMemoryStore",
    "PostgresStore",
]
