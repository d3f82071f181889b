"""
Cache Layer - whole-response server cache.

Contains the cache decorator for ConvoContract and the ServerCache adapters.
"""

from convos.infrastructure.cache.cached_convo_contract import CachedConvoContract
from convos.infrastructure.cache.in_memory_server_cache import InMemoryServerCache
from convos.infrastructure.cache.redis_client import close_redis_client, create_redis_client
from convos.infrastructure.cache.redis_server_cache import RedisServerCache

__all__ = [
    "CachedConvoContract",
    "InMemoryServerCache",
    "RedisServerCache",
    "create_redis_client",
    "close_redis_client",
]
