"""
Redis Server Cache - whole responses stored in Redis.

Redis Data Structure:
- Entry:  "convos:response:{key}"       STRING, JSON of one CachedResponse, TTL
- Index:  "convos:resource:{resource}"  SET of entry keys filed exactly under a resource
- Tree:   "convos:tree:{resource}"      SET of entry keys filed under a resource
                                        or any path below it

Redis Commands Used:
- GET:            read an entry
- SETEX:          write an entry with its TTL
- SADD + EXPIRE:  file the entry under its resource and every ancestor tree,
                  each index lives as long as the newest entry in it
- SMEMBERS + DEL: drop every entry of a resource (or tree), then the index itself

Error Handling:
- Cache failures never fail the request
- Read errors and unreadable entries are a miss, write/remove errors are
  logged and skipped
"""

import base64
import json
import logging
from typing import Optional

from redis.asyncio import Redis

from convos.domain.ports import CachedResponse, ServerCache, ancestor_paths

logger = logging.getLogger(__name__)

ENTRY_PREFIX = "convos:response:"
INDEX_PREFIX = "convos:resource:"
TREE_PREFIX = "convos:tree:"


class RedisServerCache(ServerCache):
    def __init__(self, redis: Redis):
        self._redis = redis

    @staticmethod
    def _entry_key(key: str) -> str:
        return f"{ENTRY_PREFIX}{key}"

    @staticmethod
    def _index_key(resource: str) -> str:
        return f"{INDEX_PREFIX}{resource}"

    @staticmethod
    def _tree_key(resource: str) -> str:
        return f"{TREE_PREFIX}{resource}"

    @staticmethod
    def _serialize(response: CachedResponse) -> str:
        return json.dumps(
            {
                "status_code": response.status_code,
                "headers": [list(pair) for pair in response.headers],
                "body": base64.b64encode(response.body).decode("ascii"),
            }
        )

    @staticmethod
    def _deserialize(json_str: str) -> CachedResponse:
        d = json.loads(json_str)
        return CachedResponse(
            status_code=d["status_code"],
            headers=[(name, value) for name, value in d["headers"]],
            body=base64.b64decode(d["body"]),
        )

    async def get_response(self, key: str) -> Optional[CachedResponse]:
        entry_key = self._entry_key(key)
        try:
            cached = await self._redis.get(entry_key)
            if cached is None:
                return None
            return self._deserialize(cached)
        except Exception as e:
            logger.warning(f"Redis cache read error for {entry_key}: {str(e)}")
            return None

    async def put_response(
        self, key: str, resource: str, response: CachedResponse, ttl: int
    ) -> None:
        entry_key = self._entry_key(key)
        index_keys = [self._index_key(resource)] + [
            self._tree_key(path) for path in [resource] + ancestor_paths(resource)
        ]
        try:
            await self._redis.setex(entry_key, ttl, self._serialize(response))
            for index_key in index_keys:
                await self._redis.sadd(index_key, entry_key)
                await self._redis.expire(index_key, ttl)
        except Exception as e:
            logger.warning(f"Redis cache write error for {entry_key}: {str(e)}")

    async def remove_responses(self, resource: str, descendants: bool = True) -> None:
        index_key = self._tree_key(resource) if descendants else self._index_key(resource)
        try:
            entry_keys = await self._redis.smembers(index_key)
            await self._redis.delete(index_key, *entry_keys)
            logger.debug(f"Cache INVALIDATED {len(entry_keys)} entries for {resource}")
        except Exception as e:
            logger.warning(f"Redis cache remove error for {index_key}: {str(e)}")
