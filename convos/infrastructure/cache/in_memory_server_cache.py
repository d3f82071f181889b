"""
In-process Server Cache used when no REDIS_URL is configured, and by tests.
"""

import threading
import time
from typing import Optional

from convos.domain.ports import CachedResponse, ServerCache, is_within


class InMemoryServerCache(ServerCache):
    """Lock-guarded dict of key -> (expires_at, resource, response)."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, str, CachedResponse]] = {}
        self._lock = threading.Lock()

    async def get_response(self, key: str) -> Optional[CachedResponse]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, _, response = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return response

    async def put_response(
        self, key: str, resource: str, response: CachedResponse, ttl: int
    ) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl, resource, response)

    async def remove_responses(self, resource: str, descendants: bool = True) -> None:
        with self._lock:
            stale = [
                key
                for key, (_, filed_under, _) in self._entries.items()
                if filed_under == resource or (descendants and is_within(filed_under, resource))
            ]
            for key in stale:
                del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
