"""
Server Cache Port - Whole-response cache keyed by request identity.

Entries are immutable blobs: put replaces, remove deletes, nothing is updated
in place. Each entry is filed under a resource path so that every response
cached for that resource, and for any path below it, can be dropped at once.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CachedResponse:
    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


def ancestor_paths(resource: str) -> list[str]:
    """/api/Convo/4 -> ["/api/Convo", "/api"]"""
    parts = resource.strip("/").split("/")
    return ["/" + "/".join(parts[:n]) for n in range(len(parts) - 1, 0, -1)]


def is_within(path: str, resource: str) -> bool:
    return path == resource or path.startswith(resource.rstrip("/") + "/")


class ServerCache(ABC):
    @abstractmethod
    async def get_response(self, key: str) -> CachedResponse | None: ...

    @abstractmethod
    async def put_response(
        self, key: str, resource: str, response: CachedResponse, ttl: int
    ) -> None: ...

    @abstractmethod
    async def remove_responses(self, resource: str, descendants: bool = True) -> None:
        """Drop entries filed under resource, and under paths below it unless descendants is False."""
