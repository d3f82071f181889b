"""
Cached Convo Contract - Decorator pattern for whole-response caching.

Architecture:
    CachedConvoContract (decorator)
        ↓ wraps
    HttpConvoContract (concrete implementation)
        ↓ implements
    ConvoContract (abstract interface)

Cache Strategy:
- Reads: key = method + path + sorted query + caller header. A hit is
  returned without calling the wrapped contract. A miss calls through and
  stores the response for a fixed TTL, unless it is a 5xx.
- Patch/Delete: call through; on a 2xx, every entry filed under the request
  path or any path below it is removed, for any caller and any query, along
  with the entries filed exactly under each enclosing collection path.
- Create: call through, nothing is invalidated.

Every cached entry is filed under its request path, so deleting /api/Convo/5
drops the cached reads of /api/Convo/5, of its messages and of the /api/Convo
list, while /api/Convo/6 and its messages stay cached.
"""

import logging
from typing import Awaitable, Callable, Optional

from starlette.requests import Request
from starlette.responses import Response

from convos.domain.ports import CachedResponse, ServerCache, ancestor_paths
from convos.presentation.contracts.convo_contract import ConvoContract
from convos.presentation.dependencies.auth import AUTHORIZATION_HEADER

logger = logging.getLogger(__name__)


def resource_path(request: Request) -> str:
    return request.url.path.rstrip("/") or "/"


def cache_key(request: Request) -> str:
    query = "&".join(f"{k}={v}" for k, v in sorted(request.query_params.multi_items()))
    caller = request.headers.get(AUTHORIZATION_HEADER, "")
    return f"{request.method}:{resource_path(request)}?{query}|{caller}"


def freeze(response: Response) -> CachedResponse:
    return CachedResponse(
        status_code=response.status_code,
        headers=[(name.decode("latin-1"), value.decode("latin-1")) for name, value in response.raw_headers],
        body=bytes(response.body),
    )


def thaw(cached: CachedResponse) -> Response:
    response = Response(content=cached.body, status_code=cached.status_code)
    response.raw_headers = [
        (name.encode("latin-1"), value.encode("latin-1")) for name, value in cached.headers
    ]
    return response


class CachedConvoContract(ConvoContract):
    """
    Decorator: adds server-side response caching to a ConvoContract.

    Implements the same interface, so the router doesn't know caching exists.
    """

    def __init__(self, contract: ConvoContract, cache: ServerCache, ttl: int):
        self._contract = contract
        self._cache = cache
        self._ttl = ttl

    async def _read(self, request: Request, call: Callable[[], Awaitable[Response]]) -> Response:
        key = cache_key(request)
        cached = await self._cache.get_response(key)
        if cached is not None:
            logger.debug(f"Cache HIT for {key}")
            return thaw(cached)

        logger.debug(f"Cache MISS for {key}")
        response = await call()
        if response.status_code < 500:
            await self._cache.put_response(key, resource_path(request), freeze(response), self._ttl)
        return response

    async def _mutate(self, request: Request, call: Callable[[], Awaitable[Response]]) -> Response:
        response = await call()
        if 200 <= response.status_code < 300:
            resource = resource_path(request)
            await self._cache.remove_responses(resource)
            for path in ancestor_paths(resource):
                await self._cache.remove_responses(path, descendants=False)
        return response

    # ==================== READS ====================

    async def list_convos(self, request: Request) -> Response:
        return await self._read(request, lambda: self._contract.list_convos(request))

    async def get_convo(self, convo_id: int, request: Request) -> Response:
        return await self._read(request, lambda: self._contract.get_convo(convo_id, request))

    async def list_messages(self, convo_id: int, request: Request) -> Response:
        return await self._read(request, lambda: self._contract.list_messages(convo_id, request))

    async def get_message(self, convo_id: int, message_id: int, request: Request) -> Response:
        return await self._read(
            request, lambda: self._contract.get_message(convo_id, message_id, request)
        )

    # ==================== MUTATIONS ====================

    async def delete_convo(self, convo_id: int, request: Request) -> Response:
        return await self._mutate(request, lambda: self._contract.delete_convo(convo_id, request))

    async def delete_message(self, convo_id: int, message_id: int, request: Request) -> Response:
        return await self._mutate(
            request, lambda: self._contract.delete_message(convo_id, message_id, request)
        )

    async def patch_convo(self, convo_id: int, request: Request, subject: Optional[str]) -> Response:
        return await self._mutate(
            request, lambda: self._contract.patch_convo(convo_id, request, subject)
        )

    async def patch_message(
        self,
        body: Optional[str],
        convo_id: int,
        is_read: Optional[bool],
        message_id: int,
        request: Request,
    ) -> Response:
        return await self._mutate(
            request,
            lambda: self._contract.patch_message(body, convo_id, is_read, message_id, request),
        )

    # Creation invalidates nothing
    async def create_convo(self, participant: int, request: Request, subject: Optional[str]) -> Response:
        return await self._contract.create_convo(participant, request, subject)

    async def create_message(
        self,
        body: Optional[str],
        convo_id: int,
        parent: Optional[int],
        recipient: int,
        request: Request,
    ) -> Response:
        return await self._contract.create_message(body, convo_id, parent, recipient, request)
