"""
CachedConvoContract with an in-process ServerCache.

Invariants:
    - Warm GET returns identical status/headers/body without calling through
    - Key includes caller and query; different callers never share an entry
    - Successful PATCH/DELETE drops every entry at or below the request path
      and the entries of each enclosing collection
    - Failed mutations and creations invalidate nothing
    - 5xx responses are never stored
"""

from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from convos.domain.ports import CachedResponse, ancestor_paths
from convos.infrastructure.cache import CachedConvoContract, InMemoryServerCache
from convos.presentation.contracts import ConvoContract


def make_request(path="/api/Convo/4", query="", user_id="3", method="GET"):
    return Request(
        {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query.encode(),
            "headers": [(b"x-authorization", user_id.encode())],
        }
    )


def convo_response(subject="Hi"):
    response = JSONResponse({"Id": 4, "Subject": subject})
    response.headers["X-Result-Code"] = "0"
    response.headers["X-Message"] = ""
    response.headers["Cache-Control"] = "private, must-revalidate, max-age=3600"
    return response


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture()
def inner():
    inner = AsyncMock(spec=ConvoContract)
    inner.get_convo.side_effect = lambda convo_id, request: convo_response()
    return inner


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    return InMemoryServerCache(clock=clock)


@pytest.fixture()
def contract(inner, cache):
    return CachedConvoContract(inner, cache, ttl=3600)


async def test_warm_get_is_served_from_cache(contract, inner):
    first = await contract.get_convo(4, make_request())
    second = await contract.get_convo(4, make_request())

    assert inner.get_convo.await_count == 1
    assert second.status_code == first.status_code
    assert second.body == first.body
    assert second.raw_headers == first.raw_headers


async def test_callers_do_not_share_entries(contract, inner):
    await contract.get_convo(4, make_request(user_id="3"))
    await contract.get_convo(4, make_request(user_id="7"))

    assert inner.get_convo.await_count == 2


async def test_query_order_does_not_matter(contract, inner):
    inner.list_convos.side_effect = lambda request: convo_response()

    await contract.list_convos(make_request(path="/api/Convo", query="count=5&index=1"))
    await contract.list_convos(make_request(path="/api/Convo", query="index=1&count=5"))
    await contract.list_convos(make_request(path="/api/Convo", query="index=2&count=5"))

    assert inner.list_convos.await_count == 2


async def test_successful_patch_invalidates_every_caller(contract, inner):
    inner.patch_convo.return_value = Response(status_code=200)
    await contract.get_convo(4, make_request(user_id="3"))
    await contract.get_convo(4, make_request(user_id="7"))

    await contract.patch_convo(4, make_request(method="PATCH"), "New")
    await contract.get_convo(4, make_request(user_id="3"))
    await contract.get_convo(4, make_request(user_id="7"))

    assert inner.get_convo.await_count == 4


async def test_successful_delete_invalidates(contract, inner, cache):
    inner.delete_convo.return_value = Response(status_code=204)
    await contract.get_convo(4, make_request())

    await contract.delete_convo(4, make_request(method="DELETE"))

    assert len(cache) == 0


async def test_other_resources_survive_invalidation(contract, inner, cache):
    inner.delete_convo.return_value = Response(status_code=204)
    await contract.get_convo(4, make_request(path="/api/Convo/4"))
    await contract.get_convo(5, make_request(path="/api/Convo/5"))

    await contract.delete_convo(4, make_request(path="/api/Convo/4", method="DELETE"))

    assert len(cache) == 1


async def test_failed_mutation_keeps_entries(contract, inner, cache):
    inner.patch_convo.return_value = Response(status_code=404)
    await contract.get_convo(4, make_request())

    await contract.patch_convo(4, make_request(method="PATCH"), "New")

    assert len(cache) == 1


async def test_create_invalidates_nothing(contract, inner, cache):
    inner.create_message.return_value = Response(status_code=201)
    inner.list_messages.side_effect = lambda convo_id, request: convo_response()
    await contract.list_messages(4, make_request(path="/api/Convo/4/Message"))

    await contract.create_message("hi", 4, None, 7, make_request(path="/api/Convo/4/Message", method="POST"))

    assert len(cache) == 1
    inner.create_message.assert_awaited_once()


async def test_server_errors_are_not_cached(contract, inner):
    inner.get_message.return_value = Response(status_code=500)

    await contract.get_message(4, 1, make_request(path="/api/Convo/4/Message/1"))
    await contract.get_message(4, 1, make_request(path="/api/Convo/4/Message/1"))

    assert inner.get_message.await_count == 2


async def test_client_errors_are_cached(contract, inner):
    inner.get_message.return_value = Response(status_code=404)

    await contract.get_message(4, 1, make_request(path="/api/Convo/4/Message/1"))
    cached = await contract.get_message(4, 1, make_request(path="/api/Convo/4/Message/1"))

    assert inner.get_message.await_count == 1
    assert cached.status_code == 404


async def test_entries_expire(contract, inner, clock):
    await contract.get_convo(4, make_request())
    clock.now += 3601

    await contract.get_convo(4, make_request())

    assert inner.get_convo.await_count == 2


async def test_in_memory_cache_round_trip(cache):
    response = CachedResponse(200, [("x-result-code", "0")], b"{}")

    await cache.put_response("k", "/api/Convo/1", response, ttl=10)

    assert await cache.get_response("k") == response
    assert await cache.get_response("missing") is None


async def test_delete_drops_sub_paths_and_enclosing_lists(contract, inner, cache):
    inner.delete_convo.return_value = Response(status_code=204)
    inner.list_convos.side_effect = lambda request: convo_response()
    inner.list_messages.side_effect = lambda convo_id, request: convo_response()
    inner.get_message.side_effect = lambda convo_id, message_id, request: convo_response()
    await contract.list_convos(make_request(path="/api/Convo"))
    await contract.list_messages(4, make_request(path="/api/Convo/4/Message", user_id="7"))
    await contract.get_message(4, 1, make_request(path="/api/Convo/4/Message/1"))
    await contract.list_messages(40, make_request(path="/api/Convo/40/Message"))
    await contract.get_convo(5, make_request(path="/api/Convo/5"))

    await contract.delete_convo(4, make_request(path="/api/Convo/4", method="DELETE"))

    assert len(cache) == 2
    await contract.list_convos(make_request(path="/api/Convo"))
    await contract.list_messages(40, make_request(path="/api/Convo/40/Message"))
    assert inner.list_convos.await_count == 2
    assert inner.list_messages.await_count == 2


async def test_message_patch_keeps_sibling_messages(contract, inner, cache):
    inner.patch_message.return_value = Response(status_code=200)
    inner.get_message.side_effect = lambda convo_id, message_id, request: convo_response()
    await contract.get_message(4, 1, make_request(path="/api/Convo/4/Message/1"))
    await contract.get_message(4, 2, make_request(path="/api/Convo/4/Message/2"))

    await contract.patch_message(
        "edited", 4, None, 1, make_request(path="/api/Convo/4/Message/1", method="PATCH")
    )

    assert len(cache) == 1
    await contract.get_message(4, 2, make_request(path="/api/Convo/4/Message/2"))
    assert inner.get_message.await_count == 2


def test_ancestor_paths():
    assert ancestor_paths("/api/Convo/4/Message") == ["/api/Convo/4", "/api/Convo", "/api"]
    assert ancestor_paths("/api") == []
