"""
StoreConvoManager against a mocked Store.

Invariants:
    - Any id <= 0 is INVALID_INPUT_DATA and the store is never called
    - Subject <= 140 and body <= 64000 characters; blank text is never too long
    - Validation complaints accumulate
    - Store outcome and message are copied verbatim
    - A raising store comes back as a Fault, never an exception
    - get_message attaches only the immediate parent to each message
"""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from convos.application.common.interfaces import Fault, Outcome
from convos.application.managers import StoreConvoManager
from convos.config.settings import ContractSettings
from convos.domain.ports import Store, StoreResult
from convos.domain.value_objects import ResultCode

MAX = datetime.max
T1 = datetime(2024, 5, 1, 10, 0, 0)
T2 = datetime(2024, 5, 1, 11, 0, 0)
T3 = datetime(2024, 5, 1, 12, 0, 0)


def message_row(id, parent=None, level=0, created=T1):
    return {
        "id": id,
        "convo_id": 1,
        "sender": 3,
        "recipient": 7,
        "parent": parent,
        "body": f"message {id}",
        "is_read": False,
        "date_created": created,
        "date_updated": created,
        "level": level,
    }


def convo_row(id, last_message=None):
    return {
        "id": id,
        "creator": 3,
        "participant": 7,
        "subject": "Hi",
        "date_created": T1,
        "date_updated": T2,
        "date_of_last_message": last_message,
        "num_messages": 0,
    }


@pytest.fixture()
def store():
    store = AsyncMock(spec=Store)
    store.execute.return_value = StoreResult(ResultCode.OK)
    store.execute_with_results.return_value = StoreResult(ResultCode.OK)
    return store


@pytest.fixture()
def manager(store):
    return StoreConvoManager(store, ContractSettings())


# -- Validation ----------------------------------------------------------------

INVALID_ID_CALLS = [
    ("delete_convo", lambda m, bad: m.delete_convo(bad, 3)),
    ("delete_convo user", lambda m, bad: m.delete_convo(1, bad)),
    ("delete_message", lambda m, bad: m.delete_message(1, bad, 3)),
    ("list_convos user", lambda m, bad: m.list_convos(MAX, 10, 0, bad)),
    ("get_convo", lambda m, bad: m.get_convo(bad, 3)),
    ("list_messages", lambda m, bad: m.list_messages(MAX, bad, 10, 0, 3)),
    ("get_message", lambda m, bad: m.get_message(1, bad, 3)),
    ("create_convo participant", lambda m, bad: m.create_convo(bad, "Hi", 3)),
    ("create_message recipient", lambda m, bad: m.create_message("x", 1, None, bad, 3)),
    ("create_message parent", lambda m, bad: m.create_message("x", 1, bad, 7, 3)),
    ("patch_convo", lambda m, bad: m.patch_convo(bad, "Hi", 3)),
    ("patch_message", lambda m, bad: m.patch_message(1, bad, "x", None, 3)),
]


@pytest.mark.parametrize("bad", [0, -1])
@pytest.mark.parametrize("name, call", INVALID_ID_CALLS, ids=[n for n, _ in INVALID_ID_CALLS])
async def test_non_positive_ids_never_reach_store(manager, store, name, call, bad):
    outcome = await call(manager, bad)

    assert isinstance(outcome, Outcome)
    assert outcome.result.result_code == ResultCode.INVALID_INPUT_DATA
    assert not outcome.ok
    store.execute.assert_not_called()
    store.execute_with_results.assert_not_called()


async def test_subject_at_limit_is_accepted(manager, store):
    store.execute_with_results.return_value = StoreResult(ResultCode.CREATED, tables=[[{"id": 12}]])

    outcome = await manager.create_convo(7, "s" * 140, 3)

    assert outcome.ok
    assert outcome.value == 12


async def test_subject_over_limit_is_rejected(manager, store):
    outcome = await manager.create_convo(7, "s" * 141, 3)

    assert outcome.result.result_code == ResultCode.INVALID_INPUT_DATA
    assert outcome.result.messages == [
        "The maximum number of characters allowed for the subject is 140"
    ]
    store.execute_with_results.assert_not_called()


async def test_body_at_limit_is_accepted(manager, store):
    store.execute_with_results.return_value = StoreResult(ResultCode.CREATED, tables=[[{"id": 40}]])

    outcome = await manager.create_message("b" * 64000, 1, None, 7, 3)

    assert outcome.ok
    assert outcome.value == 40


async def test_body_over_limit_is_rejected(manager, store):
    outcome = await manager.patch_message(1, 2, "b" * 64001, None, 3)

    assert outcome.result.result_code == ResultCode.INVALID_INPUT_DATA
    assert outcome.result.messages == [
        "The maximum number of characters allowed for the body is 64000"
    ]
    store.execute.assert_not_called()


async def test_body_over_limit_is_rejected_on_create(manager, store):
    outcome = await manager.create_message("b" * 64001, 1, None, 7, 3)

    assert outcome.result.result_code == ResultCode.INVALID_INPUT_DATA
    assert outcome.result.messages == [
        "The maximum number of characters allowed for the body is 64000"
    ]
    store.execute_with_results.assert_not_called()


async def test_blank_text_is_never_too_long(manager, store):
    store.execute.return_value = StoreResult(ResultCode.OK)

    outcome = await manager.patch_convo(1, " " * 500, 3)

    assert outcome.ok
    store.execute.assert_awaited_once()


async def test_validation_complaints_accumulate_in_order(manager):
    outcome = await manager.create_message("b" * 64001, 0, None, -4, 3)

    assert outcome.result.messages == [
        "The maximum number of characters allowed for the body is 64000",
        "Invalid Id value for Convo",
        "Invalid Id value for Recipient",
    ]


@pytest.mark.parametrize(
    "count, index, message",
    [
        (51, 0, "Invalid value for Count"),
        (-1, 0, "Invalid value for Count"),
        (10, -1, "Invalid value for Index"),
    ],
)
async def test_paging_range(manager, store, count, index, message):
    outcome = await manager.list_convos(MAX, count, index, 3)

    assert outcome.result.result_code == ResultCode.INVALID_INPUT_DATA
    assert outcome.result.messages == [message]
    store.execute_with_results.assert_not_called()


# -- Store calls -----------------------------------------------------------------


async def test_store_outcome_is_copied_verbatim(manager, store):
    store.execute.return_value = StoreResult(ResultCode.ENTITY_NOT_FOUND, "Convo not found")

    outcome = await manager.patch_convo(5, "Hi", 3)

    assert outcome.result.result_code == ResultCode.ENTITY_NOT_FOUND
    assert str(outcome.result) == "Convo not found"
    store.execute.assert_awaited_once_with("convo_patch", {"id": 5, "subject": "Hi", "user_id": 3})


async def test_create_message_parameters(manager, store):
    store.execute_with_results.return_value = StoreResult(ResultCode.CREATED, tables=[[{"id": 9}]])

    await manager.create_message("hello", 1, 4, 7, 3)

    store.execute_with_results.assert_awaited_once_with(
        "message_insert",
        {"body": "hello", "convo_id": 1, "recipient": 7, "parent": 4, "sender": 3},
    )


async def test_delete_answers_deleted(manager, store):
    store.execute.return_value = StoreResult(ResultCode.DELETED)

    outcome = await manager.delete_message(1, 2, 3)

    assert outcome.ok
    assert outcome.result.result_code == ResultCode.DELETED
    assert outcome.result.messages == []


async def test_list_convos_shapes_page(manager, store):
    store.execute_with_results.return_value = StoreResult(
        ResultCode.OK,
        tables=[
            [convo_row(2, last_message=T3), convo_row(1)],
            [{"total": 25}],
            [{"max_created": T2}],
        ],
    )

    outcome = await manager.list_convos(MAX, 10, 0, 3)

    page = outcome.value
    assert [c.id for c in page.items] == [2, 1]
    assert page.items[0].date_of_last_message == T3
    assert page.items[1].date_of_last_message is None
    assert page.total == 25
    assert page.max_created == T2


async def test_list_without_tables_is_empty(manager, store):
    outcome = await manager.list_messages(MAX, 1, 10, 0, 3)

    assert outcome.ok
    assert outcome.value.items == []
    assert outcome.value.total == 0
    assert outcome.value.max_created == datetime.min


async def test_list_messages_never_builds_threads(manager, store):
    store.execute_with_results.return_value = StoreResult(
        ResultCode.OK,
        tables=[[message_row(1), message_row(2, parent=1)], [{"total": 2}], [{"max_created": T1}]],
    )

    outcome = await manager.list_messages(MAX, 1, 10, 0, 3)

    assert all(m.thread is None for m in outcome.value.items)


async def test_get_convo_not_found(manager, store):
    store.execute_with_results.return_value = StoreResult(ResultCode.ENTITY_NOT_FOUND, "Convo not found")

    outcome = await manager.get_convo(9, 3)

    assert not outcome.ok
    assert outcome.value is None


# -- Thread reconstruction --------------------------------------------------------


async def test_get_message_attaches_immediate_parent_only(manager, store):
    store.execute_with_results.return_value = StoreResult(
        ResultCode.OK,
        tables=[[
            message_row(3, parent=2, level=0, created=T3),
            message_row(2, parent=1, level=1, created=T2),
            message_row(1, parent=None, level=2, created=T1),
        ]],
    )

    outcome = await manager.get_message(1, 3, 3)

    c = outcome.value
    assert c.id == 3
    assert [m.id for m in c.thread] == [2]
    b = c.thread[0]
    assert [m.id for m in b.thread] == [1]
    assert b.thread[0].thread is None
    store.execute_with_results.assert_awaited_once_with(
        "message_get_by_ids", {"convo_id": 1, "message_ids": [3], "user_id": 3}
    )


async def test_root_message_has_no_thread(manager, store):
    store.execute_with_results.return_value = StoreResult(
        ResultCode.OK, tables=[[message_row(1)]]
    )

    outcome = await manager.get_message(1, 1, 3)

    assert outcome.value.thread is None
    assert outcome.value.is_root


# -- Faults -----------------------------------------------------------------------


async def test_store_exception_becomes_fault(manager, store):
    error = ConnectionError("database unreachable")
    store.execute_with_results.side_effect = error

    response = await manager.get_convo(1, 3)

    assert isinstance(response, Fault)
    assert response.operation == "Get Convo"
    assert response.error is error
