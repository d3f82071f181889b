from datetime import datetime

import pytest

from conftest import StepClock
from convos.domain.value_objects import ResultCode
from convos.infrastructure.persistence import InMemoryStore

MAX = datetime.max


@pytest.fixture()
def store():
    return InMemoryStore(clock=StepClock())


async def insert_convo(store, creator=3, participant=7, subject="Hi"):
    result = await store.execute_with_results(
        "convo_insert", {"creator": creator, "participant": participant, "subject": subject}
    )
    return result.tables[0][0]["id"]


async def insert_message(store, convo_id, sender=3, recipient=7, parent=None, body="hello"):
    result = await store.execute_with_results(
        "message_insert",
        {"body": body, "convo_id": convo_id, "recipient": recipient, "parent": parent, "sender": sender},
    )
    assert result.result_code == ResultCode.CREATED, result.message
    return result.tables[0][0]["id"]


async def test_convo_visible_to_both_parties_only(store):
    convo_id = await insert_convo(store)

    for user_id in (3, 7):
        result = await store.execute_with_results(
            "convo_get_by_id", {"convo_id": convo_id, "user_id": user_id}
        )
        assert result.result_code == ResultCode.OK

    result = await store.execute_with_results("convo_get_by_id", {"convo_id": convo_id, "user_id": 8})
    assert result.result_code == ResultCode.ENTITY_NOT_FOUND


async def test_convo_list_pages_newest_first(store):
    ids = [await insert_convo(store, subject=f"c{n}") for n in range(5)]

    result = await store.execute_with_results(
        "convo_get_all", {"before": MAX, "count": 2, "index": 1, "user_id": 3}
    )

    rows, totals, max_created = result.tables
    assert [row["id"] for row in rows] == [ids[2], ids[1]]
    assert totals == [{"total": 5}]
    assert max_created[0]["max_created"] == datetime(2024, 5, 1, 12, 0, 5)


async def test_convo_with_recent_message_sorts_first(store):
    older = await insert_convo(store)
    await insert_convo(store)
    await insert_message(store, older)

    result = await store.execute_with_results(
        "convo_get_all", {"before": MAX, "count": 10, "index": 0, "user_id": 3}
    )

    first = result.tables[0][0]
    assert first["id"] == older
    assert first["num_messages"] == 1
    assert first["date_of_last_message"] is not None


async def test_before_excludes_newer_rows(store):
    await insert_convo(store)  # 12:00:01
    await insert_convo(store)  # 12:00:02

    result = await store.execute_with_results(
        "convo_get_all",
        {"before": datetime(2024, 5, 1, 12, 0, 2), "count": 10, "index": 0, "user_id": 3},
    )

    assert len(result.tables[0]) == 1
    assert result.tables[1] == [{"total": 1}]


async def test_message_list_is_root_only(store):
    convo_id = await insert_convo(store)
    root = await insert_message(store, convo_id)
    await insert_message(store, convo_id, sender=7, recipient=3, parent=root)

    result = await store.execute_with_results(
        "message_get_all",
        {"before": MAX, "count": 10, "index": 0, "convo_id": convo_id, "user_id": 7},
    )

    assert [row["id"] for row in result.tables[0]] == [root]
    assert result.tables[1] == [{"total": 1}]


async def test_get_by_ids_returns_ancestors_with_levels(store):
    convo_id = await insert_convo(store)
    a = await insert_message(store, convo_id)
    b = await insert_message(store, convo_id, parent=a)
    c = await insert_message(store, convo_id, parent=b)

    result = await store.execute_with_results(
        "message_get_by_ids", {"convo_id": convo_id, "message_ids": [c], "user_id": 3}
    )

    assert [(row["id"], row["level"]) for row in result.tables[0]] == [(c, 0), (b, 1), (a, 2)]


async def test_reply_to_unknown_parent(store):
    convo_id = await insert_convo(store)

    result = await store.execute_with_results(
        "message_insert",
        {"body": "x", "convo_id": convo_id, "recipient": 7, "parent": 99, "sender": 3},
    )

    assert result.result_code == ResultCode.ENTITY_NOT_FOUND
    assert result.message == "Parent message not found"


async def test_recipient_must_be_in_convo(store):
    convo_id = await insert_convo(store)

    result = await store.execute_with_results(
        "message_insert",
        {"body": "x", "convo_id": convo_id, "recipient": 8, "parent": None, "sender": 3},
    )

    assert result.result_code == ResultCode.INVALID_INPUT_DATA


async def test_message_patch_keeps_unset_fields(store):
    convo_id = await insert_convo(store)
    message_id = await insert_message(store, convo_id, body="original")

    patched = await store.execute(
        "message_patch",
        {"id": message_id, "body": None, "convo_id": convo_id, "is_read": True, "user_id": 7},
    )
    result = await store.execute_with_results(
        "message_get_by_ids", {"convo_id": convo_id, "message_ids": [message_id], "user_id": 7}
    )

    assert patched.result_code == ResultCode.OK
    row = result.tables[0][0]
    assert row["body"] == "original"
    assert row["is_read"] is True


async def test_soft_delete_hides_convo(store):
    convo_id = await insert_convo(store)

    deleted = await store.execute("convo_delete", {"id": convo_id, "user_id": 3})
    again = await store.execute("convo_delete", {"id": convo_id, "user_id": 3})
    listed = await store.execute_with_results(
        "convo_get_all", {"before": MAX, "count": 10, "index": 0, "user_id": 7}
    )

    assert deleted.result_code == ResultCode.DELETED
    assert again.result_code == ResultCode.ENTITY_NOT_FOUND
    assert listed.tables[0] == []


async def test_message_delete_updates_count(store):
    convo_id = await insert_convo(store)
    message_id = await insert_message(store, convo_id)

    deleted = await store.execute(
        "message_delete", {"id": message_id, "convo_id": convo_id, "user_id": 3}
    )
    convo = await store.execute_with_results("convo_get_by_id", {"convo_id": convo_id, "user_id": 3})

    assert deleted.result_code == ResultCode.DELETED
    assert convo.tables[0][0]["num_messages"] == 0


async def test_returned_rows_are_copies(store):
    convo_id = await insert_convo(store)
    result = await store.execute_with_results("convo_get_by_id", {"convo_id": convo_id, "user_id": 3})
    result.tables[0][0]["subject"] = "tampered"

    again = await store.execute_with_results("convo_get_by_id", {"convo_id": convo_id, "user_id": 3})

    assert again.tables[0][0]["subject"] == "Hi"


async def test_unknown_operation_raises(store):
    with pytest.raises(ValueError):
        await store.execute("convo_explode", {})
