"""
In-Memory Store - process-local implementation of every store operation.

Used when no DATABASE_URL is configured, and by the tests.

Rules:
- A conversation is visible to its creator and participant only; anything
  else reads as ENTITY_NOT_FOUND.
- Deletes are soft: rows stay, flagged deleted, and drop out of every read.
- Lists return page `index` of `count` rows created strictly before `before`,
  newest first. Message lists return root messages only (no parent).
- message_get_by_ids returns each requested message at level 0 and its
  ancestors at levels 1..n.
- Query operations answer [rows, [{"total": n}], [{"max_created": ts}]],
  inserts answer [[{"id": n}]].
"""

import copy
import logging
import threading
from datetime import datetime
from typing import Any, Callable, Optional

from convos.domain.ports import Store, StoreResult, Table
from convos.domain.value_objects import ResultCode
from convos.utils.timestamps import utc_now

logger = logging.getLogger(__name__)

CONVO_NOT_FOUND = "Convo not found"
MESSAGE_NOT_FOUND = "Message not found"
PARENT_NOT_FOUND = "Parent message not found"
RECIPIENT_NOT_IN_CONVO = "Recipient is not a member of this Convo"

CONVO_COLUMNS = (
    "id",
    "creator",
    "participant",
    "subject",
    "date_created",
    "date_updated",
    "date_of_last_message",
    "num_messages",
)
MESSAGE_COLUMNS = (
    "id",
    "convo_id",
    "sender",
    "recipient",
    "parent",
    "body",
    "is_read",
    "date_created",
    "date_updated",
)


def _project(record: dict[str, Any], columns: tuple[str, ...], **extra) -> dict[str, Any]:
    row = {column: record[column] for column in columns}
    row.update(extra)
    return row


def _page_tables(rows: list[dict[str, Any]], index: int, count: int) -> list[Table]:
    start = index * count
    max_created = max((row["date_created"] for row in rows), default=None)
    return [
        rows[start:start + count],
        [{"total": len(rows)}],
        [{"max_created": max_created}],
    ]


class InMemoryStore(Store):
    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._convos: dict[int, dict[str, Any]] = {}
        self._messages: dict[int, dict[str, Any]] = {}
        self._next_convo_id = 1
        self._next_message_id = 1
        self._lock = threading.Lock()
        self._operations: dict[str, Callable[[dict[str, Any]], StoreResult]] = {
            "convo_delete": self._convo_delete,
            "convo_get_all": self._convo_get_all,
            "convo_get_by_id": self._convo_get_by_id,
            "convo_insert": self._convo_insert,
            "convo_patch": self._convo_patch,
            "message_delete": self._message_delete,
            "message_get_all": self._message_get_all,
            "message_get_by_ids": self._message_get_by_ids,
            "message_insert": self._message_insert,
            "message_patch": self._message_patch,
        }

    async def execute(self, operation: str, parameters: dict[str, Any]) -> StoreResult:
        store_result = self._run(operation, parameters)
        return StoreResult(store_result.result_code, store_result.message)

    async def execute_with_results(
        self, operation: str, parameters: dict[str, Any]
    ) -> StoreResult:
        return self._run(operation, parameters)

    def _run(self, operation: str, parameters: dict[str, Any]) -> StoreResult:
        try:
            handler = self._operations[operation]
        except KeyError:
            raise ValueError(f"Unknown store operation: {operation}") from None
        with self._lock:
            store_result = handler(parameters)
        logger.debug(f"{operation} -> {store_result.result_code.name}")
        # Callers get their own copies; stored rows are never shared
        return copy.deepcopy(store_result)

    # ==================== ACCESS ====================

    def _visible_convo(self, convo_id: int, user_id: int) -> Optional[dict[str, Any]]:
        convo = self._convos.get(convo_id)
        if convo is None or convo["deleted"]:
            return None
        if user_id not in (convo["creator"], convo["participant"]):
            return None
        return convo

    def _visible_message(self, convo_id: int, message_id: int) -> Optional[dict[str, Any]]:
        message = self._messages.get(message_id)
        if message is None or message["deleted"] or message["convo_id"] != convo_id:
            return None
        return message

    # ==================== CONVERSATIONS ====================

    def _convo_insert(self, p: dict[str, Any]) -> StoreResult:
        now = self._clock()
        convo_id = self._next_convo_id
        self._next_convo_id += 1
        self._convos[convo_id] = {
            "id": convo_id,
            "creator": p["creator"],
            "participant": p["participant"],
            "subject": p["subject"],
            "date_created": now,
            "date_updated": now,
            "date_of_last_message": None,
            "num_messages": 0,
            "deleted": False,
        }
        return StoreResult(ResultCode.CREATED, tables=[[{"id": convo_id}]])

    def _convo_get_all(self, p: dict[str, Any]) -> StoreResult:
        user_id = p["user_id"]
        rows = [
            _project(convo, CONVO_COLUMNS)
            for convo in self._convos.values()
            if not convo["deleted"]
            and user_id in (convo["creator"], convo["participant"])
            and convo["date_created"] < p["before"]
        ]
        rows.sort(
            key=lambda row: (row["date_of_last_message"] or row["date_created"], row["id"]),
            reverse=True,
        )
        return StoreResult(ResultCode.OK, tables=_page_tables(rows, p["index"], p["count"]))

    def _convo_get_by_id(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["convo_id"], p["user_id"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)
        return StoreResult(ResultCode.OK, tables=[[_project(convo, CONVO_COLUMNS)]])

    def _convo_patch(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["id"], p["user_id"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)
        convo["subject"] = p["subject"]
        convo["date_updated"] = self._clock()
        return StoreResult(ResultCode.OK)

    def _convo_delete(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["id"], p["user_id"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)
        convo["deleted"] = True
        convo["date_updated"] = self._clock()
        return StoreResult(ResultCode.DELETED)

    # ==================== MESSAGES ====================

    def _message_insert(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["convo_id"], p["sender"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)
        if p["recipient"] not in (convo["creator"], convo["participant"]):
            return StoreResult(ResultCode.INVALID_INPUT_DATA, RECIPIENT_NOT_IN_CONVO)
        if p["parent"] is not None and self._visible_message(convo["id"], p["parent"]) is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, PARENT_NOT_FOUND)

        now = self._clock()
        message_id = self._next_message_id
        self._next_message_id += 1
        self._messages[message_id] = {
            "id": message_id,
            "convo_id": convo["id"],
            "sender": p["sender"],
            "recipient": p["recipient"],
            "parent": p["parent"],
            "body": p["body"],
            "is_read": False,
            "date_created": now,
            "date_updated": now,
            "deleted": False,
        }
        convo["date_of_last_message"] = now
        convo["num_messages"] += 1
        return StoreResult(ResultCode.CREATED, tables=[[{"id": message_id}]])

    def _message_get_all(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["convo_id"], p["user_id"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)
        rows = [
            _project(message, MESSAGE_COLUMNS, level=0)
            for message in self._messages.values()
            if message["convo_id"] == convo["id"]
            and not message["deleted"]
            and message["parent"] is None
            and message["date_created"] < p["before"]
        ]
        rows.sort(key=lambda row: (row["date_created"], row["id"]), reverse=True)
        return StoreResult(ResultCode.OK, tables=_page_tables(rows, p["index"], p["count"]))

    def _message_get_by_ids(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["convo_id"], p["user_id"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)

        rows: dict[int, dict[str, Any]] = {}
        for message_id in p["message_ids"]:
            message = self._visible_message(convo["id"], message_id)
            level = 0
            while message is not None:
                known = rows.get(message["id"])
                if known is None or known["level"] > level:
                    rows[message["id"]] = _project(message, MESSAGE_COLUMNS, level=level)
                if message["parent"] is None:
                    break
                message = self._visible_message(convo["id"], message["parent"])
                level += 1

        if not any(row["level"] == 0 for row in rows.values()):
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, MESSAGE_NOT_FOUND)
        ordered = sorted(rows.values(), key=lambda row: (row["level"], row["id"]))
        return StoreResult(ResultCode.OK, tables=[ordered])

    def _message_patch(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["convo_id"], p["user_id"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)
        message = self._visible_message(convo["id"], p["id"])
        if message is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, MESSAGE_NOT_FOUND)
        if p["body"] is not None:
            message["body"] = p["body"]
        if p["is_read"] is not None:
            message["is_read"] = p["is_read"]
        message["date_updated"] = self._clock()
        return StoreResult(ResultCode.OK)

    def _message_delete(self, p: dict[str, Any]) -> StoreResult:
        convo = self._visible_convo(p["convo_id"], p["user_id"])
        if convo is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, CONVO_NOT_FOUND)
        message = self._visible_message(convo["id"], p["id"])
        if message is None:
            return StoreResult(ResultCode.ENTITY_NOT_FOUND, MESSAGE_NOT_FOUND)
        message["deleted"] = True
        message["date_updated"] = self._clock()
        convo["num_messages"] -= 1
        return StoreResult(ResultCode.DELETED)
