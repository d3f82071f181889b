"""
Store Convo Manager - validates input and runs the store operations.

Flow per operation:
1. Validate every scalar input (ids positive, lengths, paging range).
   Each failing check adds its own message; any failure returns
   INVALID_INPUT_DATA without touching the store.
2. Call the store with the operation's fixed parameter set.
3. Copy the store's outcome code and message onto the Result.
4. Shape returned rows into entities.

Creation paths check body/subject length before ids. Every other path checks
ids and ranges in parameter order, then the caller id.

A store that raises never unwinds past this class: the exception comes back
as a Fault naming the operation.
"""

import functools
from datetime import datetime
from typing import Any, Optional

from convos.application.common.interfaces import Fault, Outcome, Page
from convos.application.managers.convo_manager import ConvoManager
from convos.application.managers.rows import (
    ConvoRow,
    IdentityRow,
    MaxCreatedRow,
    MessageRow,
    TotalRow,
)
from convos.config.settings import ContractSettings
from convos.domain.entities import Conversation, Message
from convos.domain.ports import Store, StoreResult, Table
from convos.domain.value_objects import Result, ResultCode

BODY_MAX_SIZE = 64000
SUBJECT_MAX_SIZE = 140

# Store operation names
CONVO_DELETE = "convo_delete"
CONVO_GET_ALL = "convo_get_all"
CONVO_GET_BY_ID = "convo_get_by_id"
CONVO_INSERT = "convo_insert"
CONVO_PATCH = "convo_patch"
MESSAGE_DELETE = "message_delete"
MESSAGE_GET_ALL = "message_get_all"
MESSAGE_GET_BY_IDS = "message_get_by_ids"
MESSAGE_INSERT = "message_insert"
MESSAGE_PATCH = "message_patch"

DELETE_CODES = frozenset({ResultCode.OK, ResultCode.DELETED})
CREATE_CODES = frozenset({ResultCode.CREATED})


def returns_fault(operation: str):
    """Turn an exception raised by the store into a Fault for `operation`."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except Exception as e:
                return Fault(operation=operation, error=e)

        return wrapper

    return decorator


def shape_convos(table: Table) -> list[Conversation]:
    return [ConvoRow.model_validate(row).to_entity() for row in table]


def shape_messages(table: Table, include_thread: bool = False) -> list[Message]:
    """
    Map message rows to entities, keeping only level-0 rows in the result.

    With include_thread, every message whose parent is also among the rows
    gets that parent object appended to its thread. Only the immediate
    parent is attached: for A <- B <- C, C.thread is [B], and A is reachable
    as B.thread[0] because B is the same object.
    """
    roots: list[Message] = []
    lookup: dict[int, Message] = {}
    for row in table:
        message_row = MessageRow.model_validate(row)
        message = message_row.to_entity()
        if message_row.level == 0:
            roots.append(message)
        lookup[message.id] = message

    if include_thread:
        for message in lookup.values():
            if message.parent is not None and message.parent in lookup:
                message.attach_parent(lookup[message.parent])
    return roots


def _page_from_tables(tables: list[Table], items: list) -> Page:
    total = TotalRow.model_validate(tables[1][0]).total if len(tables) > 1 and tables[1] else 0
    max_created = None
    if len(tables) > 2 and tables[2]:
        max_created = MaxCreatedRow.model_validate(tables[2][0]).max_created
    return Page(items=items, total=total, max_created=max_created or datetime.min)


class StoreConvoManager(ConvoManager):
    """ConvoManager backed by a Store."""

    def __init__(self, store: Store, settings: ContractSettings):
        self._store = store
        self._settings = settings

    # ==================== VALIDATION ====================

    @staticmethod
    def _is_valid_id(value: int, field_name: str, result: Result) -> bool:
        if value <= 0:
            result.fail(ResultCode.INVALID_INPUT_DATA, f"Invalid Id value for {field_name}")
            return False
        return True

    @staticmethod
    def _is_valid_int(
        value: int, field_name: str, result: Result, minimum: int = 0, maximum: Optional[int] = None
    ) -> bool:
        if value < minimum or (maximum is not None and value > maximum):
            result.fail(ResultCode.INVALID_INPUT_DATA, f"Invalid value for {field_name}")
            return False
        return True

    @staticmethod
    def _is_valid_text(value: Optional[str], max_size: int, field_name: str, result: Result) -> bool:
        # Blank text counts as absent, never as too long
        if value and value.strip() and len(value) > max_size:
            result.fail(
                ResultCode.INVALID_INPUT_DATA,
                f"The maximum number of characters allowed for the {field_name} is {max_size}",
            )
            return False
        return True

    def _is_valid_body(self, body: Optional[str], result: Result) -> bool:
        return self._is_valid_text(body, BODY_MAX_SIZE, "body", result)

    def _is_valid_subject(self, subject: Optional[str], result: Result) -> bool:
        return self._is_valid_text(subject, SUBJECT_MAX_SIZE, "subject", result)

    def _is_valid_count(self, count: int, result: Result) -> bool:
        return self._is_valid_int(count, "Count", result, maximum=self._settings.max_page_count)

    # ==================== STORE ====================

    @staticmethod
    def _apply(result: Result, store_result: StoreResult) -> None:
        result.add_message(store_result.message)
        result.result_code = store_result.result_code

    async def _execute(self, operation: str, parameters: dict[str, Any], result: Result) -> StoreResult:
        store_result = await self._store.execute(operation, parameters)
        self._apply(result, store_result)
        return store_result

    async def _execute_with_results(
        self, operation: str, parameters: dict[str, Any], result: Result
    ) -> StoreResult:
        store_result = await self._store.execute_with_results(operation, parameters)
        self._apply(result, store_result)
        return store_result

    async def _insert(self, operation: str, parameters: dict[str, Any], result: Result) -> Outcome[int]:
        store_result = await self._execute_with_results(operation, parameters, result)
        new_id = 0
        if store_result.tables and store_result.tables[0]:
            new_id = IdentityRow.model_validate(store_result.tables[0][0]).id
        return Outcome(result, new_id, success_codes=CREATE_CODES)

    # ==================== CONVERSATIONS ====================

    @returns_fault("Delete Convo")
    async def delete_convo(self, convo_id: int, user_id: int):
        result = Result()
        if not all([
            self._is_valid_id(convo_id, "Convo", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result, success_codes=DELETE_CODES)

        await self._execute(CONVO_DELETE, {"id": convo_id, "user_id": user_id}, result)
        return Outcome(result, success_codes=DELETE_CODES)

    @returns_fault("List Convos")
    async def list_convos(self, before: datetime, count: int, index: int, user_id: int):
        result = Result()
        if not all([
            self._is_valid_count(count, result),
            self._is_valid_int(index, "Index", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result, Page())

        store_result = await self._execute_with_results(
            CONVO_GET_ALL,
            {"before": before, "count": count, "index": index, "user_id": user_id},
            result,
        )
        page = Page()
        if store_result.tables:
            page = _page_from_tables(store_result.tables, shape_convos(store_result.tables[0]))
        return Outcome(result, page)

    @returns_fault("Get Convo")
    async def get_convo(self, convo_id: int, user_id: int):
        result = Result()
        if not all([
            self._is_valid_id(convo_id, "Convo", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result)

        store_result = await self._execute_with_results(
            CONVO_GET_BY_ID, {"convo_id": convo_id, "user_id": user_id}, result
        )
        convos = shape_convos(store_result.tables[0]) if store_result.tables else []
        return Outcome(result, convos[0] if convos else None)

    @returns_fault("Create Convo")
    async def create_convo(self, participant: int, subject: Optional[str], user_id: int):
        result = Result()
        if not all([
            self._is_valid_subject(subject, result),
            self._is_valid_id(participant, "Participant", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result, 0, success_codes=CREATE_CODES)

        return await self._insert(
            CONVO_INSERT,
            {"creator": user_id, "participant": participant, "subject": subject},
            result,
        )

    @returns_fault("Patch Convo")
    async def patch_convo(self, convo_id: int, subject: Optional[str], user_id: int):
        result = Result()
        if not all([
            self._is_valid_id(convo_id, "Convo", result),
            self._is_valid_subject(subject, result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result)

        await self._execute(
            CONVO_PATCH, {"id": convo_id, "subject": subject, "user_id": user_id}, result
        )
        return Outcome(result)

    # ==================== MESSAGES ====================

    @returns_fault("Delete Message")
    async def delete_message(self, convo_id: int, message_id: int, user_id: int):
        result = Result()
        if not all([
            self._is_valid_id(convo_id, "Convo", result),
            self._is_valid_id(message_id, "Message", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result, success_codes=DELETE_CODES)

        await self._execute(
            MESSAGE_DELETE, {"id": message_id, "convo_id": convo_id, "user_id": user_id}, result
        )
        return Outcome(result, success_codes=DELETE_CODES)

    @returns_fault("List Messages")
    async def list_messages(self, before: datetime, convo_id: int, count: int, index: int, user_id: int):
        result = Result()
        if not all([
            self._is_valid_id(convo_id, "Convo", result),
            self._is_valid_count(count, result),
            self._is_valid_int(index, "Index", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result, Page())

        store_result = await self._execute_with_results(
            MESSAGE_GET_ALL,
            {
                "before": before,
                "count": count,
                "index": index,
                "convo_id": convo_id,
                "user_id": user_id,
            },
            result,
        )
        page = Page()
        if store_result.tables:
            page = _page_from_tables(store_result.tables, shape_messages(store_result.tables[0]))
        return Outcome(result, page)

    @returns_fault("Get Message")
    async def get_message(self, convo_id: int, message_id: int, user_id: int):
        result = Result()
        if not all([
            self._is_valid_id(convo_id, "Convo", result),
            self._is_valid_id(message_id, "Message", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result)

        store_result = await self._execute_with_results(
            MESSAGE_GET_BY_IDS,
            {"convo_id": convo_id, "message_ids": [message_id], "user_id": user_id},
            result,
        )
        messages = []
        if store_result.tables and store_result.tables[0]:
            messages = shape_messages(store_result.tables[0], include_thread=True)
        return Outcome(result, messages[0] if messages else None)

    @returns_fault("Create Message")
    async def create_message(
        self,
        body: Optional[str],
        convo_id: int,
        parent: Optional[int],
        recipient: int,
        user_id: int,
    ):
        result = Result()
        if not all([
            self._is_valid_body(body, result),
            self._is_valid_id(convo_id, "Convo", result),
            parent is None or self._is_valid_id(parent, "Parent", result),
            self._is_valid_id(recipient, "Recipient", result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result, 0, success_codes=CREATE_CODES)

        return await self._insert(
            MESSAGE_INSERT,
            {
                "body": body,
                "convo_id": convo_id,
                "recipient": recipient,
                "parent": parent,
                "sender": user_id,
            },
            result,
        )

    @returns_fault("Patch Message")
    async def patch_message(
        self,
        convo_id: int,
        message_id: int,
        body: Optional[str],
        is_read: Optional[bool],
        user_id: int,
    ):
        result = Result()
        if not all([
            self._is_valid_id(convo_id, "Convo", result),
            self._is_valid_id(message_id, "Message", result),
            self._is_valid_body(body, result),
            self._is_valid_id(user_id, "User", result),
        ]):
            return Outcome(result)

        await self._execute(
            MESSAGE_PATCH,
            {
                "id": message_id,
                "body": body,
                "convo_id": convo_id,
                "is_read": is_read,
                "user_id": user_id,
            },
            result,
        )
        return Outcome(result)
