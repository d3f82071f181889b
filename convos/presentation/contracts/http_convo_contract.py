"""
HTTP Convo Contract - orchestrates one request end-to-end.

Flow:
  Request → caller id → (lists) paging params → ConvoManager → Response
                                                      ↓
        status from the outcome code, X-Result-Code / X-Message always,
        paging / last-modified / cache-control headers on successful reads,
        X-URI-Reference on successful creation.

A Fault from the manager becomes a 500 with no entity body.
"""

from datetime import datetime
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from convos.application.common.interfaces import Fault
from convos.application.dto import ConversationDTO, MessageDTO
from convos.application.managers import ConvoManager
from convos.config.settings import ContractSettings
from convos.domain.value_objects import Result
from convos.presentation.contracts.convo_contract import ConvoContract
from convos.presentation.contracts.responses import (
    add_cache_control,
    add_last_modified_header,
    add_location_header,
    add_next_page_header,
    add_relative_count_header,
    add_total_count_header,
    create_response,
    fault_response,
)
from convos.presentation.dependencies.auth import get_user_id
from convos.presentation.dependencies.paging import (
    get_page_count,
    get_page_index,
    get_paging_timestamp,
)
from convos.utils.url_formatter import convo_url, message_url, paging_query


def has_next_page(index: int, count: int, total: int) -> bool:
    return (index * count) + count < total


class HttpConvoContract(ConvoContract):
    def __init__(self, manager: ConvoManager, settings: ContractSettings):
        self._manager = manager
        self._settings = settings

    def _read_paging(self, request: Request, result: Result) -> Optional[tuple[int, int, datetime]]:
        index = get_page_index(request, self._settings)
        count = get_page_count(request, self._settings, result)
        if count is None:
            return None
        before = get_paging_timestamp(request, result)
        if before is None:
            return None
        return index, count, before

    # ==================== CONVERSATIONS ====================

    async def delete_convo(self, convo_id: int, request: Request) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.delete_convo(convo_id, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        return create_response(outcome.result)

    async def list_convos(self, request: Request) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)
        paging = self._read_paging(request, result)
        if paging is None:
            return create_response(result)
        index, count, before = paging

        outcome = await self._manager.list_convos(before, count, index, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        if not outcome.ok:
            return create_response(outcome.result)

        page = outcome.value
        response = create_response(
            outcome.result,
            [ConversationDTO.model_validate(convo).to_json() for convo in page.items],
        )
        add_total_count_header(response, page.total)
        add_relative_count_header(response, len(page.items))

        if has_next_page(index, count, page.total):
            # Conversations without any message carry no date; if none on this
            # page has one, the current cursor is carried over
            dates = [c.date_of_last_message for c in page.items if c.date_of_last_message]
            cursor = min(dates) if dates else before
            add_next_page_header(
                response,
                convo_url(self._settings.base_uri, paging_query(index + 1, count, cursor)),
            )

        # Newest conversation created before the cursor, across all pages
        add_last_modified_header(response, page.max_created)
        add_cache_control(response, self._settings.convo_list_max_age)
        return response

    async def get_convo(self, convo_id: int, request: Request) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.get_convo(convo_id, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        if not outcome.ok or outcome.value is None:
            return create_response(outcome.result)

        convo = outcome.value
        response = create_response(outcome.result, ConversationDTO.model_validate(convo).to_json())
        add_last_modified_header(response, convo.date_updated)
        add_cache_control(response, self._settings.convo_max_age)
        return response

    async def patch_convo(self, convo_id: int, request: Request, subject: Optional[str]) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.patch_convo(convo_id, subject, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        return create_response(outcome.result)

    async def create_convo(self, participant: int, request: Request, subject: Optional[str]) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.create_convo(participant, subject, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        response = create_response(outcome.result)
        if outcome.ok:
            add_location_header(response, convo_url(self._settings.base_uri, outcome.value))
        return response

    # ==================== MESSAGES ====================

    async def delete_message(self, convo_id: int, message_id: int, request: Request) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.delete_message(convo_id, message_id, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        return create_response(outcome.result)

    async def list_messages(self, convo_id: int, request: Request) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)
        paging = self._read_paging(request, result)
        if paging is None:
            return create_response(result)
        index, count, before = paging

        outcome = await self._manager.list_messages(before, convo_id, count, index, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        if not outcome.ok:
            return create_response(outcome.result)

        page = outcome.value
        response = create_response(
            outcome.result,
            [MessageDTO.model_validate(message).to_json() for message in page.items],
        )
        add_total_count_header(response, page.total)
        add_relative_count_header(response, len(page.items))

        if has_next_page(index, count, page.total):
            cursor = min((m.date_created for m in page.items), default=before)
            add_next_page_header(
                response,
                message_url(
                    self._settings.base_uri,
                    convo_id,
                    paging_query(index + 1, count, cursor),
                ),
            )

        # Newest message created before the cursor, across all pages
        add_last_modified_header(response, page.max_created)
        add_cache_control(response, self._settings.message_list_max_age)
        return response

    async def get_message(self, convo_id: int, message_id: int, request: Request) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.get_message(convo_id, message_id, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        if not outcome.ok or outcome.value is None:
            return create_response(outcome.result)

        message = outcome.value
        response = create_response(outcome.result, MessageDTO.model_validate(message).to_json())
        add_last_modified_header(response, message.date_updated)
        add_cache_control(response, self._settings.message_max_age)
        return response

    async def patch_message(
        self,
        body: Optional[str],
        convo_id: int,
        is_read: Optional[bool],
        message_id: int,
        request: Request,
    ) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.patch_message(convo_id, message_id, body, is_read, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        return create_response(outcome.result)

    async def create_message(
        self,
        body: Optional[str],
        convo_id: int,
        parent: Optional[int],
        recipient: int,
        request: Request,
    ) -> Response:
        result = Result()
        user_id = get_user_id(request, result)
        if user_id is None:
            return create_response(result)

        outcome = await self._manager.create_message(body, convo_id, parent, recipient, user_id)
        if isinstance(outcome, Fault):
            return fault_response()
        response = create_response(outcome.result)
        if outcome.ok:
            add_location_header(
                response, message_url(self._settings.base_uri, convo_id, outcome.value)
            )
        return response
