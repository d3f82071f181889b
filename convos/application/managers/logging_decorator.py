"""
Logging Decorator - records store faults around any ConvoManager.

    LoggingConvoManager (decorator)
        ↓ wraps
    StoreConvoManager (concrete implementation)

Normal outcomes, including validation and business failures, pass through
untouched. A Fault is logged with the operation's identifying parameters and
its traceback, then handed back unchanged.
"""

import logging
from datetime import datetime
from typing import Optional

from convos.application.common.interfaces import Fault, ManagerResponse
from convos.application.managers.convo_manager import ConvoManager
from convos.utils.timestamps import format_timestamp

logger = logging.getLogger(__name__)


class LoggingConvoManager(ConvoManager):
    def __init__(self, manager: ConvoManager):
        self._manager = manager

    @staticmethod
    def _observe(response: ManagerResponse, description: str) -> ManagerResponse:
        if isinstance(response, Fault):
            logger.error(
                f"Failed to {description}: {type(response.error).__name__}: {response.error}",
                exc_info=response.error,
            )
        return response

    async def delete_convo(self, convo_id: int, user_id: int):
        response = await self._manager.delete_convo(convo_id, user_id)
        return self._observe(response, f"Delete Convo: {convo_id}, userId={user_id}")

    async def delete_message(self, convo_id: int, message_id: int, user_id: int):
        response = await self._manager.delete_message(convo_id, message_id, user_id)
        return self._observe(
            response,
            f"Delete Message: {message_id}, convoId={convo_id}, userId={user_id}",
        )

    async def list_convos(self, before: datetime, count: int, index: int, user_id: int):
        response = await self._manager.list_convos(before, count, index, user_id)
        return self._observe(
            response,
            f"list Convos: before={format_timestamp(before)}, count={count}, "
            f"index={index}, userId={user_id}",
        )

    async def get_convo(self, convo_id: int, user_id: int):
        response = await self._manager.get_convo(convo_id, user_id)
        return self._observe(response, f"Get Convo: {convo_id}, userId={user_id}")

    async def list_messages(
        self, before: datetime, convo_id: int, count: int, index: int, user_id: int
    ):
        response = await self._manager.list_messages(before, convo_id, count, index, user_id)
        return self._observe(
            response,
            f"list Messages: before={format_timestamp(before)}, convoId={convo_id}, "
            f"count={count}, index={index}, userId={user_id}",
        )

    async def get_message(self, convo_id: int, message_id: int, user_id: int):
        response = await self._manager.get_message(convo_id, message_id, user_id)
        return self._observe(
            response,
            f"Get Message: {message_id}, convoId={convo_id}, userId={user_id}",
        )

    async def create_convo(self, participant: int, subject: Optional[str], user_id: int):
        response = await self._manager.create_convo(participant, subject, user_id)
        return self._observe(
            response,
            f"Insert Convo: participant={participant}, subject={subject!r}, userId={user_id}",
        )

    async def create_message(
        self,
        body: Optional[str],
        convo_id: int,
        parent: Optional[int],
        recipient: int,
        user_id: int,
    ):
        response = await self._manager.create_message(body, convo_id, parent, recipient, user_id)
        # Body omitted
        return self._observe(
            response,
            f"Insert Message: convoId={convo_id}, parent={parent}, "
            f"recipient={recipient}, userId={user_id}",
        )

    async def patch_convo(self, convo_id: int, subject: Optional[str], user_id: int):
        response = await self._manager.patch_convo(convo_id, subject, user_id)
        return self._observe(
            response,
            f"Patch Convo: {convo_id}, subject={subject!r}, userId={user_id}",
        )

    async def patch_message(
        self,
        convo_id: int,
        message_id: int,
        body: Optional[str],
        is_read: Optional[bool],
        user_id: int,
    ):
        response = await self._manager.patch_message(convo_id, message_id, body, is_read, user_id)
        return self._observe(
            response,
            f"Patch Message: {message_id}, convoId={convo_id}, isRead={is_read}, userId={user_id}",
        )
