"""
Convo Manager Port - business operations on conversations and messages.

Implementations:
    StoreConvoManager    (store_convo_manager.py) - validation + store calls
    LoggingConvoManager  (logging_decorator.py)   - logs faults, otherwise transparent

Every operation takes the caller id resolved upstream and answers with an
Outcome or a Fault (see convos.application.common.interfaces).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from convos.application.common.interfaces import ManagerResponse, Page
from convos.domain.entities import Conversation, Message


class ConvoManager(ABC):
    @abstractmethod
    async def delete_convo(
        self, convo_id: int, user_id: int
    ) -> ManagerResponse[None]: ...

    @abstractmethod
    async def delete_message(
        self, convo_id: int, message_id: int, user_id: int
    ) -> ManagerResponse[None]: ...

    @abstractmethod
    async def list_convos(
        self, before: datetime, count: int, index: int, user_id: int
    ) -> ManagerResponse[Page[Conversation]]: ...

    @abstractmethod
    async def get_convo(
        self, convo_id: int, user_id: int
    ) -> ManagerResponse[Conversation]: ...

    @abstractmethod
    async def list_messages(
        self, before: datetime, convo_id: int, count: int, index: int, user_id: int
    ) -> ManagerResponse[Page[Message]]: ...

    @abstractmethod
    async def get_message(
        self, convo_id: int, message_id: int, user_id: int
    ) -> ManagerResponse[Message]: ...

    @abstractmethod
    async def create_convo(
        self, participant: int, subject: Optional[str], user_id: int
    ) -> ManagerResponse[int]: ...

    @abstractmethod
    async def create_message(
        self,
        body: Optional[str],
        convo_id: int,
        parent: Optional[int],
        recipient: int,
        user_id: int,
    ) -> ManagerResponse[int]: ...

    @abstractmethod
    async def patch_convo(
        self, convo_id: int, subject: Optional[str], user_id: int
    ) -> ManagerResponse[None]: ...

    @abstractmethod
    async def patch_message(
        self,
        convo_id: int,
        message_id: int,
        body: Optional[str],
        is_read: Optional[bool],
        user_id: int,
    ) -> ManagerResponse[None]: ...
