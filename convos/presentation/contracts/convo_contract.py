"""
Convo Contract Port - one HTTP exchange per resource operation.

Implementations:
    HttpConvoContract    (presentation/contracts/http_convo_contract.py)
    CachedConvoContract  (infrastructure/cache/cached_convo_contract.py)

Each method receives the inbound request (for caller identity, query string
and cache identity) and returns the complete response.
"""

from abc import ABC, abstractmethod
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response


class ConvoContract(ABC):
    @abstractmethod
    async def delete_convo(self, convo_id: int, request: Request) -> Response: ...

    @abstractmethod
    async def delete_message(
        self, convo_id: int, message_id: int, request: Request
    ) -> Response: ...

    @abstractmethod
    async def list_convos(self, request: Request) -> Response: ...

    @abstractmethod
    async def get_convo(self, convo_id: int, request: Request) -> Response: ...

    @abstractmethod
    async def list_messages(self, convo_id: int, request: Request) -> Response: ...

    @abstractmethod
    async def get_message(
        self, convo_id: int, message_id: int, request: Request
    ) -> Response: ...

    @abstractmethod
    async def patch_convo(
        self, convo_id: int, request: Request, subject: Optional[str]
    ) -> Response: ...

    @abstractmethod
    async def patch_message(
        self,
        body: Optional[str],
        convo_id: int,
        is_read: Optional[bool],
        message_id: int,
        request: Request,
    ) -> Response: ...

    @abstractmethod
    async def create_convo(
        self, participant: int, request: Request, subject: Optional[str]
    ) -> Response: ...

    @abstractmethod
    async def create_message(
        self,
        body: Optional[str],
        convo_id: int,
        parent: Optional[int],
        recipient: int,
        request: Request,
    ) -> Response: ...
