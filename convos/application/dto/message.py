"""Message DTOs for API request/response."""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator

from convos.application.dto.base import RequestBody, ResponseBody, Timestamp


class MessagePostRequest(RequestBody):
    """{"Body": "...", "Recipient": 7} - Body must be present but may be null."""

    body: Optional[str]
    recipient: int


class MessagePatchRequest(RequestBody):
    """At least one of Body / IsRead."""

    body: Optional[str] = None
    is_read: Optional[bool] = None

    @model_validator(mode="after")
    def _require_a_field(self) -> MessagePatchRequest:
        if not self.model_fields_set:
            raise ValueError("Body or IsRead must be supplied")
        return self


class MessageDTO(ResponseBody):
    """DTO for message data returned to clients, with its reply thread."""

    id: int
    convo_id: int
    sender: int
    recipient: int
    parent: Optional[int] = None
    body: Optional[str] = None
    is_read: bool = False
    date_created: Timestamp
    date_updated: Timestamp
    thread: Optional[list[MessageDTO]] = None
