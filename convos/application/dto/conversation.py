"""Conversation DTOs for API request/response."""

from typing import Optional

from convos.application.dto.base import RequestBody, ResponseBody, Timestamp


class ConvoPostRequest(RequestBody):
    """{"Participant": 7, "Subject": "Hi"} - Subject must be present but may be null."""

    participant: int
    subject: Optional[str]


class ConvoPatchRequest(RequestBody):
    subject: Optional[str]


class ConversationDTO(ResponseBody):
    id: int
    creator: int
    participant: int
    subject: Optional[str] = None
    date_created: Timestamp
    date_updated: Timestamp
    date_of_last_message: Optional[Timestamp] = None
    num_messages: int = 0
