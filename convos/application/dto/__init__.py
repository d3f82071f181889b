"""
DTOs - Data Transfer Objects

DTOs for transferring data between layers:
- conversation.py → ConvoPostRequest, ConvoPatchRequest, ConversationDTO
- message.py      → MessagePostRequest, MessagePatchRequest, MessageDTO

Note: These are different from domain entities.
DTOs are for API input/output, entities are for business logic.
Field names are PascalCase on the wire (Participant, IsRead, DateCreated).
"""

from convos.application.dto.conversation import (
    ConvoPatchRequest,
    ConvoPostRequest,
    ConversationDTO,
)
from convos.application.dto.message import (
    MessageDTO,
    MessagePatchRequest,
    MessagePostRequest,
)

__all__ = [
    "ConvoPatchRequest",
    "ConvoPostRequest",
    "ConversationDTO",
    "MessageDTO",
    "MessagePatchRequest",
    "MessagePostRequest",
]
