"""
ENTITIES - Business objects with identity

Pure Python dataclasses (no ORM, no Pydantic).
"""

from convos.domain.entities.conversation import Conversation
from convos.domain.entities.message import Message

__all__ = [
    "Conversation",
    "Message",
]
