"""
Typed rows returned by the store, and their mapping to domain entities.

Null-capable columns (subject, date_of_last_message, parent, body) map to
None on the entity; every other column is required.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict

from convos.domain.entities import Conversation, Message
from convos.utils.timestamps import to_naive_utc

UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class StoreRow(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ConvoRow(StoreRow):
    id: int
    creator: int
    participant: int
    subject: Optional[str] = None
    date_created: UtcDatetime
    date_updated: UtcDatetime
    date_of_last_message: Optional[UtcDatetime] = None
    num_messages: int = 0

    def to_entity(self) -> Conversation:
        return Conversation(
            id=self.id,
            creator=self.creator,
            participant=self.participant,
            subject=self.subject,
            date_created=self.date_created,
            date_updated=self.date_updated,
            date_of_last_message=self.date_of_last_message,
            num_messages=self.num_messages,
        )


class MessageRow(StoreRow):
    id: int
    convo_id: int
    sender: int
    recipient: int
    parent: Optional[int] = None
    body: Optional[str] = None
    is_read: bool = False
    date_created: UtcDatetime
    date_updated: UtcDatetime
    # 0 = requested message, >0 = ancestors fetched alongside it
    level: int = 0

    def to_entity(self) -> Message:
        return Message(
            id=self.id,
            convo_id=self.convo_id,
            sender=self.sender,
            recipient=self.recipient,
            parent=self.parent,
            body=self.body,
            is_read=self.is_read,
            date_created=self.date_created,
            date_updated=self.date_updated,
        )


class TotalRow(StoreRow):
    total: int = 0


class MaxCreatedRow(StoreRow):
    max_created: Optional[UtcDatetime] = None


class IdentityRow(StoreRow):
    id: int
