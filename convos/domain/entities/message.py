"""
Message Entity - A single message in a conversation, optionally a reply.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Message:
    id: int
    convo_id: int
    sender: int
    recipient: int
    date_created: datetime
    date_updated: datetime
    is_read: bool = False
    parent: Optional[int] = None
    body: Optional[str] = None
    # Immediate parent only; see ConvoManager thread reconstruction
    thread: Optional[list[Message]] = None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def attach_parent(self, parent: Message) -> None:
        if self.thread is None:
            self.thread = []
        self.thread.append(parent)
