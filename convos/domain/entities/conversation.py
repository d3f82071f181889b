"""
Conversation Entity - A two-party messaging thread.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Conversation:
    id: int
    creator: int
    participant: int
    date_created: datetime
    date_updated: datetime
    num_messages: int = 0
    subject: Optional[str] = None
    date_of_last_message: Optional[datetime] = None
