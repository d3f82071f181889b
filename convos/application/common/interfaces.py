"""
Outcome types returned across the manager boundary.

Every manager operation answers with exactly one of:

    Outcome[T]  - the operation ran; `result` carries the outcome code and
                  messages, `value` the payload (None when there is none).
    Fault       - the store raised; the exception is carried, not re-raised.

Usage:
    response = await manager.get_convo(convo_id, user_id)
    if isinstance(response, Fault):
        ...
    elif response.ok:
        conversation = response.value
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Optional, TypeVar, Union

from convos.domain.value_objects import Result, ResultCode

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    result: Result
    value: Optional[T] = None
    success_codes: frozenset[ResultCode] = frozenset({ResultCode.OK})

    @property
    def ok(self) -> bool:
        return self.result.result_code in self.success_codes


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a list operation."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    # Newest "created" strictly before the cursor, across all pages
    max_created: datetime = datetime.min


@dataclass(frozen=True)
class Fault:
    operation: str
    error: Exception


ManagerResponse = Union[Outcome[T], Fault]
