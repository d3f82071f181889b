"""
Store Port - Interface for the persistence engine.

The store executes a named operation with keyed parameters and reports an
outcome code plus a message. Query operations additionally return row tables,
ordered as [primary rows, [{"total": n}], [{"max_created": ts}]].

Implementations:
- convos/infrastructure/persistence/in_memory_store.py
- convos/infrastructure/persistence/postgres_store.py

Business failures are reported through the result code. Raising is reserved
for environmental faults (connection lost, timeouts, programming errors).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from convos.domain.value_objects.result_code import ResultCode

Row = dict[str, Any]
Table = list[Row]


@dataclass(frozen=True)
class StoreResult:
    result_code: ResultCode
    message: str = ""
    tables: list[Table] = field(default_factory=list)


class Store(ABC):
    @abstractmethod
    async def execute(self, operation: str, parameters: dict[str, Any]) -> StoreResult:
        """Run an operation that returns no rows."""
        ...

    @abstractmethod
    async def execute_with_results(
        self, operation: str, parameters: dict[str, Any]
    ) -> StoreResult:
        """Run an operation and return its row tables."""
        ...

    async def close(self) -> None:
        """Release any held connections."""
        return None
