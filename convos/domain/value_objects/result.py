"""
Result - Outcome code plus the diagnostic messages collected along the way.
"""

from dataclasses import dataclass, field

from convos.domain.value_objects.result_code import ResultCode


@dataclass
class Result:
    result_code: ResultCode = ResultCode.OK
    messages: list[str] = field(default_factory=list)

    def add_message(self, message: str | None) -> None:
        """Append a diagnostic; empty text is ignored."""
        if message:
            self.messages.append(message)

    def fail(self, result_code: ResultCode, message: str) -> None:
        self.result_code = result_code
        self.add_message(message)

    def __str__(self) -> str:
        return "; ".join(self.messages)
