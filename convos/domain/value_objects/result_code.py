"""
ResultCode - Internal outcome of an operation, independent of HTTP status.
"""

from enum import IntEnum


class ResultCode(IntEnum):
    OK = 0
    INVALID_INPUT_DATA = 1
    ENTITY_NOT_FOUND = 2
    NO_RESULTS = 3
    UNAUTHORIZED = 4
    CREATED = 5
    DELETED = 6
    UNKNOWN = 7

    @classmethod
    def parse(cls, value) -> "ResultCode":
        """Read a raw status from the store; anything unrecognised is UNKNOWN."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNKNOWN
