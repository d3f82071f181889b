"""
VALUE OBJECTS - Outcome taxonomy shared by every layer
"""

from convos.domain.value_objects.result_code import ResultCode
from convos.domain.value_objects.result import Result

__all__ = [
    "ResultCode",
    "Result",
]
