"""
Paging parameters read from the query string: index, count, before.

Keys are matched case-insensitively.
- index:  default from settings; unreadable values silently fall back.
- count:  default from settings; unreadable values fall back; above the
          configured maximum is INVALID_INPUT_DATA.
- before: ISO-8601 cursor, default is the largest representable timestamp;
          unreadable values are INVALID_INPUT_DATA.
"""

from datetime import datetime
from typing import Optional

from starlette.requests import Request

from convos.config.settings import ContractSettings
from convos.domain.value_objects import Result, ResultCode
from convos.utils.timestamps import parse_timestamp


def _query_params(request: Request) -> dict[str, str]:
    return {key.lower(): value for key, value in request.query_params.items()}


def _parse_int(text: Optional[str]) -> Optional[int]:
    try:
        return int(text)
    except (TypeError, ValueError):
        return None


def get_page_index(request: Request, settings: ContractSettings) -> int:
    index = _parse_int(_query_params(request).get("index"))
    return settings.default_page_index if index is None else index


def get_page_count(request: Request, settings: ContractSettings, result: Result) -> Optional[int]:
    count = _parse_int(_query_params(request).get("count"))
    if count is None:
        return settings.default_page_size
    if count > settings.max_page_count:
        result.fail(
            ResultCode.INVALID_INPUT_DATA,
            f"Maximum page size is {settings.max_page_count}",
        )
        return None
    return count


def get_paging_timestamp(request: Request, result: Result) -> Optional[datetime]:
    params = _query_params(request)
    if "before" not in params:
        return datetime.max
    before = parse_timestamp(params["before"])
    if before is None:
        result.fail(
            ResultCode.INVALID_INPUT_DATA,
            "Could not read a valid date for the 'before' querystring parameter",
        )
    return before
