"""
Response construction and the custom headers every response carries.

Always:        X-Result-Code, X-Message
Reads:         X-Last-Modified, Cache-Control
Lists:         X-Total-Count, X-Response-Count, X-URI-Next-Page (when more pages)
Creation:      X-URI-Reference
"""

from datetime import datetime
from typing import Any, Optional

from starlette.responses import JSONResponse, Response

from convos.domain.value_objects import Result, ResultCode
from convos.presentation.contracts.status_map import get_http_status_code
from convos.utils.timestamps import format_timestamp

LAST_MODIFIED_HEADER = "X-Last-Modified"
LOCATION_HEADER = "X-URI-Reference"
MESSAGE_HEADER = "X-Message"
NEXT_PAGE_HEADER = "X-URI-Next-Page"
TOTAL_COUNT_HEADER = "X-Total-Count"
RELATIVE_COUNT_HEADER = "X-Response-Count"
RESULT_CODE_HEADER = "X-Result-Code"


def create_response(result: Result, payload: Optional[Any] = None) -> Response:
    status_code = get_http_status_code(result.result_code)
    if payload is not None:
        response = JSONResponse(payload, status_code=status_code)
    else:
        response = Response(status_code=status_code)
    add_result_code_header(response, result.result_code)
    add_message_header(response, str(result))
    return response


def bad_request(message: str) -> Response:
    """400 for a request rejected before it reaches the contract (bad body or path)."""
    result = Result()
    result.fail(ResultCode.INVALID_INPUT_DATA, message)
    return create_response(result)


def fault_response() -> Response:
    """500 with no entity body."""
    result = Result()
    result.fail(ResultCode.UNKNOWN, "An unexpected error occurred")
    return create_response(result)


def add_last_modified_header(response: Response, last_modified: datetime) -> None:
    response.headers[LAST_MODIFIED_HEADER] = format_timestamp(last_modified)


def add_location_header(response: Response, location: str) -> None:
    response.headers[LOCATION_HEADER] = location


def add_message_header(response: Response, message: str) -> None:
    response.headers[MESSAGE_HEADER] = message


def add_next_page_header(response: Response, next_page_uri: str) -> None:
    response.headers[NEXT_PAGE_HEADER] = next_page_uri


def add_relative_count_header(response: Response, relative_count: int) -> None:
    response.headers[RELATIVE_COUNT_HEADER] = str(relative_count)


def add_result_code_header(response: Response, result_code: ResultCode) -> None:
    response.headers[RESULT_CODE_HEADER] = str(int(result_code))


def add_total_count_header(response: Response, total: int) -> None:
    response.headers[TOTAL_COUNT_HEADER] = str(total)


def add_cache_control(response: Response, max_age: int) -> None:
    response.headers["Cache-Control"] = f"private, must-revalidate, max-age={max_age}"
