"""
Caller identity.

The caller has already been authenticated upstream; the resolved user id
arrives as an integer in the X-Authorization header. A missing or unparsable
value makes the request UNAUTHORIZED.
"""

from typing import Optional

from starlette.requests import Request

from convos.domain.value_objects import Result, ResultCode

AUTHORIZATION_HEADER = "X-Authorization"


def get_user_id(request: Request, result: Result) -> Optional[int]:
    """Return the caller id, or None after marking the result UNAUTHORIZED."""
    try:
        return int(request.headers[AUTHORIZATION_HEADER])
    except (KeyError, ValueError):
        result.fail(ResultCode.UNAUTHORIZED, "Could not parse a valid user id")
        return None
