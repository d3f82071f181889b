"""Request-derived inputs: caller identity and paging parameters."""

from convos.presentation.dependencies.auth import AUTHORIZATION_HEADER, get_user_id
from convos.presentation.dependencies.paging import (
    get_page_count,
    get_page_index,
    get_paging_timestamp,
)

__all__ = [
    "AUTHORIZATION_HEADER",
    "get_user_id",
    "get_page_count",
    "get_page_index",
    "get_paging_timestamp",
]
