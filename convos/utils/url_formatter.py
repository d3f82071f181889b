"""
URL building for resource links returned in response headers.

    convo_url(base, 12)          -> {base}/api/Convo/12
    message_url(base, 12, 40)    -> {base}/api/Convo/12/Message/40
    paging_query(1, 10, before)  -> ?index=1&count=10&before=2024-05-01T13%3A45%3A00
"""

from datetime import datetime
from urllib.parse import urlencode

from convos.utils.timestamps import format_timestamp

CONVO_RESOURCE_PATH = "{base}/api/Convo/{rest}"
MESSAGE_RESOURCE_PATH = "{base}/api/Convo/{convo_id}/Message/{rest}"


def convo_url(base_uri: str, rest: object = "") -> str:
    return CONVO_RESOURCE_PATH.format(base=base_uri, rest=rest)


def message_url(base_uri: str, convo_id: int, rest: object = "") -> str:
    return MESSAGE_RESOURCE_PATH.format(base=base_uri, convo_id=convo_id, rest=rest)


def paging_query(index: int, count: int, before: datetime) -> str:
    return "?" + urlencode(
        {"index": index, "count": count, "before": format_timestamp(before)}
    )
