"""Outcome code → HTTP status."""

from starlette import status

from convos.domain.value_objects import ResultCode

HTTP_STATUS_CODE_MAP: dict[ResultCode, int] = {
    ResultCode.OK: status.HTTP_200_OK,
    ResultCode.INVALID_INPUT_DATA: status.HTTP_400_BAD_REQUEST,
    ResultCode.ENTITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ResultCode.NO_RESULTS: status.HTTP_404_NOT_FOUND,
    ResultCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ResultCode.CREATED: status.HTTP_201_CREATED,
    ResultCode.DELETED: status.HTTP_204_NO_CONTENT,
    ResultCode.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_http_status_code(result_code) -> int:
    return HTTP_STATUS_CODE_MAP.get(result_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
