import logging
from datetime import datetime
from unittest.mock import AsyncMock

from convos.application.common.interfaces import Fault, Outcome
from convos.application.managers import ConvoManager, LoggingConvoManager
from convos.domain.value_objects import Result, ResultCode

LOGGER = "convos.application.managers.logging_decorator"


def _wrapped():
    inner = AsyncMock(spec=ConvoManager)
    return inner, LoggingConvoManager(inner)


async def test_outcome_passes_through_without_logging(caplog):
    inner, manager = _wrapped()
    result = Result()
    result.fail(ResultCode.ENTITY_NOT_FOUND, "Convo not found")
    outcome = Outcome(result)
    inner.get_convo.return_value = outcome

    with caplog.at_level(logging.DEBUG, logger=LOGGER):
        response = await manager.get_convo(5, 3)

    assert response is outcome
    inner.get_convo.assert_awaited_once_with(5, 3)
    assert caplog.records == []


async def test_fault_is_logged_and_returned_unchanged(caplog):
    inner, manager = _wrapped()
    fault = Fault(operation="Patch Message", error=TimeoutError("store timed out"))
    inner.patch_message.return_value = fault

    with caplog.at_level(logging.ERROR, logger=LOGGER):
        response = await manager.patch_message(1, 2, "secret body", True, 3)

    assert response is fault
    [record] = caplog.records
    assert record.levelno == logging.ERROR
    assert "Failed to Patch Message: 2, convoId=1, isRead=True, userId=3" in record.getMessage()
    assert "store timed out" in record.getMessage()
    assert record.exc_info[1] is fault.error
    assert "secret body" not in record.getMessage()


async def test_list_fault_logs_paging_parameters(caplog):
    inner, manager = _wrapped()
    inner.list_messages.return_value = Fault(operation="List Messages", error=RuntimeError("boom"))

    with caplog.at_level(logging.ERROR, logger=LOGGER):
        await manager.list_messages(datetime(2024, 5, 1, 13, 45), 4, 10, 2, 3)

    assert (
        "list Messages: before=2024-05-01T13:45:00, convoId=4, count=10, index=2, userId=3"
        in caplog.text
    )


async def test_create_message_fault_leaves_body_out(caplog):
    inner, manager = _wrapped()
    inner.create_message.return_value = Fault(operation="Create Message", error=RuntimeError("boom"))

    with caplog.at_level(logging.ERROR, logger=LOGGER):
        await manager.create_message("private words", 4, 9, 7, 3)

    assert "Insert Message: convoId=4, parent=9, recipient=7, userId=3" in caplog.text
    assert "private words" not in caplog.text
