"""Convo managers: the business layer and its decorators."""

from convos.application.managers.convo_manager import ConvoManager
from convos.application.managers.logging_decorator import LoggingConvoManager
from convos.application.managers.store_convo_manager import StoreConvoManager

__all__ = [
    "ConvoManager",
    "LoggingConvoManager",
    "StoreConvoManager",
]
