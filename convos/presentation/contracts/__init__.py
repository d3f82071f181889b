"""
Contract Layer - one HTTP exchange per resource operation.
"""

from convos.presentation.contracts.convo_contract import ConvoContract
from convos.presentation.contracts.http_convo_contract import HttpConvoContract
from convos.presentation.contracts.responses import bad_request, fault_response

__all__ = [
    "ConvoContract",
    "HttpConvoContract",
    "bad_request",
    "fault_response",
]
