"""
Conversations API Router - FastAPI endpoints for conversations and messages.

Guidelines:
- Receives the ConvoContract via Dependency Injection (Dishka)
- Thin layer: validates JSON bodies against exact field sets, then delegates
- The contract builds the complete response, headers included

Flow:
  HTTP Request → Router (body check) → CachedConvoContract → HttpConvoContract
                                                                   ↓
  HTTP Response ←──────────────────────────────────────── LoggingConvoManager
"""

from logging import getLogger
from typing import Any, Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Body, Request
from pydantic import ValidationError
from starlette.responses import Response

from convos.application.dto import (
    ConvoPatchRequest,
    ConvoPostRequest,
    MessagePatchRequest,
    MessagePostRequest,
)
from convos.presentation.contracts import ConvoContract, bad_request

logger = getLogger(__name__)

INVALID_CONVO_POST = "Invalid Convo Post request"
INVALID_CONVO_PATCH = "Invalid Convo Patch request"
INVALID_MESSAGE_POST = "Invalid Message Post request"
INVALID_MESSAGE_PATCH = "Invalid Message Patch request"

JsonBody = Optional[dict[str, Any]]


def _parse(model, payload: JsonBody, message: str):
    """Validate a body; returns (model, None) or (None, 400 response)."""
    try:
        return model.model_validate(payload), None
    except ValidationError as e:
        logger.info(f"{message}: {e.error_count()} error(s)")
        return None, bad_request(message)


# ==================== ROUTER ====================

router = APIRouter(prefix="/api/Convo", tags=["conversations"])


# ==================== CONVERSATIONS ====================


@router.get("")
@inject
async def list_convos(request: Request, contract: FromDishka[ConvoContract]) -> Response:
    return await contract.list_convos(request)


@router.post("")
@inject
async def create_convo(
    request: Request,
    contract: FromDishka[ConvoContract],
    payload: JsonBody = Body(None),
) -> Response:
    """Create a conversation. Body: {"Participant": 7, "Subject": "Hi"}"""
    body, error = _parse(ConvoPostRequest, payload, INVALID_CONVO_POST)
    if error is not None:
        return error
    return await contract.create_convo(body.participant, request, body.subject)


@router.get("/{convo_id}")
@inject
async def get_convo(convo_id: int, request: Request, contract: FromDishka[ConvoContract]) -> Response:
    return await contract.get_convo(convo_id, request)


@router.patch("/{convo_id}")
@inject
async def patch_convo(
    convo_id: int,
    request: Request,
    contract: FromDishka[ConvoContract],
    payload: JsonBody = Body(None),
) -> Response:
    """Change the subject. Body: {"Subject": "..."}"""
    body, error = _parse(ConvoPatchRequest, payload, INVALID_CONVO_PATCH)
    if error is not None:
        return error
    return await contract.patch_convo(convo_id, request, body.subject)


@router.delete("/{convo_id}")
@inject
async def delete_convo(convo_id: int, request: Request, contract: FromDishka[ConvoContract]) -> Response:
    return await contract.delete_convo(convo_id, request)


# ==================== MESSAGES ====================


@router.get("/{convo_id}/Message")
@inject
async def list_messages(convo_id: int, request: Request, contract: FromDishka[ConvoContract]) -> Response:
    return await contract.list_messages(convo_id, request)


@router.post("/{convo_id}/Message")
@inject
async def create_message(
    convo_id: int,
    request: Request,
    contract: FromDishka[ConvoContract],
    payload: JsonBody = Body(None),
) -> Response:
    """Post a root message. Body: {"Body": "...", "Recipient": 7}"""
    body, error = _parse(MessagePostRequest, payload, INVALID_MESSAGE_POST)
    if error is not None:
        return error
    return await contract.create_message(body.body, convo_id, None, body.recipient, request)


@router.get("/{convo_id}/Message/{message_id}")
@inject
async def get_message(
    convo_id: int, message_id: int, request: Request, contract: FromDishka[ConvoContract]
) -> Response:
    return await contract.get_message(convo_id, message_id, request)


@router.post("/{convo_id}/Message/{message_id}")
@inject
async def reply_to_message(
    convo_id: int,
    message_id: int,
    request: Request,
    contract: FromDishka[ConvoContract],
    payload: JsonBody = Body(None),
) -> Response:
    """Reply to message_id. Same body as posting a root message."""
    body, error = _parse(MessagePostRequest, payload, INVALID_MESSAGE_POST)
    if error is not None:
        return error
    return await contract.create_message(body.body, convo_id, message_id, body.recipient, request)


@router.patch("/{convo_id}/Message/{message_id}")
@inject
async def patch_message(
    convo_id: int,
    message_id: int,
    request: Request,
    contract: FromDishka[ConvoContract],
    payload: JsonBody = Body(None),
) -> Response:
    """Edit the body and/or read flag. Body: {"Body": "...", "IsRead": true}"""
    body, error = _parse(MessagePatchRequest, payload, INVALID_MESSAGE_PATCH)
    if error is not None:
        return error
    return await contract.patch_message(body.body, convo_id, body.is_read, message_id, request)


@router.delete("/{convo_id}/Message/{message_id}")
@inject
async def delete_message(
    convo_id: int, message_id: int, request: Request, contract: FromDishka[ConvoContract]
) -> Response:
    return await contract.delete_message(convo_id, message_id, request)
