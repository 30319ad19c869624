from __future__ import annotations

from fastapi import APIRouter, Depends

from efficient_api.api.dependencies import get_message_service
from efficient_api.api.schemas import CreateMessageRequest, ErrorResponse, MessageResponse
from efficient_api.observability.metrics import (
    record_message_created,
    record_message_failed,
    record_message_invalid,
    record_message_not_found,
)
from efficient_api.services.errors import (
    InternalServerError,
    InvalidRequestError,
    NotFoundError,
)
from efficient_api.services.messages import MessageService

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post(
    "",
    response_model=MessageResponse,
    status_code=201,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_message(
    payload: CreateMessageRequest,
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    try:
        message = service.create_message(payload.to_domain())
    except InvalidRequestError:
        record_message_invalid()
        raise
    except InternalServerError:
        record_message_failed()
        raise
    record_message_created()
    return MessageResponse.from_domain(message)


@router.get(
    "/{message_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def read_message(
    message_id: int,
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    try:
        message = service.get_message(message_id)
    except NotFoundError:
        record_message_not_found()
        raise
    except InternalServerError:
        record_message_failed()
        raise
    return MessageResponse.from_domain(message)
