from __future__ import annotations

import logging

from ddtrace.trace import tracer

from efficient_api.domain.messages import Message, MessageRepository
from efficient_api.services.validators import validate_message

logger = logging.getLogger(__name__)


class MessageService:
    """Validated access to messages stored behind a ``MessageRepository``.

    The repository is bound once at construction. Errors raised by the
    repository are propagated as-is.
    """

    def __init__(self, repository: MessageRepository) -> None:
        self._repository = repository

    def get_message(self, message_id: int) -> Message:
        with tracer.trace("messages.get", resource="GET /messages/{message_id}") as span:
            span.set_tag("message.id", message_id)
            return self._repository.get(message_id)

    def create_message(self, message: Message) -> Message:
        with tracer.trace("messages.create", resource="POST /messages") as span:
            span.set_metric("message.title_length", len(message.title or ""))
            span.set_metric("message.body_length", len(message.body or ""))

            validate_message(message)

            created = self._repository.create(message)
            logger.info("message created", extra={"message_id": created.id})
            return created
