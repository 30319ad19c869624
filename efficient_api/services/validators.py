from __future__ import annotations

from efficient_api.domain.messages import Message
from efficient_api.services.errors import InvalidRequestError


def validate_message(message: Message) -> None:
    # Title is checked first; only the first failure is reported.
    if not message.title:
        raise InvalidRequestError("Please enter a valid title")
    if not message.body:
        raise InvalidRequestError("Please enter a valid body")
