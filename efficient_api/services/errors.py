from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_REQUEST = "invalid_request"
    INTERNAL_SERVER_ERROR = "server_error"


class MessageError(Exception):
    """Base for errors surfaced to callers as a status-coded result."""

    kind: ClassVar[ErrorKind]
    status: ClassVar[int]

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "code": self.code, "message": self.message}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageError):
            return NotImplemented
        return self.kind is other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class NotFoundError(MessageError):
    kind = ErrorKind.NOT_FOUND
    status = 404


class InvalidRequestError(MessageError):
    kind = ErrorKind.INVALID_REQUEST
    status = 422


class InternalServerError(MessageError):
    kind = ErrorKind.INTERNAL_SERVER_ERROR
    status = 500
