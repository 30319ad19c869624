from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(kw_only=True)
class Message:
    id: int = 0
    title: str
    body: str
    created_at: datetime | None = None


class MessageRepository(Protocol):
    """Storage capability the message service depends on.

    Implementations raise ``MessageError`` subclasses on failure: ``NotFoundError``
    for a missing id and ``InternalServerError`` for storage problems.
    """

    def get(self, message_id: int) -> Message: ...

    def create(self, message: Message) -> Message: ...

    def initialize(
        self,
        driver: str,
        username: str | None,
        password: str | None,
        host: str | None,
        port: int | None,
        database: str | None,
    ) -> None: ...
