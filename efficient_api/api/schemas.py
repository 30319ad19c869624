from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from efficient_api.domain.messages import Message


class CreateMessageRequest(BaseModel):
    # Emptiness is checked by the service so it reports the domain error message.
    title: str
    body: str
    created_at: datetime | None = None

    def to_domain(self) -> Message:
        return Message(title=self.title, body=self.body, created_at=self.created_at)


class MessageResponse(BaseModel):
    id: int
    title: str
    body: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, message: Message) -> MessageResponse:
        return cls(
            id=message.id,
            title=message.title,
            body=message.body,
            created_at=message.created_at,
        )


class ErrorResponse(BaseModel):
    status: int
    code: str
    message: str
    details: list[str] | None = None
    request_id: str | None = None
