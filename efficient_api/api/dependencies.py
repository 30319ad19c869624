from __future__ import annotations

from fastapi import Request

from efficient_api.services.messages import MessageService


def get_message_service(request: Request) -> MessageService:
    return request.app.state.message_service
