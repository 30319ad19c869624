from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from efficient_api.domain.messages import Message
from efficient_api.services.messages import MessageService


class FakeMessageRepository:
    """Repository double whose behaviour is set per test through handlers."""

    def __init__(self) -> None:
        self.get_handler: Callable[[int], Message] | None = None
        self.create_handler: Callable[[Message], Message] | None = None
        self.get_calls: list[int] = []
        self.create_calls: list[Message] = []

    def get(self, message_id: int) -> Message:
        self.get_calls.append(message_id)
        assert self.get_handler is not None, "get() was not expected"
        return self.get_handler(message_id)

    def create(self, message: Message) -> Message:
        self.create_calls.append(message)
        assert self.create_handler is not None, "create() was not expected"
        return self.create_handler(message)

    def initialize(self, driver, username, password, host, port, database) -> None:
        pass


@pytest.fixture
def created_at() -> datetime:
    return datetime(2026, 10, 19, 12, 30, tzinfo=UTC)


@pytest.fixture
def fake_repository() -> FakeMessageRepository:
    return FakeMessageRepository()


@pytest.fixture
def message_service(fake_repository: FakeMessageRepository) -> MessageService:
    return MessageService(fake_repository)


@pytest.fixture
def client(message_service: MessageService) -> Generator[TestClient, None, None]:
    from efficient_api.api.dependencies import get_message_service
    from efficient_api.main import app

    app.dependency_overrides[get_message_service] = lambda: message_service
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
