from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from efficient_api.db.base import Base
from efficient_api.db.repository import SqlMessageRepository
from efficient_api.domain.messages import Message
from efficient_api.services.errors import InternalServerError, NotFoundError


@pytest.fixture
def sqlite_repository(tmp_path: Path) -> Generator[SqlMessageRepository, None, None]:
    repository = SqlMessageRepository.from_url(f"sqlite:///{tmp_path / 'messages.db'}")
    Base.metadata.create_all(repository.engine)
    yield repository
    repository.engine.dispose()


def test_create_assigns_id_and_get_returns_it(sqlite_repository, created_at) -> None:
    created = sqlite_repository.create(
        Message(title="the title", body="the body", created_at=created_at)
    )

    assert created.id == 1
    assert created.title == "the title"
    assert created.body == "the body"
    # SQLite drops tzinfo on the way back.
    assert created.created_at.replace(tzinfo=None) == created_at.replace(tzinfo=None)

    fetched = sqlite_repository.get(created.id)
    assert fetched == created


def test_create_assigns_created_at_when_missing(sqlite_repository) -> None:
    created = sqlite_repository.create(Message(title="no timestamp", body="the body"))

    assert created.created_at is not None


def test_get_missing_id_raises_not_found(sqlite_repository) -> None:
    with pytest.raises(NotFoundError) as exc:
        sqlite_repository.get(42)

    assert exc.value.status == 404
    assert exc.value.message == "message with id 42 not found"


def test_duplicate_title_raises_server_error(sqlite_repository) -> None:
    sqlite_repository.create(Message(title="the title", body="first"))

    with pytest.raises(InternalServerError) as exc:
        sqlite_repository.create(Message(title="the title", body="second"))

    assert exc.value.code == "server_error"
    assert exc.value.message == "title already taken"

    # The failed insert leaves the stored row untouched.
    assert sqlite_repository.get(1).body == "first"


def test_initialize_binds_engine_from_connection_parameters(tmp_path: Path) -> None:
    repository = SqlMessageRepository()
    repository.initialize("sqlite", None, None, None, None, str(tmp_path / "init.db"))
    Base.metadata.create_all(repository.engine)

    created = repository.create(Message(title="the title", body="the body"))

    assert repository.get(created.id).title == "the title"
    repository.engine.dispose()


def test_uninitialized_repository_raises_server_error() -> None:
    repository = SqlMessageRepository()

    with pytest.raises(InternalServerError) as exc:
        repository.get(1)

    assert exc.value.message == "message repository is not initialized"
