from __future__ import annotations

from collections.abc import Generator

import pytest
from alembic import command
from alembic.config import Config
from docker.errors import DockerException
from fastapi.testclient import TestClient
from sqlalchemy import text
from testcontainers.postgres import PostgresContainer

from efficient_api.db.repository import SqlMessageRepository
from efficient_api.services.messages import MessageService


@pytest.fixture(scope="session")
def postgres_url() -> Generator[str, None, None]:
    try:
        container = PostgresContainer("postgres:15")
        container.start()
    except DockerException as exc:
        pytest.skip(f"docker unavailable: {exc}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest.fixture(scope="session")
def pg_repository(postgres_url: str) -> Generator[SqlMessageRepository, None, None]:
    cfg = Config("alembic.ini")
    cfg.set_main_option("sqlalchemy.url", postgres_url)
    command.upgrade(cfg, "head")

    repository = SqlMessageRepository.from_url(postgres_url)
    yield repository
    repository.engine.dispose()


@pytest.fixture
def pg_client(pg_repository: SqlMessageRepository) -> Generator[TestClient, None, None]:
    from efficient_api.api.dependencies import get_message_service
    from efficient_api.main import app

    with pg_repository.engine.begin() as connection:
        connection.execute(text("TRUNCATE messages RESTART IDENTITY"))

    app.dependency_overrides[get_message_service] = lambda: MessageService(pg_repository)
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
