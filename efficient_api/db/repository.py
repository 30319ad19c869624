from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from efficient_api.db.models import MessageRecord
from efficient_api.domain.messages import Message
from efficient_api.services.errors import InternalServerError, NotFoundError

logger = logging.getLogger(__name__)


class SqlMessageRepository:
    """``MessageRepository`` backed by the ``messages`` table.

    Each call opens its own short-lived session, so one instance can be shared
    across requests once ``initialize`` (or ``from_url``) has bound an engine.
    """

    def __init__(self) -> None:
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @classmethod
    def from_url(cls, url: str | URL) -> SqlMessageRepository:
        repository = cls()
        repository._bind(make_url(url))
        return repository

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise InternalServerError("message repository is not initialized")
        return self._engine

    def initialize(
        self,
        driver: str,
        username: str | None,
        password: str | None,
        host: str | None,
        port: int | None,
        database: str | None,
    ) -> None:
        url = URL.create(
            driver,
            username=username,
            password=password,
            host=host,
            port=port,
            database=database,
        )
        self._bind(url)

    def _bind(self, url: URL) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = create_engine(url, pool_pre_ping=True)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        logger.info(
            "message repository initialized",
            extra={"db_driver": url.drivername, "db_host": url.host, "db_name": url.database},
        )

    def _session(self) -> Session:
        if self._session_factory is None:
            raise InternalServerError("message repository is not initialized")
        return self._session_factory()

    def get(self, message_id: int) -> Message:
        with self._session() as db:
            try:
                record = db.get(MessageRecord, message_id)
            except SQLAlchemyError as exc:
                logger.exception("message lookup failed", extra={"message_id": message_id})
                raise InternalServerError("error when trying to get message") from exc
            if record is None:
                raise NotFoundError(f"message with id {message_id} not found")
            return record.to_domain()

    def create(self, message: Message) -> Message:
        record = MessageRecord(
            title=message.title,
            body=message.body,
            created_at=message.created_at or datetime.now(UTC),
        )
        with self._session() as db:
            db.add(record)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                logger.warning("duplicate message title", extra={"error": str(exc.orig)})
                raise InternalServerError("title already taken") from exc
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("message insert failed")
                raise InternalServerError("error when trying to save message") from exc
            db.refresh(record)
            return record.to_domain()
