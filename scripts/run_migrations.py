from __future__ import annotations

import logging
import os
import sys
import time

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from efficient_api.core.config import get_settings
from efficient_api.core.logging import setup_logging

logger = logging.getLogger("efficient_api.migrations")


def wait_for_db(database_url: str, timeout_seconds: int) -> None:
    start = time.time()
    delay = 1.0
    engine = create_engine(database_url, pool_pre_ping=True)
    try:
        while True:
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                return
            except SQLAlchemyError as exc:
                elapsed = time.time() - start
                if elapsed > timeout_seconds:
                    raise RuntimeError(f"Database not ready after {timeout_seconds}s: {exc}")
                logger.info("database not ready yet", extra={"retry_in_s": round(delay, 1)})
                time.sleep(delay)
                delay = min(delay * 1.5, 10.0)
    finally:
        engine.dispose()


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level)
    database_url = settings.sqlalchemy_url()

    timeout_seconds = int(os.getenv("MIGRATION_WAIT_TIMEOUT", "120"))

    logger.info("waiting for database")
    try:
        wait_for_db(database_url, timeout_seconds)
    except RuntimeError as exc:
        logger.error(str(exc))
        return 1

    logger.info("running alembic migrations")
    cfg = Config("alembic.ini")
    cfg.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(cfg, "head")
    logger.info("migrations complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
