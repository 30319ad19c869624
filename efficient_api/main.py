from __future__ import annotations

import logging
from typing import Any

import ddtrace.auto  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from efficient_api.api.messages import router as messages_router
from efficient_api.api.responses import error_response
from efficient_api.core.config import Settings, get_settings
from efficient_api.core.logging import setup_logging
from efficient_api.core.middleware import RequestContextMiddleware
from efficient_api.db.models import MessageRecord
from efficient_api.db.repository import SqlMessageRepository
from efficient_api.observability.metrics import metrics_response, stats
from efficient_api.observability.tracing import setup_tracing
from efficient_api.services.errors import ErrorKind, MessageError
from efficient_api.services.messages import MessageService

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> SqlMessageRepository:
    if settings.database_url:
        return SqlMessageRepository.from_url(settings.database_url)
    repository = SqlMessageRepository()
    repository.initialize(
        settings.db_driver,
        settings.db_user,
        settings.db_password,
        settings.db_host,
        settings.db_port,
        settings.db_name,
    )
    return repository


settings = get_settings()
setup_logging(settings.log_level)
setup_tracing()

repository = build_repository(settings)

app = FastAPI(title="Efficient Message API", version=settings.dd_version)
app.state.message_service = MessageService(repository)

app.add_middleware(RequestContextMiddleware)

app.include_router(messages_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/ready")
def readiness() -> JSONResponse:
    try:
        with repository.engine.connect() as connection:
            connection.execute(select(1))
        return JSONResponse(content={"status": "ready"})
    except SQLAlchemyError as exc:
        logger.error("readiness failed", extra={"error": str(exc)})
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.get("/metrics")
def metrics() -> PlainTextResponse:
    payload, content_type = metrics_response()
    return PlainTextResponse(content=payload.decode("utf-8"), media_type=content_type)


@app.get("/stats")
def stats_endpoint() -> dict[str, Any]:
    counters = stats.snapshot()

    messages = {
        "created": counters.get("messages.created", 0),
        "invalid": counters.get("messages.invalid", 0),
        "not_found": counters.get("messages.not_found", 0),
        "failed": counters.get("messages.failed", 0),
    }
    requests_by_method: dict[str, int] = {}
    requests_by_path: dict[str, int] = {}
    responses_by_status: dict[str, int] = {}
    for k, v in counters.items():
        if k.startswith("requests.by_method."):
            requests_by_method[k.removeprefix("requests.by_method.")] = v
        elif k.startswith("requests.by_path."):
            requests_by_path[k.removeprefix("requests.by_path.")] = v
        elif k.startswith("responses.by_status."):
            responses_by_status[k.removeprefix("responses.by_status.")] = v

    # Best-effort: the counters are still returned when the database is down.
    db_stats: dict[str, Any]
    try:
        with repository.engine.connect() as connection:
            stored = connection.execute(
                select(func.count()).select_from(MessageRecord)
            ).scalar_one()
        db_stats = {"messages_stored": int(stored)}
    except SQLAlchemyError as exc:
        logger.warning("stats db query failed", extra={"error": str(exc)})
        db_stats = {"error": "db_unavailable"}

    return {
        "messages": messages,
        "requests": {
            "total": counters.get("requests.total", 0),
            "by_method": requests_by_method,
            "by_path": requests_by_path,
        },
        "responses": {"by_status": responses_by_status},
        "db": db_stats,
    }


@app.exception_handler(MessageError)
async def message_error_handler(request: Request, exc: MessageError) -> JSONResponse:
    return error_response(exc.status, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [err.get("msg", "Invalid request") for err in exc.errors()]
    return error_response(
        422, ErrorKind.INVALID_REQUEST.value, "Request validation failed", details
    )
