from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from efficient_api.api.responses import error_response
from efficient_api.core.logging import request_id_ctx
from efficient_api.observability.metrics import record_request
from efficient_api.services.errors import ErrorKind

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a request id for the whole request, including its access log line.

    Exceptions that escaped the route's handlers become a 500 error payload here,
    so they still carry the request id and are counted like any other response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_ctx.set(req_id)
        try:
            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("unhandled error", extra={"path": request.url.path})
                response = error_response(
                    500, ErrorKind.INTERNAL_SERVER_ERROR.value, "Unexpected error"
                )
            duration_ms = (time.perf_counter() - start) * 1000.0
            response.headers[REQUEST_ID_HEADER] = req_id
            self._observe(request, response, duration_ms)
            return response
        finally:
            request_id_ctx.reset(token)

    @staticmethod
    def _observe(request: Request, response: Response, duration_ms: float) -> None:
        # Metrics use the route template ("/messages/{message_id}"), logs the real path.
        route = request.scope.get("route")
        path_template = getattr(route, "path", None) or request.url.path
        record_request(request.method, path_template, response.status_code, duration_ms)
        logger.info(
            "request",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "latency_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else None,
            },
        )
