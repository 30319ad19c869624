from __future__ import annotations

from fastapi.responses import JSONResponse

from efficient_api.core.logging import request_id_ctx


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: list[str] | None = None,
) -> JSONResponse:
    """Render the ``{status, code, message, details, request_id}`` error shape."""
    payload = {
        "status": status_code,
        "code": error_code,
        "message": message,
        "details": details,
        "request_id": request_id_ctx.get(),
    }
    return JSONResponse(status_code=status_code, content=payload)
