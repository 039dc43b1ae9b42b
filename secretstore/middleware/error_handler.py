"""
Structured error responses.

Every error body carries a machine-readable code, the HTTP status, a message
and the request info. Any request payload echoed back is passed through
``redact`` first, so a field named ``secret`` only ever appears as
``(OMITTED)``.
"""
from datetime import datetime, timezone
from typing import Any

import orjson
import structlog
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..errors import CorruptEnvelope, SecretStoreError, ValidationError
from ..services.codec import redact

log = structlog.get_logger()

_NO_PAYLOAD = object()
_PAYLOAD_STATE_KEY = "request_payload"


def request_info(request: Request, payload: Any = _NO_PAYLOAD) -> dict:
    """Describe the request for an error body, with the payload redacted."""
    if payload is _NO_PAYLOAD:
        payload = getattr(request.state, _PAYLOAD_STATE_KEY, None)
    return {
        "method": request.method,
        "path": request.url.path,
        "params": dict(request.path_params),
        "payload": redact(payload),
        "time": datetime.now(timezone.utc).isoformat(),
    }


def error_body(request: Request, code: str, status_code: int, message: str, payload: Any = _NO_PAYLOAD) -> dict:
    return {
        "code": code,
        "status_code": status_code,
        "message": message,
        "correlation_id": getattr(request.state, "correlation_id", None),
        "requestInfo": request_info(request, payload),
    }


def error_response(request: Request, exc: SecretStoreError, payload: Any = _NO_PAYLOAD) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.code, exc.status_code, exc.message, payload),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Provides structured error responses for all exceptions."""

    async def dispatch(self, request: Request, call_next):
        if request.method in ("POST", "PUT", "PATCH"):
            setattr(request.state, _PAYLOAD_STATE_KEY, _parse_json(await request.body()))

        try:
            return await call_next(request)
        except SecretStoreError as exc:
            if isinstance(exc, CorruptEnvelope):
                log.error("secret.internal_fault", name=exc.name, reason=exc.reason, path=request.url.path)
            else:
                log.warning(
                    "http.secret_error",
                    status_code=exc.status_code,
                    code=exc.code,
                    path=request.url.path,
                )
            return error_response(request, exc)
        except Exception as exc:
            log.error(
                "unhandled.exception",
                error=str(exc),
                error_type=exc.__class__.__name__,
                path=request.url.path,
                exc_info=True
            )
            return JSONResponse(
                status_code=500,
                content=error_body(request, "InternalServerError", 500, "An unexpected error occurred"),
            )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI request validation failures as a 400 error body."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    log.warning("http.validation_error", path=request.url.path, error_count=len(errors))
    message = "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in errors)
    error = ValidationError(message or "Invalid request")
    # Non-JSON content types leave exc.body as raw bytes
    payload = exc.body if isinstance(exc.body, (dict, list)) else _NO_PAYLOAD
    body = error_body(request, error.code, error.status_code, error.message, payload=payload)
    body["errors"] = errors
    return JSONResponse(status_code=error.status_code, content=body)


def _parse_json(body: bytes) -> Any:
    if not body:
        return None
    try:
        return orjson.loads(body)
    except orjson.JSONDecodeError:
        return None
