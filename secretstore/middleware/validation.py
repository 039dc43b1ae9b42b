"""Validation middleware for request payload size and JSON structure."""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import structlog
import orjson

from ..errors import ValidationError
from .error_handler import error_response

log = structlog.get_logger()


class PayloadTooLarge(ValidationError):
    status_code = 413
    code = "PayloadTooLarge"


class ValidationMiddleware(BaseHTTPMiddleware):
    """Rejects oversized or non-JSON bodies before they reach a route."""

    def __init__(self, app, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next):
        if request.method not in ("POST", "PUT", "PATCH"):
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return self._too_large(request, int(content_length))

        body = await request.body()
        if len(body) > self.max_size:
            return self._too_large(request, len(body))

        if body and request.headers.get("content-type", "").startswith("application/json"):
            try:
                orjson.loads(body)
            except orjson.JSONDecodeError as e:
                log.warning("invalid.json", error=str(e), path=request.url.path)
                # Never echo an unparseable body; it may contain a secret
                return error_response(request, ValidationError("Request body is not valid JSON"))

        return await call_next(request)

    def _too_large(self, request: Request, size: int):
        log.warning("payload.too_large", size=size, max_size=self.max_size, path=request.url.path)
        return error_response(
            request,
            PayloadTooLarge(f"Request payload exceeds maximum size of {self.max_size} bytes"),
        )
