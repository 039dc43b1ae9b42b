"""HTTP middleware."""
from .correlation import CorrelationIdMiddleware
from .error_handler import ErrorHandlerMiddleware, request_validation_handler
from .metrics import MetricsMiddleware
from .validation import ValidationMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "ErrorHandlerMiddleware",
    "MetricsMiddleware",
    "ValidationMiddleware",
    "request_validation_handler",
]
