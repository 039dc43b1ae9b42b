"""
SecretStore - scoped, expiring secret storage service.

Features:
- Secrets gated by `secrets:<op>:<name>` scopes with trailing-`*` wildcards
- Payloads encrypted at rest, redacted from error bodies
- Read-time expiry plus a periodic expiry sweeper
- Structured logging with correlation IDs, Prometheus metrics, health checks
"""
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from . import __version__
from .api.router import router
from .config import get_settings
from .context import SecretsContext
from .health import HealthChecker
from .logging import SERVICE_NAME, get_logger, setup_logging
from .middleware import (
    CorrelationIdMiddleware,
    ErrorHandlerMiddleware,
    MetricsMiddleware,
    ValidationMiddleware,
    request_validation_handler,
)

settings = get_settings()

setup_logging(json_output=settings.LOG_JSON)
logger = get_logger()


def create_app(context: Optional[SecretsContext] = None) -> FastAPI:
    """
    Build the FastAPI application around a service context.

    Args:
        context: Collaborators to serve; built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    if context is None:
        context = SecretsContext(settings)
    health_checker = HealthChecker(context.backend, service_name=SERVICE_NAME, version=__version__)

    app = FastAPI(
        title="SecretStore",
        version=__version__,
        description="Scoped, expiring secret storage",
    )
    app.state.context = context

    # Last added runs outermost
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(ValidationMiddleware, max_size=context.settings.MAX_PAYLOAD_SIZE)
    app.add_middleware(MetricsMiddleware, metrics=context.metrics)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(router)
    app.mount("/metrics", make_asgi_app(registry=context.metrics.registry))

    @app.get("/health")
    async def health():
        """Liveness probe - returns 200 if the service is running."""
        logger.debug("health_check_liveness")
        return health_checker.liveness()

    @app.get("/health/ready")
    async def health_ready():
        """
        Readiness probe.

        Returns:
            200: Service is ready to handle traffic
            503: Backend unreachable or host resources exhausted
        """
        logger.debug("health_check_readiness")
        result = await health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(content=result, status_code=status_code)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "service_starting",
            version=__version__,
            env=context.settings.ENV,
            adapter=type(context.backend).__name__,
            clients=context.clients.count(),
        )
        context.sweeper.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("service_stopping")
        await context.sweeper.stop()
        context.metrics.app_up.labels(service=SERVICE_NAME, version=__version__).set(0)
        context.close()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "secretstore.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
    )
