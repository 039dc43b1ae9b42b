"""
Service context: the explicitly constructed collaborators of one service instance.

Nothing here is a process-wide singleton. The application builds one context
at startup and tests build their own, each with its own backend, key, clock
and metrics registry.
"""
from datetime import timedelta
from typing import Optional

import structlog

from .adapters.base import KeyValueBackend
from .adapters.memory import InMemoryBackend
from .adapters.redis_kv import RedisBackend
from .auth.clients import Caller, ClientRegistry
from .config import Settings, get_settings
from .metrics import Metrics
from .services.authorization import AuthorizationGate
from .services.codec import SecretCodec
from .services.crypto import CryptoService
from .services.secret_store import Clock, SecretStore, utcnow
from .services.sweeper import ExpirySweeper

log = structlog.get_logger()


class SecretsContext:
    """Bundle of backend, codec, store, sweeper, client registry and metrics."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[KeyValueBackend] = None,
        crypto: Optional[CryptoService] = None,
        clients: Optional[ClientRegistry] = None,
        metrics: Optional[Metrics] = None,
        clock: Clock = utcnow,
    ):
        self.settings = settings if settings is not None else get_settings()
        self.backend = backend if backend is not None else create_backend(self.settings)
        self.crypto = crypto if crypto is not None else _create_crypto(self.settings)
        self.clients = clients if clients is not None else ClientRegistry(self.settings.API_CLIENTS)
        self.metrics = metrics if metrics is not None else Metrics()
        self.codec = SecretCodec(self.crypto)
        self.store = SecretStore(self.backend, self.codec, clock=clock)
        self.sweeper = ExpirySweeper(
            self.store,
            interval_seconds=self.settings.SWEEP_INTERVAL_SECONDS,
            expiration_delay=timedelta(seconds=self.settings.EXPIRATION_DELAY_SECONDS),
            metrics=self.metrics,
        )

    def gate_for(self, caller: Caller) -> AuthorizationGate:
        """Authorization gate bound to one caller's scopes."""
        return AuthorizationGate(self.store, caller, metrics=self.metrics)

    def close(self) -> None:
        if isinstance(self.backend, RedisBackend):
            self.backend.close()


def create_backend(settings: Settings) -> KeyValueBackend:
    """
    Create the backend selected by the STORE_ADAPTER setting.

    Returns:
        KeyValueBackend instance
    """
    if settings.STORE_ADAPTER == "redis":
        if not settings.REDIS_URL:
            log.warning(
                "adapter.fallback",
                requested="redis",
                actual="memory",
                reason="REDIS_URL not configured"
            )
            return InMemoryBackend()

        log.info("adapter.selected", type="redis")
        return RedisBackend(str(settings.REDIS_URL), key_prefix=settings.REDIS_KEY_PREFIX)

    log.info("adapter.selected", type="memory")
    return InMemoryBackend()


def _create_crypto(settings: Settings) -> CryptoService:
    if settings.ENCRYPTION_KEY:
        return CryptoService(settings.ENCRYPTION_KEY.encode("ascii"))
    log.warning("crypto.ephemeral_key", reason="ENCRYPTION_KEY not configured")
    return CryptoService()
