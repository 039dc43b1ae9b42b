"""
Authorization gate in front of the secret store.

Every caller-facing operation is checked against the caller's scopes before
the store is touched, so an unauthorized caller learns nothing about whether
a name exists. ``list`` is the exception: it never fails and instead filters
its result to names the caller could read individually.
"""
from datetime import datetime
from typing import Any, Optional

import structlog

from ..auth.clients import Caller
from ..errors import SecretStoreError, Unauthorized
from ..metrics import Metrics
from ..models import Secret
from ..scopes import READ_SCOPE_PREFIX, could_satisfy_prefix, required_scope, satisfies
from .secret_store import SecretStore

log = structlog.get_logger()


class AuthorizationGate:
    """Scope-checked view of a ``SecretStore`` for a single caller."""

    def __init__(self, store: SecretStore, caller: Caller, metrics: Optional[Metrics] = None):
        self._store = store
        self._caller = caller
        self._metrics = metrics

    @property
    def caller(self) -> Caller:
        return self._caller

    def _authorize(self, operation: str, name: str) -> None:
        scope = required_scope(operation, name)
        if not satisfies(scope, self._caller.patterns):
            log.info(
                "auth.denied",
                client_id=self._caller.client_id,
                operation=operation,
                required_scope=scope,
            )
            raise Unauthorized(scope, self._caller.client_id)

    def _record(self, operation: str, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_operation(operation, outcome)

    async def _run(self, operation: str, name: str, call):
        try:
            self._authorize(operation, name)
            result = await call()
        except SecretStoreError as e:
            self._record(operation, e.code)
            raise
        self._record(operation, "ok")
        return result

    async def get(self, name: str) -> Secret:
        return await self._run("get", name, lambda: self._store.get(name))

    async def set(self, name: str, payload: Any, expires: datetime) -> None:
        await self._run("set", name, lambda: self._store.set(name, payload, expires))

    async def remove(self, name: str) -> None:
        await self._run("remove", name, lambda: self._store.remove(name))

    async def list(self) -> list[str]:
        """
        Names of live secrets this caller holds a read scope for.

        Callers with no scope that could ever grant a read get an empty list
        without the backend being enumerated.
        """
        patterns = self._caller.patterns
        if not could_satisfy_prefix(READ_SCOPE_PREFIX, patterns):
            self._record("list", "ok")
            return []

        names = await self._store.list_names(
            lambda name: satisfies(required_scope("get", name), patterns)
        )
        self._record("list", "ok")
        return names
