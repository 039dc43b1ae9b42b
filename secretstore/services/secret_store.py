"""
Secret store: lifecycle of named secrets over a key-value backend.

State per name:
    absent -> set -> live -> (expires <= now) -> logically expired -> remove/sweep -> absent

``get`` distinguishes a live record, an expired record (``Expired``) and a
missing one (``NotFound``). ``remove`` treats expired records as present.
This layer performs no authorization; see ``AuthorizationGate``.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

import structlog

from ..adapters.base import KeyValueBackend
from ..errors import CorruptEnvelope, NotFound, Expired, ValidationError
from ..models import Secret, SecretRecord
from .codec import SecretCodec, as_utc

log = structlog.get_logger()

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SecretStore:
    """CRUD and enumeration of secrets, one backend round-trip per call."""

    def __init__(self, backend: KeyValueBackend, codec: SecretCodec, clock: Clock = utcnow):
        self._backend = backend
        self._codec = codec
        self._clock = clock

    def now(self) -> datetime:
        return as_utc(self._clock())

    async def get(self, name: str) -> Secret:
        """
        Read a live secret.

        Raises:
            NotFound: No record exists for ``name``
            Expired: The record exists but ``expires <= now``
            CorruptEnvelope: The stored record cannot be decoded
        """
        _check_name(name)
        raw = await self._backend.get(name)
        if raw is None:
            raise NotFound(name)

        expires = self._decode_expires(name, raw)
        if expires <= self.now():
            log.debug("secret.read_expired", name=name)
            raise Expired(name)
        payload, expires = self._decode(name, raw)
        return Secret(name=name, payload=payload, expires=expires)

    async def set(self, name: str, payload: Any, expires: datetime) -> None:
        """Create or fully replace a secret. Past expirations are accepted."""
        _check_name(name)
        await self._backend.put(name, self._codec.encode(payload, expires))
        log.info("secret.set", name=name, expires=as_utc(expires).isoformat())

    async def remove(self, name: str) -> None:
        """
        Delete a secret, expired or not.

        Raises:
            NotFound: No record exists for ``name``
        """
        _check_name(name)
        if not await self._backend.delete(name):
            raise NotFound(name)
        log.info("secret.removed", name=name)

    async def list_names(self, predicate: Callable[[str], bool] | None = None) -> list[str]:
        """
        Names of live secrets, optionally filtered by ``predicate``.

        Undecodable records are logged and left out.
        """
        now = self.now()
        names = []
        for record in self._records(await self._backend.items()):
            if record.expires <= now:
                continue
            if predicate is None or predicate(record.name):
                names.append(record.name)
        return names

    async def records(self) -> list[tuple[str, bytes]]:
        """Every stored (name, envelope) pair, expired or not."""
        return await self._backend.items()

    async def purge(self, name: str, envelope: bytes) -> bool:
        """
        Delete ``name`` only if it still holds ``envelope``.

        Returns:
            True if the record was deleted; False if it was already gone or rewritten
        """
        return await self._backend.delete(name, expected=envelope)

    def expiry_of(self, name: str, envelope: bytes) -> datetime:
        """Expiration stored in ``envelope``; raises ``CorruptEnvelope`` naming ``name``."""
        try:
            return self._codec.decode_expires(envelope)
        except CorruptEnvelope as e:
            e.name = name
            raise

    def _records(self, items: Iterable[tuple[str, bytes]]) -> Iterable[SecretRecord]:
        for name, raw in items:
            try:
                expires = self.expiry_of(name, raw)
            except CorruptEnvelope as e:
                log.error("secret.corrupt_envelope", name=name, reason=e.reason)
                continue
            yield SecretRecord(name=name, expires=expires)

    def _decode(self, name: str, raw: bytes):
        try:
            return self._codec.decode(raw)
        except CorruptEnvelope as e:
            e.name = name
            log.error("secret.corrupt_envelope", name=name, reason=e.reason)
            raise

    def _decode_expires(self, name: str, raw: bytes) -> datetime:
        try:
            return self.expiry_of(name, raw)
        except CorruptEnvelope as e:
            log.error("secret.corrupt_envelope", name=name, reason=e.reason)
            raise


def _check_name(name: str) -> None:
    if not isinstance(name, str) or not name:
        raise ValidationError("Secret name must be a non-empty string")
