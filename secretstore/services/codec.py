"""
Secret envelope codec.

Turns a secret's payload and expiration into the bytes handed to the
key-value backend, and back. The payload is serialized with orjson and
encrypted, so stored bytes never contain it in the clear; the expiration is
kept readable so the sweeper can age records.

Envelope layout (orjson object):
    {"v": 1, "secret": "<fernet token>", "expires": "2025-01-01T00:00:00+00:00"}
"""
import copy
from datetime import datetime, timezone
from typing import Any, Tuple

import orjson

from ..errors import CorruptEnvelope, ValidationError
from .crypto import CryptoService, DecryptionError

ENVELOPE_VERSION = 1
OMITTED = "(OMITTED)"
REDACTED_FIELD = "secret"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalise aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SecretCodec:
    """Encodes and decodes secret envelopes using a process-held key."""

    def __init__(self, crypto: CryptoService):
        self._crypto = crypto

    def encode(self, payload: Any, expires: datetime) -> bytes:
        """
        Encode ``payload`` and ``expires`` into an envelope.

        Raises:
            ValidationError: If the payload has no JSON encoding, e.g. an
                integer outside the 64-bit range
        """
        try:
            serialized = orjson.dumps(payload)
        except orjson.JSONEncodeError as e:
            raise ValidationError(f"Secret payload cannot be stored: {e}")
        token = self._crypto.encrypt(serialized)
        return orjson.dumps({
            "v": ENVELOPE_VERSION,
            "secret": token.decode("ascii"),
            "expires": as_utc(expires).isoformat(),
        })

    def decode_expires(self, envelope: bytes) -> datetime:
        """
        Read only the expiration from an envelope, without decrypting.

        Raises:
            CorruptEnvelope: If the envelope structure or timestamp is invalid
        """
        return self._read_fields(envelope)[1]

    def decode(self, envelope: bytes) -> Tuple[Any, datetime]:
        """
        Decode an envelope into ``(payload, expires)``.

        Raises:
            CorruptEnvelope: If the structure is invalid, the timestamp does not
                parse, or the payload cannot be decrypted with this key
        """
        token, expires = self._read_fields(envelope)
        try:
            plaintext = self._crypto.decrypt(token.encode("ascii"))
        except DecryptionError as e:
            raise CorruptEnvelope(f"payload decryption failed: {e}")
        try:
            payload = orjson.loads(plaintext)
        except orjson.JSONDecodeError as e:
            raise CorruptEnvelope(f"payload is not JSON: {e}")
        return payload, expires

    @staticmethod
    def _read_fields(envelope: bytes) -> Tuple[str, datetime]:
        try:
            data = orjson.loads(envelope)
        except orjson.JSONDecodeError as e:
            raise CorruptEnvelope(f"envelope is not JSON: {e}")
        if not isinstance(data, dict):
            raise CorruptEnvelope("envelope is not an object")

        token = data.get("secret")
        raw_expires = data.get("expires")
        if not isinstance(token, str) or not isinstance(raw_expires, str):
            raise CorruptEnvelope("envelope is missing required fields")
        try:
            expires = as_utc(datetime.fromisoformat(raw_expires))
        except ValueError:
            raise CorruptEnvelope("envelope expiration is not a valid timestamp")
        return token, expires


def redact(payload: Any) -> Any:
    """
    Return a copy of ``payload`` safe to echo in an error body.

    Every mapping key named ``secret``, at any depth, has its value replaced
    by ``(OMITTED)``. The input is not modified.
    """
    if isinstance(payload, dict):
        return {
            key: OMITTED if key == REDACTED_FIELD else redact(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact(item) for item in payload]
    return copy.copy(payload)
