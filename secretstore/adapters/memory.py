"""In-memory key-value backend."""
import threading
import structlog
from .base import KeyValueBackend

log = structlog.get_logger()


class InMemoryBackend(KeyValueBackend):
    """Thread-safe in-memory implementation of the key-value backend."""

    def __init__(self):
        self._data: dict[str, bytes] = {}
        self._lock = threading.RLock()

    async def put(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = value

    async def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._data.get(key)

    async def delete(self, key: str, expected: bytes | None = None) -> bool:
        with self._lock:
            current = self._data.get(key)
            if current is None:
                return False
            if expected is not None and current != expected:
                log.debug("backend.delete_skipped", key=key, reason="value_changed", adapter="memory")
                return False
            del self._data[key]
            return True

    async def items(self) -> list[tuple[str, bytes]]:
        with self._lock:
            return list(self._data.items())

    async def health_check(self) -> bool:
        """In-memory backend is always healthy."""
        return True

    def clear(self) -> None:
        """Remove every record."""
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
