"""Key-value storage backends."""
from .base import KeyValueBackend
from .memory import InMemoryBackend
from .redis_kv import RedisBackend

__all__ = ["KeyValueBackend", "InMemoryBackend", "RedisBackend"]
