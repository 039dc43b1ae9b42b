"""Redis key-value backend."""
import structlog
from redis import Redis
from redis.exceptions import RedisError
from .base import KeyValueBackend

log = structlog.get_logger()

# Delete KEYS[1] only if it still holds ARGV[1]
_COMPARE_AND_DELETE = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
end
return 0
"""


class RedisBackend(KeyValueBackend):
    """Redis implementation of the key-value backend.

    Each secret is a plain string key under a common prefix. Single-key
    SET and DEL are atomic in Redis; the sweeper's conditional delete runs
    as a Lua script so it cannot remove a concurrently rewritten value.
    """

    def __init__(self, redis_url: str, key_prefix: str = "secretstore:secret:"):
        """
        Initialize Redis backend.

        Args:
            redis_url: Redis connection URL
            key_prefix: Prefix applied to every stored key
        """
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self._client: Redis | None = None
        self._compare_and_delete = None

    def _get_client(self) -> Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = Redis.from_url(
                self.redis_url,
                decode_responses=False,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._compare_and_delete = self._client.register_script(_COMPARE_AND_DELETE)
        return self._client

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def _name(self, key: bytes | str) -> str:
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        return key[len(self.key_prefix):]

    async def put(self, key: str, value: bytes) -> None:
        try:
            self._get_client().set(self._key(key), value)
        except RedisError as e:
            log.error("redis.put_failed", error=str(e), key=key)
            raise

    async def get(self, key: str) -> bytes | None:
        try:
            return self._get_client().get(self._key(key))
        except RedisError as e:
            log.error("redis.get_failed", error=str(e), key=key)
            raise

    async def delete(self, key: str, expected: bytes | None = None) -> bool:
        try:
            client = self._get_client()
            if expected is None:
                return client.delete(self._key(key)) > 0
            return int(self._compare_and_delete(keys=[self._key(key)], args=[expected])) > 0
        except RedisError as e:
            log.error("redis.delete_failed", error=str(e), key=key)
            raise

    async def items(self) -> list[tuple[str, bytes]]:
        try:
            client = self._get_client()
            keys = list(client.scan_iter(match=f"{self.key_prefix}*"))
            if not keys:
                return []
            values = client.mget(keys)
        except RedisError as e:
            log.error("redis.scan_failed", error=str(e))
            raise

        # Keys deleted between SCAN and MGET come back as None
        return [
            (self._name(key), value)
            for key, value in zip(keys, values)
            if value is not None
        ]

    async def health_check(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is accessible, False otherwise
        """
        try:
            return bool(self._get_client().ping())
        except Exception as e:
            log.warning("redis.health_check_failed", error=str(e))
            return False

    def close(self):
        """Close Redis connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._compare_and_delete = None
