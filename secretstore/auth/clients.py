"""API key to scope-set resolution."""
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional
import structlog

from ..config import ClientConfig
from ..errors import AuthenticationFailed
from ..scopes import ScopePattern, parse_scopes

log = structlog.get_logger()


@dataclass(frozen=True)
class Caller:
    """An identified caller and the scopes it was granted."""
    client_id: str
    scopes: frozenset[str] = frozenset()
    patterns: frozenset[ScopePattern] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "patterns", parse_scopes(self.scopes))


ANONYMOUS = Caller(client_id="anonymous")


class ClientRegistry:
    """
    In-memory registry of API keys and the scopes they carry.

    Clients are loaded from the API_CLIENTS setting at startup. Credential
    verification beyond key lookup is out of scope for this service.
    """

    def __init__(self, clients: Optional[Mapping[str, ClientConfig]] = None):
        self._clients: dict[str, Caller] = {}
        for key, client in (clients or {}).items():
            self.add_client(key, client.client_id, client.scopes)
        log.info("api_clients.loaded", count=len(self._clients))

    def add_client(self, api_key: str, client_id: str, scopes: Iterable[str]) -> Caller:
        """
        Register an API key.

        Args:
            api_key: Secret key the client presents
            client_id: Human-readable client identifier
            scopes: Scopes granted to the client

        Returns:
            The registered caller
        """
        caller = Caller(client_id=client_id, scopes=frozenset(scopes))
        self._clients[api_key] = caller
        log.info("api_client.added", client_id=client_id, scope_count=len(caller.scopes))
        return caller

    def remove_client(self, api_key: str) -> bool:
        """
        Remove an API key from the registry.

        Returns:
            True if the key was registered
        """
        caller = self._clients.pop(api_key, None)
        if caller is None:
            return False
        log.info("api_client.removed", client_id=caller.client_id)
        return True

    def resolve(self, api_key: Optional[str]) -> Caller:
        """
        Map a presented API key to a caller.

        A missing key yields the anonymous caller, which holds no scopes.

        Raises:
            AuthenticationFailed: If a key is presented but not registered
        """
        if not api_key:
            return ANONYMOUS
        caller = self._clients.get(api_key)
        if caller is None:
            log.warning("auth.failed", reason="invalid_key")
            raise AuthenticationFailed("Invalid API key")
        return caller

    def count(self) -> int:
        """Get total number of registered clients."""
        return len(self._clients)
