"""Request-scoped dependencies: service context, caller identity, authorization gate."""
from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader

from ..auth.clients import Caller
from ..context import SecretsContext
from ..services.authorization import AuthorizationGate

api_key_header = APIKeyHeader(name="X-Secrets-Key", auto_error=False)


def get_context(request: Request) -> SecretsContext:
    """The service context the application was built with."""
    return request.app.state.context


def get_caller(
    api_key: Optional[str] = Security(api_key_header),
    context: SecretsContext = Depends(get_context),
) -> Caller:
    """
    Resolve the X-Secrets-Key header to a caller.

    Raises:
        AuthenticationFailed: If a key is presented but not registered
    """
    return context.clients.resolve(api_key)


def get_gate(
    caller: Caller = Depends(get_caller),
    context: SecretsContext = Depends(get_context),
) -> AuthorizationGate:
    """A fresh gate per request; scopes are never cached across requests."""
    return context.gate_for(caller)
