from fastapi import APIRouter, Depends

from ..context import SecretsContext
from ..services.authorization import AuthorizationGate
from .dependencies import get_caller, get_context, get_gate
from .schemas import EmptyResponse, SecretListResponse, SecretRequest, SecretResponse

router = APIRouter(prefix="/v1", tags=["secrets"])


@router.put("/secret/{name:path}", response_model=EmptyResponse)
async def set_secret(name: str, body: SecretRequest, gate: AuthorizationGate = Depends(get_gate)):
    """
    Create or overwrite a secret.

    Requires scope `secrets:set:<name>`. The whole payload is replaced; an
    expiration in the past is accepted.
    """
    await gate.set(name, body.secret, body.expires)
    return EmptyResponse()


@router.get("/secret/{name:path}", response_model=SecretResponse)
async def get_secret(name: str, gate: AuthorizationGate = Depends(get_gate)):
    """
    Read a secret.

    Requires scope `secrets:get:<name>`. Returns 404 if the secret does not
    exist and 410 if it has expired but has not been purged yet.
    """
    secret = await gate.get(name)
    return SecretResponse(secret=secret.payload, expires=secret.expires)


@router.delete("/secret/{name:path}", response_model=EmptyResponse)
async def remove_secret(name: str, gate: AuthorizationGate = Depends(get_gate)):
    """Delete a secret, expired or not. Requires scope `secrets:remove:<name>`."""
    await gate.remove(name)
    return EmptyResponse()


@router.get("/secrets", response_model=SecretListResponse)
async def list_secrets(gate: AuthorizationGate = Depends(get_gate)):
    """List the names of live secrets the caller may read. Order is unspecified."""
    return SecretListResponse(secrets=await gate.list())


@router.post("/expire", response_model=EmptyResponse, dependencies=[Depends(get_caller)])
async def expire_secrets(context: SecretsContext = Depends(get_context)):
    """Purge expired secrets now. Best effort; never fails on individual records."""
    await context.sweeper.sweep()
    return EmptyResponse()
