"""
Secret store services.

- Scope-checked access to secrets (AuthorizationGate)
- Secret lifecycle over a key-value backend (SecretStore)
- Envelope encoding and redaction (SecretCodec)
- Payload encryption (CryptoService)
- Expiry purging (ExpirySweeper)
"""

from .authorization import AuthorizationGate
from .codec import SecretCodec, redact
from .crypto import CryptoService
from .secret_store import SecretStore
from .sweeper import ExpirySweeper

__all__ = [
    "AuthorizationGate",
    "CryptoService",
    "ExpirySweeper",
    "SecretCodec",
    "SecretStore",
    "redact",
]
