"""
Error taxonomy for the secret store.

Every caller-visible failure is a ``SecretStoreError`` carrying the HTTP
status it maps to and a machine-readable code. The HTTP error middleware
renders these into the structured error body.
"""


class SecretStoreError(Exception):
    """Base exception for secret store errors"""

    status_code: int = 500
    code: str = "InternalServerError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(SecretStoreError):
    """Caller scopes do not satisfy the scope required for the operation"""

    status_code = 403
    code = "InsufficientScopes"

    def __init__(self, required_scope: str, client_id: str = "anonymous"):
        super().__init__(
            f"Client '{client_id}' lacks the scope required for this operation: "
            f"{required_scope}"
        )
        self.required_scope = required_scope
        self.client_id = client_id


class AuthenticationFailed(SecretStoreError):
    """Presented credentials do not identify a known client"""

    status_code = 401
    code = "AuthenticationFailed"


class NotFound(SecretStoreError):
    """No record exists for the requested name"""

    status_code = 404
    code = "ResourceNotFound"

    def __init__(self, name: str):
        super().__init__("Secret not found")
        self.name = name


class Expired(SecretStoreError):
    """Record exists but is past its expiration and not yet purged"""

    status_code = 410
    code = "ResourceExpired"

    def __init__(self, name: str):
        super().__init__("The requested resource has expired.")
        self.name = name


class ValidationError(SecretStoreError):
    """Malformed caller input"""

    status_code = 400
    code = "InputValidationError"


class CorruptEnvelope(SecretStoreError):
    """Stored record cannot be decoded; indicates a storage fault, not misuse"""

    status_code = 500
    code = "InternalServerError"

    def __init__(self, reason: str, name: str | None = None):
        # The reason stays on the exception for logs; callers get a generic message
        super().__init__("Stored secret could not be decoded")
        self.reason = reason
        self.name = name
