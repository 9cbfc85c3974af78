from __future__ import annotations
from typing import Dict


class AuthServiceException(Exception):
    """
    Base for every credential-lifecycle failure. The gateway renders all of
    them as HTTP 400 with {"message": ...}.
    """
    type: str = "INTERNAL"
    code: str = "internal_error"
    message: str = "Internal server error"
    status_code: int = 400

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, str]:
        return {"message": self.message}


class ValidationError(AuthServiceException):
    type = "VALIDATION"
    code = "validation_error"
    message = "Invalid request"


class ConflictError(AuthServiceException):
    type = "CONFLICT"
    code = "conflict"
    message = "Username or email already exists"


class AuthError(AuthServiceException):
    # deliberately one message for unknown user and wrong password
    type = "AUTH_ERROR"
    code = "bad_credentials"
    message = "Invalid username or password"


class NotFoundError(AuthServiceException):
    type = "NOT_FOUND"
    code = "not_found"
    message = "User not found"


class InvalidTokenError(AuthServiceException):
    # deliberately one message for unknown, missing-expiry and expired tokens
    type = "AUTH_ERROR"
    code = "invalid_token"
    message = "Invalid or expired token"


class InternalError(AuthServiceException):
    """Store or signing failure. The message never carries the cause."""

    def __init__(self):
        super().__init__()


class TokenValidationError(ValueError):
    """Raised by the token signer. `reason` is for operators only."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
