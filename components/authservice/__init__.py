from .service import AuthService, parse_bearer, check_password_length
from .crypto import HS256TokenSigner, PasswordHasher, generate_salt
from .models import UserRecord
from .config import AuthSettings
from .deps import get_auth_service
from .errors import (
    AuthServiceException,
    ValidationError,
    ConflictError,
    AuthError,
    NotFoundError,
    InvalidTokenError,
    InternalError,
    TokenValidationError,
)
from .routes import router as auth_router, error_response

__all__ = [
    "AuthService",
    "parse_bearer",
    "check_password_length",
    "HS256TokenSigner",
    "PasswordHasher",
    "generate_salt",
    "UserRecord",
    "AuthSettings",
    "get_auth_service",
    "AuthServiceException",
    "ValidationError",
    "ConflictError",
    "AuthError",
    "NotFoundError",
    "InvalidTokenError",
    "InternalError",
    "TokenValidationError",
    "auth_router",
    "error_response",
]
