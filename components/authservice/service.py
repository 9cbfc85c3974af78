from __future__ import annotations
import logging
from typing import Optional

from components.accountstore import AccountStorePort, AccountStoreError, DuplicateRecordError

from .contracts import LoginResponse, MessageResponse
from .crypto import HS256TokenSigner, PasswordHasher, generate_salt
from .errors import AuthError, ConflictError, InternalError, TokenValidationError, ValidationError
from .models import UserRecord

logger = logging.getLogger("authservice")

MIN_PASSWORD_LENGTH = 8

MSG_SIGNUP_OK = "User registered successfully"
MSG_LOGIN_OK = "Login successful"
MSG_UNAUTHORIZED = "Unauthorized"
MSG_INVALID_TOKEN = "Invalid or expired token"


def check_password_length(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the token from 'Bearer <token>', or None when absent or malformed."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        return None
    return token


class AuthService:
    def __init__(
        self,
        *,
        store: AccountStorePort,
        signer: HS256TokenSigner,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.store = store
        self.signer = signer
        self.hasher = hasher or PasswordHasher()

    # --------- Core operations ----------
    def signup(self, username: str, password: str, email: Optional[str] = None) -> MessageResponse:
        check_password_length(password)
        email = (email or "").strip() or None

        clauses = [{"username": username}]
        if email:
            clauses.append({"email": email})
        try:
            existing = self.store.find_one({"$or": clauses})
        except AccountStoreError:
            logger.exception("signup.store_failed")
            raise InternalError()
        if existing:
            logger.info("signup.conflict", extra={"username": username})
            raise ConflictError()

        salt = generate_salt()
        user = UserRecord(
            username=username,
            email=email,
            password_hash=self.hasher.hash(password, salt),
            salt=salt,
        )
        try:
            self.store.insert(user.to_document())
        except DuplicateRecordError:
            # lost the race against a concurrent signup for the same username
            logger.info("signup.conflict", extra={"username": username})
            raise ConflictError()
        except AccountStoreError:
            logger.exception("signup.store_failed")
            raise InternalError()

        logger.info("signup.ok", extra={"user_id": user.id})
        return MessageResponse(message=MSG_SIGNUP_OK)

    def login(self, username: str, password: str) -> LoginResponse:
        try:
            doc = self.store.find_one({"username": username})
        except AccountStoreError:
            logger.exception("login.store_failed")
            raise InternalError()

        if not doc:
            logger.info("login.failed", extra={"reason": "unknown_user"})
            raise AuthError()
        user = UserRecord.from_document(doc)
        if not self.hasher.verify(password, user.salt, user.password_hash):
            logger.info("login.failed", extra={"reason": "bad_password", "user_id": user.id})
            raise AuthError()

        token = self.signer.issue(user.username)
        logger.info("login.ok", extra={"user_id": user.id})
        return LoginResponse(message=MSG_LOGIN_OK, token=token)

    def profile(self, authorization: Optional[str]) -> MessageResponse:
        """
        Greets the token's subject. Never raises for auth problems: missing or
        malformed headers and bad tokens are ordinary unauthenticated replies.
        """
        token = parse_bearer(authorization)
        if token is None:
            return MessageResponse(message=MSG_UNAUTHORIZED)
        try:
            claims = self.signer.verify(token)
        except TokenValidationError as ex:
            logger.info("profile.invalid_token", extra={"reason": ex.reason})
            return MessageResponse(message=MSG_INVALID_TOKEN)
        return MessageResponse(message=f"Hello, {claims.get('sub')}! This is your profile.")
