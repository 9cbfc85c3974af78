from __future__ import annotations
import logging
from typing import Optional

from components.accountstore import AccountStoreError, AccountStorePort
from components.authservice import (
    InternalError,
    InvalidTokenError,
    NotFoundError,
    PasswordHasher,
    UserRecord,
    check_password_length,
    generate_salt,
)
from components.authservice.contracts import MessageResponse

from .notifier import ResetNotifierPort, ResponseNotifier
from .tokens import ResetTokenGenerator

logger = logging.getLogger("recoveryservice")

MSG_RESET_OK = "Password reset successful"

RESET_FIELDS = ("resetToken", "resetExpires")


class RecoveryService:
    """
    Forgot-password / reset-password flows over the shared user store.

    A user holds at most one outstanding reset token; forgot() overwrites it.
    reset() consumes the token with a conditional write keyed on the token
    still being present, so two racing resets cannot both succeed.
    """

    def __init__(
        self,
        *,
        store: AccountStorePort,
        hasher: Optional[PasswordHasher] = None,
        tokens: Optional[ResetTokenGenerator] = None,
        notifier: Optional[ResetNotifierPort] = None,
    ):
        self.store = store
        self.hasher = hasher or PasswordHasher()
        self.tokens = tokens or ResetTokenGenerator()
        self.notifier = notifier or ResponseNotifier()

    def forgot(self, username: str, email: str) -> MessageResponse:
        try:
            doc = self.store.find_one({"username": username, "email": email})
        except AccountStoreError:
            logger.exception("forgot.store_failed")
            raise InternalError()
        if not doc:
            logger.info("forgot.not_found")
            raise NotFoundError()

        user = UserRecord.from_document(doc)
        ticket = self.tokens.generate()
        try:
            matched = self.store.update_fields(
                {"id": user.id},
                {"resetToken": ticket.token, "resetExpires": ticket.expires_at},
            )
        except AccountStoreError:
            logger.exception("forgot.store_failed")
            raise InternalError()
        if not matched:
            raise NotFoundError()

        logger.info("forgot.issued", extra={"user_id": user.id, "expires_at": ticket.expires_at})
        return MessageResponse(message=self.notifier.deliver(user, ticket))

    def reset(self, token: str, new_password: str) -> MessageResponse:
        check_password_length(new_password)
        if not token:
            raise InvalidTokenError()

        try:
            doc = self.store.find_one({"resetToken": token})
        except AccountStoreError:
            logger.exception("reset.store_failed")
            raise InternalError()
        if not doc:
            logger.info("reset.rejected", extra={"reason": "unknown_token"})
            raise InvalidTokenError()

        user = UserRecord.from_document(doc)
        if not user.has_pending_reset or user.reset_expires < self.tokens.now():
            logger.info("reset.rejected", extra={"reason": "expired", "user_id": user.id})
            raise InvalidTokenError()

        salt = generate_salt()
        try:
            matched = self.store.update_fields(
                {"id": user.id, "resetToken": token},
                {"passwordHash": self.hasher.hash(new_password, salt), "salt": salt},
                unset=RESET_FIELDS,
            )
        except AccountStoreError:
            logger.exception("reset.store_failed")
            raise InternalError()
        if not matched:
            logger.info("reset.rejected", extra={"reason": "consumed_concurrently", "user_id": user.id})
            raise InvalidTokenError()

        logger.info("reset.ok", extra={"user_id": user.id})
        return MessageResponse(message=MSG_RESET_OK)
