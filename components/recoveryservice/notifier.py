from __future__ import annotations

import logging
from typing import Protocol

from components.authservice.models import UserRecord

from .tokens import ResetTicket

logger = logging.getLogger("recoveryservice.notifier")


class ResetNotifierPort(Protocol):
    """
    Delivers a freshly stored reset ticket to the user and returns the
    message the forgot-password caller receives.
    """
    def deliver(self, user: UserRecord, ticket: ResetTicket) -> str: ...


class ResponseNotifier:
    """Hands the raw token back in the HTTP response. Only for deployments without a mail channel."""

    def deliver(self, user: UserRecord, ticket: ResetTicket) -> str:
        return f"Reset token generated: {ticket.token}"


class LoggingNotifier:
    """Stands in for an out-of-band channel (e-mail, SMS); the response only confirms."""

    def deliver(self, user: UserRecord, ticket: ResetTicket) -> str:
        logger.info(
            "reset.delivered user_id=%s email=%s expires_at=%s token=%s",
            user.id, user.email, ticket.expires_at, ticket.token,
        )
        return "Reset instructions sent"


def make_notifier(mode: str) -> ResetNotifierPort:
    if mode == "response":
        return ResponseNotifier()
    if mode == "log":
        return LoggingNotifier()
    raise ValueError(f"Unsupported reset delivery mode: {mode}")
