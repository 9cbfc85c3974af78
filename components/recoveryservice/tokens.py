from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional

TimeFn = Callable[[], float]

DEFAULT_RESET_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class ResetTicket:
    token: str
    expires_at: int  # epoch seconds


class ResetTokenGenerator:
    """Random, URL-safe, single-use recovery tokens with an absolute expiry."""

    def __init__(self, ttl_seconds: int = DEFAULT_RESET_TTL_SECONDS, now: Optional[TimeFn] = None, nbytes: int = 32):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._now = now or time.time
        self._nbytes = nbytes

    def now(self) -> int:
        return int(self._now())

    def generate(self) -> ResetTicket:
        return ResetTicket(
            token=secrets.token_urlsafe(self._nbytes),
            expires_at=self.now() + self.ttl_seconds,
        )
