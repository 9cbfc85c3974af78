from __future__ import annotations


class AccountStoreError(RuntimeError):
    """Base typed error for all account store failures."""


class DuplicateRecordError(AccountStoreError):
    """Insert violated a unique field (e.g. username already taken)."""


class StoreUnavailableError(AccountStoreError):
    """Backend unreachable, misconfigured or failed mid-operation."""
