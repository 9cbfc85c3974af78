"""
AccountStore package export surface.
"""

from .errors import (
    AccountStoreError,
    DuplicateRecordError,
    StoreUnavailableError,
)
from .ports import AccountStorePort, Filter, Record
from .adapters.inmemory import InMemoryAccountStore

__all__ = [
    "AccountStoreError",
    "DuplicateRecordError",
    "StoreUnavailableError",
    "AccountStorePort",
    "Filter",
    "Record",
    "InMemoryAccountStore",
]
