from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol

Filter = Dict[str, Any]
Record = Dict[str, Any]


class AccountStorePort(Protocol):
    """
    Narrow document-store contract over the user collection.

    Filters are exact-equality field maps (all fields must match) and may use a
    top-level {"$or": [filter, ...]} combinator. A filter value of None matches
    a missing/null field. No match is an empty result, never an error.
    """

    def find_one(self, flt: Filter) -> Optional[Record]: ...

    def find_many(self, flt: Filter) -> List[Record]: ...

    def insert(self, record: Record) -> Record: ...

    def update_fields(self, flt: Filter, fields: Record, unset: Iterable[str] = ()) -> bool:
        """Set `fields` and remove `unset` on the first match. Returns whether a document matched."""
        ...
