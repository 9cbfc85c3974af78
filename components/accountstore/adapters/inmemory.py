from __future__ import annotations

import copy
import threading
from typing import Iterable, List, Optional, Sequence

from ..errors import DuplicateRecordError
from ..ports import Filter, Record


def _match_field(doc: Record, field: str, expected) -> bool:
    if expected is None:
        return doc.get(field) is None
    return field in doc and doc[field] == expected


def _match_filter(doc: Record, flt: Filter) -> bool:
    for field, expected in flt.items():
        if field == "$or":
            # empty $or matches nothing, same as Mongo rejecting it
            if not any(_match_filter(doc, sub) for sub in expected):
                return False
        elif not _match_field(doc, field, expected):
            return False
    return True


class InMemoryAccountStore:
    """
    Thread-safe, test-friendly adapter.
    Storage: insertion-ordered list of documents; unique fields enforced on insert.
    """

    def __init__(self, unique_fields: Sequence[str] = ("id", "username")) -> None:
        self._docs: List[Record] = []
        self._unique_fields = tuple(unique_fields)
        self._lock = threading.RLock()

    # -------- Port methods --------

    def find_one(self, flt: Filter) -> Optional[Record]:
        with self._lock:
            for doc in self._docs:
                if _match_filter(doc, flt):
                    return copy.deepcopy(doc)
            return None

    def find_many(self, flt: Filter) -> List[Record]:
        with self._lock:
            return [copy.deepcopy(d) for d in self._docs if _match_filter(d, flt)]

    def insert(self, record: Record) -> Record:
        with self._lock:
            for field in self._unique_fields:
                value = record.get(field)
                if value is None:
                    continue
                if any(d.get(field) == value for d in self._docs):
                    raise DuplicateRecordError(f"duplicate value for unique field '{field}'")
            stored = copy.deepcopy(record)
            self._docs.append(stored)
            return copy.deepcopy(stored)

    def update_fields(self, flt: Filter, fields: Record, unset: Iterable[str] = ()) -> bool:
        with self._lock:
            for doc in self._docs:
                if not _match_filter(doc, flt):
                    continue
                for field in self._unique_fields:
                    if field in fields and any(
                        d is not doc and d.get(field) == fields[field] for d in self._docs
                    ):
                        raise DuplicateRecordError(f"duplicate value for unique field '{field}'")
                doc.update(copy.deepcopy(fields))
                for field in unset:
                    doc.pop(field, None)
                return True
            return False

    # -------- Helpers --------

    def count(self) -> int:
        with self._lock:
            return len(self._docs)
