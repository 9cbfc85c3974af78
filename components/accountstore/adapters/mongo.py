from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..errors import DuplicateRecordError, StoreUnavailableError
from ..ports import Filter, Record

log = logging.getLogger("accountstore.mongo")


def _strip_id(doc: Optional[Dict[str, Any]]) -> Optional[Record]:
    if doc is None:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc


class MongoAccountStore:
    """
    MongoDB adapter over a single users collection.

    Uniqueness of `id` and `username` is enforced by unique indexes, which
    closes the duplicate-signup race that a read-then-insert check leaves open.
    Call `ensure_indexes()` once at startup.

    Example:
        store = MongoAccountStore.from_uri("mongodb://localhost:27017", "marketplace")
        store.ensure_indexes()
    """

    def __init__(self, collection: Collection) -> None:
        self._col = collection

    @classmethod
    def from_uri(
        cls,
        uri: str,
        db_name: str,
        collection: str = "users",
        *,
        server_selection_timeout_ms: int = 2000,
    ) -> "MongoAccountStore":
        client = MongoClient(uri, serverSelectionTimeoutMS=server_selection_timeout_ms)
        return cls(client[db_name][collection])

    def ensure_indexes(self) -> None:
        try:
            self._col.create_index([("id", ASCENDING)], unique=True, name="uniq_id")
            self._col.create_index([("username", ASCENDING)], unique=True, name="uniq_username")
            self._col.create_index([("email", ASCENDING)], name="idx_email")
            self._col.create_index([("resetToken", ASCENDING)], sparse=True, name="idx_reset_token")
        except PyMongoError as e:
            raise StoreUnavailableError(f"index creation failed: {e}") from e

    # -------- Port methods --------

    def find_one(self, flt: Filter) -> Optional[Record]:
        try:
            return _strip_id(self._col.find_one(flt))
        except PyMongoError as e:
            raise StoreUnavailableError(str(e)) from e

    def find_many(self, flt: Filter) -> List[Record]:
        try:
            return [_strip_id(d) for d in self._col.find(flt)]
        except PyMongoError as e:
            raise StoreUnavailableError(str(e)) from e

    def insert(self, record: Record) -> Record:
        doc = dict(record)
        try:
            self._col.insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicateRecordError(f"Duplicate key error: {e}") from e
        except PyMongoError as e:
            raise StoreUnavailableError(str(e)) from e
        return _strip_id(doc)

    def update_fields(self, flt: Filter, fields: Record, unset: Iterable[str] = ()) -> bool:
        update: Dict[str, Any] = {}
        if fields:
            update["$set"] = dict(fields)
        unset = list(unset)
        if unset:
            update["$unset"] = {f: "" for f in unset}
        if not update:
            return self.find_one(flt) is not None
        try:
            result = self._col.update_one(flt, update)
        except DuplicateKeyError as e:
            raise DuplicateRecordError(f"Duplicate key error: {e}") from e
        except PyMongoError as e:
            raise StoreUnavailableError(str(e)) from e
        log.debug("update_fields matched=%s modified=%s", result.matched_count, result.modified_count)
        return result.matched_count > 0
