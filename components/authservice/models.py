from __future__ import annotations
import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """
    Stored user document. Field aliases are the on-disk names.
    `reset_token` and `reset_expires` are either both set or both absent.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    username: str
    email: Optional[str] = None
    password_hash: str = Field(alias="passwordHash")
    salt: str
    reset_token: Optional[str] = Field(default=None, alias="resetToken")
    reset_expires: Optional[int] = Field(default=None, alias="resetExpires")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "UserRecord":
        return cls.model_validate(doc)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def has_pending_reset(self) -> bool:
        return self.reset_token is not None and self.reset_expires is not None
