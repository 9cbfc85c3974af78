from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field


class ForgotRequest(BaseModel):
    username: str
    email: str

class ResetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    new_password: str = Field(alias="newPassword")
