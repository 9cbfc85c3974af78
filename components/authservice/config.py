from __future__ import annotations
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """
    Process-wide, immutable settings. Built once by the app factory and passed
    by reference; store URI, issuer, audience and secret have no defaults.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, frozen=True, extra="ignore")

    MONGO_URI: str = Field(..., min_length=1)
    MONGO_DB: str = Field(default="marketplace")
    MONGO_USERS_COLLECTION: str = Field(default="users")

    AUTH_ISSUER: str = Field(..., min_length=1)
    AUTH_AUDIENCE: str = Field(..., min_length=1)
    AUTH_SECRET: str = Field(..., min_length=1)
    ACCESS_TTL_SECONDS: int = Field(default=3600, gt=0)

    RESET_TTL_SECONDS: int = Field(default=900, gt=0)  # 15 minutes
    RECOVERY_DELIVERY: Literal["response", "log"] = Field(default="response")

    CORS_ORIGINS: str = Field(default="http://localhost:3000")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
