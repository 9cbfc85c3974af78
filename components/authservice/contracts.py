from __future__ import annotations
from typing import Optional
from pydantic import BaseModel


# ---------- Service I/O ----------
class SignupRequest(BaseModel):
    username: str
    password: str
    email: Optional[str] = None

class LoginRequest(BaseModel):
    username: str
    password: str

class MessageResponse(BaseModel):
    message: str

class LoginResponse(BaseModel):
    message: str
    token: str

class HealthResponse(BaseModel):
    status: str = "ok"
