from __future__ import annotations
from fastapi import APIRouter

from components.authservice.contracts import HealthResponse

router = APIRouter()

@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()
