from fastapi import Request

from .service import RecoveryService


def get_recovery_service(request: Request) -> RecoveryService:
    svc = getattr(request.app.state, "recovery_service", None)
    if svc is None:
        raise RuntimeError("RecoveryService not configured on app.state")
    return svc
