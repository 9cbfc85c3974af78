from typing import Optional

from fastapi import Header, Request

from .service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """The AuthService wired into this app by create_app()."""
    svc = getattr(request.app.state, "auth_service", None)
    if svc is None:
        raise RuntimeError("AuthService not configured on app.state")
    return svc


def get_authorization_header(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> Optional[str]:
    # raw value; AuthService.profile decides whether it is a usable bearer token
    return authorization
