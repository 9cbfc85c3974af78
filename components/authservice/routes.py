from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from .contracts import LoginRequest, LoginResponse, MessageResponse, SignupRequest
from .deps import get_auth_service, get_authorization_header
from .errors import AuthServiceException
from .service import AuthService

router = APIRouter(prefix="/api", tags=["auth"])


def error_response(ex: AuthServiceException) -> JSONResponse:
    return JSONResponse(status_code=ex.status_code, content=ex.to_payload())


@router.post("/signup", response_model=MessageResponse)
def signup(req: SignupRequest, svc: AuthService = Depends(get_auth_service)):
    try:
        return svc.signup(req.username, req.password, req.email)
    except AuthServiceException as ex:
        return error_response(ex)

@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, svc: AuthService = Depends(get_auth_service)):
    try:
        return svc.login(req.username, req.password)
    except AuthServiceException as ex:
        return error_response(ex)

@router.get("/profile", response_model=MessageResponse)
def profile(
    authorization: Optional[str] = Depends(get_authorization_header),
    svc: AuthService = Depends(get_auth_service),
):
    return svc.profile(authorization)
