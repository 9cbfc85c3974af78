from __future__ import annotations
from fastapi import APIRouter, Depends

from components.authservice import AuthServiceException, error_response
from components.authservice.contracts import MessageResponse

from .contracts import ForgotRequest, ResetRequest
from .deps import get_recovery_service
from .service import RecoveryService

router = APIRouter(prefix="/api", tags=["recovery"])

@router.post("/forgot", response_model=MessageResponse)
def forgot(req: ForgotRequest, svc: RecoveryService = Depends(get_recovery_service)):
    try:
        return svc.forgot(req.username, req.email)
    except AuthServiceException as ex:
        return error_response(ex)

@router.post("/reset", response_model=MessageResponse)
def reset(req: ResetRequest, svc: RecoveryService = Depends(get_recovery_service)):
    try:
        return svc.reset(req.token, req.new_password)
    except AuthServiceException as ex:
        return error_response(ex)
