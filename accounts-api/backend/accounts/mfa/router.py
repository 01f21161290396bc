# accounts-api/backend/accounts/mfa/router.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_store, get_verifier
from ..domain import IIdentityStore, IOtpVerifier
from ..security import current_account_id
from .dtos import MfaEnableCommand, MfaEnableResult
from .service import confirm_enrollment, load_enrollment

router = APIRouter(prefix="/api/account/manage", tags=["mfa"])


@router.get("/mfa-enable", response_model=MfaEnableResult)
async def mfa_enable_info(account_id: str = Depends(current_account_id),
                          store: IIdentityStore = Depends(get_store)):
    return await load_enrollment(store, account_id)


@router.post("/mfa-enable")
async def mfa_enable(command: MfaEnableCommand,
                     account_id: str = Depends(current_account_id),
                     store: IIdentityStore = Depends(get_store),
                     verifier: IOtpVerifier = Depends(get_verifier)):
    result = await confirm_enrollment(store, verifier, account_id, command)
    return JSONResponse(status_code=result.http_status(), content=result.model_dump())
