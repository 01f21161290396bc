# accounts-api/backend/accounts/account/router.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_store
from ..domain import IIdentityStore
from .dtos import ConfirmEmailCommand, ResetPasswordCommand
from .service import confirm_email, reset_password

router = APIRouter(prefix="/api/account", tags=["account"])


@router.post("/confirm-email")
async def confirm_email_route(command: ConfirmEmailCommand,
                              store: IIdentityStore = Depends(get_store)):
    result = await confirm_email(store, command)
    return JSONResponse(status_code=result.http_status(), content=result.model_dump())


@router.post("/reset-password")
async def reset_password_route(command: ResetPasswordCommand,
                               store: IIdentityStore = Depends(get_store)):
    result = await reset_password(store, command)
    return JSONResponse(status_code=result.http_status(), content=result.model_dump())
