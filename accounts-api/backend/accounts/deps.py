# accounts-api/backend/accounts/deps.py
from fastapi import HTTPException, Request

from .domain import IIdentityStore, IOtpVerifier
from .mfa.totp import TotpVerifier


def get_store(request: Request) -> IIdentityStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=500, detail="Identity store não inicializado")
    return store


def get_verifier() -> IOtpVerifier:
    return TotpVerifier()
