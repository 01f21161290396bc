# accounts-api/backend/accounts/mfa/dtos.py
from pydantic import BaseModel, Field, field_validator

from ..results import BaseResult


class MfaEnableResult(BaseResult):
    sharedKeyFormatted: str = ""
    authenticatorUri: str = ""
    qrCodeBase64: str = ""


class MfaEnableCommand(BaseModel):
    # tamanho conferido antes da normalização (espaços/hífens contam)
    verificationCode: str = Field(..., min_length=6, max_length=8)

    @field_validator("verificationCode")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v
