# accounts-api/backend/accounts/account/dtos.py
from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from ..results import BaseResult


def not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be empty")
    return v


class ConfirmEmailCommand(BaseModel):
    userId: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)

    check_not_blank = field_validator("userId", "code")(not_blank)


class ConfirmEmailResult(BaseResult):
    requiresEmailConfirmation: bool = False


class ResetPasswordCommand(BaseModel):
    code: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirmPassword: str

    check_not_blank = field_validator("code")(not_blank)

    @field_validator("confirmPassword")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        # password inválido não entra em info.data; o erro já sai no próprio campo
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("must match password")
        return v


class ResetPasswordResult(BaseResult):
    pass
