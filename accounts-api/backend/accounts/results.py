# accounts-api/backend/accounts/results.py
"""
Envelope comum de resposta dos handlers.

Todo handler devolve um BaseResult (ou subclasse). Os helpers success/invalid/
error alteram o próprio objeto e o devolvem, permitindo encadear:

    return MfaEnableResult(...).success()
"""
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

ResultStatus = Literal["ok", "invalid", "error"]


class BaseResult(BaseModel):
    status: ResultStatus = "ok"
    message: Optional[str] = None
    validationErrors: Dict[str, str] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "ok"

    def success(self, message: Optional[str] = None) -> "BaseResult":
        self.status = "ok"
        self.message = message
        return self

    def invalid(self, errors: Optional[Dict[str, str]] = None) -> "BaseResult":
        self.status = "invalid"
        if errors:
            self.validationErrors.update(errors)
        return self

    def error(self, message: str) -> "BaseResult":
        self.status = "error"
        self.message = message
        return self

    def http_status(self) -> int:
        # invalid/error são falhas do cliente; falhas de infraestrutura vão por exceção
        return 200 if self.succeeded else 400
