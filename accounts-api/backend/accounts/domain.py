from typing import Protocol, List, Optional
from pydantic import BaseModel, Field

# ------- Entidades (Domínio) -------
# Modelos de domínio tipados com Pydantic (BaseModel):
# - O documento do Mongo é mapeado para Account no repositório
# - Services e routers nunca veem ObjectId nem o formato bruto do documento

class Account(BaseModel):
    # Identificador do documento (string compatível com ObjectId serializado)
    id: str
    email: str
    # Segredo TOTP em base32; None até o primeiro provisionamento
    mfa_secret: Optional[str] = None
    # Só vira True depois de um código verificado contra mfa_secret
    mfa_enabled: bool = False
    email_confirmed: bool = False

class IdentityError(BaseModel):
    code: str
    description: str

class IdentityResult(BaseModel):
    # Resultado de operações do store que podem falhar por regra de negócio
    # (token inválido, expirado...). Falhas de infraestrutura são exceções.
    succeeded: bool
    errors: List[IdentityError] = Field(default_factory=list)

    @classmethod
    def ok(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, code: str, description: str) -> "IdentityResult":
        return cls(succeeded=False, errors=[IdentityError(code=code, description=description)])

# ------- Ports (Interfaces) -------
# Contratos via typing.Protocol (PEP 544):
# - Os handlers dependem só destas operações
# - Mongo em produção, implementação em memória nos testes

class IIdentityStore(Protocol):
    async def find_by_id(self, account_id: str) -> Optional[Account]: ...
    async def find_by_email(self, email: str) -> Optional[Account]: ...

    # Segredo TOTP (autenticador)
    async def get_authenticator_key(self, account: Account) -> Optional[str]: ...
    async def generate_authenticator_key(self, account: Account) -> None:
        """Gera e grava um segredo novo apenas se a conta ainda não tiver um."""
    async def get_email(self, account: Account) -> str: ...
    async def set_two_factor_enabled(self, account: Account, enabled: bool) -> None: ...

    # Tokens opacos emitidos pelo próprio store
    async def confirm_email(self, account: Account, token: str) -> IdentityResult: ...
    async def reset_password(self, account: Account, token: str, new_password: str) -> IdentityResult: ...

class IOtpVerifier(Protocol):
    def verify(self, secret: str, code: str) -> bool:
        """True se `code` é um TOTP válido para `secret` na janela atual."""
