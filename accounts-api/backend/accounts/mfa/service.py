# accounts-api/backend/accounts/mfa/service.py
from typing import Optional

from ..config import mfa_settings
from ..domain import Account, IIdentityStore, IOtpVerifier
from ..errors import AccountNotFound
from ..results import BaseResult
from .dtos import MfaEnableCommand, MfaEnableResult
from .qr import encode_qr_base64
from .totp import build_uri, format_key, normalize_code

INVALID_CODE_MESSAGE = "Verification code is invalid."
VERIFIED_MESSAGE = "Your authenticator app has been verified."


async def _load_account(store: IIdentityStore, account_id: str) -> Account:
    account = await store.find_by_id(account_id)
    if not account:
        print(f"[MFA] Usuário não encontrado para id={account_id}")
        raise AccountNotFound(account_id)
    return account


# ---------------- Provisionamento do segredo ----------------
async def ensure_secret(store: IIdentityStore, account: Account) -> str:
    """
    Devolve o segredo TOTP da conta, gerando-o apenas se ainda não existir.
    Idempotente: com segredo salvo, não escreve nada (evita troca a cada refresh).
    """
    secret = await store.get_authenticator_key(account)
    if not secret:
        await store.generate_authenticator_key(account)
        secret = await store.get_authenticator_key(account)
        print(f"[MFA] Segredo provisionado para id={account.id}")

    account.mfa_secret = secret
    return secret


# ---------------- Flows ----------------
async def load_enrollment(store: IIdentityStore, account_id: str,
                          issuer: Optional[str] = None) -> MfaEnableResult:
    """
    Dados para a tela de ativação: chave formatada, URI otpauth e QR (PNG base64).
    Nada disso é persistido; só o segredo, na primeira chamada.
    """
    account = await _load_account(store, account_id)
    issuer = issuer or mfa_settings()["issuer"]

    unformatted_key = await ensure_secret(store, account)
    email = await store.get_email(account)
    uri = build_uri(issuer, email, unformatted_key)

    result = MfaEnableResult(
        sharedKeyFormatted=format_key(unformatted_key),
        authenticatorUri=uri,
        qrCodeBase64=encode_qr_base64(uri),
    )
    return result.success()


async def verify_and_enable(store: IIdentityStore, verifier: IOtpVerifier,
                            account: Account, submitted_code: str) -> BaseResult:
    """
    Confere o código do app autenticador e, se válido, liga o 2FA da conta.
    Código inválido não altera a conta; o erro volta preso ao campo VerificationCode.
    """
    code = normalize_code(submitted_code)

    secret = account.mfa_secret
    if not secret or not verifier.verify(secret, code):
        print(f"[MFA CONFIRM] Código rejeitado para id={account.id}")
        return BaseResult().invalid({"VerificationCode": INVALID_CODE_MESSAGE})

    if not account.mfa_enabled:
        await store.set_two_factor_enabled(account, True)
        account.mfa_enabled = True
        print(f"[MFA CONFIRM] 2FA habilitado para id={account.id}")

    return BaseResult().success(VERIFIED_MESSAGE)


async def confirm_enrollment(store: IIdentityStore, verifier: IOtpVerifier,
                             account_id: str, command: MfaEnableCommand) -> BaseResult:
    account = await _load_account(store, account_id)
    return await verify_and_enable(store, verifier, account, command.verificationCode)
