# accounts-api/backend/accounts/account/service.py
"""
Fluxos de conta sem autenticação: confirmação de e-mail e redefinição de senha.

Os códigos chegam em base64url (como foram colocados no link enviado por
e-mail) e são decodificados para o token opaco emitido pelo identity store.
Quem valida o token é sempre o store.
"""
import base64
import binascii
import re
from typing import Optional

from ..domain import IIdentityStore
from .dtos import (
    ConfirmEmailCommand,
    ConfirmEmailResult,
    ResetPasswordCommand,
    ResetPasswordResult,
)

_BASE64URL = re.compile(r"[A-Za-z0-9_-]*={0,2}")

CONFIRM_ERROR_MESSAGE = "Error confirming your email."
CONFIRM_OK_MESSAGE = "Thank you for confirming your email. You may now login."
INVALID_TOKEN_MESSAGE = "Invalid token."


def encode_token(token: str) -> str:
    """Forma usada nos links: base64url sem padding."""
    return base64.urlsafe_b64encode(token.encode("utf-8")).decode("ascii").rstrip("=")


def decode_token(code: str) -> Optional[str]:
    """
    base64url -> token UTF-8. Padding é opcional; código malformado devolve None.
    Caracteres fora do alfabeto invalidam o código (o decoder da stdlib os ignoraria).
    """
    if not _BASE64URL.fullmatch(code):
        return None
    padded = code + "=" * (-len(code) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None


async def confirm_email(store: IIdentityStore, command: ConfirmEmailCommand) -> ConfirmEmailResult:
    account = await store.find_by_id(command.userId)
    if not account:
        return ConfirmEmailResult().error(f"Unable to load user with ID '{command.userId}'.")

    token = decode_token(command.code)
    if token is None:
        print(f"[ACCOUNT] Código de confirmação malformado para id={account.id}")
        return ConfirmEmailResult().error(CONFIRM_ERROR_MESSAGE)

    result = await store.confirm_email(account, token)
    if not result.succeeded:
        return ConfirmEmailResult().error(CONFIRM_ERROR_MESSAGE)

    print(f"[ACCOUNT] E-mail confirmado para id={account.id}")
    return ConfirmEmailResult().success(CONFIRM_OK_MESSAGE)


async def reset_password(store: IIdentityStore, command: ResetPasswordCommand) -> ResetPasswordResult:
    account = await store.find_by_email(command.email)
    if not account:
        # Não revela se o e-mail existe
        return ResetPasswordResult().success()

    token = decode_token(command.code)
    if token is None:
        return ResetPasswordResult().error(INVALID_TOKEN_MESSAGE)

    result = await store.reset_password(account, token, command.password)
    if not result.succeeded:
        message = result.errors[0].description if result.errors else INVALID_TOKEN_MESSAGE
        return ResetPasswordResult().error(message)

    print(f"[ACCOUNT] Senha redefinida para id={account.id}")
    return ResetPasswordResult().success()
