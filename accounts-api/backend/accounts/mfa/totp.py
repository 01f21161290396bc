# accounts-api/backend/accounts/mfa/totp.py
from typing import Optional
from urllib.parse import quote

import pyotp

from ..config import mfa_settings

# a URI anuncia sempre 6 dígitos; o verificador não pode divergir disso
TOTP_DIGITS = 6
AUTHENTICATOR_URI_FORMAT = "otpauth://totp/{issuer}:{label}?secret={secret}&issuer={issuer}&digits=6"


def format_key(unformatted_key: str) -> str:
    """
    Agrupa o segredo em blocos de 4 caracteres separados por espaço, em
    minúsculas, para digitação manual no app autenticador.
    O último bloco pode ficar menor; string vazia devolve string vazia.
    """
    groups = [unformatted_key[i:i + 4] for i in range(0, len(unformatted_key), 4)]
    return " ".join(groups).lower()


def _encode_component(value: str) -> str:
    # safe="" => ':' '/' '@' e espaço também são escapados (espaço vira %20)
    return quote(value, safe="")


def build_uri(issuer: str, label: str, secret: str) -> str:
    """
    Monta a URI otpauth:// lida pelos apps autenticadores.
    issuer e label são percent-encoded; o segredo (base32) entra como está.
    """
    return AUTHENTICATOR_URI_FORMAT.format(
        issuer=_encode_component(issuer),
        label=_encode_component(label),
        secret=secret,
    )


def normalize_code(code: str) -> str:
    # apps costumam exibir "123 456" ou "123-456"
    return code.replace(" ", "").replace("-", "")


class TotpVerifier:
    """
    Verificador RFC 6238 sobre pyotp.
    interval/valid_window vêm do ambiente (MFA_*) quando não informados;
    o número de dígitos é fixo (TOTP_DIGITS).
    """

    def __init__(self, interval: Optional[int] = None, valid_window: Optional[int] = None):
        s = mfa_settings()
        self.digits = TOTP_DIGITS
        self.interval = interval if interval is not None else s["interval"]
        self.valid_window = valid_window if valid_window is not None else s["valid_window"]

    def verify(self, secret: str, code: str) -> bool:
        if not secret or not code:
            return False
        totp = pyotp.TOTP(secret, digits=self.digits, interval=self.interval)
        return totp.verify(code, valid_window=self.valid_window)
