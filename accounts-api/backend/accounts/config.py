# accounts-api/backend/accounts/config.py
"""
Leitura centralizada das variáveis de ambiente.

Cada grupo de configuração é devolvido como dict por uma função, lida a cada
chamada (assim testes podem alterar o ambiente com monkeypatch sem recarregar
módulos). O .env é carregado por run.py / api.py antes de qualquer leitura.
"""
import os
from typing import Any, Dict


def _env_int(key: str, default: int) -> int:
    """
    Converte variável de ambiente para int com fallback seguro.
    - Valores ausentes ou malformados caem no default.
    """
    try:
        return int(os.getenv(key, str(default)))
    except (TypeError, ValueError):
        return default


def jwt_settings() -> Dict[str, Any]:
    return {
        "secret": os.getenv("JWT_SECRET", "changeme"),
        "alg": os.getenv("JWT_ALG", "HS256"),
    }


def mfa_settings() -> Dict[str, Any]:
    return {
        "issuer": os.getenv("MFA_ISSUER", "Accounts.Server"),
        "interval": _env_int("MFA_INTERVAL", 30),
        "valid_window": _env_int("MFA_VALID_WINDOW", 1),
    }


def token_settings() -> Dict[str, Any]:
    return {
        "email_h": _env_int("EMAIL_TOKEN_HOURS", 48),
        "reset_h": _env_int("RESET_TOKEN_HOURS", 2),
    }


def mongo_settings() -> Dict[str, Any]:
    return {
        "uri": os.getenv("MONGODB_URI", "mongodb://localhost:27017/accounts"),
        "db": os.getenv("MONGODB_DB", "accounts"),
        "timeout_ms": _env_int("MONGODB_TIMEOUT_MS", 6000),
    }


def server_settings() -> Dict[str, Any]:
    return {
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 8000),
        "log_level": os.getenv("API_LOG_LEVEL", "info").lower(),
    }
