# accounts-api/backend/accounts/errors.py
"""
Falhas que atravessam as camadas (store -> service -> router).

Erros de validação NÃO estão aqui: eles viram BaseResult.invalid() e são
devolvidos ao cliente como resposta estruturada, nunca lançados.
"""


class AccountsError(Exception):
    """Base de todas as falhas do backend de contas."""


class AccountNotFound(AccountsError):
    def __init__(self, account_id: str):
        super().__init__(f"Unable to load user with ID '{account_id}'.")
        self.account_id = account_id


class StoreUnavailable(AccountsError):
    """Falha transitória do identity store (Mongo fora, timeout, etc.). Sem retry aqui."""


class EncodingTooLarge(AccountsError):
    """O texto não cabe em nenhum QR code (versão 40, correção L)."""
