"""Shared fixtures: in-memory identity store, fixed OTP verifier and a test app."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import jwt
import pytest
from fastapi.testclient import TestClient

from accounts.api import create_app
from accounts.config import jwt_settings
from accounts.domain import Account, IdentityResult
from accounts.errors import StoreUnavailable
from accounts.security import current_account_id
from accounts.deps import get_verifier


class InMemoryIdentityStore:
    """Implements IIdentityStore over dicts and records every mutating call."""

    def __init__(self):
        self.accounts: Dict[str, Account] = {}
        self.secret_generations = 0
        self.enable_calls: List[bool] = []
        self.email_tokens: Dict[str, str] = {}
        self.reset_tokens: Dict[str, str] = {}
        self.passwords: Dict[str, str] = {}
        self.unavailable = False
        self.next_secret = "JBSWY3DPEHPK3PXP"

    def add(self, email: str, **fields) -> Account:
        account = Account(id=uuid.uuid4().hex[:24], email=email, **fields)
        self.accounts[account.id] = account
        return account

    def _check(self):
        if self.unavailable:
            raise StoreUnavailable("store offline")

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        self._check()
        found = self.accounts.get(account_id)
        return found.model_copy() if found else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        self._check()
        for a in self.accounts.values():
            if a.email.casefold() == email.strip().casefold():
                return a.model_copy()
        return None

    async def get_authenticator_key(self, account: Account) -> Optional[str]:
        self._check()
        return self.accounts[account.id].mfa_secret

    async def generate_authenticator_key(self, account: Account) -> None:
        self._check()
        stored = self.accounts[account.id]
        if stored.mfa_secret is None:
            self.secret_generations += 1
            stored.mfa_secret = self.next_secret

    async def get_email(self, account: Account) -> str:
        self._check()
        return self.accounts[account.id].email

    async def set_two_factor_enabled(self, account: Account, enabled: bool) -> None:
        self._check()
        self.enable_calls.append(enabled)
        self.accounts[account.id].mfa_enabled = enabled

    def issue_email_token(self, account: Account) -> str:
        token = f"email-{uuid.uuid4().hex}"
        self.email_tokens[token] = account.id
        return token

    def issue_reset_token(self, account: Account) -> str:
        token = f"reset-{uuid.uuid4().hex}"
        self.reset_tokens[token] = account.id
        return token

    async def confirm_email(self, account: Account, token: str) -> IdentityResult:
        self._check()
        if self.email_tokens.get(token) != account.id:
            return IdentityResult.failed("InvalidToken", "Invalid token.")
        self.accounts[account.id].email_confirmed = True
        return IdentityResult.ok()

    async def reset_password(self, account: Account, token: str, new_password: str) -> IdentityResult:
        self._check()
        if self.reset_tokens.pop(token, None) != account.id:
            return IdentityResult.failed("InvalidToken", "Invalid token.")
        self.passwords[account.id] = new_password
        return IdentityResult.ok()


class FixedVerifier:
    """Accepts exactly one code and remembers what it was asked."""

    def __init__(self, valid_code: str = "123456"):
        self.valid_code = valid_code
        self.calls = []

    def verify(self, secret: str, code: str) -> bool:
        self.calls.append((secret, code))
        return code == self.valid_code


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "accounts-test-secret-with-enough-bytes-00")
    for key in ("MFA_ISSUER", "MFA_DIGITS", "MFA_INTERVAL", "MFA_VALID_WINDOW", "CORS_ORIGINS"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def issue_token():
    """Mints Bearer tokens the way the external login service does."""
    def _issue(payload, hours=1):
        s = jwt_settings()
        now = datetime.now(timezone.utc)
        claims = {**payload, "iat": int(now.timestamp()),
                  "exp": int((now + timedelta(hours=hours)).timestamp())}
        return jwt.encode(claims, s["secret"], algorithm=s["alg"])
    return _issue


@pytest.fixture
def store():
    return InMemoryIdentityStore()


@pytest.fixture
def verifier():
    return FixedVerifier()


@pytest.fixture
def account(store):
    return store.add("ana@example.com")


@pytest.fixture
def app(store, verifier, account):
    # Sem "with TestClient(...)": o startup (Mongo) não roda nos testes
    application = create_app()
    application.state.store = store
    application.dependency_overrides[current_account_id] = lambda: account.id
    application.dependency_overrides[get_verifier] = lambda: verifier
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
