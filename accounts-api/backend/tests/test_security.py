"""Bearer token handling and the current-account dependency."""

import jwt
import pytest
from fastapi import HTTPException

from accounts.security import current_account_id, decode_bearer

SECRET = "security-test-secret-with-enough-bytes-01"


@pytest.fixture(autouse=True)
def jwt_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.setenv("JWT_ALG", "HS256")


def test_issue_and_decode(issue_token):
    token = issue_token({"sub": "abc"})
    claims = decode_bearer(f"Bearer {token}")
    assert claims["sub"] == "abc"
    assert claims["exp"] > claims["iat"]


@pytest.mark.parametrize("header", ["", "Basic dXNlcjpwYXNz", "Bearer not.a.jwt"])
def test_decode_rejects_bad_headers(header):
    assert decode_bearer(header) is None


def test_decode_rejects_foreign_signature():
    token = jwt.encode({"sub": "abc"}, "another-secret-with-enough-bytes-000000", algorithm="HS256")
    assert decode_bearer(f"Bearer {token}") is None


@pytest.mark.asyncio
async def test_current_account_id_prefers_sub(issue_token):
    token = issue_token({"sub": "abc", "userId": "zzz"})
    assert await current_account_id(f"Bearer {token}") == "abc"


@pytest.mark.asyncio
async def test_current_account_id_without_subject(issue_token):
    token = issue_token({"role": "user"})
    with pytest.raises(HTTPException) as exc:
        await current_account_id(f"Bearer {token}")
    assert exc.value.status_code == 401


def test_decode_rejects_expired_token(issue_token):
    token = issue_token({"sub": "abc"}, hours=-1)
    assert decode_bearer(f"Bearer {token}") is None
