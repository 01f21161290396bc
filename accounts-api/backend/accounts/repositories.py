import functools
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt            # PyJWT
import pyotp
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from passlib.hash import bcrypt
from pymongo.collation import Collation, CollationStrength
from pymongo.errors import PyMongoError

from .config import jwt_settings, token_settings
from .domain import Account, IIdentityStore, IdentityResult
from .errors import StoreUnavailable

PURPOSE_CONFIRM_EMAIL = "confirm_email"
PURPOSE_RESET_PASSWORD = "reset_password"

# E-mail comparado sem diferenciar maiúsculas/minúsculas; índice e consulta
# usam a mesma collation.
EMAIL_COLLATION = Collation(locale="en", strength=CollationStrength.SECONDARY)
EMAIL_INDEX_NAME = "uniq_email_ci"


def _store_call(fn):
    # Qualquer falha do driver vira StoreUnavailable (sem retry nesta camada).
    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except PyMongoError as e:
            print(f"[STORE] {fn.__name__} falhou: {e}")
            raise StoreUnavailable(str(e)) from e
    return wrapper


def _oid(account_id) -> Optional[ObjectId]:
    if isinstance(account_id, ObjectId):
        return account_id
    try:
        return ObjectId(account_id)
    except (InvalidId, TypeError):
        return None


def _new_stamp() -> str:
    return uuid.uuid4().hex


class MongoIdentityStore(IIdentityStore):
    # Repositório da coleção "users"; cumpre IIdentityStore.
    # Campos de MFA ficam aninhados em "mfa" ({secret, enabled}).

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.col = db["users"]

    @staticmethod
    def _to_account(doc: Dict[str, Any]) -> Account:
        mfa = doc.get("mfa") or {}
        return Account(
            id=str(doc["_id"]),
            email=doc.get("email") or "",
            mfa_secret=mfa.get("secret"),
            mfa_enabled=bool(mfa.get("enabled")),
            email_confirmed=bool(doc.get("emailConfirmed")),
        )

    @_store_call
    async def ensure_indexes(self) -> None:
        await self.col.create_index(
            "email", name=EMAIL_INDEX_NAME, unique=True, collation=EMAIL_COLLATION,
        )

    async def _find_doc(self, account_id, projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        _id = _oid(account_id)
        if _id is None:
            return None
        return await self.col.find_one({"_id": _id}, projection)

    # ---------------- Consultas ----------------
    @_store_call
    async def find_by_id(self, account_id: str) -> Optional[Account]:
        doc = await self._find_doc(account_id)
        return self._to_account(doc) if doc else None

    @_store_call
    async def find_by_email(self, email: str) -> Optional[Account]:
        doc = await self.col.find_one({"email": email.strip()}, collation=EMAIL_COLLATION)
        return self._to_account(doc) if doc else None

    @_store_call
    async def get_email(self, account: Account) -> str:
        doc = await self._find_doc(account.id, {"email": 1})
        return (doc or {}).get("email") or account.email

    # ---------------- Autenticador (TOTP) ----------------
    @_store_call
    async def get_authenticator_key(self, account: Account) -> Optional[str]:
        doc = await self._find_doc(account.id, {"mfa.secret": 1})
        return ((doc or {}).get("mfa") or {}).get("secret")

    @_store_call
    async def generate_authenticator_key(self, account: Account) -> None:
        # Filtro condicional: em corridas de primeiro provisionamento só a
        # primeira escrita vence e todos leem o mesmo segredo depois.
        # {"mfa.secret": None} casa campo ausente ou nulo.
        await self.col.update_one(
            {"_id": _oid(account.id), "mfa.secret": None},
            {"$set": {"mfa.secret": pyotp.random_base32(), "mfa.enabled": False}},
        )

    @_store_call
    async def set_two_factor_enabled(self, account: Account, enabled: bool) -> None:
        await self.col.update_one({"_id": _oid(account.id)}, {"$set": {"mfa.enabled": enabled}})

    # ---------------- Tokens (e-mail / senha) ----------------
    def _issue(self, claims: Dict[str, Any], hours: int) -> str:
        s = jwt_settings()
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": int(now.timestamp()), "exp": int((now + timedelta(hours=hours)).timestamp())}
        return jwt.encode(payload, s["secret"], algorithm=s["alg"])

    def _read(self, token: str, purpose: str, account: Account) -> Optional[Dict[str, Any]]:
        s = jwt_settings()
        try:
            claims = jwt.decode(token, s["secret"], algorithms=[s["alg"]])
        except jwt.PyJWTError as e:
            print(f"[STORE] Token rejeitado ({purpose}): {e}")
            return None
        if claims.get("purpose") != purpose or claims.get("sub") != account.id:
            return None
        return claims

    async def generate_email_confirmation_token(self, account: Account) -> str:
        claims = {"sub": account.id, "purpose": PURPOSE_CONFIRM_EMAIL, "email": account.email}
        return self._issue(claims, token_settings()["email_h"])

    @_store_call
    async def confirm_email(self, account: Account, token: str) -> IdentityResult:
        claims = self._read(token, PURPOSE_CONFIRM_EMAIL, account)
        if not claims or claims.get("email") != account.email:
            return IdentityResult.failed("InvalidToken", "Invalid token.")
        await self.col.update_one({"_id": _oid(account.id)}, {"$set": {"emailConfirmed": True}})
        return IdentityResult.ok()

    @_store_call
    async def generate_password_reset_token(self, account: Account) -> str:
        doc = await self._find_doc(account.id, {"securityStamp": 1}) or {}
        stamp = doc.get("securityStamp")
        if not stamp:
            stamp = _new_stamp()
            await self.col.update_one({"_id": _oid(account.id)}, {"$set": {"securityStamp": stamp}})
        claims = {"sub": account.id, "purpose": PURPOSE_RESET_PASSWORD, "stamp": stamp}
        return self._issue(claims, token_settings()["reset_h"])

    @_store_call
    async def reset_password(self, account: Account, token: str, new_password: str) -> IdentityResult:
        claims = self._read(token, PURPOSE_RESET_PASSWORD, account)
        if not claims:
            return IdentityResult.failed("InvalidToken", "Invalid token.")

        # O stamp gira a cada troca de senha: o mesmo token não serve duas vezes.
        res = await self.col.update_one(
            {"_id": _oid(account.id), "securityStamp": claims.get("stamp")},
            {"$set": {"passwordHash": bcrypt.hash(new_password), "securityStamp": _new_stamp()}},
        )
        if res.matched_count == 0:
            return IdentityResult.failed("InvalidToken", "Invalid token.")
        return IdentityResult.ok()
