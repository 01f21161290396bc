# accounts-api/backend/accounts/security.py
from typing import Any, Dict, Optional

import jwt            # PyJWT
from fastapi import Header, HTTPException, status

from .config import jwt_settings


def decode_bearer(authorization_header: str) -> Optional[Dict[str, Any]]:
    if not authorization_header or not authorization_header.lower().startswith("bearer "):
        print("[AUTH] Authorization ausente/sem Bearer")
        return None
    token = authorization_header.split(" ", 1)[1].strip()
    s = jwt_settings()
    try:
        return jwt.decode(token, s["secret"], algorithms=[s["alg"]])
    except jwt.PyJWTError as e:
        print(f"[AUTH] Falha ao decodificar JWT: {e}")
        return None


async def current_account_id(authorization: str = Header(default="")) -> str:
    """
    Dependência FastAPI: id da conta autenticada (claim sub/userId do Bearer).
    O id é passado explicitamente aos handlers; não há usuário "global".
    """
    claims = decode_bearer(authorization)
    account_id = (claims or {}).get("sub") or (claims or {}).get("userId")
    if not account_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return str(account_id)
