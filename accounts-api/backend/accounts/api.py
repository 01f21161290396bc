"""
Módulo principal FastAPI do backend de contas.

Aqui nós:

- Carregamos variáveis de ambiente do .env.
- Criamos o objeto FastAPI com CORS liberado.
- Conectamos ao MongoDB usando Motor (async) e publicamos o identity store
  em app.state.store.
- Convertimos erros de validação e falhas de infraestrutura no envelope
  BaseResult.
- Registramos os routers:
    - /api/account/*          (confirmação de e-mail, redefinição de senha)
    - /api/account/manage/*   (ativação de MFA)
"""

import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv

# Carrega o .env ANTES de importar routers/módulos que leem o ambiente
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))

from .config import mongo_settings
from .errors import AccountNotFound, EncodingTooLarge, StoreUnavailable
from .repositories import MongoIdentityStore
from .results import BaseResult
from .utils import enable_cors

from .account.router import router as account_router
from .mfa.router import router as mfa_router


mongo_client: Optional[AsyncIOMotorClient] = None


def _field_key(loc) -> str:
    # ("body", "verificationCode") -> "VerificationCode"
    name = str(loc[-1]) if loc else ""
    return name[:1].upper() + name[1:]


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=BaseResult().error(message).model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        errors = {}
        for err in exc.errors():
            # primeira mensagem por campo
            errors.setdefault(_field_key(err.get("loc", ())), err.get("msg", "Invalid value."))
        return JSONResponse(status_code=400, content=BaseResult().invalid(errors).model_dump())

    @app.exception_handler(AccountNotFound)
    async def _not_found(request: Request, exc: AccountNotFound):
        return _error_response(404, str(exc))

    @app.exception_handler(StoreUnavailable)
    async def _store_unavailable(request: Request, exc: StoreUnavailable):
        return _error_response(503, "Serviço de contas indisponível. Tente novamente.")

    @app.exception_handler(EncodingTooLarge)
    async def _encoding_too_large(request: Request, exc: EncodingTooLarge):
        print(f"[MFA] QR code não gerado: {exc}")
        return _error_response(500, "Não foi possível gerar o QR code.")


# -------------------------------------------------------------------
# Factory para criar a aplicação FastAPI
# -------------------------------------------------------------------
def create_app() -> FastAPI:
    """
    Cria e configura a aplicação FastAPI:

    - CORS aberto (ajustar por ambiente).
    - Eventos de startup/shutdown (conexão Mongo).
    - Rota /health.
    - Handlers de erro e routers de conta/MFA.
    """
    app = FastAPI(title="Accounts API")

    enable_cors(app)
    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return {"ok": True}

    # ------------------------ STARTUP ------------------------
    @app.on_event("startup")
    async def _startup():
        global mongo_client

        s = mongo_settings()
        mongo_client = AsyncIOMotorClient(s["uri"], serverSelectionTimeoutMS=s["timeout_ms"])
        db = mongo_client[s["db"]]
        app.state.db = db

        store = MongoIdentityStore(db)
        try:
            await store.ensure_indexes()
        except StoreUnavailable as e:
            # A API sobe mesmo assim; as rotas respondem 503 até o Mongo voltar
            print(f"[STARTUP] Falha ao garantir índices de users: {e}")
        app.state.store = store
        print(f"[STARTUP] Identity store pronto (db={s['db']}).")

    # ------------------------ SHUTDOWN ------------------------
    @app.on_event("shutdown")
    async def _shutdown():
        global mongo_client
        if mongo_client:
            mongo_client.close()
            mongo_client = None
            print("[SHUTDOWN] Conexão MongoDB fechada.")

    # ------------------------ Routers ------------------------
    app.include_router(account_router)   # /api/account/*
    app.include_router(mfa_router)       # /api/account/manage/*

    return app


# Instância global usada pelo Uvicorn / Gunicorn
app = create_app()
