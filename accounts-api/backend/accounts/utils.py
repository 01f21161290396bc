import os

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

def enable_cors(app: FastAPI):
    """
    Registra o middleware de CORS no aplicativo FastAPI.

    - CORS_ORIGINS (lista separada por vírgula) restringe as origens; sem a
      variável, qualquer origem é aceita (ambiente de desenvolvimento).
    - Authorization precisa passar nos headers: as rotas /manage usam Bearer.
    """
    raw = os.getenv("CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()] or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],  # credenciais não combinam com origem curinga
        allow_methods=["*"],
        allow_headers=["*"],
    )
