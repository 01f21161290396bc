# accounts-api/backend/run.py
"""
Ponto de entrada do servidor (uvicorn) do backend de contas.

Variáveis: API_HOST, API_PORT, API_LOG_LEVEL (além das lidas por accounts.config).
"""
import os
import uvicorn
from dotenv import load_dotenv

# .env da pasta do backend precisa estar carregado antes de importar accounts.api
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))

from accounts.api import create_app
from accounts.config import server_settings


def main():
    s = server_settings()
    print(f"[STARTUP] Accounts API em {s['host']}:{s['port']}")
    uvicorn.run(create_app(), host=s["host"], port=s["port"], log_level=s["log_level"])


if __name__ == "__main__":
    main()
