"""Server entry point wiring."""

from fastapi import FastAPI

import run
from accounts.config import server_settings


def test_main_passes_env_settings_to_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(run.uvicorn, "run", lambda app, **kw: calls.append((app, kw)))
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "9001")
    monkeypatch.setenv("API_LOG_LEVEL", "WARNING")

    run.main()

    app, kwargs = calls[0]
    assert isinstance(app, FastAPI)
    assert kwargs == {"host": "127.0.0.1", "port": 9001, "log_level": "warning"}


def test_server_settings_fall_back_on_bad_port(monkeypatch):
    monkeypatch.setenv("API_PORT", "eighty")
    monkeypatch.delenv("API_LOG_LEVEL", raising=False)
    s = server_settings()
    assert s["port"] == 8000
    assert s["log_level"] == "info"
