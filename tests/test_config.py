"""Settings — environment overrides and validated defaults."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from chargebacks.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.db_path == Path("chargebacks.db")
    assert settings.lock_timeout_seconds == 1.0
    assert settings.port == 8080


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("LOCK_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("CORS_ORIGINS", '["http://localhost:5173"]')
    settings = Settings(_env_file=None)
    assert settings.db_path == tmp_path / "x.db"
    assert settings.lock_timeout_seconds == 2.5
    assert settings.cors_origins == ["http://localhost:5173"]


def test_rejects_non_positive_lock_timeout(monkeypatch):
    monkeypatch.setenv("LOCK_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
