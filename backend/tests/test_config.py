import pytest

from exampin.config import Settings, get_settings
from exampin.errors import ConfigError


def test_defaults(monkeypatch):
    for name in ("STORAGE_BACKEND", "DATA_DIR", "CORS_ORIGINS", "ENFORCE_PIN_CHECK", "CSV_BOM", "PIN_MAX_ATTEMPTS", "PORT"):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings.storage_backend == "file"
    assert settings.enforce_pin_check is True
    assert settings.csv_bom is True
    assert settings.cors_origins == ["*"]
    assert settings.port == 3000


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "Database")
    monkeypatch.setenv("ENFORCE_PIN_CHECK", "false")
    monkeypatch.setenv("CSV_BOM", "0")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, http://127.0.0.1:5173")
    monkeypatch.setenv("PIN_MAX_ATTEMPTS", "10")

    settings = get_settings()
    assert settings.storage_backend == "database"
    assert settings.enforce_pin_check is False
    assert settings.csv_bom is False
    assert settings.cors_origins == ["http://localhost:5173", "http://127.0.0.1:5173"]
    assert settings.pin_max_attempts == 10


def test_invalid_values_raise(monkeypatch):
    monkeypatch.setenv("PIN_MAX_ATTEMPTS", "many")
    with pytest.raises(ConfigError):
        get_settings()

    with pytest.raises(ConfigError):
        Settings(storage_backend="mongo")
    with pytest.raises(ConfigError):
        Settings(pin_max_attempts=0)
