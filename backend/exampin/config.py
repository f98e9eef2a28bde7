from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv
import os

from .errors import ConfigError

load_dotenv()

BACKENDS = ("file", "database")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    """Runtime configuration, read from the environment (and a .env file if present)."""

    storage_backend: str = "file"
    data_dir: str = "./data"
    database_url: str = "sqlite+aiosqlite:///./exampin.db"
    database_echo: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    enforce_pin_check: bool = True
    csv_bom: bool = True
    pin_max_attempts: int = 1000
    public_dir: Optional[str] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    def __post_init__(self):
        if self.storage_backend not in BACKENDS:
            raise ConfigError(
                f"STORAGE_BACKEND must be one of {', '.join(BACKENDS)}, got {self.storage_backend!r}"
            )
        if self.pin_max_attempts < 1:
            raise ConfigError("PIN_MAX_ATTEMPTS must be a positive integer")


def get_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        storage_backend=os.getenv("STORAGE_BACKEND", "file").strip().lower(),
        data_dir=os.getenv("DATA_DIR", "./data"),
        database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./exampin.db"),
        database_echo=_env_bool("DATABASE_ECHO", False),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        enforce_pin_check=_env_bool("ENFORCE_PIN_CHECK", True),
        csv_bom=_env_bool("CSV_BOM", True),
        pin_max_attempts=_env_int("PIN_MAX_ATTEMPTS", 1000),
        public_dir=os.getenv("PUBLIC_DIR") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
    )
