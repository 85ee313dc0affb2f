import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./challenge_admin.db")
    AUTO_CREATE_SCHEMA: bool = _env_flag("AUTO_CREATE_SCHEMA")
    ADMIN_API_TOKEN: str = os.getenv("ADMIN_API_TOKEN", "").strip()
    DB_STATEMENT_TIMEOUT_MS: int = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "5000"))
    DB_POOL_TIMEOUT_S: int = int(os.getenv("DB_POOL_TIMEOUT_S", "10"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    LOG_JSON: bool = _env_flag("LOG_JSON", "1")
    # Operator debug switch, read once here and handed to configure_logging.
    DEBUG_VERBOSE_LOGGING: bool = _env_flag("DEBUG_VERBOSE_LOGGING")
    CORS_ORIGINS: list[str] = [
        item.strip()
        for item in os.getenv("CORS_ORIGINS", "*").split(",")
        if item.strip()
    ]

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.DEBUG_VERBOSE_LOGGING else self.LOG_LEVEL


settings = Settings()
