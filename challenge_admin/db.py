from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from challenge_admin.config import settings


def _normalize_database_url(raw_url: str) -> str:
    url = (raw_url or "").strip()
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://") :]
    if url.startswith("postgresql://") and "+psycopg" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _connect_args(url: str, statement_timeout_ms: int) -> dict[str, Any]:
    if url.startswith("sqlite"):
        # sqlite3 takes its busy timeout in seconds.
        return {"check_same_thread": False, "timeout": statement_timeout_ms / 1000}
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={statement_timeout_ms}"}
    return {}


def build_engine(
    raw_url: str,
    statement_timeout_ms: int = settings.DB_STATEMENT_TIMEOUT_MS,
    pool_timeout_s: int = settings.DB_POOL_TIMEOUT_S,
) -> Engine:
    url = _normalize_database_url(raw_url)
    kwargs: dict[str, Any] = {
        "future": True,
        "pool_pre_ping": True,
        "connect_args": _connect_args(url, statement_timeout_ms),
    }
    if not url.startswith("sqlite"):
        kwargs["pool_timeout"] = pool_timeout_s
    return create_engine(url, **kwargs)


DATABASE_URL = _normalize_database_url(settings.DATABASE_URL)

engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
