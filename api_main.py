from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from challenge_admin.api import router
from challenge_admin.config import settings
from challenge_admin.crud import seed_categories_if_empty
from challenge_admin.db import SessionLocal, engine
from challenge_admin.logging import configure_logging, get_logger
from challenge_admin.models import Base

configure_logging(level=settings.effective_log_level, json_format=settings.LOG_JSON)
logger = get_logger(__name__)

app = FastAPI(title="Challenge Admin API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.get("/health/live")
def health_live() -> dict[str, str]:
    return {"status": "alive"}


@app.get("/health/ready")
def health_ready() -> dict[str, str]:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ready"}


@app.on_event("startup")
def on_startup() -> None:
    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        seeded = seed_categories_if_empty(db)
    logger.info("api_started", seeded_categories=seeded, auto_create_schema=settings.AUTO_CREATE_SCHEMA)
