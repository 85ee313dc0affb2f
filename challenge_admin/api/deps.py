from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from challenge_admin.config import settings
from challenge_admin.db import SessionLocal
from challenge_admin.lifecycle import LifecycleController


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_controller(db: Session = Depends(get_db)) -> LifecycleController:
    return LifecycleController(db)


def require_admin(x_admin_token: Optional[str] = Header(default=None)) -> None:
    token = settings.ADMIN_API_TOKEN
    if not token:
        raise HTTPException(status_code=503, detail="admin token is not configured")
    if x_admin_token != token:
        raise HTTPException(status_code=403, detail="admin token mismatch")


def get_actor(x_admin_actor: Optional[str] = Header(default=None)) -> str:
    return (x_admin_actor or "").strip() or "admin"
