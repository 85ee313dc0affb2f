import json
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from challenge_admin.constants import AUDIT_ACTIONS
from challenge_admin.models import ChallengeAuditLog


def append_audit_entry(
    db: Session,
    challenge_id: int,
    actor: str,
    action: str,
    from_state: Optional[str] = None,
    to_state: Optional[str] = None,
    payload: Optional[dict[str, Any]] = None,
) -> ChallengeAuditLog:
    """Stage an audit row in the caller's transaction and flush it.

    Flushing here makes a failed insert abort the enclosing edit or
    transition instead of surfacing only at commit.
    """
    if action not in AUDIT_ACTIONS:
        raise ValueError(f"unknown audit action: {action}")
    entry = ChallengeAuditLog(
        challenge_id=challenge_id,
        actor=actor,
        action=action,
        from_state=from_state,
        to_state=to_state,
        payload_json=json.dumps(payload, ensure_ascii=False, default=str) if payload else None,
    )
    db.add(entry)
    db.flush()
    return entry


def list_audit_entries(db: Session, challenge_id: int) -> list[ChallengeAuditLog]:
    return list(
        db.scalars(
            select(ChallengeAuditLog)
            .where(ChallengeAuditLog.challenge_id == challenge_id)
            .order_by(ChallengeAuditLog.created_at, ChallengeAuditLog.id)
        )
    )


def latest_transition(db: Session, challenge_id: int) -> Optional[ChallengeAuditLog]:
    return db.scalar(
        select(ChallengeAuditLog)
        .where(ChallengeAuditLog.challenge_id == challenge_id, ChallengeAuditLog.action == "transition")
        .order_by(ChallengeAuditLog.created_at.desc(), ChallengeAuditLog.id.desc())
        .limit(1)
    )


def has_create_entry(db: Session, challenge_id: int) -> bool:
    return (
        db.scalar(
            select(ChallengeAuditLog.id)
            .where(ChallengeAuditLog.challenge_id == challenge_id, ChallengeAuditLog.action == "create")
            .limit(1)
        )
        is not None
    )
