import json
from typing import Any, Iterable, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from challenge_admin.models import Challenge, ChallengeTier, ChallengeValidation
from challenge_admin.models.base import utcnow
from challenge_admin.schemas import AutoChecks, ManualChecks, TierIn


def get_challenge(db: Session, challenge_id: int) -> Optional[Challenge]:
    """Read the persisted row, overwriting whatever the session had cached."""
    return db.scalar(
        select(Challenge)
        .where(Challenge.id == challenge_id)
        .execution_options(populate_existing=True)
    )


def get_challenge_by_code(db: Session, code: str) -> Optional[Challenge]:
    # Codes are unique ignoring case, matching the code_unique check.
    return db.scalar(select(Challenge).where(func.lower(Challenge.code) == code.strip().lower()))


def list_challenges(
    db: Session,
    state: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 100,
) -> list[Challenge]:
    limit = max(1, min(limit, 500))
    query = select(Challenge).order_by(Challenge.sort_order, Challenge.id).limit(limit)
    if state:
        query = query.where(Challenge.state == state)
    if category:
        query = query.where(Challenge.category == category)
    return list(db.scalars(query))


def list_challenge_codes(db: Session) -> list[str]:
    return list(db.scalars(select(Challenge.code)))


def list_challenge_ids(db: Session) -> list[int]:
    return list(db.scalars(select(Challenge.id).order_by(Challenge.id)))


def compare_and_set(
    db: Session,
    challenge_id: int,
    expected_version: int,
    values: dict[str, Any],
    allowed_states: Optional[Iterable[str]] = None,
) -> bool:
    """Write ``values`` and bump the version only if the row is still at ``expected_version``.

    Returns False when another writer got there first. The caller owns the
    transaction; nothing is committed here.
    """
    stmt = (
        update(Challenge)
        .where(Challenge.id == challenge_id, Challenge.version == expected_version)
        .values(**values, version=expected_version + 1, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if allowed_states is not None:
        stmt = stmt.where(Challenge.state.in_(list(allowed_states)))
    result = db.execute(stmt)
    return result.rowcount == 1


def replace_tiers(db: Session, challenge_id: int, tiers: list[TierIn]) -> None:
    db.execute(
        delete(ChallengeTier)
        .where(ChallengeTier.challenge_id == challenge_id)
        .execution_options(synchronize_session=False)
    )
    for tier in tiers:
        db.add(ChallengeTier(challenge_id=challenge_id, **tier.model_dump()))


def upsert_validation(
    db: Session,
    challenge_id: int,
    auto_checks: AutoChecks,
    manual_checks: ManualChecks,
    actor: str,
) -> ChallengeValidation:
    record = db.scalar(select(ChallengeValidation).where(ChallengeValidation.challenge_id == challenge_id))
    if record is None:
        record = ChallengeValidation(challenge_id=challenge_id)
    record.auto_checks_json = json.dumps(auto_checks.model_dump())
    record.manual_checks_json = json.dumps(manual_checks.model_dump())
    record.last_run_at = utcnow()
    record.last_run_by = actor
    db.add(record)
    return record


def get_validation(db: Session, challenge_id: int) -> Optional[ChallengeValidation]:
    return db.scalar(
        select(ChallengeValidation)
        .where(ChallengeValidation.challenge_id == challenge_id)
        .execution_options(populate_existing=True)
    )
