"""Detect (and optionally repair) challenges whose state is not backed by the audit log.

Writes made through ``LifecycleController`` commit the state change and its
audit entry together, so gaps only appear after out-of-band writes such as
manual SQL or a restore from a partial backup.
"""

from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from challenge_admin import crud
from challenge_admin.constants import INITIAL_STATE, RECONCILE_ACTOR
from challenge_admin.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AuditGap:
    challenge_id: int
    kind: str
    state: str
    audited_state: Optional[str] = None
    repaired: bool = False


@dataclass
class ReconcileReport:
    checked: int = 0
    gaps: list[AuditGap] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.gaps


def _find_gaps(db: Session, challenge_id: int) -> list[AuditGap]:
    challenge = crud.get_challenge(db, challenge_id)
    if challenge is None:
        return []
    gaps: list[AuditGap] = []
    if not crud.has_create_entry(db, challenge_id):
        gaps.append(AuditGap(challenge_id, "missing_create", challenge.state))

    last = crud.latest_transition(db, challenge_id)
    audited_state = last.to_state if last is not None else INITIAL_STATE
    if audited_state != challenge.state:
        gaps.append(AuditGap(challenge_id, "unaudited_transition", challenge.state, audited_state))
    return gaps


def reconcile_audit_log(db: Session, repair: bool = False) -> ReconcileReport:
    report = ReconcileReport()
    for challenge_id in crud.list_challenge_ids(db):
        report.checked += 1
        gaps = _find_gaps(db, challenge_id)
        if not gaps:
            continue

        if repair:
            for gap in gaps:
                if gap.kind == "missing_create":
                    crud.append_audit_entry(
                        db, challenge_id, RECONCILE_ACTOR, "create",
                        to_state=INITIAL_STATE, payload={"reconciled": True},
                    )
                else:
                    crud.append_audit_entry(
                        db, challenge_id, RECONCILE_ACTOR, "transition",
                        from_state=gap.audited_state, to_state=gap.state,
                        payload={"reconciled": True},
                    )
                gap.repaired = True
            db.commit()

        for gap in gaps:
            logger.warning(
                "audit_reconciled" if gap.repaired else "audit_gap_detected",
                challenge_id=gap.challenge_id,
                kind=gap.kind,
                state=gap.state,
                audited_state=gap.audited_state,
            )
        report.gaps.extend(gaps)

    db.rollback()
    return report
