"""Tests for the audit reconciliation pass."""

from sqlalchemy import delete, update

from challenge_admin import crud
from challenge_admin.constants import RECONCILE_ACTOR
from challenge_admin.lifecycle import reconcile_audit_log
from challenge_admin.models import Challenge, ChallengeAuditLog

from conftest import promote_to


class TestReconcileAuditLog:
    def test_clean_store(self, controller, draft):
        promote_to(controller, draft.id, "deployed")

        report = reconcile_audit_log(controller.db)

        assert report.checked == 1
        assert report.clean

    def test_detects_out_of_band_state_change(self, db, draft):
        db.execute(update(Challenge).where(Challenge.id == draft.id).values(state="deployed"))
        db.commit()

        report = reconcile_audit_log(db)

        assert [(g.kind, g.state, g.audited_state, g.repaired) for g in report.gaps] == [
            ("unaudited_transition", "deployed", "draft", False)
        ]
        assert len(crud.list_audit_entries(db, draft.id)) == 1

    def test_repair_appends_missing_transition(self, db, draft):
        db.execute(update(Challenge).where(Challenge.id == draft.id).values(state="validated"))
        db.commit()

        report = reconcile_audit_log(db, repair=True)

        assert report.gaps[0].repaired is True
        last = crud.list_audit_entries(db, draft.id)[-1]
        assert (last.actor, last.action, last.from_state, last.to_state) == (
            RECONCILE_ACTOR,
            "transition",
            "draft",
            "validated",
        )
        assert reconcile_audit_log(db).clean

    def test_repair_missing_create(self, db, draft):
        db.execute(delete(ChallengeAuditLog).where(ChallengeAuditLog.challenge_id == draft.id))
        db.commit()

        report = reconcile_audit_log(db, repair=True)

        assert [g.kind for g in report.gaps] == ["missing_create"]
        assert [e.action for e in crud.list_audit_entries(db, draft.id)] == ["create"]
