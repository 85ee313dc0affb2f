"""Lifecycle controller: the only writer of challenge state.

Every mutating call follows the same shape: read the persisted row, check the
caller's version token, decide, then stage the compare-and-set write and its
audit entry in one transaction and commit. Any failure rolls the whole unit
back, so a state change is never visible without its audit entry.
"""

import json
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from challenge_admin import crud
from challenge_admin.constants import EDITABLE_STATES, INITIAL_STATE
from challenge_admin.errors import (
    Conflict,
    IllegalInCurrentState,
    LifecycleError,
    NotFound,
    PreconditionFailed,
    StorageUnavailable,
    ValidationFailed,
)
from challenge_admin.lifecycle import transitions
from challenge_admin.lifecycle.edits import build_column_values, parse_payload
from challenge_admin.lifecycle.validation import compute_auto_checks
from challenge_admin.logging import challenge_context, get_logger
from challenge_admin.models import Challenge, ChallengeAuditLog
from challenge_admin.schemas import (
    ChallengeCreateIn,
    ChallengePatchIn,
    ManualChecks,
    TransitionOut,
    ValidationOut,
    ValidationRunOut,
)

logger = get_logger(__name__)

_STORAGE_ERRORS = (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.TimeoutError)


class LifecycleController:
    """Create, edit, validate and promote challenges for one database session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _unit_of_work(
        self,
        operation: str,
        challenge_id: Optional[int] = None,
        actor: Optional[str] = None,
    ) -> Iterator[None]:
        with challenge_context(operation, challenge_id, actor):
            try:
                yield
            except LifecycleError:
                self.db.rollback()
                raise
            except _STORAGE_ERRORS as exc:
                self.db.rollback()
                logger.warning(
                    "storage_unavailable",
                    error=str(exc.orig if getattr(exc, "orig", None) else exc),
                )
                raise StorageUnavailable(f"{operation} failed: challenge store unavailable") from exc
            except Exception:
                self.db.rollback()
                raise

    def _load(self, challenge_id: int) -> Challenge:
        challenge = crud.get_challenge(self.db, challenge_id)
        if challenge is None:
            raise NotFound(f"challenge {challenge_id} not found")
        return challenge

    def _check_version(self, challenge: Challenge, expected_version: int) -> None:
        if challenge.version != expected_version:
            logger.info(
                "version_conflict",
                challenge_id=challenge.id,
                expected_version=expected_version,
                actual_version=challenge.version,
            )
            raise Conflict(challenge.id, expected_version, challenge.version)

    # Reads

    def get_challenge(self, challenge_id: int) -> Challenge:
        with self._unit_of_work("get_challenge", challenge_id):
            return self._load(challenge_id)

    def list_challenges(
        self,
        state: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 100,
    ) -> list[Challenge]:
        with self._unit_of_work("list_challenges"):
            return crud.list_challenges(self.db, state=state, category=category, limit=limit)

    def get_audit_log(self, challenge_id: int) -> list[ChallengeAuditLog]:
        with self._unit_of_work("get_audit_log", challenge_id):
            self._load(challenge_id)
            return crud.list_audit_entries(self.db, challenge_id)

    # Writes

    def create_challenge(self, fields: Any, actor: str) -> Challenge:
        payload = parse_payload(ChallengeCreateIn, fields)
        with self._unit_of_work("create_challenge", actor=actor):
            if crud.get_challenge_by_code(self.db, payload.code) is not None:
                raise ValidationFailed("code", f"code '{payload.code}' is already in use")
            values, tiers = build_column_values(payload)

            challenge = Challenge(
                code=payload.code,
                state=INITIAL_STATE,
                version=0,
                created_by=actor,
                updated_by=actor,
                **values,
            )
            self.db.add(challenge)
            try:
                self.db.flush()
            except sa_exc.IntegrityError as exc:
                raise ValidationFailed("code", f"code '{payload.code}' is already in use") from exc

            if tiers:
                crud.replace_tiers(self.db, challenge.id, tiers)
            crud.append_audit_entry(
                self.db,
                challenge.id,
                actor,
                "create",
                to_state=INITIAL_STATE,
                payload={"code": payload.code},
            )
            self.db.commit()
            challenge_id = challenge.id

        logger.info("challenge_created", challenge_id=challenge_id, code=payload.code, actor=actor)
        return self.get_challenge(challenge_id)

    def update_challenge(self, challenge_id: int, patch: Any, actor: str, expected_version: int) -> Challenge:
        """Apply a field patch (and optional full tier replacement) to a draft or validated challenge.

        Editing a validated challenge leaves it validated; re-validation is a
        separate, explicit step.
        """
        patch = parse_payload(ChallengePatchIn, patch)
        with self._unit_of_work("update_challenge", challenge_id, actor):
            challenge = self._load(challenge_id)
            # Locked states fail before the version is compared.
            if challenge.state not in EDITABLE_STATES:
                raise IllegalInCurrentState(challenge_id, challenge.state)
            self._check_version(challenge, expected_version)

            values, tiers = build_column_values(patch, current=challenge)
            values["updated_by"] = actor
            if not crud.compare_and_set(
                self.db, challenge_id, expected_version, values, allowed_states=EDITABLE_STATES
            ):
                raise Conflict(challenge_id, expected_version)
            if tiers is not None:
                crud.replace_tiers(self.db, challenge_id, tiers)

            changed = sorted(k for k in values if k != "updated_by")
            if tiers is not None:
                changed.append("tiers")
            crud.append_audit_entry(
                self.db,
                challenge_id,
                actor,
                "update",
                payload={"fields": changed, "version": expected_version + 1},
            )
            self.db.commit()

        logger.info("challenge_updated", challenge_id=challenge_id, actor=actor, fields=changed)
        return self.get_challenge(challenge_id)

    def run_validation(self, challenge_id: int, manual_checks: Any, actor: str) -> ValidationRunOut:
        manual = parse_payload(ManualChecks, manual_checks or {})
        with self._unit_of_work("run_validation", challenge_id, actor):
            challenge = self._load(challenge_id)
            if transitions.is_terminal(challenge.state):
                raise IllegalInCurrentState(challenge_id, challenge.state, operation="validate")

            auto = compute_auto_checks(challenge, crud.list_challenge_codes(self.db))
            record = crud.upsert_validation(self.db, challenge_id, auto, manual, actor)
            crud.append_audit_entry(
                self.db,
                challenge_id,
                actor,
                "validate",
                payload={"auto_checks": auto.model_dump(), "manual_checks": manual.model_dump()},
            )
            self.db.commit()
            stored = ValidationOut.from_model(record)

        logger.info(
            "validation_run",
            challenge_id=challenge_id,
            actor=actor,
            failed_auto=auto.failed(),
            failed_manual=manual.failed(),
        )
        return ValidationRunOut(
            **stored.model_dump(),
            can_promote_to_validated=auto.all_passed,
            can_promote_to_deployed=manual.all_passed,
        )

    def _failed_gate_checks(self, challenge: Challenge, gate: Optional[str]) -> list[str]:
        # Gates are always re-derived from persisted data, never from the request.
        if gate == transitions.AUTO_CHECKS_GATE:
            return compute_auto_checks(challenge, crud.list_challenge_codes(self.db)).failed()
        if gate == transitions.MANUAL_CHECKS_GATE:
            record = crud.get_validation(self.db, challenge.id)
            if record is None:
                return ManualChecks().failed()
            return ManualChecks(**json.loads(record.manual_checks_json or "{}")).failed()
        return []

    def request_transition(
        self,
        challenge_id: int,
        target_state: str,
        actor: str,
        expected_version: int,
    ) -> TransitionOut:
        with self._unit_of_work("request_transition", challenge_id, actor):
            challenge = self._load(challenge_id)
            self._check_version(challenge, expected_version)
            from_state = challenge.state

            gate = transitions.gate_for(from_state, target_state)
            failed = self._failed_gate_checks(challenge, gate)
            if failed:
                logger.info(
                    "transition_rejected",
                    challenge_id=challenge_id,
                    from_state=from_state,
                    to_state=target_state,
                    failed_checks=failed,
                )
                raise PreconditionFailed(from_state, target_state, failed)

            values = {"state": target_state, "updated_by": actor}
            if not crud.compare_and_set(
                self.db, challenge_id, expected_version, values, allowed_states=[from_state]
            ):
                raise Conflict(challenge_id, expected_version)
            crud.append_audit_entry(
                self.db,
                challenge_id,
                actor,
                "transition",
                from_state=from_state,
                to_state=target_state,
                payload={"version": expected_version + 1},
            )
            self.db.commit()

        logger.info(
            "transition_committed",
            challenge_id=challenge_id,
            from_state=from_state,
            to_state=target_state,
            version=expected_version + 1,
            actor=actor,
        )
        return TransitionOut(challenge_id=challenge_id, new_state=target_state, version=expected_version + 1)
