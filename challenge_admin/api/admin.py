from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from challenge_admin.api.deps import get_actor, get_controller, get_db, require_admin
from challenge_admin.crud import get_active_categories
from challenge_admin.errors import (
    Conflict,
    IllegalInCurrentState,
    IllegalTransition,
    LifecycleError,
    NotFound,
    PreconditionFailed,
    StorageUnavailable,
    ValidationFailed,
)
from challenge_admin.lifecycle import LifecycleController
from challenge_admin.schemas import (
    AuditEntryOut,
    CategoryOut,
    ChallengeCreateIn,
    ChallengeListItemOut,
    ChallengeOut,
    ChallengeUpdateIn,
    TransitionIn,
    TransitionOut,
    ValidationRunIn,
    ValidationRunOut,
)

router = APIRouter(prefix="/v1/admin", tags=["admin"], dependencies=[Depends(require_admin)])

_STATUS_BY_ERROR: list[tuple[type, int]] = [
    (NotFound, 404),
    (Conflict, 409),
    (IllegalInCurrentState, 409),
    (IllegalTransition, 400),
    (PreconditionFailed, 422),
    (ValidationFailed, 422),
    (StorageUnavailable, 503),
]


def _http_error(exc: LifecycleError) -> HTTPException:
    status_code = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500)
    return HTTPException(status_code=status_code, detail=exc.to_dict())


@router.get("/challenge-categories", response_model=list[CategoryOut])
def admin_categories(db: Session = Depends(get_db)) -> list[CategoryOut]:
    return [CategoryOut.model_validate(c) for c in get_active_categories(db)]


@router.get("/challenges")
def admin_challenges(
    limit: int = 100,
    state: Optional[str] = None,
    category: Optional[str] = None,
    controller: LifecycleController = Depends(get_controller),
) -> Dict[str, Any]:
    try:
        items = controller.list_challenges(state=state, category=category, limit=limit)
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return {
        "count": len(items),
        "items": [ChallengeListItemOut.model_validate(c).model_dump(mode="json") for c in items],
    }


@router.post("/challenges", response_model=ChallengeOut, status_code=201)
def admin_challenge_create(
    payload: ChallengeCreateIn,
    actor: str = Depends(get_actor),
    controller: LifecycleController = Depends(get_controller),
) -> ChallengeOut:
    try:
        challenge = controller.create_challenge(payload, actor)
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return ChallengeOut.from_model(challenge)


@router.get("/challenges/{challenge_id}", response_model=ChallengeOut)
def admin_challenge_detail(
    challenge_id: int,
    controller: LifecycleController = Depends(get_controller),
) -> ChallengeOut:
    try:
        challenge = controller.get_challenge(challenge_id)
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return ChallengeOut.from_model(challenge)


@router.put("/challenges/{challenge_id}", response_model=ChallengeOut)
def admin_challenge_update(
    challenge_id: int,
    payload: ChallengeUpdateIn,
    actor: str = Depends(get_actor),
    controller: LifecycleController = Depends(get_controller),
) -> ChallengeOut:
    try:
        challenge = controller.update_challenge(challenge_id, payload, actor, payload.expected_version)
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return ChallengeOut.from_model(challenge)


@router.post("/challenges/{challenge_id}/validate", response_model=ValidationRunOut)
def admin_challenge_validate(
    challenge_id: int,
    payload: ValidationRunIn,
    actor: str = Depends(get_actor),
    controller: LifecycleController = Depends(get_controller),
) -> ValidationRunOut:
    try:
        return controller.run_validation(challenge_id, payload.manual_checks, actor)
    except LifecycleError as exc:
        raise _http_error(exc) from exc


@router.post("/challenges/{challenge_id}/state", response_model=TransitionOut)
def admin_challenge_transition(
    challenge_id: int,
    payload: TransitionIn,
    actor: str = Depends(get_actor),
    controller: LifecycleController = Depends(get_controller),
) -> TransitionOut:
    try:
        return controller.request_transition(challenge_id, payload.target_state, actor, payload.expected_version)
    except LifecycleError as exc:
        raise _http_error(exc) from exc


@router.get("/challenges/{challenge_id}/audit", response_model=list[AuditEntryOut])
def admin_challenge_audit(
    challenge_id: int,
    controller: LifecycleController = Depends(get_controller),
) -> list[AuditEntryOut]:
    try:
        entries = controller.get_audit_log(challenge_id)
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    return [AuditEntryOut.model_validate(e) for e in entries]
