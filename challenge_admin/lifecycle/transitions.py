"""Challenge lifecycle state machine.

Challenge states: draft → validated → deployed → deprecated
                  also: validated → draft (rollback), deployed → validated (hotfix)
"""

from typing import Optional

from challenge_admin.errors import IllegalTransition

AUTO_CHECKS_GATE = "auto_checks"
MANUAL_CHECKS_GATE = "manual_checks"

# state -> [(target, gate)]; a gate of None means the edge is unconditional.
VALID_TRANSITIONS: dict[str, list[tuple[str, Optional[str]]]] = {
    "draft": [
        ("validated", AUTO_CHECKS_GATE),
    ],
    "validated": [
        ("deployed", MANUAL_CHECKS_GATE),
        ("draft", None),
    ],
    "deployed": [
        ("validated", None),
        ("deprecated", None),
    ],
    "deprecated": [],  # terminal
}


def allowed_targets(current: str) -> list[str]:
    return [target for target, _ in VALID_TRANSITIONS.get(current, [])]


def can_transition(current: str, target: str) -> bool:
    return target in allowed_targets(current)


def gate_for(current: str, target: str) -> Optional[str]:
    """Return the gate guarding ``current -> target``, raising IllegalTransition if there is no such edge."""
    for candidate, gate in VALID_TRANSITIONS.get(current, []):
        if candidate == target:
            return gate
    raise IllegalTransition(current, target, allowed_targets(current))


def is_terminal(state: str) -> bool:
    return state in VALID_TRANSITIONS and not VALID_TRANSITIONS[state]
