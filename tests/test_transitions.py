"""Tests for the challenge state machine table."""

import pytest

from challenge_admin.constants import CHALLENGE_STATES
from challenge_admin.errors import IllegalTransition
from challenge_admin.lifecycle import transitions

LEGAL = {
    ("draft", "validated"),
    ("validated", "deployed"),
    ("validated", "draft"),
    ("deployed", "validated"),
    ("deployed", "deprecated"),
}


class TestTransitionTable:
    @pytest.mark.parametrize("current", CHALLENGE_STATES)
    @pytest.mark.parametrize("target", CHALLENGE_STATES)
    def test_only_listed_edges_are_legal(self, current, target):
        assert transitions.can_transition(current, target) is ((current, target) in LEGAL)

    def test_gates(self):
        assert transitions.gate_for("draft", "validated") == transitions.AUTO_CHECKS_GATE
        assert transitions.gate_for("validated", "deployed") == transitions.MANUAL_CHECKS_GATE
        assert transitions.gate_for("validated", "draft") is None
        assert transitions.gate_for("deployed", "validated") is None
        assert transitions.gate_for("deployed", "deprecated") is None

    def test_illegal_edge_names_allowed_targets(self):
        with pytest.raises(IllegalTransition) as excinfo:
            transitions.gate_for("draft", "deployed")
        assert excinfo.value.allowed == ["validated"]

    def test_unknown_state_is_illegal(self):
        with pytest.raises(IllegalTransition):
            transitions.gate_for("archived", "draft")

    def test_deprecated_is_the_only_terminal_state(self):
        assert [s for s in CHALLENGE_STATES if transitions.is_terminal(s)] == ["deprecated"]
