"""Tests for workflow statuses and transition rules."""

import pytest

from dualcontrol.core.workflow.states import (
    ActionStatus, Decision, TERMINAL_STATES,
    can_transition, get_target_status, get_transition_rule,
)


class TestActionStatus:
    """Test status definitions."""

    def test_all_statuses_defined(self):
        assert {s.value for s in ActionStatus} == {"pending", "approved", "rejected"}

    def test_terminal_states(self):
        assert ActionStatus.APPROVED in TERMINAL_STATES
        assert ActionStatus.REJECTED in TERMINAL_STATES
        assert ActionStatus.PENDING not in TERMINAL_STATES

    def test_lookup_is_case_insensitive(self):
        assert ActionStatus("PENDING") is ActionStatus.PENDING
        assert Decision("APPROVE") is Decision.APPROVE
        assert Decision("Reject") is Decision.REJECT

    def test_unknown_value_rejected(self):
        with pytest.raises(ValueError):
            Decision("escalate")


class TestTransitions:
    """Test valid status transitions."""

    def test_pending_transitions(self):
        assert can_transition(ActionStatus.PENDING, Decision.APPROVE)
        assert can_transition(ActionStatus.PENDING, Decision.REJECT)

    def test_terminal_states_have_no_outgoing(self):
        for status in TERMINAL_STATES:
            for decision in Decision:
                assert not can_transition(status, decision)

    def test_get_target_status(self):
        assert get_target_status(ActionStatus.PENDING, Decision.APPROVE) == ActionStatus.APPROVED
        assert get_target_status(ActionStatus.PENDING, Decision.REJECT) == ActionStatus.REJECTED
        assert get_target_status(ActionStatus.APPROVED, Decision.REJECT) is None

    def test_reject_requires_comment(self):
        assert get_transition_rule(ActionStatus.PENDING, Decision.REJECT).requires_comment is True
        assert get_transition_rule(ActionStatus.PENDING, Decision.APPROVE).requires_comment is False
