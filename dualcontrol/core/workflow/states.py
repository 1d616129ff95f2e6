"""Workflow action statuses and decisions.

State Machine Diagram:

    ┌──────────┐
    │ PENDING  │ ← Initial state (submitted by the maker)
    └────┬─────┘
         │
         ├──────────────────┐
         │ approve          │ reject (comment required)
    ┌────▼─────┐      ┌─────▼────┐
    │ APPROVED │      │ REJECTED │
    └──────────┘      └──────────┘

Both outcomes are terminal. A failed execution during approval rolls the
transition back, so the action stays PENDING.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional, Set


class ActionStatus(str, Enum):
    """Lifecycle status of a workflow action."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


class Decision(str, Enum):
    """A checker's verdict on a pending action."""

    APPROVE = "approve"
    REJECT = "reject"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


class TransitionRule(NamedTuple):
    """Defines a valid status transition."""
    from_status: ActionStatus
    decision: Decision
    to_status: ActionStatus
    requires_comment: bool = False


TRANSITION_RULES: list[TransitionRule] = [
    TransitionRule(ActionStatus.PENDING, Decision.APPROVE, ActionStatus.APPROVED),
    TransitionRule(ActionStatus.PENDING, Decision.REJECT, ActionStatus.REJECTED,
                   requires_comment=True),
]

TRANSITION_TARGETS: Dict[tuple[ActionStatus, Decision], TransitionRule] = {
    (rule.from_status, rule.decision): rule for rule in TRANSITION_RULES
}

TERMINAL_STATES: Set[ActionStatus] = {
    ActionStatus.APPROVED,
    ActionStatus.REJECTED,
}


def can_transition(from_status: ActionStatus, decision: Decision) -> bool:
    """Check if a decision is valid from the given status."""
    return (from_status, decision) in TRANSITION_TARGETS


def get_transition_rule(from_status: ActionStatus, decision: Decision) -> Optional[TransitionRule]:
    """Get the transition rule for a status/decision combination."""
    return TRANSITION_TARGETS.get((from_status, decision))


def get_target_status(from_status: ActionStatus, decision: Decision) -> Optional[ActionStatus]:
    """Get the status a decision leads to."""
    rule = get_transition_rule(from_status, decision)
    return rule.to_status if rule else None
