"""Maker-checker workflow module for DualControl.

Implements the action lifecycle, the decision state machine and the
persistence boundary for workflow actions.
"""

from .states import ActionStatus, Decision, TERMINAL_STATES
from .errors import (
    WorkflowError,
    UnknownActionTypeError,
    ValidationError,
    NotFoundError,
    SelfReviewError,
    AlreadyDecidedError,
    ExecutionError,
)
from .store import ActionStore
from .engine import WorkflowEngine

__all__ = [
    "ActionStatus",
    "Decision",
    "TERMINAL_STATES",
    "WorkflowError",
    "UnknownActionTypeError",
    "ValidationError",
    "NotFoundError",
    "SelfReviewError",
    "AlreadyDecidedError",
    "ExecutionError",
    "ActionStore",
    "WorkflowEngine",
]
