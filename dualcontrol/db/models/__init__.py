"""Database models for DualControl."""

from dualcontrol.db.models.workflow_action import WorkflowAction
from dualcontrol.db.models.user import User
from dualcontrol.db.models.account import Account
from dualcontrol.db.models.promotion import Promotion

__all__ = [
    "WorkflowAction",
    "User",
    "Account",
    "Promotion",
]
