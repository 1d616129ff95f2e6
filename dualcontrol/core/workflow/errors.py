"""Error taxonomy for the workflow engine.

Every error carries a stable ``kind`` so callers can branch on it, a human
readable message, and an optional field map.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError


class WorkflowError(Exception):
    """Base class for all workflow errors."""

    kind = "workflow_error"

    def __init__(self, message: str, *, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = dict(fields or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "fields": dict(self.fields),
        }


class UnknownActionTypeError(WorkflowError):
    """Raised when no handler is registered for an action type."""

    kind = "unknown_action_type"

    def __init__(self, action_type: str):
        super().__init__(f"No handler found for action type: {action_type}")
        self.action_type = action_type


class ValidationError(WorkflowError):
    """Raised when a payload or request fails validation."""

    kind = "validation_error"

    def __init__(self, message: str = "Validation failed", *, fields: Optional[Dict[str, str]] = None):
        super().__init__(message, fields=fields)

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Build a field map from a pydantic validation error."""
        fields: Dict[str, str] = {}
        for error in exc.errors():
            key = ".".join(str(part) for part in error["loc"]) or "__root__"
            fields.setdefault(key, error["msg"])
        return cls(fields=fields)


class NotFoundError(WorkflowError):
    """Raised when an action does not exist."""

    kind = "not_found"

    def __init__(self, action_id: Any):
        super().__init__(f"Action with ID {action_id} not found")
        self.action_id = action_id


class SelfReviewError(WorkflowError):
    """Raised when the maker tries to decide their own action."""

    kind = "self_review"

    def __init__(self, checker_id: str):
        super().__init__("Maker cannot review their own action")
        self.checker_id = checker_id


class AlreadyDecidedError(WorkflowError):
    """Raised when an action is no longer pending."""

    kind = "already_decided"

    def __init__(self, action_id: Any, status: Optional[str] = None):
        if status:
            message = f"Action {action_id} is already {status} and cannot be reviewed again"
        else:
            message = f"Action {action_id} was decided concurrently"
        super().__init__(message)
        self.action_id = action_id
        self.status = status


class ExecutionError(WorkflowError):
    """Raised when a handler fails to apply an approved action.

    ``cause`` is a short handler-specific code such as ``duplicate_email``.
    """

    kind = "execution_error"

    def __init__(
        self,
        message: str,
        *,
        cause: str,
        action_type: Optional[str] = None,
        fields: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message, fields=fields)
        self.cause = cause
        self.action_type = action_type

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["cause"] = self.cause
        return data
