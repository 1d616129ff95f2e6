"""Base classes for action handlers.

Defines the interface every action type implements: side-effect-free
payload validation, and the execute step that applies an approved action.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dualcontrol.core.workflow.errors import ValidationError


@dataclass(frozen=True)
class HandlerMetadata:
    """Human-readable description of an action type, used for discovery."""

    name: str
    description: str
    category: str = "General"


@dataclass
class ExecutionResult:
    """Outcome of applying an approved action."""

    resource_type: str
    resource_id: Optional[str]
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            **self.data,
        }


class ActionHandler(ABC):
    """Validates and executes one action type.

    Subclasses set ``action_type``, ``metadata`` and ``payload_model`` and
    implement ``execute``. Handlers hold no state of their own; ``execute``
    works through the session it is given and must not commit it.
    """

    action_type: str = ""
    metadata: Optional[HandlerMetadata] = None
    payload_model: Type[BaseModel]

    def parse(self, payload: Dict[str, Any]) -> BaseModel:
        """Parse a raw payload into the handler's payload model.

        Raises:
            ValidationError: With one entry per offending field
        """
        if not isinstance(payload, dict):
            raise ValidationError("Payload must be an object", fields={"payload": "must be an object"})
        try:
            return self.payload_model.model_validate(payload)
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

    def check(self, data: BaseModel) -> Dict[str, str]:
        """Cross-field rules that run after parsing.

        Returns:
            Mapping of field name to message; empty when the payload is valid
        """
        return {}

    def validate(self, payload: Dict[str, Any]) -> BaseModel:
        """Validate a proposed payload without touching any state.

        Returns:
            The parsed payload model

        Raises:
            ValidationError: If the payload is invalid
        """
        data = self.parse(payload)
        problems = self.check(data)
        if problems:
            raise ValidationError(fields=problems)
        return data

    @abstractmethod
    def execute(self, db: Session, payload: Dict[str, Any]) -> ExecutionResult:
        """Apply an approved action.

        Uniqueness must be enforced by store constraints, with conflicts
        translated into ExecutionError, so that a repeated call with the
        same payload is rejected as a duplicate.

        Raises:
            ExecutionError: If the effect cannot be applied
        """


def conflicting_column(exc: IntegrityError, columns: Iterable[str]) -> Optional[str]:
    """Guess which unique column an IntegrityError refers to.

    Matches column names against the driver message, which names the
    column (SQLite) or the constraint (PostgreSQL).
    """
    message = str(exc.orig).lower()
    for column in columns:
        if column.lower() in message:
            return column
    return None
