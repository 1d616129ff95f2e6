"""Handler for the create_user action type."""

import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dualcontrol.core.workflow.errors import ExecutionError
from dualcontrol.db.models import User
from dualcontrol.db.seed import PLACEHOLDER_PASSWORD_HASH
from .base import ActionHandler, ExecutionResult, HandlerMetadata, conflicting_column
from .schemas import CreateUserPayload

logger = logging.getLogger(__name__)


class CreateUserHandler(ActionHandler):
    """Creates a user; email and username must be unique."""

    action_type = "create_user"
    metadata = HandlerMetadata(
        name="Create User",
        description="Create a new user account in the system",
        category="User Management",
    )
    payload_model = CreateUserPayload

    def execute(self, db: Session, payload: Dict[str, Any]) -> ExecutionResult:
        data = self.parse(payload)

        user = User(
            email=data.email,
            username=data.username,
            full_name=data.full_name,
            password=PLACEHOLDER_PASSWORD_HASH,
        )
        db.add(user)
        try:
            db.flush()
        except IntegrityError as exc:
            column = conflicting_column(exc, ["email", "username"])
            if column == "username":
                raise ExecutionError(
                    f"Username {data.username} is already taken",
                    cause="duplicate_username",
                    action_type=self.action_type,
                    fields={"username": "already taken"},
                ) from exc
            raise ExecutionError(
                f"User with email {data.email} already exists",
                cause="duplicate_email",
                action_type=self.action_type,
                fields={"email": "already exists"},
            ) from exc

        logger.info(f"Created user {user.id}")
        return ExecutionResult(
            resource_type="user",
            resource_id=str(user.id),
            data={
                "id": str(user.id),
                "email": user.email,
                "username": user.username,
                "full_name": user.full_name,
                "role": user.role,
                "is_active": user.is_active,
            },
        )
