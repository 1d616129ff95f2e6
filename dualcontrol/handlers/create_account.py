"""Handler for the create_account action type."""

import logging
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dualcontrol.core.workflow.errors import ExecutionError
from dualcontrol.db.models import Account, User
from .base import ActionHandler, ExecutionResult, HandlerMetadata
from .schemas import CreateAccountPayload

logger = logging.getLogger(__name__)


class CreateAccountHandler(ActionHandler):
    """Opens an account for an existing user; account numbers are unique."""

    action_type = "create_account"
    metadata = HandlerMetadata(
        name="Create Account",
        description="Create a new financial account for a user",
        category="Account Management",
    )
    payload_model = CreateAccountPayload

    def execute(self, db: Session, payload: Dict[str, Any]) -> ExecutionResult:
        data = self.parse(payload)

        # Users are never deleted, and the foreign key backs this check
        if db.get(User, data.user_id) is None:
            raise ExecutionError(
                f"User with ID {data.user_id} does not exist",
                cause="user_not_found",
                action_type=self.action_type,
                fields={"userId": "does not exist"},
            )

        account = Account(
            user_id=data.user_id,
            account_number=data.account_number,
            account_type=data.account_type,
            balance=Decimal(data.balance),
            currency=data.currency.upper(),
        )
        db.add(account)
        try:
            db.flush()
        except IntegrityError as exc:
            raise ExecutionError(
                f"Account with number {data.account_number} already exists",
                cause="duplicate_account_number",
                action_type=self.action_type,
                fields={"accountNumber": "already exists"},
            ) from exc

        logger.info(f"Created account {account.id} for user {account.user_id}")
        return ExecutionResult(
            resource_type="account",
            resource_id=str(account.id),
            data={
                "id": str(account.id),
                "user_id": str(account.user_id),
                "account_number": account.account_number,
                "account_type": account.account_type,
                "balance": str(account.balance),
                "currency": account.currency,
            },
        )
