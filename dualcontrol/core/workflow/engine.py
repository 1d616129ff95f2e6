"""Workflow engine for maker-checker approvals.

Orchestrates the action lifecycle: a maker submits an action, a different
checker approves or rejects it, and approval runs the action's handler.
Each operation is one transaction opened from the session factory.
"""

import copy
import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session, sessionmaker

from dualcontrol.db.base import utcnow
from dualcontrol.db.models import WorkflowAction
from .errors import (
    AlreadyDecidedError,
    ExecutionError,
    NotFoundError,
    SelfReviewError,
    ValidationError,
    WorkflowError,
)
from .schemas import ActionListQuery, total_pages
from .states import ActionStatus, Decision, get_transition_rule
from .store import ActionId, ActionStore

if TYPE_CHECKING:
    from dualcontrol.handlers.base import ActionHandler
    from dualcontrol.handlers.registry import HandlerRegistry

logger = logging.getLogger(__name__)


class WorkflowEngine:
    """
    Maker-checker workflow engine.

    Handles:
    - Validating and persisting submitted actions
    - Listing and fetching actions
    - Deciding actions, with the claim, the handler execution and the
      final status written as a single transaction
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        registry: "HandlerRegistry",
        *,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ):
        """
        Initialize the workflow engine.

        Args:
            session_factory: Factory producing database sessions
            registry: Handler registry used to resolve action types
            default_page_size: Page size used when list() is not given one
            max_page_size: Upper bound on list() page sizes
        """
        self.session_factory = session_factory
        self.registry = registry
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def submit(self, action_type: str, payload: Dict[str, Any], maker_id: str) -> Dict[str, Any]:
        """
        Propose a new action.

        The handler validates the payload before anything is stored; no
        handler execution happens here.

        Returns:
            The stored PENDING action

        Raises:
            UnknownActionTypeError: If no handler handles action_type
            ValidationError: If the payload or maker id is invalid, or the payload is not JSON-serializable
        """
        handler = self.registry.resolve(action_type)

        if not maker_id or not str(maker_id).strip():
            raise ValidationError(fields={"maker_id": "Maker ID is required"})

        handler.validate(payload)
        stored_payload = self._storable_payload(payload)

        with self.session_factory.begin() as db:
            action = ActionStore(db).insert_pending(
                action_type,
                stored_payload,
                str(maker_id),
            )
            result = self._action_to_dict(action)

        logger.info(f"Action {result['id']} ({action_type}) submitted by {maker_id}")
        return result

    def get(self, action_id: ActionId) -> Dict[str, Any]:
        """
        Get an action by id.

        Raises:
            NotFoundError: If the action does not exist
        """
        with self.session_factory() as db:
            action = ActionStore(db).find_by_id(action_id)
            if action is None:
                raise NotFoundError(action_id)
            return self._action_to_dict(action)

    def list(
        self,
        *,
        status: Optional[Union[ActionStatus, str]] = None,
        action_type: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        List actions newest first.

        Returns:
            Dict with items, page, page_size, total and total_pages

        Raises:
            ValidationError: If a filter or pagination value is invalid
        """
        try:
            query = ActionListQuery(
                status=status,
                action_type=action_type,
                page=page,
                page_size=page_size if page_size is not None else self.default_page_size,
            )
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

        if query.page_size > self.max_page_size:
            raise ValidationError(
                fields={"page_size": f"must be at most {self.max_page_size}"}
            )

        with self.session_factory() as db:
            items, total = ActionStore(db).find_many(
                status=query.status,
                action_type=query.action_type,
                offset=query.offset,
                limit=query.limit,
            )
            return {
                "items": [self._action_to_dict(item) for item in items],
                "page": query.page,
                "page_size": query.page_size,
                "total": total,
                "total_pages": total_pages(total, query.page_size),
            }

    def decide(
        self,
        action_id: ActionId,
        checker_id: str,
        decision: Union[Decision, str],
        comment: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Approve or reject a pending action.

        The status change is claimed with a conditional update, so only one
        of several concurrent deciders can win. On approval the handler runs
        inside the same transaction; if it fails, everything is rolled back
        and the action stays PENDING.

        Args:
            action_id: ID of the action
            checker_id: ID of the deciding user (must not be the maker)
            decision: APPROVE or REJECT
            comment: Review comment (required when rejecting)

        Returns:
            Updated action; includes execution_result when approved

        Raises:
            NotFoundError: If the action does not exist
            AlreadyDecidedError: If the action is no longer pending
            SelfReviewError: If the checker is the maker
            ValidationError: If the decision or comment is invalid, or a rejection has no comment
            ExecutionError: If the handler could not apply the action
        """
        decision = self._parse_decision(decision)
        comment = self._parse_comment(comment)

        if not checker_id or not str(checker_id).strip():
            raise ValidationError(fields={"checker_id": "Checker ID is required"})
        checker_id = str(checker_id)

        try:
            with self.session_factory.begin() as db:
                result = self._decide(db, action_id, checker_id, decision, comment)
        except ExecutionError as exc:
            logger.warning(
                f"Execution failed for action {action_id} ({exc.cause}); "
                f"approval reverted, action remains pending"
            )
            raise

        logger.info(f"Action {result['id']} {result['status']} by {checker_id}")
        return result

    def describe_action_types(self) -> List[Dict[str, str]]:
        """Registered action types with their display metadata."""
        return self.registry.describe()

    def _decide(
        self,
        db: Session,
        action_id: ActionId,
        checker_id: str,
        decision: Decision,
        comment: Optional[str],
    ) -> Dict[str, Any]:
        store = ActionStore(db)

        action = store.find_by_id(action_id)
        if action is None:
            raise NotFoundError(action_id)

        status = ActionStatus(action.status)
        rule = get_transition_rule(status, decision)
        if rule is None:
            logger.warning(f"Decision on action {action.id} refused: already {status.value}")
            raise AlreadyDecidedError(action.id, status.value)

        if checker_id == action.maker_id:
            logger.warning(f"Self review attempt on action {action.id} by {checker_id}")
            raise SelfReviewError(checker_id)

        if rule.requires_comment and not comment:
            raise ValidationError(
                "A comment is required to reject an action",
                fields={"comment": "required when rejecting"},
            )

        claimed = store.claim_transition(
            action.id,
            ActionStatus.PENDING,
            status=rule.to_status,
            checker_id=checker_id,
            review_comment=comment,
            reviewed_at=utcnow(),
        )
        if not claimed:
            logger.warning(f"Lost decision race on action {action.id}")
            raise AlreadyDecidedError(action.id)

        execution_result = None
        if decision == Decision.APPROVE:
            handler = self.registry.resolve(action.action_type)
            execution_result = self._execute(handler, db, action)

        action = store.find_by_id(action.id, refresh=True)
        result = self._action_to_dict(action)
        if execution_result is not None:
            result["execution_result"] = execution_result
        return result

    def _execute(self, handler: "ActionHandler", db: Session, action: WorkflowAction) -> Dict[str, Any]:
        """Run a handler against a copy of the stored payload."""
        payload = copy.deepcopy(action.payload)
        try:
            return handler.execute(db, payload).to_dict()
        except ExecutionError:
            raise
        except WorkflowError as exc:
            raise ExecutionError(
                exc.message,
                cause=exc.kind,
                action_type=action.action_type,
                fields=exc.fields,
            ) from exc
        except Exception as exc:
            logger.exception(f"Unexpected error executing action {action.id}")
            raise ExecutionError(
                f"Failed to execute {action.action_type}: {exc}",
                cause="unexpected_error",
                action_type=action.action_type,
            ) from exc

    def _storable_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Copy a payload for storage, refusing values the JSON column cannot hold.

        Values are never converted, so the stored payload stays identical to
        the submitted one.
        """
        stored = copy.deepcopy(payload)
        try:
            json.dumps(stored)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                f"Payload cannot be stored: {exc}",
                fields={"payload": "must be JSON-serializable"},
            ) from exc
        return stored

    def _parse_comment(self, comment: Optional[str]) -> Optional[str]:
        if comment is None:
            return None
        if not isinstance(comment, str):
            raise ValidationError(fields={"comment": "must be a string"})
        return comment.strip() or None

    def _parse_decision(self, decision: Union[Decision, str]) -> Decision:
        try:
            return Decision(decision)
        except ValueError:
            raise ValidationError(
                f"Invalid decision: {decision}",
                fields={"decision": "must be approve or reject"},
            )

    def _action_to_dict(self, action: WorkflowAction) -> Dict[str, Any]:
        """Convert a WorkflowAction model to dictionary."""
        return {
            "id": str(action.id),
            "action_type": action.action_type,
            "status": action.status,
            "payload": copy.deepcopy(action.payload),
            "maker_id": action.maker_id,
            "checker_id": action.checker_id,
            "review_comment": action.review_comment,
            "reviewed_at": action.reviewed_at.isoformat() if action.reviewed_at else None,
            "created_at": action.created_at.isoformat() if action.created_at else None,
            "updated_at": action.updated_at.isoformat() if action.updated_at else None,
        }
