"""Persistence boundary for workflow actions.

The store never commits; the workflow engine owns the transaction. The
only writes are the pending insert and the conditional claim.
"""

import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import and_, func, select, update
from sqlalchemy.orm import Session

from dualcontrol.db.base import utcnow
from dualcontrol.db.models import WorkflowAction
from .states import ActionStatus

ActionId = Union[str, uuid.UUID]


def coerce_action_id(action_id: ActionId) -> Optional[uuid.UUID]:
    """Parse an action id, returning None for malformed ids."""
    if isinstance(action_id, uuid.UUID):
        return action_id
    try:
        return uuid.UUID(str(action_id))
    except (TypeError, ValueError):
        return None


class ActionStore:
    """Reads and writes WorkflowAction rows within a caller-owned session."""

    def __init__(self, db: Session):
        self.db = db

    def insert_pending(
        self,
        action_type: str,
        payload: Dict[str, Any],
        maker_id: str,
    ) -> WorkflowAction:
        """Insert a new PENDING action and flush so its id is assigned."""
        now = utcnow()
        action = WorkflowAction(
            id=uuid.uuid4(),
            action_type=action_type,
            status=ActionStatus.PENDING.value,
            payload=payload,
            maker_id=maker_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(action)
        self.db.flush()
        return action

    def find_by_id(self, action_id: ActionId, *, refresh: bool = False) -> Optional[WorkflowAction]:
        """Load an action by id.

        Args:
            action_id: UUID or its string form
            refresh: Reload the row even if the session already holds it
        """
        key = coerce_action_id(action_id)
        if key is None:
            return None
        return self.db.get(WorkflowAction, key, populate_existing=refresh)

    def find_many(
        self,
        *,
        status: Optional[ActionStatus] = None,
        action_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[WorkflowAction], int]:
        """Filter and paginate actions, newest first.

        Returns:
            Tuple of (page items, total matching count)
        """
        conditions = []
        if status is not None:
            conditions.append(WorkflowAction.status == ActionStatus(status).value)
        if action_type:
            conditions.append(WorkflowAction.action_type == action_type)

        query = select(WorkflowAction)
        count_query = select(func.count()).select_from(WorkflowAction)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        total = self.db.execute(count_query).scalar_one()
        items = self.db.execute(
            query.order_by(
                WorkflowAction.created_at.desc(), WorkflowAction.id.desc()
            )
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        return list(items), total

    def claim_transition(
        self,
        action_id: ActionId,
        expected_status: ActionStatus,
        **new_fields: Any,
    ) -> bool:
        """Conditionally update an action still in ``expected_status``.

        Issues a single ``UPDATE ... WHERE id = :id AND status = :expected``;
        the row count decides the claim, so two racing callers can never
        both succeed.

        Returns:
            True if this caller won the claim
        """
        key = coerce_action_id(action_id)
        if key is None:
            return False

        values = dict(new_fields)
        if isinstance(values.get("status"), ActionStatus):
            values["status"] = values["status"].value
        values.setdefault("updated_at", utcnow())

        result = self.db.execute(
            update(WorkflowAction)
            .where(
                and_(
                    WorkflowAction.id == key,
                    WorkflowAction.status == ActionStatus(expected_status).value,
                )
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
