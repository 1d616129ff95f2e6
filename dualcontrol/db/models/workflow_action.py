"""Workflow action database model.

Stores proposed actions awaiting (or past) a maker-checker decision.
"""

import uuid

from sqlalchemy import Column, String, DateTime, JSON, Text, Uuid

from dualcontrol.db.base import Base, utcnow


class WorkflowAction(Base):
    """
    A proposed state-changing action.

    Rows are only ever inserted as pending and then moved to a terminal
    status by a conditional update; they are never deleted.
    """
    __tablename__ = "workflow_actions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    action_type = Column(String(100), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    payload = Column(JSON, nullable=False)

    # Actors
    maker_id = Column(String(255), nullable=False)
    checker_id = Column(String(255), nullable=True)

    # Decision
    review_comment = Column(Text, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<WorkflowAction {self.action_type} {self.id} [{self.status}]>"
