"""Request models for workflow queries."""

import math
from typing import Optional

from pydantic import BaseModel, Field

from .states import ActionStatus


class ActionListQuery(BaseModel):
    """Filter and pagination parameters for listing actions."""
    status: Optional[ActionStatus] = None
    action_type: Optional[str] = None
    page: int = Field(1, ge=1, description="Page number")
    page_size: int = Field(10, ge=1, description="Items per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size > 0 else 0
