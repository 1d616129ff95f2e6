"""Handler for the create_promotion action type."""

import logging
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dualcontrol.core.workflow.errors import ExecutionError
from dualcontrol.db.models import Promotion
from .base import ActionHandler, ExecutionResult, HandlerMetadata
from .schemas import CreatePromotionPayload

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")


class CreatePromotionHandler(ActionHandler):
    """Creates a promotion with a unique code and a valid date range."""

    action_type = "create_promotion"
    metadata = HandlerMetadata(
        name="Create Promotion",
        description="Create a new promotional campaign",
        category="Marketing",
    )
    payload_model = CreatePromotionPayload

    def check(self, data: CreatePromotionPayload) -> Dict[str, str]:
        problems = {}

        if data.end_date <= data.start_date:
            problems["endDate"] = "End date must be after start date"

        # The decimal pattern already rules out negative values
        if data.discount_type == "percentage" and Decimal(data.discount_value) > MAX_PERCENTAGE:
            problems["discountValue"] = "Percentage discount must be between 0 and 100"

        return problems

    def execute(self, db: Session, payload: Dict[str, Any]) -> ExecutionResult:
        data = self.validate(payload)

        promotion = Promotion(
            code=data.code,
            name=data.name,
            description=data.description,
            discount_type=data.discount_type,
            discount_value=Decimal(data.discount_value),
            start_date=data.start_date,
            end_date=data.end_date,
        )
        db.add(promotion)
        try:
            db.flush()
        except IntegrityError as exc:
            raise ExecutionError(
                f"Promotion with code {data.code} already exists",
                cause="duplicate_promotion_code",
                action_type=self.action_type,
                fields={"code": "already exists"},
            ) from exc

        logger.info(f"Created promotion {promotion.id} ({promotion.code})")
        return ExecutionResult(
            resource_type="promotion",
            resource_id=str(promotion.id),
            data={
                "id": str(promotion.id),
                "code": promotion.code,
                "name": promotion.name,
                "description": promotion.description,
                "discount_type": promotion.discount_type,
                "discount_value": str(promotion.discount_value),
                "start_date": promotion.start_date.isoformat(),
                "end_date": promotion.end_date.isoformat(),
                "is_active": promotion.is_active,
            },
        )
