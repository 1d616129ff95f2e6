"""Payload models for the built-in action types.

Payloads are accepted in snake_case or in the camelCase used by clients.
"""

from datetime import datetime, timezone
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

DECIMAL_PATTERN = r"^\d+(\.\d{1,2})?$"


class PayloadModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class CreateUserPayload(PayloadModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=100)
    full_name: Optional[str] = Field(None, max_length=255)


class CreateAccountPayload(PayloadModel):
    user_id: UUID
    account_number: str = Field(min_length=5, max_length=50)
    account_type: str = Field(min_length=1, max_length=50)
    balance: str = Field("0", pattern=DECIMAL_PATTERN)
    currency: str = Field("USD", min_length=3, max_length=3)


class CreatePromotionPayload(PayloadModel):
    code: str = Field(min_length=3, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    discount_type: Literal["percentage", "fixed"]
    discount_value: str = Field(pattern=DECIMAL_PATTERN)
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
