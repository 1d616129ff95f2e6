"""Tests for handler payload validation.

Validation runs before anything is stored, so none of these need a
database.
"""

import uuid

import pytest

from dualcontrol.core.workflow.errors import ValidationError
from dualcontrol.handlers import (
    CreateAccountHandler,
    CreatePromotionHandler,
    CreateUserHandler,
)


def _promotion(**overrides):
    payload = {
        "code": "SPRING25",
        "name": "Spring sale",
        "discountType": "percentage",
        "discountValue": "25",
        "startDate": "2026-03-01T00:00:00",
        "endDate": "2026-03-31T00:00:00",
    }
    payload.update(overrides)
    return payload


class TestCreateUserValidation:

    def test_valid_payload(self):
        data = CreateUserHandler().validate({"email": "a@x.com", "username": "alice"})
        assert data.email == "a@x.com"
        assert data.username == "alice"
        assert data.full_name is None

    def test_camel_case_and_extra_keys(self):
        data = CreateUserHandler().validate({
            "actionType": "create_user",
            "email": "a@x.com",
            "username": "alice",
            "fullName": "Alice Example",
        })
        assert data.full_name == "Alice Example"

    def test_invalid_email(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateUserHandler().validate({"email": "not-an-email", "username": "alice"})
        assert "email" in exc_info.value.fields

    def test_short_username(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateUserHandler().validate({"email": "a@x.com", "username": "al"})
        assert "username" in exc_info.value.fields

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateUserHandler().validate({})
        assert {"email", "username"} <= set(exc_info.value.fields)

    def test_payload_must_be_object(self):
        with pytest.raises(ValidationError):
            CreateUserHandler().validate(["a@x.com"])


class TestCreateAccountValidation:

    def test_valid_payload_with_defaults(self):
        data = CreateAccountHandler().validate({
            "userId": str(uuid.uuid4()),
            "accountNumber": "ACC-00001",
            "accountType": "savings",
        })
        assert data.balance == "0"
        assert data.currency == "USD"

    def test_invalid_user_id(self):
        with pytest.raises(ValidationError):
            CreateAccountHandler().validate({
                "userId": "not-a-uuid",
                "accountNumber": "ACC-00001",
                "accountType": "savings",
            })

    @pytest.mark.parametrize("overrides", [
        {"accountNumber": "A1"},
        {"accountType": ""},
        {"balance": "-5"},
        {"balance": "10.123"},
        {"currency": "US"},
    ])
    def test_invalid_fields(self, overrides):
        payload = {
            "userId": str(uuid.uuid4()),
            "accountNumber": "ACC-00001",
            "accountType": "savings",
        }
        payload.update(overrides)
        with pytest.raises(ValidationError):
            CreateAccountHandler().validate(payload)


class TestCreatePromotionValidation:

    def test_valid_payload(self):
        data = CreatePromotionHandler().validate(_promotion())
        assert data.code == "SPRING25"
        assert data.end_date > data.start_date

    def test_end_before_start(self):
        with pytest.raises(ValidationError) as exc_info:
            CreatePromotionHandler().validate(_promotion(endDate="2026-02-01T00:00:00"))
        assert exc_info.value.fields == {"endDate": "End date must be after start date"}

    def test_end_equal_to_start(self):
        with pytest.raises(ValidationError):
            CreatePromotionHandler().validate(_promotion(endDate="2026-03-01T00:00:00"))

    def test_percentage_above_100(self):
        with pytest.raises(ValidationError) as exc_info:
            CreatePromotionHandler().validate(_promotion(discountValue="150"))
        assert "discountValue" in exc_info.value.fields

    def test_percentage_bounds_inclusive(self):
        CreatePromotionHandler().validate(_promotion(discountValue="0"))
        CreatePromotionHandler().validate(_promotion(discountValue="100.00"))

    def test_fixed_discount_above_100_allowed(self):
        CreatePromotionHandler().validate(_promotion(discountType="fixed", discountValue="150"))

    def test_negative_discount(self):
        with pytest.raises(ValidationError):
            CreatePromotionHandler().validate(_promotion(discountType="fixed", discountValue="-1"))

    def test_unknown_discount_type(self):
        with pytest.raises(ValidationError):
            CreatePromotionHandler().validate(_promotion(discountType="bogo"))

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            CreatePromotionHandler().validate(_promotion(startDate="soon"))

    def test_timezone_aware_dates_are_comparable(self):
        data = CreatePromotionHandler().validate(_promotion(
            startDate="2026-03-01T00:00:00Z",
            endDate="2026-03-31T00:00:00",
        ))
        assert data.start_date.tzinfo is None
