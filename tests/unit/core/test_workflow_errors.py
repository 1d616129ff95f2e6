"""Tests for the workflow error taxonomy."""

import pytest
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from dualcontrol.core.workflow.errors import (
    AlreadyDecidedError,
    ExecutionError,
    NotFoundError,
    SelfReviewError,
    UnknownActionTypeError,
    ValidationError,
    WorkflowError,
)


class _Sample(BaseModel):
    name: str = Field(min_length=3)
    count: int


class TestErrorKinds:

    @pytest.mark.parametrize("error, kind", [
        (UnknownActionTypeError("x"), "unknown_action_type"),
        (ValidationError(), "validation_error"),
        (NotFoundError("abc"), "not_found"),
        (SelfReviewError("m1"), "self_review"),
        (AlreadyDecidedError("abc", "approved"), "already_decided"),
        (ExecutionError("boom", cause="duplicate_email"), "execution_error"),
    ])
    def test_kind(self, error, kind):
        assert isinstance(error, WorkflowError)
        assert error.kind == kind
        assert error.to_dict()["kind"] == kind

    def test_to_dict_is_structured(self):
        error = ValidationError(fields={"email": "invalid"})
        assert error.to_dict() == {
            "kind": "validation_error",
            "message": "Validation failed",
            "fields": {"email": "invalid"},
        }

    def test_execution_error_carries_cause(self):
        error = ExecutionError("dup", cause="duplicate_email", action_type="create_user")
        assert error.cause == "duplicate_email"
        assert error.action_type == "create_user"
        assert error.to_dict()["cause"] == "duplicate_email"

    def test_already_decided_message_mentions_status(self):
        assert "approved" in str(AlreadyDecidedError("abc", "approved"))


class TestFromPydantic:

    def test_field_map(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            _Sample.model_validate({"name": "ab"})

        error = ValidationError.from_pydantic(exc_info.value)
        assert set(error.fields) == {"name", "count"}
        assert error.kind == "validation_error"
