"""Unit tests for the error taxonomy."""

from __future__ import annotations

import pytest

from users_api.core.exceptions import (
    AlreadyExists,
    DuplicateUniqueKey,
    InvalidEnumMember,
    LengthOutOfRange,
    MissingRequiredField,
    NotFound,
    PatternMismatch,
    StoreFailure,
    TypeMismatch,
    UsersApiError,
    ValidationFailure,
)


class TestUsersApiError:
    """Tests for UsersApiError."""

    def test_is_exception(self) -> None:
        """Test that UsersApiError is an Exception."""
        assert issubclass(UsersApiError, Exception)

    @pytest.mark.parametrize(
        "error_class",
        [ValidationFailure, NotFound, AlreadyExists, StoreFailure],
    )
    def test_taxonomy_kinds_inherit_from_base(self, error_class: type[Exception]) -> None:
        """Test that every error kind can be caught as UsersApiError."""
        assert issubclass(error_class, UsersApiError)


class TestValidationFailures:
    """Tests for the ValidationFailure family."""

    def test_missing_required_field(self) -> None:
        """Test MissingRequiredField carries the field name."""
        error = MissingRequiredField("keycloak_id")

        assert isinstance(error, ValidationFailure)
        assert error.field == "keycloak_id"
        assert error.reason == "missing_required_field"
        assert "keycloak_id is required" in str(error)

    def test_type_mismatch(self) -> None:
        """Test TypeMismatch carries expected and actual types."""
        error = TypeMismatch("accepted_terms", "boolean", "str")

        assert error.expected == "boolean"
        assert error.actual == "str"
        assert error.reason == "type_mismatch"

    def test_pattern_mismatch(self) -> None:
        """Test PatternMismatch carries the rejected value."""
        error = PatternMismatch("first_name", "Ada1")

        assert error.value == "Ada1"
        assert "'Ada1'" in str(error)

    def test_length_out_of_range(self) -> None:
        """Test LengthOutOfRange carries its bounds."""
        error = LengthOutOfRange("first_name", 1, 35)

        assert (error.min, error.max) == (1, 35)

    def test_invalid_enum_member(self) -> None:
        """Test InvalidEnumMember carries the rejected value."""
        error = InvalidEnumMember("locale", "de")

        assert error.value == "de"
        assert error.reason == "invalid_enum_member"

    def test_to_dict(self) -> None:
        """Test the error response payload."""
        payload = MissingRequiredField("config").to_dict()

        assert payload == {
            "field": "config",
            "reason": "missing_required_field",
            "message": "config is required",
        }


class TestStoreFailures:
    """Tests for store-side errors."""

    def test_duplicate_unique_key_is_store_failure(self) -> None:
        """Test DuplicateUniqueKey is classified as a store failure."""
        error = DuplicateUniqueKey("keycloak_id")

        assert isinstance(error, StoreFailure)
        assert error.field == "keycloak_id"

    def test_not_found_and_already_exists_carry_subject(self) -> None:
        """Test subject-keyed errors keep the subject identifier."""
        assert NotFound("abc").subject_id == "abc"
        assert AlreadyExists("abc").subject_id == "abc"
