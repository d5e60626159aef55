"""Domain-specific exceptions.

All exceptions in the users service inherit from UsersApiError, making it
easy to catch all service errors while still being able to handle specific
error kinds. Every error raised by the core falls into exactly one of four
kinds: ValidationFailure, NotFound, AlreadyExists or StoreFailure.
"""

from __future__ import annotations

from typing import Any


class UsersApiError(Exception):
    """Base exception for all users service errors."""

    pass


class ValidationFailure(UsersApiError):
    """A candidate user record violated a field rule.

    Raised before any store call is made, so a validation failure never
    leaves side effects behind.

    Attributes:
        field: Name of the offending field.
        reason: Short machine-readable reason code.
    """

    reason = "invalid"

    def __init__(self, field: str, message: str | None = None) -> None:
        """Initialize ValidationFailure.

        Args:
            field: Name of the offending field.
            message: Human-readable description.
        """
        self.field = field
        super().__init__(message or f"{field} is invalid")

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an error response body."""
        return {"field": self.field, "reason": self.reason, "message": str(self)}


class MissingRequiredField(ValidationFailure):
    """A required field is absent or null."""

    reason = "missing_required_field"

    def __init__(self, field: str) -> None:
        """Initialize MissingRequiredField."""
        super().__init__(field, f"{field} is required")


class TypeMismatch(ValidationFailure):
    """A field holds a value of the wrong semantic type.

    Attributes:
        expected: Name of the expected type.
        actual: Name of the type actually received.
    """

    reason = "type_mismatch"

    def __init__(self, field: str, expected: str, actual: str) -> None:
        """Initialize TypeMismatch."""
        self.expected = expected
        self.actual = actual
        super().__init__(field, f"{field} must be {expected}, got {actual}")


class PatternMismatch(ValidationFailure):
    """A field value does not match its required pattern or format.

    Attributes:
        value: The rejected value.
    """

    reason = "pattern_mismatch"

    def __init__(self, field: str, value: Any) -> None:
        """Initialize PatternMismatch."""
        self.value = value
        super().__init__(field, f"{field} has an invalid value: {value!r}")


class LengthOutOfRange(ValidationFailure):
    """A field value is shorter or longer than allowed.

    Attributes:
        min: Minimum allowed length (inclusive).
        max: Maximum allowed length (inclusive).
    """

    reason = "length_out_of_range"

    def __init__(self, field: str, min: int, max: int) -> None:  # noqa: A002
        """Initialize LengthOutOfRange."""
        self.min = min
        self.max = max
        super().__init__(field, f"{field} length must be between {min} and {max}")


class InvalidEnumMember(ValidationFailure):
    """A field value is not one of the declared members.

    Attributes:
        value: The rejected value.
    """

    reason = "invalid_enum_member"

    def __init__(self, field: str, value: Any) -> None:
        """Initialize InvalidEnumMember."""
        self.value = value
        super().__init__(field, f"{field} does not accept {value!r}")


class NotFound(UsersApiError):
    """No live user record exists for the subject identifier."""

    def __init__(self, subject_id: str) -> None:
        """Initialize NotFound."""
        self.subject_id = subject_id
        super().__init__(f"User {subject_id} not found")


class AlreadyExists(UsersApiError):
    """A user record already exists for the subject identifier."""

    def __init__(self, subject_id: str) -> None:
        """Initialize AlreadyExists."""
        self.subject_id = subject_id
        super().__init__(f"User {subject_id} already exists")


class StoreFailure(UsersApiError):
    """The underlying store failed.

    Not decomposed further; the driver exception is chained as ``__cause__``.
    This layer never retries.
    """

    pass


class DuplicateUniqueKey(StoreFailure):
    """The store rejected a write because a unique key already exists.

    Attributes:
        field: Name of the unique column.
    """

    def __init__(self, field: str) -> None:
        """Initialize DuplicateUniqueKey."""
        self.field = field
        super().__init__(f"Duplicate value for unique field {field}")
