"""Field predicates for the user record rule table.

A predicate takes the field name and a (present, non-null) value and returns
a ValidationFailure describing the violation, or None when the value passes.
Factories below build predicates with their constraints bound.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError

from users_api.core.exceptions import (
    InvalidEnumMember,
    LengthOutOfRange,
    PatternMismatch,
    ValidationFailure,
)

Predicate = Callable[[str, Any], ValidationFailure | None]


@lru_cache(maxsize=1)
def _email_adapter() -> TypeAdapter[str]:
    return TypeAdapter(EmailStr)


@lru_cache(maxsize=1)
def _url_adapter() -> TypeAdapter[HttpUrl]:
    return TypeAdapter(HttpUrl)


def length(min_length: int, max_length: int) -> Predicate:
    """Require len(value) within [min_length, max_length]."""

    def check(field: str, value: Any) -> ValidationFailure | None:
        if not min_length <= len(value) <= max_length:
            return LengthOutOfRange(field, min_length, max_length)
        return None

    return check


def matches(pattern: re.Pattern[str]) -> Predicate:
    """Require the whole value to match ``pattern``."""

    def check(field: str, value: Any) -> ValidationFailure | None:
        if pattern.fullmatch(value) is None:
            return PatternMismatch(field, value)
        return None

    return check


def blank_or_matches(pattern: re.Pattern[str]) -> Predicate:
    """Accept the empty string, otherwise require ``pattern``."""
    inner = matches(pattern)

    def check(field: str, value: Any) -> ValidationFailure | None:
        if value == "":
            return None
        return inner(field, value)

    return check


def is_alpha(field: str, value: Any) -> ValidationFailure | None:
    """Require letters only."""
    if not value.isalpha():
        return PatternMismatch(field, value)
    return None


def is_email(field: str, value: Any) -> ValidationFailure | None:
    """Require a syntactically valid email address."""
    try:
        _email_adapter().validate_python(value)
    except ValidationError:
        return PatternMismatch(field, value)
    return None


def is_url(field: str, value: Any) -> ValidationFailure | None:
    """Require an absolute http(s) URL."""
    try:
        _url_adapter().validate_python(value)
    except ValidationError:
        return PatternMismatch(field, value)
    return None


def is_uuid(version: int) -> Predicate:
    """Require a canonical UUID string of the given version.

    Only the version nibble is checked; the variant bits are not.
    """
    pattern = re.compile(
        rf"^[0-9a-f]{{8}}-[0-9a-f]{{4}}-{version}[0-9a-f]{{3}}-[0-9a-f]{{4}}-[0-9a-f]{{12}}$",
        re.IGNORECASE,
    )
    return matches(pattern)


def one_of(enum: type[Enum]) -> Predicate:
    """Require a member (or member value) of ``enum``."""
    allowed = {member.value for member in enum}

    def check(field: str, value: Any) -> ValidationFailure | None:
        raw = value.value if isinstance(value, enum) else value
        if raw not in allowed:
            return InvalidEnumMember(field, value)
        return None

    return check


def each(predicates: Sequence[Predicate]) -> Predicate:
    """Apply ``predicates`` to every element; the first failing element fails the list."""

    def check(field: str, values: Iterable[Any]) -> ValidationFailure | None:
        for item in values:
            for predicate in predicates:
                failure = predicate(field, item)
                if failure is not None:
                    return failure
        return None

    return check
