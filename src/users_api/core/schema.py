"""User record schema - the validation rule table and the write pipeline.

A write goes through three separately testable stages:

1. ``normalize``: blank email/LinkedIn values become None.
2. ``apply_defaults``: absent defaulted fields are filled in. Timestamps are
   computed per call, so every constructed record gets its own instant.
3. ``find_violations``: every field in ``USER_SCHEMA`` is checked, in
   declaration order, against its type and predicates.

``validate`` runs stages 1 and 3; ``build_record`` runs all three and is the
record-construction entry point used when creating users.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from users_api.core import predicates as p
from users_api.core.constants import (
    LINKEDIN_REGEX,
    MAX_LENGTH_PER_ROLE,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    NAME_REGEX,
    UUID_VERSION,
)
from users_api.core.domain_types import Locale, SubscriptionStatus, UserRecord
from users_api.core.exceptions import MissingRequiredField, TypeMismatch, ValidationFailure


class FieldType(str, Enum):
    """Semantic storage types of user record fields."""

    INTEGER = "integer"
    STRING = "string"
    TEXT = "text"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    STRING_LIST = "string list"
    DOCUMENT = "document"


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of a single user record field.

    Attributes:
        name: Field name.
        type: Semantic type the value must have.
        required: Whether absent or null values are rejected.
        default: Factory called with the construction instant when the field is absent.
        predicates: Checks run in order against present values.
    """

    name: str
    type: FieldType
    required: bool = False
    default: Callable[[datetime], Any] | None = None
    predicates: tuple[p.Predicate, ...] = field(default_factory=tuple)


def _now(now: datetime) -> datetime:
    return now


def _false(_: datetime) -> bool:
    return False


def _empty_document(_: datetime) -> dict[str, Any]:
    return {}


_NAME_RULES = (p.length(NAME_MIN_LENGTH, NAME_MAX_LENGTH), p.matches(NAME_REGEX))

USER_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("id", FieldType.INTEGER),
    FieldSpec(
        "keycloak_id",
        FieldType.STRING,
        required=True,
        predicates=(p.is_uuid(UUID_VERSION),),
    ),
    FieldSpec("deleted", FieldType.BOOLEAN, required=True, default=_false),
    FieldSpec("first_name", FieldType.STRING, predicates=_NAME_RULES),
    FieldSpec("last_name", FieldType.STRING, predicates=_NAME_RULES),
    FieldSpec("era_commons_id", FieldType.STRING),
    FieldSpec("nih_ned_id", FieldType.STRING, predicates=(p.is_alpha,)),
    FieldSpec(
        "commercial_use_reason",
        FieldType.STRING,
        predicates=(p.blank_or_matches(NAME_REGEX),),
    ),
    FieldSpec("email", FieldType.STRING, predicates=(p.is_email,)),
    FieldSpec(
        "external_individual_fullname",
        FieldType.TEXT,
        predicates=(p.matches(NAME_REGEX),),
    ),
    FieldSpec("external_individual_email", FieldType.TEXT, predicates=(p.is_email,)),
    FieldSpec(
        "roles",
        FieldType.STRING_LIST,
        predicates=(p.each((p.length(0, MAX_LENGTH_PER_ROLE), p.matches(NAME_REGEX))),),
    ),
    FieldSpec("affiliation", FieldType.STRING, predicates=(p.blank_or_matches(NAME_REGEX),)),
    FieldSpec("public_email", FieldType.TEXT, predicates=(p.is_email,)),
    FieldSpec("linkedin", FieldType.TEXT, predicates=(p.is_url, p.matches(LINKEDIN_REGEX))),
    FieldSpec("portal_usages", FieldType.STRING_LIST),
    FieldSpec("research_domains", FieldType.STRING_LIST),
    FieldSpec("research_area_description", FieldType.TEXT),
    FieldSpec("profile_image_key", FieldType.TEXT),
    FieldSpec("creation_date", FieldType.TIMESTAMP, required=True, default=_now),
    FieldSpec("updated_date", FieldType.TIMESTAMP, required=True, default=_now),
    FieldSpec("consent_date", FieldType.TIMESTAMP),
    FieldSpec("accepted_terms", FieldType.BOOLEAN, required=True, default=_false),
    FieldSpec("understand_disclaimer", FieldType.BOOLEAN, required=True, default=_false),
    FieldSpec("completed_registration", FieldType.BOOLEAN, required=True, default=_false),
    FieldSpec("config", FieldType.DOCUMENT, required=True, default=_empty_document),
    FieldSpec("locale", FieldType.STRING, predicates=(p.one_of(Locale),)),
    FieldSpec("newsletter_email", FieldType.TEXT, predicates=(p.is_email,)),
    FieldSpec(
        "newsletter_subscription_status",
        FieldType.STRING,
        predicates=(p.one_of(SubscriptionStatus),),
    ),
)

USER_SCHEMA: dict[str, FieldSpec] = {spec.name: spec for spec in USER_FIELDS}

# Blank values of these fields are treated as "not provided".
BLANK_TO_NULL_FIELDS = (
    "email",
    "public_email",
    "newsletter_email",
    "external_individual_email",
    "linkedin",
)

_MISSING = object()


def normalize(candidate: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``candidate`` with blank email/LinkedIn values set to None."""
    normalized = dict(candidate)
    for name in BLANK_TO_NULL_FIELDS:
        if name in normalized:
            normalized[name] = normalized[name] or None
    return normalized


def apply_defaults(candidate: Mapping[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Fill absent defaulted fields.

    Explicit None values are kept so that the required check rejects them.

    Args:
        candidate: Partial record.
        now: Construction instant; defaults to the current UTC time.

    Returns:
        A new dict with defaults applied.
    """
    instant = now or datetime.now(UTC)
    filled = dict(candidate)
    for spec in USER_FIELDS:
        if spec.default is not None and spec.name not in filled:
            filled[spec.name] = spec.default(instant)
    return filled


def _type_name(value: Any) -> str:
    return type(value).__name__


@lru_cache(maxsize=1)
def _timestamp_adapter() -> TypeAdapter[datetime]:
    return TypeAdapter(datetime)


def _is_timestamp(value: Any) -> bool:
    if isinstance(value, datetime):
        return True
    if not isinstance(value, str):
        return False
    # Parsed exactly as UserRecord parses it.
    try:
        _timestamp_adapter().validate_python(value)
    except ValidationError:
        return False
    return True


def _check_type(spec: FieldSpec, value: Any) -> TypeMismatch | None:
    ok: bool
    if spec.type is FieldType.INTEGER:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif spec.type in (FieldType.STRING, FieldType.TEXT):
        ok = isinstance(value, str)
    elif spec.type is FieldType.BOOLEAN:
        ok = isinstance(value, bool)
    elif spec.type is FieldType.TIMESTAMP:
        ok = _is_timestamp(value)
    elif spec.type is FieldType.STRING_LIST:
        ok = isinstance(value, list) and all(isinstance(item, str) for item in value)
    else:
        ok = isinstance(value, dict | list)

    if not ok:
        return TypeMismatch(spec.name, spec.type.value, _type_name(value))
    return None


def find_violations(
    candidate: Mapping[str, Any],
    partial: bool = False,
) -> list[ValidationFailure]:
    """Check ``candidate`` against every field rule.

    Each field contributes at most one failure: the first of its type check
    and predicates to fail. Absent or null optional fields are not checked.

    Args:
        candidate: Normalized candidate record.
        partial: Skip required checks for absent fields (update payloads).

    Returns:
        Failures in field declaration order; empty when the record is valid.
    """
    failures: list[ValidationFailure] = []
    for spec in USER_FIELDS:
        value = candidate.get(spec.name, _MISSING)
        if value is _MISSING and partial:
            continue
        if value is _MISSING or value is None:
            if spec.required:
                failures.append(MissingRequiredField(spec.name))
            continue

        failure: ValidationFailure | None = _check_type(spec, value)
        if failure is None:
            for predicate in spec.predicates:
                failure = predicate(spec.name, value)
                if failure is not None:
                    break
        if failure is not None:
            failures.append(failure)
    return failures


def validate(candidate: Mapping[str, Any]) -> UserRecord:
    """Normalize and validate a complete candidate record.

    Args:
        candidate: Candidate record; unknown keys are ignored.

    Returns:
        The typed, normalized record.

    Raises:
        ValidationFailure: The first violated rule, in field declaration order.
    """
    normalized = normalize(candidate)
    failures = find_violations(normalized)
    if failures:
        raise failures[0]
    known = {name: value for name, value in normalized.items() if name in USER_SCHEMA}
    try:
        return UserRecord.model_validate(known)
    except ValidationError as e:
        error = e.errors()[0]
        name = str(error["loc"][0]) if error["loc"] else "record"
        spec = USER_SCHEMA.get(name)
        expected = spec.type.value if spec else "valid value"
        raise TypeMismatch(name, expected, _type_name(known.get(name))) from e


def build_record(candidate: Mapping[str, Any], now: datetime | None = None) -> UserRecord:
    """Construct a new record: normalize, apply defaults, validate.

    Raises:
        ValidationFailure: The candidate violates a field rule.
    """
    return validate(apply_defaults(normalize(candidate), now))
