"""Domain types - the typed user record and its closed enumerations.

UserRecord is the normalized, validated shape handed back by the schema
and the repositories. It is frozen; updates produce a new record.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Locale(str, Enum):
    """Interface languages a user can pick."""

    EN = "en"
    FR = "fr"


class SubscriptionStatus(str, Enum):
    """State of the user's newsletter subscription."""

    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"
    FAILED = "failed"


class UserRecord(BaseModel):
    """One registered individual.

    Attributes:
        id: Store-generated surrogate key, None until persisted.
        keycloak_id: Identity provider subject identifier (v4 UUID).
        deleted: Soft-delete marker.
        config: Free-form client settings document.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    keycloak_id: str
    first_name: str | None = None
    last_name: str | None = None
    era_commons_id: str | None = None
    nih_ned_id: str | None = None
    commercial_use_reason: str | None = None
    email: str | None = None
    public_email: str | None = None
    newsletter_email: str | None = None
    external_individual_fullname: str | None = None
    external_individual_email: str | None = None
    linkedin: str | None = None
    roles: list[str] | None = None
    affiliation: str | None = None
    portal_usages: list[str] | None = None
    research_domains: list[str] | None = None
    research_area_description: str | None = None
    profile_image_key: str | None = None
    locale: Locale | None = None
    newsletter_subscription_status: SubscriptionStatus | None = None
    creation_date: datetime
    updated_date: datetime
    consent_date: datetime | None = None
    accepted_terms: bool = False
    understand_disclaimer: bool = False
    completed_registration: bool = False
    deleted: bool = False
    config: dict[str, Any] | list[Any] = Field(default_factory=dict)
