"""Pytest configuration and shared fixtures for users-api tests."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from users_api.adapters.db.memory import InMemoryUserRepository
from users_api.core.domain_types import UserRecord
from users_api.services.users import UserService

SUBJECT_ID = "11111111-1111-4111-1111-111111111111"
FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


@pytest.fixture
def subject_id() -> str:
    """Return a valid v4 subject identifier."""
    return SUBJECT_ID


@pytest.fixture
def now() -> datetime:
    """Return the fixed construction instant used by the service fixture."""
    return FIXED_NOW


@pytest.fixture
def user_attributes() -> dict[str, Any]:
    """Return a complete, valid attribute document."""
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "era_commons_id": "ALOVELACE",
        "nih_ned_id": "lovelace",
        "commercial_use_reason": "",
        "email": "ada@lovelace.org",
        "public_email": "ada.public@lovelace.org",
        "newsletter_email": "news@lovelace.org",
        "external_individual_fullname": "Charles Babbage",
        "external_individual_email": "charles@babbage.org",
        "linkedin": "https://www.linkedin.com/in/ada-lovelace",
        "roles": ["Researcher", "Clinician"],
        "affiliation": "Analytical Engine Society",
        "portal_usages": ["learn about data"],
        "research_domains": ["oncology"],
        "research_area_description": "Computing Bernoulli numbers.",
        "profile_image_key": "images/ada.png",
        "locale": "en",
        "newsletter_subscription_status": "subscribed",
        "consent_date": "2024-01-01T00:00:00+00:00",
        "accepted_terms": True,
        "understand_disclaimer": True,
        "completed_registration": True,
        "config": {"theme": "dark"},
    }


@pytest.fixture
def stored_user(subject_id: str, now: datetime) -> UserRecord:
    """Return a persisted record for the default subject."""
    return UserRecord(
        id=1,
        keycloak_id=subject_id,
        first_name="Ada",
        last_name="Lovelace",
        linkedin="https://www.linkedin.com/in/ada-lovelace",
        email="ada@lovelace.org",
        creation_date=now,
        updated_date=now,
        accepted_terms=True,
    )


@pytest.fixture
def repository() -> InMemoryUserRepository:
    """Return an empty in-memory repository."""
    return InMemoryUserRepository()


@pytest.fixture
def service(repository: InMemoryUserRepository, now: datetime) -> UserService:
    """Return a service over the in-memory repository with a fixed clock."""
    return UserService(repository, clock=lambda: now)
