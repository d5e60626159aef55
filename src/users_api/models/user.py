"""User table."""

from datetime import datetime
from typing import Any

from sqlalchemy import ARRAY, Boolean, DateTime, Enum, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from users_api.core.domain_types import Locale, SubscriptionStatus
from users_api.models.base import BaseModel


def _values(enum: type[Locale] | type[SubscriptionStatus]) -> list[str]:
    return [member.value for member in enum]


class User(BaseModel):
    """A registered individual, keyed externally by ``keycloak_id``."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    keycloak_id: Mapped[str] = mapped_column(String(255), nullable=False)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    first_name: Mapped[str | None] = mapped_column(String(255))
    last_name: Mapped[str | None] = mapped_column(String(255))
    era_commons_id: Mapped[str | None] = mapped_column(String(255))
    nih_ned_id: Mapped[str | None] = mapped_column(String(255))
    commercial_use_reason: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255))
    external_individual_fullname: Mapped[str | None] = mapped_column(Text)
    external_individual_email: Mapped[str | None] = mapped_column(Text)
    roles: Mapped[list[str] | None] = mapped_column(ARRAY(Text))
    affiliation: Mapped[str | None] = mapped_column(String(255))
    public_email: Mapped[str | None] = mapped_column(Text)
    linkedin: Mapped[str | None] = mapped_column(Text)
    portal_usages: Mapped[list[str] | None] = mapped_column(ARRAY(Text))
    research_domains: Mapped[list[str] | None] = mapped_column(ARRAY(Text))
    research_area_description: Mapped[str | None] = mapped_column(Text)
    profile_image_key: Mapped[str | None] = mapped_column(Text)
    creation_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    consent_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    accepted_terms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    understand_disclaimer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_registration: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    config: Mapped[Any] = mapped_column(JSONB, nullable=False, server_default="{}")
    locale: Mapped[str | None] = mapped_column(
        Enum(*_values(Locale), name="locale", native_enum=False, create_constraint=True)
    )
    newsletter_email: Mapped[str | None] = mapped_column(Text)
    newsletter_subscription_status: Mapped[str | None] = mapped_column(
        Enum(
            *_values(SubscriptionStatus),
            name="newsletter_subscription_status",
            native_enum=False,
            create_constraint=True,
        )
    )

    __table_args__ = (UniqueConstraint("keycloak_id"),)
