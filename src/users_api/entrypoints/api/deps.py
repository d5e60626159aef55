"""Dependency injection and application lifespan management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Request

from users_api.adapters.db.app_db import AppDatabase
from users_api.adapters.db.memory import InMemoryUserRepository
from users_api.adapters.db.user_repository import PostgresUserRepository
from users_api.core.interfaces import UserRepository
from users_api.services.users import UserService

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()

MEMORY_DATABASE_URL = "memory://"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        self.database_url = os.getenv("DATABASE_URL", "postgresql://localhost:5432/users")
        self.app_database_url = os.getenv("APP_DATABASE_URL", self.database_url)
        self.db_pool_min_size = int(os.getenv("DB_POOL_MIN_SIZE", "2"))
        self.db_pool_max_size = int(os.getenv("DB_POOL_MAX_SIZE", "10"))
        self.auto_create_schema = _env_flag("AUTO_CREATE_SCHEMA", "true")

        # Identity provider
        self.keycloak_url = os.getenv("KEYCLOAK_URL", "http://localhost:8080")
        self.keycloak_realm = os.getenv("KEYCLOAK_REALM", "users")
        self.keycloak_audience = os.getenv("KEYCLOAK_AUDIENCE", "")

        # "soft" marks records deleted, "hard" removes the row
        self.user_delete_mode = os.getenv("USER_DELETE_MODE", "soft").lower()
        if self.user_delete_mode not in {"soft", "hard"}:
            raise ValueError(
                f"USER_DELETE_MODE must be 'soft' or 'hard', got {self.user_delete_mode}"
            )

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def keycloak_certs_url(self) -> str:
        """JWKS endpoint of the configured realm."""
        base = self.keycloak_url.rstrip("/")
        return f"{base}/realms/{self.keycloak_realm}/protocol/openid-connect/certs"


settings = Settings()


def configure_logging(level: str) -> None:
    """Set the minimum structlog level."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level, logging.INFO)
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Logging configuration
    - Database connection pool setup and schema bootstrap
    - User repository selection
    """
    configure_logging(settings.log_level)

    app_db: AppDatabase | None = None
    repository: UserRepository
    if settings.app_database_url.startswith(MEMORY_DATABASE_URL):
        logger.warning("using_in_memory_user_store")
        repository = InMemoryUserRepository()
    else:
        app_db = AppDatabase(
            settings.app_database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
        await app_db.connect()
        if settings.auto_create_schema:
            await app_db.ensure_schema()
        repository = PostgresUserRepository(app_db)

    app.state.app_db = app_db
    app.state.user_repository = repository

    yield

    if app_db is not None:
        await app_db.close()


def get_user_repository(request: Request) -> UserRepository:
    """Get the user repository from app state."""
    repository: UserRepository = request.app.state.user_repository
    return repository


def get_user_service(request: Request) -> UserService:
    """Build the user service for a request."""
    return UserService(
        get_user_repository(request),
        soft_delete=settings.user_delete_mode == "soft",
    )
