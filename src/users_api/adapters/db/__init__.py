"""User store adapters."""

from users_api.adapters.db.app_db import AppDatabase
from users_api.adapters.db.memory import InMemoryUserRepository
from users_api.adapters.db.user_repository import PostgresUserRepository

__all__ = ["AppDatabase", "InMemoryUserRepository", "PostgresUserRepository"]
