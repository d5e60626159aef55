"""PostgreSQL user repository."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any

import asyncpg
import structlog

from users_api.adapters.db.app_db import AppDatabase
from users_api.core.domain_types import UserRecord
from users_api.core.exceptions import DuplicateUniqueKey, StoreFailure
from users_api.core.schema import USER_FIELDS

logger = structlog.get_logger()

_COLUMNS = tuple(spec.name for spec in USER_FIELDS if spec.name != "id")
_UPDATABLE = tuple(name for name in _COLUMNS if name != "keycloak_id")
_UNIQUE_PREFIX = "uq_users_"


def _to_row(record: UserRecord) -> dict[str, Any]:
    """Convert a record to asyncpg-ready column values."""
    row: dict[str, Any] = {}
    for name in _COLUMNS:
        value = getattr(record, name)
        if isinstance(value, Enum):
            value = value.value
        row[name] = value
    row["config"] = json.dumps(record.config)
    return row


def _from_row(row: Mapping[str, Any]) -> UserRecord:
    """Convert a users row to a record."""
    data = dict(row)
    if isinstance(data.get("config"), str):
        data["config"] = json.loads(data["config"])
    return UserRecord.model_validate(data)


@asynccontextmanager
async def _store_errors(operation: str, keycloak_id: str) -> AsyncIterator[None]:
    """Wrap driver and connection errors in StoreFailure."""
    try:
        yield
    except asyncpg.UniqueViolationError as e:
        constraint = e.constraint_name or ""
        field = constraint.removeprefix(_UNIQUE_PREFIX) or "unknown"
        logger.warning(
            "user_store_duplicate",
            operation=operation,
            keycloak_id=keycloak_id,
            field=field,
        )
        raise DuplicateUniqueKey(field) from e
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
        logger.error(
            "user_store_failure",
            operation=operation,
            keycloak_id=keycloak_id,
            error=str(e),
        )
        raise StoreFailure(f"{operation} failed: {e}") from e


class PostgresUserRepository:
    """User repository backed by the ``users`` table."""

    def __init__(self, db: AppDatabase) -> None:
        """Initialize the repository."""
        self.db = db

    async def get_by_keycloak_id(self, keycloak_id: str) -> UserRecord | None:
        """Get the live user for a subject."""
        async with _store_errors("get", keycloak_id):
            row = await self.db.fetch_one(
                "SELECT * FROM users WHERE keycloak_id = $1 AND deleted = false",
                keycloak_id,
            )
        if row is None:
            return None
        return _from_row(row)

    async def insert(self, record: UserRecord) -> UserRecord | None:
        """Insert a user unless one already exists for the subject."""
        values = _to_row(record)
        placeholders = ", ".join(f"${i}" for i in range(1, len(_COLUMNS) + 1))
        query = f"""INSERT INTO users ({", ".join(_COLUMNS)})
                    VALUES ({placeholders})
                    ON CONFLICT (keycloak_id) DO NOTHING
                    RETURNING *"""

        async with _store_errors("insert", record.keycloak_id):
            row = await self.db.execute_returning(query, *(values[name] for name in _COLUMNS))
        if row is None:
            return None
        return _from_row(row)

    async def update_with(
        self,
        keycloak_id: str,
        apply: Callable[[UserRecord], UserRecord],
    ) -> UserRecord | None:
        """Lock the live row, transform it with ``apply`` and write it back."""
        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(_UPDATABLE, start=2))
        query = f"""UPDATE users SET {assignments}
                    WHERE id = $1
                    RETURNING *"""

        async with _store_errors("update", keycloak_id), self.db.transaction() as conn:
            row = await conn.fetchrow(
                """SELECT * FROM users
                   WHERE keycloak_id = $1 AND deleted = false
                   FOR UPDATE""",
                keycloak_id,
            )
            if row is None:
                return None

            current = _from_row(row)
            updated = apply(current)
            values = _to_row(updated)
            row = await conn.fetchrow(query, current.id, *(values[name] for name in _UPDATABLE))

        if row is None:
            return None
        return _from_row(row)

    async def delete(self, keycloak_id: str, soft: bool = True) -> bool:
        """Delete or soft-delete the live user for a subject."""
        async with _store_errors("delete", keycloak_id):
            if soft:
                result = await self.db.execute(
                    """UPDATE users SET deleted = true, updated_date = NOW()
                       WHERE keycloak_id = $1 AND deleted = false""",
                    keycloak_id,
                )
                return "UPDATE 0" not in result

            result = await self.db.execute(
                "DELETE FROM users WHERE keycloak_id = $1 AND deleted = false",
                keycloak_id,
            )
            return "DELETE 0" not in result
