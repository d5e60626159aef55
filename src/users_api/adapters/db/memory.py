"""In-memory user repository for development and testing."""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from datetime import UTC, datetime

from users_api.core.domain_types import UserRecord


class InMemoryUserRepository:
    """Process-local user store.

    This repository is useful for:
    - Unit testing the service without a database
    - Running the API locally with ``APP_DATABASE_URL=memory://``

    Writes to a subject are serialized with a lock, mirroring the row lock
    the PostgreSQL repository takes for read-modify-write updates.

    Attributes:
        records: Stored records by keycloak_id, including soft-deleted ones.
    """

    def __init__(self, records: list[UserRecord] | None = None) -> None:
        """Initialize the repository.

        Args:
            records: Records to preload; ids are assigned when missing.
        """
        self.records: dict[str, UserRecord] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()
        for record in records or []:
            self._store(record)

    def _store(self, record: UserRecord) -> UserRecord:
        if record.id is None:
            record = record.model_copy(update={"id": next(self._ids)})
        self.records[record.keycloak_id] = record
        return record

    def _live(self, keycloak_id: str) -> UserRecord | None:
        record = self.records.get(keycloak_id)
        if record is None or record.deleted:
            return None
        return record

    async def get_by_keycloak_id(self, keycloak_id: str) -> UserRecord | None:
        """Get the live user for a subject."""
        return self._live(keycloak_id)

    async def insert(self, record: UserRecord) -> UserRecord | None:
        """Insert a user unless one already exists for the subject."""
        async with self._lock:
            if record.keycloak_id in self.records:
                return None
            return self._store(record.model_copy(update={"id": None}))

    async def update_with(
        self,
        keycloak_id: str,
        apply: Callable[[UserRecord], UserRecord],
    ) -> UserRecord | None:
        """Transform the live user for a subject under the write lock."""
        async with self._lock:
            current = self._live(keycloak_id)
            if current is None:
                return None
            # Suspend between read and write, as a store round trip would.
            await asyncio.sleep(0)
            updated = apply(current)
            return self._store(updated.model_copy(update={"id": current.id}))

    async def delete(self, keycloak_id: str, soft: bool = True) -> bool:
        """Delete or soft-delete the live user for a subject."""
        async with self._lock:
            current = self._live(keycloak_id)
            if current is None:
                return False
            if soft:
                self.records[keycloak_id] = current.model_copy(
                    update={"deleted": True, "updated_date": datetime.now(UTC)}
                )
            else:
                del self.records[keycloak_id]
            return True
