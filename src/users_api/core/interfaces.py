"""Protocol definitions for the user store.

The service facade only depends on this protocol, never on a concrete
store. Implementations live in ``users_api.adapters.db``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from users_api.core.domain_types import UserRecord


@runtime_checkable
class UserRepository(Protocol):
    """Interface for user record persistence.

    Records are keyed by ``keycloak_id``. Soft-deleted records are never
    returned. Implementations wrap their driver errors in StoreFailure.
    """

    async def get_by_keycloak_id(self, keycloak_id: str) -> UserRecord | None:
        """Return the live record for a subject, or None."""
        ...

    async def insert(self, record: UserRecord) -> UserRecord | None:
        """Insert a new record.

        Returns:
            The stored record with its generated id, or None when a record
            (live or soft-deleted) already exists for ``record.keycloak_id``.
        """
        ...

    async def update_with(
        self,
        keycloak_id: str,
        apply: Callable[[UserRecord], UserRecord],
    ) -> UserRecord | None:
        """Atomically read, transform and write a live record.

        ``apply`` runs while the record is locked against concurrent
        writers; if it raises, nothing is written and the error propagates.

        Returns:
            The stored record, or None when no live record exists.
        """
        ...

    async def delete(self, keycloak_id: str, soft: bool = True) -> bool:
        """Delete (or soft-delete) the live record for a subject.

        Returns:
            True if a record was affected.
        """
        ...
