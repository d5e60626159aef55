"""User service - create, read, update and delete keyed by subject identifier."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from users_api.core.domain_types import UserRecord
from users_api.core.exceptions import AlreadyExists, NotFound, ValidationFailure
from users_api.core.interfaces import UserRepository
from users_api.core.schema import build_record, find_violations, normalize, validate

logger = structlog.get_logger()

# Managed by the service, never taken from a client document.
READ_ONLY_FIELDS = frozenset({"id", "keycloak_id", "creation_date", "updated_date", "deleted"})


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _writable(attributes: Mapping[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in attributes.items() if name not in READ_ONLY_FIELDS}


def _log_validation_failure(operation: str, failure: ValidationFailure) -> None:
    logger.info(
        "user_validation_failed",
        operation=operation,
        field=failure.field,
        reason=failure.reason,
    )


class UserService:
    """Facade over the user store.

    Every operation is a stateless transformation against the repository:
    validation happens before any store call, and store errors propagate
    as StoreFailure without retries.
    """

    def __init__(
        self,
        repository: UserRepository,
        soft_delete: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the service.

        Args:
            repository: User store.
            soft_delete: Mark records deleted instead of removing them.
            clock: Source of "now" for timestamps.
        """
        self._repository = repository
        self._soft_delete = soft_delete
        self._clock = clock

    async def get_user(self, subject_id: str) -> UserRecord:
        """Return the record for a subject.

        Raises:
            NotFound: No live record exists.
        """
        record = await self._repository.get_by_keycloak_id(subject_id)
        if record is None:
            raise NotFound(subject_id)
        return record

    async def create_user(self, subject_id: str, attributes: Mapping[str, Any]) -> UserRecord:
        """Create the record for a subject.

        Args:
            subject_id: Identity provider subject; stored as ``keycloak_id``.
            attributes: Client attribute document.

        Returns:
            The stored record.

        Raises:
            ValidationFailure: The attributes (or subject) violate a field rule.
            AlreadyExists: A record already exists for the subject.
        """
        candidate = {**_writable(attributes), "keycloak_id": subject_id}
        try:
            record = build_record(candidate, now=self._clock())
        except ValidationFailure as e:
            _log_validation_failure("create", e)
            raise

        created = await self._repository.insert(record)
        if created is None:
            raise AlreadyExists(subject_id)

        logger.info("user_created", keycloak_id=subject_id, user_id=created.id)
        return created

    async def update_user(self, subject_id: str, attributes: Mapping[str, Any]) -> UserRecord:
        """Merge ``attributes`` over the subject's record.

        The changed fields are checked before the store is touched; the merged
        record is then validated in full under the store's row lock, so a
        concurrent update to another field cannot be lost.

        Raises:
            ValidationFailure: The merged record violates a field rule.
            NotFound: No live record exists.
        """
        changes = normalize(_writable(attributes))
        failures = find_violations(changes, partial=True)
        if failures:
            _log_validation_failure("update", failures[0])
            raise failures[0]

        now = self._clock()

        def merge(current: UserRecord) -> UserRecord:
            return validate({**current.model_dump(), **changes, "updated_date": now})

        try:
            updated = await self._repository.update_with(subject_id, merge)
        except ValidationFailure as e:
            _log_validation_failure("update", e)
            raise
        if updated is None:
            raise NotFound(subject_id)

        logger.info("user_updated", keycloak_id=subject_id, fields=sorted(changes))
        return updated

    async def delete_user(self, subject_id: str) -> None:
        """Delete the subject's record.

        Raises:
            NotFound: No live record exists.
        """
        deleted = await self._repository.delete(subject_id, soft=self._soft_delete)
        if not deleted:
            raise NotFound(subject_id)

        logger.info("user_deleted", keycloak_id=subject_id, soft=self._soft_delete)
