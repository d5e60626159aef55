"""User account routes.

Every route acts on the record of the authenticated subject; there is no
way to address another user's record.
"""

from __future__ import annotations

from typing import Annotated, Any, NoReturn

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException

from users_api.core.domain_types import UserRecord
from users_api.core.exceptions import (
    AlreadyExists,
    DuplicateUniqueKey,
    NotFound,
    StoreFailure,
    UsersApiError,
    ValidationFailure,
)
from users_api.entrypoints.api.deps import get_user_service
from users_api.entrypoints.api.middleware.keycloak import verify_subject
from users_api.services.users import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/user", tags=["users"])

# Annotated types for dependency injection
SubjectDep = Annotated[str, Depends(verify_subject)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AttributesBody = Annotated[dict[str, Any], Body()]


def _raise_http(error: UsersApiError) -> NoReturn:
    """Map a domain error to the matching HTTP error."""
    if isinstance(error, ValidationFailure):
        raise HTTPException(status_code=400, detail=error.to_dict()) from error
    if isinstance(error, NotFound):
        raise HTTPException(status_code=404, detail="User not found") from error
    if isinstance(error, AlreadyExists):
        raise HTTPException(status_code=409, detail="User already exists") from error
    if isinstance(error, DuplicateUniqueKey):
        raise HTTPException(
            status_code=409,
            detail=f"Duplicate value for {error.field}",
        ) from error
    if isinstance(error, StoreFailure):
        logger.error("user_store_unavailable", error=str(error))
        raise HTTPException(status_code=500, detail="User store failure") from error
    raise error


@router.get("", response_model=UserRecord)
async def get_user(subject_id: SubjectDep, service: UserServiceDep) -> UserRecord:
    """Get the current subject's user record."""
    try:
        return await service.get_user(subject_id)
    except UsersApiError as e:
        _raise_http(e)


@router.post("", response_model=UserRecord, status_code=201)
async def create_user(
    attributes: AttributesBody,
    subject_id: SubjectDep,
    service: UserServiceDep,
) -> UserRecord:
    """Create the current subject's user record."""
    try:
        return await service.create_user(subject_id, attributes)
    except UsersApiError as e:
        _raise_http(e)


@router.put("", response_model=UserRecord)
async def update_user(
    attributes: AttributesBody,
    subject_id: SubjectDep,
    service: UserServiceDep,
) -> UserRecord:
    """Update fields of the current subject's user record."""
    try:
        return await service.update_user(subject_id, attributes)
    except UsersApiError as e:
        _raise_http(e)


@router.delete("")
async def delete_user(subject_id: SubjectDep, service: UserServiceDep) -> str:
    """Delete the current subject's user record.

    Returns the subject identifier of the deleted record.
    """
    try:
        await service.delete_user(subject_id)
    except UsersApiError as e:
        _raise_http(e)
    return subject_id
