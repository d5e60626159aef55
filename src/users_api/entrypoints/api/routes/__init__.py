"""API routes."""

from fastapi import APIRouter

from users_api.entrypoints.api.routes.users import router as users_router

api_router = APIRouter()
api_router.include_router(users_router)

__all__ = ["api_router"]
