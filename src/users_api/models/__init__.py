"""SQLAlchemy table declarations."""

from users_api.models.base import BaseModel, metadata
from users_api.models.user import User

__all__ = ["BaseModel", "User", "metadata"]
