"""Declarative base shared by all tables."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, registry

# Create a registry with type annotations
mapper_registry: registry = registry()

# Custom naming conventions for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


class BaseModel(DeclarativeBase):
    """Base model bound to the shared metadata."""

    registry = mapper_registry
    metadata = metadata

    __abstract__ = True
