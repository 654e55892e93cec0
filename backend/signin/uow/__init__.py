"""Unit of Work abstractions and the SQLAlchemy read-only implementation."""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork

__all__ = ["UnitOfWork", "SQLAlchemyReadOnlyUnitOfWork"]
