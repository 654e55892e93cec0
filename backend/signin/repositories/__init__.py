"""Repository layer re-exports."""

from signin.repositories.base import BaseRepository
from signin.repositories.user import UserRepository

__all__ = ["BaseRepository", "UserRepository"]
