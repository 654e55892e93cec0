"""User model as seen by the sign-in service."""

from __future__ import annotations

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from signin.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Internal identity linked to one external identity-provider subject.

    Rows are provisioned by the user subsystem; this service only reads them
    to resolve a verified subject into an internal user.

    Fields
    ------
    external_id : str
        Stable subject (``sub``) issued by the identity provider. Unique.
    name : str
        Display name.
    username : str
        Public handle. Unique per system.
    email : str
        Contact email. Stored normalized (lowercase, trimmed).
    picture : str | None
        Avatar URL reported by the identity provider.
    """

    __tablename__ = "users"

    external_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    picture: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    __table_args__ = (
        UniqueConstraint("external_id", name="uq_users_external_id"),
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_external_id", "external_id"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize email.

        :raises ValueError: If email is missing.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        return value.strip().lower()
