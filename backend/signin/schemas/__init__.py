"""Marshmallow schemas used by the HTTP layer."""

from __future__ import annotations

from .auth import (
    AccessTokenSchema,
    IdentitySchema,
    LoginSchema,
    NotProvisionedSchema,
    RefreshTokenSchema,
    TokenResponseSchema,
    UserProfileSchema,
)

__all__ = [
    "AccessTokenSchema",
    "IdentitySchema",
    "LoginSchema",
    "NotProvisionedSchema",
    "RefreshTokenSchema",
    "TokenResponseSchema",
    "UserProfileSchema",
]
