"""
Token records and the fixed lifetimes they are minted with.

Both records are immutable: they are created once at login, persisted, and
never updated. Expiry is enforced by whoever consumes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final
from uuid import uuid4

from dateutil.relativedelta import relativedelta

# Calendar arithmetic: day-of-month is clamped (Aug 31 + 6 months -> Feb 28/29)
REFRESH_TOKEN_LIFETIME: Final[relativedelta] = relativedelta(months=6)
ACCESS_TOKEN_LIFETIME: Final[relativedelta] = relativedelta(days=1)

ACCESS_TOKEN_EXPIRES_IN: Final[int] = 86400
TOKEN_TYPE: Final[str] = "Bearer"


def new_token_id() -> str:
    """Return a random (version 4) UUID in canonical string form."""
    return str(uuid4())


@dataclass(frozen=True, slots=True)
class ClientContext:
    """
    Client signature recorded with a refresh token for audit.

    :param application: Normalized browser/application name and version.
    :type application: str
    :param platform: Normalized OS name and version.
    :type platform: str
    :param user_agent: Raw client string, kept verbatim and never indexed.
    :type user_agent: str
    """

    application: str
    platform: str
    user_agent: str


@dataclass(frozen=True, slots=True)
class RefreshToken:
    """
    Long-lived session anchor.

    :param id: Opaque UUID4 identifier, also the store key.
    :param user_id: Owning user.
    :param application: See :class:`ClientContext`.
    :param platform: See :class:`ClientContext`.
    :param user_agent: See :class:`ClientContext`.
    :param created_at: Issuance time (UTC).
    :param expires_at: ``created_at + 6 months``.
    """

    id: str
    user_id: int
    application: str
    platform: str
    user_agent: str
    created_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class AccessToken:
    """
    Short-lived credential derived from exactly one refresh token.

    :param id: Opaque UUID4 identifier, also the store key.
    :param user_id: Owning user (copied from the refresh token).
    :param refresh_token_id: Id of the refresh token it was derived from.
    :param created_at: Issuance time (UTC).
    :param expires_at: ``created_at + 1 day``.
    """

    id: str
    user_id: int
    refresh_token_id: str
    created_at: datetime
    expires_at: datetime
