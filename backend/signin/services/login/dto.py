"""
DTOs and tagged outcomes for LoginService.

A login ends in exactly one of :class:`LoginCompleted`,
:class:`LoginRejected` or :class:`LoginNotProvisioned`. Dependency failures
are the only thing raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from signin.services.identity.dto import VerifiedIdentity
from signin.services.tokens.dto import (
    ACCESS_TOKEN_EXPIRES_IN,
    TOKEN_TYPE,
    AccessToken,
    RefreshToken,
)
from signin.services.users.dto import UserOut

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for a login attempt.

    :param method: Login method selector (e.g., ``"google"``).
    :type method: str
    :param credential: Identity assertion issued by the provider.
    :type credential: str
    :param user_agent: Raw client string (``User-Agent`` header).
    :type user_agent: str
    """

    method: str
    credential: str
    user_agent: str = ""

    def __repr__(self) -> str:
        # Assertions are bearer credentials; keep them out of logs
        return f"LoginIn(method={self.method!r}, user_agent={self.user_agent!r})"


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


class RejectionReason(str, Enum):
    UNKNOWN_METHOD = "unknown method"
    UNAUTHORIZED = "unauthorized"
    CREDENTIAL_EXPIRED = "credential expired"


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Token pair handed to the client.

    :param access_token: Short-lived credential.
    :param refresh_token: Long-lived session anchor.
    :param user: Resolved user.
    :param expires_in: Access token lifetime in seconds.
    :param token_type: Always ``"Bearer"``.
    """

    access_token: AccessToken
    refresh_token: RefreshToken
    user: UserOut
    expires_in: int = ACCESS_TOKEN_EXPIRES_IN
    token_type: str = TOKEN_TYPE


@dataclass(frozen=True, slots=True)
class LoginCompleted:
    tokens: TokenPairOut


@dataclass(frozen=True, slots=True)
class LoginRejected:
    reason: RejectionReason


@dataclass(frozen=True, slots=True)
class LoginNotProvisioned:
    """The identity is valid but no internal user is linked to it yet."""

    identity: VerifiedIdentity


LoginResult = LoginCompleted | LoginRejected | LoginNotProvisioned
