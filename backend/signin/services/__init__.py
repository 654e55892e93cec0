"""Service layer public API.

Callers import from :mod:`signin.services` without knowing the internal
structure.

Re-exports
----------
- Base primitives (from ``signin.services._shared.base``)
    * :class:`BaseService`

- Identity verification (from ``signin.services.identity``)
    * :class:`IdentityVerifier`
    * DTOs: :class:`IdentityVerifierConfig`, :class:`VerifiedIdentity`,
      :class:`Verified`, :class:`Rejected`, :class:`VerificationFailure`

- User resolution (from ``signin.services.users``)
    * :class:`UserResolver`, DTO :class:`UserOut`

- Token issuance (from ``signin.services.tokens``)
    * :class:`RefreshTokenIssuer`, :class:`AccessTokenIssuer`
    * DTOs: :class:`RefreshToken`, :class:`AccessToken`, :class:`ClientContext`

- Login (from ``signin.services.login``)
    * :class:`LoginService`
    * DTOs: :class:`LoginIn`, :class:`LoginCompleted`, :class:`LoginRejected`,
      :class:`LoginNotProvisioned`, :class:`RejectionReason`,
      :class:`TokenPairOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .identity.dto import (
    IdentityVerifierConfig,
    Rejected,
    VerificationFailure,
    Verified,
    VerifiedIdentity,
)
from .identity.verifier import IdentityVerifier
from .login.dto import (
    LoginCompleted,
    LoginIn,
    LoginNotProvisioned,
    LoginRejected,
    RejectionReason,
    TokenPairOut,
)
from .login.service import LoginService
from .tokens.access import AccessTokenIssuer
from .tokens.dto import AccessToken, ClientContext, RefreshToken
from .tokens.refresh import RefreshTokenIssuer
from .users.dto import UserOut
from .users.resolver import UserResolver

__all__ = [
    "BaseService",
    "IdentityVerifier",
    "IdentityVerifierConfig",
    "VerifiedIdentity",
    "Verified",
    "Rejected",
    "VerificationFailure",
    "UserResolver",
    "UserOut",
    "RefreshTokenIssuer",
    "AccessTokenIssuer",
    "RefreshToken",
    "AccessToken",
    "ClientContext",
    "LoginService",
    "LoginIn",
    "LoginCompleted",
    "LoginRejected",
    "LoginNotProvisioned",
    "RejectionReason",
    "TokenPairOut",
]
