"""
DTOs and tagged outcomes for identity verification.

``IdentityVerifier.verify`` returns either :class:`Verified` or
:class:`Rejected`; callers branch on the type instead of catching exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class VerificationFailure(str, Enum):
    """Why an assertion was rejected."""

    INVALID = "invalid credential"
    AUDIENCE_MISMATCH = "audience mismatch"
    EXPIRED = "credential expired"


@dataclass(frozen=True, slots=True)
class IdentityVerifierConfig:
    """
    Process-wide verification settings, frozen at startup.

    :param audience: Expected ``aud`` (server id registered with the provider).
    :type audience: str
    :param authorized_party: Expected ``azp`` (front-end client id).
    :type authorized_party: str
    :param issuers: Trusted ``iss`` values.
    :type issuers: tuple[str, ...]
    :param algorithms: Accepted signing algorithms.
    :type algorithms: tuple[str, ...]
    :param leeway_seconds: Clock skew tolerated on time-bound claims.
    :type leeway_seconds: int
    """

    audience: str
    authorized_party: str
    issuers: tuple[str, ...]
    algorithms: tuple[str, ...] = ("RS256",)
    leeway_seconds: int = 0

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> IdentityVerifierConfig:
        """Build from a Flask config mapping (``IDP_*`` keys)."""
        issuers = config.get("IDP_ISSUERS", ())
        if isinstance(issuers, str):
            issuers = tuple(i.strip() for i in issuers.split(",") if i.strip())
        return cls(
            audience=str(config.get("IDP_AUDIENCE", "")),
            authorized_party=str(config.get("IDP_AUTHORIZED_PARTY", "")),
            issuers=tuple(issuers),
            leeway_seconds=int(config.get("IDP_LEEWAY_SECONDS", 0)),
        )


@dataclass(frozen=True, slots=True)
class VerifiedIdentity:
    """
    Claims of a verified assertion needed downstream (not a User record).

    :param subject: Stable external subject (``sub``).
    :type subject: str
    :param email: Email claim, if shared.
    :type email: str | None
    :param name: Display name claim, if shared.
    :type name: str | None
    :param picture: Avatar URL claim, if shared.
    :type picture: str | None
    """

    subject: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> VerifiedIdentity:
        return cls(
            subject=str(claims["sub"]),
            email=claims.get("email"),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )


@dataclass(frozen=True, slots=True)
class Verified:
    identity: VerifiedIdentity


@dataclass(frozen=True, slots=True)
class Rejected:
    """
    Normal negative outcome of verification.

    :param failure: Classified cause.
    :param detail: Diagnostic text for logs; never shown to clients.
    """

    failure: VerificationFailure
    detail: str = ""


VerificationResult = Verified | Rejected
