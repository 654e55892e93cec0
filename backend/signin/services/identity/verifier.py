"""
IdentityVerifier
================

Validates identity assertions (OpenID Connect ID tokens) issued by an
external provider and extracts the subject and profile claims.

Checks, in order:

1. Signature against the provider's published key for the token's ``kid``.
2. ``exp``/``iat`` and ``aud`` (== configured audience), via PyJWT.
3. ``iss`` is one of the trusted issuers.
4. ``azp`` (authorized party) == configured client id.

Expired assertions are reported separately from every other rejection so the
caller can say "credential expired" rather than "unauthorized".
"""

from __future__ import annotations

import logging

import jwt

from signin.services._shared.ports.signing_keys import SigningKeySource
from signin.services.identity.dto import (
    IdentityVerifierConfig,
    Rejected,
    VerificationFailure,
    VerificationResult,
    Verified,
    VerifiedIdentity,
)

log = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["exp", "iat", "iss", "sub", "aud"]


class IdentityVerifier:
    """
    Verify assertions against one trusted issuer.

    :param config: Frozen audience/issuer settings.
    :param keys: Source of the issuer's public keys.
    """

    def __init__(self, *, config: IdentityVerifierConfig, keys: SigningKeySource) -> None:
        self.config = config
        self.keys = keys

    def verify(self, assertion: str) -> VerificationResult:
        """
        Verify ``assertion`` and classify the outcome.

        :param assertion: Compact JWS string supplied by the client.
        :returns: :class:`Verified` with the identity claims, or
            :class:`Rejected` with the reason.
        :raises IdentityProviderError: When the key source cannot be reached.
        """
        try:
            header = jwt.get_unverified_header(assertion)
        except jwt.InvalidTokenError as exc:
            return self._reject(VerificationFailure.INVALID, f"malformed assertion: {exc}")

        key = self.keys.get_signing_key(header.get("kid"))
        if key is None:
            return self._reject(VerificationFailure.INVALID, "unknown signing key")

        try:
            claims = jwt.decode(
                assertion,
                key,
                algorithms=list(self.config.algorithms),
                audience=self.config.audience,
                leeway=self.config.leeway_seconds,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            return self._reject(VerificationFailure.EXPIRED, "assertion used after exp")
        except jwt.InvalidTokenError as exc:
            return self._reject(VerificationFailure.INVALID, str(exc))

        if claims.get("iss") not in self.config.issuers:
            return self._reject(VerificationFailure.INVALID, "untrusted issuer")

        if claims.get("azp") != self.config.authorized_party:
            return self._reject(VerificationFailure.AUDIENCE_MISMATCH, "azp does not match")

        return Verified(VerifiedIdentity.from_claims(claims))

    @staticmethod
    def _reject(failure: VerificationFailure, detail: str) -> Rejected:
        log.info("identity.rejected", extra={"reason": failure.value})
        log.debug("identity.rejected detail=%s", detail)
        return Rejected(failure=failure, detail=detail)
