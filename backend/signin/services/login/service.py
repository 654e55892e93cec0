"""
LoginService
============

Orchestrates a login attempt:

``verify assertion -> resolve user -> issue refresh token -> issue access token``

Expected negative outcomes are returned as data (see
:mod:`signin.services.login.dto`). Failures of the identity provider, the
user store or the token stores are raised as
:class:`~signin.services._shared.errors.DependencyError` and never retried:
tokens are not idempotent, a retry would mint a second pair.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from signin.services._shared.base import BaseService
from signin.services.identity.dto import Rejected, VerificationFailure
from signin.services.identity.verifier import IdentityVerifier
from signin.services.login.dto import (
    LoginCompleted,
    LoginIn,
    LoginNotProvisioned,
    LoginRejected,
    LoginResult,
    RejectionReason,
    TokenPairOut,
)
from signin.services.tokens.access import AccessTokenIssuer
from signin.services.tokens.client_context import parse_client_context
from signin.services.tokens.refresh import RefreshTokenIssuer
from signin.services.users.resolver import UserResolver

log = logging.getLogger(__name__)


def normalize_method(method: str) -> str:
    return method.strip().lower()


class LoginService(BaseService):
    """
    Application service for the login flow.

    :param verifiers: ``{method: verifier}``; selectors are matched after
        :func:`normalize_method`.
    :type verifiers: Mapping[str, IdentityVerifier]
    :param users: Subject to user lookup.
    :type users: UserResolver
    :param refresh_tokens: Refresh token issuer.
    :type refresh_tokens: RefreshTokenIssuer
    :param access_tokens: Access token issuer.
    :type access_tokens: AccessTokenIssuer
    """

    def __init__(
        self,
        *,
        verifiers: Mapping[str, IdentityVerifier],
        users: UserResolver,
        refresh_tokens: RefreshTokenIssuer,
        access_tokens: AccessTokenIssuer,
    ) -> None:
        self.verifiers = {normalize_method(k): v for k, v in verifiers.items()}
        self.users = users
        self.refresh_tokens = refresh_tokens
        self.access_tokens = access_tokens

    def login(self, dto: LoginIn) -> LoginResult:
        """
        Run one login attempt.

        :param dto: Method selector, assertion and raw client string.
        :type dto: LoginIn
        :returns: Completed token pair, a rejection, or the verified identity
            of an unprovisioned user.
        :rtype: LoginResult
        :raises DependencyError: When a collaborator fails.
        """
        method = normalize_method(dto.method)
        verifier = self.verifiers.get(method)
        if verifier is None:
            return self._reject(RejectionReason.UNKNOWN_METHOD, method)

        verification = verifier.verify(dto.credential)
        if isinstance(verification, Rejected):
            if verification.failure is VerificationFailure.EXPIRED:
                return self._reject(RejectionReason.CREDENTIAL_EXPIRED, method)
            return self._reject(RejectionReason.UNAUTHORIZED, method)

        identity = verification.identity
        user = self.users.find_by_external_id(identity.subject)
        if user is None:
            log.info("login.not_provisioned", extra={"method": method})
            return LoginNotProvisioned(identity=identity)

        client = parse_client_context(dto.user_agent)
        refresh_token = self.refresh_tokens.issue(user, client)
        access_token = self.access_tokens.issue(refresh_token)

        log.info("login.completed", extra={"method": method, "user_id": user.id})
        return LoginCompleted(
            TokenPairOut(access_token=access_token, refresh_token=refresh_token, user=user)
        )

    @staticmethod
    def _reject(reason: RejectionReason, method: str) -> LoginRejected:
        log.info("login.rejected", extra={"method": method, "reason": reason.value})
        return LoginRejected(reason)
