"""Mint and persist access tokens derived from a refresh token."""

from __future__ import annotations

import logging

from signin.services._shared.base import BaseService
from signin.services._shared.ports import AccessTokenStore
from signin.services.tokens.dto import (
    ACCESS_TOKEN_LIFETIME,
    AccessToken,
    RefreshToken,
    new_token_id,
)

log = logging.getLogger(__name__)


class AccessTokenIssuer(BaseService):
    """
    Create short-lived access tokens.

    Only accepts a materialized :class:`RefreshToken`, so an access token can
    never exist without the refresh token it points at.

    :param store: Where records are persisted.
    :type store: AccessTokenStore
    """

    def __init__(self, *, store: AccessTokenStore) -> None:
        self.store = store

    def issue(self, refresh_token: RefreshToken) -> AccessToken:
        """
        :param refresh_token: Parent token; supplies ``user_id``.
        :returns: The stored record, expiring one day from now.
        :raises TokenPersistenceError: When the store rejects the write.
        """
        now = self.now_utc()
        token = AccessToken(
            id=new_token_id(),
            user_id=refresh_token.user_id,
            refresh_token_id=refresh_token.id,
            created_at=now,
            expires_at=now + ACCESS_TOKEN_LIFETIME,
        )
        self.store.save(token)
        log.info(
            "access_token.issued",
            extra={"user_id": token.user_id, "token_id": token.id},
        )
        return token
