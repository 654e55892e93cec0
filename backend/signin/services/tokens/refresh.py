"""Mint and persist refresh tokens."""

from __future__ import annotations

import logging

from signin.services._shared.base import BaseService
from signin.services._shared.ports import RefreshTokenStore
from signin.services.tokens.dto import (
    REFRESH_TOKEN_LIFETIME,
    ClientContext,
    RefreshToken,
    new_token_id,
)
from signin.services.users.dto import UserOut

log = logging.getLogger(__name__)


class RefreshTokenIssuer(BaseService):
    """
    Create the long-lived session anchor for a resolved user.

    :param store: Where records are persisted; ``save`` must be durable.
    :type store: RefreshTokenStore
    """

    def __init__(self, *, store: RefreshTokenStore) -> None:
        self.store = store

    def issue(self, user: UserOut, client: ClientContext) -> RefreshToken:
        """
        Build a refresh token expiring six calendar months from now and
        persist it before returning.

        :param user: Owner of the token.
        :type user: UserOut
        :param client: Parsed client signature.
        :type client: ClientContext
        :returns: The stored record.
        :rtype: RefreshToken
        :raises TokenPersistenceError: When the store rejects the write.
        """
        now = self.now_utc()
        token = RefreshToken(
            id=new_token_id(),
            user_id=user.id,
            application=client.application,
            platform=client.platform,
            user_agent=client.user_agent,
            created_at=now,
            expires_at=now + REFRESH_TOKEN_LIFETIME,
        )
        self.store.save(token)
        log.info("refresh_token.issued", extra={"user_id": user.id, "token_id": token.id})
        return token
