"""
UserResolver
============

Maps a verified identity-provider subject to an internal user. Lookup only:
users are provisioned by another subsystem, so a miss is a normal outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from signin.services._shared.base import BaseService
from signin.services._shared.errors import UserLookupError
from signin.services.users.dto import UserOut, to_user_out
from signin.uow import SQLAlchemyReadOnlyUnitOfWork

log = logging.getLogger(__name__)


class UserResolver(BaseService):
    """
    Resolve external subjects through a read-only unit of work.

    :param session_factory: Returns the session to run the lookup on. Called
        per lookup so that request-scoped sessions are honoured.
    :type session_factory: Callable[[], Session]
    """

    def __init__(self, *, session_factory: Callable[[], Session]) -> None:
        self.session_factory = session_factory

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork(session=self.session_factory())

    def find_by_external_id(self, external_id: str) -> UserOut | None:
        """
        Look up the user linked to ``external_id``.

        :param external_id: Verified ``sub`` claim.
        :type external_id: str
        :returns: The user, or ``None`` when not provisioned.
        :rtype: UserOut | None
        :raises UserLookupError: When the user store fails.
        """
        try:
            with self.ro_uow() as uow:
                user = uow.users.get_by_external_id(external_id)
                return to_user_out(user) if user is not None else None
        except SQLAlchemyError as exc:
            log.error("users.lookup_failed", exc_info=True)
            raise UserLookupError("User lookup failed") from exc
