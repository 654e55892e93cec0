"""User repository: lookups used while resolving verified identities."""

from __future__ import annotations

from signin.models.user import User
from signin.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER creates users; provisioning belongs to the user subsystem.
    """

    model = User

    def get_by_external_id(self, external_id: str) -> User | None:
        """Fetch the user linked to an identity-provider subject.

        The ``uq_users_external_id`` constraint guarantees at most one match.

        :param external_id: Subject (``sub``) claim of a verified assertion.
        :type external_id: str
        :returns: User instance or ``None`` when not provisioned.
        :rtype: User | None
        """
        return self.first_where(User.external_id == external_id)
