"""
DTOs for UserResolver.

The service layer never holds ORM rows; lookups are mapped to
:class:`UserOut` through :func:`to_user_out`.
"""

from __future__ import annotations

from dataclasses import dataclass

from signin.models.user import User


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Read-only view of an internal user.

    :param id: Internal user id.
    :type id: int
    :param external_id: Identity-provider subject linked to the user.
    :type external_id: str
    :param name: Display name.
    :type name: str
    :param username: Public username.
    :type username: str
    :param email: Contact email.
    :type email: str
    :param picture: Avatar URL, if any.
    :type picture: str | None
    """

    id: int
    external_id: str
    name: str
    username: str
    email: str
    picture: str | None = None


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        external_id=user.external_id,
        name=user.name,
        username=user.username,
        email=user.email,
        picture=user.picture,
    )
