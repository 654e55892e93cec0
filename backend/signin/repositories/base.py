"""Generic repository base for SQLAlchemy 2.x.

Repositories stay persistence-only:
- They never implement use cases or domain policies.
- They never call commit/rollback; services define the Unit of Work.
"""

from __future__ import annotations

from typing import Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``: the SQLAlchemy mapped class.

    :param session: Session owned by the calling unit of work.
    :type session: sqlalchemy.orm.Session
    """

    model: type[E]

    def __init__(self, *, session: Session) -> None:
        self.session = session

    def _select(self) -> Select[tuple[E]]:
        """Return the base ``SELECT`` for the aggregate."""
        return select(self.model)

    def get(self, entity_id: int) -> E | None:
        """Fetch an entity by primary key.

        :param entity_id: Primary key value.
        :type entity_id: int
        :returns: The entity or ``None`` when missing.
        :rtype: E | None
        """
        return cast(E | None, self.session.get(self.model, entity_id))

    def first_where(self, *criteria) -> E | None:
        """Return the first row matching all equality ``criteria``."""
        stmt = self._select().where(*criteria).limit(1)
        return cast(E | None, self.session.execute(stmt).scalars().first())
