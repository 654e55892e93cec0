"""
Read-only SQLAlchemy Unit of Work over an explicitly supplied session.
"""

from __future__ import annotations

from sqlalchemy.orm import Session, SessionTransaction, scoped_session

from signin.repositories import UserRepository
from signin.uow.base import UnitOfWork


class SQLAlchemyReadOnlyUnitOfWork(UnitOfWork):
    """
    Read-only Unit of Work.

    If the session has no transaction in progress, the UoW begins one and
    always rolls it back on exit. If a transaction is already running (outer
    request scope or a test fixture), it attaches to it and leaves it alone.

    :param session: Session handle passed in by the caller; a
        ``scoped_session`` registry is resolved to its current session.
    :type session: sqlalchemy.orm.Session | sqlalchemy.orm.scoped_session
    """

    def __init__(self, *, session: Session | scoped_session) -> None:
        if isinstance(session, scoped_session):
            session = session()
        self.session = session
        self.users = UserRepository(session=session)
        self._txn: SessionTransaction | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        if not self.session.in_transaction():
            self._txn = self.session.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._txn is not None:
            try:
                self.rollback()
            finally:
                self._txn = None

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        """Roll back the transaction owned by this unit of work."""
        if self._txn is not None and self._txn.is_active:
            self._txn.rollback()
