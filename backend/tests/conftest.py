"""Pytest fixtures for the sign-in service.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database, with a fresh in-memory Redis and a local identity provider
whose keys the app trusts.
"""

from __future__ import annotations

import os

import fakeredis
import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from signin.core.config import TestingConfig
from signin.core.extensions import db as _db  # Flask-SQLAlchemy instance
from signin.factory import create_app  # application factory under test
from signin.services._shared.ports import StaticSigningKeySource
from tests.helpers.idp import FakeIdentityProvider


@pytest.fixture(scope="session")
def idp():
    """Identity provider double signing RS256 assertions with one key pair."""
    return FakeIdentityProvider()


@pytest.fixture(scope="session")
def redis_server():
    """Shared fake Redis server; toggle ``connected`` to simulate outages."""
    return fakeredis.FakeServer()


@pytest.fixture(scope="session")
def app(idp, redis_server):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application wired to fake Redis and the local identity provider.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(
        TestingConfig,
        redis_client=fakeredis.FakeRedis(server=redis_server),
        key_source=StaticSigningKeySource({idp.kid: idp.public_key}),
    )
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(autouse=True)
def _app_context(app):
    """Push a fresh application context (and so a fresh ``g``) per test."""
    with app.app_context():
        yield


@pytest.fixture(scope="function")
def session(db, connection, _app_context):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    Begins a top-level transaction, starts a SAVEPOINT per test, and
    reinstalls the SAVEPOINT whenever SQLAlchemy ends one. ``db.session`` is
    swapped for the test session so app code (which looks it up per call)
    uses it.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def redis_client(redis_server):
    """Client on the app's fake server, emptied before each test."""
    client = fakeredis.FakeRedis(server=redis_server)
    redis_server.connected = True
    client.flushall()
    yield client
    redis_server.connected = True


@pytest.fixture()
def client(app, redis_client):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
