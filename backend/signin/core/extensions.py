"""Flask extension instances and store-handle construction helpers."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Unbound until init_app(); models declare against db.Model
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)


def init_app(app: Flask) -> None:
    """Bind SQLAlchemy to the app and make sure the models are registered.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind the extension instance.
    """
    db.init_app(app)

    from signin import models as _models  # noqa: F401


def connect_redis(url: str) -> redis.Redis:
    """Open the token-store client once at startup and check it answers.

    :param url: ``redis://`` URL from ``REDIS_URL``.
    :returns: Connected client, shared read/write by every token store.
    :raises RuntimeError: If Redis cannot be reached.
    """
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    log.info("redis.connected")
    return client
