# comments in English; reST docstrings
"""
Redis-backed token stores.

Layout
------
- ``{kind}:{id}``: hash with the record fields (timestamps in ISO 8601).
- ``{kind}:idx:{field}:{value}``: set of token ids, one per indexed field.

Records never expire in Redis: expiry is a property of the record, enforced
by whoever consumes the token.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from signin.services._shared.errors import RecordDecodeError, TokenPersistenceError
from signin.services._shared.ports import AccessTokenStore, RefreshTokenStore
from signin.services._shared.ports.token_store import (
    ACCESS_TOKEN_INDEXED_FIELDS,
    REFRESH_TOKEN_INDEXED_FIELDS,
    ensure_indexed,
)
from signin.services.tokens.dto import AccessToken, RefreshToken

T = TypeVar("T", RefreshToken, AccessToken)

REFRESH_TOKEN_KIND = "refresh_token"
ACCESS_TOKEN_KIND = "access_token"


# --------------------------------------------------------------------------- #
# Record codec
# --------------------------------------------------------------------------- #


def _s(value: Any) -> str:
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


def _normalize(raw: Mapping[Any, Any]) -> dict[str, str]:
    return {_s(k): _s(v) for k, v in raw.items()}


class _Fields:
    """Named field extraction that reports *which* field is wrong."""

    def __init__(self, kind: str, key: str, raw: Mapping[Any, Any]) -> None:
        self.kind = kind
        self.key = key
        self.raw = _normalize(raw)

    def text(self, name: str) -> str:
        try:
            return self.raw[name]
        except KeyError:
            raise RecordDecodeError(self.kind, self.key, f"missing field {name!r}") from None

    def integer(self, name: str) -> int:
        value = self.text(name)
        try:
            return int(value)
        except ValueError:
            raise RecordDecodeError(self.kind, self.key, f"{name!r} is not an integer") from None

    def timestamp(self, name: str) -> datetime:
        value = self.text(name)
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise RecordDecodeError(self.kind, self.key, f"{name!r} is not ISO 8601") from None
        if parsed.tzinfo is None:
            raise RecordDecodeError(self.kind, self.key, f"{name!r} has no timezone")
        return parsed


def encode_refresh_token(token: RefreshToken) -> dict[str, str]:
    return {
        "user_id": str(token.user_id),
        "application": token.application,
        "platform": token.platform,
        "user_agent": token.user_agent,
        "created_at": token.created_at.isoformat(),
        "expires_at": token.expires_at.isoformat(),
    }


def decode_refresh_token(key: str, raw: Mapping[Any, Any]) -> RefreshToken:
    """
    Rebuild a :class:`RefreshToken` from its hash.

    :param key: Token id (the hash key without prefix).
    :param raw: Hash fields as returned by ``HGETALL``.
    :raises RecordDecodeError: If a field is missing or malformed.
    """
    f = _Fields(REFRESH_TOKEN_KIND, key, raw)
    return RefreshToken(
        id=key,
        user_id=f.integer("user_id"),
        application=f.text("application"),
        platform=f.text("platform"),
        user_agent=f.text("user_agent"),
        created_at=f.timestamp("created_at"),
        expires_at=f.timestamp("expires_at"),
    )


def encode_access_token(token: AccessToken) -> dict[str, str]:
    return {
        "user_id": str(token.user_id),
        "refresh_token_id": token.refresh_token_id,
        "created_at": token.created_at.isoformat(),
        "expires_at": token.expires_at.isoformat(),
    }


def decode_access_token(key: str, raw: Mapping[Any, Any]) -> AccessToken:
    """
    Rebuild an :class:`AccessToken` from its hash.

    :raises RecordDecodeError: If a field is missing or malformed.
    """
    f = _Fields(ACCESS_TOKEN_KIND, key, raw)
    return AccessToken(
        id=key,
        user_id=f.integer("user_id"),
        refresh_token_id=f.text("refresh_token_id"),
        created_at=f.timestamp("created_at"),
        expires_at=f.timestamp("expires_at"),
    )


# --------------------------------------------------------------------------- #
# Stores
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class _RedisTokenStore(Generic[T]):
    """
    Shared hash + index-set persistence.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    kind: ClassVar[str]
    indexed_fields: ClassVar[tuple[str, ...]]
    encode: ClassVar[Callable[[Any], dict[str, str]]]
    decode: ClassVar[Callable[[str, Mapping[Any, Any]], Any]]

    # -------------------- helpers --------------------

    def _k(self, token_id: str) -> str:
        return f"{self.kind}:{token_id}"

    def _ki(self, field: str, value: str | int) -> str:
        return f"{self.kind}:idx:{field}:{value}"

    # -------------------- API ------------------------

    def save(self, token: T) -> None:
        """
        Write the hash and its index entries in one MULTI/EXEC block.

        :raises TokenPersistenceError: If Redis rejects or cannot take the write.
        """
        mapping = type(self).encode(token)
        try:
            with self.r.pipeline(transaction=True) as pipe:
                pipe.hset(self._k(token.id), mapping=mapping)
                for field in self.indexed_fields:
                    pipe.sadd(self._ki(field, mapping[field]), token.id)
                pipe.execute()
        except RedisError as exc:
            raise TokenPersistenceError(f"Could not persist {self.kind}") from exc

    def get(self, token_id: str) -> T | None:
        """
        Load a record by id.

        :raises RecordDecodeError: If the stored hash is malformed.
        :raises TokenPersistenceError: If Redis is unreachable.
        """
        try:
            raw = self.r.hgetall(self._k(token_id))
        except RedisError as exc:
            raise TokenPersistenceError(f"Could not read {self.kind}") from exc
        if not raw:
            return None
        return type(self).decode(token_id, raw)

    def find_by(self, field: str, value: str | int) -> list[T]:
        """
        Equality query on an indexed field, oldest first.

        Ids whose hash no longer exists are skipped.

        :raises ValueError: If ``field`` is not indexed.
        """
        ensure_indexed(field, self.indexed_fields)
        try:
            ids = sorted(_s(m) for m in self.r.smembers(self._ki(field, value)))
        except RedisError as exc:
            raise TokenPersistenceError(f"Could not query {self.kind}") from exc
        tokens = [t for t in (self.get(i) for i in ids) if t is not None]
        return sorted(tokens, key=lambda t: t.created_at)


class RedisRefreshTokenStore(_RedisTokenStore[RefreshToken], RefreshTokenStore):
    kind = REFRESH_TOKEN_KIND
    indexed_fields = REFRESH_TOKEN_INDEXED_FIELDS
    encode = staticmethod(encode_refresh_token)
    decode = staticmethod(decode_refresh_token)


class RedisAccessTokenStore(_RedisTokenStore[AccessToken], AccessTokenStore):
    kind = ACCESS_TOKEN_KIND
    indexed_fields = ACCESS_TOKEN_INDEXED_FIELDS
    encode = staticmethod(encode_access_token)
    decode = staticmethod(decode_access_token)
