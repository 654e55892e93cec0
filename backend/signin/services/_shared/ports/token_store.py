from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Final, Generic, Protocol, TypeVar

from signin.services.tokens.dto import AccessToken, RefreshToken

# Fields that support equality queries. ``user_agent`` is free text and
# deliberately absent.
REFRESH_TOKEN_INDEXED_FIELDS: Final[tuple[str, ...]] = ("user_id", "application", "platform")
ACCESS_TOKEN_INDEXED_FIELDS: Final[tuple[str, ...]] = ("user_id", "refresh_token_id")


class RefreshTokenStore(Protocol):
    """
    Key/value store for refresh token records, keyed by token id.

    Writes MUST be atomic per key and durable before ``save`` returns.
    """

    def save(self, token: RefreshToken) -> None:
        """
        Persist a brand-new record.

        :raises TokenPersistenceError: If the write did not complete.
        """

    def get(self, token_id: str) -> RefreshToken | None:
        """Load a record by id, ``None`` when absent."""

    def find_by(self, field: str, value: str | int) -> list[RefreshToken]:
        """
        Equality query on an indexed field, oldest first.

        :raises ValueError: If ``field`` is not indexed.
        """


class AccessTokenStore(Protocol):
    """Key/value store for access token records, keyed by token id."""

    def save(self, token: AccessToken) -> None:
        """
        Persist a brand-new record.

        :raises TokenPersistenceError: If the write did not complete.
        """

    def get(self, token_id: str) -> AccessToken | None:
        """Load a record by id, ``None`` when absent."""

    def find_by(self, field: str, value: str | int) -> list[AccessToken]:
        """
        Equality query on an indexed field, oldest first.

        :raises ValueError: If ``field`` is not indexed.
        """


T = TypeVar("T", RefreshToken, AccessToken)


def ensure_indexed(field: str, indexed: Sequence[str]) -> None:
    if field not in indexed:
        raise ValueError(f"Field {field!r} is not indexed; queryable fields: {', '.join(indexed)}")


class _InMemoryTokenStore(Generic[T]):
    """
    Dict-backed token store used in unit tests.

    .. note::
       Uses a threading lock to mirror per-key atomic writes.
    """

    indexed_fields: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._by_id: dict[str, T] = {}
        self._lock = threading.Lock()

    def save(self, token: T) -> None:
        with self._lock:
            self._by_id[token.id] = token

    def get(self, token_id: str) -> T | None:
        return self._by_id.get(token_id)

    def find_by(self, field: str, value: str | int) -> list[T]:
        ensure_indexed(field, self.indexed_fields)
        matches = [t for t in self._by_id.values() if str(getattr(t, field)) == str(value)]
        return sorted(matches, key=lambda t: t.created_at)

    def __len__(self) -> int:
        return len(self._by_id)


class InMemoryRefreshTokenStore(_InMemoryTokenStore[RefreshToken]):
    indexed_fields = REFRESH_TOKEN_INDEXED_FIELDS


class InMemoryAccessTokenStore(_InMemoryTokenStore[AccessToken]):
    indexed_fields = ACCESS_TOKEN_INDEXED_FIELDS
