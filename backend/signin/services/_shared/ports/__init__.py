"""
signin.services._shared.ports
=============================

*Ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`token_store`:
    :class:`~.RefreshTokenStore` and :class:`~.AccessTokenStore`: key/value
    persistence of token records with equality queries on indexed fields,
    plus in-memory implementations for unit tests.

- :mod:`signing_keys`:
    :class:`~.SigningKeySource`: resolves the identity provider's public key
    for a given ``kid``.

Concrete adapters live under ``signin.infra``.
"""

from __future__ import annotations

from .signing_keys import SigningKeySource, StaticSigningKeySource
from .token_store import (
    AccessTokenStore,
    InMemoryAccessTokenStore,
    InMemoryRefreshTokenStore,
    RefreshTokenStore,
)

__all__ = [
    "AccessTokenStore",
    "RefreshTokenStore",
    "InMemoryAccessTokenStore",
    "InMemoryRefreshTokenStore",
    "SigningKeySource",
    "StaticSigningKeySource",
]
