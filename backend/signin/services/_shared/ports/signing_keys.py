from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class SigningKeySource(Protocol):
    """Port resolving the identity provider's public verification keys."""

    def get_signing_key(self, kid: str | None) -> Any | None:
        """
        Return the public key for ``kid``, or ``None`` if the issuer does not
        publish it.

        :raises IdentityProviderError: If the key material cannot be fetched.
        """


class StaticSigningKeySource(SigningKeySource):
    """Fixed ``kid -> key`` mapping (unit tests, offline development)."""

    def __init__(self, keys: Mapping[str, Any]) -> None:
        self._keys = dict(keys)

    def get_signing_key(self, kid: str | None) -> Any | None:
        if kid is None:
            return None
        return self._keys.get(kid)
