# comments in English; reST docstrings
from __future__ import annotations

import logging
import threading
import time
from typing import Any

import requests
from jwt import PyJWKSet
from jwt.exceptions import PyJWKSetError

from signin.services._shared.errors import IdentityProviderError, IdentityProviderTimeout
from signin.services._shared.ports import SigningKeySource

log = logging.getLogger(__name__)


class JwksKeySource(SigningKeySource):
    """
    Resolve signing keys from the identity provider's published JWKS.

    The key set is cached for ``cache_ttl`` seconds. A ``kid`` missing from a
    fresh set triggers one refetch, so rotated keys are picked up without
    waiting for the TTL. Such forced refetches happen at most once per
    ``min_refetch_interval`` seconds; in between, unknown kids resolve to
    ``None``. A failed forced refetch also resolves to ``None`` and keeps the
    cached set. The HTTP call runs outside the lock.

    :param jwks_url: JWKS endpoint (e.g., Google's ``oauth2/v3/certs``).
    :param timeout: Upper bound, in seconds, for the HTTP call.
    :param cache_ttl: Seconds a fetched set is reused; ``0`` disables caching.
    :param min_refetch_interval: Minimum seconds between refetches forced by
        an unknown ``kid``.
    :param http: Optional ``requests.Session`` (connection pooling, proxies).
    """

    def __init__(
        self,
        jwks_url: str,
        *,
        timeout: float = 5.0,
        cache_ttl: int = 3600,
        min_refetch_interval: float = 60.0,
        http: requests.Session | None = None,
    ) -> None:
        self.jwks_url = jwks_url
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.min_refetch_interval = min_refetch_interval
        self._http = http or requests.Session()
        self._lock = threading.Lock()
        self._keys: dict[str, Any] = {}
        self._fetched_at: float | None = None
        self._forced_at: float | None = None

    # -------------------- helpers --------------------

    def _is_fresh(self) -> bool:
        if self._fetched_at is None:
            return False
        return time.monotonic() - self._fetched_at < self.cache_ttl

    def _fetch(self) -> dict[str, Any]:
        try:
            resp = self._http.get(
                self.jwks_url, timeout=self.timeout, headers={"Accept": "application/json"}
            )
            resp.raise_for_status()
            jwk_set = PyJWKSet.from_dict(resp.json())
        except requests.Timeout as exc:
            log.error("jwks.timeout url=%s", self.jwks_url)
            raise IdentityProviderTimeout("Identity provider timed out") from exc
        except (requests.RequestException, ValueError, PyJWKSetError) as exc:
            log.error("jwks.fetch_failed url=%s error=%s", self.jwks_url, exc)
            raise IdentityProviderError("Could not load identity provider keys") from exc

        keys = {k.key_id: k.key for k in jwk_set.keys if k.key_id}
        log.info("jwks.refreshed keys=%d", len(keys))
        return keys

    # -------------------- API ------------------------

    def get_signing_key(self, kid: str | None) -> Any | None:
        """
        Return the public key published under ``kid``.

        :raises IdentityProviderError: When a stale or empty set cannot be
            fetched/parsed.
        :raises IdentityProviderTimeout: When that fetch exceeds the timeout.
        """
        if kid is None:
            return None
        with self._lock:
            forced = self._is_fresh()
            if forced:
                if kid in self._keys:
                    return self._keys[kid]
                # Fresh set without this kid (rotated, or bogus): throttled
                now = time.monotonic()
                last = self._forced_at
                if last is not None and now - last < self.min_refetch_interval:
                    return None
                self._forced_at = now

        try:
            keys = self._fetch()
        except IdentityProviderError:
            if not forced:
                raise
            log.warning("jwks.forced_refetch_failed kid=%s", kid)
            return None

        with self._lock:
            self._keys = keys
            self._fetched_at = time.monotonic()
        return keys.get(kid)
