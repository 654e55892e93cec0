"""Unit tests for JwksKeySource with the JWKS endpoint mocked by ``responses``."""

from __future__ import annotations

import json

import pytest
import requests
import responses

from signin.core.config import TestingConfig
from signin.infra.jwks.jwks_key_source import JwksKeySource
from signin.services._shared.errors import IdentityProviderError, IdentityProviderTimeout
from tests.helpers.idp import generate_key

JWKS_URL = TestingConfig.IDP_JWKS_URL


@pytest.fixture()
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def _source(*, cache_ttl: int = 3600, min_refetch_interval: float = 60.0) -> JwksKeySource:
    return JwksKeySource(
        JWKS_URL, timeout=1, cache_ttl=cache_ttl, min_refetch_interval=min_refetch_interval
    )


def test_resolves_published_key(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks(), status=200)

    key = _source().get_signing_key(idp.kid)

    assert key.public_numbers() == idp.public_key.public_numbers()


def test_key_set_is_cached(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks())
    source = _source()

    source.get_signing_key(idp.kid)
    source.get_signing_key(idp.kid)

    assert len(mocked.calls) == 1


def test_zero_ttl_refetches_every_time(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks())
    source = _source(cache_ttl=0)

    source.get_signing_key(idp.kid)
    source.get_signing_key(idp.kid)

    assert len(mocked.calls) == 2


def test_unknown_kid_refetches_once_to_pick_up_rotation(mocked, idp):
    rotated = generate_key()
    # Registered responses are served in order
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks())
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks(("rotated-key", rotated)))
    source = _source()
    source.get_signing_key(idp.kid)

    key = source.get_signing_key("rotated-key")

    assert key.public_numbers() == rotated.public_key().public_numbers()
    assert len(mocked.calls) == 2


def test_kid_never_published_is_none(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks())

    assert _source().get_signing_key("ghost") is None


def test_unknown_kids_force_at_most_one_refetch_per_interval(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks())
    source = _source()
    source.get_signing_key(idp.kid)

    for kid in ("ghost-1", "ghost-2", "ghost-3"):
        assert source.get_signing_key(kid) is None

    # Initial load plus a single forced refetch
    assert len(mocked.calls) == 2
    assert source.get_signing_key(idp.kid) is not None
    assert len(mocked.calls) == 2


def test_forced_refetch_is_allowed_again_once_the_interval_passed(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks())
    source = _source(min_refetch_interval=0)
    source.get_signing_key(idp.kid)

    source.get_signing_key("ghost-1")
    source.get_signing_key("ghost-2")

    assert len(mocked.calls) == 3


def test_failed_forced_refetch_keeps_the_cached_set(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, json=idp.jwks())
    mocked.add(responses.GET, JWKS_URL, status=503, json={"error": "unavailable"})
    source = _source()
    source.get_signing_key(idp.kid)

    assert source.get_signing_key("rotated-key") is None
    assert source.get_signing_key(idp.kid) is not None
    assert len(mocked.calls) == 2


def test_fetch_runs_without_holding_the_lock(mocked, idp):
    source = _source()
    lock_states: list[bool] = []

    def _callback(request):
        lock_states.append(source._lock.locked())
        return 200, {}, json.dumps(idp.jwks())

    mocked.add_callback(responses.GET, JWKS_URL, callback=_callback)

    assert source.get_signing_key(idp.kid) is not None
    assert source.get_signing_key("ghost") is None
    assert lock_states == [False, False]


def test_missing_kid_does_not_fetch(mocked):
    assert _source().get_signing_key(None) is None
    assert len(mocked.calls) == 0


def test_timeout_is_reported_as_timeout(mocked, idp):
    mocked.add(responses.GET, JWKS_URL, body=requests.ReadTimeout("slow"))

    with pytest.raises(IdentityProviderTimeout):
        _source().get_signing_key(idp.kid)


@pytest.mark.parametrize(
    "response_kwargs",
    [
        {"status": 500, "json": {"error": "boom"}},
        {"body": requests.ConnectionError("refused")},
        {"json": {"keys": []}},
        {"body": "<html>not json</html>"},
    ],
    ids=["http-500", "connect-error", "empty-set", "not-json"],
)
def test_other_failures_are_provider_errors(mocked, idp, response_kwargs):
    mocked.add(responses.GET, JWKS_URL, **response_kwargs)

    with pytest.raises(IdentityProviderError) as excinfo:
        _source().get_signing_key(idp.kid)
    assert not isinstance(excinfo.value, IdentityProviderTimeout)
