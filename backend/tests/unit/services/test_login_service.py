# tests/unit/services/test_login_service.py
from __future__ import annotations

import time

import pytest

from signin.core.extensions import db
from signin.services._shared.errors import (
    IdentityProviderTimeout,
    TokenPersistenceError,
    UserLookupError,
)
from signin.services._shared.ports import (
    InMemoryAccessTokenStore,
    InMemoryRefreshTokenStore,
    StaticSigningKeySource,
)
from signin.services.identity.dto import IdentityVerifierConfig, VerifiedIdentity
from signin.services.identity.verifier import IdentityVerifier
from signin.services.login.dto import (
    LoginCompleted,
    LoginIn,
    LoginNotProvisioned,
    LoginRejected,
    RejectionReason,
)
from signin.services.login.service import LoginService
from signin.services.tokens.access import AccessTokenIssuer
from signin.services.tokens.refresh import RefreshTokenIssuer
from signin.services.users.resolver import UserResolver
from tests.factories.user import UserFactory
from tests.helpers.idp import SUBJECT

CHROME_LINUX = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.45 Safari/537.36"
)


class _TimingOutKeySource:
    def get_signing_key(self, kid):
        raise IdentityProviderTimeout("timed out")


class _FailingResolver:
    def find_by_external_id(self, external_id):
        raise UserLookupError("db down")


class _FailingStore(InMemoryAccessTokenStore):
    def save(self, token):
        raise TokenPersistenceError("store unavailable")


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def verifier(app, idp) -> IdentityVerifier:
    return IdentityVerifier(
        config=IdentityVerifierConfig.from_mapping(app.config),
        keys=StaticSigningKeySource({idp.kid: idp.public_key}),
    )


@pytest.fixture()
def refresh_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def access_store() -> InMemoryAccessTokenStore:
    return InMemoryAccessTokenStore()


def build_service(verifier, refresh_store, access_store, *, users=None) -> LoginService:
    """
    Wire a LoginService against in-memory token stores.

    .. note::
       The user resolver runs on the transactional test session.
    """
    return LoginService(
        verifiers={"google": verifier},
        users=users or UserResolver(session_factory=lambda: db.session()),
        refresh_tokens=RefreshTokenIssuer(store=refresh_store),
        access_tokens=AccessTokenIssuer(store=access_store),
    )


@pytest.fixture()
def service(verifier, refresh_store, access_store) -> LoginService:
    return build_service(verifier, refresh_store, access_store)


@pytest.fixture()
def user(session):
    return UserFactory(external_id=SUBJECT)


# -------------------------------- Tests ----------------------------------- #
def test_login_issues_linked_token_pair(service, idp, user, refresh_store, access_store):
    result = service.login(LoginIn("google", idp.assertion(), CHROME_LINUX))

    assert isinstance(result, LoginCompleted)
    pair = result.tokens
    assert pair.expires_in == 86400
    assert pair.token_type == "Bearer"
    assert pair.user.id == user.id
    assert pair.refresh_token.user_id == user.id
    assert pair.refresh_token.application == "Chrome 96.0.4664"
    assert pair.refresh_token.platform == "Linux"
    assert pair.refresh_token.user_agent == CHROME_LINUX
    assert pair.access_token.user_id == user.id
    assert pair.access_token.refresh_token_id == pair.refresh_token.id

    assert refresh_store.get(pair.refresh_token.id) == pair.refresh_token
    assert access_store.get(pair.access_token.id) == pair.access_token


@pytest.mark.parametrize("method", ["Google", "  google ", "GOOGLE"])
def test_method_selector_is_case_and_space_insensitive(service, idp, user, method):
    result = service.login(LoginIn(method, idp.assertion()))
    assert isinstance(result, LoginCompleted)


def test_two_logins_yield_distinct_pairs(service, idp, user, refresh_store, access_store):
    first = service.login(LoginIn("google", idp.assertion())).tokens
    second = service.login(LoginIn("google", idp.assertion())).tokens

    assert first.refresh_token.id != second.refresh_token.id
    assert first.access_token.id != second.access_token.id
    assert first.refresh_token.created_at <= second.refresh_token.created_at
    assert len(refresh_store) == 2
    assert len(access_store) == 2


def test_unknown_method_is_rejected_without_verifying(refresh_store, access_store):
    class _ExplodingVerifier:
        def verify(self, assertion):
            raise AssertionError("verifier must not be called")

    service = build_service(_ExplodingVerifier(), refresh_store, access_store)

    result = service.login(LoginIn("facebook", "whatever"))

    assert result == LoginRejected(RejectionReason.UNKNOWN_METHOD)
    assert result.reason.value == "unknown method"


def test_expired_credential_is_rejected_as_expired(service, idp, user, refresh_store):
    past = int(time.time()) - 7200
    result = service.login(LoginIn("google", idp.assertion(iat=past, exp=past + 3600)))

    assert result == LoginRejected(RejectionReason.CREDENTIAL_EXPIRED)
    assert len(refresh_store) == 0


@pytest.mark.parametrize(
    "overrides",
    [{"azp": "other-client.apps.example.com"}, {"aud": "other-server"}],
    ids=["audience-mismatch", "wrong-aud"],
)
def test_other_rejections_are_unauthorized(
    service, idp, user, refresh_store, access_store, overrides
):
    result = service.login(LoginIn("google", idp.assertion(**overrides)))

    assert result == LoginRejected(RejectionReason.UNAUTHORIZED)
    assert len(refresh_store) == 0
    assert len(access_store) == 0


def test_unprovisioned_identity_is_returned_as_data(service, idp, session, refresh_store):
    result = service.login(LoginIn("google", idp.assertion(sub="never-seen")))

    assert result == LoginNotProvisioned(
        VerifiedIdentity(
            subject="never-seen",
            email="ada@example.com",
            name="Ada Lovelace",
            picture="https://img.example.com/ada.png",
        )
    )
    assert len(refresh_store) == 0


def test_identity_provider_timeout_propagates(app, refresh_store, access_store, idp):
    verifier = IdentityVerifier(
        config=IdentityVerifierConfig.from_mapping(app.config),
        keys=_TimingOutKeySource(),
    )
    service = build_service(verifier, refresh_store, access_store)

    with pytest.raises(IdentityProviderTimeout):
        service.login(LoginIn("google", idp.assertion()))


def test_user_lookup_failure_propagates(verifier, refresh_store, access_store, idp):
    service = build_service(verifier, refresh_store, access_store, users=_FailingResolver())

    with pytest.raises(UserLookupError):
        service.login(LoginIn("google", idp.assertion()))
    assert len(refresh_store) == 0


def test_access_token_persistence_failure_propagates(verifier, refresh_store, idp, user):
    service = build_service(verifier, refresh_store, _FailingStore())

    with pytest.raises(TokenPersistenceError):
        service.login(LoginIn("google", idp.assertion()))


def test_login_input_repr_hides_the_credential(idp):
    assertion = idp.assertion()
    assert assertion not in repr(LoginIn("google", assertion))
