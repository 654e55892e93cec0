# tests/unit/services/test_identity_verifier.py
from __future__ import annotations

import time

import pytest

from signin.core.config import TestingConfig
from signin.services._shared.errors import IdentityProviderError
from signin.services._shared.ports import StaticSigningKeySource
from signin.services.identity.dto import (
    IdentityVerifierConfig,
    Rejected,
    VerificationFailure,
    Verified,
    VerifiedIdentity,
)
from signin.services.identity.verifier import IdentityVerifier
from tests.helpers.idp import OMIT, SUBJECT, generate_key


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def config() -> IdentityVerifierConfig:
    return IdentityVerifierConfig.from_mapping(
        {
            "IDP_AUDIENCE": TestingConfig.IDP_AUDIENCE,
            "IDP_AUTHORIZED_PARTY": TestingConfig.IDP_AUTHORIZED_PARTY,
            "IDP_ISSUERS": "https://accounts.google.com, accounts.google.com",
        }
    )


@pytest.fixture()
def verifier(config, idp) -> IdentityVerifier:
    return IdentityVerifier(config=config, keys=StaticSigningKeySource({idp.kid: idp.public_key}))


class _BrokenKeySource:
    def get_signing_key(self, kid):
        raise IdentityProviderError("down")


# -------------------------------- Tests ----------------------------------- #
def test_config_from_mapping_splits_issuers(config):
    assert config.issuers == ("https://accounts.google.com", "accounts.google.com")
    assert config.algorithms == ("RS256",)
    assert config.leeway_seconds == 0


def test_valid_assertion_yields_identity(verifier, idp):
    result = verifier.verify(idp.assertion())

    assert result == Verified(
        VerifiedIdentity(
            subject=SUBJECT,
            email="ada@example.com",
            name="Ada Lovelace",
            picture="https://img.example.com/ada.png",
        )
    )


def test_bare_issuer_form_is_accepted(verifier, idp):
    result = verifier.verify(idp.assertion(iss="accounts.google.com"))
    assert isinstance(result, Verified)


def test_profile_claims_are_optional(verifier, idp):
    result = verifier.verify(idp.assertion(email=OMIT, name=OMIT, picture=OMIT))

    assert isinstance(result, Verified)
    assert result.identity == VerifiedIdentity(subject=SUBJECT)


def test_expired_assertion_is_reported_distinctly(verifier, idp):
    past = int(time.time()) - 7200
    result = verifier.verify(idp.assertion(iat=past, exp=past + 3600))

    assert isinstance(result, Rejected)
    assert result.failure is VerificationFailure.EXPIRED
    assert result.failure.value == "credential expired"


def test_azp_mismatch_is_audience_mismatch(verifier, idp):
    result = verifier.verify(idp.assertion(azp="someone-else.apps.example.com"))

    assert isinstance(result, Rejected)
    assert result.failure is VerificationFailure.AUDIENCE_MISMATCH
    assert result.failure.value == "audience mismatch"


def test_missing_azp_is_audience_mismatch(verifier, idp):
    result = verifier.verify(idp.assertion(azp=OMIT))
    assert result.failure is VerificationFailure.AUDIENCE_MISMATCH


@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "another-server.apps.example.com"},
        {"iss": "https://evil.example.com"},
        {"sub": OMIT},
        {"iat": OMIT},
    ],
    ids=["wrong-aud", "untrusted-iss", "no-sub", "no-iat"],
)
def test_claim_violations_are_invalid(verifier, idp, overrides):
    result = verifier.verify(idp.assertion(**overrides))

    assert isinstance(result, Rejected)
    assert result.failure is VerificationFailure.INVALID


def test_signature_from_other_key_is_invalid(verifier, idp):
    forged = idp.assertion(private_key=generate_key())

    result = verifier.verify(forged)
    assert result.failure is VerificationFailure.INVALID


def test_unknown_kid_is_invalid(verifier, idp):
    result = verifier.verify(idp.assertion(kid="rotated-away"))
    assert result.failure is VerificationFailure.INVALID


def test_malformed_assertion_is_invalid(verifier):
    result = verifier.verify("not-a-jwt")
    assert result == Rejected(VerificationFailure.INVALID, result.detail)


def test_key_source_failure_propagates(config, idp):
    verifier = IdentityVerifier(config=config, keys=_BrokenKeySource())

    with pytest.raises(IdentityProviderError):
        verifier.verify(idp.assertion())
