"""Explicit wiring of the service graph, built once per application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app

from signin.core.extensions import connect_redis, db
from signin.infra.jwks.jwks_key_source import JwksKeySource
from signin.infra.redis.redis_token_store import RedisAccessTokenStore, RedisRefreshTokenStore
from signin.services._shared.ports import SigningKeySource
from signin.services.identity.dto import IdentityVerifierConfig
from signin.services.identity.verifier import IdentityVerifier
from signin.services.login.service import LoginService
from signin.services.tokens.access import AccessTokenIssuer
from signin.services.tokens.refresh import RefreshTokenIssuer
from signin.services.users.resolver import UserResolver

EXTENSION_KEY = "signin.services"

# Login method selector -> identity provider
GOOGLE_METHOD = "google"


@dataclass(frozen=True, slots=True)
class Services:
    """
    Process-wide collaborators.

    :param redis: Token-store client, opened once at startup.
    :param login: Fully wired login orchestrator.
    """

    redis: redis.Redis
    login: LoginService


def build_services(
    app: Flask,
    *,
    redis_client: redis.Redis | None = None,
    key_source: SigningKeySource | None = None,
) -> Services:
    """
    Construct every collaborator from ``app.config``.

    :param app: Configured application.
    :param redis_client: Use this client instead of dialling ``REDIS_URL``.
    :param key_source: Use this key source instead of the JWKS endpoint.
    :returns: The wired services.
    :raises RuntimeError: If Redis cannot be reached.
    """
    cfg = app.config
    r = redis_client if redis_client is not None else connect_redis(cfg["REDIS_URL"])
    keys = key_source or JwksKeySource(
        cfg["IDP_JWKS_URL"],
        timeout=float(cfg.get("IDP_TIMEOUT_SECONDS", 5)),
        cache_ttl=int(cfg.get("IDP_JWKS_CACHE_TTL", 3600)),
        min_refetch_interval=float(cfg.get("IDP_JWKS_MIN_REFETCH_SECONDS", 60)),
    )

    google = IdentityVerifier(config=IdentityVerifierConfig.from_mapping(cfg), keys=keys)
    login = LoginService(
        verifiers={GOOGLE_METHOD: google},
        users=UserResolver(session_factory=lambda: db.session()),
        refresh_tokens=RefreshTokenIssuer(store=RedisRefreshTokenStore(r=r)),
        access_tokens=AccessTokenIssuer(store=RedisAccessTokenStore(r=r)),
    )
    return Services(redis=r, login=login)


def init_app(
    app: Flask,
    *,
    redis_client: redis.Redis | None = None,
    key_source: SigningKeySource | None = None,
) -> None:
    """Build the services and attach them to ``app.extensions``."""
    app.extensions[EXTENSION_KEY] = build_services(
        app, redis_client=redis_client, key_source=key_source
    )


def get_services() -> Services:
    """Return the services of the current application."""
    return cast(Services, current_app.extensions[EXTENSION_KEY])
