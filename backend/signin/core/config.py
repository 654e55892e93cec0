"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

GOOGLE_ISSUERS: Final[str] = "https://accounts.google.com,accounts.google.com"
GOOGLE_JWKS_URL: Final[str] = "https://www.googleapis.com/oauth2/v3/certs"


# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_list(name: str, default: str = "") -> tuple[str, ...]:
    """Split a comma-separated environment variable into trimmed items."""
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder.
    SQLALCHEMY_DATABASE_URI: str
        Database holding the ``users`` table (read-only for this service).
    REDIS_URL: str
        Redis instance persisting refresh and access token records.
    IDP_AUDIENCE: str
        Expected ``aud`` claim of identity assertions (the server id
        registered with the identity provider).
    IDP_AUTHORIZED_PARTY: str
        Expected ``azp`` claim (the front-end client id).
    IDP_ISSUERS: tuple[str, ...]
        Trusted ``iss`` values.
    IDP_JWKS_URL: str
        Where the identity provider publishes its signing keys.
    IDP_TIMEOUT_SECONDS: float
        Upper bound for the key-set HTTP call.
    IDP_JWKS_CACHE_TTL: int
        Seconds a fetched key set is reused before refetching.
    IDP_JWKS_MIN_REFETCH_SECONDS: float
        Minimum gap between refetches forced by an unknown key id.
    IDP_LEEWAY_SECONDS: int
        Clock skew tolerated on ``exp``/``iat``.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are read once when the module is imported; the identity settings
    are then frozen into an ``IdentityVerifierConfig`` by the app factory.
    """

    API_BASE_PREFIX = "/api"

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Users DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Token store
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Identity provider
    IDP_AUDIENCE = os.getenv("IDP_AUDIENCE", "")
    IDP_AUTHORIZED_PARTY = os.getenv("IDP_AUTHORIZED_PARTY", "")
    IDP_ISSUERS = env_list("IDP_ISSUERS", GOOGLE_ISSUERS)
    IDP_JWKS_URL = os.getenv("IDP_JWKS_URL", GOOGLE_JWKS_URL)
    IDP_TIMEOUT_SECONDS = float(os.getenv("IDP_TIMEOUT_SECONDS", "5"))
    IDP_JWKS_CACHE_TTL = int(os.getenv("IDP_JWKS_CACHE_TTL", "3600"))
    IDP_JWKS_MIN_REFETCH_SECONDS = float(os.getenv("IDP_JWKS_MIN_REFETCH_SECONDS", "60"))
    IDP_LEEWAY_SECONDS = int(os.getenv("IDP_LEEWAY_SECONDS", "0"))

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Tests inject a fake Redis client and signing-key source through
      :func:`signin.factory.create_app`, so ``REDIS_URL`` is never dialled.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    IDP_AUDIENCE = "test-server.apps.example.com"
    IDP_AUTHORIZED_PARTY = "test-client.apps.example.com"
    IDP_JWKS_URL = "https://idp.test/oauth2/v3/certs"
    IDP_ISSUERS = ("https://accounts.google.com", "accounts.google.com")
    IDP_JWKS_CACHE_TTL = 0
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
