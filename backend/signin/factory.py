"""Application factory wiring Flask extensions, services and blueprints."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask

from signin.core.config import BaseConfig, get_config
from signin.core.logger import configure_logging, init_app as init_logging
from signin.services._shared.ports import SigningKeySource


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    redis_client: redis.Redis | None = None,
    key_source: SigningKeySource | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object or import path; defaults to ``APP_ENV``.
    :param redis_client: Preconnected token-store client (tests, scripts).
    :param key_source: Signing-key source overriding the JWKS endpoint.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy
    from signin.core import proxy

    proxy.init_app(app)

    from signin.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from signin.core import cors

    cors.init_app(app)

    # Store handles are opened here, once, and passed down explicitly
    from signin.core import container

    container.init_app(app, redis_client=redis_client, key_source=key_source)

    from signin.api import init_app as init_api

    init_api(app)

    from signin.core import errors

    errors.init_app(app)

    return app
