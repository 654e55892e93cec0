"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from signin.api.deps import json_response, timing
from signin.core.container import get_services
from signin.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, users database and token store health."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"

    redis_status = "ok"
    try:
        get_services().redis.ping()
    except RedisError:
        current_app.logger.exception("healthcheck.redis_error")
        redis_status = "fail"

    version = current_app.config.get("APP_VERSION", "dev")
    commit = current_app.config.get("APP_COMMIT", "unknown")
    status = "ok" if db_status == redis_status == "ok" else "degraded"
    payload = {
        "status": status,
        "db": db_status,
        "redis": redis_status,
        "version": version,
        "commit": commit,
    }
    return json_response(payload, status=200 if status == "ok" else 503)
