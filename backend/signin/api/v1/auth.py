"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request

from signin.api.deps import json_response, timing
from signin.core.container import get_services
from signin.core.errors import Unauthorized
from signin.schemas import LoginSchema, NotProvisionedSchema, TokenResponseSchema
from signin.services import (
    LoginCompleted,
    LoginIn,
    LoginNotProvisioned,
    LoginRejected,
    RejectionReason,
)
from signin.services._shared.errors import ServiceError

bp = Blueprint("auth", __name__, url_prefix="/auth")

login_schema = LoginSchema()
token_schema = TokenResponseSchema()
not_provisioned_schema = NotProvisionedSchema()

# Stable problem codes per rejection
_REJECTION_CODES = {
    RejectionReason.UNKNOWN_METHOD: "unknown_method",
    RejectionReason.UNAUTHORIZED: "unauthorized",
    RejectionReason.CREDENTIAL_EXPIRED: "credential_expired",
}


@bp.post("/login")
@timing
def login():
    """Exchange an identity-provider assertion for an access/refresh token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    service = get_services().login
    dto = LoginIn(
        method=data["method"],
        credential=data["credential"],
        user_agent=request.headers.get("User-Agent", ""),
    )
    try:
        result = service.login(dto)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc

    if isinstance(result, LoginRejected):
        raise Unauthorized(
            "Login rejected",
            code=_REJECTION_CODES[result.reason],
            details={"reason": result.reason.value},
        )
    if isinstance(result, LoginNotProvisioned):
        return json_response({"data": not_provisioned_schema.dump(result)})

    if isinstance(result, LoginCompleted):
        return json_response({"data": token_schema.dump(result.tokens)})
    raise TypeError(f"Unexpected login outcome: {type(result).__name__}")
