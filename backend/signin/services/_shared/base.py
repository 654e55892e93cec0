# signin/services/_shared/base.py
from __future__ import annotations

from datetime import UTC, datetime
from http import HTTPStatus

from signin.core import errors as api_errors
from signin.services._shared.errors import (
    DependencyError,
    IdentityProviderTimeout,
    ServiceError,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide the clock used for token timestamps.
    * Centralize translation of service errors into API errors.

    Notes
    -----
    Collaborators are always passed to the constructor; services never reach
    for globals.
    """

    @staticmethod
    def now_utc() -> datetime:
        """Return a timezone-aware UTC "now"."""
        return datetime.now(UTC)

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        Dependency failures become generic 5xx problems: the cause stays in the
        logs (chained via ``raise ... from``) and never reaches the client.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, IdentityProviderTimeout):
            # → 504 Gateway Timeout
            return api_errors.DependencyFailure(
                "Identity provider did not respond in time.",
                status_code=HTTPStatus.GATEWAY_TIMEOUT,
                code="gateway_timeout",
            )

        if isinstance(exc, DependencyError):
            # → 500 Internal Server Error
            return api_errors.DependencyFailure()

        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
