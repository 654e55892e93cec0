"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
concerns. Expected login outcomes (rejections, not-provisioned identities)
are *not* exceptions; they are returned as tagged results. What lives here
are the faults a caller cannot handle locally.

The translation to HTTP responses (RFC 7807) is handled by
``signin/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` through BaseService.
    """


class DependencyError(ServiceError):
    """
    An external collaborator (identity provider, user DB, token store) failed.

    Never retried internally: token creation is not idempotent, so callers
    retry the whole login if they want to.
    """


class IdentityProviderError(DependencyError):
    """The identity provider's key material could not be obtained or parsed."""


class IdentityProviderTimeout(IdentityProviderError):
    """The identity provider did not answer within the configured timeout."""


class UserLookupError(DependencyError):
    """The user store failed while resolving an external subject."""


class TokenPersistenceError(DependencyError):
    """A token record could not be durably written."""


@dataclass(slots=True, eq=False)
class RecordDecodeError(DependencyError):
    """
    Raised when a stored token record cannot be mapped back to its dataclass.

    :param kind: Record kind (e.g., "refresh_token").
    :type kind: str
    :param key: Record key (token id).
    :type key: str
    :param detail: Which field was missing or malformed.
    :type detail: str
    """

    kind: str
    key: str
    detail: str

    def __str__(self) -> str:
        return f"Cannot decode {self.kind} {self.key}: {self.detail}"
