"""Parse the raw client string into the signature stored with refresh tokens."""

from __future__ import annotations

from user_agents import parse as parse_user_agent

from signin.services.tokens.dto import ClientContext


def _label(family: str | None, version: str | None) -> str:
    return " ".join(part for part in (family, version) if part) or "Other"


def parse_client_context(raw: str | None) -> ClientContext:
    """
    Build a :class:`ClientContext` from a ``User-Agent`` header value.

    >>> ctx = parse_client_context(
    ...     "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    ...     "(KHTML, like Gecko) Chrome/96.0.4664.45 Safari/537.36"
    ... )
    >>> ctx.application, ctx.platform
    ('Chrome 96.0.4664', 'Linux')

    :param raw: Header value; missing headers are recorded as ``""``.
    :returns: Normalized application/platform plus the raw string.
    """
    raw = raw or ""
    agent = parse_user_agent(raw)
    return ClientContext(
        application=_label(agent.browser.family, agent.browser.version_string),
        platform=_label(agent.os.family, agent.os.version_string),
        user_agent=raw,
    )
