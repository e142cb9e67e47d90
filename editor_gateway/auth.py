"""Bearer credential resolution for incoming requests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from editor_gateway.config import Settings


class TokenOrigin(str, Enum):
    ENVIRONMENT = "environment"
    BODY = "body"
    QUERY = "query"


@dataclass(frozen=True)
class ResolvedToken:
    value: str
    origin: TokenOrigin


def _candidate(source: Mapping[str, Any] | None) -> str | None:
    if not source:
        return None
    value = source.get("token")
    if isinstance(value, str) and value:
        return value
    return None


def resolve_token(
    settings: Settings,
    body: Mapping[str, Any] | None = None,
    query: Mapping[str, Any] | None = None,
) -> ResolvedToken | None:
    """Return the first credential found, in order: process-wide, body, query.

    ``None`` means the caller is unauthenticated and must not touch the
    remote store.
    """
    if settings.github_token:
        return ResolvedToken(settings.github_token, TokenOrigin.ENVIRONMENT)
    token = _candidate(body)
    if token:
        return ResolvedToken(token, TokenOrigin.BODY)
    token = _candidate(query)
    if token:
        return ResolvedToken(token, TokenOrigin.QUERY)
    return None
