"""Shared helpers: tagged results for never-raising probes, and timestamps."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar

from quota_mcp_server.errors import ConfigurationError, NotFoundError, UpstreamError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful probe outcome."""

    value: T


@dataclass(frozen=True)
class Err:
    """Failed probe outcome. ``kind`` is a short machine-readable category."""

    kind: str
    message: str


def error_kind(exc: BaseException) -> str:
    """Classify an exception into the coarse categories reported by health probes."""
    if isinstance(exc, ConfigurationError):
        return "configuration"
    if isinstance(exc, NotFoundError):
        return "not_found"
    if isinstance(exc, UpstreamError):
        if exc.status in (401, 403):
            return "auth"
        if exc.status is None:
            return "network"
        return "upstream"
    return "unexpected"


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(tz=UTC).isoformat()
