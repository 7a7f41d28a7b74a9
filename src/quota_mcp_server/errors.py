"""Error taxonomy for the cluster aggregation core."""

from __future__ import annotations


class QuotaServerError(Exception):
    """Base class for all errors raised by the quota server."""


class ConfigurationError(QuotaServerError):
    """Connection configuration is missing or invalid. Fatal, never retried."""


class UpstreamError(QuotaServerError):
    """A single control-plane call failed (network, TLS, auth, 4xx/5xx, timeout)."""

    def __init__(self, operation: str, status: int | None = None, reason: str | None = None) -> None:
        self.operation = operation
        self.status = status
        self.reason = reason
        detail = f"Upstream call '{operation}' failed"
        if status is not None:
            detail += f" with status {status}"
        if reason:
            detail += f": {reason}"
        super().__init__(detail)


class NotFoundError(QuotaServerError):
    """A specifically requested object does not exist."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} '{name}' not found")


class AggregationError(QuotaServerError):
    """Snapshot assembly failed because namespace or quota discovery failed as a whole."""

    def __init__(self, message: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}")
