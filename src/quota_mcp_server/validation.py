"""Input validation helpers for MCP tool parameters."""

from __future__ import annotations

import re

# RFC 1123 label: lowercase alphanumeric and hyphens, 1-63 chars, starts/ends with alphanumeric
_NAMESPACE_RE = re.compile(r"^[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?$")

# RFC 1123 subdomain: dot-separated labels, 253 chars max
_RESOURCE_NAME_RE = re.compile(r"^[a-z0-9]([a-z0-9\-.]*[a-z0-9])?$")
_RESOURCE_NAME_MAX = 253


def validate_namespace(namespace: str | None) -> None:
    """Validate a Kubernetes namespace name against RFC 1123."""
    if namespace is None:
        return
    if not _NAMESPACE_RE.match(namespace):
        msg = f"Invalid namespace: {namespace!r}. Must be a valid RFC 1123 label."
        raise ValueError(msg)


def validate_resource_name(name: str) -> None:
    """Validate an object name (e.g. a ResourceQuota) against RFC 1123 subdomain rules."""
    if len(name) > _RESOURCE_NAME_MAX or not _RESOURCE_NAME_RE.match(name):
        msg = f"Invalid resource name: {name!r}. Must be a valid RFC 1123 subdomain."
        raise ValueError(msg)
