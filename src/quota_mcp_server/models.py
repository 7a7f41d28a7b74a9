"""Pydantic v2 models for the cluster snapshot, quotas, and namespace detail."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ConnectionStatus = Literal["Connected", "Connecting", "Error"]

PLATFORM_LABEL = "OpenShift"
UNKNOWN = "Unknown"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ResourceQuota(_Frozen):
    """A namespace resource quota with hard limits and current usage.

    ``used`` shares the key space of ``hard`` but may omit keys the quota
    controller has not yet reported.
    """

    name: str
    namespace: str
    hard: dict[str, str] = Field(default_factory=dict)
    used: dict[str, str] = Field(default_factory=dict)


class ClusterInfo(_Frozen):
    """Platform version and coarse connectivity of the cluster."""

    version: str
    platform: str
    status: ConnectionStatus

    @classmethod
    def unavailable(cls) -> ClusterInfo:
        return cls(version=UNKNOWN, platform=UNKNOWN, status="Error")


class ClusterSnapshot(_Frozen):
    """Point-in-time aggregation of cluster info, namespaces, and quotas.

    Frozen against field reassignment only. The lists and dicts it holds are plain
    containers. Each snapshot is built fresh and shares none of them with another.
    """

    cluster_info: ClusterInfo
    namespaces: list[str]
    quotas: list[ResourceQuota]
    quotas_by_namespace: dict[str, list[ResourceQuota]]
    timestamp: str


class NamespaceDetail(_Frozen):
    """A single namespace joined with its quotas.

    ``metadata`` and ``spec`` are passed through in API wire form and are not
    interpreted.
    """

    name: str
    status: str
    quotas: list[ResourceQuota]
    metadata: dict[str, Any] = Field(default_factory=dict)
    spec: dict[str, Any] = Field(default_factory=dict)


class AuthStatus(_Frozen):
    """Result of an authentication check against the control plane."""

    is_authenticated: bool
    error: str | None = None


# --- Output scrubbing ---

_IP_PATTERN = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")
_BEARER_PATTERN = re.compile(r"\bBearer\s+[A-Za-z0-9\-._~+/=]+", re.IGNORECASE)
# OpenShift OAuth access tokens
_SHA256_TOKEN_PATTERN = re.compile(r"\bsha256~[A-Za-z0-9\-_]+")
# urllib3 connection errors: HTTPSConnectionPool(host='...', port=6443)
_HOST_KWARG_PATTERN = re.compile(r"\bhost='[^']+'")
# OpenShift API server hostnames (api.<cluster>.<domain>, api-int.<cluster>.<domain>)
_API_HOST_PATTERN = re.compile(r"\bapi(?:-int)?\.[a-z0-9-]+(?:\.[a-z0-9-]+)+\b", re.IGNORECASE)


def scrub_sensitive_values(text: str) -> str:
    """Remove IP addresses, API server hostnames, and bearer credentials from text.

    Namespace and quota names are preserved.
    """
    if not text:
        return text
    result = _BEARER_PATTERN.sub("Bearer [REDACTED]", text)
    result = _SHA256_TOKEN_PATTERN.sub("[REDACTED_TOKEN]", result)
    result = _HOST_KWARG_PATTERN.sub("host='[REDACTED_HOST]'", result)
    result = _API_HOST_PATTERN.sub("[REDACTED_HOST]", result)
    result = _IP_PATTERN.sub("[REDACTED_IP]", result)
    return result
