"""MCP server entry point and tool registration."""

from __future__ import annotations

import sys
import time

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import TypeAdapter

from quota_mcp_server.models import ResourceQuota, scrub_sensitive_values
from quota_mcp_server.service import QuotaService

# Configure structlog for JSON output to stderr
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

log = structlog.get_logger()

mcp = FastMCP("Quota MCP Server")

service = QuotaService()

_QUOTA_LIST = TypeAdapter(list[ResourceQuota])


@mcp.tool()
async def check_cluster_auth() -> str:
    """Check whether the configured OpenShift credential can reach the cluster.

    Returns is_authenticated and, when the check fails, an error message.
    Use this before other tools to distinguish an unreachable cluster from missing data.
    """
    start = time.monotonic()
    result = await service.check_auth()
    log.info("tool_completed", tool="check_cluster_auth", latency_ms=_elapsed_ms(start))
    return scrub_sensitive_values(result.model_dump_json(indent=2))


@mcp.tool()
async def get_cluster_snapshot() -> str:
    """Get a point-in-time snapshot of cluster version, namespaces, and resource quotas.

    Returns cluster info (version/platform/status), all namespace names, every quota
    with hard limits and usage, and quotas grouped by namespace. Namespaces whose
    quotas cannot be read are listed without quotas.
    """
    start = time.monotonic()
    try:
        snapshot = await service.get_cluster_snapshot()
        output = scrub_sensitive_values(snapshot.model_dump_json(indent=2))
        log.info("tool_completed", tool="get_cluster_snapshot", latency_ms=_elapsed_ms(start))
        return output
    except Exception as e:
        sanitised = scrub_sensitive_values(str(e))
        log.error("tool_failed", tool="get_cluster_snapshot", error=sanitised)
        raise RuntimeError(sanitised) from None


@mcp.tool()
async def get_namespace_detail(namespace: str) -> str:
    """Get a namespace's phase, metadata, spec, and resource quotas.

    Fails if the namespace does not exist or its quotas cannot be read.

    Args:
        namespace: The namespace name.
    """
    start = time.monotonic()
    try:
        detail = await service.get_namespace_detail(namespace)
        output = scrub_sensitive_values(detail.model_dump_json(indent=2))
        log.info("tool_completed", tool="get_namespace_detail", namespace=namespace, latency_ms=_elapsed_ms(start))
        return output
    except Exception as e:
        sanitised = scrub_sensitive_values(str(e))
        log.error("tool_failed", tool="get_namespace_detail", namespace=namespace, error=sanitised)
        raise RuntimeError(sanitised) from None


@mcp.tool()
async def get_resource_quotas(namespace: str | None = None) -> str:
    """List resource quotas with hard limits and current usage.

    Args:
        namespace: Restrict to one namespace. Omit for all namespaces.
    """
    start = time.monotonic()
    try:
        quotas = await service.get_quotas(namespace)
        output = scrub_sensitive_values(_QUOTA_LIST.dump_json(quotas, indent=2).decode())
        log.info("tool_completed", tool="get_resource_quotas", namespace=namespace, latency_ms=_elapsed_ms(start))
        return output
    except Exception as e:
        sanitised = scrub_sensitive_values(str(e))
        log.error("tool_failed", tool="get_resource_quotas", namespace=namespace, error=sanitised)
        raise RuntimeError(sanitised) from None


@mcp.tool()
async def get_resource_quota(namespace: str, name: str) -> str:
    """Get a single resource quota's hard limits and current usage.

    Args:
        namespace: The namespace that owns the quota.
        name: The quota name.
    """
    start = time.monotonic()
    try:
        quota = await service.get_quota(namespace, name)
        output = scrub_sensitive_values(quota.model_dump_json(indent=2))
        log.info("tool_completed", tool="get_resource_quota", namespace=namespace, latency_ms=_elapsed_ms(start))
        return output
    except Exception as e:
        sanitised = scrub_sensitive_values(str(e))
        log.error("tool_failed", tool="get_resource_quota", namespace=namespace, quota=name, error=sanitised)
        raise RuntimeError(sanitised) from None


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def main() -> None:
    # Fail at startup on missing OPENSHIFT_API_URL / OPENSHIFT_TOKEN rather than at the first tool call.
    service.connection.get_connection()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
