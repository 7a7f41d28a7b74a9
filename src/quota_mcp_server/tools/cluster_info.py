"""Cluster version and connectivity probe."""

from __future__ import annotations

import structlog

from quota_mcp_server.clients.k8s_version import K8sVersionClient
from quota_mcp_server.models import PLATFORM_LABEL, UNKNOWN, ClusterInfo
from quota_mcp_server.utils import Err, Ok, error_kind

log = structlog.get_logger()


class ClusterInfoProbe:
    """Derives ClusterInfo from the version endpoint. ``get_cluster_info`` never raises."""

    def __init__(self, version_client: K8sVersionClient) -> None:
        self._version = version_client

    async def probe(self) -> Ok[str] | Err:
        """Fetch the version as a tagged result."""
        try:
            version = await self._version.get_version()
        except Exception as e:
            return Err(kind=error_kind(e), message=str(e))
        return Ok(version or UNKNOWN)

    async def get_cluster_info(self) -> ClusterInfo:
        result = await self.probe()
        if isinstance(result, Err):
            log.warning("cluster_info_unavailable", kind=result.kind, error=result.message)
            return ClusterInfo.unavailable()
        return ClusterInfo(version=result.value, platform=PLATFORM_LABEL, status="Connected")
