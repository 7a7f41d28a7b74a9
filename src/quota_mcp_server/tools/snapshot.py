"""Cluster snapshot assembly: concurrent fan-out and join."""

from __future__ import annotations

import asyncio

import structlog

from quota_mcp_server.errors import AggregationError
from quota_mcp_server.models import ClusterInfo, ClusterSnapshot, ResourceQuota
from quota_mcp_server.tools.cluster_info import ClusterInfoProbe
from quota_mcp_server.tools.namespaces import NamespaceDirectory, namespace_names
from quota_mcp_server.tools.quotas import QuotaAggregator
from quota_mcp_server.utils import utc_now_iso

log = structlog.get_logger()


def group_by_namespace(
    quotas: list[ResourceQuota],
    namespaces: list[str],
) -> tuple[list[ResourceQuota], dict[str, list[ResourceQuota]]]:
    """Fold quotas into buckets keyed by each quota's own namespace.

    Quotas whose namespace is not among ``namespaces`` (created between the
    namespace listing and the sweep) are dropped from both the flat list and the
    index.
    """
    known = set(namespaces)
    kept: list[ResourceQuota] = []
    grouped: dict[str, list[ResourceQuota]] = {}
    for quota in quotas:
        if quota.namespace not in known:
            log.warning("snapshot_quota_outside_discovery", namespace=quota.namespace, quota=quota.name)
            continue
        grouped.setdefault(quota.namespace, []).append(quota)
        kept.append(quota)
    return kept, grouped


class SnapshotAssembler:
    """Builds a ClusterSnapshot from three concurrent branches."""

    def __init__(
        self,
        probe: ClusterInfoProbe,
        directory: NamespaceDirectory,
        aggregator: QuotaAggregator,
    ) -> None:
        self._probe = probe
        self._directory = directory
        self._aggregator = aggregator

    async def build_snapshot(self) -> ClusterSnapshot:
        """Run cluster info, namespace discovery, and the quota sweep concurrently, then join.

        Raises:
            AggregationError: If namespace discovery or the quota sweep fails as a whole.
                Cluster info failures never fail the snapshot.
        """
        # sweep() lists namespaces again on its own; quotas in namespaces the two
        # listings disagree on are dropped by group_by_namespace.
        info, namespaces_raw, quotas_raw = await asyncio.gather(
            self._probe.get_cluster_info(),
            self._directory.list_namespaces(),
            self._aggregator.sweep(),
            return_exceptions=True,
        )

        if isinstance(namespaces_raw, BaseException):
            log.error("snapshot_failed", stage="namespaces", error=str(namespaces_raw))
            raise AggregationError("Namespace discovery failed", namespaces_raw) from namespaces_raw
        if isinstance(quotas_raw, BaseException):
            log.error("snapshot_failed", stage="quota_sweep", error=str(quotas_raw))
            raise AggregationError("Quota sweep failed", quotas_raw) from quotas_raw
        if isinstance(info, BaseException):
            log.error("snapshot_cluster_info_raised", error=str(info))
            info = ClusterInfo.unavailable()

        timestamp = utc_now_iso()
        namespaces = namespace_names(namespaces_raw)
        quotas, quotas_by_namespace = group_by_namespace(quotas_raw, namespaces)

        log.info(
            "snapshot_built",
            namespaces=len(namespaces),
            quotas=len(quotas),
            cluster_status=info.status,
        )
        return ClusterSnapshot(
            cluster_info=info,
            namespaces=namespaces,
            quotas=quotas,
            quotas_by_namespace=quotas_by_namespace,
            timestamp=timestamp,
        )
