"""Composition root: wires the connection, clients, and aggregation components."""

from __future__ import annotations

import structlog

from quota_mcp_server.clients.connection import ConnectionManager
from quota_mcp_server.clients.k8s_core import K8sCoreClient
from quota_mcp_server.clients.k8s_version import K8sVersionClient
from quota_mcp_server.config import SweepConfig, get_sweep_config
from quota_mcp_server.models import AuthStatus, ClusterSnapshot, NamespaceDetail, ResourceQuota
from quota_mcp_server.tools.cluster_info import ClusterInfoProbe
from quota_mcp_server.tools.namespace_detail import NamespaceDetailResolver
from quota_mcp_server.tools.namespaces import NamespaceDirectory
from quota_mcp_server.tools.quotas import QuotaAggregator
from quota_mcp_server.tools.snapshot import SnapshotAssembler
from quota_mcp_server.utils import Err
from quota_mcp_server.validation import validate_namespace, validate_resource_name

log = structlog.get_logger()


class QuotaService:
    """The operations exposed to the server surface.

    Holds the single ConnectionManager for the process and hands it to every
    client. Nothing returned here is cached between calls.
    """

    def __init__(
        self,
        connection: ConnectionManager | None = None,
        sweep_config: SweepConfig | None = None,
    ) -> None:
        self.connection = connection or ConnectionManager()
        core_client = K8sCoreClient(self.connection)
        version_client = K8sVersionClient(self.connection)

        self.directory = NamespaceDirectory(core_client)
        self.quotas = QuotaAggregator(core_client, self.directory, sweep_config or get_sweep_config())
        self.cluster_info = ClusterInfoProbe(version_client)
        self.snapshots = SnapshotAssembler(self.cluster_info, self.directory, self.quotas)
        self.details = NamespaceDetailResolver(core_client, self.quotas)

    async def check_auth(self) -> AuthStatus:
        """Report whether the configured credential can read from the control plane."""
        result = await self.connection.probe_connection()
        if isinstance(result, Err):
            return AuthStatus(is_authenticated=False, error=result.message)
        return AuthStatus(is_authenticated=True)

    async def get_cluster_snapshot(self) -> ClusterSnapshot:
        """Build a fresh cluster snapshot.

        Raises:
            ConfigurationError: If the connection is not configured.
            AggregationError: If namespace or quota discovery fails as a whole.
        """
        self.connection.get_connection()
        return await self.snapshots.build_snapshot()

    async def get_namespace_detail(self, name: str) -> NamespaceDetail:
        validate_namespace(name)
        self.connection.get_connection()
        return await self.details.get_namespace_detail(name)

    async def get_quotas(self, namespace: str | None = None) -> list[ResourceQuota]:
        validate_namespace(namespace)
        self.connection.get_connection()
        return await self.quotas.get_quotas(namespace)

    async def get_quota(self, namespace: str, name: str) -> ResourceQuota:
        validate_namespace(namespace)
        validate_resource_name(name)
        self.connection.get_connection()
        return await self.quotas.get_quota(namespace, name)
