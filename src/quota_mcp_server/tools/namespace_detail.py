"""Single-namespace detail: namespace object joined with its quotas."""

from __future__ import annotations

import asyncio

import structlog

from quota_mcp_server.clients.k8s_core import K8sCoreClient
from quota_mcp_server.models import NamespaceDetail
from quota_mcp_server.tools.quotas import QuotaAggregator

log = structlog.get_logger()


class NamespaceDetailResolver:
    """Resolves one namespace and its quotas. Quota failures propagate here."""

    def __init__(self, core_client: K8sCoreClient, aggregator: QuotaAggregator) -> None:
        self._core = core_client
        self._aggregator = aggregator

    async def get_namespace_detail(self, name: str) -> NamespaceDetail:
        """Fetch the namespace and its quotas concurrently and join them.

        Raises:
            NotFoundError: If the namespace does not exist.
            UpstreamError: If either fetch fails for any other reason.
        """
        namespace, quotas = await asyncio.gather(
            self._core.read_namespace(name),
            self._aggregator.get_quotas(name),
            return_exceptions=True,
        )
        # The namespace error wins: a missing namespace must surface as NotFoundError.
        if isinstance(namespace, BaseException):
            raise namespace
        if isinstance(quotas, BaseException):
            log.error("namespace_detail_quotas_failed", namespace=name, error=str(quotas))
            raise quotas

        return NamespaceDetail(
            name=namespace["name"] or name,
            status=namespace["phase"] or "",
            quotas=quotas,
            metadata=namespace["metadata"],
            spec=namespace["spec"],
        )
