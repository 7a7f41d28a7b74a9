"""Resource quota retrieval: scoped, cluster-wide, and tolerant all-namespace sweep."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from quota_mcp_server.clients.k8s_core import K8sCoreClient
from quota_mcp_server.config import SweepConfig
from quota_mcp_server.errors import UpstreamError
from quota_mcp_server.models import ResourceQuota
from quota_mcp_server.tools.namespaces import NamespaceDirectory, namespace_names

log = structlog.get_logger()


def _to_model(raw: dict[str, Any]) -> ResourceQuota:
    return ResourceQuota(
        name=raw.get("name") or "",
        namespace=raw.get("namespace") or "",
        hard=raw.get("hard") or {},
        used=raw.get("used") or {},
    )


class QuotaAggregator:
    """Retrieves ResourceQuota objects and normalizes them to ResourceQuota models."""

    def __init__(
        self,
        core_client: K8sCoreClient,
        directory: NamespaceDirectory,
        sweep_config: SweepConfig,
    ) -> None:
        self._core = core_client
        self._directory = directory
        self._sweep_config = sweep_config

    async def get_quotas(self, namespace: str | None = None) -> list[ResourceQuota]:
        """Return quotas in one namespace, or in every namespace when none is given.

        The all-namespace form tries one cluster-wide listing first. If the credential
        cannot list cluster-wide, it falls back to the per-namespace sweep, which
        skips namespaces that fail.

        Raises:
            UpstreamError: If a scoped listing fails, or if the fallback sweep cannot
                list namespaces.
        """
        if namespace:
            return [_to_model(q) for q in await self._core.list_resource_quotas(namespace)]

        try:
            raw_quotas = await self._core.list_resource_quotas(None)
        except UpstreamError as e:
            log.warning("cluster_wide_quota_list_failed", status=e.status, error=str(e))
            return await self.sweep()
        return [_to_model(q) for q in raw_quotas]

    async def get_quota(self, namespace: str, name: str) -> ResourceQuota:
        """Return a single named quota.

        Raises:
            NotFoundError: If the quota does not exist.
            UpstreamError: On any other failure.
        """
        return _to_model(await self._core.read_resource_quota(namespace, name))

    async def sweep(self) -> list[ResourceQuota]:
        """Fetch quotas namespace by namespace, concurrently, tolerating per-namespace failures.

        A namespace whose fetch fails is logged and contributes no quotas; it does
        not cancel the other fetches. Results follow namespace discovery order.

        Raises:
            UpstreamError: If the namespace listing itself fails.
        """
        namespaces = namespace_names(await self._directory.list_namespaces())
        semaphore = asyncio.Semaphore(self._sweep_config.max_concurrency)

        async def _fetch(namespace: str) -> list[ResourceQuota]:
            async with semaphore:
                return await self.get_quotas(namespace)

        results = await asyncio.gather(*(_fetch(ns) for ns in namespaces), return_exceptions=True)

        quotas: list[ResourceQuota] = []
        failed: list[str] = []
        for namespace, result in zip(namespaces, results, strict=True):
            if isinstance(result, BaseException):
                failed.append(namespace)
                log.warning("quota_sweep_namespace_failed", namespace=namespace, error=str(result))
            else:
                quotas.extend(result)

        log.info(
            "quota_sweep_completed",
            namespaces=len(namespaces),
            failed_namespaces=len(failed),
            quotas=len(quotas),
        )
        return quotas
