"""Kubernetes Core API wrapper: namespaces and resource quotas."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from typing import Any

import structlog
from kubernetes import client as k8s_client
from kubernetes.client.exceptions import ApiException

from quota_mcp_server.clients import to_upstream_error
from quota_mcp_server.clients.connection import ConnectionManager
from quota_mcp_server.errors import NotFoundError

log = structlog.get_logger()


class K8sCoreClient:
    """Wrapper around the Kubernetes Core V1 API for read-only quota reporting."""

    def __init__(self, connection: ConnectionManager) -> None:
        self._connection = connection
        self._api: k8s_client.CoreV1Api | None = None
        self._lock = threading.Lock()

    def _get_api(self) -> k8s_client.CoreV1Api:
        with self._lock:
            if self._api is None:
                self._api = k8s_client.CoreV1Api(self._connection.get_connection())
            return self._api

    async def _list_all(self, list_fn: Callable[..., Any], *args: Any) -> list[Any]:
        """Call a list endpoint page by page until no continuation token remains."""
        descriptor = self._connection.descriptor
        items: list[Any] = []
        token: str | None = None
        while True:
            kwargs: dict[str, Any] = {"limit": descriptor.page_size, "_request_timeout": descriptor.request_timeout}
            if token:
                kwargs["_continue"] = token
            page = await asyncio.to_thread(list_fn, *args, **kwargs)
            items.extend(page.items or [])
            token = getattr(page.metadata, "_continue", None) if page.metadata else None
            if not token:
                return items

    def _serialize(self, obj: Any) -> dict[str, Any]:
        """Convert an SDK model to its API wire-form dict (camelCase keys)."""
        if obj is None:
            return {}
        return self._connection.get_connection().sanitize_for_serialization(obj)

    async def list_namespaces(self) -> list[dict[str, Any]]:
        """List every namespace visible to the credential.

        Returns a list of dicts with keys: name, phase, labels.
        """
        api = self._get_api()
        try:
            namespaces = await self._list_all(api.list_namespace)
        except Exception as e:
            log.error("failed_to_list_namespaces", error=str(e))
            raise to_upstream_error("list namespaces", e) from e

        log.info("namespaces_listed", count=len(namespaces))
        return [
            {
                "name": ns.metadata.name if ns.metadata else None,
                "phase": ns.status.phase if ns.status else None,
                "labels": (ns.metadata.labels or {}) if ns.metadata else {},
            }
            for ns in namespaces
        ]

    async def list_resource_quotas(self, namespace: str | None = None) -> list[dict[str, Any]]:
        """List resource quotas.

        Args:
            namespace: Restrict to a single namespace. None for all namespaces.

        Returns a list of dicts with keys: name, namespace, hard, used. ``hard`` and
        ``used`` are always dicts, empty when the API omits them.
        """
        api = self._get_api()
        try:
            if namespace:
                quotas = await self._list_all(api.list_namespaced_resource_quota, namespace)
            else:
                quotas = await self._list_all(api.list_resource_quota_for_all_namespaces)
        except Exception as e:
            log.error("failed_to_list_resource_quotas", namespace=namespace, error=str(e))
            operation = f"list resource quotas in {namespace}" if namespace else "list resource quotas"
            raise to_upstream_error(operation, e) from e

        return [_quota_to_dict(q) for q in quotas]

    async def read_namespace(self, name: str) -> dict[str, Any]:
        """Read a single namespace.

        Returns a dict with keys: name, phase, metadata, spec. ``metadata`` and
        ``spec`` are in API wire form.

        Raises:
            NotFoundError: If the namespace does not exist.
            UpstreamError: On any other failure.
        """
        api = self._get_api()
        try:
            ns = await asyncio.to_thread(
                api.read_namespace,
                name,
                _request_timeout=self._connection.descriptor.request_timeout,
            )
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError("Namespace", name) from e
            log.error("failed_to_read_namespace", namespace=name, status=e.status)
            raise to_upstream_error(f"read namespace {name}", e) from e
        except Exception as e:
            log.error("failed_to_read_namespace", namespace=name, error=str(e))
            raise to_upstream_error(f"read namespace {name}", e) from e

        return {
            "name": ns.metadata.name if ns.metadata else name,
            "phase": ns.status.phase if ns.status else None,
            "metadata": self._serialize(ns.metadata),
            "spec": self._serialize(ns.spec),
        }

    async def read_resource_quota(self, namespace: str, name: str) -> dict[str, Any]:
        """Read a single named resource quota.

        Raises:
            NotFoundError: If the quota does not exist.
            UpstreamError: On any other failure.
        """
        api = self._get_api()
        try:
            quota = await asyncio.to_thread(
                api.read_namespaced_resource_quota,
                name,
                namespace,
                _request_timeout=self._connection.descriptor.request_timeout,
            )
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError("ResourceQuota", f"{namespace}/{name}") from e
            log.error("failed_to_read_resource_quota", namespace=namespace, quota=name, status=e.status)
            raise to_upstream_error(f"read resource quota {namespace}/{name}", e) from e
        except Exception as e:
            log.error("failed_to_read_resource_quota", namespace=namespace, quota=name, error=str(e))
            raise to_upstream_error(f"read resource quota {namespace}/{name}", e) from e

        return _quota_to_dict(quota)


def _quota_to_dict(quota: Any) -> dict[str, Any]:
    """Flatten a V1ResourceQuota. The namespace always comes from the object itself."""
    metadata = quota.metadata
    return {
        "name": (metadata.name if metadata else None) or "",
        "namespace": (metadata.namespace if metadata else None) or "",
        "hard": dict(quota.spec.hard or {}) if quota.spec else {},
        "used": dict(quota.status.used or {}) if quota.status else {},
    }
