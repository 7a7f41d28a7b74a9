"""Kubernetes Version API wrapper."""

from __future__ import annotations

import asyncio
import threading

import structlog
from kubernetes import client as k8s_client

from quota_mcp_server.clients import to_upstream_error
from quota_mcp_server.clients.connection import ConnectionManager

log = structlog.get_logger()


class K8sVersionClient:
    """Wrapper around the Kubernetes /version endpoint."""

    def __init__(self, connection: ConnectionManager) -> None:
        self._connection = connection
        self._api: k8s_client.VersionApi | None = None
        self._lock = threading.Lock()

    def _get_api(self) -> k8s_client.VersionApi:
        with self._lock:
            if self._api is None:
                self._api = k8s_client.VersionApi(self._connection.get_connection())
            return self._api

    async def get_version(self) -> str | None:
        """Return the control plane's gitVersion, or None if the server omits it."""
        api = self._get_api()
        try:
            info = await asyncio.to_thread(
                api.get_code,
                _request_timeout=self._connection.descriptor.request_timeout,
            )
        except Exception as e:
            log.error("failed_to_get_version", error=str(e))
            raise to_upstream_error("get version", e) from e
        return info.git_version or None
