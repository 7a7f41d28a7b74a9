"""Process-wide control-plane connection with lazy construction and health checks."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable

import structlog
from kubernetes import client as k8s_client

from quota_mcp_server.clients import build_k8s_api_client, to_upstream_error
from quota_mcp_server.config import ConnectionDescriptor, load_connection_config
from quota_mcp_server.errors import ConfigurationError
from quota_mcp_server.utils import Err, Ok, error_kind

log = structlog.get_logger()


class ConnectionManager:
    """Owns the connection descriptor and the single ApiClient bound to it.

    Constructed once by the composition root and passed to every client. The
    descriptor is either injected or loaded from the environment on first use.
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor | None = None,
        loader: Callable[[], ConnectionDescriptor] = load_connection_config,
    ) -> None:
        self._descriptor = descriptor
        self._loader = loader
        self._api_client: k8s_client.ApiClient | None = None
        self._lock = threading.Lock()

    def _resolve_descriptor(self) -> ConnectionDescriptor:
        # Caller holds self._lock.
        if self._descriptor is None:
            self._descriptor = self._loader()
        return self._descriptor

    @property
    def descriptor(self) -> ConnectionDescriptor:
        """The bound connection configuration.

        Raises:
            ConfigurationError: If no descriptor was injected and the environment is incomplete.
        """
        with self._lock:
            return self._resolve_descriptor()

    def get_connection(self) -> k8s_client.ApiClient:
        """Return the shared ApiClient, building it on first call.

        Raises:
            ConfigurationError: If the endpoint or credential is missing or empty.
        """
        with self._lock:
            if self._api_client is None:
                descriptor = self._resolve_descriptor()
                log.info(
                    "connection_initialising",
                    endpoint=descriptor.endpoint,
                    cluster=descriptor.cluster_name,
                    user=descriptor.user_name,
                    context=descriptor.context_name,
                    verify_tls=descriptor.verify_tls,
                )
                self._api_client = build_k8s_api_client(descriptor)
            return self._api_client

    async def probe_connection(self) -> Ok[None] | Err:
        """Perform a cheap namespace read and report the outcome as a tagged result."""
        try:
            api = k8s_client.CoreV1Api(self.get_connection())
            await asyncio.to_thread(
                api.list_namespace,
                limit=1,
                _request_timeout=self.descriptor.request_timeout,
            )
        except ConfigurationError as e:
            log.error("connection_not_configured", error=str(e))
            return Err(kind=error_kind(e), message=str(e))
        except Exception as e:
            err = to_upstream_error("list namespaces", e)
            log.warning("connection_test_failed", status=err.status, reason=err.reason)
            return Err(kind=error_kind(err), message=str(err))
        return Ok(None)

    async def test_connection(self) -> bool:
        """Return True if the control plane answered the probe. Never raises."""
        result = await self.probe_connection()
        return isinstance(result, Ok)
