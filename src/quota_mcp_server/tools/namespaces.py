"""Namespace discovery."""

from __future__ import annotations

from typing import Any

from quota_mcp_server.clients.k8s_core import K8sCoreClient


class NamespaceDirectory:
    """Lists the namespaces visible to the configured credential."""

    def __init__(self, core_client: K8sCoreClient) -> None:
        self._core = core_client

    async def list_namespaces(self) -> list[dict[str, Any]]:
        """Return every visible namespace record (name, phase, labels).

        Raises:
            UpstreamError: If the listing call fails. The caller decides whether that is fatal.
        """
        return await self._core.list_namespaces()


def namespace_names(namespaces: list[dict[str, Any]]) -> list[str]:
    """Extract namespace names in discovery order, dropping empty ones."""
    return [ns["name"] for ns in namespaces if ns.get("name")]
