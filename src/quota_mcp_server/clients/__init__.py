"""Client wrappers for the Kubernetes/OpenShift control plane."""

from __future__ import annotations

from kubernetes import client as k8s_client
from kubernetes.client.exceptions import ApiException

from quota_mcp_server.config import ConnectionDescriptor
from quota_mcp_server.errors import UpstreamError


def build_k8s_api_client(descriptor: ConnectionDescriptor) -> k8s_client.ApiClient:
    """Create an isolated Kubernetes API client bound to a bearer token.

    Builds its own Configuration instead of loading kubeconfig, so the global
    SDK default configuration is never mutated.
    """
    configuration = k8s_client.Configuration()
    configuration.host = descriptor.endpoint.rstrip("/")
    configuration.api_key = {"authorization": descriptor.token}
    configuration.api_key_prefix = {"authorization": "Bearer"}
    configuration.verify_ssl = descriptor.verify_tls
    return k8s_client.ApiClient(configuration)


def to_upstream_error(operation: str, exc: BaseException) -> UpstreamError:
    """Translate an SDK or transport exception into an UpstreamError.

    ApiException carries the HTTP status; network, TLS, and timeout errors do not.
    """
    if isinstance(exc, ApiException):
        return UpstreamError(operation, status=exc.status, reason=exc.reason)
    return UpstreamError(operation, reason=str(exc) or type(exc).__name__)
