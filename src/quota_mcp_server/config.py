"""Connection configuration, sweep tuning, and environment variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from quota_mcp_server.errors import ConfigurationError

DEFAULT_CLUSTER_NAME = "openshift"
DEFAULT_USER_NAME = "kubeadmin"
DEFAULT_CONTEXT_NAME = "openshift-context"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = 500

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Immutable description of how to reach the control plane.

    TLS verification is off unless ``OPENSHIFT_VERIFY_TLS=true``.
    """

    endpoint: str
    token: str = field(repr=False)
    verify_tls: bool = False
    cluster_name: str = DEFAULT_CLUSTER_NAME
    user_name: str = DEFAULT_USER_NAME
    context_name: str = DEFAULT_CONTEXT_NAME
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        missing = []
        if not self.endpoint or not self.endpoint.strip():
            missing.append("endpoint (OPENSHIFT_API_URL)")
        if not self.token or not self.token.strip():
            missing.append("credential (OPENSHIFT_TOKEN)")
        if missing:
            msg = f"Connection configuration is incomplete: missing {', '.join(missing)}."
            raise ConfigurationError(msg)
        if self.request_timeout <= 0:
            msg = f"request_timeout must be positive, got {self.request_timeout}."
            raise ConfigurationError(msg)
        if self.page_size < 1:
            msg = f"page_size must be at least 1, got {self.page_size}."
            raise ConfigurationError(msg)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got {raw!r}."
        raise ConfigurationError(msg) from None


@dataclass(frozen=True)
class SweepConfig:
    """Tuning for the all-namespace quota sweep."""

    max_concurrency: int = field(default_factory=lambda: _env_int("QUOTA_SWEEP_CONCURRENCY", 10))

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            msg = f"QUOTA_SWEEP_CONCURRENCY must be at least 1, got {self.max_concurrency}."
            raise ConfigurationError(msg)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    msg = f"{name} must be a boolean (true/false), got {value!r}."
    raise ConfigurationError(msg)


def _parse_number(name: str, value: Any, kind: type) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError):
        msg = f"{name} must be a {kind.__name__}, got {value!r}."
        raise ConfigurationError(msg) from None


def _load_file_settings(path: Path) -> dict[str, Any]:
    """Read the ``connection`` section of a YAML configuration file.

    Raises:
        ConfigurationError: If the file is missing or its content is malformed.
    """
    if not path.exists():
        msg = f"Configuration file not found: {path}. Unset QUOTA_MCP_CONFIG or point it at an existing file."
        raise ConfigurationError(msg)

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        msg = f"Configuration file {path} is not valid YAML: {e}"
        raise ConfigurationError(msg) from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        msg = f"Configuration file {path} must contain a mapping, got {type(raw).__name__}."
        raise ConfigurationError(msg)

    section = raw.get("connection", {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        msg = f"'connection' in {path} must be a mapping, got {type(section).__name__}."
        raise ConfigurationError(msg)
    return section


def load_connection_config() -> ConnectionDescriptor:
    """Build the connection descriptor from the optional YAML file and the environment.

    Environment variables take precedence over values from the file named by
    ``QUOTA_MCP_CONFIG``. ``OPENSHIFT_API`` is accepted as an alias for
    ``OPENSHIFT_API_URL``.

    Raises:
        ConfigurationError: If the endpoint or credential is missing, or a value is malformed.
    """
    settings: dict[str, Any] = {}
    config_path = os.environ.get("QUOTA_MCP_CONFIG")
    if config_path:
        settings = _load_file_settings(Path(config_path))

    endpoint = os.environ.get("OPENSHIFT_API_URL") or os.environ.get("OPENSHIFT_API") or settings.get("api_url", "")
    token = os.environ.get("OPENSHIFT_TOKEN") or settings.get("token", "")
    user_name = os.environ.get("OPENSHIFT_USER") or settings.get("user", DEFAULT_USER_NAME)
    verify_raw = os.environ.get("OPENSHIFT_VERIFY_TLS") or settings.get("verify_tls", False)
    timeout_raw = os.environ.get("OPENSHIFT_REQUEST_TIMEOUT") or settings.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
    page_raw = os.environ.get("QUOTA_PAGE_SIZE") or settings.get("page_size", DEFAULT_PAGE_SIZE)

    return ConnectionDescriptor(
        endpoint=str(endpoint or ""),
        token=str(token or ""),
        verify_tls=_parse_bool("verify_tls", verify_raw),
        cluster_name=str(settings.get("cluster_name", DEFAULT_CLUSTER_NAME)),
        user_name=str(user_name),
        context_name=str(settings.get("context_name", DEFAULT_CONTEXT_NAME)),
        request_timeout=_parse_number("request_timeout", timeout_raw, float),
        page_size=_parse_number("page_size", page_raw, int),
    )


def get_sweep_config() -> SweepConfig:
    """Return sweep configuration with environment variable overrides applied."""
    return SweepConfig()
