"""Tests for config.py: connection descriptor, YAML file settings, environment variable overrides."""

from __future__ import annotations

from pathlib import Path

import pytest
from factories import TEST_ENDPOINT, TEST_TOKEN

from quota_mcp_server.config import (
    DEFAULT_CONTEXT_NAME,
    ConnectionDescriptor,
    SweepConfig,
    get_sweep_config,
    load_connection_config,
)
from quota_mcp_server.errors import ConfigurationError


class TestConnectionDescriptor:
    def test_defaults(self) -> None:
        descriptor = ConnectionDescriptor(endpoint=TEST_ENDPOINT, token=TEST_TOKEN)
        assert descriptor.verify_tls is False
        assert descriptor.cluster_name == "openshift"
        assert descriptor.user_name == "kubeadmin"
        assert descriptor.context_name == DEFAULT_CONTEXT_NAME
        assert descriptor.request_timeout == 30.0
        assert descriptor.page_size == 500

    def test_token_not_in_repr(self) -> None:
        descriptor = ConnectionDescriptor(endpoint=TEST_ENDPOINT, token=TEST_TOKEN)
        assert TEST_TOKEN not in repr(descriptor)

    def test_frozen(self) -> None:
        descriptor = ConnectionDescriptor(endpoint=TEST_ENDPOINT, token=TEST_TOKEN)
        with pytest.raises(AttributeError):
            descriptor.token = "other"  # type: ignore[misc]

    @pytest.mark.parametrize("token", ["", "   "])
    def test_blank_token_rejected(self, token: str) -> None:
        with pytest.raises(ConfigurationError, match="OPENSHIFT_TOKEN"):
            ConnectionDescriptor(endpoint=TEST_ENDPOINT, token=token)

    def test_both_missing_named_in_message(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConnectionDescriptor(endpoint="", token="")
        assert "OPENSHIFT_API_URL" in str(exc_info.value)
        assert "OPENSHIFT_TOKEN" in str(exc_info.value)

    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="request_timeout"):
            ConnectionDescriptor(endpoint=TEST_ENDPOINT, token=TEST_TOKEN, request_timeout=0)

    def test_zero_page_size_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="page_size"):
            ConnectionDescriptor(endpoint=TEST_ENDPOINT, token=TEST_TOKEN, page_size=0)


class TestLoadFromEnvironment:
    def test_reads_required_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENSHIFT_API_URL", TEST_ENDPOINT)
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)

        descriptor = load_connection_config()

        assert descriptor.endpoint == TEST_ENDPOINT
        assert descriptor.token == TEST_TOKEN
        assert descriptor.user_name == "kubeadmin"

    def test_api_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENSHIFT_API", TEST_ENDPOINT)
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)

        assert load_connection_config().endpoint == TEST_ENDPOINT

    def test_api_url_wins_over_alias(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENSHIFT_API_URL", TEST_ENDPOINT)
        monkeypatch.setenv("OPENSHIFT_API", "https://alias.example.com")
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)

        assert load_connection_config().endpoint == TEST_ENDPOINT

    def test_optional_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENSHIFT_API_URL", TEST_ENDPOINT)
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)
        monkeypatch.setenv("OPENSHIFT_USER", "developer")
        monkeypatch.setenv("OPENSHIFT_VERIFY_TLS", "true")
        monkeypatch.setenv("OPENSHIFT_REQUEST_TIMEOUT", "5")
        monkeypatch.setenv("QUOTA_PAGE_SIZE", "50")

        descriptor = load_connection_config()

        assert descriptor.user_name == "developer"
        assert descriptor.verify_tls is True
        assert descriptor.request_timeout == 5.0
        assert descriptor.page_size == 50

    def test_missing_token_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENSHIFT_API_URL", TEST_ENDPOINT)
        with pytest.raises(ConfigurationError, match="OPENSHIFT_TOKEN"):
            load_connection_config()

    def test_invalid_bool_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENSHIFT_API_URL", TEST_ENDPOINT)
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)
        monkeypatch.setenv("OPENSHIFT_VERIFY_TLS", "maybe")
        with pytest.raises(ConfigurationError, match="verify_tls"):
            load_connection_config()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENSHIFT_API_URL", TEST_ENDPOINT)
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)
        monkeypatch.setenv("OPENSHIFT_REQUEST_TIMEOUT", "soon")
        with pytest.raises(ConfigurationError, match="request_timeout"):
            load_connection_config()


class TestLoadFromFile:
    def _write(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "quota.yaml"
        path.write_text(content)
        return path

    def test_reads_connection_section(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = self._write(
            tmp_path,
            f"connection:\n  api_url: {TEST_ENDPOINT}\n  token: file-token\n"
            "  verify_tls: true\n  cluster_name: lab\n  page_size: 100\n",
        )
        monkeypatch.setenv("QUOTA_MCP_CONFIG", str(path))

        descriptor = load_connection_config()

        assert descriptor.endpoint == TEST_ENDPOINT
        assert descriptor.token == "file-token"
        assert descriptor.verify_tls is True
        assert descriptor.cluster_name == "lab"
        assert descriptor.page_size == 100

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = self._write(tmp_path, f"connection:\n  api_url: {TEST_ENDPOINT}\n  token: file-token\n")
        monkeypatch.setenv("QUOTA_MCP_CONFIG", str(path))
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)

        assert load_connection_config().token == TEST_TOKEN

    def test_missing_file_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUOTA_MCP_CONFIG", str(tmp_path / "absent.yaml"))
        with pytest.raises(ConfigurationError, match="not found"):
            load_connection_config()

    def test_invalid_yaml_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUOTA_MCP_CONFIG", str(self._write(tmp_path, "connection: [unclosed\n")))
        with pytest.raises(ConfigurationError, match="not valid YAML"):
            load_connection_config()

    def test_non_mapping_section_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUOTA_MCP_CONFIG", str(self._write(tmp_path, "connection: just-a-string\n")))
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            load_connection_config()

    def test_empty_file_falls_back_to_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUOTA_MCP_CONFIG", str(self._write(tmp_path, "")))
        monkeypatch.setenv("OPENSHIFT_API_URL", TEST_ENDPOINT)
        monkeypatch.setenv("OPENSHIFT_TOKEN", TEST_TOKEN)

        assert load_connection_config().endpoint == TEST_ENDPOINT


class TestSweepConfig:
    def test_default_concurrency(self) -> None:
        assert get_sweep_config().max_concurrency == 10

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUOTA_SWEEP_CONCURRENCY", "3")
        assert get_sweep_config().max_concurrency == 3

    def test_non_integer_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUOTA_SWEEP_CONCURRENCY", "lots")
        with pytest.raises(ConfigurationError, match="QUOTA_SWEEP_CONCURRENCY"):
            get_sweep_config()

    def test_zero_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            SweepConfig(max_concurrency=0)
