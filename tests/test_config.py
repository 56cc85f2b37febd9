"""Tests for environment-based configuration."""

from pathlib import Path

import pytest

from github_firestore_connector.config import ConnectorConfig
from github_firestore_connector.exceptions import ConfigError

ENV_KEYS = ["OUTPUT_DIR", "COLLECTION", "MAX_WORKERS", "LOG_LEVEL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove connector variables so defaults apply."""
    for key in ENV_KEYS:
        monkeypatch.delenv(f"CONNECTOR_{key}", raising=False)
        monkeypatch.delenv(f"STAGING_{key}", raising=False)


def test_defaults():
    """Should fall back to defaults when nothing is set."""
    config = ConnectorConfig.from_env()

    assert config.output_dir == Path("output")
    assert config.collection == "issues"
    assert config.max_workers == 4
    assert config.log_level == "INFO"


def test_reads_prefixed_variables(monkeypatch):
    """Should read values under a custom prefix."""
    monkeypatch.setenv("STAGING_OUTPUT_DIR", "/tmp/sync")
    monkeypatch.setenv("STAGING_COLLECTION", "github_issues")
    monkeypatch.setenv("STAGING_MAX_WORKERS", "8")
    monkeypatch.setenv("STAGING_LOG_LEVEL", "debug")

    config = ConnectorConfig.from_env("STAGING")

    assert config.output_dir == Path("/tmp/sync")
    assert config.collection == "github_issues"
    assert config.max_workers == 8
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["many", "0", "-2"])
def test_rejects_bad_worker_count(monkeypatch, value):
    """Should reject non-numeric or non-positive worker counts."""
    monkeypatch.setenv("CONNECTOR_MAX_WORKERS", value)

    with pytest.raises(ConfigError, match="CONNECTOR_MAX_WORKERS"):
        ConnectorConfig.from_env()


def test_rejects_unknown_log_level(monkeypatch):
    """Should reject log levels logging does not know."""
    monkeypatch.setenv("CONNECTOR_LOG_LEVEL", "chatty")

    with pytest.raises(ConfigError, match="LOG_LEVEL"):
        ConnectorConfig.from_env()


def test_rejects_blank_collection(monkeypatch):
    """Should reject a blank collection name."""
    monkeypatch.setenv("CONNECTOR_COLLECTION", "  ")

    with pytest.raises(ConfigError, match="COLLECTION"):
        ConnectorConfig.from_env()
