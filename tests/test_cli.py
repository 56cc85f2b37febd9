"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from github_firestore_connector.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host configuration out of the tests."""
    for key in ["OUTPUT_DIR", "COLLECTION", "MAX_WORKERS", "LOG_LEVEL"]:
        monkeypatch.delenv(f"CONNECTOR_{key}", raising=False)


@pytest.fixture
def issues_file(tmp_path):
    """Write a small GitHub API issues export."""
    payload = [
        {
            "id": 42,
            "title": "Bug",
            "state": "open",
            "html_url": "https://x/42",
            "created_at": "2024-01-15T10:30:00Z",
        },
        None,
        {
            "id": 43,
            "title": "Feature",
            "state": "closed",
            "html_url": "https://x/43",
            "created_at": "2024-01-16T08:00:00Z",
        },
        {"id": 44, "title": "No url"},
    ]
    path = tmp_path / "issues.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_transform_writes_documents(issues_file, tmp_path):
    """Should write one document per valid issue."""
    out = tmp_path / "out"

    result = runner.invoke(app, ["transform", str(issues_file), "-o", str(out), "-c", "gh"])

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in (out / "gh").iterdir()) == ["42.json", "43.json"]
    doc = json.loads((out / "gh" / "42.json").read_text(encoding="utf-8"))
    assert doc["id"] == "42"
    assert doc["created_at"] == "2024-01-15T10:30:00Z"
    assert "Skipping entry 3" in result.output


def test_transform_unknown_pipeline(issues_file, tmp_path):
    """Should exit with an error for an unknown pipeline id."""
    result = runner.invoke(
        app, ["transform", str(issues_file), "-o", str(tmp_path), "--pipeline", "slack"]
    )

    assert result.exit_code == 1
    assert "slack" in result.output


def test_transform_rejects_non_array(tmp_path):
    """Should reject files that are not a JSON array."""
    path = tmp_path / "issue.json"
    path.write_text('{"id": 1}', encoding="utf-8")

    result = runner.invoke(app, ["transform", str(path), "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "array" in result.output


def test_transform_rejects_non_utf8(tmp_path):
    """Should report a file that is not UTF-8 instead of crashing."""
    path = tmp_path / "issues.json"
    path.write_bytes(b'[{"title": "caf\xe9"}]')

    result = runner.invoke(app, ["transform", str(path), "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "UTF-8" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)


def test_bad_config_exits(issues_file, monkeypatch):
    """Should exit with code 2 on invalid configuration."""
    monkeypatch.setenv("CONNECTOR_MAX_WORKERS", "lots")

    result = runner.invoke(app, ["preview", str(issues_file)])

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_preview(issues_file):
    """Should print documents without writing them."""
    result = runner.invoke(app, ["preview", str(issues_file), "--limit", "1"])

    assert result.exit_code == 0, result.output
    assert '"id": "42"' in result.output
    assert "Showing first 1 of 2 documents" in result.output


def test_pipelines():
    """Should list the built-in pipeline."""
    result = runner.invoke(app, ["pipelines"])

    assert result.exit_code == 0
    assert "github-to-firestore" in result.output
    assert "100" in result.output
