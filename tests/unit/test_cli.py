"""Unit tests for the command-line interface."""

import json

import pytest
import structlog
from rich.console import Console
from typer.testing import CliRunner

from appdiff import __version__
from appdiff.cli import app
from appdiff.core.config import get_config
from appdiff.core.logging import bind_context

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the CLI's logging setup, which is bound to the runner's streams."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def local_env(monkeypatch, temp_dir, version_rows):
    """Point the CLI at a local JSON store holding ``version_rows``."""
    (temp_dir / "app_versions.json").write_text(json.dumps(version_rows), encoding="utf-8")
    monkeypatch.setenv("APPDIFF_STORE_BACKEND", "local")
    monkeypatch.setenv("APPDIFF_STORE_PATH", str(temp_dir))
    monkeypatch.setenv("APPDIFF_LOG_LEVEL", "WARNING")
    # Wide enough that table cells never wrap
    monkeypatch.setattr("appdiff.cli.console", Console(width=200))
    get_config.cache_clear()
    yield temp_dir
    get_config.cache_clear()


class TestCLI:
    """Tests for CLI commands against a local store."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_apps(self, local_env):
        result = runner.invoke(app, ["apps"])
        assert result.exit_code == 0
        assert "Snap Camera" in result.output
        assert "Notes" in result.output

    def test_apps_search(self, local_env):
        result = runner.invoke(app, ["apps", "--search", "notes"])
        assert result.exit_code == 0
        assert "Snap Camera" not in result.output

    def test_apps_empty_store(self, local_env):
        (local_env / "app_versions.json").write_text("[]", encoding="utf-8")
        result = runner.invoke(app, ["apps"])
        assert result.exit_code == 0
        assert "No apps found" in result.output

    def test_show(self, local_env):
        result = runner.invoke(app, ["show", "com.example.camera", "--version", "2"])
        assert result.exit_code == 0
        assert "CAMERA" in result.output
        assert "hardcoded_key" in result.output

    def test_show_lists_versions(self, local_env):
        result = runner.invoke(app, ["show", "com.example.camera"])
        assert result.exit_code == 0
        assert "0: 0.9.0 (99), 1: 1.0.0 (100), 2: 1.1.0 (110)" in result.output

    def test_security(self, local_env):
        result = runner.invoke(app, ["security", "com.example.camera", "--version", "2"])
        assert result.exit_code == 0
        assert "hardcoded_key: res/values/keys.xml" in result.output

    def test_security_none_flagged(self, local_env):
        result = runner.invoke(app, ["security", "com.example.camera", "--version", "1"])
        assert result.exit_code == 0
        assert "No security issues detected." in result.output

    def test_security_bad_index(self, local_env):
        result = runner.invoke(app, ["security", "com.example.camera", "--version", "9"])
        assert result.exit_code == 1
        assert "out of range" in result.output

    def test_callback_clears_log_context(self, local_env):
        bind_context(package_name="com.stale")
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert structlog.contextvars.get_contextvars() == {}

    def test_show_unknown_package(self, local_env):
        result = runner.invoke(app, ["show", "com.unknown"])
        assert result.exit_code == 1
        assert "No versions found" in result.output

    def test_diff_defaults_to_newest_pair(self, local_env):
        result = runner.invoke(app, ["diff", "com.example.camera"])
        assert result.exit_code == 0
        assert "Added Permissions" in result.output
        assert "SEND_SMS" in result.output
        assert "new_key" in result.output
        assert "old_key" in result.output

    def test_diff_same_index_rejected(self, local_env):
        result = runner.invoke(app, ["diff", "com.example.camera", "--current", "1", "--compare", "1"])
        assert result.exit_code == 1
        assert "itself" in result.output

    def test_diff_single_version(self, local_env):
        result = runner.invoke(app, ["diff", "org.sample.notes"])
        assert result.exit_code == 1
        assert "nothing to compare" in result.output

    def test_strings_search(self, local_env):
        result = runner.invoke(app, ["strings", "com.example.camera", "--version", "2", "--search", "bar"])
        assert result.exit_code == 0
        assert "new_key" in result.output
        assert "1 matching strings" in result.output

    def test_waitlist(self, local_env):
        result = runner.invoke(app, ["waitlist", "someone@example.com"])
        assert result.exit_code == 0
        assert "Thanks for joining" in result.output

        result = runner.invoke(app, ["waitlist", "someone@example.com"])
        assert result.exit_code == 0
        assert "already on our waitlist" in result.output

    def test_waitlist_invalid_email(self, local_env):
        result = runner.invoke(app, ["waitlist", "nope"])
        assert result.exit_code == 1
        assert "valid email" in result.output

    def test_config(self, local_env):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "local" in result.output
        assert "APPDIFF_TIMEOUT_SECONDS" in result.output
