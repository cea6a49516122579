"""Shared test fixtures for authweb.

Provides reusable fixtures for isolated config environments, output state,
verification configs, mock transports, and running CLI commands. These
fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from authweb.client.transport import HttpxTransport
from authweb.models import Credentials, RequestConfig, VerificationConfig
from authweb.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams, so a fresh manager must
    be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at tmp_path, clears AUTHWEB_* environment
    variables and changes the working directory to tmp_path.
    """
    monkeypatch.setattr("authweb.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["AUTHWEB_PROFILE", "AUTHWEB_URL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a verbose OutputManager so debug lines reach stderr."""
    output = OutputManager(format=OutputFormat.PLAIN, verbose=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Verification fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def web_config() -> VerificationConfig:
    """A complete config that denies on the text 'Invalid'."""
    return VerificationConfig(
        url="https://login.example.com/check",
        username_param="u",
        password_param="p",
        failed_string="Invalid",
    )


@pytest.fixture
def bob() -> Credentials:
    return Credentials(username="bob", password="s p&ace")


@pytest.fixture
def mock_transport() -> Callable[..., HttpxTransport]:
    """Factory building an HttpxTransport around an httpx.MockTransport handler."""

    def _make(handler, config: RequestConfig | None = None) -> HttpxTransport:
        return HttpxTransport(config, transport=httpx.MockTransport(handler))

    return _make


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
