"""Shared test fixtures for skillhub.

Provides sample backend payloads, a recording mock transport, isolated
config environments, output state management and a CLI runner. These
fixtures are discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from skillhub.models import ClientConfig, RequestConfig
from skillhub.output import OutputFormat, OutputManager, reset_output, set_output


BACKEND = "http://registry.test"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation. The
    ``skillhub`` logger's handlers are bound to the same streams.
    """
    logger = logging.getLogger("skillhub")
    handlers, level = list(logger.handlers), logger.level
    yield
    reset_output()
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet plain-text OutputManager for tests that ignore output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Backend payloads (shaped like the registry server's responses)
# ---------------------------------------------------------------------------


@pytest.fixture
def skill_list_payload() -> dict[str, Any]:
    return {
        "skills": [
            {
                "name": "python",
                "description": "Idiomatic Python",
                "tags": ["lang"],
                "version": "1.2.0",
                "path": "lang/python",
                "updated_at": "2026-01-05T10:00:00Z",
            },
            {
                "name": "python-asyncio",
                "description": "asyncio patterns",
                "path": "lang/python-asyncio",
                "updated_at": "2026-02-01T08:30:00Z",
                "stars": 12,
            },
        ]
    }


@pytest.fixture
def skill_detail_payload() -> dict[str, Any]:
    return {
        "name": "pdf",
        "description": "Work with PDF files",
        "author": "docs-team",
        "version": "0.3.0",
        "tags": ["documents"],
        "path": "documents/pdf",
        "updated_at": "2026-03-10T12:00:00Z",
        "readme": "---\nname: pdf\n---\n\n# PDF\n\nExtract text from PDFs.\n",
        "file_tree": "- SKILL.md\n- scripts/\n  - extract.py\n",
    }


# ---------------------------------------------------------------------------
# Transport helpers
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """A MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    """Factory: ``recording_transport(handler)`` -> :class:`RecordingTransport`."""
    return RecordingTransport


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(base_url=BACKEND, request=RequestConfig(timeout=5))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME under tmp_path, clears all
    SKILLHUB_* environment variables and changes the working directory
    to tmp_path.
    """
    monkeypatch.setattr("skillhub.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["SKILLHUB_BASE_URL", "SKILLHUB_API_PREFIX"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
