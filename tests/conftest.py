from __future__ import annotations

import sys
from pathlib import Path

import pytest
import respx
from typer.testing import CliRunner

# Ensure the repository-local ``src`` directory is importable when the project is
# not installed as a package.
SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

API_BASE = "https://slack.test/api"


class StubKeyring:
    """In-memory stand-in for the ``keyring`` module."""

    def __init__(self) -> None:
        self.storage: dict[tuple[str, str], str] = {}
        self.calls: list[tuple[str, str, str]] = []

    def get_password(self, service_name: str, username: str) -> str | None:
        self.calls.append(("get", service_name, username))
        return self.storage.get((service_name, username))

    def set_password(self, service_name: str, username: str, password: str) -> None:
        self.calls.append(("set", service_name, username))
        self.storage[(service_name, username)] = password


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the real config file, API and environment overrides."""

    monkeypatch.setattr("slackcli.config.CONFIG_PATH", str(tmp_path / "config.json"))
    monkeypatch.setenv("SLACK_API_BASE", API_BASE)
    monkeypatch.delenv("SLACK_TOKEN", raising=False)
    monkeypatch.delenv("SLACKCLI_PROFILE", raising=False)
    monkeypatch.delenv("SLACKCLI_DEBUG", raising=False)


@pytest.fixture(autouse=True)
def stub_keyring(monkeypatch: pytest.MonkeyPatch) -> StubKeyring:
    stub = StubKeyring()
    monkeypatch.setattr("slackcli.secrets.keyring", stub)
    return stub


@pytest.fixture
def api_base() -> str:
    return API_BASE


@pytest.fixture
def respx_mock():
    with respx.mock(assert_all_called=False) as respx_mgr:
        yield respx_mgr


@pytest.fixture
def cli_runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """Provide a CLI runner with a token override."""

    monkeypatch.setenv("SLACK_TOKEN", "xoxp-test")
    return CliRunner()
