from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from rnplay import git
from rnplay.api_client import RemoteApiError
from rnplay.config import GlobalConfig
from rnplay.settings import Settings
from rnplay.workflows import Reporter, Workflows


class FakeClient:
    def __init__(
        self,
        url_token: str = "abc123",
        fail_for: set[str] | None = None,
        tokens: dict[str, str] | None = None,
    ) -> None:
        self.url_token = url_token
        self.tokens = tokens or {}
        self.fail_for = fail_for or set()
        self.calls: list[tuple[str, GlobalConfig]] = []

    def create_app(self, name: str, credentials: GlobalConfig) -> str:
        self.calls.append((name, credentials))
        if name in self.fail_for:
            raise RemoteApiError(f"rnplay.org API error 422 POST /apps.json: {name} is taken")
        return self.tokens.get(name, self.url_token)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    for d in ("home", "project", "tmp"):
        (tmp_path / d).mkdir()
    return Settings.from_env(
        {}, cwd=tmp_path / "project", home=tmp_path / "home", tmp_dir=tmp_path / "tmp"
    )


@pytest.fixture()
def write_global(settings: Settings):
    def _write(data: object) -> None:
        settings.global_config_path.write_text(json.dumps(data), encoding="utf-8")

    return _write


@pytest.fixture()
def write_manifest(settings: Settings):
    def _write(data: object) -> None:
        settings.manifest_path.write_text(json.dumps(data), encoding="utf-8")

    return _write


@pytest.fixture()
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def reporter(output: io.StringIO) -> Reporter:
    console = Console(file=output, width=300, color_system=None)
    return Reporter(console=console, err_console=console)


@pytest.fixture()
def git_calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple[list[str], str]]:
    calls: list[tuple[list[str], str]] = []

    def fake_run(cmd: list[str], *, cwd) -> str:
        calls.append((list(cmd), str(cwd)))
        return ""

    monkeypatch.setattr(git, "run", fake_run)
    return calls


@pytest.fixture()
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture()
def opened() -> list[str]:
    return []


@pytest.fixture()
def prompts() -> list[str]:
    return []


@pytest.fixture()
def make_workflows(settings, client, reporter, opened, prompts):
    def _make(answers: list[str] | None = None, **overrides) -> Workflows:
        queue = list(answers or [])

        def prompt(label: str) -> str:
            prompts.append(label)
            return queue.pop(0)

        kwargs = dict(client=client, reporter=reporter, prompt=prompt, open_url=opened.append)
        kwargs.update(overrides)
        return Workflows(settings, **kwargs)

    return _make
