"""
workflows.py

Responsibility: The four user-facing actions (authenticate / create / open / split).

Each action is a short, linear sequence of stages. The first failing stage
stops the action and its exception propagates unchanged to the CLI; nothing
that an earlier stage wrote (e.g. the local config) is rolled back.

Collaborators (API client, prompt, browser opener, output) are injected so
the actions can run without a terminal, network or browser.
"""

from __future__ import annotations

import logging
import threading
import webbrowser
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator

from rich.console import Console
from rich.markup import escape

from rnplay import git
from rnplay.api_client import RnplayClient
from rnplay.config import (
    GlobalConfig,
    LocalConfig,
    check_config,
    read_global_config,
    read_local_config,
    save_global_config,
    save_local_config,
)
from rnplay.manifest import package_name, split_config
from rnplay.settings import Settings
from rnplay.splitter import SplitResult, split_projects

logger = logging.getLogger(__name__)

Prompt = Callable[[str], str]
OpenUrl = Callable[[str], object]


class SplitError(RuntimeError):
    pass


class Stage(str, Enum):
    IDLE = "idle"
    PROMPTING = "prompting"
    VALIDATING_CONFIG = "validating_config"
    RESOLVING_NAME = "resolving_name"
    CALLING_REMOTE_API = "calling_remote_api"
    PERSISTING_LOCAL_STATE = "persisting_local_state"
    LOADING_LOCAL_STATE = "loading_local_state"
    RUNNING_SHELL_COMMAND = "running_shell_command"
    OPENING_BROWSER = "opening_browser"
    SPLITTING = "splitting"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


class WorkflowRun:
    """Tracks which stage a single action is in; FAILED and DONE are terminal."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.stage = Stage.IDLE
        self.history: list[Stage] = [Stage.IDLE]
        self.failed_at: Stage | None = None

    def _enter(self, stage: Stage) -> None:
        if self.stage in (Stage.DONE, Stage.FAILED):
            raise RuntimeError(f"Workflow {self.name!r} already finished ({self.stage.value})")
        logger.debug("%s: %s -> %s", self.name, self.stage.value, stage.value)
        self.stage = stage
        self.history.append(stage)

    @contextmanager
    def step(self, stage: Stage) -> Iterator[None]:
        self._enter(stage)
        try:
            yield
        except BaseException:
            self.failed_at = stage
            self._enter(Stage.FAILED)
            raise

    def finish(self) -> None:
        self._enter(Stage.DONE)


class Reporter:
    """User-facing status lines."""

    def __init__(self, console: Console | None = None, err_console: Console | None = None) -> None:
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def ok(self, message: str) -> None:
        self.console.print(f"[bold green]OK:[/] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[bold blue]INFO:[/] {escape(message)}")

    def error(self, message: str) -> None:
        self.err_console.print(f"[bold red]ERROR:[/] {escape(message)}")


class Workflows:
    def __init__(
        self,
        settings: Settings,
        *,
        client: RnplayClient | None = None,
        reporter: Reporter | None = None,
        prompt: Prompt | None = None,
        open_url: OpenUrl | None = None,
    ) -> None:
        self.settings = settings
        self.client = client or RnplayClient(settings)
        self.reporter = reporter or Reporter()
        self.prompt = prompt or self.reporter.console.input
        self.open_url = open_url or webbrowser.open
        self.last_run: WorkflowRun | None = None

    def _start(self, name: str) -> WorkflowRun:
        self.last_run = WorkflowRun(name)
        return self.last_run

    def _ask(self, label: str) -> str:
        return self.prompt(f"{label}: ").strip()

    def _credentials(self, run: WorkflowRun) -> GlobalConfig:
        with run.step(Stage.VALIDATING_CONFIG):
            return check_config(read_global_config(self.settings.global_config_path))

    def authenticate(self) -> int:
        """Prompt for the rnplay.org token and email and save them to ~/.rnplay."""
        run = self._start("authenticate")
        with run.step(Stage.PROMPTING):
            token = self._ask("Please enter your rnplay.org authentication token")
            email = self._ask("Please enter your rnplay.org email address")
        with run.step(Stage.PERSISTING_LOCAL_STATE):
            save_global_config(self.settings.global_config_path, GlobalConfig(token=token, email=email))
        with run.step(Stage.REPORTING):
            self.reporter.ok("Saved config to ~/.rnplay")
        run.finish()
        return 0

    def create(self) -> int:
        """
        Create an app on rnplay.org for the current project and add it as the
        `rnplay` git remote.
        """
        run = self._start("create")
        credentials = self._credentials(run)

        with run.step(Stage.RESOLVING_NAME):
            name = package_name(self.settings.manifest_path) or self._ask("Please enter a name for your app")

        with run.step(Stage.CALLING_REMOTE_API):
            url_token = self.client.create_app(name, credentials)

        with run.step(Stage.PERSISTING_LOCAL_STATE):
            save_local_config(self.settings.local_config_path, LocalConfig(url_token=url_token))

        url = git.remote_url(credentials.token, url_token, self.settings.git_host)
        with run.step(Stage.RUNNING_SHELL_COMMAND):
            self.reporter.info("Adding git remote")
            git.add_remote(git.REMOTE_NAME, url, cwd=self.settings.cwd)

        with run.step(Stage.REPORTING):
            self.reporter.ok(f"Added remote with name `{git.REMOTE_NAME}` and url: `{url}`")
            self.reporter.ok(f"Your app's url token is `{url_token}`")
            self.reporter.ok(f"All done! Use `git push {git.REMOTE_NAME} master` to push your application.")
            self.reporter.ok("You can use `rnplay --open` to open this application on rnplay.org")
        run.finish()
        return 0

    def open(self) -> int:
        """Open the project's app page on rnplay.org in a browser."""
        run = self._start("open")
        self._credentials(run)

        with run.step(Stage.LOADING_LOCAL_STATE):
            local = read_local_config(self.settings.local_config_path)

        if not local.url_token:
            with run.step(Stage.REPORTING):
                self.reporter.error("You have to create an application using `rnplay --create` first")
            run.finish()
            return 1

        with run.step(Stage.OPENING_BROWSER):
            url = self.settings.app_url_base + local.url_token
            logger.debug("Opening %s", url)
            self.open_url(url)
        run.finish()
        return 0

    def split(self) -> int:
        """
        Copy each sub-project listed in the manifest's `rnplay` block to the
        temp directory and give each copy its own rnplay.org app and git remote.
        """
        run = self._start("split")
        credentials = self._credentials(run)

        with run.step(Stage.RESOLVING_NAME):
            projects = split_config(self.settings.manifest_path, base_dir=self.settings.cwd)

        def provision(project: str, target: Path) -> None:
            url_token = self.client.create_app(project, credentials)
            url = git.remote_url(credentials.token, url_token, self.settings.git_host)
            git.init_with_remote(git.REMOTE_NAME, url, cwd=target)

        total = len(projects)
        finished = 0
        lock = threading.Lock()

        def on_done(result: SplitResult) -> None:
            nonlocal finished
            with lock:
                finished += 1
                count = finished
            if result.ok:
                self.reporter.info(f"[{count}/{total}] Done setup for {result.target}")
            else:
                self.reporter.error(f"[{count}/{total}] Setup failed for {result.project}: {result.error}")

        with run.step(Stage.SPLITTING):
            for project in projects:
                self.reporter.info(f"Adding git remote for {project}")
            results = split_projects(projects, provision, tmp_dir=self.settings.tmp_dir, on_done=on_done)

        with run.step(Stage.REPORTING):
            failed = [r for r in results if not r.ok]
            if failed:
                lines = "\n".join(f"- {r.project}: {r.error}" for r in failed)
                raise SplitError(f"Split failed for {len(failed)} of {total} projects:\n{lines}")
            self.reporter.ok(f"Split {total} projects into {self.settings.tmp_dir}")
        run.finish()
        return 0
