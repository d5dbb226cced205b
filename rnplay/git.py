"""
git.py

Responsibility: Run the git commands the workflows need.

Only two operations exist: adding the `rnplay` remote to an existing
repository, and initialising a fresh repository with that remote (used for
split sub-projects). Any failure is reported with git's raw output.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

REMOTE_NAME = "rnplay"


class ShellCommandError(RuntimeError):
    pass


def run(cmd: list[str], *, cwd: str | Path) -> str:
    """
    Run a subprocess command and return its output, raising ShellCommandError on failure.
    """
    logger.debug("Running %s in %s", cmd[:3], cwd)
    try:
        proc = subprocess.run(
            cmd, cwd=str(cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True
        )
    except FileNotFoundError as e:
        raise ShellCommandError(f"Command not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        raise ShellCommandError(f"Command failed: {' '.join(cmd[:3])}\n\n{e.stdout}") from e
    return proc.stdout


def remote_url(token: str, url_token: str, git_host: str) -> str:
    # The token is stored in `.git/config` as the remote's username.
    return f"https://{token}:@{git_host}/{url_token}.git"


def add_remote(name: str, url: str, *, cwd: str | Path) -> None:
    run(["git", "remote", "add", name, url], cwd=cwd)


def init_with_remote(name: str, url: str, *, cwd: str | Path) -> None:
    """
    `git init` the directory and add the remote; stops at the first failing command.
    """
    run(["git", "init"], cwd=cwd)
    add_remote(name, url, cwd=cwd)
