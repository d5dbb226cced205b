"""
cli.py

Responsibility: CLI entrypoint for rnplay.

One action per invocation, selected by flag (first match wins, in this order):
- `-a/--authenticate`: store the rnplay.org token and email in ~/.rnplay
- `-c/--create`: create an app on rnplay.org and add the `rnplay` git remote
- `-o/--open`: open the project's app page in a browser
- `-s/--split`: split the project using the `rnplay` block in package.json

Without an action the usage is printed. Every workflow error ends up in the
single handler in `main`, which reports it and exits with status 1.
"""

from __future__ import annotations

import argparse
import logging

from rich.logging import RichHandler

from rnplay import __version__
from rnplay.api_client import RemoteApiError
from rnplay.config import ConfigError
from rnplay.git import ShellCommandError
from rnplay.manifest import ManifestError
from rnplay.settings import Settings
from rnplay.workflows import SplitError, Workflows

logger = logging.getLogger(__name__)

ACTIONS = ("authenticate", "create", "open", "split")

WORKFLOW_ERRORS = (ConfigError, ManifestError, RemoteApiError, ShellCommandError, SplitError, OSError)


class UsageError(RuntimeError):
    pass


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(show_time=False, show_path=False, markup=False, rich_tracebacks=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="rnplay", description="rnplay - push your React Native apps to rnplay.org")
    p.add_argument("-a", "--authenticate", action="store_true", help="Authenticate to rnplay.org with a token")
    p.add_argument("-c", "--create", action="store_true", help="Create a git remote for this application")
    p.add_argument("-o", "--open", action="store_true", help="Opens the last created application in rnplay.org")
    p.add_argument(
        "-s",
        "--split",
        action="store_true",
        help="Split repo code by using `rnplay` configuration block in package.json",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def select_action(args: argparse.Namespace) -> str:
    """
    Return the first selected action, raising UsageError when no action flag was given.
    """
    for name in ACTIONS:
        if getattr(args, name, False):
            return name
    raise UsageError("No action selected")


def main(argv: list[str] | None = None, *, workflows: Workflows | None = None) -> int:
    parser = _build_parser()
    args, unknown = parser.parse_known_args(argv)
    try:
        if unknown:
            raise UsageError(f"Unrecognized options: {' '.join(unknown)}")
        action = select_action(args)
    except UsageError:
        parser.print_help()
        return 0

    _configure_logging(bool(args.verbose))
    if workflows is None:
        workflows = Workflows(Settings.from_env())
    reporter = workflows.reporter

    try:
        return int(getattr(workflows, action)())
    except (KeyboardInterrupt, EOFError):
        reporter.error("Aborted")
        return 130
    except WORKFLOW_ERRORS as e:
        logger.debug("Action %s failed", action, exc_info=True)
        reporter.error(f"Ooops, there has been an error: \n{e}")
        reporter.info("If you are sure that you did nothing wrong, please file an issue at the rnplay-cli repo!")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
