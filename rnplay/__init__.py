"""
rnplay package

This package implements the rnplay.org command-line helper.

Key responsibilities are split across modules:
- `settings.py`: environment-derived settings (hosts, URLs, config paths)
- `config.py`: the per-user and per-project JSON config files
- `manifest.py`: reading the project's `package.json` (name, `rnplay` block)
- `api_client.py`: isolated rnplay.org REST API interactions (app creation)
- `git.py`: git subprocess invocations (init / remote add)
- `splitter.py`: parallel provisioning of split sub-projects
- `workflows.py`: the authenticate / create / open / split workflows
- `cli.py`: CLI entrypoint, logging setup and top-level error handling
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
