"""
settings.py

Responsibility: Build the process-lifetime settings once, at startup.

The only environment input is `RNPLAY_ENV`, which prefixes the service host
(`RNPLAY_ENV=staging` -> `staging.rnplay.org`) for every API, web and git URL.
The resulting `Settings` is passed explicitly to the modules that need it.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

ENV_VAR = "RNPLAY_ENV"
BASE_HOST = "rnplay.org"
CONFIG_FILE = ".rnplay"
MANIFEST_FILE = "package.json"


@dataclass(frozen=True)
class Settings:
    env_prefix: str
    cwd: Path
    home: Path
    tmp_dir: Path

    @property
    def host(self) -> str:
        return f"{self.env_prefix}{BASE_HOST}"

    @property
    def api_base(self) -> str:
        return f"https://{self.host}"

    @property
    def apps_endpoint(self) -> str:
        return f"{self.api_base}/apps.json"

    @property
    def app_url_base(self) -> str:
        return f"https://{self.host}/apps/"

    @property
    def git_host(self) -> str:
        return f"git.{self.host}"

    @property
    def global_config_path(self) -> Path:
        return self.home / CONFIG_FILE

    @property
    def local_config_path(self) -> Path:
        return self.cwd / CONFIG_FILE

    @property
    def manifest_path(self) -> Path:
        return self.cwd / MANIFEST_FILE

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        cwd: str | Path | None = None,
        home: str | Path | None = None,
        tmp_dir: str | Path | None = None,
    ) -> "Settings":
        env = os.environ if environ is None else environ
        name = (env.get(ENV_VAR) or "").strip()
        return cls(
            env_prefix=f"{name}." if name else "",
            cwd=Path(cwd or Path.cwd()).resolve(),
            home=Path(home or Path.home()),
            tmp_dir=Path(tmp_dir or tempfile.gettempdir()),
        )
