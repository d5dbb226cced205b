"""
config.py

Responsibility: Read and write the two small JSON config files.

- Global config (`~/.rnplay`): `{"token": ..., "email": ...}`, written by
  `rnplay --authenticate` and required by every other action.
- Local config (`<project>/.rnplay`): `{"urlToken": ...}`, written by
  `rnplay --create` and read by `rnplay --open`.

Files are overwritten in full on save; there is no locking or merging.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    pass


class ConfigMissingOrCorrupt(ConfigError):
    pass


class InvalidConfig(ConfigError):
    pass


@dataclass(frozen=True)
class GlobalConfig:
    """Credentials issued by rnplay.org."""

    token: str
    email: str


@dataclass(frozen=True)
class LocalConfig:
    """Identifies the remote app created for the current project."""

    url_token: str | None = None


def _read_json(path: Path, hint: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigMissingOrCorrupt(f"Missing or corrupt config file, please run `{hint}`") from e
    if not isinstance(data, dict):
        raise ConfigMissingOrCorrupt(f"Missing or corrupt config file, please run `{hint}`")
    return data


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.write_text(json.dumps(data) + "\n", encoding="utf-8")
    logger.debug("Wrote config file %s", path)


def read_global_config(path: str | Path) -> GlobalConfig:
    data = _read_json(Path(path), "rnplay -a")
    return GlobalConfig(token=str(data.get("token") or ""), email=str(data.get("email") or ""))


def save_global_config(path: str | Path, config: GlobalConfig) -> None:
    _write_json(Path(path), {"token": config.token, "email": config.email})


def read_local_config(path: str | Path) -> LocalConfig:
    data = _read_json(Path(path), "rnplay --create")
    url_token = data.get("urlToken")
    return LocalConfig(url_token=str(url_token) if url_token else None)


def save_local_config(path: str | Path, config: LocalConfig) -> None:
    _write_json(Path(path), {"urlToken": config.url_token})


def check_config(config: GlobalConfig) -> GlobalConfig:
    """
    Pass the config through unchanged, or raise InvalidConfig if the token or
    email is missing.
    """
    if not config.email or not config.token:
        raise InvalidConfig("Invalid config, please run `rnplay -a` first")
    return config
