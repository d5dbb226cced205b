"""
manifest.py

Responsibility: Read the project manifest (`package.json`).

Two things are taken from it:
- `name`: used as the app name on rnplay.org when present.
- `rnplay`: the split block, a mapping of sub-project name -> source directory.

Everything else in the manifest is ignored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class ManifestError(ValueError):
    pass


def read_manifest(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ManifestError(f"Manifest file does not exist: {p}")
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except ValueError as e:
        raise ManifestError(f"Manifest file is not valid JSON: {p}") from e
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a JSON object at the top level.")
    return data


def package_name(path: str | Path) -> str | None:
    """
    Return the manifest's package name, or None if there is no manifest or it
    declares no name.
    """
    try:
        data = read_manifest(path)
    except ManifestError:
        return None
    name = str(data.get("name") or "").strip()
    return name or None


def split_config(path: str | Path, *, base_dir: str | Path) -> dict[str, Path]:
    """
    Return the `rnplay` split block as project name -> absolute source path.

    Relative source paths are resolved against `base_dir`. Manifest key order
    is preserved.
    """
    data = read_manifest(path)
    raw = data.get("rnplay")
    if not raw:
        raise ManifestError("No rnplay config found. Make sure you have rnplay config in your package.json")
    if not isinstance(raw, dict):
        raise ManifestError("`rnplay` must be an object mapping project names to directories.")

    base = Path(base_dir)
    projects: dict[str, Path] = {}
    for name, source in raw.items():
        # Project names become directory names under the temp dir.
        if name in ("", ".", "..") or Path(name).name != name:
            raise ManifestError(f"`rnplay` project name must be a plain directory name: {name!r}")
        if not isinstance(source, str) or not source.strip():
            raise ManifestError(f"`rnplay.{name}` must be a non-empty directory path.")
        projects[str(name)] = (base / source).resolve()
    return projects
