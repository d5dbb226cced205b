"""
splitter.py

Responsibility: Provision every sub-project of a split in parallel.

Each branch copies its source directory to `<tmp>/<project>` and then hands
the copy to a `provision` callable (create the remote app, `git init`, add
the remote). Branches are independent: a failing branch is recorded in its
result and does not affect the others. `split_projects` returns only after
every branch has finished.
"""

from __future__ import annotations

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

Provision = Callable[[str, Path], None]


@dataclass(frozen=True)
class SplitResult:
    project: str
    target: Path
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def copy_project(source: Path, target: Path) -> Path:
    """
    Copy `source` to `target`, replacing whatever a previous split left there.
    """
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source}")
    if target.is_symlink() or target.is_file():
        target.unlink()
    elif target.exists():
        shutil.rmtree(target)
    shutil.copytree(source, target, symlinks=True)
    return target


def _run_branch(project: str, source: Path, target: Path, provision: Provision) -> SplitResult:
    try:
        copy_project(source, target)
        provision(project, target)
    except Exception as e:  # noqa: BLE001 - recorded per branch, reported after the join
        logger.debug("Split branch %s failed", project, exc_info=True)
        return SplitResult(project=project, target=target, error=e)
    return SplitResult(project=project, target=target)


def split_projects(
    projects: dict[str, Path],
    provision: Provision,
    *,
    tmp_dir: Path,
    on_done: Callable[[SplitResult], None] | None = None,
) -> list[SplitResult]:
    """
    Run one branch per project concurrently and wait for all of them.

    Results are returned in the order of `projects`, regardless of completion
    order. `on_done` is called once per branch as it completes.
    """
    if not projects:
        return []

    with ThreadPoolExecutor(max_workers=len(projects), thread_name_prefix="rnplay-split") as pool:
        futures = [
            pool.submit(_run_branch, project, source, tmp_dir / project, provision)
            for project, source in projects.items()
        ]
        if on_done is not None:
            for fut in futures:
                fut.add_done_callback(lambda f: on_done(f.result()))
        results = [fut.result() for fut in futures]

    logger.debug("Split finished: %d ok, %d failed", sum(r.ok for r in results), sum(not r.ok for r in results))
    return results
