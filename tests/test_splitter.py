from __future__ import annotations

import threading
from pathlib import Path

import pytest

from rnplay import splitter
from rnplay.splitter import SplitResult, copy_project, split_projects


def _make_source(root: Path, name: str) -> Path:
    src = root / name
    (src / "lib").mkdir(parents=True)
    (src / "index.js").write_text(f"// {name}\n")
    (src / "lib" / "util.js").write_text("module.exports = {};\n")
    return src


def test_copy_project_copies_tree(tmp_path) -> None:
    src = _make_source(tmp_path, "one")
    target = tmp_path / "out" / "one"
    copy_project(src, target)
    assert (target / "index.js").read_text() == "// one\n"
    assert (target / "lib" / "util.js").exists()


def test_copy_project_replaces_previous_copy(tmp_path) -> None:
    src = _make_source(tmp_path, "one")
    (src / "old.js").write_text("old\n")
    target = tmp_path / "out" / "one"
    copy_project(src, target)
    (target / ".git").mkdir()

    (src / "old.js").unlink()
    (src / "new.js").write_text("new\n")
    copy_project(src, target)

    assert not (target / "old.js").exists()
    assert not (target / ".git").exists()
    assert (target / "new.js").read_text() == "new\n"
    assert (target / "lib" / "util.js").exists()


def test_copy_project_replaces_file_at_target(tmp_path) -> None:
    src = _make_source(tmp_path, "one")
    target = tmp_path / "one-copy"
    target.write_text("stale")
    copy_project(src, target)
    assert (target / "index.js").exists()


def test_copy_project_missing_source(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        copy_project(tmp_path / "missing", tmp_path / "out")


def test_no_projects_returns_immediately(tmp_path) -> None:
    assert split_projects({}, lambda p, t: None, tmp_dir=tmp_path) == []


def test_each_project_is_copied_and_provisioned_once(tmp_path) -> None:
    sources = {name: _make_source(tmp_path / "src", name) for name in ("a", "b", "c")}
    provisioned: list[tuple[str, Path]] = []

    results = split_projects(sources, lambda p, t: provisioned.append((p, t)), tmp_dir=tmp_path / "tmp")

    assert sorted(provisioned) == [(n, tmp_path / "tmp" / n) for n in ("a", "b", "c")]
    assert [r.project for r in results] == ["a", "b", "c"]
    assert all(r.ok for r in results)
    for name in sources:
        assert (tmp_path / "tmp" / name / "index.js").read_text() == f"// {name}\n"


def test_branches_run_concurrently(tmp_path) -> None:
    sources = {name: _make_source(tmp_path / "src", name) for name in ("a", "b")}
    barrier = threading.Barrier(2, timeout=5)

    # Each branch waits for the other; this only completes if both run at once.
    results = split_projects(sources, lambda p, t: barrier.wait(), tmp_dir=tmp_path / "tmp")
    assert all(r.ok for r in results)


def test_failed_copy_does_not_stop_other_branches(monkeypatch, tmp_path) -> None:
    sources = {"a": tmp_path / "src" / "a", "b": tmp_path / "src" / "b"}
    copies: list[str] = []

    def fake_copy(source: Path, target: Path) -> Path:
        copies.append(target.name)
        if target.name == "a":
            raise OSError("disk full")
        return target

    monkeypatch.setattr(splitter, "copy_project", fake_copy)
    provisioned: list[str] = []

    results = split_projects(sources, lambda p, t: provisioned.append(p), tmp_dir=tmp_path / "tmp")

    assert sorted(copies) == ["a", "b"]
    assert provisioned == ["b"]
    by_name = {r.project: r for r in results}
    assert isinstance(by_name["a"].error, OSError)
    assert by_name["b"].ok


def test_on_done_called_for_every_branch(tmp_path) -> None:
    sources = {name: _make_source(tmp_path / "src", name) for name in ("a", "b", "c")}
    done: list[SplitResult] = []
    lock = threading.Lock()

    def on_done(result: SplitResult) -> None:
        with lock:
            done.append(result)

    def provision(project: str, target: Path) -> None:
        if project == "b":
            raise RuntimeError("boom")

    split_projects(sources, provision, tmp_dir=tmp_path / "tmp", on_done=on_done)
    assert sorted(r.project for r in done) == ["a", "b", "c"]
    assert [r.project for r in done if not r.ok] == ["b"]
