from __future__ import annotations

import subprocess
import sys
import tempfile
import textwrap
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

TARGET = "vendor/acme/widget/src/File.txt"


def run_git(repo_root: Path, *cmd: str) -> None:
    subprocess.run(
        ["git", *cmd],
        cwd=repo_root,
        check=True,
        capture_output=True,
        text=True,
    )


def init_repo(repo_root: Path, message: str) -> None:
    """Turn ``repo_root`` into a git repository with one commit of its files."""

    run_git(repo_root, "init")
    run_git(repo_root, "config", "user.email", "patcher@example.com")
    run_git(repo_root, "config", "user.name", "Vendor Patcher")
    commit_all(repo_root, message)


def commit_all(repo_root: Path, message: str) -> None:
    run_git(repo_root, "add", "--all")
    run_git(repo_root, "commit", "--allow-empty", "-m", message)


def unified_diff(path: str, hunk: str) -> str:
    """Build a git-style patch for ``path`` from a dedented hunk body."""

    body = textwrap.dedent(hunk).lstrip("\n")
    return f"--- a/{path}\n+++ b/{path}\n{body}"


@dataclass(slots=True)
class Project:
    """Synthetic project with a vendor tree and a patches directory."""

    root: Path

    @property
    def patches_dir(self) -> Path:
        return self.root / "patches"

    def file(self, relative: str) -> Path:
        return self.root / relative

    def read(self, relative: str) -> str:
        return self.file(relative).read_text(encoding="utf-8")

    def write(self, relative: str, content: str) -> Path:
        path = self.file(relative)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def add_patch(self, name: str, content: str) -> Path:
        path = self.patches_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def snapshot(self) -> dict[str, bytes]:
        """Return every file below the root keyed by relative path."""

        return {
            path.relative_to(self.root).as_posix(): path.read_bytes()
            for path in sorted(self.root.rglob("*"))
            if path.is_file() and ".git" not in path.relative_to(self.root).parts
        }


@pytest.fixture()
def project(tmp_path: Path) -> Project:
    """Project with three vendor files and an empty patches directory."""

    root = tmp_path / "project"
    root.mkdir()
    project = Project(root=root)
    project.write(TARGET, "alpha\nbeta\ngamma\n")
    project.write("vendor/acme/widget/src/Other.txt", "one\ntwo\nthree\n")
    project.write("vendor/globex/tools/lib/Tool.txt", "red\ngreen\nblue\n")
    project.patches_dir.mkdir()
    return project


@pytest.fixture()
def git_project(project: Project) -> Project:
    """``project`` turned into a git working copy with a git-installed package."""

    project.write(".gitignore", "vendor/\n")
    init_repo(project.root, "Initial project state")
    init_repo(project.root / "vendor" / "acme" / "widget", "widget 1.0.0")
    return project


@pytest.fixture()
def scratch_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route ``tempfile`` into an inspectable, initially empty directory."""

    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch
