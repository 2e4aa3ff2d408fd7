"""Minimal git helpers.

Just enough structure to recognise a working copy and read committed
file contents.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from .process import CommandTimeout, run_command_bytes


class GitError(RuntimeError):
    """Raised when a git command fails or the repository cannot be used."""


class GitRepository:
    """Lightweight wrapper around ``git`` commands."""

    def __init__(
        self,
        root: Path | str,
        *,
        executable: str = "git",
        timeout: float | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.executable = executable
        self.timeout = timeout
        if not self.is_working_copy(self.root):
            raise GitError(f"Not a git repository: {self.root}")

    @staticmethod
    def is_working_copy(path: Path | str) -> bool:
        """Return ``True`` when ``path`` holds its own ``.git`` entry."""

        return (Path(path) / ".git").exists()

    def show_head(self, path: Path | str) -> bytes:
        """Return the committed ``HEAD`` content of ``path`` as raw bytes.

        ``path`` is relative to the repository root.  Raises :class:`GitError`
        when the file is untracked, the repository has no commits, or git
        cannot be run.
        """

        revision = f"HEAD:{PurePosixPath(Path(path).as_posix())}"
        try:
            process = run_command_bytes(
                [self.executable, "show", revision],
                cwd=self.root,
                timeout=self.timeout,
            )
        except (CommandTimeout, OSError) as error:
            raise GitError(f"git show {revision} failed: {error}") from error
        if process.returncode != 0:
            stderr = process.stderr.decode("utf-8", errors="replace").strip()
            raise GitError(f"git show {revision} failed: {stderr or 'unknown git error'}")
        return process.stdout


__all__ = ["GitError", "GitRepository"]
