"""Recover the pristine content of a file inside an installed dependency."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Sequence, Tuple

from ..config import DEFAULT_REINSTALL_COMMAND, PatcherConfig
from ..errors import OriginalUnavailable, PathNotRecognized, RestoreFailed
from ..tools.process import CommandTimeout, run_command
from ..tools.vcs import GitError, GitRepository

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackageReference:
    """Package coordinates parsed from a dependency file path."""

    dependency_dir: str
    package: str
    file_path: str

    @property
    def target(self) -> str:
        """Project-relative path of the file, forward-slash separated."""
        return f"{self.dependency_dir}/{self.package}/{self.file_path}"

    def package_dir(self, root: Path) -> Path:
        return Path(root) / self.dependency_dir / self.package

    def target_path(self, root: Path) -> Path:
        return Path(root) / self.target


def normalise_target(target: str | Path, root: Path) -> str:
    """Return ``target`` as a clean project-relative posix path.

    Absolute paths must point inside ``root``.  They are made absolute
    without following symlinks, so symlinked packages stay recognisable.
    Raises :class:`PathNotRecognized` for paths outside the project or with
    ``..`` segments.
    """
    raw = str(target).strip().replace("\\", "/")
    candidate = Path(raw)
    if candidate.is_absolute():
        try:
            absolute = Path(os.path.abspath(candidate))
            raw = absolute.relative_to(os.path.abspath(root)).as_posix()
        except ValueError as error:
            raise PathNotRecognized(f"Path is outside the project root: {target}") from error
    parts = [part for part in PurePosixPath(raw).parts if part not in ("", ".")]
    if ".." in parts:
        raise PathNotRecognized(f"Path must not contain '..' segments: {target}")
    return "/".join(parts)


def parse_package_reference(
    target: str | Path,
    root: Path,
    *,
    dependency_dir: str = "vendor",
) -> PackageReference:
    """Match ``<dependency_dir>/<vendor>/<package>/<rest>`` against ``target``."""
    relative = normalise_target(target, root)
    pattern = re.compile(rf"^{re.escape(dependency_dir)}/([^/]+/[^/]+)/(.+)$")
    match = pattern.match(relative)
    if match is None:
        raise PathNotRecognized(
            f"Could not parse {dependency_dir} package path: {target}",
            hint=f"Expected {dependency_dir}/<vendor>/<package>/<file>.",
        )
    return PackageReference(
        dependency_dir=dependency_dir,
        package=match.group(1),
        file_path=match.group(2),
    )


class OriginalContentResolver:
    """Restores a dependency file to its pristine state and returns it.

    Packages installed as git working copies are read from ``HEAD``; other
    packages are reinstalled with ``reinstall_command`` (build hooks and
    autoloader generation disabled by default).  Either way the target
    file holds the pristine content when :meth:`resolve` returns, so callers
    must snapshot the modified file first.
    """

    def __init__(
        self,
        root: Path,
        *,
        dependency_dir: str = "vendor",
        reinstall_command: Sequence[str] = tuple(DEFAULT_REINSTALL_COMMAND),
        git_executable: str = "git",
        timeout: float | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.dependency_dir = dependency_dir
        self.reinstall_command: Tuple[str, ...] = tuple(reinstall_command)
        self.git_executable = git_executable
        self.timeout = timeout

    @classmethod
    def from_config(cls, root: Path, config: PatcherConfig) -> "OriginalContentResolver":
        return cls(
            root,
            dependency_dir=config.dependency_dir,
            reinstall_command=config.create.reinstall_command,
            git_executable=config.apply.git_executable,
            timeout=config.tool_timeout,
        )

    def reference(self, target: str | Path) -> PackageReference:
        return parse_package_reference(target, self.root, dependency_dir=self.dependency_dir)

    def resolve(self, target: str | Path) -> bytes:
        reference = self.reference(target)
        package_dir = reference.package_dir(self.root)
        LOGGER.info("Resolving original of %s from package %s", reference.file_path, reference.package)
        if GitRepository.is_working_copy(package_dir):
            return self._from_history(reference)
        return self._from_reinstall(reference)

    def _from_history(self, reference: PackageReference) -> bytes:
        try:
            repo = GitRepository(
                reference.package_dir(self.root),
                executable=self.git_executable,
                timeout=self.timeout,
            )
            content = repo.show_head(reference.file_path)
        except GitError as error:
            raise OriginalUnavailable(
                f"Failed to get original from git: {error}",
                hint="The file may not be tracked in the package repository.",
            ) from error
        reference.target_path(self.root).write_bytes(content)
        return content

    def reinstall_args(self, package: str) -> list[str]:
        return [part.replace("{package}", package) for part in self.reinstall_command]

    def _from_reinstall(self, reference: PackageReference) -> bytes:
        args = self.reinstall_args(reference.package)
        LOGGER.debug("Reinstalling %s: %s", reference.package, " ".join(args))
        try:
            result = run_command(args, cwd=self.root, timeout=self.timeout)
        except (CommandTimeout, OSError) as error:
            raise RestoreFailed(f"Failed to reinstall {reference.package}: {error}") from error
        if result.returncode != 0:
            LOGGER.warning(
                "Reinstall of %s exited with %d: %s",
                reference.package,
                result.returncode,
                result.stderr.strip() or result.stdout.strip(),
            )

        restored = reference.target_path(self.root)
        if not restored.is_file():
            raise RestoreFailed(f"Failed to restore original file: {reference.target}")
        return restored.read_bytes()


__all__ = [
    "OriginalContentResolver",
    "PackageReference",
    "normalise_target",
    "parse_package_reference",
]
