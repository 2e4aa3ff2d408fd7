"""Unified diff synthesis with portable ``a/``/``b/`` headers."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Sequence

from ..config import DEFAULT_DIFF_COMMAND
from ..errors import DiffFailed, MissingInput, NoDifferences, WriteFailure
from ..tools.process import CommandTimeout, run_command_bytes

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DraftPatch:
    """Working state of a patch being created."""

    relative_path: str
    original: bytes
    modified: bytes
    diff: bytes = b""


def _as_bytes(content: str | bytes) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else content


def canonicalise_headers(diff: bytes, relative_path: str) -> bytes:
    """Rewrite the first two lines into ``--- a/<path>`` / ``+++ b/<path>``.

    Works on raw bytes so file content in any encoding passes through
    untouched.
    """
    path = os.fsencode(relative_path)
    lines = diff.split(b"\n")
    if lines and lines[0].startswith(b"---"):
        lines[0] = b"--- a/" + path
    if len(lines) > 1 and lines[1].startswith(b"+++"):
        lines[1] = b"+++ b/" + path
    return b"\n".join(lines)


def synthesize(
    pristine: str | bytes,
    modified: str | bytes,
    relative_path: str,
    *,
    diff_command: Sequence[str] = tuple(DEFAULT_DIFF_COMMAND),
    timeout: float | None = None,
) -> bytes:
    """Return the canonical unified diff turning ``pristine`` into ``modified``.

    Raises :class:`NoDifferences` when the diff is empty and
    :class:`DiffFailed` when the diff tool reports trouble (exit status
    above 1) or cannot be run.
    """
    with tempfile.TemporaryDirectory(prefix="vendorpatch-diff-") as workdir:
        original_path = Path(workdir) / "original"
        modified_path = Path(workdir) / "modified"
        original_path.write_bytes(_as_bytes(pristine))
        modified_path.write_bytes(_as_bytes(modified))

        command = [*diff_command, str(original_path), str(modified_path)]
        try:
            result = run_command_bytes(command, cwd=Path(workdir), timeout=timeout)
        except (CommandTimeout, OSError) as error:
            raise DiffFailed(f"Failed to run {diff_command[0]}: {error}") from error

    if result.returncode > 1:
        detail = result.stderr or result.stdout
        message = detail.decode("utf-8", errors="replace").strip() or f"exit status {result.returncode}"
        raise DiffFailed(f"Failed to generate patch: {message}")
    if not result.stdout.strip():
        raise NoDifferences()
    return canonicalise_headers(result.stdout, relative_path)


def normalise_patch_name(name: str, *, suffix: str = ".patch") -> str:
    """Return ``name`` as a relative posix path ending in ``suffix``."""
    cleaned = (name or "").strip().replace("\\", "/").lstrip("/")
    parts = [part for part in PurePosixPath(cleaned).parts if part not in ("", ".")] if cleaned else []
    if not parts:
        raise MissingInput("Patch name is required.")
    if ".." in parts:
        raise MissingInput(f"Patch name must stay inside the patches directory: {name}")
    normalised = "/".join(parts)
    if not normalised.endswith(suffix):
        normalised += suffix
    return normalised


def write_patch(patches_dir: Path, name: str, diff: bytes, *, suffix: str = ".patch") -> Path:
    """Persist ``diff`` as ``<patches_dir>/<name>`` and return the file path.

    Subdirectories are created as needed.  The content is written to a
    temporary sibling and moved into place, so readers never observe a
    partial file.
    """
    relative = normalise_patch_name(name, suffix=suffix)
    target = Path(patches_dir) / relative
    directory = target.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise WriteFailure(f"Failed to create directory: {directory} ({error})") from error

    temp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=directory,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_name = handle.name
            handle.write(diff)
        os.replace(temp_name, target)
    except OSError as error:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
        raise WriteFailure(f"Failed to write patch file: {target} ({error})") from error

    LOGGER.info("Wrote patch %s", target)
    return target


__all__ = [
    "DraftPatch",
    "canonicalise_headers",
    "normalise_patch_name",
    "synthesize",
    "write_patch",
]
