"""Error taxonomy shared by the apply and create pipelines."""

from __future__ import annotations

from pathlib import Path


class PatcherError(RuntimeError):
    """Base class for failures that end a run with a user-facing message."""

    exit_code: int = 1

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigError(PatcherError):
    """Raised when the configuration file cannot be parsed or validated."""


class PatchRootMissing(PatcherError):
    """Raised when the patch directory does not exist."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"Patches directory not found: {path}")
        self.path = Path(path)


class NotVersionControlled(PatcherError):
    """Raised when patch creation is attempted outside a git working copy."""


class MissingInput(PatcherError):
    """Raised when a required creation input is empty or points nowhere."""


class PathNotRecognized(PatcherError):
    """Raised when a target path does not live inside a dependency package."""


class OriginalUnavailable(PatcherError):
    """Raised when the package history does not hold the target file."""


class RestoreFailed(PatcherError):
    """Raised when reinstalling a package did not bring the target back."""


class NoDifferences(PatcherError):
    """Raised when the pristine and modified contents are identical."""

    def __init__(self, message: str = "No differences found between files.") -> None:
        super().__init__(
            message,
            hint=(
                "The file may not have been modified, or restoring the original "
                "overwrote your changes."
            ),
        )


class DiffFailed(PatcherError):
    """Raised when the diff tool exits with trouble rather than a result."""


class WriteFailure(PatcherError):
    """Raised when a patch file (or its directory) cannot be written."""


__all__ = [
    "ConfigError",
    "DiffFailed",
    "MissingInput",
    "NoDifferences",
    "NotVersionControlled",
    "OriginalUnavailable",
    "PatchRootMissing",
    "PatcherError",
    "PathNotRecognized",
    "RestoreFailed",
    "WriteFailure",
]
