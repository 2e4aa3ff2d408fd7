"""Revert-then-apply execution of an ordered patch set."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from ..config import DEFAULT_APPLY_OPTIONS, DEFAULT_ERROR_MARKERS, PatcherConfig
from ..tools.process import CommandTimeout, combined_output, run_command
from .locator import PatchFile

LOGGER = logging.getLogger(__name__)
TELEMETRY_LOGGER = logging.getLogger("vendorpatch.telemetry")


@dataclass(slots=True)
class PatchOutcome:
    """Result of the apply pass for a single patch."""

    patch: PatchFile
    ok: bool
    output: str = ""

    @property
    def relative(self) -> str:
        return self.patch.relative

    @property
    def group(self) -> str:
        return self.patch.group

    @property
    def detail_lines(self) -> List[str]:
        """Non-blank diagnostic lines, stripped."""
        return [line.strip() for line in self.output.strip().splitlines() if line.strip()]


@dataclass(frozen=True, slots=True)
class ErrorClassifier:
    """Decides whether ``git apply`` output describes a failure.

    The apply tool emits free text, so failure is a substring match against
    ``markers``.  Output without any marker (including informational
    warnings) counts as success.
    """

    markers: Tuple[str, ...] = tuple(DEFAULT_ERROR_MARKERS)

    def is_failure(self, output: str) -> bool:
        if not output:
            return False
        return any(marker in output for marker in self.markers)

    def __call__(self, output: str) -> bool:
        return self.is_failure(output)


def _serialise_event_value(value: Any) -> Any:
    """Convert telemetry payload values into JSON-friendly representations."""
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (list, tuple, set)):
        return [_serialise_event_value(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _serialise_event_value(child) for key, child in value.items()}
    return str(value)


def _emit_patch_event(event: str, **fields: Any) -> None:
    """Log structured telemetry events for each patch operation."""
    payload = {"event": event, "timestamp": datetime.now(timezone.utc).isoformat()}
    for key, value in fields.items():
        payload[key] = _serialise_event_value(value)
    TELEMETRY_LOGGER.info(json.dumps(payload, separators=(",", ":"), ensure_ascii=True))


@dataclass(slots=True)
class PatchApplier:
    """Applies patches to ``working_tree_root`` with ``git apply``.

    Every run first reverts the whole set in reverse order (outcomes
    ignored) and then applies it in order, so repeated runs converge on the
    same tree.
    """

    working_tree_root: Path
    options: Tuple[str, ...] = tuple(DEFAULT_APPLY_OPTIONS)
    classifier: ErrorClassifier = field(default_factory=ErrorClassifier)
    timeout: float | None = None
    git_executable: str = "git"
    revert_order: List[PatchFile] = field(default_factory=list, init=False)
    apply_order: List[PatchFile] = field(default_factory=list, init=False)

    @classmethod
    def from_config(cls, root: Path, config: PatcherConfig) -> "PatchApplier":
        return cls(
            working_tree_root=Path(root),
            options=tuple(config.apply.options),
            classifier=ErrorClassifier(markers=tuple(config.apply.error_markers)),
            timeout=config.tool_timeout,
            git_executable=config.apply.git_executable,
        )

    def _command(self, patch: PatchFile, *, reverse: bool) -> List[str]:
        command = [self.git_executable, "apply"]
        if reverse:
            command.append("--reverse")
        command.extend(self.options)
        command.append(str(patch.path))
        return command

    def revert(self, patch: PatchFile) -> None:
        """Attempt to undo ``patch``; failures are expected and ignored."""
        self.revert_order.append(patch)
        try:
            result = run_command(
                self._command(patch, reverse=True),
                cwd=self.working_tree_root,
                timeout=self.timeout,
            )
        except (CommandTimeout, OSError) as error:
            LOGGER.debug("Revert of %s did not run: %s", patch.relative, error)
            return
        _emit_patch_event("patch_reverted", patch=patch.relative, returncode=result.returncode)

    def apply_one(self, patch: PatchFile) -> PatchOutcome:
        """Apply ``patch`` and classify the tool output."""
        self.apply_order.append(patch)
        try:
            result = run_command(
                self._command(patch, reverse=False),
                cwd=self.working_tree_root,
                timeout=self.timeout,
            )
        except CommandTimeout as error:
            output = f"error: {error}"
        except OSError as error:
            output = f"error: unable to run {self.git_executable}: {error}"
        else:
            output = combined_output(result)

        ok = not self.classifier(output)
        _emit_patch_event(
            "patch_applied" if ok else "patch_failed",
            patch=patch.relative,
            group=patch.group,
            output=output,
        )
        return PatchOutcome(patch=patch, ok=ok, output=output)

    def apply(self, patches: Sequence[PatchFile]) -> Dict[PatchFile, PatchOutcome]:
        """Run the revert pass then the apply pass over ``patches``."""
        ordered = list(patches)
        self.revert_order.clear()
        self.apply_order.clear()

        for patch in reversed(ordered):
            self.revert(patch)

        outcomes: Dict[PatchFile, PatchOutcome] = {}
        for patch in ordered:
            outcome = self.apply_one(patch)
            outcomes[patch] = outcome
            if not outcome.ok:
                LOGGER.warning("Patch %s failed to apply", patch.relative)
        return outcomes


__all__ = ["ErrorClassifier", "PatchApplier", "PatchOutcome"]
