"""Apply run wiring: locate, revert/apply, aggregate."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List

from .config import PatcherConfig
from .errors import PatchRootMissing
from .patching.applier import PatchApplier, PatchOutcome
from .patching.locator import PatchFile, discover
from .patching.report import ApplySummary, GroupedResults, aggregate, summarize

LOGGER = logging.getLogger(__name__)


class ApplyStatus(str, Enum):
    """How an apply run ended."""

    ROOT_MISSING = "ROOT_MISSING"
    NO_MATCHES = "NO_MATCHES"
    APPLIED = "APPLIED"


@dataclass(slots=True)
class ApplyRun:
    """Everything an apply run produced."""

    status: ApplyStatus
    patches_dir: Path
    patches: List[PatchFile] = field(default_factory=list)
    outcomes: Dict[PatchFile, PatchOutcome] = field(default_factory=dict)
    results: GroupedResults = field(default_factory=GroupedResults)

    @property
    def summary(self) -> ApplySummary:
        return summarize(self.results)

    @property
    def exit_code(self) -> int:
        return self.summary.exit_code


def locate_patches(root: Path, config: PatcherConfig, *, dev_mode: bool) -> List[PatchFile]:
    """Discover eligible patches below ``root`` using ``config`` suffixes."""
    return discover(
        config.patches_path(root),
        dev_mode,
        patch_suffix=config.patch_suffix,
        dev_suffix=config.dev_patch_suffix,
    )


def run_apply(
    root: Path,
    *,
    dev_mode: bool,
    config: PatcherConfig | None = None,
    applier: PatchApplier | None = None,
) -> ApplyRun:
    """Apply every eligible patch to ``root`` and aggregate the outcomes."""
    config = config or PatcherConfig()
    root = Path(root).resolve()
    patches_dir = config.patches_path(root)

    try:
        patches = locate_patches(root, config, dev_mode=dev_mode)
    except PatchRootMissing:
        LOGGER.info("No patches directory at %s", patches_dir)
        return ApplyRun(status=ApplyStatus.ROOT_MISSING, patches_dir=patches_dir)

    if not patches:
        return ApplyRun(status=ApplyStatus.NO_MATCHES, patches_dir=patches_dir)

    LOGGER.info("Applying %d patch(es) from %s (dev mode: %s)", len(patches), patches_dir, dev_mode)
    applier = applier or PatchApplier.from_config(root, config)
    outcomes = applier.apply(patches)
    return ApplyRun(
        status=ApplyStatus.APPLIED,
        patches_dir=patches_dir,
        patches=patches,
        outcomes=outcomes,
        results=aggregate(outcomes),
    )


__all__ = ["ApplyRun", "ApplyStatus", "locate_patches", "run_apply"]
