"""Apply pipeline: discovery, revert-then-apply, and reporting."""

from .applier import ErrorClassifier, PatchApplier, PatchOutcome
from .locator import DEV_PATCH_SUFFIX, PATCH_SUFFIX, ROOT_GROUP, PatchFile, discover
from .report import (
    ApplySummary,
    GroupedResults,
    aggregate,
    render_no_matches,
    render_no_patches,
    render_report,
    summarize,
)

__all__ = [
    "ApplySummary",
    "DEV_PATCH_SUFFIX",
    "ErrorClassifier",
    "GroupedResults",
    "PATCH_SUFFIX",
    "PatchApplier",
    "PatchFile",
    "PatchOutcome",
    "ROOT_GROUP",
    "aggregate",
    "discover",
    "render_no_matches",
    "render_no_patches",
    "render_report",
    "summarize",
]
