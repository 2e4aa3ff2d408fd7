"""Grouping, counting, and rendering of apply outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from ..output import ReportWriter
from .applier import PatchOutcome


@dataclass(slots=True)
class GroupedResults:
    """Outcomes split into success and failure mappings keyed by group."""

    succeeded: Dict[str, List[PatchOutcome]] = field(default_factory=dict)
    failed: Dict[str, List[PatchOutcome]] = field(default_factory=dict)

    def add(self, outcome: PatchOutcome) -> None:
        target = self.succeeded if outcome.ok else self.failed
        target.setdefault(outcome.group, []).append(outcome)

    def sorted_succeeded(self) -> List[tuple[str, List[PatchOutcome]]]:
        return sorted(self.succeeded.items())

    def sorted_failed(self) -> List[tuple[str, List[PatchOutcome]]]:
        return sorted(self.failed.items())

    @property
    def success_count(self) -> int:
        return sum(len(entries) for entries in self.succeeded.values())

    @property
    def failure_count(self) -> int:
        return sum(len(entries) for entries in self.failed.values())


@dataclass(frozen=True, slots=True)
class ApplySummary:
    """Totals derived from :class:`GroupedResults`."""

    total: int
    succeeded: int
    failed: int
    overall_failed: bool

    @property
    def exit_code(self) -> int:
        return 1 if self.overall_failed else 0


def aggregate(outcomes: Mapping[object, PatchOutcome] | Iterable[PatchOutcome]) -> GroupedResults:
    """Group ``outcomes`` by patch group, keeping per-group order."""
    values = outcomes.values() if isinstance(outcomes, Mapping) else outcomes
    results = GroupedResults()
    for outcome in values:
        results.add(outcome)
    return results


def summarize(results: GroupedResults) -> ApplySummary:
    succeeded = results.success_count
    failed = results.failure_count
    return ApplySummary(
        total=succeeded + failed,
        succeeded=succeeded,
        failed=failed,
        overall_failed=bool(results.failed),
    )


def render_report(results: GroupedResults, sink: ReportWriter, *, title: str) -> ApplySummary:
    """Render the grouped outcomes into ``sink`` and flush it."""
    summary = summarize(results)

    sink.header(title, "warning" if summary.overall_failed else "success")
    sink.stats(summary.total, summary.succeeded, summary.failed)

    if results.succeeded:
        sink.section_title("Successfully Applied:", "success")
        for group, entries in results.sorted_succeeded():
            sink.group_header(group)
            for outcome in entries:
                sink.list_item(outcome.patch.display_name, "success")

    if summary.overall_failed:
        sink.section_title("Failed Patches:", "error")
        for group, entries in results.sorted_failed():
            sink.group_header(group)
            for outcome in entries:
                sink.list_item(outcome.patch.display_name, "error")
                for line in outcome.detail_lines:
                    sink.error_detail(line)
        sink.blank().separator()
        sink.error("Patch application failed - please review errors above")
        sink.separator()
    else:
        sink.blank()
        sink.success("All patches applied successfully!")
        sink.separator()

    sink.render()
    return summary


def render_no_patches(sink: ReportWriter, *, title: str, patches_dir: Path) -> None:
    sink.header(title, "info")
    sink.info(f"Patches directory not found: {patches_dir}")
    sink.info("No patches to apply")
    sink.separator()
    sink.render()


def render_no_matches(sink: ReportWriter, *, title: str, patches_dir: Path) -> None:
    sink.header(title, "info")
    sink.info(f"No patch files found in {patches_dir}")
    sink.info("No patches to apply")
    sink.separator()
    sink.render()


__all__ = [
    "ApplySummary",
    "GroupedResults",
    "aggregate",
    "render_no_matches",
    "render_no_patches",
    "render_report",
    "summarize",
]
