"""Host dependency-manager lifecycle integration.

The engine only knows :class:`LifecycleListener`; :class:`HostEventAdapter`
translates the host's install/update event names into that call.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol

from .config import PatcherConfig
from .metadata import MetadataProvider, StaticMetadata, title_for
from .output import ReportWriter
from .patching.report import render_no_matches, render_no_patches, render_report
from .runner import ApplyRun, ApplyStatus, run_apply

LOGGER = logging.getLogger(__name__)

POST_INSTALL_EVENT = "post-install-cmd"
POST_UPDATE_EVENT = "post-update-cmd"
SUBSCRIBED_EVENTS = (POST_INSTALL_EVENT, POST_UPDATE_EVENT)


class LifecycleListener(Protocol):
    def on_install_or_update(self, dev_mode: bool) -> int: ...


class UnknownHostEvent(ValueError):
    """Raised when the host emits an event the patcher does not handle."""


def report_run(run: ApplyRun, sink: ReportWriter, *, title: str) -> int:
    """Render ``run`` into ``sink`` and return the process exit code."""
    if run.status is ApplyStatus.ROOT_MISSING:
        render_no_patches(sink, title=title, patches_dir=run.patches_dir)
        return 0
    if run.status is ApplyStatus.NO_MATCHES:
        render_no_matches(sink, title=title, patches_dir=run.patches_dir)
        return 0
    return render_report(run.results, sink, title=title).exit_code


class PatcherLifecycle:
    """Applies patches whenever dependencies were installed or updated."""

    def __init__(
        self,
        root: Path,
        *,
        config: PatcherConfig | None = None,
        metadata: MetadataProvider | None = None,
        sink_factory: Callable[[], ReportWriter] = ReportWriter,
    ) -> None:
        self.root = Path(root)
        self.config = config or PatcherConfig()
        self.metadata = metadata or StaticMetadata()
        self.sink_factory = sink_factory
        self.last_run: ApplyRun | None = None

    def on_install_or_update(self, dev_mode: bool) -> int:
        run = run_apply(self.root, dev_mode=dev_mode, config=self.config)
        self.last_run = run
        return report_run(run, self.sink_factory(), title=title_for(self.metadata))


class HostEventAdapter:
    """Maps host lifecycle event names onto a :class:`LifecycleListener`."""

    def __init__(self, listener: LifecycleListener, events: tuple[str, ...] = SUBSCRIBED_EVENTS) -> None:
        self.listener = listener
        self.events = events

    def dispatch(self, event: str, *, dev_mode: bool) -> int:
        name = event.strip().lower()
        if name not in self.events:
            raise UnknownHostEvent(
                f"Unsupported lifecycle event '{event}'. Expected one of: {', '.join(self.events)}."
            )
        LOGGER.debug("Dispatching %s (dev mode: %s)", name, dev_mode)
        return self.listener.on_install_or_update(dev_mode)


__all__ = [
    "HostEventAdapter",
    "LifecycleListener",
    "POST_INSTALL_EVENT",
    "POST_UPDATE_EVENT",
    "PatcherLifecycle",
    "SUBSCRIBED_EVENTS",
    "UnknownHostEvent",
    "report_run",
]
