"""Deterministic, idempotent patching of installed dependencies."""

from .config import PatcherConfig, load_config
from .creation import PatchCreator, synthesize
from .errors import PatcherError
from .lifecycle import HostEventAdapter, PatcherLifecycle
from .patching import PatchApplier, discover
from .runner import ApplyRun, ApplyStatus, run_apply

__all__ = [
    "ApplyRun",
    "ApplyStatus",
    "HostEventAdapter",
    "PatchApplier",
    "PatchCreator",
    "PatcherConfig",
    "PatcherError",
    "PatcherLifecycle",
    "discover",
    "load_config",
    "run_apply",
    "synthesize",
]
