"""Display name and version of the patcher, loaded once per provider."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from importlib import metadata as importlib_metadata
from typing import Protocol

from .config import DEFAULT_DISPLAY_NAME

DISTRIBUTION_NAME = "vendorpatch"
UNKNOWN_VERSION = "unknown"


class MetadataProvider(Protocol):
    """Source of the title shown in report headers."""

    @property
    def name(self) -> str: ...

    @property
    def version(self) -> str: ...


def title_for(provider: MetadataProvider) -> str:
    return f"{provider.name} {provider.version}"


@dataclass(frozen=True, slots=True)
class StaticMetadata:
    """Fixed metadata, mainly for tests."""

    name: str = DEFAULT_DISPLAY_NAME
    version: str = UNKNOWN_VERSION


class DistributionMetadata:
    """Reads the installed distribution's metadata on first access."""

    def __init__(self, distribution: str = DISTRIBUTION_NAME, *, display_name: str | None = None) -> None:
        self.distribution = distribution
        self.display_name = display_name

    @cached_property
    def _version(self) -> str:
        try:
            return importlib_metadata.version(self.distribution) or UNKNOWN_VERSION
        except importlib_metadata.PackageNotFoundError:
            return UNKNOWN_VERSION

    @property
    def name(self) -> str:
        return self.display_name or DEFAULT_DISPLAY_NAME

    @property
    def version(self) -> str:
        return self._version


__all__ = [
    "DistributionMetadata",
    "MetadataProvider",
    "StaticMetadata",
    "title_for",
]
