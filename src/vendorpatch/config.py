"""Configuration model and YAML loader for the patcher."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_CONFIG_NAME = "vendorpatch.yaml"
DEFAULT_DISPLAY_NAME = "Vendor Patcher"

DEFAULT_APPLY_OPTIONS = [
    "--whitespace=nowarn",
    "--ignore-space-change",
    "--ignore-whitespace",
]
DEFAULT_ERROR_MARKERS = ["error", "fatal"]
DEFAULT_DIFF_COMMAND = ["diff", "-u"]
DEFAULT_REINSTALL_COMMAND = [
    "composer",
    "reinstall",
    "{package}",
    "--no-scripts",
    "--no-autoloader",
    "--no-interaction",
]


class SettingsModel(BaseModel):
    """Base model that rejects unknown keys."""

    model_config = ConfigDict(extra="forbid", frozen=False)


class ApplySettings(SettingsModel):
    """Options for the revert/apply passes."""

    git_executable: str = "git"
    options: List[str] = Field(default_factory=lambda: list(DEFAULT_APPLY_OPTIONS))
    error_markers: List[str] = Field(default_factory=lambda: list(DEFAULT_ERROR_MARKERS))

    @field_validator("error_markers")
    @classmethod
    def _markers_not_blank(cls, value: List[str]) -> List[str]:
        markers = [marker for marker in value if marker]
        if not markers:
            raise ValueError("at least one non-empty error marker is required")
        return markers


class CreateSettings(SettingsModel):
    """Commands used while reconstructing pristine files."""

    diff_command: List[str] = Field(default_factory=lambda: list(DEFAULT_DIFF_COMMAND))
    reinstall_command: List[str] = Field(default_factory=lambda: list(DEFAULT_REINSTALL_COMMAND))

    @field_validator("diff_command", "reinstall_command")
    @classmethod
    def _command_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("command must contain at least the executable")
        return value


class PatcherConfig(SettingsModel):
    """Top-level settings, every field optional."""

    display_name: Optional[str] = None
    patches_dir: str = "patches"
    dependency_dir: str = "vendor"
    patch_suffix: str = ".patch"
    dev_patch_suffix: str = ".patch.dev"
    tool_timeout: Optional[float] = Field(default=None, gt=0)
    apply: ApplySettings = Field(default_factory=ApplySettings)
    create: CreateSettings = Field(default_factory=CreateSettings)

    @field_validator("dependency_dir", "patches_dir")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        cleaned = value.replace("\\", "/").strip().strip("/")
        if not cleaned:
            raise ValueError("directory must not be empty")
        return cleaned

    def patches_path(self, root: Path) -> Path:
        """Return the absolute patch root for ``root``."""
        return (Path(root) / self.patches_dir).absolute()


def load_config(config_path: Path | None = None, *, root: Path | None = None) -> PatcherConfig:
    """Load configuration from ``config_path`` or ``<root>/vendorpatch.yaml``.

    An explicit ``config_path`` must exist; the implicit project file is
    optional and defaults apply when it is absent.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = Path(root or Path.cwd()) / DEFAULT_CONFIG_NAME
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        return PatcherConfig()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config {config_path}: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")

    return config_from_mapping(data)


def config_from_mapping(data: Dict[str, Any]) -> PatcherConfig:
    """Validate an in-memory mapping into :class:`PatcherConfig`."""
    try:
        return PatcherConfig.model_validate(data)
    except ValidationError as error:
        raise ConfigError(f"Invalid configuration: {error}") from error


__all__ = [
    "ApplySettings",
    "CreateSettings",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_DISPLAY_NAME",
    "PatcherConfig",
    "config_from_mapping",
    "load_config",
]
