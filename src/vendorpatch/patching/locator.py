"""Discovery and deterministic ordering of patch files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, List

from ..errors import PatchRootMissing

ROOT_GROUP = "root"
PATCH_SUFFIX = ".patch"
DEV_PATCH_SUFFIX = ".patch.dev"


@dataclass(frozen=True, slots=True)
class PatchFile:
    """A patch discovered under the patch root."""

    path: Path
    relative: str
    dev: bool = False

    @property
    def group(self) -> str:
        """First segment of ``relative``, or ``"root"`` for top-level files."""
        head, separator, _ = self.relative.partition("/")
        return head if separator else ROOT_GROUP

    @property
    def display_name(self) -> str:
        """``relative`` with the group prefix removed."""
        _, separator, tail = self.relative.partition("/")
        return tail if separator else self.relative

    def __str__(self) -> str:
        return self.relative


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _walk_files(root: Path) -> List[Path]:
    """Return every regular file under ``root``, following symlinked dirs.

    A directory is pruned only when it resolves to one of its own
    ancestors, so separate aliases of the same directory are all visited.
    """
    found: List[Path] = []
    chains: Dict[str, FrozenSet[str]] = {str(root): frozenset({os.path.realpath(root)})}
    for current, dirnames, filenames in os.walk(root, followlinks=True):
        ancestors = chains.pop(current)
        kept: List[str] = []
        for name in dirnames:
            if _is_hidden(name):
                continue
            child = os.path.join(current, name)
            real = os.path.realpath(child)
            if real in ancestors:
                continue
            chains[child] = ancestors | {real}
            kept.append(name)
        dirnames[:] = kept
        for name in filenames:
            if _is_hidden(name):
                continue
            candidate = Path(current) / name
            if candidate.is_file():
                found.append(candidate)
    return found


def _matches(name: str, include_dev: bool, patch_suffix: str, dev_suffix: str) -> bool | None:
    """Return the dev flag for eligible names and ``None`` for the rest."""
    if name.endswith(patch_suffix):
        return False
    if include_dev and name.endswith(dev_suffix):
        return True
    return None


def discover(
    root_dir: Path | str,
    include_dev: bool = False,
    *,
    patch_suffix: str = PATCH_SUFFIX,
    dev_suffix: str = DEV_PATCH_SUFFIX,
) -> List[PatchFile]:
    """Return the eligible patches under ``root_dir`` in byte-wise path order.

    Raises :class:`PatchRootMissing` when ``root_dir`` is absent; an existing
    root without eligible files yields an empty list.
    """

    root = Path(root_dir).absolute()
    if not root.is_dir():
        raise PatchRootMissing(root)

    patches: List[PatchFile] = []
    for candidate in _walk_files(root):
        dev = _matches(candidate.name, include_dev, patch_suffix, dev_suffix)
        if dev is None:
            continue
        relative = candidate.relative_to(root).as_posix()
        patches.append(PatchFile(path=candidate, relative=relative, dev=dev))

    patches.sort(key=lambda item: os.fsencode(item.path))
    return patches


__all__ = ["DEV_PATCH_SUFFIX", "PATCH_SUFFIX", "PatchFile", "ROOT_GROUP", "discover"]
