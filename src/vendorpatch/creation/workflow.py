"""Patch creation: snapshot, restore the original, diff, and persist."""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ..config import PatcherConfig
from ..errors import MissingInput, NotVersionControlled, PatchRootMissing
from ..tools.vcs import GitRepository
from .resolver import OriginalContentResolver, PackageReference
from .synthesizer import DraftPatch, normalise_patch_name, synthesize, write_patch

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CreatedPatch:
    """A patch written to the patches directory."""

    path: Path
    name: str
    draft: DraftPatch

    def location(self, root: Path) -> str:
        try:
            return self.path.relative_to(Path(root).resolve()).as_posix()
        except ValueError:
            return self.path.as_posix()


class PatchCreator:
    """Builds patches from locally modified dependency files."""

    def __init__(
        self,
        root: Path,
        config: PatcherConfig | None = None,
        *,
        resolver: OriginalContentResolver | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.config = config or PatcherConfig()
        self.resolver = resolver or OriginalContentResolver.from_config(self.root, self.config)

    @property
    def patches_dir(self) -> Path:
        return self.config.patches_path(self.root)

    def check_preconditions(self) -> None:
        if not self.patches_dir.is_dir():
            raise PatchRootMissing(self.patches_dir)
        if not GitRepository.is_working_copy(self.root):
            raise NotVersionControlled(
                "Not a git repository. Patches can only be created from git repositories."
            )

    def prepare(self, target: str) -> DraftPatch:
        """Return a draft diff for ``target`` leaving the user's edit in place."""
        if not (target or "").strip():
            raise MissingInput("File path is required.")

        reference: PackageReference = self.resolver.reference(target)
        full_path = reference.target_path(self.root)
        if not full_path.is_file():
            raise MissingInput(f"File not found: {reference.target}")

        LOGGER.info("Package: %s", reference.package)
        with tempfile.TemporaryDirectory(prefix="vendorpatch-snapshot-") as snapshot_dir:
            snapshot = Path(snapshot_dir) / "modified"
            shutil.copy2(full_path, snapshot)
            modified = snapshot.read_bytes()
            try:
                original = self.resolver.resolve(reference.target)
            finally:
                full_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(snapshot, full_path)

        draft = DraftPatch(relative_path=reference.target, original=original, modified=modified)
        draft.diff = synthesize(
            draft.original,
            draft.modified,
            draft.relative_path,
            diff_command=self.config.create.diff_command,
            timeout=self.config.tool_timeout,
        )
        return draft

    def target_for(self, name: str) -> Path:
        """Return the path a patch called ``name`` would be written to."""
        return self.patches_dir / normalise_patch_name(name, suffix=self.config.patch_suffix)

    def write(self, draft: DraftPatch, name: str) -> CreatedPatch:
        path = write_patch(self.patches_dir, name, draft.diff, suffix=self.config.patch_suffix)
        return CreatedPatch(
            path=path,
            name=normalise_patch_name(name, suffix=self.config.patch_suffix),
            draft=draft,
        )

    def create(self, target: str, name: str) -> CreatedPatch:
        """Non-interactive creation from a target path and a patch name."""
        self.check_preconditions()
        normalise_patch_name(name, suffix=self.config.patch_suffix)
        draft = self.prepare(target)
        return self.write(draft, name)


__all__ = ["CreatedPatch", "PatchCreator"]
