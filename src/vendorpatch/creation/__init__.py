"""Create pipeline: pristine resolution, diff synthesis, persistence."""

from .resolver import OriginalContentResolver, PackageReference, normalise_target, parse_package_reference
from .synthesizer import DraftPatch, canonicalise_headers, normalise_patch_name, synthesize, write_patch
from .workflow import CreatedPatch, PatchCreator

__all__ = [
    "CreatedPatch",
    "DraftPatch",
    "OriginalContentResolver",
    "PackageReference",
    "PatchCreator",
    "canonicalise_headers",
    "normalise_patch_name",
    "normalise_target",
    "parse_package_reference",
    "synthesize",
    "write_patch",
]
