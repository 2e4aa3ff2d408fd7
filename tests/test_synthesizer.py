from __future__ import annotations

from pathlib import Path

import pytest

from vendorpatch.creation import synthesizer as synthesizer_module
from vendorpatch.creation.synthesizer import (
    canonicalise_headers,
    normalise_patch_name,
    synthesize,
    write_patch,
)
from vendorpatch.errors import DiffFailed, MissingInput, NoDifferences, WriteFailure

RELATIVE = "vendor/acme/widget/src/File.txt"


def test_synthesize_emits_canonical_headers() -> None:
    diff = synthesize("A\nB\n", "A\nC\n", RELATIVE)

    lines = diff.split(b"\n")
    assert lines[0] == f"--- a/{RELATIVE}".encode()
    assert lines[1] == f"+++ b/{RELATIVE}".encode()
    assert b"-B" in lines
    assert b"+C" in lines
    assert b"vendorpatch-diff-" not in diff


def test_synthesize_accepts_bytes() -> None:
    diff = synthesize(b"A\nB\n", b"A\nB\nD\n", RELATIVE)

    assert b"+D" in diff.split(b"\n")


def test_synthesize_keeps_non_utf8_content_intact() -> None:
    diff = synthesize(b"caf\xe9\nold\n", b"caf\xe9\nnew\n", RELATIVE)

    lines = diff.split(b"\n")
    assert b" caf\xe9" in lines
    assert b"+new" in lines
    assert b"\xef\xbf\xbd" not in diff


def test_synthesize_identical_content_has_no_differences() -> None:
    with pytest.raises(NoDifferences) as excinfo:
        synthesize("A\nB\n", "A\nB\n", RELATIVE)

    assert excinfo.value.hint


def test_synthesize_reports_missing_diff_tool() -> None:
    with pytest.raises(DiffFailed):
        synthesize("A\n", "B\n", RELATIVE, diff_command=("definitely-not-a-diff-tool",))


def test_synthesize_removes_scratch_files(scratch_dir: Path) -> None:
    synthesize("A\n", "B\n", RELATIVE)
    with pytest.raises(NoDifferences):
        synthesize("A\n", "A\n", RELATIVE)
    with pytest.raises(DiffFailed):
        synthesize("A\n", "B\n", RELATIVE, diff_command=("definitely-not-a-diff-tool",))

    assert list(scratch_dir.iterdir()) == []


def test_canonicalise_headers_rewrites_only_first_two_lines() -> None:
    raw = (
        b"--- /tmp/original\t2024-01-01 00:00:00\n"
        b"+++ /tmp/modified\t2024-01-01 00:00:01\n"
        b"@@ -1 +1 @@\n"
        b"---- removed dashes\n"
        b"++++ added pluses\n"
    )

    result = canonicalise_headers(raw, "vendor/a/b/c.txt").split(b"\n")

    assert result[:2] == [b"--- a/vendor/a/b/c.txt", b"+++ b/vendor/a/b/c.txt"]
    assert result[3] == b"---- removed dashes"
    assert result[4] == b"++++ added pluses"


def test_canonicalise_headers_leaves_foreign_preamble() -> None:
    raw = b"Only in /tmp: something\n"

    assert canonicalise_headers(raw, "x") == raw


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("fix-price", "fix-price.patch"),
        ("fix-price.patch", "fix-price.patch"),
        ("  acme/cart-price-fix ", "acme/cart-price-fix.patch"),
        ("/acme/./fix", "acme/fix.patch"),
        ("acme\\fix", "acme/fix.patch"),
    ],
)
def test_normalise_patch_name(raw: str, expected: str) -> None:
    assert normalise_patch_name(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "../outside", "acme/../../x"])
def test_normalise_patch_name_rejects_bad_names(raw: str) -> None:
    with pytest.raises(MissingInput):
        normalise_patch_name(raw)


def test_write_patch_creates_subdirectories(tmp_path: Path) -> None:
    patches_dir = tmp_path / "patches"
    patches_dir.mkdir()

    target = write_patch(patches_dir, "acme/nested/fix", b"--- a/x\n+++ b/x\n")

    assert target == patches_dir / "acme" / "nested" / "fix.patch"
    assert target.read_bytes() == b"--- a/x\n+++ b/x\n"
    assert sorted(path.name for path in target.parent.iterdir()) == ["fix.patch"]


def test_write_patch_writes_bytes_verbatim(tmp_path: Path) -> None:
    target = write_patch(tmp_path, "latin", b" caf\xe9\r\n-old\n+new\n")

    assert target.read_bytes() == b" caf\xe9\r\n-old\n+new\n"


def test_write_patch_replaces_existing_file(tmp_path: Path) -> None:
    write_patch(tmp_path, "fix", b"old\n")

    target = write_patch(tmp_path, "fix.patch", b"new\n")

    assert target.read_bytes() == b"new\n"


def test_write_patch_reports_directory_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "patches"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(WriteFailure):
        write_patch(blocker, "acme/fix", b"diff\n")


def test_write_patch_failed_move_leaves_no_temporary_sibling(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def refuse(src: str, dst: str) -> None:
        raise PermissionError(13, "Permission denied", dst)

    monkeypatch.setattr(synthesizer_module.os, "replace", refuse)

    with pytest.raises(WriteFailure):
        write_patch(tmp_path, "acme/fix", b"diff\n")

    assert list((tmp_path / "acme").iterdir()) == []
