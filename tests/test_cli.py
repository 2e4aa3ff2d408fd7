from __future__ import annotations

from typer.testing import CliRunner

from conftest import TARGET, Project, unified_diff
from vendorpatch.cli import app

BETA_PATCH = unified_diff(
    TARGET,
    """
    @@ -1,3 +1,3 @@
     alpha
    -beta
    +BETA
     gamma
    """,
)
BROKEN_PATCH = unified_diff(
    "vendor/globex/tools/lib/Tool.txt",
    """
    @@ -7,2 +7,2 @@
     nowhere
    -to be
    +found
    """,
)


def _invoke(project: Project, *args: str, input: str | None = None):
    runner = CliRunner()
    return runner.invoke(
        app,
        ["--project-root", str(project.root), "--no-color", *args],
        input=input,
        catch_exceptions=False,
    )


def test_apply_without_patches_directory_exits_zero(project: Project) -> None:
    project.patches_dir.rmdir()

    result = _invoke(project, "apply")

    assert result.exit_code == 0, result.output
    assert "Patches directory not found" in result.output
    assert project.read(TARGET) == "alpha\nbeta\ngamma\n"


def test_apply_with_empty_patches_directory_exits_zero(project: Project) -> None:
    result = _invoke(project, "apply")

    assert result.exit_code == 0, result.output
    assert "No patch files found" in result.output


def test_apply_success(project: Project) -> None:
    project.add_patch("acme/beta.patch", BETA_PATCH)

    result = _invoke(project, "apply")

    assert result.exit_code == 0, result.output
    assert "Success: 1" in result.output
    assert "All patches applied successfully!" in result.output
    assert project.read(TARGET) == "alpha\nBETA\ngamma\n"


def test_apply_failure_exits_one(project: Project) -> None:
    project.add_patch("acme/beta.patch", BETA_PATCH)
    project.add_patch("globex/broken.patch", BROKEN_PATCH)

    result = _invoke(project, "apply")

    assert result.exit_code == 1
    assert "Total: 2 patches | Success: 1 | Failed: 1" in result.output
    assert "Failed Patches:" in result.output
    assert "broken.patch" in result.output
    assert "error" in result.output


def test_hook_honours_dev_flag(project: Project) -> None:
    project.add_patch("acme/beta.patch.dev", BETA_PATCH)

    production = _invoke(project, "hook", "post-install-cmd", "--no-dev")
    assert production.exit_code == 0, production.output
    assert project.read(TARGET) == "alpha\nbeta\ngamma\n"

    development = _invoke(project, "hook", "post-update-cmd", "--dev")
    assert development.exit_code == 0, development.output
    assert project.read(TARGET) == "alpha\nBETA\ngamma\n"


def test_hook_rejects_unknown_event(project: Project) -> None:
    result = _invoke(project, "hook", "pre-autoload-dump")

    assert result.exit_code == 2
    assert "Unsupported lifecycle event" in result.output


def test_list_groups_patches(project: Project) -> None:
    project.add_patch("acme/beta.patch", BETA_PATCH)
    project.add_patch("acme/debug.patch.dev", BETA_PATCH)
    project.add_patch("top.patch", BETA_PATCH)

    result = _invoke(project, "list", "--no-dev")

    assert result.exit_code == 0, result.output
    assert "acme" in result.output
    assert "  - beta.patch" in result.output
    assert "debug.patch.dev" not in result.output
    assert "  - top.patch" in result.output
    assert "2 patch(es)." in result.output


def test_create_with_options(git_project: Project) -> None:
    git_project.write(TARGET, "alpha\nbeta!\ngamma\n")

    result = _invoke(git_project, "create", "--file", TARGET, "--name", "acme/beta-bang")

    assert result.exit_code == 0, result.output
    assert "Patch created successfully!" in result.output
    assert "patches/acme/beta-bang.patch" in result.output
    patch = git_project.patches_dir / "acme" / "beta-bang.patch"
    assert patch.read_text(encoding="utf-8").startswith(f"--- a/{TARGET}\n")
    assert git_project.read(TARGET) == "alpha\nbeta!\ngamma\n"


def test_create_prompts_for_missing_values(git_project: Project) -> None:
    git_project.write(TARGET, "alpha\nbeta!\ngamma\n")

    result = _invoke(git_project, "create", input=f"{TARGET}\nprompted-fix\n")

    assert result.exit_code == 0, result.output
    assert (git_project.patches_dir / "prompted-fix.patch").exists()


def test_create_declined_overwrite_keeps_existing(git_project: Project) -> None:
    git_project.write(TARGET, "alpha\nbeta!\ngamma\n")
    existing = git_project.add_patch("fix.patch", "original patch\n")

    result = _invoke(git_project, "create", "--file", TARGET, "--name", "fix", input="n\n")

    assert result.exit_code == 1
    assert existing.read_text(encoding="utf-8") == "original patch\n"


def test_create_outside_git_fails(project: Project) -> None:
    result = _invoke(project, "create", "--file", TARGET, "--name", "fix")

    assert result.exit_code == 1
    assert "Not a git repository" in result.output


def test_create_without_changes_explains_cause(git_project: Project) -> None:
    result = _invoke(git_project, "create", "--file", TARGET, "--name", "noop")

    assert result.exit_code == 1
    assert "No differences found" in result.output
    assert "may not have been modified" in result.output


def test_invalid_config_exits_one(project: Project) -> None:
    project.write("vendorpatch.yaml", "apply: [unclosed\n")

    result = _invoke(project, "apply")

    assert result.exit_code == 1
    assert "Failed to parse config" in result.output
