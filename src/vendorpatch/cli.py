"""CLI commands for applying and creating dependency patches."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from .config import DEFAULT_CONFIG_NAME, PatcherConfig, load_config
from .creation.workflow import PatchCreator
from .errors import PatcherError
from .lifecycle import HostEventAdapter, PatcherLifecycle, UnknownHostEvent
from .metadata import DistributionMetadata
from .output import ReportWriter
from .prompts import Prompter
from .runner import locate_patches

APP_HELP = "Apply and create patches for installed dependencies."

app = typer.Typer(help=APP_HELP, no_args_is_help=True)


@dataclass(slots=True)
class CliState:
    """Options shared by every command."""

    root: Path
    config: PatcherConfig
    color: bool

    def sink(self) -> ReportWriter:
        return ReportWriter(color=self.color)

    def lifecycle(self) -> PatcherLifecycle:
        return PatcherLifecycle(
            self.root,
            config=self.config,
            metadata=DistributionMetadata(display_name=self.config.display_name),
            sink_factory=self.sink,
        )


def _fail(error: PatcherError) -> typer.Exit:
    """Report ``error`` on stderr and return the matching exit."""
    typer.echo(typer.style(str(error), fg=typer.colors.RED), err=True)
    if error.hint:
        typer.echo(typer.style(error.hint, fg=typer.colors.YELLOW), err=True)
    return typer.Exit(code=error.exit_code)


def _state(ctx: typer.Context) -> CliState:
    state = ctx.obj
    if not isinstance(state, CliState):
        raise typer.BadParameter("CLI state was not initialised.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    project_root: Path = typer.Option(
        Path("."),
        "--project-root",
        "-r",
        help="Project root containing the patches and dependency directories.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Path to the configuration file (defaults to <project-root>/{DEFAULT_CONFIG_NAME}).",
    ),
    color: bool = typer.Option(True, "--color/--no-color", help="Style report output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Apply and create patches for installed dependencies."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    root = project_root.resolve()
    try:
        config_data = load_config(config, root=root)
    except PatcherError as error:
        raise _fail(error)
    ctx.obj = CliState(root=root, config=config_data, color=color)


@app.command()
def apply(
    ctx: typer.Context,
    dev: bool = typer.Option(
        True,
        "--dev/--no-dev",
        help="Include development-only patches (*.patch.dev).",
    ),
) -> None:
    """Revert and re-apply every patch in the patches directory."""
    state = _state(ctx)
    exit_code = state.lifecycle().on_install_or_update(dev)
    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command()
def hook(
    ctx: typer.Context,
    event: str = typer.Argument(..., help="Lifecycle event name, e.g. post-install-cmd."),
    dev: bool = typer.Option(
        True,
        "--dev/--no-dev",
        help="Development mode flag reported by the dependency manager.",
    ),
) -> None:
    """Entry point for dependency-manager install/update events."""
    state = _state(ctx)
    adapter = HostEventAdapter(state.lifecycle())
    try:
        exit_code = adapter.dispatch(event, dev_mode=dev)
    except UnknownHostEvent as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=2)
    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command(name="list")
def list_patches(
    ctx: typer.Context,
    dev: bool = typer.Option(True, "--dev/--no-dev", help="Include development-only patches."),
) -> None:
    """Show the patches an apply run would use, in application order."""
    state = _state(ctx)
    try:
        patches = locate_patches(state.root, state.config, dev_mode=dev)
    except PatcherError as error:
        typer.echo(str(error))
        return

    if not patches:
        typer.echo("No patches to apply.")
        return

    current_group: str | None = None
    for patch in patches:
        if patch.group != current_group:
            current_group = patch.group
            typer.echo(current_group)
        suffix = " (dev)" if patch.dev else ""
        typer.echo(f"  - {patch.display_name}{suffix}")
    typer.echo(f"{len(patches)} patch(es).")


@app.command()
def create(
    ctx: typer.Context,
    file: Optional[str] = typer.Option(
        None,
        "--file",
        "-f",
        help="Modified dependency file, relative to the project root.",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Patch name, optionally with subdirectories (e.g. acme/fix-price).",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite an existing patch without asking."),
) -> None:
    """Create a new patch from a modified dependency file."""
    state = _state(ctx)
    creator = PatchCreator(state.root, state.config)
    prompter = Prompter()
    dependency_dir = state.config.dependency_dir

    try:
        creator.check_preconditions()
        typer.echo(typer.style("Creating a new patch from modified files...", fg=typer.colors.GREEN))
        target = file or prompter.ask(
            "Enter the file path (relative to project root, "
            f"e.g., {dependency_dir}/acme/widget/src/Price.php)"
        )
        typer.echo(typer.style("Extracting original file from package...", fg=typer.colors.YELLOW))
        draft = creator.prepare(target)

        patch_name = name or prompter.ask(
            "Enter patch name (e.g., fix-price-calculation or acme/price-fix)"
        )
        destination = creator.target_for(patch_name)
        if destination.exists() and not yes:
            if not prompter.confirm(f"Patch {destination.name} already exists. Overwrite?", default=False):
                typer.echo("Aborted; existing patch left unchanged.", err=True)
                raise typer.Exit(code=1)
        created = creator.write(draft, patch_name)
    except PatcherError as error:
        raise _fail(error)

    typer.echo(typer.style("✓ Patch created successfully!", fg=typer.colors.GREEN))
    typer.echo(f"Location: {created.location(state.root)}")
    typer.echo("The patch will be applied on the next install or update.")


if __name__ == "__main__":
    app()
