"""
Resume LaTeX Compiler CLI

Compiles folders of LaTeX sources to PDF inside a Docker image, rebuilds them
on change, and removes build artifacts.

Commands:
    init  - Build the Docker image
    build - Compile one folder, or every folder with a .tex file
    watch - Build, then rebuild whenever a .tex file changes
    clean - Remove build artifacts (.aux, .log, .pdf, ...)
    help  - Show usage

Examples:\n

    cli init                      # Build Docker image

    cli build                     # Build all folders

    cli build resume_1pg          # Build resume_1pg only

    cli watch resume_2pg          # Watch resume_2pg for changes

    cli clean                     # Clean all build artifacts
"""

from pathlib import Path
from typing import Callable, List, Optional

import click
import typer
from typer.core import TyperGroup
from typing_extensions import Annotated

from texdock.config import TexdockConfig, load_config
from texdock.contexts.rendering import Compiler, build_image
from texdock.contexts.watching import Watcher, select_provider
from texdock.contexts.workspace import (
    clean_folder,
    find_tex_folders,
    is_all_target,
    resolve_folder,
)
from texdock.exceptions import TexdockError
from texdock.utils.logger import setup_logger

WATCH_NOTE = "Note: 'watch' needs fswatch (macOS) or inotifywait (Linux)."


class DispatchGroup(TyperGroup):
    """Command group that exits with status 1 (not click's 2) on unknown commands."""

    def resolve_command(self, ctx: click.Context, args: List[str]):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError:
            name = args[0] if args else ""
            typer.secho(f"Unknown command: {name}\n", fg=typer.colors.RED, err=True)
            typer.echo(ctx.get_help())
            ctx.exit(1)


app = typer.Typer(
    cls=DispatchGroup,
    help="Compile LaTeX folders to PDF inside a Docker image.",
    epilog=WATCH_NOTE,
    add_completion=False,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

TargetArgument = Annotated[
    Optional[str],
    typer.Argument(
        help="Folder to act on, relative to the project root, or 'all' (default: all)",
        show_default=False,
    ),
]


def _fail(message) -> None:
    """Print an error in red and exit with status 1."""
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def display_path(path: Path, project_root: Path) -> str:
    """Return path relative to the project root for cleaner display."""
    try:
        return str(path.relative_to(project_root)) or "."
    except ValueError:
        return str(path)


def resolve_targets(config: TexdockConfig, target: Optional[str]) -> List[Path]:
    """
    Turn a [path|all] argument into the folders to act on.

    Exits with status 1 when nothing is discovered or the path escapes the
    project root. Runs before any external process is spawned.
    """
    if is_all_target(target):
        folders = find_tex_folders(
            config.project_root,
            source_suffix=config.source_suffix,
            max_depth=config.search_depth,
            ignored_dirs=config.ignored_dirs,
        )
        if not folders:
            _fail(f"No folders with {config.source_suffix} files found")
        return folders

    try:
        return [resolve_folder(target, config.project_root)]
    except ValueError as e:
        _fail(e)


def run_batch(
    folders: List[Path], action: Callable, config: TexdockConfig, verb: str, batch: bool = True
) -> int:
    """
    Apply an action to each folder, continuing past failures.

    Args:
        folders: Folders to process
        action: Callable returning a result with a `success` attribute
        config: Project configuration (for display paths)
        verb: Past-tense label used in the summary (e.g. "built")
        batch: Print the summary (set for "all" targets, even when one folder matched)

    Returns:
        Number of folders that failed
    """
    results = [action(folder) for folder in folders]
    failed = [result for result in results if not result.success]

    if batch:
        typer.echo(f"\n{'=' * 60}")
        typer.echo(f"Summary: {len(results) - len(failed)} {verb}, {len(failed)} failed")
        for result in failed:
            typer.secho(
                f"  ✗ {display_path(result.folder, config.project_root)}", fg=typer.colors.RED
            )
        typer.echo(f"{'=' * 60}")

    return len(failed)


@app.callback()
def main(
    ctx: typer.Context,
    root: Annotated[
        Optional[Path],
        typer.Option(
            "--root",
            "-r",
            envvar="TEXDOCK_PROJECT_ROOT",
            help="Project root; folder arguments must stay inside it (default: current directory)",
            file_okay=False,
        ),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="YAML config file (default: <root>/texdock.yaml if present)",
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug messages"),
    ] = False,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Also write a debug log file to this directory"),
    ] = None,
):
    """Compile LaTeX folders to PDF inside a Docker image."""
    if ctx.invoked_subcommand is None:
        typer.secho("Unknown command: \n", fg=typer.colors.RED, err=True)
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    if ctx.invoked_subcommand == "help":
        return

    try:
        config = load_config(root or Path.cwd(), config_file)
    except TexdockError as e:
        _fail(e)

    if log_dir is not None:
        config.log_dir = log_dir.expanduser().resolve()

    setup_logger(
        log_dir=config.log_dir,
        verbose=verbose,
        extra_provenance={
            "Project root": config.project_root,
            "Image": config.image,
            "Runtime": config.runtime,
        },
    )
    ctx.obj = config


@app.command("init")
def init_command(ctx: typer.Context):
    """
    Build the Docker image used for compilation.

    Uses the configured Dockerfile, else <root>/Dockerfile, else the one
    shipped with texdock.
    """
    config: TexdockConfig = ctx.obj

    try:
        built = build_image(config)
    except (TexdockError, FileNotFoundError) as e:
        _fail(e)

    raise typer.Exit(code=0 if built else 1)


@app.command("build")
def build_command(ctx: typer.Context, target: TargetArgument = None):
    """
    Build LaTeX files in the given folder (default: all).

    Examples:\n

        $ cli build                   # Build every folder with a .tex file

        $ cli build resume_1pg        # Build resume_1pg only
    """
    config: TexdockConfig = ctx.obj
    folders = resolve_targets(config, target)

    if is_all_target(target):
        typer.secho(f"Building all folders with {config.source_suffix} files...", bold=True)

    compiler = Compiler(config)
    failures = run_batch(
        folders, compiler.compile_folder, config, "built", batch=is_all_target(target)
    )
    raise typer.Exit(code=1 if failures else 0)


@app.command("watch")
def watch_command(ctx: typer.Context, target: TargetArgument = None):
    """
    Build, then rebuild automatically on changes (default: all).

    Needs fswatch (macOS) or inotifywait (Linux).

    Examples:\n

        $ cli watch                   # Watch the whole project

        $ cli watch resume_2pg        # Watch resume_2pg only
    """
    config: TexdockConfig = ctx.obj
    folders = resolve_targets(config, target)

    try:
        provider = select_provider(config)
    except TexdockError as e:
        _fail(e)

    compiler = Compiler(config)

    watcher = Watcher(config, compiler, provider)
    try:
        typer.secho("Building before watching...", bold=True)
        run_batch(
            folders, compiler.compile_folder, config, "built", batch=is_all_target(target)
        )
        watcher.watch(None if is_all_target(target) else folders[0])
    except TexdockError as e:
        _fail(e)
    except KeyboardInterrupt:
        typer.echo("\nStopped watching")

    raise typer.Exit(code=0)


@app.command("clean")
def clean_command(ctx: typer.Context, target: TargetArgument = None):
    """
    Remove build artifacts (.aux, .log, .pdf, etc.) (default: all).

    Examples:\n

        $ cli clean                   # Clean every folder with a .tex file

        $ cli clean resume_1pg        # Clean resume_1pg only
    """
    config: TexdockConfig = ctx.obj
    folders = resolve_targets(config, target)

    if is_all_target(target):
        typer.secho(f"Cleaning all folders with {config.source_suffix} files...", bold=True)

    def clean(folder: Path):
        return clean_folder(folder, config.artifact_extensions)

    failures = run_batch(folders, clean, config, "cleaned", batch=is_all_target(target))
    raise typer.Exit(code=1 if failures else 0)


@app.command("help")
def help_command(ctx: typer.Context):
    """Show this help message."""
    typer.echo(ctx.parent.get_help())


if __name__ == "__main__":
    app()
