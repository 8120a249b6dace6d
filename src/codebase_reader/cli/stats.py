"""Introspection commands: discovery counts and supported languages."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..engine import Engine
from ..exceptions import CodebaseReaderError
from ..logging_config import setup_logging
from . import app
from ._common import (
    CONFIG,
    EXCLUDE,
    INCLUDE,
    LOG_FILE,
    MAX_FILE_SIZE,
    QUIET,
    VERBOSE,
    console,
    resolve_config,
)


@app.command()
def stats(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the codebase directory",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    verbose: bool = VERBOSE,
    quiet: bool = QUIET,
    log_file: Optional[Path] = LOG_FILE,
    config: Optional[Path] = CONFIG,
    exclude: Optional[list[str]] = EXCLUDE,
    include: Optional[list[str]] = INCLUDE,
    max_file_size: Optional[int] = MAX_FILE_SIZE,
):
    """
    Count what a run would analyze, without parsing anything.
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        settings = resolve_config(
            config, exclude=exclude, include=include, max_file_size=max_file_size
        )
        walk = Engine(settings).walker_stats(str(path))
    except CodebaseReaderError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Files under {path}", show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total files", str(walk.total_files))
    table.add_row("Supported files", str(walk.supported_files))
    table.add_row("Excluded files", str(walk.excluded_files))
    table.add_row("Skipped directories", str(walk.directories_skipped))
    table.add_row("Errors", str(walk.errors))
    console.print(table)

    if walk.files_by_extension:
        by_ext = Table(title="By Extension")
        by_ext.add_column("Extension", style="cyan")
        by_ext.add_column("Files", justify="right")
        for ext, count in sorted(walk.files_by_extension.items()):
            by_ext.add_row(ext, str(count))
        console.print(by_ext)


@app.command()
def languages():
    """
    List supported languages and their file extensions.
    """
    engine = Engine()
    table = Table(title="Supported Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Extensions")
    for name, extensions in sorted(engine.languages().items()):
        table.add_row(name, ", ".join(sorted(extensions)))
    console.print(table)
