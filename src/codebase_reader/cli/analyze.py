"""Analysis commands: whole directories and single files."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..engine import Engine
from ..exceptions import CodebaseReaderError
from ..logging_config import setup_logging
from ..metrics import EnhancedProjectAnalysis
from ..scanning import AnalysisResult
from . import app
from ._common import (
    CONFIG,
    EXCLUDE,
    INCLUDE,
    LOG_FILE,
    MAX_FILE_SIZE,
    QUIET,
    VERBOSE,
    WORKERS,
    console,
    grade_markup,
    resolve_config,
)
from .progress import AnalysisProgress

_MAX_ROWS = 10


@app.command()
def analyze(
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
    workers: Optional[int] = WORKERS,
    exclude: Optional[list[str]] = EXCLUDE,
    include: Optional[list[str]] = INCLUDE,
    max_file_size: Optional[int] = MAX_FILE_SIZE,
):
    """
    Analyze a codebase: metrics, quality grade, dependencies and cycles.

    [bold cyan]Examples:[/bold cyan]

      codebase-reader analyze /path/to/codebase

      codebase-reader analyze . --workers 8 --exclude dist --exclude build
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        settings = resolve_config(config, workers, exclude, include, max_file_size)
        engine = Engine(settings)

        if quiet:
            analysis = engine.run_directory(str(path))
        else:
            with AnalysisProgress(console) as progress:
                analysis = engine.run_directory(str(path), on_progress=progress.update)

        _output_rich(analysis, verbose=verbose)

    except CodebaseReaderError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)


@app.command()
def file(
    path: Path = typer.Argument(
        ...,
        help="Source file to analyze",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    verbose: bool = VERBOSE,
    quiet: bool = QUIET,
    log_file: Optional[Path] = LOG_FILE,
    config: Optional[Path] = CONFIG,
    max_file_size: Optional[int] = MAX_FILE_SIZE,
):
    """
    Analyze a single source file and list its functions and classes.
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    try:
        settings = resolve_config(config, max_file_size=max_file_size)
        result = Engine(settings).analyze_file(str(path))
        _output_file(result)

    except CodebaseReaderError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


# ── Rendering ──────────────────────────────────────────────────


def _relative(path: str, root: str) -> str:
    p = Path(path)
    if p.is_absolute() and p.is_relative_to(root):
        return p.relative_to(root).as_posix()
    return path


def _output_rich(analysis: EnhancedProjectAnalysis, verbose: bool = False) -> None:
    metrics = analysis.project_metrics
    score = analysis.quality_score

    console.print()
    console.print(f"[bold cyan]CODEBASE READER[/bold cyan]  [dim]{analysis.root_path}[/dim]")
    console.print(
        f"  [green]{analysis.total_files}[/green] files, "
        f"[green]{analysis.total_lines}[/green] lines "
        f"in {analysis.analysis_duration:.2f}s"
    )
    console.print()

    if analysis.total_files == 0:
        console.print("[yellow]No supported source files found[/yellow]")
        _output_failures(analysis, verbose)
        return

    summary = Table(title="Project Metrics", show_header=False, box=None)
    summary.add_column("Metric", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Quality", f"{score.overall:.1f} ({grade_markup(score.grade)})")
    summary.add_row("Total complexity", str(metrics.total_complexity))
    summary.add_row("Average complexity", f"{metrics.average_complexity:.2f}")
    summary.add_row("Max complexity", str(metrics.max_complexity))
    summary.add_row("Maintainability", f"{metrics.maintainability_index:.1f}")
    summary.add_row("Technical debt", f"{metrics.technical_debt:.1f}")
    summary.add_row("Documentation", f"{metrics.documentation_ratio:.1f}%")
    summary.add_row("Code/comment ratio", f"{metrics.code_to_comment_ratio:.2f}")
    console.print(summary)
    console.print()

    languages = Table(title="Languages")
    languages.add_column("Language", style="cyan")
    languages.add_column("Files", justify="right")
    languages.add_column("Lines", justify="right")
    languages.add_column("Functions", justify="right")
    languages.add_column("Classes", justify="right")
    languages.add_column("Avg CC", justify="right")
    languages.add_column("MI", justify="right")
    for name, stats in sorted(analysis.languages.items()):
        languages.add_row(
            name,
            str(stats.file_count),
            str(stats.line_count),
            str(stats.function_count),
            str(stats.class_count),
            f"{stats.average_complexity:.1f}",
            f"{stats.maintainability_index:.1f}",
        )
    console.print(languages)
    console.print()

    _output_hotspots(analysis, verbose)

    graph = analysis.dependency_graph
    console.print(
        f"[bold]Dependencies:[/bold] {graph.edge_count} edges, max depth {graph.max_depth}"
    )
    if graph.has_cycles:
        console.print(f"[red]{len(graph.cycles)} circular dependencies[/red]")
        for cycle in graph.cycles:
            chain = " -> ".join(_relative(node, analysis.root_path) for node in cycle)
            console.print(f"  [dim]•[/dim] {chain}")
    else:
        console.print("[green]No circular dependencies[/green]")

    _output_failures(analysis, verbose)


def _output_hotspots(analysis: EnhancedProjectAnalysis, verbose: bool) -> None:
    ranked = sorted(analysis.file_results, key=lambda r: r.complexity, reverse=True)
    if not verbose:
        ranked = ranked[:_MAX_ROWS]

    table = Table(title="Most Complex Files")
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("CC", justify="right")
    table.add_column("MI", justify="right")
    table.add_column("Debt", justify="right")
    table.add_column("Errors", justify="right")
    for result in ranked:
        table.add_row(
            _relative(result.file_path, analysis.root_path),
            str(result.complexity),
            f"{result.maintainability_index:.1f}",
            f"{result.technical_debt:.1f}",
            str(len(result.errors)) if result.errors else "",
        )
    console.print(table)
    console.print()


def _output_failures(analysis: EnhancedProjectAnalysis, verbose: bool) -> None:
    if not analysis.failures and not analysis.walk_errors:
        return
    console.print()
    console.print(
        f"[yellow]{analysis.failed_files} files failed, "
        f"{analysis.walk_errors} walk errors[/yellow]"
    )
    shown = analysis.failures if verbose else analysis.failures[:_MAX_ROWS]
    for failure in shown:
        console.print(
            f"  [dim]•[/dim] {_relative(failure.path, analysis.root_path)}: {failure.reason}"
        )
    if len(shown) < len(analysis.failures):
        console.print(f"  [dim]... and {len(analysis.failures) - len(shown)} more[/dim]")


def _output_file(result: AnalysisResult) -> None:
    console.print()
    console.print(f"[bold cyan]{result.file_path}[/bold cyan]  [dim]{result.language}[/dim]")
    console.print(
        f"  {result.line_count} lines ({result.code_lines} code, "
        f"{result.comment_lines} comment, {result.blank_lines} blank)"
    )
    console.print(
        f"  complexity {result.complexity}, maintainability "
        f"{result.maintainability_index:.1f}, debt {result.technical_debt:.1f}"
    )
    console.print()

    if result.all_functions():
        table = Table(title="Functions")
        table.add_column("Name", style="cyan")
        table.add_column("Lines", justify="right")
        table.add_column("CC", justify="right")
        table.add_column("Params", justify="right")
        table.add_column("Doc", justify="center")
        for cls in [None, *result.classes]:
            functions = result.functions if cls is None else cls.methods
            for fn in functions:
                name = fn.name if cls is None else f"{cls.name}.{fn.name}"
                table.add_row(
                    name,
                    f"{fn.line_start}-{fn.line_end}",
                    str(fn.complexity),
                    str(fn.parameter_count),
                    "✓" if fn.has_docstring else "",
                )
        console.print(table)

    if result.classes:
        table = Table(title="Types")
        table.add_column("Name", style="cyan")
        table.add_column("Kind")
        table.add_column("Methods", justify="right")
        table.add_column("Fields", justify="right")
        table.add_column("Bases")
        for cls in result.classes:
            table.add_row(
                cls.name,
                cls.kind.value,
                str(cls.method_count),
                str(cls.field_count),
                ", ".join(cls.base_classes),
            )
        console.print(table)

    if result.dependencies:
        console.print("[bold]Imports:[/bold]")
        for dep in result.dependencies:
            version = f" {dep.version}" if dep.version else ""
            console.print(f"  {dep.name}{version} [dim]({dep.kind.value})[/dim]")

    if result.errors:
        console.print()
        console.print(f"[yellow]{len(result.errors)} syntax errors[/yellow]")
        for error in result.errors:
            console.print(f"  line {error.line}:{error.column} {error.message}")
