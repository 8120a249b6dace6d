"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console()

GRADE_STYLES = {"A": "bold green", "B": "green", "C": "yellow", "D": "red", "F": "bold red"}


# Option declarations reused by every command
VERBOSE = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
QUIET = typer.Option(False, "--quiet", "-q", help="Only log errors")
LOG_FILE = typer.Option(
    None, "--log-file", help="Also write debug logs to this file", dir_okay=False
)
CONFIG = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
)
WORKERS = typer.Option(None, "--workers", "-w", help="Parallel workers", min=1, max=100)
EXCLUDE = typer.Option(
    None, "--exclude", "-e", help="Exclude pattern (repeatable, replaces the defaults)"
)
INCLUDE = typer.Option(None, "--include", "-i", help="Include pattern (repeatable)")
MAX_FILE_SIZE = typer.Option(
    None, "--max-file-size", help="Largest file analyzed, in bytes", min=1
)


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    exclude: Optional[list[str]] = None,
    include: Optional[list[str]] = None,
    max_file_size: Optional[int] = None,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if workers is not None:
        overrides["max_workers"] = workers
    if exclude:
        overrides["exclude_patterns"] = list(exclude)
    if include:
        overrides["include_patterns"] = list(include)
    if max_file_size is not None:
        overrides["max_file_size"] = max_file_size
    return load_config(config_file=config, **overrides)


def grade_markup(grade: str) -> str:
    style = GRADE_STYLES.get(grade, "white")
    return f"[{style}]{grade}[/{style}]"
