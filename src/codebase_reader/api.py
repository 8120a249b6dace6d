"""Public API for Codebase Reader.

Example:
    >>> from codebase_reader import analyze
    >>>
    >>> analysis = analyze("/path/to/code")
    >>> analysis.quality_score.grade
    'B'
    >>>
    >>> # With overrides
    >>> analysis = analyze("/path/to/code", max_workers=8, exclude_patterns=["dist"])
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .config import load_config
from .engine import Engine, ProgressCallback
from .logging_config import get_logger, setup_logging
from .metrics import EnhancedProjectAnalysis
from .scanning import AnalysisResult

logger = get_logger(__name__)


def _setup(overrides: dict[str, Any]) -> None:
    verbose = bool(overrides.pop("verbose", False))
    quiet = bool(overrides.pop("quiet", False))
    setup_logging(verbose=verbose, quiet=quiet, log_file=overrides.pop("log_file", None))


def analyze(
    path: str = ".",
    config_file: Optional[Path] = None,
    on_progress: Optional[ProgressCallback] = None,
    **overrides: Any,
) -> EnhancedProjectAnalysis:
    """Analyze every supported file under a directory.

    Args:
        path: Directory to analyze (default: current directory)
        config_file: Optional explicit config file path
        on_progress: Called as ``(completed, total, path)`` after every file
        **overrides: Configuration overrides (e.g. ``max_workers=8``), plus the
            logging options ``verbose``, ``quiet`` and ``log_file``

    Returns:
        The aggregated project analysis

    Raises:
        CodebaseReaderError: If configuration is invalid or the path is not
            a directory
    """
    _setup(overrides)
    config = load_config(config_file=config_file, **overrides)
    logger.info(f"Starting analysis of {path}")
    return Engine(config).run_directory(path, on_progress=on_progress)


def analyze_file(
    path: str,
    config_file: Optional[Path] = None,
    **overrides: Any,
) -> AnalysisResult:
    """Analyze a single file.

    Raises:
        UnsupportedExtensionError: If no parser handles the file
        FileAccessError: If the file cannot be read
    """
    _setup(overrides)
    config = load_config(config_file=config_file, **overrides)
    return Engine(config).analyze_file(path)
