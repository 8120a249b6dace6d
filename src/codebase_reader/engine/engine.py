"""Analysis engine: discovery, concurrent parsing, metrics and aggregation."""

from __future__ import annotations

import re
import time
from pathlib import Path
from typing import Callable, Optional

from ..config import AnalysisConfig
from ..exceptions import (
    AnalysisTimeoutError,
    ConfigurationError,
    FileAccessError,
    InvalidPathError,
    QueueFullError,
)
from ..file_ops import read_source
from ..graph import GraphLimits
from ..logging_config import get_logger
from ..metrics import Aggregator, Calculator, EnhancedProjectAnalysis, FileFailure
from ..scanning import (
    AnalysisResult,
    FileWalker,
    ParserRegistry,
    WalkResult,
    WalkStats,
    default_registry,
)
from ..scanning.registry import PathLike
from .models import AnalysisJob, JobResult
from .pool import WorkerPool

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, str], None]

_GO_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


def discover_internal_prefixes(root: PathLike) -> list[str]:
    """
    Import prefixes that name the project itself.

    Picks up the ``go.mod`` module path and the top-level Python packages
    and modules found in ``root`` or ``root/src``.
    """
    root = Path(root)
    prefixes: list[str] = []

    go_mod = root / "go.mod"
    if go_mod.is_file():
        try:
            match = _GO_MODULE_RE.search(go_mod.read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logger.warning(f"Cannot read {go_mod}: {e}")
            match = None
        if match:
            prefixes.append(match.group(1).strip('"'))

    for base in (root, root / "src"):
        try:
            entries = sorted(base.iterdir(), key=lambda p: p.name)
        except OSError:
            continue
        for entry in entries:
            if entry.name.startswith("."):
                continue
            if entry.is_dir() and (entry / "__init__.py").is_file():
                prefixes.append(entry.name)
            elif entry.is_file() and entry.suffix == ".py":
                prefixes.append(entry.stem)

    return prefixes


def project_roots(path: PathLike) -> list[Path]:
    """
    Directories whose prefixes apply to a single file.

    The nearest ancestor holding a ``go.mod``, if any, and the directory
    above the outermost Python package containing the file.
    """
    directory = Path(path).absolute().parent
    roots: list[Path] = []

    for candidate in (directory, *directory.parents):
        if (candidate / "go.mod").is_file():
            roots.append(candidate)
            break

    package_root = directory
    while (package_root / "__init__.py").is_file() and package_root.parent != package_root:
        package_root = package_root.parent
    if package_root not in roots:
        roots.append(package_root)
    return roots


class _Run:
    """Bookkeeping for one directory run on the collecting thread."""

    def __init__(
        self,
        total: int,
        calculator: Calculator,
        on_progress: Optional[ProgressCallback],
        deadline: Optional[float],
        timeout: Optional[float],
    ):
        self.total = total
        self.calculator = calculator
        self.on_progress = on_progress
        self.deadline = deadline
        self.timeout = timeout
        self.completed = 0
        self.results: list[AnalysisResult] = []
        self.failures: list[FileFailure] = []
        # Content of submitted jobs, kept until their result is calculated
        self.in_flight: dict[str, bytes] = {}

    def fail(self, path: str, reason: str) -> None:
        logger.warning(f"Skipping {path}: {reason}")
        self.failures.append(FileFailure(path=path, reason=reason))
        self._advance(path)

    def collect(self, outcome: JobResult) -> None:
        content = self.in_flight.pop(outcome.path, b"")
        if outcome.ok:
            self.results.append(self.calculator.calculate(outcome.result, content))
            self._advance(outcome.path)
        else:
            self.fail(outcome.path, self._reason(outcome))

    @staticmethod
    def _reason(outcome: JobResult) -> str:
        if outcome.error is None:
            return "parser returned no result"
        return str(outcome.error) or type(outcome.error).__name__

    def wait_for_one(self, pool: WorkerPool) -> None:
        remaining = None
        if self.deadline is not None:
            remaining = self.deadline - time.monotonic()
            if remaining <= 0:
                raise AnalysisTimeoutError(self.timeout, self.completed, self.total)
        outcome = pool.get_result(timeout=remaining)
        if outcome is None:
            raise AnalysisTimeoutError(self.timeout, self.completed, self.total)
        self.collect(outcome)

    def _advance(self, path: str) -> None:
        self.completed += 1
        logger.debug(f"[{self.completed}/{self.total}] {path}")
        if self.on_progress is not None:
            self.on_progress(self.completed, self.total, path)


class Engine:
    """Runs analyses over files and directories.

    Args:
        config: Analysis configuration (defaults if omitted)
        registry: Parser registry (the shipped parsers if omitted)
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        registry: Optional[ParserRegistry] = None,
    ):
        self.config = config or AnalysisConfig()
        self.registry = registry if registry is not None else default_registry()
        self.walker = FileWalker(self.registry, self.config)
        self.limits = GraphLimits(
            max_depth=self.config.max_graph_depth,
            max_nodes=self.config.max_graph_nodes,
        )

    # ── Introspection ──────────────────────────────────────────

    def validate_setup(self) -> None:
        """
        Raises:
            ConfigurationError: If no parser is registered
        """
        if len(self.registry) == 0:
            raise ConfigurationError("No parsers registered")

    def supported_extensions(self) -> list[str]:
        return self.registry.list_extensions()

    def is_supported(self, path: str) -> bool:
        return self.registry.is_supported(path)

    def languages(self) -> dict[str, list[str]]:
        return self.registry.list_languages()

    def walker_stats(self, root: str) -> WalkStats:
        """File discovery counts for ``root`` without analyzing anything."""
        self._require_directory(root)
        return self.walker.stats(root)

    # ── Single file ────────────────────────────────────────────

    def analyze_file(self, path: str) -> AnalysisResult:
        """
        Parse and calculate one file.

        Raises:
            UnsupportedExtensionError: If no parser handles the file
            FileAccessError: If the file cannot be read or is too large
            ParsingError: If the parser cannot read the content at all
        """
        self.validate_setup()
        parser = self.registry.resolve(path)
        content = read_source(path, self.config.max_file_size)
        result = parser.parse(path, content)

        prefixes = list(self.config.internal_prefixes)
        for root in project_roots(path):
            prefixes += discover_internal_prefixes(root)
        return Calculator(prefixes).calculate(result, content)

    # ── Directory ──────────────────────────────────────────────

    def run_directory(
        self, root: str, on_progress: Optional[ProgressCallback] = None
    ) -> EnhancedProjectAnalysis:
        """
        Analyze every supported file under ``root``.

        Files that cannot be read or parsed are recorded in
        ``failures`` and never abort the run.

        Args:
            root: Directory to analyze
            on_progress: Called as ``(completed, total, path)`` after every file

        Returns:
            The aggregated project analysis

        Raises:
            ConfigurationError: If no parser is registered
            InvalidPathError: If root is not a directory
            AnalysisTimeoutError: If ``timeout_seconds`` elapses first
        """
        started = time.perf_counter()
        self.validate_setup()
        self._require_directory(root)

        files, walk_errors = self._discover(root)
        logger.info(f"Discovered {len(files)} files under {root}")

        prefixes = list(self.config.internal_prefixes) + discover_internal_prefixes(root)
        timeout = self.config.timeout_seconds
        run = _Run(
            total=len(files),
            calculator=Calculator(prefixes),
            on_progress=on_progress,
            deadline=None if timeout is None else time.monotonic() + timeout,
            timeout=timeout,
        )

        if files:
            self._process(files, run)

        run.results.sort(key=lambda r: r.file_path)
        analysis = Aggregator(self.limits).aggregate(run.results, root)
        analysis.failures = sorted(run.failures, key=lambda f: f.path)
        analysis.walk_errors = walk_errors
        analysis.analysis_duration = time.perf_counter() - started

        logger.info(
            f"Analysis complete: {len(run.results)} analyzed, "
            f"{len(run.failures)} failed, {walk_errors} walk errors "
            f"in {analysis.analysis_duration:.2f}s"
        )
        return analysis

    def _discover(self, root: str) -> tuple[list[WalkResult], int]:
        files: list[WalkResult] = []
        errors = 0
        for item in self.walker.walk(root):
            if item.ok:
                files.append(item)
            else:
                errors += 1
                logger.warning(f"Walk error at {item.path}: {item.error}")
        return files, errors

    def _process(self, files: list[WalkResult], run: _Run) -> None:
        """Feed the pool while draining it, so a full queue never fails the run."""
        pool = WorkerPool(self.config.max_workers, self.config.queue_factor)
        pool.start()
        try:
            for item in files:
                path = str(item.path)
                try:
                    content = read_source(item.path, self.config.max_file_size)
                except FileAccessError as e:
                    run.fail(path, e.reason)
                    continue

                job = AnalysisJob(path=path, content=content, parser=item.parser)
                run.in_flight[path] = content
                while True:
                    try:
                        pool.submit(job)
                        break
                    except QueueFullError:
                        run.wait_for_one(pool)

            while run.in_flight:
                run.wait_for_one(pool)
        finally:
            pool.stop()

    @staticmethod
    def _require_directory(root: str) -> None:
        if not Path(root).exists():
            raise InvalidPathError(root, "Path does not exist")
        if not Path(root).is_dir():
            raise InvalidPathError(root, "Not a directory")
