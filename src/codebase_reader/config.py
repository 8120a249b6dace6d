"""Configuration loading and management for Codebase Reader.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.codebase-reader.toml)
    3. Project config (./codebase-reader.toml)
    4. Explicit config file
    5. Environment variables (CODEBASE_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(max_workers=8)
    >>> config.max_workers
    8
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import CodebaseReaderError, InvalidConfigError

DEFAULT_EXCLUDE_PATTERNS = ["node_modules", ".git", "vendor", "__pycache__", ".venv"]

GLOBAL_CONFIG_NAME = ".codebase-reader.toml"
PROJECT_CONFIG_NAME = "codebase-reader.toml"
ENV_PREFIX = "CODEBASE_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for an analysis run.

    Attributes:
        Worker pool:
            max_workers: Number of concurrent parse workers (1-100)
            queue_factor: Job/result queue capacity as a multiple of max_workers
            timeout_seconds: Deadline for collecting results (None = no deadline)

        File filtering:
            max_file_size: Largest file analyzed, in bytes
            exclude_patterns: Patterns for files and directories to skip
            include_patterns: Allow-list of file patterns (empty = everything)

        Dependency analysis:
            internal_prefixes: Import prefixes that belong to the project
            max_graph_depth: Longest path explored by graph algorithms
            max_graph_nodes: Node budget for graph algorithms
    """

    max_workers: int = 4
    queue_factor: int = 2
    timeout_seconds: Optional[float] = None

    max_file_size: int = 1024 * 1024
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    include_patterns: list[str] = field(default_factory=list)

    internal_prefixes: list[str] = field(default_factory=list)
    max_graph_depth: int = 1000
    max_graph_nodes: int = 100_000

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_workers < 1:
            raise InvalidConfigError("max_workers", self.max_workers, "must be at least 1")
        if self.max_workers > 100:
            raise InvalidConfigError("max_workers", self.max_workers, "cannot exceed 100")
        if self.queue_factor < 1:
            raise InvalidConfigError("queue_factor", self.queue_factor, "must be at least 1")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be positive")
        if self.max_file_size <= 0:
            raise InvalidConfigError("max_file_size", self.max_file_size, "must be positive")
        if self.max_graph_depth < 1:
            raise InvalidConfigError("max_graph_depth", self.max_graph_depth, "must be at least 1")
        if self.max_graph_nodes < 1:
            raise InvalidConfigError("max_graph_nodes", self.max_graph_nodes, "must be at least 1")

    @property
    def queue_capacity(self) -> int:
        """Capacity of each of the pool's bounded queues."""
        return self.max_workers * self.queue_factor


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides; ``None`` values are ignored so CLI
            options left unset do not clobber file settings

    Returns:
        Validated AnalysisConfig instance

    Raises:
        CodebaseReaderError: If a config file is missing, unreadable or has unknown keys
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise CodebaseReaderError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise CodebaseReaderError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODEBASE_* environment variables.

    Supported environment variables:
        CODEBASE_MAX_WORKERS: int
        CODEBASE_QUEUE_FACTOR: int
        CODEBASE_TIMEOUT_SECONDS: float
        CODEBASE_MAX_FILE_SIZE: int (bytes)
        CODEBASE_EXCLUDE_PATTERNS: comma-separated list
        CODEBASE_INCLUDE_PATTERNS: comma-separated list
        CODEBASE_INTERNAL_PREFIXES: comma-separated list
        CODEBASE_MAX_GRAPH_DEPTH: int
        CODEBASE_MAX_GRAPH_NODES: int
    """
    type_hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        try:
            result[field_name] = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise CodebaseReaderError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        type_hint = next(t for t in args if t is not type(None))

    origin = getattr(type_hint, "__origin__", None)
    if origin is list:
        return [part.strip() for part in value.split(",") if part.strip()]
    if type_hint is int:
        return int(value)
    if type_hint is float:
        return float(value)
    return value


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file, accepting either top-level keys or an [analysis] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise CodebaseReaderError(f"Invalid config file '{path}': {e}")

    section = data.get("analysis")
    if isinstance(section, dict):
        return dict(section)
    return data
