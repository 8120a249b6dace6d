"""Directory traversal with exclude/include patterns and gitignore rules."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from ..config import AnalysisConfig
from ..exceptions import CodebaseReaderError, FileAccessError
from ..logging_config import get_logger
from .base import Parser
from .registry import ParserRegistry, PathLike, extension_of

logger = get_logger(__name__)

GITIGNORE_NAME = ".gitignore"


@dataclass
class WalkResult:
    """One entry produced by a walk: a parseable file, or a traversal error."""

    path: Path
    parser: Optional[Parser] = None
    error: Optional[CodebaseReaderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class WalkStats:
    """File discovery counts for a tree, gathered without parsing anything."""

    total_files: int = 0
    supported_files: int = 0
    excluded_files: int = 0
    directories_skipped: int = 0
    errors: int = 0
    files_by_extension: dict[str, int] = field(default_factory=dict)


# ── Pattern matching ───────────────────────────────────────────


def matches_pattern(pattern: str, path: str) -> bool:
    """
    Case-insensitive match of an exclude/include pattern.

    Supports exact matches, ``*`` wildcards (see ``matches_wildcard``) and a
    bare name matching any single component of a slash-separated path.
    """
    pattern = pattern.lower()
    path = path.lower()

    if pattern == path:
        return True
    if "*" in pattern:
        return matches_wildcard(pattern, path)
    return pattern in path.split("/")


def matches_wildcard(pattern: str, text: str) -> bool:
    """Match ``*``, ``*.ext``, ``*sub*``, ``prefix*`` and ``*suffix`` forms."""
    if pattern == "*":
        return True
    if pattern.startswith("*."):
        return text.endswith(pattern[1:])
    if pattern.startswith("*") and pattern.endswith("*"):
        return pattern[1:-1] in text
    if pattern.endswith("*"):
        return text.startswith(pattern[:-1])
    if pattern.startswith("*"):
        return text.endswith(pattern[1:])
    return False


def matches_gitignore_rule(rule: str, rel_path: str, is_dir: bool) -> bool:
    """
    Best-effort gitignore matching against a root-relative, slash-separated path.

    ``dir/`` rules only match directories (or paths beneath them), ``/x``
    rules are anchored at the root. Negation rules (``!x``) never match.
    """
    if rule.startswith("!"):
        return False

    dir_only = rule.endswith("/")
    anchored = rule.startswith("/")
    rule = rule.strip("/")
    if not rule:
        return False

    parts = rel_path.split("/")
    if anchored:
        # Compared segment by segment from the root
        rule_parts = rule.split("/")
        if len(parts) < len(rule_parts):
            return False
        if not all(matches_pattern(r, p) for r, p in zip(rule_parts, parts)):
            return False
        return len(parts) > len(rule_parts) or is_dir or not dir_only

    if dir_only:
        for i, part in enumerate(parts):
            if matches_pattern(rule, part) and (i < len(parts) - 1 or is_dir):
                return True
        return False

    if any(matches_pattern(rule, part) for part in parts):
        return True
    return any(matches_pattern(rule, "/".join(parts[i:])) for i in range(len(parts)))


def load_gitignore_rules(root: PathLike) -> list[str]:
    """Rules from ``<root>/.gitignore``; a missing or unreadable file yields none."""
    path = Path(root) / GITIGNORE_NAME
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return []
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return []

    rules = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            rules.append(line)
    return rules


# ── Walker ─────────────────────────────────────────────────────


class FileWalker:
    """Discovers analyzable files under a root directory.

    The walker keeps no per-walk state: every call to ``walk`` returns a new
    generator and reloads the root's gitignore rules.
    """

    def __init__(self, registry: ParserRegistry, config: Optional[AnalysisConfig] = None):
        self.registry = registry
        self.config = config or AnalysisConfig()

    def walk(self, root: PathLike) -> Iterator[WalkResult]:
        """
        Lazily yield parseable files depth-first, in sorted order.

        Excluded directories are pruned without being listed. Files that are
        excluded, unsupported or over the size ceiling are skipped silently.
        Unreadable directories, broken links and stat failures are yielded as
        error entries and the walk continues.
        """
        root = Path(root)
        rules = load_gitignore_rules(root)
        stack = [root]

        while stack:
            directory = stack.pop()
            try:
                entries = self._list(directory)
            except OSError as e:
                yield WalkResult(directory, error=FileAccessError(directory, str(e)))
                continue

            subdirs = []
            for entry in entries:
                rel = entry.relative_to(root).as_posix()
                try:
                    kind = self._kind(entry)
                except OSError as e:
                    yield WalkResult(entry, error=FileAccessError(entry, str(e)))
                    continue

                if kind == "dir":
                    if self.exclude_directory(rel, rules):
                        logger.debug(f"Pruned directory: {rel}")
                    else:
                        subdirs.append(entry)
                    continue
                if kind == "broken":
                    yield WalkResult(entry, error=FileAccessError(entry, "broken symbolic link"))
                    continue
                if kind != "file" or self.exclude_file(rel, rules):
                    continue

                parser = self.registry.get(entry)
                if parser is None:
                    continue

                try:
                    size = entry.stat().st_size
                except OSError as e:
                    yield WalkResult(entry, error=FileAccessError(entry, str(e)))
                    continue
                if size > self.config.max_file_size:
                    logger.debug(f"Skipped (size): {rel} ({size} bytes)")
                    continue

                yield WalkResult(entry, parser=parser)

            stack.extend(reversed(subdirs))

    def stats(self, root: PathLike) -> WalkStats:
        """Count what a walk of ``root`` would see, without analyzing anything."""
        root = Path(root)
        rules = load_gitignore_rules(root)
        stats = WalkStats()
        by_extension: Counter[str] = Counter()
        stack = [root]

        while stack:
            directory = stack.pop()
            try:
                entries = self._list(directory)
            except OSError:
                stats.errors += 1
                continue

            subdirs = []
            for entry in entries:
                rel = entry.relative_to(root).as_posix()
                try:
                    kind = self._kind(entry)
                except OSError:
                    stats.errors += 1
                    continue

                if kind == "dir":
                    if self.exclude_directory(rel, rules):
                        stats.directories_skipped += 1
                    else:
                        subdirs.append(entry)
                    continue
                if kind != "file":
                    continue

                stats.total_files += 1
                if self.exclude_file(rel, rules):
                    stats.excluded_files += 1
                    continue

                ext = extension_of(entry)
                if ext:
                    by_extension[ext.lstrip(".")] += 1
                if self.registry.is_supported(entry):
                    stats.supported_files += 1

            stack.extend(reversed(subdirs))

        stats.files_by_extension = dict(sorted(by_extension.items()))
        return stats

    # ── Exclusion rules ────────────────────────────────────────

    def exclude_directory(self, rel_path: str, rules: list[str]) -> bool:
        name = rel_path.rsplit("/", 1)[-1]
        for pattern in self.config.exclude_patterns:
            if matches_pattern(pattern, rel_path) or matches_pattern(pattern, name):
                return True
        return any(matches_gitignore_rule(rule, rel_path, True) for rule in rules)

    def exclude_file(self, rel_path: str, rules: list[str]) -> bool:
        name = rel_path.rsplit("/", 1)[-1]
        for pattern in self.config.exclude_patterns:
            if matches_pattern(pattern, rel_path) or matches_pattern(pattern, name):
                return True

        if self.config.include_patterns and not any(
            matches_pattern(p, rel_path) or matches_pattern(p, name)
            for p in self.config.include_patterns
        ):
            return True

        return any(matches_gitignore_rule(rule, rel_path, False) for rule in rules)

    @staticmethod
    def _kind(entry: Path) -> str:
        """Classify an entry as dir, file, broken (a dangling link) or other.

        Links to directories are not followed and count as other.
        """
        if entry.is_symlink():
            if not entry.exists():
                return "broken"
            return "other" if entry.is_dir() else "file"
        if entry.is_dir():
            return "dir"
        return "file" if entry.is_file() else "other"

    @staticmethod
    def _list(directory: Path) -> list[Path]:
        return sorted(directory.iterdir(), key=lambda p: p.name)
