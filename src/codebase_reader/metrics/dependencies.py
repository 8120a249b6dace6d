"""Import classification: standard library, project-internal or external."""

from __future__ import annotations

import re
import sys
from typing import Iterable, Optional

from ..scanning.models import DependencyKind

# First path segments of the Go standard library
GO_STANDARD_ROOTS = frozenset(
    {
        "archive", "bufio", "builtin", "bytes", "cmp", "compress", "container",
        "context", "crypto", "database", "debug", "embed", "encoding", "errors",
        "expvar", "flag", "fmt", "go", "hash", "html", "image", "index", "io",
        "iter", "log", "maps", "math", "mime", "net", "os", "path", "plugin",
        "reflect", "regexp", "runtime", "slices", "sort", "strconv", "strings",
        "sync", "syscall", "testing", "text", "time", "unicode", "unique", "unsafe",
    }
)

PYTHON_STANDARD_MODULES = frozenset(sys.stdlib_module_names)

_GO_MAJOR_VERSION_RE = re.compile(r"^v\d+$")

INTERNAL_SEGMENT = "internal"


class DependencyClassifier:
    """Labels import names for a language.

    ``internal_prefixes`` are import paths (Go) or dotted module names
    (Python) that belong to the analyzed project.
    """

    def __init__(self, internal_prefixes: Iterable[str] = ()):
        self.internal_prefixes = tuple(p for p in internal_prefixes if p)

    def classify(self, name: str, language: str) -> tuple[DependencyKind, Optional[str]]:
        """
        Classify one import.

        Returns:
            (kind, version); the version is only known for Go modules with a
            major version suffix such as ``/v2``
        """
        lang = language.lower()
        if lang == "go":
            return self._classify_go(name)
        if lang == "python":
            return self._classify_python(name), None
        return self._classify_generic(name), None

    def _has_internal_prefix(self, name: str, separator: str) -> bool:
        return any(name == p or name.startswith(p + separator) for p in self.internal_prefixes)

    def _classify_go(self, path: str) -> tuple[DependencyKind, Optional[str]]:
        segments = path.split("/")
        if path.startswith(("./", "../")):
            return DependencyKind.INTERNAL, None
        if self._has_internal_prefix(path, "/") or INTERNAL_SEGMENT in segments[1:]:
            return DependencyKind.INTERNAL, None

        first = segments[0]
        if "." not in first:
            if first in GO_STANDARD_ROOTS or len(segments) == 1:
                return DependencyKind.STANDARD, None
            # Dot-less multi-segment paths are module-local packages
            return DependencyKind.INTERNAL, None

        version = next((s for s in reversed(segments[1:]) if _GO_MAJOR_VERSION_RE.match(s)), None)
        return DependencyKind.EXTERNAL, version

    def _classify_python(self, name: str) -> DependencyKind:
        if name.startswith("."):
            return DependencyKind.INTERNAL
        if self._has_internal_prefix(name, "."):
            return DependencyKind.INTERNAL
        segments = name.split(".")
        if segments[0] in PYTHON_STANDARD_MODULES:
            return DependencyKind.STANDARD
        if INTERNAL_SEGMENT in segments[1:]:
            return DependencyKind.INTERNAL
        return DependencyKind.EXTERNAL

    def _classify_generic(self, name: str) -> DependencyKind:
        if name.startswith((".", "/")) or self._has_internal_prefix(name, "/"):
            return DependencyKind.INTERNAL
        return DependencyKind.EXTERNAL
