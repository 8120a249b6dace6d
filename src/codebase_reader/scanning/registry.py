"""Extension-keyed parser registry.

The registry is an owned component handed to the walker and engine rather
than module-level state, so independent engines can coexist.

Writes are serialized on a lock and publish a fresh mapping; reads grab the
current mapping reference and never wait on a writer.
"""

from __future__ import annotations

import threading
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

from ..exceptions import InvalidParserError, UnsupportedExtensionError
from ..logging_config import get_logger
from .base import Parser

logger = get_logger(__name__)

PathLike = Union[str, Path]


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and ensure it starts with a dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def extension_of(path: PathLike) -> str:
    """Lower-cased extension of ``path`` including the dot ("" if none)."""
    return Path(path).suffix.lower()


class ParserRegistry:
    """Maps file extensions to parser instances."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._parsers: Mapping[str, Parser] = MappingProxyType({})

    def register(self, parser: Optional[Parser]) -> None:
        """
        Register a parser for every extension it declares.

        The last registration for an extension wins.

        Raises:
            InvalidParserError: If parser is None or declares no extensions
        """
        if parser is None:
            raise InvalidParserError("parser cannot be None")

        extensions = {normalize_extension(e) for e in parser.supported_extensions()}
        extensions.discard("")
        if not extensions:
            raise InvalidParserError("parser must support at least one file extension", parser)

        with self._lock:
            updated = dict(self._parsers)
            for ext in extensions:
                previous = updated.get(ext)
                if previous is not None and previous is not parser:
                    logger.debug(f"Replacing {previous!r} for {ext} with {parser!r}")
                updated[ext] = parser
            self._parsers = MappingProxyType(updated)

        logger.debug(f"Registered {parser!r} for {sorted(extensions)}")

    def resolve(self, path: PathLike) -> Parser:
        """
        Find the parser for a file path.

        Raises:
            UnsupportedExtensionError: If no parser handles the extension
        """
        parsers = self._parsers
        ext = extension_of(path)
        parser = parsers.get(ext)
        if parser is None:
            raise UnsupportedExtensionError(path, ext, list(parsers))
        return parser

    def get(self, path: PathLike) -> Optional[Parser]:
        """Like ``resolve`` but returns None for unsupported files."""
        return self._parsers.get(extension_of(path))

    def is_supported(self, path: PathLike) -> bool:
        return extension_of(path) in self._parsers

    def list_extensions(self) -> list[str]:
        return sorted(self._parsers)

    def list_languages(self) -> dict[str, list[str]]:
        """Language name -> sorted extensions handled for it."""
        languages: dict[str, list[str]] = {}
        for ext, parser in sorted(self._parsers.items()):
            languages.setdefault(parser.language_name(), []).append(ext)
        return languages

    def __len__(self) -> int:
        return len(self._parsers)

    def __contains__(self, ext: object) -> bool:
        return isinstance(ext, str) and normalize_extension(ext) in self._parsers
