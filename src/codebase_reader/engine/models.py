"""Work items exchanged between the engine and its worker pool."""

from dataclasses import dataclass
from typing import Optional

from ..scanning.base import Parser
from ..scanning.models import AnalysisResult


@dataclass(frozen=True)
class AnalysisJob:
    """A file to parse: its path, raw content and resolved parser."""

    path: str
    content: bytes
    parser: Parser


@dataclass
class JobResult:
    """Outcome of one job: a parsed result, or the exception that stopped it."""

    path: str
    result: Optional[AnalysisResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None
