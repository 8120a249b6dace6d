"""Heuristic Python parser.

Works on logical statements (physical lines joined across open brackets,
triple-quoted strings and backslash continuations) and tracks block
structure by indentation. No grammar is involved, so it tolerates code that
would not compile and never raises on malformed input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from ..logging_config import get_logger
from .base import Parser
from .models import AnalysisResult, ClassInfo, ClassKind, FunctionInfo, ParseError

logger = get_logger(__name__)

TAB_WIDTH = 4

_DEF_RE = re.compile(r"^(?P<async>async\s+)?def\s+(?P<name>\w+)")
_CLASS_RE = re.compile(r"^class\s+(?P<name>\w+)")
_IMPORT_RE = re.compile(r"^import\s+(?P<names>.+)$")
_FROM_IMPORT_RE = re.compile(r"^from\s+(?P<module>[\w.]+)\s+import\s+(?P<names>.+)$")
_BRANCH_RE = re.compile(
    r"^(?:if|elif|for|while|except|with)\b|^try\s*:|^async\s+(?:for|with)\b|^case\s.*:"
)
_LOGICAL_RE = re.compile(r"\s(?:and|or)\s")
_STRING_RE = re.compile(
    r"(\"\"\"|''').*?\1|\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'", re.DOTALL
)
_DOCSTRING_RE = re.compile("^[rRuU]?(?:\"\"\"|'''|\"|')")
_FIELD_RE = re.compile(
    r"^(?P<target>[A-Za-z_]\w*\s*(?::[^=]+)?)=(?!=)|^(?P<annotated>[A-Za-z_]\w*\s*:[^=]+)$"
)

_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass
class _Statement:
    """One logical statement. ``line``/``end_line`` are 1-indexed."""

    line: int
    end_line: int
    indent: int
    text: str


@dataclass
class _Block:
    indent: int
    function: Optional[FunctionInfo] = None
    cls: Optional[ClassInfo] = None
    body_indent: Optional[int] = None
    inline: bool = False


def _indent(line: str) -> int:
    width = 0
    for ch in line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += TAB_WIDTH
        else:
            break
    return width


def _scan_line(line: str, in_string: Optional[str]) -> tuple[int, Optional[str], int]:
    """Scan one physical line.

    Returns:
        (bracket depth change, triple-quote delimiter still open at end of
        line, index where a trailing comment starts or -1)
    """
    depth = 0
    i = 0
    n = len(line)
    while i < n:
        if in_string is not None:
            end = line.find(in_string, i)
            if end < 0:
                return depth, in_string, -1
            i = end + 3
            in_string = None
            continue

        ch = line[i]
        if ch == "#":
            return depth, None, i
        if line.startswith('"""', i) or line.startswith("'''", i):
            in_string = line[i : i + 3]
            i += 3
            continue
        if ch in "\"'":
            j = i + 1
            while j < n and line[j] != ch:
                if line[j] == "\\":
                    j += 1
                j += 1
            i = j + 1
            continue
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        i += 1
    return depth, in_string, -1


def _split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on ``sep`` outside brackets and string literals."""
    parts: list[str] = []
    depth = 0
    quote: Optional[str] = None
    current: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if quote is not None:
            current.append(ch)
            if ch == "\\" and i + 1 < len(text):
                current.append(text[i + 1])
                i += 1
            elif ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
            current.append(ch)
        elif ch in _OPENERS:
            depth += 1
            current.append(ch)
        elif ch in _CLOSERS:
            depth -= 1
            current.append(ch)
        elif ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    parts.append("".join(current))
    return parts


def _matching_bracket(text: str, open_index: int) -> int:
    """Index of the bracket closing ``text[open_index]``, or -1."""
    depth = 0
    quote: Optional[str] = None
    for i in range(open_index, len(text)):
        ch = text[i]
        if quote is not None:
            if ch == quote and text[i - 1] != "\\":
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if depth == 0:
                return i
    return -1


def is_public_name(name: str) -> bool:
    """Underscore-prefixed names are private; dunder names are public."""
    if name.startswith("__") and name.endswith("__"):
        return True
    return not name.startswith("_")


class PythonParser(Parser):
    """Extracts functions, classes and imports from Python source."""

    def supported_extensions(self) -> set[str]:
        return {".py", ".pyw"}

    def language_name(self) -> str:
        return "Python"

    def parse(self, path: str, content: bytes) -> AnalysisResult:
        text = self.decode(path, content)
        result = self.new_result(path, text)
        lines = text.split("\n")

        stack: list[_Block] = []
        pending: Optional[_Block] = None
        last_line = 0

        for stmt in self._statements(lines, result.errors):
            while stack and stack[-1].indent >= stmt.indent:
                self._close(stack.pop(), last_line)

            if pending is not None:
                if stack and stack[-1] is pending:
                    owner = pending.function or pending.cls
                    owner.has_docstring = bool(_DOCSTRING_RE.match(stmt.text))
                pending = None

            top = stack[-1] if stack else None
            if top is not None and top.cls is not None and top.body_indent is None:
                top.body_indent = stmt.indent

            def_match = _DEF_RE.match(stmt.text)
            class_match = _CLASS_RE.match(stmt.text) if def_match is None else None

            block: Optional[_Block] = None
            if def_match is not None:
                block = self._handle_def(stmt, def_match, top, result)
            elif class_match is not None:
                block = self._handle_class(stmt, class_match, stack, result)
            else:
                self._count_branches(stmt.text, stack)
                if not self._handle_import(stmt.text, result):
                    self._handle_field(stmt, top)

            if block is not None:
                stack.append(block)
                if not block.inline:
                    pending = block
            last_line = stmt.end_line

        while stack:
            self._close(stack.pop(), last_line)

        result.import_count = len(result.imports)
        if result.errors:
            logger.debug(f"{path}: {len(result.errors)} syntax error(s)")
        return result

    # ── Statement assembly ─────────────────────────────────────

    @staticmethod
    def _statements(lines: list[str], errors: list[ParseError]) -> Iterator[_Statement]:
        buffer: list[str] = []
        start = 0
        indent = 0
        depth = 0
        in_string: Optional[str] = None

        for idx, raw in enumerate(lines):
            stripped = raw.strip()
            if not buffer:
                if not stripped or stripped.startswith("#"):
                    continue
                start, indent, depth = idx, _indent(raw), 0

            was_in_string = in_string is not None
            delta, in_string, comment_at = _scan_line(raw, in_string)
            depth += delta
            code = (raw[:comment_at] if comment_at >= 0 else raw).strip()
            if code or was_in_string:
                buffer.append(code)

            continued = code.endswith("\\") and in_string is None
            if in_string is None and depth <= 0 and not continued:
                yield _Statement(start + 1, idx + 1, indent, " ".join(p for p in buffer if p))
                buffer = []

        if buffer:
            if in_string is not None:
                message = "unterminated triple-quoted string"
            else:
                message = "unexpected end of file inside open brackets"
            errors.append(ParseError(line=start + 1, column=indent + 1, message=message))
            yield _Statement(start + 1, len(lines), indent, " ".join(p for p in buffer if p))

    # ── Definitions ────────────────────────────────────────────

    def _handle_def(
        self,
        stmt: _Statement,
        match: re.Match,
        top: Optional[_Block],
        result: AnalysisResult,
    ) -> Optional[_Block]:
        header = self._split_def_header(stmt.text, match.end())
        if header is None:
            result.errors.append(
                ParseError(stmt.line, stmt.indent + 1, "malformed function definition")
            )
            return None

        params_text, return_type, body = header
        name = match.group("name")
        info = FunctionInfo(
            name=name,
            line_start=stmt.line,
            line_end=stmt.end_line,
            parameters=self._parameters(params_text),
            return_type=return_type,
            is_public=is_public_name(name),
            is_async=match.group("async") is not None,
            has_docstring=bool(body and _DOCSTRING_RE.match(body)),
        )
        if body:
            self._count_branches(body, [_Block(stmt.indent, function=info)])

        if top is not None and top.cls is not None:
            top.cls.methods.append(info)
        elif top is None or top.function is None:
            result.functions.append(info)
        # Closures are not recorded; their branches count toward the enclosing function

        return _Block(stmt.indent, function=info, inline=bool(body))

    @staticmethod
    def _split_def_header(text: str, name_end: int) -> Optional[tuple[str, str, str]]:
        """Split ``def name(params) -> ret: body`` into (params, ret, body)."""
        pos = name_end
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos < len(text) and text[pos] == "[":
            # PEP 695 type parameters
            close = _matching_bracket(text, pos)
            if close < 0:
                return None
            pos = close + 1
            while pos < len(text) and text[pos].isspace():
                pos += 1
        if pos >= len(text) or text[pos] != "(":
            return None

        close = _matching_bracket(text, pos)
        if close < 0:
            return None
        params = text[pos + 1 : close]
        rest = text[close + 1 :].lstrip()

        return_type = ""
        if rest.startswith("->"):
            parts = _split_top_level(rest[2:], ":")
            if len(parts) < 2:
                return None
            return_type = parts[0].strip()
            body = ":".join(parts[1:])
        elif rest.startswith(":"):
            body = rest[1:]
        else:
            return None
        return params, return_type, body.strip()

    @staticmethod
    def _parameters(params_text: str) -> list[str]:
        params: list[str] = []
        for part in _split_top_level(params_text):
            param = _split_top_level(part, "=")[0].strip()
            if param and param not in ("/", "*"):
                params.append(param)
        return params

    def _handle_class(
        self,
        stmt: _Statement,
        match: re.Match,
        stack: list[_Block],
        result: AnalysisResult,
    ) -> Optional[_Block]:
        text = stmt.text
        pos = match.end()
        bases: list[str] = []

        rest = text[pos:].lstrip()
        if rest.startswith("["):
            close = _matching_bracket(rest, 0)
            rest = rest[close + 1 :].lstrip() if close >= 0 else ""
        if rest.startswith("("):
            close = _matching_bracket(rest, 0)
            if close < 0:
                result.errors.append(
                    ParseError(stmt.line, stmt.indent + 1, "malformed class definition")
                )
                return None
            for part in _split_top_level(rest[1:close]):
                base = part.strip()
                # Keyword arguments such as metaclass=... are not bases
                if base and "=" not in base:
                    bases.append(base)
            rest = rest[close + 1 :].lstrip()
        if not rest.startswith(":"):
            result.errors.append(
                ParseError(stmt.line, stmt.indent + 1, "malformed class definition")
            )
            return None

        body = rest[1:].strip()
        name = match.group("name")
        cls = ClassInfo(
            name=name,
            line_start=stmt.line,
            line_end=stmt.end_line,
            kind=ClassKind.CLASS,
            base_classes=bases,
            is_public=is_public_name(name),
            has_docstring=bool(body and _DOCSTRING_RE.match(body)),
        )
        # Classes local to a function are not recorded, like closures
        if not any(block.function is not None for block in stack):
            result.classes.append(cls)
        return _Block(stmt.indent, cls=cls, inline=bool(body))

    # ── Body statements ────────────────────────────────────────

    @staticmethod
    def _count_branches(text: str, stack: list[_Block]) -> None:
        increment = len(_LOGICAL_RE.findall(_STRING_RE.sub('""', text)))
        if _BRANCH_RE.match(text):
            increment += 1
        if not increment:
            return
        for block in stack:
            if block.function is not None:
                block.function.complexity += increment

    @staticmethod
    def _handle_import(text: str, result: AnalysisResult) -> bool:
        match = _IMPORT_RE.match(text)
        if match is not None:
            for part in _split_top_level(match.group("names")):
                name = part.split(" as ")[0].strip()
                if name:
                    result.imports.append(name)
            return True

        match = _FROM_IMPORT_RE.match(text)
        if match is not None:
            module = match.group("module")
            names = match.group("names").strip().strip("()")
            for part in _split_top_level(names):
                name = part.split(" as ")[0].strip()
                if not name:
                    continue
                if name == "*":
                    result.imports.append(module)
                elif module.strip(".") == "":
                    result.imports.append(module + name)
                else:
                    result.imports.append(f"{module}.{name}")
            return True

        return False

    @staticmethod
    def _handle_field(stmt: _Statement, top: Optional[_Block]) -> None:
        if top is None or top.cls is None or stmt.indent != top.body_indent:
            return
        match = _FIELD_RE.match(stmt.text)
        if match is not None:
            target = match.group("target") or match.group("annotated")
            top.cls.fields.append(" ".join(target.split()))

    @staticmethod
    def _close(block: _Block, last_line: int) -> None:
        if block.function is not None:
            block.function.line_end = max(block.function.line_end, last_line)
        if block.cls is not None:
            block.cls.line_end = max(block.cls.line_end, last_line)
