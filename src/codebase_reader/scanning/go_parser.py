"""Structural Go parser built on the tree-sitter Go grammar.

The syntax tree is reduced to a small set of declaration kinds before any
extraction happens; everything else in the tree is ignored.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Optional

import tree_sitter_go
from tree_sitter import Language, Node
from tree_sitter import Parser as TreeSitterParser

from ..logging_config import get_logger
from .base import Parser
from .models import AnalysisResult, ClassInfo, ClassKind, FunctionInfo, ParseError

logger = get_logger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

# Node types adding one path each to a function's cyclomatic complexity.
# A switch counts through its cases, as a Python match does.
BRANCH_NODES = frozenset(
    {
        "if_statement",
        "for_statement",
        "expression_case",
        "type_case",
        "default_case",
        "communication_case",
    }
)

LOGICAL_OPERATORS = frozenset({"&&", "||"})

INTERFACE_METHOD_NODES = ("method_elem", "method_spec")


class DeclKind(Enum):
    FUNCTION = "function"
    METHOD = "method"
    STRUCT = "struct"
    INTERFACE = "interface"
    IMPORT = "import"


@dataclass(frozen=True)
class Declaration:
    """A top-level declaration the parser extracts.

    ``doc_anchor`` is the node whose preceding comment counts as the doc
    comment (the ``type_declaration`` for ungrouped type specs).
    """

    kind: DeclKind
    node: Node
    doc_anchor: Node


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return " ".join(node.text.decode("utf-8", errors="replace").split())


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _end_line(node: Node) -> int:
    return node.end_point[0] + 1


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


class GoParser(Parser):
    """Parses Go source into functions, structs, interfaces and imports."""

    def __init__(self) -> None:
        # tree-sitter parsers are not safe to share between threads
        self._local = threading.local()
        self._handlers: dict[DeclKind, Callable[[Declaration, _Collector], None]] = {
            DeclKind.FUNCTION: self._handle_function,
            DeclKind.METHOD: self._handle_method,
            DeclKind.STRUCT: self._handle_struct,
            DeclKind.INTERFACE: self._handle_interface,
            DeclKind.IMPORT: self._handle_import,
        }

    def supported_extensions(self) -> set[str]:
        return {".go"}

    def language_name(self) -> str:
        return "Go"

    def parse(self, path: str, content: bytes) -> AnalysisResult:
        text = self.decode(path, content)
        result = self.new_result(path, text)

        tree = self._parser().parse(text.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            result.errors.extend(_syntax_errors(root))
            logger.debug(f"{path}: {len(result.errors)} syntax error(s)")

        collector = _Collector(result)
        for decl in _declarations(root):
            self._handlers[decl.kind](decl, collector)
        collector.finish()

        result.import_count = len(result.imports)
        return result

    def _parser(self) -> TreeSitterParser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = TreeSitterParser(GO_LANGUAGE)
            self._local.parser = parser
        return parser

    # ── declaration handlers ─────────────────────────────────────

    def _handle_function(self, decl: Declaration, out: _Collector) -> None:
        out.result.functions.append(self._function_info(decl.node, decl.doc_anchor))

    def _handle_method(self, decl: Declaration, out: _Collector) -> None:
        info = self._function_info(decl.node, decl.doc_anchor)
        out.methods.append((_receiver_type(decl.node), info))

    def _handle_struct(self, decl: Declaration, out: _Collector) -> None:
        node = decl.node
        name = _text(node.child_by_field_name("name"))
        struct_type = node.child_by_field_name("type")
        cls = ClassInfo(
            name=name,
            line_start=_line(node),
            line_end=_end_line(node),
            kind=ClassKind.STRUCT,
            fields=_struct_fields(struct_type),
            is_public=is_exported(name),
            has_docstring=_has_doc_comment(decl.doc_anchor),
        )
        out.result.classes.append(cls)
        out.structs[name] = cls

    def _handle_interface(self, decl: Declaration, out: _Collector) -> None:
        node = decl.node
        name = _text(node.child_by_field_name("name"))
        cls = ClassInfo(
            name=name,
            line_start=_line(node),
            line_end=_end_line(node),
            kind=ClassKind.INTERFACE,
            is_public=is_exported(name),
            has_docstring=_has_doc_comment(decl.doc_anchor),
        )
        iface = node.child_by_field_name("type")
        if iface is not None:
            for child in iface.named_children:
                if child.type in INTERFACE_METHOD_NODES:
                    cls.methods.append(self._interface_method(child))
                elif child.type != "comment":
                    # Embedded interfaces and type constraints
                    cls.fields.append(_text(child))
        out.result.classes.append(cls)

    def _handle_import(self, decl: Declaration, out: _Collector) -> None:
        import_path = _text(decl.node.child_by_field_name("path")).strip('"`')
        if import_path:
            out.result.imports.append(import_path)

    # ── extraction helpers ───────────────────────────────────────

    def _function_info(self, node: Node, doc_anchor: Node) -> FunctionInfo:
        name = _text(node.child_by_field_name("name"))
        return FunctionInfo(
            name=name,
            line_start=_line(node),
            line_end=_end_line(node),
            parameters=_parameters(node.child_by_field_name("parameters")),
            return_type=_return_type(node.child_by_field_name("result")),
            complexity=_complexity(node.child_by_field_name("body")),
            is_public=is_exported(name),
            has_docstring=_has_doc_comment(doc_anchor),
        )

    def _interface_method(self, node: Node) -> FunctionInfo:
        name = _text(node.child_by_field_name("name"))
        return FunctionInfo(
            name=name,
            line_start=_line(node),
            line_end=_end_line(node),
            parameters=_parameters(node.child_by_field_name("parameters")),
            return_type=_return_type(node.child_by_field_name("result")),
            complexity=1,
            is_public=is_exported(name),
            has_docstring=_has_doc_comment(node),
        )


class _Collector:
    """Accumulates declarations for one file.

    Methods are attached to their receiver's struct when the struct is
    declared in the same file and kept as top-level functions otherwise.
    """

    def __init__(self, result: AnalysisResult) -> None:
        self.result = result
        self.structs: dict[str, ClassInfo] = {}
        self.methods: list[tuple[str, FunctionInfo]] = []

    def finish(self) -> None:
        for receiver, info in self.methods:
            owner = self.structs.get(receiver)
            if owner is not None:
                owner.methods.append(info)
            else:
                self.result.functions.append(info)


def _declarations(root: Node) -> Iterator[Declaration]:
    """Reduce the top level of a source file to tagged declarations."""
    for node in root.named_children:
        if node.type == "function_declaration":
            yield Declaration(DeclKind.FUNCTION, node, node)
        elif node.type == "method_declaration":
            yield Declaration(DeclKind.METHOD, node, node)
        elif node.type == "import_declaration":
            for spec in _descendants_of_type(node, "import_spec"):
                yield Declaration(DeclKind.IMPORT, spec, spec)
        elif node.type == "type_declaration":
            specs = [c for c in node.named_children if c.type == "type_spec"]
            for spec in specs:
                anchor = node if len(specs) == 1 else spec
                type_node = spec.child_by_field_name("type")
                if type_node is None:
                    continue
                if type_node.type == "struct_type":
                    yield Declaration(DeclKind.STRUCT, spec, anchor)
                elif type_node.type == "interface_type":
                    yield Declaration(DeclKind.INTERFACE, spec, anchor)


def _descendants_of_type(node: Node, node_type: str) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == node_type:
            yield current
            continue
        stack.extend(reversed(current.named_children))


def _complexity(body: Optional[Node]) -> int:
    """Base 1, plus one per branch and per short-circuit operator.

    Function literals nested in the body count toward the enclosing function.
    """
    complexity = 1
    if body is None:
        return complexity

    stack = [body]
    while stack:
        node = stack.pop()
        if node.type in BRANCH_NODES:
            complexity += 1
        elif node.type == "binary_expression":
            operator = node.child_by_field_name("operator")
            if operator is not None and operator.type in LOGICAL_OPERATORS:
                complexity += 1
        stack.extend(node.children)
    return complexity


def _parameters(param_list: Optional[Node]) -> list[str]:
    if param_list is None:
        return []

    params: list[str] = []
    for decl in param_list.named_children:
        if decl.type not in ("parameter_declaration", "variadic_parameter_declaration"):
            continue
        type_text = _text(decl.child_by_field_name("type"))
        if decl.type == "variadic_parameter_declaration":
            type_text = "..." + type_text
        names = [_text(n) for n in decl.children_by_field_name("name")]
        if names:
            params.extend(f"{n} {type_text}" for n in names)
        else:
            params.append(type_text)
    return params


def _return_type(result: Optional[Node]) -> str:
    if result is None:
        return ""
    if result.type != "parameter_list":
        return _text(result)

    types: list[str] = []
    for decl in result.named_children:
        if decl.type not in ("parameter_declaration", "variadic_parameter_declaration"):
            continue
        type_text = _text(decl.child_by_field_name("type"))
        # Named results repeat their type once per name
        types.extend([type_text] * max(1, len(decl.children_by_field_name("name"))))
    if len(types) == 1:
        return types[0]
    return "(" + ", ".join(types) + ")"


def _struct_fields(struct_type: Optional[Node]) -> list[str]:
    if struct_type is None:
        return []

    fields: list[str] = []
    for decl in _descendants_of_type(struct_type, "field_declaration"):
        type_text = _text(decl.child_by_field_name("type"))
        names = [_text(n) for n in decl.children_by_field_name("name")]
        if names:
            fields.extend(f"{n} {type_text}" for n in names)
        else:
            # Embedded field; the pointer star sits outside the type node
            star = "*" if any(c.type == "*" for c in decl.children) else ""
            fields.append(star + type_text)
    return fields


def _receiver_type(method: Node) -> str:
    """Bare type name of a method receiver: ``(s *Server[T])`` -> ``Server``."""
    receiver = method.child_by_field_name("receiver")
    if receiver is None:
        return ""
    for decl in receiver.named_children:
        if decl.type != "parameter_declaration":
            continue
        type_text = _text(decl.child_by_field_name("type")).lstrip("*").strip()
        return type_text.split("[", 1)[0]
    return ""


def _has_doc_comment(node: Node) -> bool:
    """True when a comment ends on the line directly above ``node``."""
    prev = node.prev_sibling
    return (
        prev is not None
        and prev.type == "comment"
        and prev.end_point[0] + 1 >= node.start_point[0]
    )


def _syntax_errors(root: Node) -> list[ParseError]:
    errors: list[ParseError] = []
    stack: list[Any] = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            errors.append(
                ParseError(
                    line=_line(node),
                    column=node.start_point[1] + 1,
                    message=f"missing {node.type}",
                )
            )
        elif node.type == "ERROR":
            errors.append(
                ParseError(
                    line=_line(node),
                    column=node.start_point[1] + 1,
                    message=f"unexpected {_text(node)[:40]!r}",
                )
            )
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    errors.sort(key=lambda e: (e.line, e.column))
    return errors
