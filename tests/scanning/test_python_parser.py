"""Tests for scanning/python_parser.py - heuristic Python extraction."""

import pytest

from codebase_reader.exceptions import ParsingError
from codebase_reader.scanning import ClassKind, PythonParser
from codebase_reader.scanning.python_parser import is_public_name


def _parse(source: str):
    return PythonParser().parse("module.py", source.encode("utf-8"))


class TestContract:
    def test_extensions_and_name(self):
        parser = PythonParser()
        assert parser.supported_extensions() == {".py", ".pyw"}
        assert parser.language_name() == "Python"

    def test_empty_file(self):
        result = _parse("")
        assert result.functions == []
        assert result.classes == []
        assert result.errors == []

    def test_undecodable_content_raises(self):
        with pytest.raises(ParsingError):
            PythonParser().parse("bad.py", b"\xff\xfe\xfa def")

    def test_bom_is_tolerated(self):
        result = PythonParser().parse("bom.py", "\ufeffdef f():\n    pass\n".encode("utf-8"))
        assert [f.name for f in result.functions] == ["f"]


# ── functions ──────────────────────────────────────────────────


class TestFunctions:
    def test_signature(self):
        result = _parse(
            "def fetch(url: str, retries: int = 3, *args, timeout=None, **kw) -> bytes:\n"
            "    return b''\n"
        )
        fn = result.functions[0]
        assert fn.name == "fetch"
        assert fn.parameters == ["url: str", "retries: int", "*args", "timeout", "**kw"]
        assert fn.return_type == "bytes"
        assert (fn.line_start, fn.line_end) == (1, 2)

    def test_multiline_signature(self):
        result = _parse(
            "def build(\n"
            "    name,\n"
            "    options: dict[str, int] = {'a': 1},\n"
            ") -> None:\n"
            "    pass\n"
        )
        fn = result.functions[0]
        assert fn.parameters == ["name", "options: dict[str, int]"]
        assert fn.return_type == "None"
        assert fn.line_end == 5

    def test_async_is_a_flag(self):
        result = _parse("async def handler(request):\n    await request.read()\n")
        fn = result.functions[0]
        assert fn.name == "handler"
        assert fn.is_async

    def test_visibility(self):
        result = _parse("def _helper():\n    pass\n\ndef run():\n    pass\n")
        assert [(f.name, f.is_public) for f in result.functions] == [
            ("_helper", False),
            ("run", True),
        ]

    def test_docstring_detection(self):
        result = _parse(
            'def documented():\n    """Does things."""\n    return 1\n\n'
            "def bare():\n    return 2\n"
        )
        documented, bare = result.functions
        assert documented.has_docstring
        assert not bare.has_docstring

    def test_one_line_function(self):
        result = _parse("def one(): return 1\ndef two(): return 2\n")
        assert [f.name for f in result.functions] == ["one", "two"]

    def test_nested_functions_count_toward_enclosing(self):
        result = _parse(
            "def outer(items):\n"
            "    def inner(x):\n"
            "        if x:\n"
            "            return x\n"
            "    return [inner(i) for i in items]\n"
        )
        assert [f.name for f in result.functions] == ["outer"]
        assert result.functions[0].complexity == 2


class TestComplexity:
    def test_base_complexity_is_one(self):
        assert _parse("def f():\n    return 1\n").functions[0].complexity == 1

    def test_branches_and_logical_operators(self):
        result = _parse(
            "def decide(a, b):\n"
            "    if a and b:\n"
            "        return 1\n"
            "    elif a or b:\n"
            "        return 2\n"
            "    for i in range(3):\n"
            "        while i:\n"
            "            i -= 1\n"
            "    try:\n"
            "        pass\n"
            "    except ValueError:\n"
            "        pass\n"
            "    with open('f') as fh:\n"
            "        pass\n"
            "    return 0\n"
        )
        # if, and, elif, or, for, while, try, except, with
        assert result.functions[0].complexity == 10

    def test_logical_operators_inside_strings_are_ignored(self):
        result = _parse(
            "def f(ok):\n"
            "    print(\"salt and pepper or not\")\n"
            "    return 'if this and that' if ok and True else \"\"\"or\"\"\"\n"
        )
        # Only the "and" outside the literals counts
        assert result.functions[0].complexity == 2

    def test_match_case(self):
        result = _parse(
            "def route(cmd):\n"
            "    match cmd:\n"
            "        case 'go':\n"
            "            return 1\n"
            "        case _:\n"
            "            return 0\n"
        )
        assert result.functions[0].complexity == 3


# ── classes ────────────────────────────────────────────────────


class TestClasses:
    def test_class_with_methods_and_bases(self):
        result = _parse(
            "class Repo(Base, Generic[T], metaclass=ABCMeta):\n"
            '    """Storage."""\n'
            "\n"
            "    def get(self, key):\n"
            "        if key:\n"
            "            return key\n"
            "\n"
            "    def _reset(self):\n"
            "        pass\n"
        )
        cls = result.classes[0]
        assert cls.name == "Repo"
        assert cls.kind == ClassKind.CLASS
        assert cls.base_classes == ["Base", "Generic[T]"]
        assert cls.has_docstring
        assert cls.is_public
        assert [m.name for m in cls.methods] == ["get", "_reset"]
        assert cls.methods[0].complexity == 2
        assert not cls.methods[1].is_public
        assert (cls.line_start, cls.line_end) == (1, 9)
        assert result.functions == []

    def test_fields(self):
        result = _parse(
            "class Point:\n"
            "    x: int\n"
            "    y: int = 0\n"
            "    label = 'p'\n"
            "\n"
            "    def norm(self):\n"
            "        total = self.x + self.y\n"
            "        return total\n"
        )
        assert result.classes[0].fields == ["x: int", "y: int", "label"]

    def test_function_after_class_is_top_level(self):
        result = _parse("class A:\n    def m(self):\n        pass\n\ndef f():\n    pass\n")
        assert [m.name for m in result.classes[0].methods] == ["m"]
        assert [f.name for f in result.functions] == ["f"]

    def test_class_inside_function_is_not_recorded(self):
        result = _parse(
            "def outer():\n"
            "    class Inner:\n"
            "        def m(self):\n"
            "            if self:\n"
            "                pass\n"
            "    return Inner\n"
        )
        assert result.classes == []
        assert [f.name for f in result.functions] == ["outer"]
        assert result.functions[0].complexity == 2
        assert sum(f.complexity for f in result.all_functions()) == 2

    def test_dunder_methods_are_public(self):
        assert is_public_name("__init__")
        assert not is_public_name("__private")
        assert not is_public_name("_internal")


# ── imports ────────────────────────────────────────────────────


class TestImports:
    def test_import_forms(self):
        result = _parse(
            "import os, sys as system\n"
            "import xml.etree.ElementTree as ET\n"
            "from collections import OrderedDict, defaultdict as dd\n"
            "from . import utils\n"
            "from ..core import (\n"
            "    Engine,\n"
            "    Config,\n"
            ")\n"
            "from typing import *\n"
        )
        assert result.imports == [
            "os",
            "sys",
            "xml.etree.ElementTree",
            "collections.OrderedDict",
            "collections.defaultdict",
            ".utils",
            "..core.Engine",
            "..core.Config",
            "typing",
        ]
        assert result.import_count == 9

    def test_imports_inside_functions_are_collected(self):
        result = _parse("def lazy():\n    import json\n    return json\n")
        assert result.imports == ["json"]


# ── malformed input ────────────────────────────────────────────


class TestMalformedInput:
    def test_malformed_def_recorded_not_raised(self):
        result = _parse("def broken x:\n    pass\n\ndef ok():\n    pass\n")
        assert result.has_errors
        assert [f.name for f in result.functions] == ["ok"]

    def test_unterminated_string_recorded(self):
        result = _parse('def f():\n    """never closed\n    return 1\n')
        assert any("unterminated" in e.message for e in result.errors)
        assert [f.name for f in result.functions] == ["f"]

    def test_unclosed_bracket_recorded(self):
        result = _parse("x = [1, 2,\n")
        assert result.errors[0].line == 1
        assert "open brackets" in result.errors[0].message
