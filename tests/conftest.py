"""Shared test fixtures for Codebase Reader tests."""

import time
from pathlib import Path

import pytest

from codebase_reader.exceptions import ParsingError
from codebase_reader.scanning import FunctionInfo, Parser, ParserRegistry


class StubParser(Parser):
    """Parser for ``.stub`` files.

    Every file gets one function of complexity 1 plus one import per line
    starting with ``use ``. Files whose name contains a ``fail_on`` marker
    raise ParsingError; a positive ``delay`` makes every parse sleep.
    """

    def __init__(self, extensions=(".stub",), fail_on=(), delay=0.0, language="Stub"):
        self._extensions = set(extensions)
        self.fail_on = tuple(fail_on)
        self.delay = delay
        self._language = language

    def supported_extensions(self):
        return set(self._extensions)

    def language_name(self):
        return self._language

    def parse(self, path, content):
        if self.delay:
            time.sleep(self.delay)
        if any(marker in Path(path).name for marker in self.fail_on):
            raise ParsingError(path, self._language, "stub failure")
        text = self.decode(path, content)
        result = self.new_result(path, text)
        result.functions.append(FunctionInfo(name="main", line_start=1, line_end=1))
        for line in text.splitlines():
            if line.startswith("use "):
                result.imports.append(line[4:].strip())
        return result


def write_tree(root: Path, files: dict) -> Path:
    """Create ``files`` (relative path -> text) under ``root``."""
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def stub_parser():
    return StubParser()


@pytest.fixture
def stub_registry(stub_parser):
    """Registry holding only the stub parser."""
    registry = ParserRegistry()
    registry.register(stub_parser)
    return registry


@pytest.fixture
def make_tree(tmp_path):
    """Factory writing a file tree under a fresh temporary directory."""

    def _make(files: dict) -> Path:
        return write_tree(tmp_path, files)

    return _make


@pytest.fixture
def go_project(tmp_path):
    """Small Go module with a package, a test file and a vendored dependency."""
    return write_tree(
        tmp_path,
        {
            "go.mod": "module example.com/shop\n\ngo 1.22\n",
            "main.go": (
                "package main\n"
                "\n"
                'import "example.com/shop/cart"\n'
                "\n"
                "// main starts the shop.\n"
                "func main() {\n"
                "\tcart.New()\n"
                "}\n"
            ),
            "cart/cart.go": (
                "package cart\n"
                "\n"
                "import (\n"
                '\t"fmt"\n'
                '\t"github.com/google/uuid"\n'
                ")\n"
                "\n"
                "// Cart holds items.\n"
                "type Cart struct {\n"
                "\tID    string\n"
                "\titems []string\n"
                "}\n"
                "\n"
                "// New creates an empty cart.\n"
                "func New() *Cart {\n"
                '\treturn &Cart{ID: uuid.NewString()}\n'
                "}\n"
                "\n"
                "func (c *Cart) Add(item string) {\n"
                '\tif item == "" || len(item) > 64 {\n'
                "\t\treturn\n"
                "\t}\n"
                "\tc.items = append(c.items, item)\n"
                '\tfmt.Println("added", item)\n'
                "}\n"
            ),
            "cart/cart_test.go": (
                "package cart\n"
                "\n"
                'import "testing"\n'
                "\n"
                "func TestAdd(t *testing.T) {\n"
                "\tc := New()\n"
                '\tc.Add("apple")\n'
                "}\n"
            ),
            "vendor/github.com/google/uuid/uuid.go": "package uuid\n\nfunc NewString() string { return \"\" }\n",
        },
    )


@pytest.fixture
def python_project(tmp_path):
    """Small Python package with relative and third-party imports."""
    return write_tree(
        tmp_path,
        {
            "shop/__init__.py": "",
            "shop/cart.py": (
                '"""Shopping cart."""\n'
                "\n"
                "import json\n"
                "\n"
                "import requests\n"
                "\n"
                "from .pricing import total\n"
                "\n"
                "\n"
                "class Cart:\n"
                '    """A cart."""\n'
                "\n"
                "    currency: str = 'EUR'\n"
                "\n"
                "    def __init__(self):\n"
                "        self.items = []\n"
                "\n"
                "    def add(self, item, quantity=1):\n"
                "        if quantity > 0 and item:\n"
                "            self.items.append((item, quantity))\n"
                "\n"
                "    def dump(self):\n"
                "        return json.dumps(self.items)\n"
            ),
            "shop/pricing.py": (
                "# Price calculations\n"
                "\n"
                "\n"
                "def total(items):\n"
                '    """Sum item prices."""\n'
                "    result = 0\n"
                "    for price, quantity in items:\n"
                "        result += price * quantity\n"
                "    return result\n"
            ),
            "node_modules/left-pad/index.py": "def pad():\n    pass\n",
        },
    )


@pytest.fixture
def make_stub():
    """Factory for stub parsers with custom failure markers or delays."""
    return StubParser
