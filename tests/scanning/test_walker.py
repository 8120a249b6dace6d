"""Tests for scanning/walker.py - discovery, patterns and gitignore rules."""

import sys

import pytest

from codebase_reader.config import AnalysisConfig
from codebase_reader.scanning import FileWalker
from codebase_reader.scanning.walker import (
    load_gitignore_rules,
    matches_gitignore_rule,
    matches_pattern,
    matches_wildcard,
)


def _walk(walker, root):
    """Relative, slash-separated paths of the successful walk entries."""
    return [
        item.path.relative_to(root).as_posix()
        for item in walker.walk(str(root))
        if item.ok
    ]


# ── pattern matching ───────────────────────────────────────────


class TestMatchesPattern:
    def test_exact_match(self):
        assert matches_pattern("src/main.go", "src/main.go")

    def test_component_match(self):
        """A bare name matches any component of the path."""
        assert matches_pattern("vendor", "a/vendor/b.go")
        assert not matches_pattern("vend", "a/vendor/b.go")

    def test_case_insensitive(self):
        assert matches_pattern("Vendor", "VENDOR")

    def test_wildcard_forms(self):
        assert matches_wildcard("*", "anything")
        assert matches_wildcard("*.pb.go", "api.pb.go")
        assert matches_wildcard("*gen*", "codegen_util.go")
        assert matches_wildcard("mock_*", "mock_store.go")
        assert matches_wildcard("*_gen.go", "types_gen.go")
        assert not matches_wildcard("mock_*", "store_mock.go")


class TestGitignoreRules:
    def test_dir_only_rule_matches_directories(self):
        assert matches_gitignore_rule("build/", "build", is_dir=True)
        assert matches_gitignore_rule("build/", "build/out.py", is_dir=False)
        assert matches_gitignore_rule("build/", "pkg/build", is_dir=True)

    def test_dir_only_rule_skips_files(self):
        assert not matches_gitignore_rule("build/", "build", is_dir=False)

    def test_anchored_rule_only_matches_at_root(self):
        assert matches_gitignore_rule("/dist", "dist", is_dir=True)
        assert matches_gitignore_rule("/dist", "dist/app.py", is_dir=False)
        assert not matches_gitignore_rule("/dist", "src/dist", is_dir=True)

    def test_anchored_wildcard_stays_at_root(self):
        assert matches_gitignore_rule("/*.py", "setup.py", is_dir=False)
        assert not matches_gitignore_rule("/*.py", "pkg/nested.py", is_dir=False)
        assert matches_gitignore_rule("/build*/", "build-x/out.py", is_dir=False)
        assert not matches_gitignore_rule("/build*/", "build-x", is_dir=False)

    def test_unanchored_rule_matches_anywhere(self):
        assert matches_gitignore_rule("*.gen.py", "pkg/models.gen.py", is_dir=False)
        assert matches_gitignore_rule("generated", "a/generated/x.py", is_dir=False)

    def test_negation_never_matches(self):
        assert not matches_gitignore_rule("!keep.py", "keep.py", is_dir=False)

    def test_load_rules_skips_comments_and_blanks(self, make_tree):
        root = make_tree({".gitignore": "# comment\n\nbuild/\n  *.tmp  \n"})
        assert load_gitignore_rules(str(root)) == ["build/", "*.tmp"]

    def test_missing_gitignore_yields_no_rules(self, tmp_path):
        assert load_gitignore_rules(str(tmp_path)) == []


# ── walking ────────────────────────────────────────────────────


class TestWalk:
    def test_yields_supported_files_in_sorted_order(self, stub_registry, make_tree):
        root = make_tree(
            {
                "b.stub": "x",
                "a.stub": "x",
                "readme.md": "docs",
                "sub/c.stub": "x",
            }
        )
        walker = FileWalker(stub_registry)
        assert _walk(walker, root) == ["a.stub", "b.stub", "sub/c.stub"]

    def test_every_entry_has_its_parser(self, stub_registry, stub_parser, make_tree):
        root = make_tree({"a.stub": "x"})
        items = list(FileWalker(stub_registry).walk(str(root)))
        assert [item.parser for item in items] == [stub_parser]

    def test_default_excludes_prune_directories(self, stub_registry, make_tree):
        """vendor/, node_modules/ and .git/ contents are never visited."""
        root = make_tree(
            {
                "main.stub": "x",
                "vendor/lib/dep.stub": "x",
                "node_modules/pkg/index.stub": "x",
                ".git/hooks/pre.stub": "x",
            }
        )
        assert _walk(FileWalker(stub_registry), root) == ["main.stub"]

    def test_custom_exclude_patterns(self, stub_registry, make_tree):
        root = make_tree({"keep.stub": "x", "mock_db.stub": "x", "gen/out.stub": "x"})
        config = AnalysisConfig(exclude_patterns=["mock_*", "gen"])
        assert _walk(FileWalker(stub_registry, config), root) == ["keep.stub"]

    def test_include_patterns_are_an_allow_list(self, stub_registry, make_tree):
        root = make_tree({"api.stub": "x", "db.stub": "x", "sub/api_v2.stub": "x"})
        config = AnalysisConfig(include_patterns=["api*"])
        assert _walk(FileWalker(stub_registry, config), root) == ["api.stub", "sub/api_v2.stub"]

    def test_gitignore_rules_applied(self, stub_registry, make_tree):
        root = make_tree(
            {
                ".gitignore": "build/\n*.tmp.stub\n",
                "main.stub": "x",
                "scratch.tmp.stub": "x",
                "build/out.stub": "x",
            }
        )
        assert _walk(FileWalker(stub_registry), root) == ["main.stub"]

    def test_anchored_gitignore_rule_keeps_nested_files(self, stub_registry, make_tree):
        root = make_tree({".gitignore": "/*.stub\n", "a.stub": "x", "pkg/b.stub": "x"})
        assert _walk(FileWalker(stub_registry), root) == ["pkg/b.stub"]

    def test_oversize_files_skipped_silently(self, stub_registry, make_tree):
        root = make_tree({"small.stub": "x", "big.stub": "x" * 100})
        items = list(FileWalker(stub_registry, AnalysisConfig(max_file_size=10)).walk(str(root)))
        assert [i.path.name for i in items] == ["small.stub"]
        assert all(i.ok for i in items)

    def test_walk_is_restartable(self, stub_registry, make_tree):
        root = make_tree({"a.stub": "x", "d/b.stub": "x"})
        walker = FileWalker(stub_registry)
        assert _walk(walker, root) == _walk(walker, root)

    def test_walk_is_lazy(self, stub_registry, make_tree):
        root = make_tree({"a.stub": "x", "b.stub": "x"})
        walk = FileWalker(stub_registry).walk(str(root))
        first = next(walk)
        assert first.path.name == "a.stub"

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_broken_symlink_reported_and_walk_continues(self, stub_registry, make_tree):
        root = make_tree({"a.stub": "x", "z.stub": "x"})
        (root / "m.stub").symlink_to(root / "missing.stub")

        items = list(FileWalker(stub_registry).walk(str(root)))
        errors = [i for i in items if not i.ok]
        assert len(errors) == 1
        assert errors[0].path.name == "m.stub"
        assert [i.path.name for i in items if i.ok] == ["a.stub", "z.stub"]


# ── stats ──────────────────────────────────────────────────────


class TestWalkStats:
    def test_counts(self, stub_registry, make_tree):
        root = make_tree(
            {
                "a.stub": "x",
                "b.md": "x",
                "mock_c.stub": "x",
                "vendor/d.stub": "x",
            }
        )
        config = AnalysisConfig(exclude_patterns=["vendor", "mock_*"])
        stats = FileWalker(stub_registry, config).stats(str(root))

        assert stats.total_files == 3
        assert stats.excluded_files == 1
        assert stats.supported_files == 1
        assert stats.directories_skipped == 1
        assert stats.files_by_extension == {"md": 1, "stub": 1}
        assert stats.errors == 0
