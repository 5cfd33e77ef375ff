"""Tests for the two-pass processor on real app trees."""

import os
import pytest
from pathlib import Path

from graph.model import SymbolTableFrozen
from scanner.builder import build_symbol_table, inject_all, process_app
from scanner.config import ProcessorConfig
from scanner.injector import inject_requires, license_header, render
from scanner.patterns import SourcePatterns
from scanner.usages import UsageScan


FOO = "App.Foo = SC.Object.extend({\n  size: 1\n});\n"
USES_FOO = "var x = App.Foo.create();\n"


def make_app(tmp_path: Path, files: dict) -> Path:
    root = tmp_path / "apps" / "my_app"
    root.mkdir(parents=True)
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def header(config: ProcessorConfig) -> str:
    return "".join(line + "\n" for line in license_header(config))


@pytest.fixture
def config():
    return ProcessorConfig(namespace="App")


class TestRender:
    """Tests for building the rewritten content."""

    def test_license_header(self, config):
        """Test the banner layout."""
        lines = license_header(config)

        assert len(lines) == 5
        assert lines[0] == "// " + "=" * 74
        assert lines[1] == "// Project:   App"
        assert lines[2] == "// Copyright:"
        assert lines[3] == lines[0]
        assert lines[4] == "/*globals App */"

    def test_render_layout(self, config):
        """Test header, sorted requires, then content."""
        scan = UsageScan(module="main", requires={"z", "a"}, content=["var x;"])

        output = render(scan, config)

        assert output == header(config) + "sc_require('a');\nsc_require('z');\nvar x;\n"


class TestProcessApp:
    """Tests for running both passes."""

    def test_definition_and_usage(self, tmp_path, config):
        """Test a user of App.Foo requires the defining module."""
        root = make_app(tmp_path, {"a.js": FOO, "b.js": USES_FOO})

        graph = process_app(root, config)

        assert (root / "b.js").read_text() == header(config) + "sc_require('a');\n" + USES_FOO
        assert (root / "a.js").read_text() == header(config) + FOO
        assert graph.get_requires("b") == ["a"]
        assert graph.get_requires("a") == []
        assert graph.rewritten == {"a", "b"}

    def test_idempotent(self, tmp_path, config):
        """Test a second run produces the same files."""
        root = make_app(tmp_path, {
            "a.js": FOO,
            "b.js": "/* @ignore */ sc_require('lib/manual');\n" + USES_FOO,
            "views/main.js": "App.MainView = SC.View.design({\n  foo: App.Foo\n});\n",
        })

        process_app(root, config)
        first = {p.name: p.read_text() for p in root.rglob("*.js")}
        graph = process_app(root, config)
        second = {p.name: p.read_text() for p in root.rglob("*.js")}

        assert first == second
        assert graph.rewritten == set()

    def test_function_body_usage(self, tmp_path, config):
        """Test usages inside a function body add no require."""
        c_js = (
            "App.Bar = SC.Object.extend({\n"
            "  go: function() {\n"
            "    return App.Foo.create();\n"
            "  }\n"
            "});\n"
        )
        root = make_app(tmp_path, {"a.js": FOO, "c.js": c_js})

        graph = process_app(root, config)

        assert graph.get_requires("c") == []
        assert "sc_require" not in (root / "c.js").read_text()

    def test_sorted_requires(self, tmp_path, config):
        """Test requires are sorted and unique."""
        root = make_app(tmp_path, {
            "a.js": FOO,
            "m.js": "App.Mid = SC.Object.extend({});\n",
            "z/zed.js": "App.Zed = function() {};\n",
            "d.js": "App.Zed();\nApp.Foo.create(App.Mid);\nApp.Foo.create();\n",
        })

        process_app(root, config)

        lines = (root / "d.js").read_text().splitlines()
        assert lines[5:8] == ["sc_require('a');", "sc_require('m');", "sc_require('z/zed');"]
        assert lines[8] == "App.Zed();"

    def test_bootstrap_excluded(self, tmp_path, config):
        """Test the bootstrap file is never scanned nor rewritten."""
        core = "App = SC.Application.create();\nApp.Core = SC.Object.extend({});\n"
        root = make_app(tmp_path, {
            "core.js": core,
            "b.js": "sc_require('core');\nApp.Core.go();\n",
        })

        graph = process_app(root, config)

        assert (root / "core.js").read_text() == core
        assert "core" not in graph
        assert (root / "b.js").read_text() == header(config) + "sc_require('core');\nApp.Core.go();\n"

    def test_manual_require_preserved(self, tmp_path, config):
        """Test annotated requires survive and are not resolved usages."""
        manual = "/* @ignore */ sc_require('lib/manual');"
        root = make_app(tmp_path, {"a.js": FOO, "b.js": manual + "\n" + USES_FOO})

        process_app(root, config)
        process_app(root, config)

        content = (root / "b.js").read_text()
        assert content.count(manual) == 1
        assert content == header(config) + "sc_require('a');\n" + manual + "\n" + USES_FOO

    def test_stale_requires_replaced(self, tmp_path, config):
        """Test requires that no longer apply are dropped."""
        root = make_app(tmp_path, {
            "a.js": FOO,
            "b.js": "sc_require('gone');\nsc_require('a');\nvar y = 1;\n",
        })

        process_app(root, config)

        assert (root / "b.js").read_text() == header(config) + "var y = 1;\n"

    def test_conflicting_definitions(self, tmp_path, config):
        """Test the later file in traversal order wins."""
        root = make_app(tmp_path, {
            "a_dup.js": "App.Dup = SC.Object.extend({});\n",
            "b_dup.js": "App.Dup = SC.Object.extend({});\n",
            "user.js": "App.Dup.create();\n",
        })

        graph = process_app(root, config)

        assert graph.symbols.conflicts == {"Dup": ["a_dup", "b_dup"]}
        assert graph.get_requires("user") == ["b_dup"]

    def test_symlinked_file_outside_root(self, tmp_path, config):
        """Test a linked file is required by its path inside the app."""
        root = make_app(tmp_path, {"b.js": USES_FOO})
        shared = tmp_path / "shared"
        shared.mkdir()
        (shared / "foo.js").write_text(FOO)
        (root / "foo.js").symlink_to(Path("..") / ".." / "shared" / "foo.js")

        graph = process_app(root, config)

        assert (root / "b.js").read_text() == header(config) + "sc_require('foo');\n" + USES_FOO
        assert graph.nodes == {"b", "foo"}

    def test_symlinked_file_inside_root(self, tmp_path, config):
        """Test a link to another app file keeps its own identifier."""
        root = make_app(tmp_path, {"a.js": FOO})
        (root / "views").mkdir()
        (root / "views" / "alias.js").symlink_to(Path("..") / "a.js")

        graph = process_app(root, config, write=False)

        assert graph.nodes == {"a", "views/alias"}

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="file permissions are not enforced for root",
    )
    def test_unwritable_file_skipped(self, tmp_path, config):
        """Test a read-only file is reported and the others are still rewritten."""
        root = make_app(tmp_path, {"a.js": FOO, "b.js": USES_FOO})
        locked = root / "a.js"
        locked.chmod(0o444)

        try:
            graph = process_app(root, config)
        finally:
            locked.chmod(0o644)

        assert "a" in graph.failed
        assert locked.read_bytes() == FOO.encode("utf-8")
        assert (root / "b.js").read_text() == header(config) + "sc_require('a');\n" + USES_FOO
        assert graph.rewritten == {"b"}

    def test_unreadable_file_skipped(self, tmp_path, config):
        """Test one bad file does not stop the run."""
        root = make_app(tmp_path, {"a.js": FOO, "b.js": USES_FOO})
        (root / "bad.js").write_bytes(b"\xff\xfe App.Foo \x00")

        graph = process_app(root, config)

        assert "bad" in graph.failed
        assert graph.get_requires("b") == ["a"]
        assert (root / "bad.js").read_bytes() == b"\xff\xfe App.Foo \x00"

    def test_dry_run(self, tmp_path, config):
        """Test nothing is written in a dry run."""
        root = make_app(tmp_path, {"a.js": FOO, "b.js": USES_FOO})

        graph = process_app(root, config, write=False)

        assert (root / "b.js").read_text() == USES_FOO
        assert graph.rewritten == {"a", "b"}
        assert graph.get_requires("b") == ["a"]


class TestPasses:
    """Tests for the separate passes."""

    def test_symbol_table_frozen(self, tmp_path, config):
        """Test the definition pass hands over a read-only table."""
        root = make_app(tmp_path, {"a.js": FOO, "views/list.js": "App.ListView = SC.ListView.extend({});\n"})

        symbols = build_symbol_table(root, config)

        assert symbols.frozen
        assert dict(symbols.items()) == {"Foo": "a", "ListView": "views/list"}
        with pytest.raises(SymbolTableFrozen):
            symbols.define("Other", "x")

    def test_inject_all_freezes(self, tmp_path, config):
        """Test the usage pass never runs on a writable table."""
        from graph.model import SymbolTable

        root = make_app(tmp_path, {"b.js": USES_FOO})
        symbols = SymbolTable()
        symbols.define("Foo", "a")

        inject_all(root, config, symbols, write=False)

        assert symbols.frozen

    def test_inject_requires_single_file(self, tmp_path, config):
        """Test rewriting a single file."""
        root = make_app(tmp_path, {"a.js": FOO, "b.js": USES_FOO})
        symbols = build_symbol_table(root, config)

        scan, changed = inject_requires(root / "b.js", root, config, SourcePatterns("App"), symbols)

        assert changed
        assert scan.module == "b"
        assert scan.sorted_requires == ["a"]

        scan, changed = inject_requires(root / "b.js", root, config, SourcePatterns("App"), symbols)
        assert not changed
