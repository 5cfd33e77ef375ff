"""Tests for the command line entry point."""

import json
import pytest
from pathlib import Path

from cli import main, parse_args


FOO = "App.Foo = SC.Object.extend({});\n"
USES_FOO = "var x = App.Foo.create();\n"


def make_app(tmp_path: Path, parent: str = "apps") -> Path:
    root = tmp_path / parent / "my_app"
    root.mkdir(parents=True)
    (root / "a.js").write_text(FOO)
    (root / "b.js").write_text(USES_FOO)
    return root


class TestArguments:
    """Tests for argument parsing."""

    def test_required_arguments(self):
        """Test root and namespace are both required."""
        with pytest.raises(SystemExit):
            parse_args(["/some/apps/app"])

    def test_check_and_dry_run_exclusive(self):
        """Test --check and --dry-run cannot be combined."""
        with pytest.raises(SystemExit):
            parse_args(["/some/apps/app", "App", "--check", "--dry-run"])

    def test_defaults(self):
        """Test default option values."""
        parsed = parse_args(["/some/apps/app", "App"])

        assert parsed.namespace == "App"
        assert not parsed.verbose
        assert parsed.report is None


class TestMain:
    """Tests for full command runs."""

    def test_rewrites_files(self, tmp_path, capsys):
        """Test a normal run rewrites the app."""
        root = make_app(tmp_path)

        assert main([str(root), "App"]) == 0

        assert "sc_require('a');" in (root / "b.js").read_text()
        out = capsys.readouterr().out
        assert "Scanning for definitions" in out
        assert "Scanning for usage" in out

    def test_wrong_parent_directory(self, tmp_path, capsys):
        """Test the run aborts when the parent is not 'apps'."""
        root = make_app(tmp_path, parent="frameworks")

        assert main([str(root), "App"]) == 1

        assert (root / "b.js").read_text() == USES_FOO
        assert "parent directory should be apps" in capsys.readouterr().err

    def test_missing_root(self, tmp_path, capsys):
        """Test the run aborts when the root does not exist."""
        assert main([str(tmp_path / "apps" / "nope"), "App"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_namespace(self, tmp_path):
        """Test the run aborts on a bad namespace."""
        root = make_app(tmp_path)

        assert main([str(root), "not-a-name"]) == 1
        assert (root / "b.js").read_text() == USES_FOO

    def test_check_mode(self, tmp_path, capsys):
        """Test --check fails on stale files and passes after a run."""
        root = make_app(tmp_path)

        assert main([str(root), "App", "--check"]) == 1
        assert (root / "b.js").read_text() == USES_FOO
        assert "Would rewrite: b.js" in capsys.readouterr().err

        assert main([str(root), "App"]) == 0
        assert main([str(root), "App", "--check"]) == 0

    def test_json_report(self, tmp_path):
        """Test writing a JSON report to a file."""
        root = make_app(tmp_path)
        report = tmp_path / "report.json"

        assert main([str(root), "App", "--dry-run", "--report", "json", "-o", str(report)]) == 0

        data = json.loads(report.read_text())
        assert data["definitions"] == {"Foo": "a"}
        assert {"source": "b", "target": "a"} in data["edges"]
        assert (root / "b.js").read_text() == USES_FOO

    def test_ascii_report(self, tmp_path, capsys):
        """Test printing the require tree."""
        root = make_app(tmp_path)

        assert main([str(root), "App", "--report", "ascii"]) == 0

        assert "b\n└── a" in capsys.readouterr().out

    def test_config_file(self, tmp_path):
        """Test header text from a config file in the app root."""
        root = make_app(tmp_path)
        (root / "screquire.yaml").write_text("project: My App\ncopyright: 2024 Me\nglobals: [App, SCUI]\n")

        assert main([str(root), "App"]) == 0

        content = (root / "a.js").read_text()
        assert "// Project:   My App\n" in content
        assert "// Copyright: 2024 Me\n" in content
        assert "/*globals App SCUI */\n" in content

    def test_failed_file_exit_status(self, tmp_path):
        """Test unreadable files make the run fail after processing the rest."""
        root = make_app(tmp_path)
        (root / "bad.js").write_bytes(b"\xff\xfe")

        assert main([str(root), "App"]) == 1
        assert "sc_require('a');" in (root / "b.js").read_text()
