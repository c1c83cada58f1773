# tests/test_main.py
"""
Tests for the freevars command-line interface.
"""

import json
import logging

import pytest

from freevars import __version__
from freevars.errors import GeneratedVariableError
from freevars.main import (
    EXIT_ERROR,
    EXIT_INFRA,
    EXIT_INTERNAL,
    EXIT_OK,
    main,
)
from tests.conftest import FORWARD_REFERENCE, GENUINE_FREE, TWO_FREE

USES_MATH = "(program (expr (call (member-expression (id Math) max) 1 2)))"
USES_WINDOW = "(program (expr (id window)))"


@pytest.fixture(autouse=True)
def _detach_cli_logging():
    """main() installs a stderr handler; drop it after each test."""
    yield
    logger = logging.getLogger("freevars")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


class TestCheckCommand:

    def test_clean_program(self, tree_file, capsys):
        path = tree_file(FORWARD_REFERENCE)
        assert main(["check", str(path)]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_free_variable(self, tree_file, capsys):
        path = tree_file(GENUINE_FREE, "free.tree")
        assert main(["check", str(path)]) == EXIT_ERROR
        out = capsys.readouterr().out
        assert out.startswith(str(path) + ":4:")
        assert out.rstrip().endswith("error: zzz is not defined [FV-3000]")

    def test_source_order_output(self, tree_file, capsys):
        path = tree_file(TWO_FREE)
        main(["check", str(path), "--env", "none"])
        lines = capsys.readouterr().out.splitlines()
        assert [line.split(": ")[-1] for line in lines] == [
            "b is not defined [FV-3000]",
            "a is not defined [FV-3000]",
        ]

    def test_default_env_is_ecmascript(self, tree_file, monkeypatch):
        monkeypatch.delenv("FREEVARS_ENV", raising=False)
        path = tree_file(USES_MATH)
        assert main(["check", str(path)]) == EXIT_OK
        assert main(["check", str(path), "--env", "none"]) == EXIT_ERROR

    def test_env_variable(self, tree_file, monkeypatch):
        path = tree_file(USES_WINDOW)
        monkeypatch.setenv("FREEVARS_ENV", "browser")
        assert main(["check", str(path)]) == EXIT_OK
        monkeypatch.setenv("FREEVARS_ENV", "node")
        assert main(["check", str(path)]) == EXIT_ERROR

    def test_extra_globals(self, tree_file):
        path = tree_file(USES_WINDOW)
        assert main(["check", str(path), "-g", "window"]) == EXIT_OK

    def test_globals_file(self, tree_file, tmp_path):
        path = tree_file(USES_WINDOW)
        names = tmp_path / "globals.json"
        names.write_text(json.dumps(["window"]))
        assert main(["check", str(path), "--globals-file", str(names)]) == EXIT_OK

    def test_bad_globals_file(self, tree_file, tmp_path):
        path = tree_file(USES_WINDOW)
        names = tmp_path / "globals.json"
        names.write_text("[broken")
        assert main(["check", str(path), "--globals-file", str(names)]) == EXIT_INFRA

    def test_json_format(self, tree_file, capsys):
        path = tree_file(GENUINE_FREE)
        assert main(["check", str(path), "-f", "json"]) == EXIT_ERROR
        records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [r["name"] for r in records] == ["zzz"]
        assert records[0]["location"]["file"] == str(path)

    def test_summary_format(self, tree_file, capsys):
        first = tree_file(GENUINE_FREE, "a.tree")
        second = tree_file(FORWARD_REFERENCE, "b.tree")
        main(["check", str(first), str(second), "-f", "summary"])
        out = capsys.readouterr().out
        assert "--- 1 free variable(s) in 2 file(s) ---" in out

    def test_output_file(self, tree_file, tmp_path):
        path = tree_file(GENUINE_FREE)
        report = tmp_path / "out" / "report.txt"
        assert main(["check", str(path), "-o", str(report)]) == EXIT_ERROR
        assert "zzz is not defined" in report.read_text()

    def test_tree_syntax_error(self, tree_file, capsys):
        bad = tree_file("(program (expr (id x))", "bad.tree")
        good = tree_file(GENUINE_FREE, "good.tree")
        assert main(["check", str(bad), str(good)]) == EXIT_ERROR
        captured = capsys.readouterr()
        assert "[FV-1000]" in captured.err
        # The remaining files are still checked.
        assert "zzz is not defined" in captured.out

    def test_root_must_be_a_program(self, tree_file, capsys):
        path = tree_file("(expr (id x))")
        assert main(["check", str(path)]) == EXIT_ERROR
        assert "expected a program" in capsys.readouterr().err

    def test_missing_tree_file(self, tmp_path):
        assert main(["check", str(tmp_path / "nope.tree")]) == EXIT_INFRA

    def test_unknown_env(self, tree_file):
        path = tree_file(FORWARD_REFERENCE)
        assert main(["check", str(path), "--env", "deno"]) == EXIT_INFRA

    def test_internal_error(self, tree_file, monkeypatch):
        def explode(reporter, tree, ambient=None):
            raise GeneratedVariableError("$t")

        monkeypatch.setattr("freevars.main.check_program", explode)
        path = tree_file(FORWARD_REFERENCE)
        assert main(["check", str(path)]) == EXIT_INTERNAL


class TestDumpCommand:

    def test_sexp(self, tree_file, capsys):
        path = tree_file("(program (expr (id x)))")
        assert main(["dump", str(path)]) == EXIT_OK
        assert capsys.readouterr().out == (
            "(program (expression-statement (identifier-expression x)))\n"
        )

    def test_json(self, tree_file, capsys):
        path = tree_file("(program (expr (id x)))")
        assert main(["dump", str(path), "--format", "json"]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["type"] == "PROGRAM"
        assert data["elements"][0]["expression"]["name"] == "x"

    def test_repr(self, tree_file, capsys):
        path = tree_file("(program)")
        assert main(["dump", str(path), "--format", "repr"]) == EXIT_OK
        assert capsys.readouterr().out.startswith("Program(")

    def test_syntax_error(self, tree_file):
        path = tree_file("(program")
        assert main(["dump", str(path)]) == EXIT_ERROR


class TestGlobalsCommand:

    def test_lists_sorted_names(self, capsys):
        assert main(["globals", "--env", "node"]) == EXIT_OK
        names = capsys.readouterr().out.splitlines()
        assert names == sorted(names)
        assert "require" in names
        assert "toString" in names

    def test_includes_extra_globals(self, capsys):
        assert main(["globals", "--env", "none", "-g", "custom"]) == EXIT_OK
        assert capsys.readouterr().out == "custom\n"


class TestTopLevel:

    def test_no_command(self):
        assert main([]) == EXIT_INFRA

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_verbose_logging(self, tree_file, capsys):
        path = tree_file(GENUINE_FREE)
        main(["-vv", "check", str(path)])
        err = capsys.readouterr().err
        assert "freevars.checker" in err
        assert "Found 1 free variable(s)" in err
