"""Test the command-line interface."""

import subprocess
import sys

import pytest

from parseutil.__main__ import main
from parsetest import CALC_GRAMMAR


@pytest.fixture
def grammar(tmp_path):
    path = tmp_path / "calc.lark"
    path.write_text(CALC_GRAMMAR, encoding="utf-8")
    return path


def _input(tmp_path, text):
    path = tmp_path / "input.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_cli_dump(grammar, tmp_path):
    source = _input(tmp_path, "1 + 2")
    result = subprocess.run(
        [sys.executable, "-m", "parseutil", str(grammar), str(source), "--parser", "lalr"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, f"CLI failed: {result.stderr}"
    assert result.stdout == (
        'binary (value: "+") [1/1]\n'
        '    number (value: "1") [1/1]\n'
        '    number (value: "2") [1/5]\n'
    )


def test_cli_parse_error(grammar, tmp_path, capsys):
    source = _input(tmp_path, "1 + * 2")
    code = main([str(grammar), str(source), "--parser", "lalr"])
    assert code == 1
    lines = capsys.readouterr().err.rstrip("\n").split("\n")
    assert lines[0] == "ERROR: Parsing Failure:"
    assert lines[1] == "ERROR: line 1 (column 5): 1 + * 2"
    assert lines[2] == "ERROR: " + "-" * 23 + "^"
    assert lines[3].startswith("ERROR: Unexpected token")
    assert len(lines) == 4


def test_cli_start_rule(grammar, tmp_path, capsys):
    source = _input(tmp_path, "42")
    code = main([str(grammar), str(source), "--start", "start"])
    assert code == 0
    assert capsys.readouterr().out == 'number (value: "42") [1/1]\n'


def test_cli_missing_input(grammar, tmp_path, capsys):
    code = main([str(grammar), str(tmp_path / "missing.txt")])
    assert code == 2
    assert "Error:" in capsys.readouterr().err


def test_cli_bad_grammar(tmp_path, capsys):
    path = tmp_path / "bad.lark"
    path.write_text("start: ???\n", encoding="utf-8")
    source = _input(tmp_path, "x")
    code = main([str(path), str(source)])
    assert code == 2
    assert "invalid grammar" in capsys.readouterr().err


def test_cli_no_args():
    result = subprocess.run(
        [sys.executable, "-m", "parseutil"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 2
    assert "usage" in result.stderr.lower()
