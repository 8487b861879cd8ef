import io
import json

import pytest

from calcserve.cli import main, run_eval


def test_eval_arguments(capsys):
    code = main(["eval", "2+3*5", "10/4", "-5+3"])
    out = capsys.readouterr().out
    assert code == 0
    assert out.splitlines() == ["17", "2.5", "-2"]


def test_eval_error_sets_exit_code(capsys):
    code = main(["eval", "1+1", "3/0"])
    captured = capsys.readouterr()
    assert code == 1
    assert captured.out.splitlines() == ["2"]
    assert "error: Cannot divide by zero" in captured.err


def test_eval_json(capsys):
    code = main(["eval", "--json", "2$3"])
    line = capsys.readouterr().out.strip()
    assert code == 1
    data = json.loads(line)
    assert data["error"] == "invalid_character"
    assert data["detail"]["char"] == "$"


def test_eval_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("1+1\n\n(2+3)*2\n"))
    code = main(["eval"])
    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["2", "10"]


def test_run_eval_streams():
    out, err = io.StringIO(), io.StringIO()
    code = run_eval(["π×2", ""], out=out, err=err)
    assert code == 1
    assert out.getvalue() == "6.283185307179586\n"
    assert err.getvalue() == "error: Empty expression\n"


def test_no_command_prints_help(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().out


def test_eval_leading_unary_minus(capsys):
    code = main(["eval", "-5+3", "2*-1", "-0.5*4"])
    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["-2", "-2", "-2"]


def test_eval_json_leading_unary_minus(capsys):
    code = main(["eval", "--json", "-5+3"])
    assert code == 0
    data = json.loads(capsys.readouterr().out.strip())
    assert data["success"] is True
    assert data["result"] == "-2"


def test_eval_json_flag_after_expression(capsys):
    code = main(["eval", "-5+3", "--json"])
    assert code == 0
    assert json.loads(capsys.readouterr().out.strip())["result"] == "-2"


def test_eval_double_dash_separator(capsys):
    code = main(["eval", "--", "-5+3"])
    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["-2"]


def test_eval_stdin_leading_unary_minus(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("-5+3\n-1*-1\n"))
    code = main(["eval", "-"])
    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["-2", "1"]


def test_serve_rejects_unknown_arguments():
    with pytest.raises(SystemExit) as exc_info:
        main(["serve", "--bogus"])
    assert exc_info.value.code == 2
