"""
Command line tests for Lumen
"""

import builtins

import pytest
import main


@pytest.fixture
def script(tmp_path):
  path = tmp_path / "program.lm"
  path.write_text("(+ 1 2)\n(<= 8 2) ; comment\n((x => x) \"hi\")\n", encoding="utf-8")
  return path


@pytest.fixture
def no_readline(monkeypatch):
  monkeypatch.setattr(main, "READLINE_AVAILABLE", False)


def feed_input(monkeypatch, lines):
  remaining = iter(lines)

  def fake_input(prompt=""):
    try:
      return next(remaining)
    except StopIteration:
      raise EOFError
  monkeypatch.setattr(builtins, "input", fake_input)


class TestScripts:

  def test_run_script(self, script, capsys):
    main.main([str(script)])
    assert capsys.readouterr().out.splitlines() == ["3.0", "false", '"hi"']

  def test_eval_expression(self, capsys):
    main.main(["-e", "(* 2 3)"])
    assert capsys.readouterr().out.strip() == "6.0"

  def test_runtime_error_exits(self, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main(["-e", "(/ 1 0)"])
    assert exc_info.value.code == 1
    assert "DivisionByZero" in capsys.readouterr().out

  def test_script_error_exits(self, tmp_path, capsys):
    path = tmp_path / "bad.lm"
    path.write_text("(+ 1 2)\n(nope 1)\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
      main.main([str(path)])
    assert exc_info.value.code == 1
    assert "UnboundIdentifier: unbound identifier: nope" in capsys.readouterr().out

  def test_parse_error_exits(self, capsys):
    with pytest.raises(SystemExit):
      main.main(["-e", "(+ 1"])
    assert "Parse error" in capsys.readouterr().out

  def test_missing_script(self, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main([str(tmp_path / "missing.lm")])
    assert exc_info.value.code == 1
    assert "does not exist" in capsys.readouterr().out

  def test_directory_as_script(self, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main.main([str(tmp_path)])
    assert exc_info.value.code == 1
    assert "Cannot read" in capsys.readouterr().out

  def test_parse_flag(self, script, capsys):
    main.main(["--parse", str(script)])
    out = capsys.readouterr().out
    assert "Parsed 3 top-level expression(s)" in out
    assert "Expression 1: (+ 1 2)" in out
    assert "Lambda(x)" in out

  def test_debug_flag(self, capsys):
    main.main(["--debug", "-e", "(+ 1 2)"])
    out = capsys.readouterr().out
    assert "Evaluating: Application" in out
    assert out.strip().endswith("3.0")

  def test_deep_recursion_reported(self, capsys):
    source = "((f => (f f 100000)) (self n => (if (<= n 0) 0 (self self (- n 1)))))"
    with pytest.raises(SystemExit):
      main.main(["-e", source])
    assert "recursion too deep" in capsys.readouterr().out


class TestInteractive:

  def test_repl_session(self, monkeypatch, capsys, no_readline):
    feed_input(monkeypatch, [
        "(+ 1 2)",
        "",
        ":parse (x => x)",
        "(nope)",
        "(+ 1",
        ":help",
        "exit",
        "(* 100 100)",
    ])
    main.main(["-i"])
    out = capsys.readouterr().out
    assert "=> 3.0" in out
    assert "Lambda(x)" in out
    assert "Error: UnboundIdentifier" in out
    assert "Parse error" in out
    assert "REPL Commands" in out
    assert "10000.0" not in out

  def test_repl_end_of_input(self, monkeypatch, capsys, no_readline):
    feed_input(monkeypatch, [":env"])
    main.main(["-i"])
    out = capsys.readouterr().out
    assert "Primitives: + - * / <= equal? true false error" in out
    assert "Goodbye!" in out

  def test_repl_lists_extra_bindings(self, monkeypatch, capsys, no_readline, env):
    feed_input(monkeypatch, [":env", "(+ x 1)"])
    main.run_interactive_mode(global_env=env)
    out = capsys.readouterr().out
    assert "  x = 8.0" in out
    assert "=> 9.0" in out
