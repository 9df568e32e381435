"""
Tests for the command line front end
"""

import pytest
import main


@pytest.fixture
def feed_input(monkeypatch):
  """Replace input() with a scripted sequence of lines, then EOF"""
  monkeypatch.setattr(main, "READLINE_AVAILABLE", False)

  def feed(*lines):
    remaining = list(lines)

    def fake_input(prompt=""):
      if not remaining:
        raise EOFError
      return remaining.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
  return feed


class TestSingleStatement:
  """Test evaluating one statement from the command line"""

  def test_value(self, capsys):
    assert main.main(["1+2"]) == 0
    assert capsys.readouterr().out == "=> 3.0\n"

  def test_error(self, capsys):
    assert main.main(["pi = 4"]) == 1
    assert capsys.readouterr().out == \
        "Evaluation Error: can't redefine built-in function or variable pi\n"

  def test_definition_prints_nothing(self, capsys):
    assert main.main(["f(x) = x"]) == 0
    assert capsys.readouterr().out == ""

  def test_parse_tree(self, capsys):
    assert main.main(["--parse", "1 + 2"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == [
        "EXPRESSION",
        "  CALL('+')",
        "    NUMBER(1.0)",
        "    NUMBER(2.0)",
    ]

  def test_parse_error(self, capsys):
    assert main.main(["--parse", "1 +"]) == 1
    out = capsys.readouterr().out
    assert out.startswith("Parse Error (line 1")
    assert out.count("\n") == 1

  def test_parse_without_statement(self, capsys):
    assert main.main(["--parse"]) == 2
    assert capsys.readouterr().out == "Error: --parse needs a statement\n"

  def test_debug_trace(self, capsys):
    assert main.main(["--debug", "neg(1)"]) == 0
    out = capsys.readouterr().out
    assert "Evaluating: CALL neg with 1 argument(s)" in out
    assert out.endswith("=> -1.0\n")


class TestInteractiveMode:
  """Test the REPL session loop"""

  def test_session_threads_environment(self, feed_input, capsys):
    feed_input("x = 2", "", "x 3", "ans + 1", "exit")
    assert main.main([]) == 0
    out = capsys.readouterr().out
    assert "=> 2.0\n=> 6.0\n=> 7.0\n" in out

  def test_error_keeps_environment(self, feed_input, capsys):
    feed_input("x = 2", "x = foo", "x")
    main.main(["-i"])
    out = capsys.readouterr().out
    assert "Evaluation Error: undefined function or variable foo\n" in out
    assert out.count("=> 2.0\n") == 2
    assert out.endswith("Goodbye!\n")

  def test_env_command(self, feed_input, capsys):
    feed_input(":env", "f(x) = x^2", "y = 1", ":env")
    main.main([])
    out = capsys.readouterr().out
    assert "  (no user-defined bindings)\n" in out
    assert "  y = 1.0\n  f = <function (x) = (x ^ 2.0)>\n" in out

  def test_parse_and_help_commands(self, feed_input, capsys):
    feed_input(":parse 2 pi", ":help", "quit")
    main.main([])
    out = capsys.readouterr().out
    assert "CALL('*')" in out
    assert "REPL Commands:" in out

  def test_bare_parse_command_shows_usage(self, feed_input, capsys):
    feed_input(":parse", "1")
    main.main([])
    out = capsys.readouterr().out
    assert "Usage: :parse <statement>\n" in out
    assert "Parse Error" not in out
    assert "=> 1.0\n" in out

  def test_short_exit_command(self, feed_input, capsys):
    feed_input(":help", ":q", "1")
    assert main.main([]) == 0
    out = capsys.readouterr().out
    assert "exit, quit, :q" in out
    assert "=> 1.0" not in out
    assert "Goodbye!" not in out
