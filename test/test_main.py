"""
Command line runner tests: script files, debugging views and the REPL
"""

import sys
import builtins
import pytest

import main
from main import run_source, run_script_file
from stdlib import create_stdlib_environment
from values import int_value


@pytest.fixture
def script(tmp_path):
  """Write source to a temporary .tama file and return its path"""
  def _script(source):
    path = tmp_path / "script.tama"
    path.write_text(source, encoding='utf-8')
    return str(path)
  return _script


@pytest.fixture
def feed_input(monkeypatch):
  """Replace input() with a fixed sequence of lines"""
  def _feed(lines):
    remaining = iter(lines)
    monkeypatch.setattr(builtins, 'input', lambda prompt="": next(remaining))
    monkeypatch.setattr(main, 'READLINE_AVAILABLE', False)
  return _feed


class TestRunSource:
  """Source text through the whole pipeline"""

  def test_threads_environment(self):
    _, environment = run_source("a = 1;", create_stdlib_environment())
    result, _ = run_source("a + 1;", environment)
    assert result == int_value(2)

  def test_definitions_persist(self):
    _, environment = run_source("def inc(x) { x + 1; }", create_stdlib_environment())
    result, _ = run_source("inc(inc(1));", environment)
    assert result == int_value(3)


class TestRunScriptFile:
  """Running .tama files"""

  def test_successful_script(self, script, capsys):
    run_script_file(script("a = 40; print(a + 2);"))
    assert capsys.readouterr().out == "42\n"

  def test_debug_shows_result_and_environment(self, script, capsys):
    run_script_file(script("a = 1; def f() { a; } a + 1;"), debug=True)
    output = capsys.readouterr().out
    assert "Result: 2" in output
    assert "a = 1" in output
    assert "f()" in output

  def test_runtime_error_exits(self, script, capsys):
    with pytest.raises(SystemExit) as excinfo:
      run_script_file(script("1 + true;"))
    assert excinfo.value.code == 1
    assert "TypeError in Add" in capsys.readouterr().out

  def test_parse_error_exits(self, script, capsys):
    with pytest.raises(SystemExit) as excinfo:
      run_script_file(script("a = ;"))
    assert excinfo.value.code == 1
    assert "Parse error in" in capsys.readouterr().out

  def test_host_error_exits(self, script, capsys):
    with pytest.raises(SystemExit) as excinfo:
      run_script_file(script("sub(true, 1);"))
    assert excinfo.value.code == 1
    assert "Host error" in capsys.readouterr().out

  def test_semantic_error_exits(self, script, capsys):
    with pytest.raises(SystemExit):
      run_script_file(script("def f(x, x) { x; }"))
    assert "Duplicate parameter" in capsys.readouterr().out


class TestMain:
  """Argument handling"""

  def test_tokens(self, script, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['tama', '--tokens', script("a = 1;")])
    main.main()
    output = capsys.readouterr().out
    assert "1:1\tIDENTIFIER(a)" in output
    assert "1:5\tINT(1)" in output

  def test_parse(self, script, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['tama', '--parse', script("a = 1 + 2;")])
    main.main()
    output = capsys.readouterr().out
    assert "Parsed 1 top-level statements" in output
    assert "ASSIGNMENT('a')" in output

  def test_missing_script(self, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['tama', str(tmp_path / "missing.tama")])
    with pytest.raises(SystemExit) as excinfo:
      main.main()
    assert excinfo.value.code == 1
    assert "does not exist" in capsys.readouterr().out

  def test_version(self, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['tama', '--version'])
    with pytest.raises(SystemExit):
      main.main()
    assert main.VERSION in capsys.readouterr().out


class TestInteractiveMode:
  """REPL sessions"""

  def test_session_keeps_state(self, feed_input, capsys):
    feed_input([
      "a = 40;",
      "def add2(x) {",
      "  x + 2;",
      "}",
      "add2(a);",
      "exit",
    ])
    main.run_interactive_mode()
    output = capsys.readouterr().out
    assert "=> null" in output
    assert "=> 42" in output

  def test_errors_do_not_end_session(self, feed_input, capsys):
    feed_input(["1 + null;", "a = ;", "a = 5;", ":env", "exit"])
    main.run_interactive_mode()
    output = capsys.readouterr().out
    assert "Error: TypeError in Add" in output
    assert "Parse error" in output
    assert "a = 5" in output

  def test_commands(self, feed_input, capsys):
    feed_input([":tokens f(1);", ":parse 1 + 2;", ":help", "exit"])
    main.run_interactive_mode()
    output = capsys.readouterr().out
    assert "IDENTIFIER(f)" in output
    assert "ADD" in output
    assert "REPL Commands:" in output

  def test_end_of_input(self, monkeypatch, capsys):
    def raise_eof(prompt=""):
      raise EOFError
    monkeypatch.setattr(builtins, 'input', raise_eof)
    monkeypatch.setattr(main, 'READLINE_AVAILABLE', False)
    main.run_interactive_mode()
    assert "Goodbye!" in capsys.readouterr().out
