"""
Standard library tests: embedded functions used from scripts
"""

import pytest

from interpreter import evaluate
from stdlib import (
  BUILTIN_FUNCTIONS,
  create_stdlib_environment,
  get_builtin_function,
  list_builtin_functions,
  tama_and,
  tama_eq,
  tama_not,
  tama_or,
  tama_sub,
)
from values import NULL_VALUE, int_value, bool_value, TamaHostError


@pytest.fixture
def run(lex_and_parse):
  """Evaluate source against the standard library environment"""
  def _run(source):
    result, _ = evaluate(lex_and_parse(source), create_stdlib_environment())
    return result
  return _run


class TestHostFunctions:
  """Native behaviour of the built-ins"""

  def test_sub(self):
    assert tama_sub(5, 3) == 2

  def test_sub_rejects_non_integers(self):
    with pytest.raises(TamaHostError):
      tama_sub(None, 1)
    with pytest.raises(TamaHostError):
      tama_sub(True, 1)

  def test_eq_does_not_coerce_bools(self):
    assert tama_eq(1, 1)
    assert not tama_eq(1, True)
    assert tama_eq(None, None)

  def test_logic_uses_script_truthiness(self):
    assert tama_or(0, 5) == 0
    assert tama_or(None, 5) == 5
    assert tama_and(0, 5) == 5
    assert tama_and(False, 5) is False
    assert tama_not(0) is False
    assert tama_not(None) is True


class TestScripts:
  """Built-ins called from Tama source"""

  def test_comparisons(self, run):
    assert run("lt(1, 2);") == bool_value(True)
    assert run("gt(1, 2);") == bool_value(False)
    assert run("notequal(1, 2);") == bool_value(True)

  def test_countdown(self, run):
    source = """
    def count(n) {
      if (gt(n, 0)) { rest = count(sub(n, 1)); }
      or(rest, n) + 1;
    }
    count(3);
    """
    assert run(source) == int_value(4)

  def test_print(self, run, capsys):
    assert run("print(1 + 2); print(true); print(null);") == NULL_VALUE
    assert capsys.readouterr().out == "3\ntrue\nnull\n"

  def test_host_error_propagates(self, run):
    with pytest.raises(TamaHostError):
      run("sub(null, 1);")


class TestRegistry:
  """Lookup helpers"""

  def test_environment_holds_builtins(self):
    environment = create_stdlib_environment()
    assert environment['variables'] == {}
    assert environment['functions'] == BUILTIN_FUNCTIONS

  def test_environment_with_variables(self):
    environment = create_stdlib_environment({'x': int_value(1)})
    assert environment['variables'] == {'x': int_value(1)}

  def test_get_builtin_function(self):
    assert get_builtin_function("sub")['arguments_count'] == 2
    with pytest.raises(TamaHostError):
      get_builtin_function("missing")

  def test_list_builtin_functions(self):
    assert {"print", "sub", "lt", "gt", "eq", "notequal", "and", "or", "not"} == set(list_builtin_functions())
