"""
Tama Interpreter - Pure Functional Style
Walks the AST and threads an immutable environment through every step.
Errors are values: each step checks sub-results with is_error and returns
them unchanged instead of continuing.
"""

from typing import Callable, Dict, List, Optional, Tuple
import operator
import sys

from values import (
    null_value,
    int_value,
    bool_value,
    evaluator_error,
    is_error,
    is_truthy,
    to_host_value,
    from_host_value,
)
from environment import (
    EMPTY_ENVIRONMENT,
    make_defined_function,
    make_call_scope,
    env_bind_variable,
    env_lookup_variable,
    env_bind_function,
    env_lookup_function,
)
from utilities import binary_integer_op, get_dict_type


tama_add = binary_integer_op(operator.add, "Add")

# Each script-level call nests about eight Python frames
RECURSION_LIMIT = 10000


# ============================================================================
# ENTRY POINT
# ============================================================================

def evaluate(ast_root: Dict, environment: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """
  Evaluate an AST and return (result_value, updated_environment).
  Script errors come back as TypeError/EvaluatorError result values;
  the returned environment reflects every statement before the failure.
  """
  if sys.getrecursionlimit() < RECURSION_LIMIT:
    sys.setrecursionlimit(RECURSION_LIMIT)

  try:
    return eval_ast(ast_root, environment, debug)
  except RecursionError:
    return evaluator_error("Maximum recursion depth exceeded", get_dict_type(ast_root)), environment


def eval_ast(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Dispatch on the node type"""
  node_type = get_dict_type(ast_node)

  if debug:
    print(f"Evaluating: {node_type}")

  if node_type == "Source":
    return eval_source(ast_node, env, debug)
  elif node_type == "IntLiteral":
    return eval_int_literal(ast_node, env, debug)
  elif node_type == "BoolLiteral":
    return eval_bool_literal(ast_node, env, debug)
  elif node_type == "NullLiteral":
    return null_value(), env
  elif node_type == "Variable":
    return eval_variable(ast_node, env, debug)
  elif node_type == "Assignment":
    return eval_assignment(ast_node, env, debug)
  elif node_type == "Add":
    return eval_add(ast_node, env, debug)
  elif node_type == "If":
    return eval_if(ast_node, env, debug)
  elif node_type == "FunctionDefinition":
    return eval_function_definition(ast_node, env, debug)
  elif node_type == "FunctionCall":
    return eval_function_call(ast_node, env, debug)
  else:
    if debug:
      print(f"Unknown node type: {node_type}")
    return evaluator_error(f"Unknown AST node type: {node_type}", node_type), env


# ============================================================================
# STATEMENT SEQUENCES
# ============================================================================

def eval_statements(statements: List[Dict], env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """
  Run statements in order. The result is the last statement's result
  (null for an empty sequence). The first error stops the sequence and is
  returned with the environment as it was before the failing statement.
  """
  result = null_value()
  for statement in statements:
    value, next_env = eval_ast(statement, env, debug)
    if is_error(value):
      if debug:
        print(f"Stopped on {value['type']}: {value.get('message', '')}")
      return value, env
    result, env = value, next_env
  return result, env


def eval_source(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Evaluate the program root"""
  return eval_statements(ast_node['statements'], env, debug)


# ============================================================================
# LITERALS AND VARIABLES
# ============================================================================

def eval_int_literal(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Evaluate integer literal"""
  return int_value(ast_node['value']), env


def eval_bool_literal(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Evaluate boolean literal"""
  return bool_value(ast_node['value']), env


def eval_variable(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Look up a variable; an unbound name is null, not an error"""
  return env_lookup_variable(env, ast_node['name']), env


def eval_assignment(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Bind the evaluated expression to the name; the statement itself is null"""
  value, next_env = eval_ast(ast_node['expression'], env, debug)
  if is_error(value):
    return value, env
  return null_value(), env_bind_variable(next_env, ast_node['name'], value)


# ============================================================================
# OPERATORS AND CONTROL FLOW
# ============================================================================

def eval_add(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Integer addition; the left operand is evaluated (and fails) first"""
  left, next_env = eval_ast(ast_node['left'], env, debug)
  if is_error(left):
    return left, env

  right, next_env = eval_ast(ast_node['right'], next_env, debug)
  if is_error(right):
    return right, env

  result = tama_add(left, right)
  if is_error(result):
    return result, env
  return result, next_env


def eval_if(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Run the body when the condition is truthy; otherwise the result is null"""
  condition, next_env = eval_ast(ast_node['condition'], env, debug)
  if is_error(condition):
    return condition, env

  if not is_truthy(condition):
    return null_value(), next_env

  result, body_env = eval_statements(ast_node['statements'], next_env, debug)
  if is_error(result):
    return result, env
  return result, body_env


def eval_function_definition(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Bind a defined function, replacing whatever the name held before"""
  name = ast_node['name']
  function = make_defined_function(ast_node['arguments'], ast_node['statements'])

  if debug:
    print(f"Defined function: {name}({', '.join(function['arguments'])})")

  return null_value(), env_bind_function(env, name, function)


# ============================================================================
# FUNCTION INVOCATION
# ============================================================================

def eval_arguments(arguments: List[Dict], env: Dict, debug: bool = False) -> Tuple[List[Dict], Optional[Dict], Dict]:
  """
  Evaluate call arguments left to right, threading the environment.

  Returns:
      (values, error, environment) where error is the first failing
      argument's value, or None when every argument succeeded
  """
  values = []
  for argument in arguments:
    value, env = eval_ast(argument, env, debug)
    if is_error(value):
      return values, value, env
    values.append(value)
  return values, None, env


def eval_function_call(ast_node: Dict, env: Dict, debug: bool = False) -> Tuple[Dict, Dict]:
  """Resolve the callee, evaluate arguments, then dispatch on the callable kind"""
  name = ast_node['name']
  function = env_lookup_function(env, name)
  if function is None:
    return evaluator_error(f"Undefined function: {name}", "FunctionCall"), env

  arguments, error, next_env = eval_arguments(ast_node['arguments'], env, debug)
  if error is not None:
    return error, env

  function_type = get_dict_type(function)
  if function_type == "EmbeddedFunction":
    result = call_embedded_function(name, function, arguments, debug)
  elif function_type == "DefinedFunction":
    result = call_defined_function(name, function, arguments, next_env, debug)
  else:
    result = evaluator_error(f"'{name}' is bound to {function_type}, which is not callable", "FunctionCall")

  if is_error(result):
    return result, env
  return result, next_env


def call_embedded_function(name: str, function: Dict, arguments: List[Dict], debug: bool = False) -> Dict:
  """Marshal arguments to native values, call the host, marshal the result back"""
  callback: Optional[Callable] = function.get('function')
  if callback is None:
    return evaluator_error(f"Embedded function '{name}' has no host callback", "FunctionCall")

  host_arguments = [to_host_value(argument) for argument in arguments]
  if debug:
    print(f"Calling embedded {name} with {host_arguments}")

  return from_host_value(callback(*host_arguments))


def call_defined_function(name: str, function: Dict, arguments: List[Dict], env: Dict, debug: bool = False) -> Dict:
  """
  Run a defined function body in a fresh scope holding only its parameters.
  Everything the body binds, functions included, is dropped on return.
  """
  if debug:
    if len(arguments) != function['arguments_count']:
      print(f"Warning: {name} declares {function['arguments_count']} arguments, called with {len(arguments)}")
    print(f"Calling {name}")

  scope = make_call_scope(env, function['arguments'], arguments)
  result, _ = eval_statements(function['statements'], scope, debug)
  return result


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_interpreter(debug: bool = False):
  """Factory function returning an interpreter bound to the debug setting"""
  def interpret(ast_root: Dict, environment: Dict = EMPTY_ENVIRONMENT) -> Tuple[Dict, Dict]:
    return evaluate(ast_root, environment, debug)

  return interpret


def create_debug_interpreter():
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
