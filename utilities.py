"""
Utilities module for the Tama interpreter
Contains common helper functions shared by the evaluator, stdlib and CLI
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from values import int_value, type_error


# ==================== TYPE CHECKING UTILITIES ====================

def get_dict_type(val: Any) -> Optional[str]:
  """
  Safely get type from dict

  Args:
    val: AST node or value dict

  Returns:
    Type string or None
  """
  return val.get('type') if isinstance(val, Mapping) else None


def all_of_type(values: List[Dict], type_name: str) -> bool:
  """True when every value carries the given type tag"""
  return all(get_dict_type(value) == type_name for value in values)


# ==================== FORMATTING ====================

def format_host_value(obj: Any) -> str:
  """
  Render a native value the way a script would write it

  Examples:
    format_host_value(None) -> "null"
    format_host_value(True) -> "true"
    format_host_value(42) -> "42"
  """
  if obj is None:
    return "null"
  if isinstance(obj, bool):
    return "true" if obj else "false"
  return str(obj)


def format_value(value: Dict) -> str:
  """Render a non-error runtime value as script text"""
  value_type = get_dict_type(value)
  if value_type == 'IntValue':
    return str(value['value'])
  elif value_type == 'BoolValue':
    return "true" if value['value'] else "false"
  elif value_type == 'NullValue':
    return "null"
  return f"<{value_type}>"


# ==================== BINARY OPERATION FACTORIES ====================

def binary_integer_op(
  op: Callable[[int, int], int],
  op_name: str
) -> Callable[[Dict, Dict], Dict]:
  """
  Factory for binary operations defined only over two integers

  Args:
    op: Python operator function (e.g., operator.add)
    op_name: Operation name carried by the type error

  Returns:
    Function mapping two values to an IntValue or a TypeError value

  Examples:
    tama_add = binary_integer_op(operator.add, "Add")
    tama_add(int_value(1), int_value(2)) -> int_value(3)
    tama_add(int_value(1), NULL_VALUE) -> TypeError value
  """
  def operation(x: Dict, y: Dict) -> Dict:
    if not all_of_type([x, y], 'IntValue'):
      return type_error(
          op_name, [x, y],
          f"{op_name} requires IntValue operands, got {get_dict_type(x)} and {get_dict_type(y)}")
    return int_value(op(x['value'], y['value']))

  return operation
