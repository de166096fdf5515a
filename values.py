"""
Tama Value Model
Runtime values are immutable dictionaries tagged by 'type'
Error values are ordinary values that short-circuit composition
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


class TamaRuntimeError(Exception):
  """Host-level runtime failure outside the script's value flow"""

  def __init__(self, message: str):
    self.message = message
    super().__init__(message)


class TamaHostError(TamaRuntimeError):
  """An embedded function broke the host contract"""
  pass


# ============================================================================
# VALUE CONSTRUCTORS
# ============================================================================

def int_value(value: int) -> Dict:
  """Create an integer value"""
  return {
      'type': 'IntValue',
      'is_error': False,
      'value': value
  }


def bool_value(value: bool) -> Dict:
  """Create a boolean value"""
  return {
      'type': 'BoolValue',
      'is_error': False,
      'value': value
  }


def null_value() -> Dict:
  """Create the null value"""
  return {
      'type': 'NullValue',
      'is_error': False
  }


# Read-only, for comparisons
NULL_VALUE: Mapping = MappingProxyType(null_value())


def type_error(operation: str, operands: List[Dict], message: Optional[str] = None) -> Dict:
  """Create a type error value for an operation that rejected its operands"""
  operand_types = [operand.get('type', 'Unknown') for operand in operands]
  if message is None:
    message = f"Cannot apply {operation} to {', '.join(operand_types)}"
  return {
      'type': 'TypeError',
      'is_error': True,
      'message': message,
      'operation': operation,
      'operand_types': operand_types
  }


def evaluator_error(message: str, node_type: Optional[str] = None) -> Dict:
  """Create an evaluator error value (AST the evaluator cannot handle)"""
  return {
      'type': 'EvaluatorError',
      'is_error': True,
      'message': message,
      'node_type': node_type
  }


# ============================================================================
# PREDICATES
# ============================================================================

ERROR_TYPES = ('TypeError', 'EvaluatorError')


def is_error(value: Dict) -> bool:
  """True when the value is an error variant"""
  return value.get('is_error', value.get('type') in ERROR_TYPES)


def is_truthy(value: Dict) -> bool:
  """Only null and false are falsy; IntValue(0) is truthy"""
  if value['type'] == 'NullValue':
    return False
  if value['type'] == 'BoolValue':
    return bool(value['value'])
  return True


# ============================================================================
# HOST MARSHALING
# ============================================================================

def to_host_value(value: Dict) -> Any:
  """Convert a script value to the native value passed to embedded functions"""
  value_type = value['type']
  if value_type in ('IntValue', 'BoolValue'):
    return value['value']
  elif value_type == 'NullValue':
    return None
  raise TamaHostError(f"Cannot pass {value_type} to an embedded function")


def from_host_value(obj: Any) -> Dict:
  """Convert an embedded function's return value back to a script value"""
  # bool before int: bool is a subclass of int
  if isinstance(obj, bool):
    return bool_value(obj)
  elif isinstance(obj, int):
    return int_value(obj)
  elif obj is None:
    return null_value()
  raise TamaHostError(
      f"Embedded function returned unsupported {type(obj).__name__}: {obj!r}")
