"""
Tama Standard Library
Embedded (host) functions for the command line runner.
Every function takes and returns native values: int, bool or None.
"""

from typing import Any, Dict, List, Optional

from values import TamaHostError
from environment import make_environment, make_embedded_function
from utilities import format_host_value


# ============================================================================
# ARGUMENT CHECKS
# ============================================================================

def require_int(func_name: str, *args: Any) -> None:
  """Raise TamaHostError unless every argument is an integer (not a bool)"""
  for i, arg in enumerate(args):
    if isinstance(arg, bool) or not isinstance(arg, int):
      raise TamaHostError(
          f"{func_name} requires integers for argument {i + 1}, got {format_host_value(arg)}")


# ============================================================================
# PRINT FUNCTIONS
# ============================================================================

def tama_print(value: Any) -> None:
  """Print a value to stdout as script text"""
  print(format_host_value(value))
  return None


# ============================================================================
# ARITHMETIC AND COMPARISON
# ============================================================================

def tama_sub(a: int, b: int) -> int:
  """Subtract b from a"""
  require_int("sub", a, b)
  return a - b


def tama_lt(a: int, b: int) -> bool:
  """a < b"""
  require_int("lt", a, b)
  return a < b


def tama_gt(a: int, b: int) -> bool:
  """a > b"""
  require_int("gt", a, b)
  return a > b


def tama_eq(a: Any, b: Any) -> bool:
  """Equality without int/bool coercion: eq(1, true) is false"""
  return type(a) is type(b) and a == b


def tama_notequal(a: Any, b: Any) -> bool:
  return not tama_eq(a, b)


# ============================================================================
# LOGIC
# ============================================================================

def host_truthy(value: Any) -> bool:
  """Script truthiness on native values: only None and False are falsy, 0 is truthy"""
  return value is not None and value is not False


# and/or return one of their operands

def tama_and(a: Any, b: Any) -> Any:
  return b if host_truthy(a) else a


def tama_or(a: Any, b: Any) -> Any:
  return a if host_truthy(a) else b


def tama_not(a: Any) -> bool:
  return not host_truthy(a)


# Built-in function registry
BUILTIN_FUNCTIONS: Dict[str, Dict] = {
    "print": make_embedded_function(1, tama_print),
    "sub": make_embedded_function(2, tama_sub),
    "lt": make_embedded_function(2, tama_lt),
    "gt": make_embedded_function(2, tama_gt),
    "eq": make_embedded_function(2, tama_eq),
    "notequal": make_embedded_function(2, tama_notequal),
    "and": make_embedded_function(2, tama_and),
    "or": make_embedded_function(2, tama_or),
    "not": make_embedded_function(1, tama_not),
}


def get_builtin_function(name: str) -> Dict:
  """Get a built-in function by name"""
  if name in BUILTIN_FUNCTIONS:
    return BUILTIN_FUNCTIONS[name]
  raise TamaHostError(f"Unknown built-in function: {name}")


def list_builtin_functions() -> List[str]:
  """List all available built-in functions"""
  return list(BUILTIN_FUNCTIONS.keys())


def create_stdlib_environment(variables: Optional[Dict[str, Dict]] = None) -> Dict:
  """Create an environment seeded with the built-in functions"""
  return make_environment(variables=variables, functions=BUILTIN_FUNCTIONS)
