"""
Tama Environment Model - Pure Functional Style
An environment is an immutable snapshot of variables and functions.
Every operation returns a new environment and leaves its input untouched.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

from values import null_value


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_environment(variables: Optional[Dict[str, Dict]] = None,
                     functions: Optional[Dict[str, Dict]] = None) -> Dict:
  """Create an environment from variable and function mappings"""
  return {
      'variables': dict(variables or {}),
      'functions': dict(functions or {})
  }


EMPTY_ENVIRONMENT: Mapping = MappingProxyType({
    'variables': MappingProxyType({}),
    'functions': MappingProxyType({})
})


def make_embedded_function(arguments_count: int, function: Callable[..., Any]) -> Dict:
  """Create a host-provided function entry"""
  return {
      'type': 'EmbeddedFunction',
      'arguments_count': arguments_count,
      'function': function
  }


def make_defined_function(arguments: List[str], statements: List[Dict]) -> Dict:
  """Create a script-defined function entry; arguments and body are copied"""
  return {
      'type': 'DefinedFunction',
      'arguments_count': len(arguments),
      'arguments': list(arguments),
      'statements': list(statements)
  }


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def env_bind_variable(env: Dict, name: str, value: Dict) -> Dict:
  """Return new environment with variable name bound to value"""
  return {
      **env,
      'variables': {**env['variables'], name: value}
  }


def env_lookup_variable(env: Dict, name: str) -> Dict:
  """Look up a variable; unbound names read as null"""
  value = env['variables'].get(name)
  return null_value() if value is None else value


def env_bind_function(env: Dict, name: str, function: Dict) -> Dict:
  """Return new environment with function name bound, replacing any prior entry"""
  return {
      **env,
      'functions': {**env['functions'], name: function}
  }


def env_lookup_function(env: Dict, name: str) -> Optional[Dict]:
  """Look up a function entry, None when the name is not bound"""
  return env['functions'].get(name)


def make_call_scope(env: Dict, parameters: List[str], arguments: List[Dict]) -> Dict:
  """
  Build the environment a defined function body runs in.
  Only the parameters are visible as variables; the functions table is
  the caller's, so recursion and calls between functions resolve.
  """
  return {
      'variables': dict(zip(parameters, arguments)),
      'functions': env['functions']
  }


def defined_functions(env: Dict) -> Dict[str, Dict]:
  """Script-defined functions, without the host-provided ones"""
  return {
      name: function for name, function in env['functions'].items()
      if function.get('type') == 'DefinedFunction'
  }
