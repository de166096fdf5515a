"""
Tama Semantics Analysis - Pure Functional Style
Turns the parser's tagged tuples into the AST dictionaries the evaluator walks
"""

from typing import Any, Dict, List, Optional, Tuple


class TamaSemanticsError(Exception):
  """Tama semantic analysis error"""

  def __init__(self, message: str, node: Optional[Tuple] = None):
    self.message = message
    self.node = node
    super().__init__(self._format_error())

  def _format_error(self) -> str:
    if self.node is not None:
      return f"Semantic error in {self.node[0]}: {self.message}"
    return f"Semantic error: {self.message}"


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_ast_node(node_type: str, **fields: Any) -> Dict:
  """Create an AST node dictionary tagged with its kind"""
  return {'type': node_type, **fields}


def make_source(statements: List[Dict]) -> Dict:
  """Create the program root"""
  return make_ast_node('Source', statements=statements)


# ============================================================================
# EXPRESSIONS
# ============================================================================

def analyze_expression(node: Tuple, debug: bool = False) -> Dict:
  """Analyze an expression tuple"""
  tag, value = node

  if debug:
    print(f"Analyzing expression: {tag}")

  if tag == 'INT':
    return make_ast_node('IntLiteral', value=value)
  elif tag == 'BOOL':
    return make_ast_node('BoolLiteral', value=value)
  elif tag == 'NULL':
    return make_ast_node('NullLiteral')
  elif tag == 'VARIABLE':
    return make_ast_node('Variable', name=value)
  elif tag == 'ADD':
    return make_ast_node(
        'Add',
        left=analyze_expression(value['left'], debug),
        right=analyze_expression(value['right'], debug)
    )
  elif tag == 'FUNCTION_CALL':
    return make_ast_node(
        'FunctionCall',
        name=value['name'],
        arguments=[analyze_expression(arg, debug) for arg in value['args']]
    )
  raise TamaSemanticsError(f"{tag} cannot be used as an expression", node)


# ============================================================================
# STATEMENTS
# ============================================================================

def analyze_block(statements: List[Tuple], debug: bool = False) -> List[Dict]:
  """Analyze a statement sequence"""
  return [analyze_statement(statement, debug) for statement in statements]


def analyze_function_def(node: Tuple, debug: bool = False) -> Dict:
  """Analyze a function definition; parameter names must be distinct"""
  value = node[1]
  params = value['params']

  seen = set()
  for param in params:
    if param in seen:
      raise TamaSemanticsError(
          f"Duplicate parameter '{param}' in definition of '{value['name']}'", node)
    seen.add(param)

  return make_ast_node(
      'FunctionDefinition',
      name=value['name'],
      arguments=list(params),
      statements=analyze_block(value['statements'], debug)
  )


def analyze_statement(node: Tuple, debug: bool = False) -> Dict:
  """Analyze one statement tuple"""
  tag, value = node

  if debug:
    print(f"Analyzing statement: {tag}")

  if tag == 'ASSIGNMENT':
    return make_ast_node(
        'Assignment',
        name=value['name'],
        expression=analyze_expression(value['expression'], debug)
    )
  elif tag == 'IF':
    return make_ast_node(
        'If',
        condition=analyze_expression(value['condition'], debug),
        statements=analyze_block(value['statements'], debug)
    )
  elif tag == 'FUNCTION_DEF':
    return analyze_function_def(node, debug)
  return analyze_expression(node, debug)


def analyze_program(statements: List[Tuple], debug: bool = False) -> Dict:
  """Analyze a parsed program into a Source AST"""
  source = make_source(analyze_block(statements, debug))
  if debug:
    print(f"Analyzed {len(source['statements'])} statements")
  return source


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_analyzer(debug: bool = False):
  """Factory function returning an analyzer"""
  def analyzer(statements: List[Tuple]) -> Dict:
    return analyze_program(statements, debug)

  return analyzer


def create_debug_analyzer():
  """Factory function returning a debug analyzer"""
  return create_analyzer(debug=True)
