"""
Test configuration for Tama tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import create_parser
from semantics import analyze_program


@pytest.fixture
def parser():
  """Provide a fresh parser for each test"""
  return create_parser()


@pytest.fixture
def lex_and_parse(parser):
  """Source text to a Source AST"""
  def _lex_and_parse(source: str):
    return analyze_program(parser.parse_string(source))
  return _lex_and_parse
