"""
Error handling for the Tama parser and runtime with detailed error messages
Pure functional style - no classes except for the exception types
"""

from typing import List, Optional, Dict
from pyparsing import ParseException
import re


# ============================================================================
# PARSE FAILURE DETAILS
# ============================================================================

def get_context(exc: ParseException, source_text: str, context_lines: int = 2) -> str:
    """Numbered lines up to the failing one, with a caret under the failing column"""
    lines = source_text.split('\n')
    first = max(1, exc.lineno - context_lines)

    shown = [f"{number:4d}: {lines[number - 1]}" for number in range(first, exc.lineno)]
    shown.append(f"{exc.lineno:4d}: {exc.line}")
    shown.append(" " * (5 + exc.column) + "^ Error here")
    return '\n'.join(shown)


def extract_expected(exc: ParseException) -> List[str]:
    """What the grammar wanted, from pyparsing's "Expected ..." message"""
    match = re.match(r"Expected\s+(.+?)(?:,\s+found|\s+\(|$)", exc.msg)
    return [match.group(1)] if match else ["valid syntax"]


def extract_got(exc: ParseException) -> str:
    """A short quote of the text at the failure point"""
    if exc.loc >= len(exc.pstr):
        return "end of input"
    got_text = exc.line[exc.column - 1:exc.column + 10].strip()
    return f"'{got_text}'" if got_text else "end of line"


def generate_suggestions(got: str, expected: List[str]) -> List[str]:
    """Hints for mistakes people make when coming from larger languages"""
    suggestions = []
    expected_text = ' '.join(expected)

    if "';'" in expected_text or got in ("end of line", "end of input"):
        suggestions.append("Expression and assignment statements end with ';'")

    if any(op in got for op in ("-", "*", "/", "<", ">")):
        suggestions.append("Only '+' is an operator; use embedded functions such as sub(a, b) or lt(a, b)")

    if '"' in got or "'" in got[1:-1]:
        suggestions.append("Tama has no string literals")

    if re.search(r"\d\.\d", got):
        suggestions.append("Tama has no floating-point numbers")

    if "else" in got:
        suggestions.append("'if' has no 'else' branch; use a second 'if'")

    if "{" in expected_text:
        suggestions.append("Function and if bodies are wrapped in braces { }")

    return suggestions


def describe_parse_exception(exc: ParseException, source_text: str) -> Dict:
    """Everything a TamaParseError reports about a pyparsing failure"""
    expected = extract_expected(exc)
    got = extract_got(exc)
    return {
        'message': exc.msg,
        'location': exc.loc,
        'line': exc.lineno,
        'column': exc.column,
        'expected': expected,
        'got': got,
        'context': get_context(exc, source_text),
        'suggestions': generate_suggestions(got, expected)
    }


def format_error_value(value: Dict) -> str:
    """Render a TypeError/EvaluatorError result value for the user"""
    message = value.get('message', '')
    if value['type'] == 'TypeError' and value.get('operation'):
        return f"TypeError in {value['operation']}: {message}"
    return f"{value['type']}: {message}" if message else value['type']


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class TamaParseError(Exception):
    """Parse failure carrying location, expectations and suggestions"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    def __str__(self) -> str:
        if not self.line:
            return f"{self.filename}: {self.message}"

        parts = [f"{self.filename}:{self.line}:{self.column}: {self.message}"]
        if self.expected:
            parts.append(f"  Expected: {', '.join(self.expected)}")
        if self.got:
            parts.append(f"  Got: {self.got}")
        if self.context:
            parts.append(self.context)
        parts.extend(f"  Hint: {suggestion}" for suggestion in self.suggestions)
        return '\n'.join(parts)


class TamaErrorHandler:
    """Turns pyparsing exceptions for one source text into TamaParseError"""
    def __init__(self, source_text: str, filename: str = "<input>"):
        self.source_text = source_text
        self.filename = filename

    def enhance_parse_exception(self, exc: ParseException) -> TamaParseError:
        """Convert pyparsing exception to enhanced Tama error"""
        return TamaParseError(filename=self.filename, **describe_parse_exception(exc, self.source_text))
