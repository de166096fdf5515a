"""
Tama Programming Language Parser
Tokenizer and pyparsing grammar producing a parse tree of tagged tuples
"""

from typing import List, Any, Optional, Tuple
from dataclasses import dataclass
from functools import reduce
import re

try:
    from pyparsing import (
        Forward, Group, Keyword, Opt, ParseException, ParserElement,
        Regex, StringEnd, Suppress, ZeroOrMore, DelimitedList
    )
    # Enable packrat parsing for performance
    ParserElement.enable_packrat()
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")

from error_handling import TamaErrorHandler, TamaParseError


@dataclass(frozen=True)
class SourceSpan:
    """Source location of a token"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class Token:
    """Tama token with source information"""
    type: str
    value: Any
    span: SourceSpan

    def __str__(self) -> str:
        return f"{self.type}({self.value})"


class TamaTokenizerError(Exception):
    """Tama tokenization error"""
    pass


def strip_comment(line: str) -> str:
    """Drop a trailing # or // comment"""
    cut = len(line)
    for marker in ('#', '//'):
        index = line.find(marker)
        if index != -1:
            cut = min(cut, index)
    return line[:cut]


class TamaTokenizer:
    """Tama tokenizer producing a flat token stream"""

    KEYWORDS = {'def', 'if', 'true', 'false', 'null'}
    OPERATORS = {'+', '='}
    DELIMITERS = {'(', ')', '{', '}', ',', ';'}

    def __init__(self, filename: str = "<input>"):
        self.filename = filename
        self.integer_pattern = re.compile(r'\d+')
        self.identifier_pattern = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Tama source code line by line"""
        tokens = []

        for line_num, line in enumerate(text.split('\n'), 1):
            line = strip_comment(line)

            pos = 0
            while pos < len(line):
                if line[pos].isspace():
                    pos += 1
                    continue

                token = self._match_token_at_position(line, pos, line_num)
                if token:
                    tokens.append(token)
                    pos += len(token.span.text)
                else:
                    char = line[pos]
                    span = SourceSpan(
                        self.filename, line_num, pos + 1, line_num, pos + 2, char
                    )
                    raise TamaTokenizerError(f"Unknown character '{char}' at {span}")

        return tokens

    def _match_token_at_position(self, line: str, pos: int, line_num: int) -> Optional[Token]:
        """Match a token at a specific position using priority order"""

        def span_for(value: str) -> SourceSpan:
            return SourceSpan(
                self.filename, line_num, pos + 1, line_num, pos + len(value) + 1, value
            )

        int_match = self.integer_pattern.match(line, pos)
        if int_match:
            value = int_match.group(0)
            return Token("INT", int(value), span_for(value))

        if line[pos] in self.OPERATORS:
            return Token("OPERATOR", line[pos], span_for(line[pos]))

        if line[pos] in self.DELIMITERS:
            return Token("DELIMITER", line[pos], span_for(line[pos]))

        id_match = self.identifier_pattern.match(line, pos)
        if id_match:
            value = id_match.group(0)
            token_type = "KEYWORD" if value in self.KEYWORDS else "IDENTIFIER"
            return Token(token_type, value, span_for(value))

        return None


def fold_addition(tokens) -> Tuple:
    """Fold `a + b + c` into left-associative ADD nodes"""
    operands = list(tokens)
    return reduce(
        lambda left, right: ("ADD", {"left": left, "right": right}),
        operands[1:],
        operands[0]
    )


class TamaGrammar:
    """Tama grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the Tama grammar"""

        # Forward declarations for recursive structures
        expression = Forward()
        statement = Forward()

        # Keywords
        def_kw = Keyword("def")
        if_kw = Keyword("if")
        true_kw = Keyword("true")
        false_kw = Keyword("false")
        null_kw = Keyword("null")
        reserved = def_kw | if_kw | true_kw | false_kw | null_kw

        # Identifiers are raw strings; keywords are never identifiers
        name = (~reserved + Regex(r'[A-Za-z_][A-Za-z0-9_]*')).set_name("identifier")

        # Literals
        integer = Regex(r'\d+').set_name("integer").set_parse_action(lambda t: ("INT", int(t[0])))
        boolean = (true_kw | false_kw).set_parse_action(lambda t: ("BOOL", t[0] == "true"))
        null = null_kw.copy().set_parse_action(lambda t: ("NULL", None))

        # Calls are tried before plain variable references
        call = (
            name +
            Suppress("(") +
            Group(Opt(DelimitedList(expression))) +
            Suppress(")")
        ).set_parse_action(lambda t: ("FUNCTION_CALL", {"name": t[0], "args": list(t[1])}))

        variable = name.copy().set_parse_action(lambda t: ("VARIABLE", t[0]))

        parenthesized = Suppress("(") + expression + Suppress(")")

        term = integer | boolean | null | call | variable | parenthesized

        expression <<= (term + ZeroOrMore(Suppress("+") + term)).set_parse_action(fold_addition)

        # Statements
        block = Suppress("{") + Group(ZeroOrMore(statement)) + Suppress("}")

        assignment = (
            name + Suppress("=") + expression + Suppress(";")
        ).set_parse_action(lambda t: ("ASSIGNMENT", {"name": t[0], "expression": t[1]}))

        expression_statement = expression + Suppress(";")

        if_statement = (
            Suppress(if_kw) +
            Suppress("(") + expression + Suppress(")") +
            block
        ).set_parse_action(lambda t: ("IF", {"condition": t[0], "statements": list(t[1])}))

        function_def = (
            Suppress(def_kw) +
            name +
            Suppress("(") + Group(Opt(DelimitedList(name))) + Suppress(")") +
            block
        ).set_parse_action(lambda t: ("FUNCTION_DEF", {
            "name": t[0],
            "params": list(t[1]),
            "statements": list(t[2])
        }))

        statement <<= function_def | if_statement | assignment | expression_statement
        program = ZeroOrMore(statement) + StringEnd()

        # Comments run from # or // to end of line
        comment = Regex(r'(#|//)[^\n]*')
        program.ignore(comment)

        self.program = program
        self.expression = expression

    def parse_program(self, text: str, filename: str = "<input>") -> List[Tuple]:
        """Parse a complete Tama program into a list of statement tuples"""
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseException as e:
            raise TamaErrorHandler(text, filename).enhance_parse_exception(e) from e

        if self.debug:
            print(f"Parsed {len(result)} statements from {filename}")
        return list(result)

    def parse_expression(self, text: str, filename: str = "<input>") -> Tuple:
        """Parse a single Tama expression (no trailing ';')"""
        try:
            result = self.expression.parse_string(text, parse_all=True)
        except ParseException as e:
            raise TamaErrorHandler(text, filename).enhance_parse_exception(e) from e
        return result[0]


class TamaParser:
    """Main Tama parser combining tokenizer and grammar"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = TamaGrammar(debug)

    def parse_file(self, filepath: str) -> List[Tuple]:
        """Parse a Tama source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise TamaParseError(f"File not found: {filepath}", filename=filepath)
        except UnicodeDecodeError as e:
            raise TamaParseError(f"Cannot decode file {filepath}: {e}", filename=filepath)
        return self.grammar.parse_program(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> List[Tuple]:
        """Parse Tama source code from string"""
        return self.grammar.parse_program(text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> Tuple:
        """Parse a single Tama expression"""
        return self.grammar.parse_expression(text, filename)

    def tokenize(self, text: str, filename: str = "<input>") -> List[Token]:
        """Tokenize Tama source code"""
        tokenizer = TamaTokenizer(filename)
        return tokenizer.tokenize(text)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> TamaParser:
    """Create a Tama parser"""
    return TamaParser(debug=debug)


def create_debug_parser() -> TamaParser:
    """Create a Tama parser with debug enabled"""
    return TamaParser(debug=True)


# Utility functions for working with the parse tree
def tree_children(node: Tuple) -> List[Tuple]:
    """Child nodes of a parse tree node, in source order"""
    tag, value = node
    if tag == "ADD":
        return [value["left"], value["right"]]
    elif tag == "ASSIGNMENT":
        return [value["expression"]]
    elif tag == "IF":
        return [value["condition"]] + value["statements"]
    elif tag == "FUNCTION_DEF":
        return list(value["statements"])
    elif tag == "FUNCTION_CALL":
        return list(value["args"])
    return []


def node_label(node: Tuple) -> str:
    """One-line description of a parse tree node"""
    tag, value = node
    if tag in ("INT", "BOOL", "VARIABLE"):
        return f"{tag}({value!r})"
    elif tag == "ASSIGNMENT":
        return f"{tag}({value['name']!r})"
    elif tag == "FUNCTION_DEF":
        return f"{tag}({value['name']}({', '.join(value['params'])}))"
    elif tag == "FUNCTION_CALL":
        return f"{tag}({value['name']!r})"
    return tag


def find_nodes_by_type(node: Tuple, node_type: str) -> List[Tuple]:
    """Find all nodes of a specific tag in a parse tree"""
    result = []

    def search(current: Tuple):
        if current[0] == node_type:
            result.append(current)
        for child in tree_children(current):
            search(child)

    search(node)
    return result


def pretty_print_tree(node: Tuple, indent: int = 0) -> str:
    """Pretty print a parse tree node for debugging"""
    result = "  " * indent + node_label(node) + "\n"
    for child in tree_children(node):
        result += pretty_print_tree(child, indent + 1)
    return result
