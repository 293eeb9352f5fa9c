"""
Lumen S-expression reader
Turns source text into literal trees (numbers, booleans, Quoted strings,
bare atoms and nested lists) that the semantic parser consumes
"""

from typing import Any, List
from dataclasses import dataclass
import re

# Import pyparsing with error handling
try:
    from pyparsing import (
        Forward, Group, ParseException, ParserElement, QuotedString,
        Regex, Suppress, ZeroOrMore,
    )
    # Enable packrat parsing for performance
    ParserElement.enable_packrat()
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")

from error_handling import LumenErrorHandler, LumenParseError


NUMBER_PATTERN = re.compile(r'[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?')
INTEGER_PATTERN = re.compile(r'[+-]?\d+')


@dataclass(frozen=True)
class Quoted:
    """A string literal in a literal tree; plain str values are atoms"""
    text: str

    def __str__(self) -> str:
        return f'"{self.text}"'


def convert_atom(token: str) -> Any:
    """Classify a bare token as number, boolean or symbol"""
    if INTEGER_PATTERN.fullmatch(token):
        return int(token)
    if NUMBER_PATTERN.fullmatch(token):
        return float(token)
    if token == "true":
        return True
    if token == "false":
        return False
    return token


class LumenGrammar:
    """Lumen reader grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the S-expression grammar"""
        expression = Forward()

        comment = Regex(r';[^\n]*')

        string_literal = QuotedString('"', esc_char='\\').set_parse_action(lambda t: Quoted(t[0]))
        atom = Regex(r'[^\s()\[\]";]+').set_parse_action(lambda t: convert_atom(t[0]))

        paren_list = Group(Suppress("(") + ZeroOrMore(expression) + Suppress(")"))
        bracket_list = Group(Suppress("[") + ZeroOrMore(expression) + Suppress("]"))

        expression <<= string_literal | paren_list | bracket_list | atom
        expression.set_name("expression")

        program = ZeroOrMore(expression)

        for element in (expression, program):
            element.ignore(comment)

        self.expression = expression
        self.program = program

    def parse_expression(self, text: str, filename: str = "<input>") -> Any:
        """Read exactly one expression"""
        handler = LumenErrorHandler(text, filename)
        try:
            result = self.expression.parse_string(text, parse_all=True)
        except ParseException as e:
            raise handler.enhance_parse_exception(e) from e
        literal = result.as_list()[0]
        if self.debug:
            print(f"Read expression: {literal!r}")
        return literal

    def parse_program(self, text: str, filename: str = "<input>") -> List[Any]:
        """Read zero or more top-level expressions"""
        handler = LumenErrorHandler(text, filename)
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseException as e:
            raise handler.enhance_parse_exception(e) from e
        literals = result.as_list()
        if self.debug:
            print(f"Read {len(literals)} top-level expression(s)")
        return literals


class LumenParser:
    """Main Lumen reader for strings and files"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = LumenGrammar(debug)

    def read_file(self, filepath: str) -> List[Any]:
        """Read every expression from a Lumen source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise LumenParseError(f"Cannot decode file {filepath}: {e}")
        return self.grammar.parse_program(content, filepath)

    def read_many(self, text: str, filename: str = "<input>") -> List[Any]:
        """Read every expression from source text"""
        return self.grammar.parse_program(text, filename)

    def read(self, text: str, filename: str = "<input>") -> Any:
        """Read a single expression"""
        return self.grammar.parse_expression(text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> LumenParser:
    """Create a Lumen reader"""
    return LumenParser(debug=debug)


def create_debug_parser() -> LumenParser:
    """Create a Lumen reader with debug enabled"""
    return LumenParser(debug=True)


_default_parser = None


def _parser() -> LumenParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = create_parser()
    return _default_parser


def read(text: str) -> Any:
    """Read one expression using a shared reader"""
    return _parser().read(text)


def read_many(text: str) -> List[Any]:
    """Read all expressions using a shared reader"""
    return _parser().read_many(text)


def format_literal(literal: Any) -> str:
    """Render a literal tree back as S-expression text"""
    if isinstance(literal, bool):
        return "true" if literal else "false"
    if isinstance(literal, (list, tuple)):
        return "(" + " ".join(format_literal(item) for item in literal) + ")"
    return str(literal)
