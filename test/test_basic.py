"""
Basic reader and parser tests for Lumen
Tests text -> literal tree -> AST
"""

import pytest
from error_handling import LumenParseError
from parsing import Quoted, format_literal, read_many
from semantics import (
  Application,
  BooleanLiteral,
  Conditional,
  Identifier,
  Lambda,
  NumberLiteral,
  StringLiteral,
  is_if_shape,
  is_lambda_shape,
  parse,
  pretty_print_ast,
)


class TestReader:
  """Test reading source text into literal trees"""

  def test_atoms(self, parser):
    """Numbers, booleans and symbols read as Python data"""
    assert parser.read("42") == 42
    assert parser.read("-7") == -7
    assert parser.read("3.5") == 3.5
    assert parser.read("1e3") == 1000.0
    assert parser.read("true") is True
    assert parser.read("false") is False
    assert parser.read("foo") == "foo"
    assert parser.read("equal?") == "equal?"
    assert parser.read("-") == "-"
    assert parser.read("=>") == "=>"

  def test_string_literal(self, parser):
    """Double-quoted text reads as Quoted, never as an atom"""
    assert parser.read('"hello world"') == Quoted("hello world")
    assert parser.read(r'"say \"hi\""') == Quoted('say "hi"')

  def test_lists(self, parser):
    """Parentheses and brackets both read as lists"""
    assert parser.read("(+ 1 2)") == ["+", 1, 2]
    assert parser.read("[x => x]") == ["x", "=>", "x"]
    assert parser.read("(if (<= 1 2) \"a\" \"b\")") == ["if", ["<=", 1, 2], Quoted("a"), Quoted("b")]
    assert parser.read("()") == []

  def test_comments_and_many(self, parser):
    """Comments are skipped between top-level expressions"""
    source = """
    ; arithmetic
    (+ 1 2)
    (* 2 3) ; trailing comment
    """
    assert parser.read_many(source) == [["+", 1, 2], ["*", 2, 3]]
    assert read_many("; only a comment\n") == []

  def test_unbalanced_parentheses(self, parser):
    """Unclosed lists raise a located parse error with a hint"""
    with pytest.raises(LumenParseError) as exc_info:
      parser.read("(+ 1 2")
    error = exc_info.value
    assert error.line == 1
    assert any("Unbalanced" in s for s in error.suggestions)
    assert "Unbalanced" in str(error)

  @pytest.mark.parametrize("source", ["", "(+ 1 2))", '"unterminated', ")"])
  def test_malformed_text(self, parser, source):
    with pytest.raises(LumenParseError):
      parser.read(source)

  def test_format_literal(self):
    assert format_literal(["if", True, Quoted("a"), [1, 2.5]]) == '(if true "a" (1 2.5))'


class TestShapes:
  """Test the list-shape predicates"""

  def test_lambda_shape_checks_second_to_last(self):
    assert is_lambda_shape(["=>", 1])
    assert is_lambda_shape(["x", "y", "=>", "x"])
    assert not is_lambda_shape(["x"])
    assert not is_lambda_shape(["x", "=>"])
    assert not is_lambda_shape([Quoted("=>"), 1])

  def test_if_shape_needs_four_elements(self):
    assert is_if_shape(["if", True, 1, 2])
    assert not is_if_shape(["if", True, 1])
    assert not is_if_shape(["if", True, 1, 2, 3])
    assert not is_if_shape([Quoted("if"), True, 1, 2])


class TestParse:
  """Test literal tree -> AST translation"""

  def test_literals(self):
    assert parse(3) == NumberLiteral(3.0)
    assert isinstance(parse(3).value, float)
    assert parse(2.5) == NumberLiteral(2.5)
    assert parse(True) == BooleanLiteral(True)
    assert parse(False) == BooleanLiteral(False)
    assert parse(Quoted("hi")) == StringLiteral("hi")
    assert parse("x") == Identifier("x")

  def test_conditional(self):
    """Conditional over the three sub-literals in order"""
    assert parse(["if", True, 2.0, 1.0]) == Conditional(
        BooleanLiteral(True), NumberLiteral(2.0), NumberLiteral(1.0))

  def test_lambda(self):
    assert parse(["x", "y", "=>", ["+", "x", "y"]]) == Lambda(
        ("x", "y"),
        Application(Identifier("+"), (Identifier("x"), Identifier("y"))))

  def test_application(self):
    assert parse(["+", 1, 2]) == Application(
        Identifier("+"), (NumberLiteral(1.0), NumberLiteral(2.0)))
    assert parse(["f"]) == Application(Identifier("f"), ())
    assert parse([["x", "=>", "x"], 5]) == Application(
        Lambda(("x",), Identifier("x")), (NumberLiteral(5.0),))

  def test_conditional_takes_priority_over_lambda(self):
    """(if x => x) is a conditional even though it also looks like a lambda"""
    assert parse(["if", "x", "=>", "x"]) == Conditional(
        Identifier("x"), Identifier("=>"), Identifier("x"))

  def test_lambda_takes_priority_over_application(self):
    assert isinstance(parse(["f", "=>", 1]), Lambda)
    assert isinstance(parse(["if", "=>", 1]), Lambda)

  @pytest.mark.parametrize("literal", [
      [],
      "",
      None,
      {"a": 1},
      ["=>", 1],
      [1, "=>", 2],
      [Quoted("x"), "=>", "x"],
      ["+", 1, []],
  ])
  def test_parse_failure(self, literal):
    """Malformed literals fail instead of defaulting to a number"""
    with pytest.raises(LumenParseError):
      parse(literal)

  def test_number_out_of_range(self, interpreter):
    """Integers too large for a float are rejected as a parse failure"""
    with pytest.raises(LumenParseError) as exc_info:
      interpreter.run_source("(+ 1 " + "9" * 400 + ")")
    assert "number out of range" in exc_info.value.message

  def test_literal_failure_names_its_kind(self):
    with pytest.raises(LumenParseError) as exc_info:
      parse([])
    assert str(exc_info.value).startswith("ParseFailure: Parse error:")

  def test_pretty_print(self):
    text = pretty_print_ast(parse(["if", ["<=", "n", 1], Quoted("a"), ["n", "=>", "n"]]))
    assert text.splitlines() == [
        "Conditional",
        "  Application",
        "    Identifier(<=)",
        "    Identifier(n)",
        "    NumberLiteral(1.0)",
        "  StringLiteral('a')",
        "  Lambda(n)",
        "    Identifier(n)",
    ]
