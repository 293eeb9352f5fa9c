"""
Lumen semantic parser
Translates literal trees into immutable AST nodes by fixed shape rules:
conditional before lambda before application
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union

from error_handling import LumenParseError
from parsing import Quoted, format_literal


IF_KEYWORD = "if"
LAMBDA_ARROW = "=>"


# ============================================================================
# AST NODES (Frozen Dataclasses)
# ============================================================================

@dataclass(frozen=True)
class NumberLiteral:
  value: float


@dataclass(frozen=True)
class StringLiteral:
  value: str


@dataclass(frozen=True)
class BooleanLiteral:
  value: bool


@dataclass(frozen=True)
class Identifier:
  name: str


@dataclass(frozen=True)
class Conditional:
  condition: 'Expr'
  then_branch: 'Expr'
  else_branch: 'Expr'


@dataclass(frozen=True)
class Lambda:
  params: Tuple[str, ...]
  body: 'Expr'


@dataclass(frozen=True)
class Application:
  callee: 'Expr'
  args: Tuple['Expr', ...]


Expr = Union[NumberLiteral, StringLiteral, BooleanLiteral, Identifier,
             Conditional, Lambda, Application]


# ============================================================================
# SHAPE PREDICATES
# ============================================================================

def is_atom(literal: Any) -> bool:
  """A bare symbol: plain text, never a Quoted string literal"""
  return isinstance(literal, str)


def is_if_shape(elements: Sequence[Any]) -> bool:
  """(if test then else)"""
  return len(elements) == 4 and is_atom(elements[0]) and elements[0] == IF_KEYWORD


def is_lambda_shape(elements: Sequence[Any]) -> bool:
  """(param ... => body): the second-to-last element is the arrow"""
  return (len(elements) >= 2
          and is_atom(elements[-2])
          and elements[-2] == LAMBDA_ARROW)


# ============================================================================
# ANALYSIS FUNCTIONS
# ============================================================================

def analyze_number(literal, debug: bool = False) -> NumberLiteral:
  try:
    return NumberLiteral(float(literal))
  except OverflowError:
    raise LumenParseError(f"number out of range: {literal}") from None


def analyze_identifier(literal: str, debug: bool = False) -> Identifier:
  if not literal:
    raise LumenParseError("empty identifier")
  return Identifier(literal)


def analyze_conditional(elements: Sequence[Any], debug: bool = False) -> Conditional:
  """Conditional over elements 1, 2 and 3 in order"""
  _, test, then_branch, else_branch = elements
  return Conditional(
      analyze_literal(test, debug),
      analyze_literal(then_branch, debug),
      analyze_literal(else_branch, debug)
  )


def analyze_lambda(elements: Sequence[Any], debug: bool = False) -> Lambda:
  """Everything before the arrow names a parameter; the last element is the body"""
  raw_params = elements[:-2]
  if not raw_params:
    raise LumenParseError(
        f"lambda needs at least one parameter: {format_literal(list(elements))}")

  params: List[str] = []
  for raw in raw_params:
    if not is_atom(raw) or not raw:
      raise LumenParseError(
          f"lambda parameter must be an identifier, got {format_literal(raw)}")
    params.append(raw)

  return Lambda(tuple(params), analyze_literal(elements[-1], debug))


def analyze_application(elements: Sequence[Any], debug: bool = False) -> Application:
  """First element is the callee, the rest are arguments"""
  callee = analyze_literal(elements[0], debug)
  args = tuple(analyze_literal(element, debug) for element in elements[1:])
  return Application(callee, args)


def analyze_list(elements: Sequence[Any], debug: bool = False) -> Expr:
  """Classify a list form by shape"""
  if not elements:
    raise LumenParseError("cannot parse an empty list")

  if is_if_shape(elements):
    if debug:
      print(f"Parsing conditional: {format_literal(list(elements))}")
    return analyze_conditional(elements, debug)
  elif is_lambda_shape(elements):
    if debug:
      print(f"Parsing lambda: {format_literal(list(elements))}")
    return analyze_lambda(elements, debug)
  else:
    if debug:
      print(f"Parsing application: {format_literal(list(elements))}")
    return analyze_application(elements, debug)


def analyze_literal(literal: Any, debug: bool = False) -> Expr:
  """Translate one literal tree into an AST node"""
  # bool is a subclass of int, so it must be checked first
  if isinstance(literal, bool):
    return BooleanLiteral(literal)
  elif isinstance(literal, (int, float)):
    return analyze_number(literal, debug)
  elif isinstance(literal, Quoted):
    return StringLiteral(literal.text)
  elif isinstance(literal, str):
    return analyze_identifier(literal, debug)
  elif isinstance(literal, (list, tuple)):
    return analyze_list(literal, debug)
  raise LumenParseError(f"unrecognized literal: {literal!r}")


def parse(literal: Any) -> Expr:
  """Parse a literal tree into an AST"""
  return analyze_literal(literal)


# ============================================================================
# AST UTILITIES
# ============================================================================

def pretty_print_ast(node: Expr, indent: int = 0) -> str:
  """Pretty print an AST node for debugging"""
  pad = "  " * indent
  if isinstance(node, NumberLiteral):
    return f"{pad}NumberLiteral({node.value!r})\n"
  elif isinstance(node, StringLiteral):
    return f"{pad}StringLiteral({node.value!r})\n"
  elif isinstance(node, BooleanLiteral):
    return f"{pad}BooleanLiteral({node.value!r})\n"
  elif isinstance(node, Identifier):
    return f"{pad}Identifier({node.name})\n"
  elif isinstance(node, Conditional):
    return (f"{pad}Conditional\n"
            + pretty_print_ast(node.condition, indent + 1)
            + pretty_print_ast(node.then_branch, indent + 1)
            + pretty_print_ast(node.else_branch, indent + 1))
  elif isinstance(node, Lambda):
    return f"{pad}Lambda({', '.join(node.params)})\n" + pretty_print_ast(node.body, indent + 1)
  elif isinstance(node, Application):
    result = f"{pad}Application\n" + pretty_print_ast(node.callee, indent + 1)
    for arg in node.args:
      result += pretty_print_ast(arg, indent + 1)
    return result
  raise TypeError(f"not an AST node: {node!r}")


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

class LumenAnalyzer:
  """Literal-tree to AST translation with an optional debug trace"""

  def __init__(self, debug: bool = False):
    self.debug = debug

  def analyze(self, literals: Sequence[Any]) -> List[Expr]:
    return [analyze_literal(literal, self.debug) for literal in literals]

  def analyze_expression(self, literal: Any) -> Expr:
    return analyze_literal(literal, self.debug)


def create_analyzer(debug: bool = False) -> LumenAnalyzer:
  """Factory function returning an analyzer"""
  return LumenAnalyzer(debug=debug)


def create_debug_analyzer() -> LumenAnalyzer:
  """Factory function returning a debug analyzer"""
  return create_analyzer(debug=True)
