"""
Lumen Interpreter
Recursive reduction of AST nodes to values under an immutable environment.

There is no tail-call elimination: every nested application holds a Python
frame, so evaluation depth is bounded by the interpreter's recursion limit
(see `main.py --recursion-limit`).
"""

from typing import Any, List, Optional, Sequence

from environment import Environment, TOP_ENVIRONMENT, extend_env, lookup
from error_handling import TypeMismatchError
from parsing import create_parser, create_debug_parser
from semantics import (
  Application,
  BooleanLiteral,
  Conditional,
  Expr,
  Identifier,
  Lambda,
  NumberLiteral,
  StringLiteral,
  create_analyzer,
)
from stdlib import apply_primitive
from utilities import arity_error
from values import (
  BooleanValue,
  Closure,
  NumberValue,
  PrimitiveRef,
  StringValue,
  Value,
  serialize,
  type_name,
)


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_ast(ast_node: Expr, env: Environment, debug: bool = False) -> Value:
  """Evaluate an AST node to a value; env is never modified"""
  if debug:
    print(f"Evaluating: {type(ast_node).__name__}")

  if isinstance(ast_node, NumberLiteral):
    return NumberValue(ast_node.value)
  elif isinstance(ast_node, StringLiteral):
    return StringValue(ast_node.value)
  elif isinstance(ast_node, BooleanLiteral):
    return BooleanValue(ast_node.value)
  elif isinstance(ast_node, Identifier):
    return eval_identifier(ast_node, env, debug)
  elif isinstance(ast_node, Conditional):
    return eval_conditional(ast_node, env, debug)
  elif isinstance(ast_node, Lambda):
    return eval_lambda(ast_node, env, debug)
  elif isinstance(ast_node, Application):
    return eval_application(ast_node, env, debug)
  raise TypeError(f"not an AST node: {ast_node!r}")


def eval_identifier(ast_node: Identifier, env: Environment, debug: bool = False) -> Value:
  """Evaluate identifier by looking up in environment"""
  value = lookup(env, ast_node.name)
  if debug:
    print(f"  {ast_node.name} = {serialize(value)}")
  return value


def eval_conditional(ast_node: Conditional, env: Environment, debug: bool = False) -> Value:
  """Evaluate the test, then exactly one branch"""
  test = eval_ast(ast_node.condition, env, debug)
  if not isinstance(test, BooleanValue):
    raise TypeMismatchError(f"condition must be Boolean, got {type_name(test)}")

  if test.value:
    return eval_ast(ast_node.then_branch, env, debug)
  return eval_ast(ast_node.else_branch, env, debug)


def eval_lambda(ast_node: Lambda, env: Environment, debug: bool = False) -> Closure:
  """Create a closure over the current environment"""
  return Closure(ast_node.params, ast_node.body, env)


def eval_arguments(args: Sequence[Expr], env: Environment, debug: bool = False) -> List[Value]:
  """Evaluate arguments left to right"""
  return [eval_ast(arg, env, debug) for arg in args]


def apply_closure(closure: Closure, args: List[Value], debug: bool = False) -> Value:
  """Bind arguments in the closure's captured environment and run its body"""
  if len(closure.params) != len(args):
    raise arity_error(f"procedure ({' '.join(closure.params)} => ...)",
                      len(closure.params), len(args))

  call_env = extend_env(closure.env, closure.params, args)
  return eval_ast(closure.body, call_env, debug)


def eval_application(ast_node: Application, env: Environment, debug: bool = False) -> Value:
  """Evaluate function application"""
  func = eval_ast(ast_node.callee, env, debug)

  if isinstance(func, PrimitiveRef):
    args = eval_arguments(ast_node.args, env, debug)
    if debug:
      print(f"Applying primitive: {func.name} to {len(args)} argument(s)")
    return apply_primitive(func.name, args)
  elif isinstance(func, Closure):
    args = eval_arguments(ast_node.args, env, debug)
    if debug:
      print(f"Applying closure ({' '.join(func.params)}) to {len(args)} argument(s)")
    return apply_closure(func, args, debug)

  raise TypeMismatchError(f"not callable: {serialize(func)}")


def interp(node: Expr, env: Environment = TOP_ENVIRONMENT) -> Value:
  """Evaluate node under env"""
  return eval_ast(node, env)


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def run(source: str, env: Environment = TOP_ENVIRONMENT) -> Value:
  """Read, parse and evaluate a single expression"""
  return create_interpreter().run_source(source, env)


def run_many(source: str, env: Environment = TOP_ENVIRONMENT) -> List[Value]:
  """Evaluate every top-level expression of source independently"""
  return create_interpreter().run_program(source, env)


class LumenInterpreter:
  """Ties reader, analyzer and evaluator together"""

  def __init__(self, debug: bool = False, global_env: Environment = TOP_ENVIRONMENT):
    self.debug = debug
    self.global_env = global_env
    self.parser = create_debug_parser() if debug else create_parser()
    self.analyzer = create_analyzer(debug)

  def evaluate(self, node: Expr, env: Optional[Environment] = None) -> Value:
    return eval_ast(node, self.global_env if env is None else env, self.debug)

  def interpret(self, literal: Any, env: Optional[Environment] = None) -> Value:
    """Parse and evaluate a literal tree"""
    return self.evaluate(self.analyzer.analyze_expression(literal), env)

  def run_source(self, source: str, env: Optional[Environment] = None) -> Value:
    return self.interpret(self.parser.read(source), env)

  def run_program(self, source: str, env: Optional[Environment] = None) -> List[Value]:
    nodes = self.analyzer.analyze(self.parser.read_many(source))
    return [self.evaluate(node, env) for node in nodes]

  def run_file(self, path: str, env: Optional[Environment] = None) -> List[Value]:
    nodes = self.analyzer.analyze(self.parser.read_file(path))
    return [self.evaluate(node, env) for node in nodes]


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(debug: bool = False, global_env: Environment = TOP_ENVIRONMENT) -> LumenInterpreter:
  """Factory function returning an interpreter"""
  return LumenInterpreter(debug=debug, global_env=global_env)


def create_debug_interpreter() -> LumenInterpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
