"""
Lumen Standard Library
The fixed primitive table and its dispatcher
"""

from typing import Callable, Dict, List, Sequence
import operator

from error_handling import (
  DivisionByZeroError,
  LumenUserError,
  NoMatchingPrimitiveError,
)
from utilities import (
  binary_arithmetic_op,
  binary_comparison_op,
  validate_function_args,
)
from values import (
  BooleanValue,
  NumberValue,
  StringValue,
  Value,
  serialize,
  values_equal,
)


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

lumen_add = binary_arithmetic_op(operator.add, "+")
lumen_sub = binary_arithmetic_op(operator.sub, "-")
lumen_mul = binary_arithmetic_op(operator.mul, "*")


def lumen_div(args: Sequence[Value]) -> NumberValue:
  """Division; a zero divisor is an error rather than inf/nan"""
  validate_function_args("/", args, [NumberValue, NumberValue])
  x, y = args
  if y.value == 0:
    raise DivisionByZeroError(f"cannot divide {serialize(x)} by zero")
  return NumberValue(x.value / y.value)


# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================

lumen_le = binary_comparison_op(operator.le, "<=")


def lumen_equal(args: Sequence[Value]) -> BooleanValue:
  """Equality over any two values"""
  if len(args) != 2:
    raise NoMatchingPrimitiveError("equal?", len(args))
  x, y = args
  return BooleanValue(values_equal(x, y))


# ============================================================================
# SPECIAL FUNCTIONS
# ============================================================================

def describe_error_payload(args: Sequence[Value]) -> str:
  """Text of the arguments given to `error`"""
  parts = []
  for arg in args:
    if isinstance(arg, StringValue):
      parts.append(arg.value)
    else:
      parts.append(serialize(arg))
  return " ".join(parts)


def lumen_error(args: Sequence[Value]) -> Value:
  """Always fails, surfacing its arguments"""
  message = describe_error_payload(args)
  raise LumenUserError(message or "error called", tuple(args))


# ============================================================================
# BUILT-IN FUNCTION REGISTRY
# ============================================================================

BUILTIN_FUNCTIONS: Dict[str, Callable[[Sequence[Value]], Value]] = {
    "+": lumen_add,
    "-": lumen_sub,
    "*": lumen_mul,
    "/": lumen_div,
    "<=": lumen_le,
    "equal?": lumen_equal,
    "error": lumen_error,
}


def apply_primitive(name: str, args: Sequence[Value]) -> Value:
  """Dispatch a primitive by name on already evaluated arguments"""
  func = BUILTIN_FUNCTIONS.get(name)
  if func is None:
    # `true` and `false` are bound as primitive references but do nothing
    raise NoMatchingPrimitiveError(name, len(args))
  return func(list(args))


def list_builtin_functions() -> List[str]:
  """List all dispatchable primitives"""
  return list(BUILTIN_FUNCTIONS.keys())
