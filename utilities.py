"""
Utilities module for the Lumen interpreter
Contains common helper functions shared by the primitive table and the evaluator
"""

from typing import Any, Callable, List, Sequence, Type

from error_handling import (
  ArityMismatchError,
  NoMatchingPrimitiveError,
  TypeMismatchError,
)
from values import BooleanValue, NumberValue, Value, type_name


# ==================== ERROR MESSAGE BUILDERS ====================

def type_mismatch_error(
  func_name: str,
  param_name: str,
  expected: str,
  actual: Value
) -> TypeMismatchError:
  """
  Generate type mismatch error

  Args:
    func_name: Function name
    param_name: Parameter name
    expected: Expected type
    actual: Actual value

  Returns:
    TypeMismatchError with formatted message
  """
  return TypeMismatchError(
    f"{func_name} requires {expected} for {param_name}, got {type_name(actual)}"
  )


def arity_error(func_name: str, expected: int, got: int) -> ArityMismatchError:
  """
  Generate arity mismatch error

  Args:
    func_name: Function name
    expected: Expected number of arguments
    got: Actual number of arguments

  Returns:
    ArityMismatchError with formatted message
  """
  return ArityMismatchError(
    f"{func_name} requires {expected} arguments, got {got}", expected, got
  )


# ==================== VALIDATION UTILITIES ====================

def validate_function_args(
  func_name: str,
  args: Sequence[Value],
  expected_types: List[Type]
) -> None:
  """
  Validate primitive arguments match expected value types

  An argument count that differs from the expected one means no primitive
  of that shape exists, which is reported as NoMatchingPrimitive.

  Raises:
    NoMatchingPrimitiveError if the count is wrong
    TypeMismatchError if an argument has the wrong variant
  """
  if len(args) != len(expected_types):
    raise NoMatchingPrimitiveError(func_name, len(args))

  for i, (arg, expected) in enumerate(zip(args, expected_types)):
    if not isinstance(arg, expected):
      raise type_mismatch_error(
        func_name,
        f"argument {i+1}",
        expected.__name__.replace("Value", ""),
        arg
      )


# ==================== BINARY OPERATION FACTORIES ====================

def binary_comparison_op(
  op: Callable[[Any, Any], bool],
  op_name: str
) -> Callable[[Sequence[Value]], BooleanValue]:
  """
  Factory for binary numeric comparisons

  Examples:
    lumen_le = binary_comparison_op(operator.le, "<=")
    lumen_le([NumberValue(1.0), NumberValue(2.0)]) -> BooleanValue(True)
  """
  def comparison(args: Sequence[Value]) -> BooleanValue:
    validate_function_args(op_name, args, [NumberValue, NumberValue])
    x, y = args
    return BooleanValue(op(x.value, y.value))

  comparison.__name__ = f"lumen_{op.__name__}"
  return comparison


def binary_arithmetic_op(
  op: Callable[[Any, Any], Any],
  op_name: str
) -> Callable[[Sequence[Value]], NumberValue]:
  """
  Factory for binary arithmetic operations

  Examples:
    lumen_add = binary_arithmetic_op(operator.add, "+")
    lumen_add([NumberValue(1.0), NumberValue(2.0)]) -> NumberValue(3.0)
  """
  def arithmetic(args: Sequence[Value]) -> NumberValue:
    validate_function_args(op_name, args, [NumberValue, NumberValue])
    x, y = args
    return NumberValue(float(op(x.value, y.value)))

  arithmetic.__name__ = f"lumen_{op.__name__}"
  return arithmetic
