"""
Lumen runtime values
The closed set of results an evaluation can produce, plus their text form
"""

from dataclasses import dataclass
from typing import Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
  from environment import Environment
  from semantics import Expr


# ============================================================================
# DATA STRUCTURES (Frozen Dataclasses)
# ============================================================================

@dataclass(frozen=True)
class NumberValue:
  value: float


@dataclass(frozen=True)
class BooleanValue:
  value: bool


@dataclass(frozen=True)
class StringValue:
  value: str


@dataclass(frozen=True)
class PrimitiveRef:
  """Opaque handle naming an entry of the primitive table"""
  name: str


@dataclass(frozen=True, eq=False)
class Closure:
  """A lambda paired with the environment it was evaluated in.

  Closures compare by identity; two separately created closures are never
  equal even when their parameters and bodies match.
  """
  params: Tuple[str, ...]
  body: 'Expr'
  env: 'Environment'

  def __repr__(self) -> str:
    return f"Closure(params={self.params!r})"


Value = Union[NumberValue, BooleanValue, StringValue, PrimitiveRef, Closure]


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def type_name(value: Value) -> str:
  """Short user-facing name of a value's variant"""
  if isinstance(value, NumberValue):
    return "Number"
  elif isinstance(value, BooleanValue):
    return "Boolean"
  elif isinstance(value, StringValue):
    return "String"
  elif isinstance(value, PrimitiveRef):
    return "Primitive"
  elif isinstance(value, Closure):
    return "Closure"
  raise TypeError(f"not a Lumen value: {value!r}")


def serialize(value: Value) -> str:
  """Convert a value to its canonical text form"""
  if isinstance(value, NumberValue):
    return repr(value.value)
  elif isinstance(value, BooleanValue):
    return "true" if value.value else "false"
  elif isinstance(value, StringValue):
    return f'"{value.value}"'
  elif isinstance(value, PrimitiveRef):
    return "#<primop>"
  elif isinstance(value, Closure):
    return "#<procedure>"
  raise TypeError(f"not a Lumen value: {value!r}")


def values_equal(x: Value, y: Value) -> bool:
  """Structural equality across variants; numbers compare numerically"""
  if isinstance(x, NumberValue) and isinstance(y, NumberValue):
    return x.value == y.value
  if type(x) is not type(y):
    return False
  return x == y
