"""
Lumen runtime environments
Persistent chain of read-only frames; extension never mutates the parent
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence

from error_handling import ArityMismatchError, UnboundIdentifierError
from values import PrimitiveRef, Value


PRIMITIVE_NAMES = ("+", "-", "*", "/", "<=", "equal?", "true", "false", "error")


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class Environment:
  """One frame of bindings plus a link to the enclosing environment"""
  frame: Mapping[str, Value]
  parent: Optional['Environment'] = None

  def __contains__(self, name: str) -> bool:
    env = self
    while env is not None:
      if name in env.frame:
        return True
      env = env.parent
    return False

  def __repr__(self) -> str:
    depth = 0
    env = self.parent
    while env is not None:
      depth += 1
      env = env.parent
    return f"Environment({sorted(self.frame)!r}, depth={depth})"


def make_runtime_env(parent: Optional[Environment] = None,
                     bindings: Optional[Mapping[str, Value]] = None) -> Environment:
  """Create an environment whose frame is a read-only copy of bindings"""
  return Environment(MappingProxyType(dict(bindings or {})), parent)


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def lookup(env: Environment, name: str) -> Value:
  """Find the innermost binding of name"""
  current = env
  while current is not None:
    if name in current.frame:
      return current.frame[name]
    current = current.parent
  raise UnboundIdentifierError(name)


def extend_env(env: Environment, names: Sequence[str], values: Sequence[Value]) -> Environment:
  """Return a new environment binding names to values positionally"""
  if len(names) != len(values):
    raise ArityMismatchError(
        f"cannot bind {len(names)} name(s) to {len(values)} value(s)",
        len(names), len(values))
  return make_runtime_env(env, dict(zip(names, values)))


def env_bind_value(env: Environment, name: str, value: Value) -> Environment:
  """Return new environment with a single name bound to value"""
  return extend_env(env, [name], [value])


def env_bindings(env: Environment) -> Dict[str, Value]:
  """Flatten the visible bindings, inner frames shadowing outer ones"""
  frames = []
  current = env
  while current is not None:
    frames.append(current.frame)
    current = current.parent
  flat: Dict[str, Value] = {}
  for frame in reversed(frames):
    flat.update(frame)
  return flat


def user_bindings(env: Environment) -> Iterable[str]:
  """Names visible in env that are not part of the top-level table"""
  return [name for name, value in env_bindings(env).items()
          if not (name in PRIMITIVE_NAMES and value == PrimitiveRef(name))]


def create_builtin_runtime_env() -> Environment:
  """Create the top-level environment of primitive references"""
  return make_runtime_env(None, {name: PrimitiveRef(name) for name in PRIMITIVE_NAMES})


TOP_ENVIRONMENT = create_builtin_runtime_env()


def top_environment() -> Environment:
  """The shared top-level environment"""
  return TOP_ENVIRONMENT
