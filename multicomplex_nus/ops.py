""" Lazy Array Operations
---------------------
Arithmetic on arrays does not compute anything right away. Each operator
builds a small expression tree whose leaves are arrays and constants. The
tree is evaluated once, when it is assigned into a target array, so a chain
such as `w[...] = x + y * -z / 2` makes a single pass over whole-array
numpy operations.

Values flow through evaluation as numpy arrays. Plain arrays hold one
number per element. Multicomplex arrays carry a trailing coefficient axis
of length 2**depth.
"""
import numbers

import numpy as np

from . import scalar as mc
from .extents import Extents


def result_depth(a: int | None, b: int | None) -> int | None:
  """Depth of a binary result: the larger operand depth, None if both are plain."""
  if a is None:
    return b
  if b is None:
    return a
  return max(a, b)


def convert(value: np.ndarray, depth: int | None, to_depth: int | None) -> np.ndarray:
  """Re-expresses evaluated values at another depth.

  Plain values become the depth-0 coefficient of multicomplex values.

  Raises:
    ValueError: When multicomplex values would be narrowed.
  """
  if depth == to_depth:
    return value
  if to_depth is None:
    raise ValueError(f"Cannot store depth {depth} values in a plain array.")
  if depth is None:
    value = np.asarray(value, dtype=np.float64)[..., None]
  elif depth > to_depth:
    raise ValueError(f"Cannot store depth {depth} values at depth {to_depth}.")
  return mc.promote(value, to_depth)


def _truncating_divide(a: np.ndarray, b: np.ndarray) -> np.ndarray:
  q = np.abs(a) // np.abs(b)
  return q * np.sign(a) * np.sign(b)


def _plain_divide(a: np.ndarray, b: np.ndarray) -> np.ndarray:
  a, b = np.asarray(a), np.asarray(b)
  if np.issubdtype(a.dtype, np.integer) and np.issubdtype(b.dtype, np.integer):
    return _truncating_divide(a, b)
  return np.true_divide(a, b)


def _apply(op: str, a: np.ndarray, da, b: np.ndarray, db) -> np.ndarray:
  depth = result_depth(da, db)
  if depth is None:
    if op == "+":
      return np.add(a, b)
    if op == "-":
      return np.subtract(a, b)
    if op == "*":
      return np.multiply(a, b)
    return _plain_divide(a, b)

  # Real operands scale whole coefficient vectors.
  if op in ("*", "/") and db is None:
    b = np.asarray(b, dtype=np.float64)[..., None]
    return a * b if op == "*" else a / b
  if op == "*" and da is None:
    return np.asarray(a, dtype=np.float64)[..., None] * b
  a = convert(a, da, depth)
  b = convert(b, db, depth)
  if op == "+":
    return a + b
  if op == "-":
    return a - b
  if op == "*":
    return mc.multiply(a, b)
  return mc.multiply(a, mc.inverse(b))


class Elementwise:
  """Operator mixin shared by arrays and expression nodes.

  Subclasses provide `extents`, `depth` and `evaluate()`.
  """

  # Keep numpy scalars from claiming the reflected operators.
  __array_ufunc__ = None

  extents: Extents
  depth: int | None

  def evaluate(self) -> np.ndarray:
    raise NotImplementedError

  def __neg__(self):
    return Unary("-", self)

  def __pos__(self):
    return self

  def __invert__(self):
    return Unary("~", self)

  def __add__(self, other):
    return Binary.build("+", self, other)

  def __radd__(self, other):
    return Binary.build("+", other, self)

  def __sub__(self, other):
    return Binary.build("-", self, other)

  def __rsub__(self, other):
    return Binary.build("-", other, self)

  def __mul__(self, other):
    return Binary.build("*", self, other)

  def __rmul__(self, other):
    return Binary.build("*", other, self)

  def __truediv__(self, other):
    return Binary.build("/", self, other)

  def __rtruediv__(self, other):
    return Binary.build("/", other, self)


class Constant:
  """Broadcast leaf wrapping a real number or a `Scalar`."""

  def __init__(self, value):
    if isinstance(value, mc.Scalar):
      self.depth = value.depth
      self.value = value.coeffs.copy()
    else:
      self.depth = None
      self.value = value

  def evaluate(self):
    return self.value


def operand(value):
  """Wraps a binary operand, or returns None if it is not supported."""
  if isinstance(value, Elementwise):
    return value
  if isinstance(value, (numbers.Real, mc.Scalar)):
    return Constant(value)
  return None


class Unary(Elementwise):
  """Negation ("-") or conjugation ("~") of an operand."""

  def __init__(self, op: str, arg: Elementwise):
    self.op = op
    self.arg = arg
    self.extents = arg.extents
    self.depth = arg.depth

  def evaluate(self) -> np.ndarray:
    value = self.arg.evaluate()
    if self.op == "-":
      return np.negative(value)
    if self.depth is None:
      return value
    return mc.conjugate(value)


class Binary(Elementwise):
  """One of "+", "-", "*" or "/" applied to two operands."""

  def __init__(self, op: str, lhs, rhs):
    self.op = op
    self.lhs = lhs
    self.rhs = rhs
    shaped = [x for x in (lhs, rhs) if isinstance(x, Elementwise)]
    if len(shaped) == 2 and shaped[0].extents != shaped[1].extents:
      raise ValueError(
        f"Operand extents differ: {shaped[0].extents} vs {shaped[1].extents}."
      )
    self.extents = shaped[0].extents
    self.depth = result_depth(lhs.depth, rhs.depth)

  @classmethod
  def build(cls, op: str, lhs, rhs):
    a, b = operand(lhs), operand(rhs)
    if a is None or b is None:
      return NotImplemented
    return cls(op, a, b)

  def evaluate(self) -> np.ndarray:
    return _apply(
      self.op,
      self.lhs.evaluate(), self.lhs.depth,
      self.rhs.evaluate(), self.rhs.depth,
    )


class Deferred:
  """A result (schedule operation, dot product) that writes into an array."""

  def write_to(self, target) -> None:
    raise NotImplementedError
