""" Dot Products
------------
Matrix-matrix, matrix-vector, vector-matrix and vector-vector products
over arrays and strided views. Products that yield an array are lazy: the
returned `Dot` is evaluated when it is assigned into an array or a view.
The vector-vector product is evaluated immediately.
"""
import numpy as np

from . import ops
from . import scalar as mc


def _positions(offset: int, strides, lengths) -> np.ndarray:
  pos = np.full(tuple(lengths), offset)
  for axis, (stride, length) in enumerate(zip(strides, lengths)):
    shape = [1] * len(lengths)
    shape[axis] = length
    pos = pos + stride * np.arange(length).reshape(shape)
  return pos


def _gather(operand) -> np.ndarray:
  flat, offset, strides, lengths = operand._strided()
  return flat[_positions(offset, strides, lengths)]


def _lengths(operand) -> tuple[int, ...]:
  return tuple(operand._strided()[3])


def _product(a: np.ndarray, da, b: np.ndarray, db) -> np.ndarray:
  """Contracts the last element axis of `a` with the first of `b`."""
  depth = ops.result_depth(da, db)
  if depth is None:
    return np.tensordot(a, b, axes=1)
  a = ops.convert(a, da, depth)
  b = ops.convert(b, db, depth)
  na, nb = a.ndim - 1, b.ndim - 1
  a = a.reshape(a.shape[:-1] + (1,) * (nb - 1) + a.shape[-1:])
  b = b.reshape((1,) * (na - 1) + b.shape)
  return mc.multiply(a, b).sum(axis=na - 1)


class Dot(ops.Deferred):
  """A pending product of two arrays or views."""

  def __init__(self, lhs, rhs):
    self.lhs = lhs
    self.rhs = rhs
    self.shape = _lengths(lhs)[:-1] + _lengths(rhs)[1:]
    self.depth = ops.result_depth(lhs.depth, rhs.depth)

  def evaluate(self) -> np.ndarray:
    return _product(
      _gather(self.lhs), self.lhs.depth, _gather(self.rhs), self.rhs.depth
    )

  def dot(self, *key: int):
    """Evaluates the single entry of the product at `key`."""
    a = _gather(self.lhs)
    b = _gather(self.rhs)
    key = list(key)
    if len(_lengths(self.lhs)) == 2:
      a = a[key.pop(0)]
    if len(_lengths(self.rhs)) == 2:
      b = b[:, key.pop(0)]
    value = _product(a, self.lhs.depth, b, self.rhs.depth)
    if self.depth is None:
      return value.item()
    return mc.Scalar.from_coeffs(value, copy=False)

  def write_to(self, target) -> None:
    flat, offset, strides, lengths = target._strided()
    if tuple(lengths) != self.shape:
      raise ValueError(
        f"Cannot store a product of shape {self.shape} into shape {tuple(lengths)}."
      )
    values = ops.convert(self.evaluate(), self.depth, target.depth)
    flat[_positions(offset, strides, lengths)] = values


def dot(lhs, rhs):
  """Product of two arrays or views of rank one or two.

  Args:
    lhs: Left operand (an `Array`, `Vector` or `Matrix`).
    rhs: Right operand.

  Returns:
    A lazy `Dot` for products with a vector or matrix result, or the value
    itself (a number or `Scalar`) for a vector-vector product.

  Raises:
    TypeError: If an operand is not an array or view.
    ValueError: If an operand has rank above two or the inner sizes differ.
  """
  if not (hasattr(lhs, "_strided") and hasattr(rhs, "_strided")):
    raise TypeError(
      f"Cannot multiply {type(lhs).__name__} and {type(rhs).__name__}."
    )
  la, lb = _lengths(lhs), _lengths(rhs)
  if not (1 <= len(la) <= 2 and 1 <= len(lb) <= 2):
    raise ValueError(f"Dot products need rank 1 or 2 operands, got {la} and {lb}.")
  if la[-1] != lb[0]:
    raise ValueError(f"Inner sizes differ: {la} and {lb}.")
  product = Dot(lhs, rhs)
  if product.shape:
    return product
  value = product.evaluate()
  if product.depth is None:
    return value.item()
  return mc.Scalar.from_coeffs(value, copy=False)
