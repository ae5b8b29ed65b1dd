""" Vector and Matrix Views
-----------------------
Non-owning, strided windows onto an array's storage. A view along axis d
steps through the flat storage with stride `extents.stride(d)`, starting at
the packed offset of a chosen index. Views stay valid only while the array
they alias is alive.
"""
import numbers

import numpy as np

from . import dot as dot_ops
from . import ops
from . import scalar as mc
from .index import Index


def _start(array, index) -> int:
  if index is None:
    return 0
  if not isinstance(index, Index):
    index = Index(array.extents, index)
  return index.pack_right()


class _View:
  """Shared element access through flat storage positions."""

  def __init__(self, array, offset: int):
    self._array = array
    self.offset = offset

  @property
  def array(self):
    return self._array

  @property
  def depth(self) -> int | None:
    return self._array.depth

  @property
  def dtype(self) -> np.dtype:
    return self._array.dtype

  def _get(self, pos: int):
    return self._array._element_at(pos)

  def _set(self, pos: int, value):
    self._array._store_at(pos, value)

  def positions(self) -> np.ndarray:
    raise NotImplementedError

  def values(self) -> np.ndarray:
    """A copy of the viewed elements."""
    return self._array.flat[self.positions()]

  def assign(self, source):
    """Stores a dot product, an array or a sequence of values into the view."""
    if isinstance(source, ops.Deferred):
      source.write_to(self)
      return self
    pos = self.positions()
    if isinstance(source, ops.Elementwise):
      values = ops.convert(source.evaluate(), source.depth, self.depth)
    elif self.depth is None:
      values = np.asarray(source, dtype=self.dtype)
    else:
      values = np.stack([mc.as_coeffs(v, self.depth) for v in source])
    self._array.flat[pos.ravel()] = np.reshape(values, (pos.size,) + self._array.flat.shape[1:])
    return self

  def __matmul__(self, other):
    return dot_ops.dot(self, other)

  def __rmatmul__(self, other):
    return dot_ops.dot(other, self)


class Vector(_View):
  """A one-dimensional view along `axis`.

  Args:
    array: Array to alias.
    axis: Axis the view runs along.
    index: Start index (an `Index` or a coordinate tuple); defaults to the
      zero corner.
  """

  def __init__(self, array, axis: int = 0, index=None):
    self.axis = array.extents.check_axis(axis)
    super().__init__(array, _start(array, index))
    self.stride = array.extents.stride(self.axis)
    self.length = array.extents[self.axis]

  def __len__(self) -> int:
    return self.length

  def __getitem__(self, i: int):
    return self._get(self.offset + self.stride * i)

  def __setitem__(self, i: int, value):
    self._set(self.offset + self.stride * i, value)

  def __add__(self, k: int) -> "Vector":
    """The same view moved `k` steps along its axis."""
    if not isinstance(k, numbers.Integral):
      return NotImplemented
    shifted = Vector(self._array, self.axis)
    shifted.offset = self.offset + self.stride * int(k)
    return shifted

  def positions(self) -> np.ndarray:
    return self.offset + self.stride * np.arange(self.length)

  def _strided(self):
    return self._array.flat, self.offset, (self.stride,), (self.length,)


class Matrix(_View):
  """A two-dimensional view over `axis1` (rows) and `axis2` (columns)."""

  def __init__(self, array, axis1: int = 0, axis2: int = 1, index=None):
    self.axis1 = array.extents.check_axis(axis1)
    self.axis2 = array.extents.check_axis(axis2)
    if self.axis1 == self.axis2:
      raise ValueError("Matrix views need two distinct axes.")
    super().__init__(array, _start(array, index))
    self.stride1 = array.extents.stride(self.axis1)
    self.stride2 = array.extents.stride(self.axis2)
    self.rows = array.extents[self.axis1]
    self.cols = array.extents[self.axis2]

  @property
  def shape(self) -> tuple[int, int]:
    return self.rows, self.cols

  def _pos(self, key) -> int:
    i, j = key
    return self.offset + self.stride1 * i + self.stride2 * j

  def __getitem__(self, key):
    return self._get(self._pos(key))

  def __setitem__(self, key, value):
    self._set(self._pos(key), value)

  def positions(self) -> np.ndarray:
    return (
      self.offset
      + self.stride1 * np.arange(self.rows)[:, None]
      + self.stride2 * np.arange(self.cols)[None, :]
    )

  def _strided(self):
    return (
      self._array.flat,
      self.offset,
      (self.stride1, self.stride2),
      (self.rows, self.cols),
    )
