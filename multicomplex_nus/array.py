""" Fixed-Shape Arrays
------------------
`Array` owns a row-major block of elements whose extents are fixed at
construction. Elements are either plain numbers of a numpy dtype or
multicomplex values of a fixed depth, stored with a trailing coefficient
axis of length 2**depth.

Arrays are assigned into rather than copied: `y.assign(x + 1)` or
`y[...] = x + 1`. Arithmetic builds lazy expressions (see `ops`), `%` with a
`Schedule` extracts or inserts scheduled samples, and `*=` with a schedule
masks everything outside its support.
"""
import functools
import numbers
from typing import Callable, Iterator

import numpy as np

from . import dot as dot_ops
from . import ops
from . import scalar as mc
from .extents import Extents, as_extents
from .index import Index
from .schedule import Schedule
from .views import Vector


class Array(ops.Elementwise):
  """Fixed-shape multidimensional array.

  Args:
    extents: Per-dimension sizes (an int, a tuple or an `Extents`).
    values: Optional flat sequence of exactly `count(extents)` initial values
      in row-major order. Multicomplex arrays accept numbers, `Scalar`s or
      coefficient tuples.
    dtype: Element dtype of plain arrays.
    depth: Multicomplex depth. None makes a plain array.

  Example:
    >>> x = Array((2, 3), [1, 2, 3, 4, 5, 6], dtype=int)
    >>> x[0][1], x[1, 2]
    (2, 6)
  """

  def __init__(
    self,
    extents,
    values=None,
    *,
    dtype: np.dtype = np.float64,
    depth: int | None = None,
  ):
    self._extents = as_extents(extents)
    if depth is not None and depth < 0:
      raise ValueError(f"Depth must be non-negative, got {depth}.")
    self._depth = None if depth is None else int(depth)
    if self._depth is None:
      self._data = np.zeros(self._extents.sizes, dtype=dtype)
    else:
      self._data = np.zeros(self._extents.sizes + (1 << self._depth,))
    if values is not None:
      self._fill(values)

  @classmethod
  def _wrap(cls, data: np.ndarray, depth: int | None) -> "Array":
    """Non-owning array over existing storage."""
    obj = cls.__new__(cls)
    obj._depth = depth
    obj._data = data
    obj._extents = Extents(*(data.shape if depth is None else data.shape[:-1]))
    return obj

  @classmethod
  def like(cls, other, extents=None) -> "Array":
    """Zero array with the element type of `other`."""
    return cls(
      other.extents if extents is None else extents,
      dtype=other.dtype,
      depth=other.depth,
    )

  def __copy__(self):
    raise TypeError("Arrays are not copyable; assign into another Array.")

  def __deepcopy__(self, memo):
    raise TypeError("Arrays are not copyable; assign into another Array.")

  # Shape and storage.

  @property
  def extents(self) -> Extents:
    return self._extents

  @property
  def shape(self) -> tuple[int, ...]:
    return self._extents.sizes

  @property
  def ndims(self) -> int:
    return self._extents.ndims

  @property
  def size(self) -> int:
    return self._extents.count

  @property
  def depth(self) -> int | None:
    return self._depth

  @property
  def dtype(self) -> np.dtype:
    return self._data.dtype

  @property
  def data(self) -> np.ndarray:
    return self._data

  @property
  def flat(self) -> np.ndarray:
    """Storage viewed as (size,) or (size, 2**depth)."""
    return self._data.reshape((self.size,) + self._data.shape[self.ndims:])

  def evaluate(self) -> np.ndarray:
    return self._data

  def __len__(self) -> int:
    return self._extents[0]

  def __iter__(self):
    for i in range(self._extents[0]):
      yield self[i]

  def __repr__(self) -> str:
    kind = "plain" if self._depth is None else f"depth={self._depth}"
    return f"Array({self._extents.sizes}, {kind}, dtype={self.dtype})"

  # Element access.

  def _element_at(self, pos: int):
    if self._depth is None:
      return self.flat[pos].item()
    return mc.Scalar.from_coeffs(self.flat[pos], copy=False)

  def _store_at(self, pos: int, value):
    if self._depth is None:
      self.flat[pos] = value
    else:
      self.flat[pos] = mc.as_coeffs(value, self._depth)

  def _location(self, key) -> tuple[int, ...]:
    if isinstance(key, Index):
      key = tuple(key)
    if len(key) != self.ndims:
      raise ValueError(f"Expected {self.ndims} coordinates, got {len(key)}.")
    return tuple(int(k) for k in key)

  def __getitem__(self, key):
    if key is Ellipsis:
      return self
    if isinstance(key, numbers.Integral):
      if self.ndims == 1:
        key = (key,)
      else:
        return Array._wrap(self._data[key], self._depth)
    loc = self._location(key)
    if self._depth is None:
      return self._data[loc].item()
    return mc.Scalar.from_coeffs(self._data[loc], copy=False)

  def __setitem__(self, key, value):
    if key is Ellipsis:
      self.assign(value)
      return
    if isinstance(key, numbers.Integral):
      if self.ndims == 1:
        key = (key,)
      else:
        self[key].assign(value)
        return
    loc = self._location(key)
    if self._depth is None:
      self._data[loc] = value
    else:
      self._data[loc] = mc.as_coeffs(value, self._depth)

  def elements(self) -> Iterator:
    """Yields every element in index order."""
    for pos in range(self.size):
      yield self._element_at(pos)

  # Assignment.

  def _fill(self, values):
    values = list(values)
    if len(values) != self.size:
      raise ValueError(
        f"Expected {self.size} values for extents {self._extents.sizes}, "
        f"got {len(values)}."
      )
    if self._depth is None:
      self.flat[...] = np.asarray(values, dtype=self.dtype)
    else:
      self.flat[...] = np.stack([mc.as_coeffs(v, self._depth) for v in values])

  def assign(self, source) -> "Array":
    """Stores `source` into this array.

    Args:
      source: A number or `Scalar` (broadcast), an array or lazy expression of
        equal extents, a schedule operation, a dot product, or a flat
        sequence of values.

    Returns:
      This array.

    Raises:
      ValueError: On extents or depth mismatches.
    """
    if isinstance(source, ops.Deferred):
      source.write_to(self)
    elif isinstance(source, ops.Elementwise):
      if source.extents != self._extents:
        raise ValueError(
          f"Cannot assign extents {source.extents.sizes} to "
          f"{self._extents.sizes}."
        )
      self._data[...] = ops.convert(source.evaluate(), source.depth, self._depth)
    elif isinstance(source, mc.Scalar):
      if self._depth is None:
        raise ValueError("Cannot assign a multicomplex value to a plain array.")
      self._data[...] = mc.as_coeffs(source, self._depth)
    elif isinstance(source, numbers.Number):
      if self._depth is None:
        self._data[...] = source
      else:
        self._data[...] = mc.as_coeffs(source, self._depth)
    else:
      self._fill(source)
    return self

  def _update(self, expr):
    if expr is NotImplemented:
      return NotImplemented
    return self.assign(expr)

  def __iadd__(self, other):
    return self._update(self + other)

  def __isub__(self, other):
    return self._update(self - other)

  def __imul__(self, other):
    if isinstance(other, Schedule):
      other.mask(self)
      return self
    return self._update(self * other)

  def __itruediv__(self, other):
    return self._update(self / other)

  def __matmul__(self, other):
    return dot_ops.dot(self, other)

  def __rmatmul__(self, other):
    return dot_ops.dot(other, self)

  def _strided(self):
    return self.flat, 0, self._extents.strides(), self._extents.sizes

  # Reductions.

  def reduce(self, f: Callable):
    """Folds `f` pairwise over all elements, starting from the first one."""
    it = self.elements()
    acc = next(it)
    if isinstance(acc, mc.Scalar):
      acc = acc.copy()
    for value in it:
      acc = f(acc, value)
    return acc

  def min(self):
    """Smallest element; multicomplex values compare by squared norm."""
    if self._depth is None:
      return self.flat.min().item()
    pos = int(np.argmin(mc.squared_norm(self.flat)))
    return mc.Scalar.from_coeffs(self.flat[pos])

  def max(self):
    """Largest element; multicomplex values compare by squared norm."""
    if self._depth is None:
      return self.flat.max().item()
    pos = int(np.argmax(mc.squared_norm(self.flat)))
    return mc.Scalar.from_coeffs(self.flat[pos])

  def sum(self):
    if self._depth is None:
      return self.flat.sum().item()
    return mc.Scalar.from_coeffs(self.flat.sum(axis=0), copy=False)

  def prod(self):
    if self._depth is None:
      return np.prod(self.flat).item()
    return mc.Scalar.from_coeffs(functools.reduce(mc.multiply, self.flat), copy=False)

  # Traversal.

  def foreach(self, f: Callable) -> None:
    """Calls `f` on every element; a non-None return value replaces it."""
    for pos in range(self.size):
      result = f(self._element_at(pos))
      if result is not None:
        self._store_at(pos, result)

  def foreach_vector(self, axis: int, f: Callable) -> None:
    """Calls `f` with one `Vector` along `axis` per position of the other axes."""
    axis = self._extents.check_axis(axis)
    idx = Index(self._extents)
    while True:
      f(Vector(self, axis, idx))
      if not idx.increment(skip=axis):
        break

  def foreach_dim(self, f: Callable) -> None:
    for d in range(self.ndims):
      f(d)

  def vector_offsets(self, axis: int) -> np.ndarray:
    """Flat start offsets of all vectors along `axis`, in `foreach_vector` order."""
    axis = self._extents.check_axis(axis)
    grid = np.arange(self.size).reshape(self._extents.sizes)
    return np.take(grid, 0, axis=axis).ravel()
