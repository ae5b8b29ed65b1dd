""" Multidimensional Index
----------------------
A mutable coordinate tuple bound to fixed extents. Indices step through
their extents by ripple-carry, in one of two digit orders:

  * RIGHT: the last dimension varies fastest. This is the storage order of
    arrays, so stepping RIGHT visits elements in memory order.
  * LEFT: the first dimension varies fastest.

Every step reports whether it completed without wrapping around, so loops
of the form `while idx.increment(): ...` visit each index exactly once.
"""
import enum
import functools
import numbers
from typing import Iterator, Sequence

from .extents import Extents, as_extents


class Order(enum.Enum):
  """Digit order used when stepping or packing an index."""
  LEFT = "left"
  RIGHT = "right"


@functools.total_ordering
class Index:
  """Coordinates into an array of known extents.

  Coordinates are not bounds-checked.

  Args:
    extents: Extents the index ranges over.
    coords: Optional starting coordinates; defaults to all zeros.
  """

  def __init__(self, extents, coords: Sequence[int] | None = None):
    self._extents = as_extents(extents)
    if coords is None:
      self._ids = [0] * self._extents.ndims
    else:
      if isinstance(coords, numbers.Integral):
        coords = (coords,)
      coords = [int(c) for c in coords]
      if len(coords) != self._extents.ndims:
        raise ValueError(
          f"Expected {self._extents.ndims} coordinates, got {len(coords)}."
        )
      self._ids = coords

  @property
  def extents(self) -> Extents:
    return self._extents

  @property
  def count(self) -> int:
    return self._extents.count

  def copy(self) -> "Index":
    return Index(self._extents, self._ids)

  def size(self, d: int) -> int:
    return self._extents.get(d)

  def stride(self, d: int) -> int:
    return self._extents.stride(d)

  def head(self) -> "Index":
    """Moves to the all-zero corner."""
    self._ids = [0] * self._extents.ndims
    return self

  def tail(self) -> "Index":
    """Moves to the all-maximum corner."""
    self._ids = [s - 1 for s in self._extents]
    return self

  def _digits(self, order: Order, skip: int | None) -> list[int]:
    dims = range(self._extents.ndims)
    if order is Order.RIGHT:
      dims = reversed(dims)
    if skip is not None:
      skip = self._extents.check_axis(skip)
    return [d for d in dims if d != skip]

  def increment(self, order: Order = Order.RIGHT, skip: int | None = None) -> bool:
    """Steps forward by one.

    Args:
      order: Which dimension varies fastest.
      skip: Optional axis held fixed during the step.

    Returns:
      False if the step wrapped back to the zero corner, True otherwise.
    """
    sizes = self._extents.sizes
    for d in self._digits(order, skip):
      self._ids[d] += 1
      if self._ids[d] < sizes[d]:
        return True
      self._ids[d] = 0
    return False

  def decrement(self, order: Order = Order.RIGHT, skip: int | None = None) -> bool:
    """Steps backward by one.

    Returns:
      False if the index was at the zero corner and wrapped to the tail.
    """
    sizes = self._extents.sizes
    for d in self._digits(order, skip):
      if self._ids[d] > 0:
        self._ids[d] -= 1
        return True
      self._ids[d] = sizes[d] - 1
    return False

  def advance(self, count: int, order: Order = Order.RIGHT) -> bool:
    """Moves the packed offset forward by `count`, modulo the element count.

    Returns:
      False if the move passed the end of the extents.
    """
    n = self._extents.count
    offset = self.pack(order) + count
    self.unpack(offset % n, order)
    return offset < n

  def retreat(self, count: int, order: Order = Order.RIGHT) -> bool:
    """Moves the packed offset backward by `count`, modulo the element count.

    Returns:
      False if the move passed the start of the extents.
    """
    offset = self.pack(order)
    self.unpack((offset - count) % self._extents.count, order)
    return count <= offset

  def pack(self, order: Order = Order.RIGHT) -> int:
    """Linear offset of the index when stored in the given order."""
    sizes = self._extents.sizes
    offset, stride = 0, 1
    for d in self._digits(order, None):
      offset += self._ids[d] * stride
      stride *= sizes[d]
    return offset

  def unpack(self, offset: int, order: Order = Order.RIGHT) -> "Index":
    """Sets the coordinates from a linear offset in the given order."""
    sizes = self._extents.sizes
    for d in self._digits(order, None):
      offset, self._ids[d] = divmod(offset, sizes[d])
    return self

  def pack_left(self) -> int:
    return self.pack(Order.LEFT)

  def pack_right(self) -> int:
    return self.pack(Order.RIGHT)

  def unpack_left(self, offset: int) -> "Index":
    return self.unpack(offset, Order.LEFT)

  def unpack_right(self, offset: int) -> "Index":
    return self.unpack(offset, Order.RIGHT)

  @classmethod
  def traverse(cls, extents, order: Order = Order.RIGHT) -> Iterator["Index"]:
    """Yields a copy of every index of `extents` once, in `order`."""
    idx = cls(extents)
    while True:
      yield idx.copy()
      if not idx.increment(order):
        return

  def __getitem__(self, d: int) -> int:
    return self._ids[d]

  def __setitem__(self, d: int, value: int):
    self._ids[d] = int(value)

  def __len__(self) -> int:
    return len(self._ids)

  def __iter__(self):
    return iter(self._ids)

  def __eq__(self, other) -> bool:
    if isinstance(other, Index):
      return self._ids == other._ids
    if isinstance(other, (tuple, list)):
      return self._ids == list(other)
    return NotImplemented

  def __lt__(self, other: "Index") -> bool:
    if not isinstance(other, Index):
      return NotImplemented
    return self.pack_right() < other.pack_right()

  __hash__ = None

  def __repr__(self) -> str:
    return "".join(f"[{i}]" for i in self._ids)
