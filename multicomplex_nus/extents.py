""" Array Extents
-------------
An immutable list of per-dimension sizes shared by indices, arrays,
schedules and views. All shape bookkeeping (strides, element counts and
the derived shapes used by views and processing stages) lives here.
"""
import math
import numbers


class Extents:
  """Fixed, positive per-dimension sizes of a multidimensional array.

  Example:
    >>> e = Extents(2, 3, 5, 7)
    >>> e.count, e.stride(0), e.stride(3)
    (210, 105, 1)
  """
  __slots__ = ("_sizes",)

  def __init__(self, *sizes: int):
    if len(sizes) == 1 and not isinstance(sizes[0], numbers.Integral):
      sizes = tuple(sizes[0])
    if not sizes:
      raise ValueError("Extents need at least one dimension.")
    for s in sizes:
      if not isinstance(s, numbers.Integral) or s < 1:
        raise ValueError(f"Extents must be positive integers, got {sizes}.")
    self._sizes = tuple(int(s) for s in sizes)

  @property
  def sizes(self) -> tuple[int, ...]:
    return self._sizes

  @property
  def ndims(self) -> int:
    return len(self._sizes)

  @property
  def count(self) -> int:
    """Total number of elements spanned."""
    return math.prod(self._sizes)

  @property
  def first(self) -> int:
    return self._sizes[0]

  @property
  def last(self) -> int:
    return self._sizes[-1]

  def check_axis(self, axis: int) -> int:
    """Validates an axis number.

    Raises:
      ValueError: If `axis` is outside [0, ndims).
    """
    if not isinstance(axis, numbers.Integral) or not 0 <= axis < self.ndims:
      raise ValueError(f"Axis {axis} out of range for {self.ndims} dimensions.")
    return int(axis)

  def get(self, d: int) -> int:
    return self._sizes[self.check_axis(d)]

  def has(self, size: int) -> bool:
    """Whether any dimension has the given size."""
    return size in self._sizes

  def stride(self, d: int) -> int:
    """Linear stride of dimension `d`: the product of all later sizes."""
    return math.prod(self._sizes[self.check_axis(d) + 1:])

  def strides(self) -> tuple[int, ...]:
    return tuple(self.stride(d) for d in range(self.ndims))

  def head(self, n: int) -> "Extents":
    """The first `n` sizes."""
    return Extents(*self._sizes[:n])

  def tail(self, n: int) -> "Extents":
    """The last `n` sizes."""
    return Extents(*self._sizes[self.ndims - n:])

  def retain(self, *axes: int) -> "Extents":
    """Keeps only the listed axes, in their original order."""
    keep = {self.check_axis(a) for a in axes}
    return Extents(*(s for d, s in enumerate(self._sizes) if d in keep))

  def remove(self, *axes: int) -> "Extents":
    """Drops the listed axes."""
    drop = {self.check_axis(a) for a in axes}
    return Extents(*(s for d, s in enumerate(self._sizes) if d not in drop))

  def exclude(self, axis: int) -> "Extents":
    return self.remove(axis)

  def shift(self, axis: int, num: int = 1) -> "Extents":
    """Doubles the size of `axis` exactly `num` times."""
    axis = self.check_axis(axis)
    sizes = list(self._sizes)
    sizes[axis] <<= num
    return Extents(*sizes)

  def __add__(self, other: "Extents") -> "Extents":
    if not isinstance(other, Extents):
      return NotImplemented
    return Extents(*(self._sizes + other._sizes))

  def __getitem__(self, d: int) -> int:
    return self._sizes[d]

  def __len__(self) -> int:
    return len(self._sizes)

  def __iter__(self):
    return iter(self._sizes)

  def __eq__(self, other) -> bool:
    if isinstance(other, Extents):
      return self._sizes == other._sizes
    return NotImplemented

  def __hash__(self) -> int:
    return hash(self._sizes)

  def __repr__(self) -> str:
    return f"Extents{self._sizes}"


def as_extents(obj) -> Extents:
  """Coerces an int, a sequence of ints or an `Extents` to `Extents`."""
  if isinstance(obj, Extents):
    return obj
  if isinstance(obj, numbers.Integral):
    return Extents(int(obj))
  return Extents(*tuple(obj))
