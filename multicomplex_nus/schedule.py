""" Sampling Schedules
------------------
A schedule lists the N indices of a dense grid that were actually measured
in a non-uniformly sampled experiment. It maps between the N sampled values
(a one-dimensional "sparse" array) and the dense grid:

  * extraction, `dense % schedule`: sparse[i] = dense[schedule[i]]
  * insertion, `sparse % schedule`: dense[schedule[i]] = sparse[i], with
    every unscheduled position set to zero
  * masking, `dense *= schedule`: unscheduled positions are set to zero and
    scheduled ones are kept
"""
import numbers

import numpy as np

from . import ops
from .extents import Extents, as_extents
from .index import Index


class Schedule:
  """An ordered list of indices into dense extents.

  Args:
    extents: Dense extents the indices point into.
    indices: Coordinate tuples, `Index` objects, or plain ints for
      one-dimensional extents. Duplicates are allowed but give undefined
      extraction and insertion results.

  Example:
    >>> s = Schedule(5, [0, 2])
    >>> len(s), s.offsets().tolist()
    (2, [0, 2])
  """

  def __init__(self, extents, indices):
    self._extents = as_extents(extents)
    self._ids = [self._as_index(i) for i in indices]

  @classmethod
  def empty(cls, n: int, extents) -> "Schedule":
    """A schedule of `n` zero-corner indices."""
    extents = as_extents(extents)
    return cls(extents, [Index(extents) for _ in range(n)])

  def _as_index(self, value) -> Index:
    if isinstance(value, Index):
      if value.extents != self._extents:
        raise ValueError(
          f"Index extents {value.extents.sizes} differ from "
          f"{self._extents.sizes}."
        )
      return value.copy()
    if isinstance(value, numbers.Integral):
      value = (value,)
    return Index(self._extents, value)

  @property
  def extents(self) -> Extents:
    return self._extents

  @property
  def sparse_extents(self) -> Extents:
    return Extents(len(self._ids))

  def __len__(self) -> int:
    return len(self._ids)

  def __getitem__(self, i: int) -> Index:
    return self._ids[i]

  def __setitem__(self, i: int, value):
    self._ids[i] = self._as_index(value)

  def __iter__(self):
    return iter(self._ids)

  def __repr__(self) -> str:
    return f"Schedule({self._extents.sizes}, {[tuple(i) for i in self._ids]})"

  def sort(self) -> "Schedule":
    """Sorts in place into non-decreasing row-major order."""
    self._ids.sort(key=Index.pack_right)
    return self

  def offsets(self) -> np.ndarray:
    """Row-major flat offsets of the scheduled indices."""
    return np.array([i.pack_right() for i in self._ids], dtype=np.intp)

  def support_mask(self) -> np.ndarray:
    """Boolean dense grid that is True at scheduled positions."""
    mask = np.zeros(self._extents.count, dtype=bool)
    mask[self.offsets()] = True
    return mask.reshape(self._extents.sizes)

  def _check(self, array, extents: Extents, role: str):
    if array.extents != extents:
      raise ValueError(
        f"{role} extents {array.extents.sizes} do not match {extents.sizes}."
      )

  def extract(self, dense):
    """Returns a new sparse array with the scheduled values of `dense`."""
    self._check(dense, self._extents, "Dense")
    sparse = type(dense).like(dense, self.sparse_extents)
    sparse.assign(ScheduleOp(dense, self))
    return sparse

  def insert(self, sparse):
    """Returns a new zero-filled dense array holding `sparse` at the scheduled positions."""
    self._check(sparse, self.sparse_extents, "Sparse")
    dense = type(sparse).like(sparse, self._extents)
    dense.assign(ScheduleOp(sparse, self))
    return dense

  def mask(self, array) -> None:
    """Zeroes every position of `array` outside the schedule, in place."""
    self._check(array, self._extents, "Dense")
    array.flat[~self.support_mask().ravel()] = 0

  def __rmod__(self, source):
    if not isinstance(source, ops.Elementwise):
      return NotImplemented
    return ScheduleOp(source, self)


class ScheduleOp(ops.Deferred):
  """Pending `source % schedule`, resolved as extraction or insertion on assignment.

  Raises:
    ValueError: If `source` fits neither the dense nor the sparse extents.
  """

  def __init__(self, source, schedule: Schedule):
    if source.extents not in (schedule.extents, schedule.sparse_extents):
      raise ValueError(
        f"Extents {source.extents.sizes} fit neither the dense "
        f"{schedule.extents.sizes} nor the sparse "
        f"{schedule.sparse_extents.sizes} side of the schedule."
      )
    self.source = source
    self.schedule = schedule

  def _source_values(self) -> np.ndarray:
    value = np.asarray(self.source.evaluate())
    n = self.source.extents.ndims
    return value.reshape((self.source.extents.count,) + value.shape[n:])

  def write_to(self, target) -> None:
    s = self.schedule
    values = ops.convert(self._source_values(), self.source.depth, target.depth)
    if self.source.extents == s.extents and target.extents == s.sparse_extents:
      target.flat[...] = values[s.offsets()]
    elif self.source.extents == s.sparse_extents and target.extents == s.extents:
      dense = np.zeros_like(target.flat)
      dense[s.offsets()] = values
      target.flat[...] = dense
    else:
      raise ValueError(
        f"Cannot store {self.source.extents.sizes} % schedule into "
        f"{target.extents.sizes}."
      )
