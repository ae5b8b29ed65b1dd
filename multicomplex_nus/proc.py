""" Processing Graphs
-----------------
Chains of named processing stages over arrays. Each stage consumes the
array produced upstream and returns a new array of a derived shape:

  >>> y = Node.source(x).zerofill().zerofill(axis=1).fft(0).real()()

Stages are validated as the chain is built, so a stage that cannot apply
to its input shape fails before any data is processed. Calling the last
node runs the whole chain from the top.
"""
import numpy as np

from . import scalar as mc
from .array import Array
from .extents import Extents
from .fft import FFTDirection, get_block, transform_axis


class Processor:
  """A single stage: derives the output layout and fills the output array."""

  def output_extents(self, extents: Extents) -> Extents:
    return extents

  def output_depth(self, depth: int | None) -> int | None:
    return depth

  def output_dtype(self, dtype: np.dtype) -> np.dtype:
    return dtype

  def apply(self, src: Array, out: Array) -> None:
    raise NotImplementedError


class Pass(Processor):
  """Copies its input unchanged."""

  def apply(self, src, out):
    out.assign(src)


class ZeroFill(Processor):
  """Doubles the size of `axis` exactly `num` times, padding with zeros."""

  def __init__(self, axis: int = 0, num: int = 1):
    self.axis = axis
    self.num = num

  def output_extents(self, extents):
    return extents.shift(self.axis, self.num)

  def apply(self, src, out):
    corner = tuple(slice(0, s) for s in src.shape)
    out.data[corner] = src.data


class AxisFFT(Processor):
  """Forward transform along `axis` at phase depth `axis + 1`."""

  def __init__(self, axis: int = 0):
    self.axis = axis

  def output_extents(self, extents):
    extents.check_axis(self.axis)
    # Validates the length before any data flows.
    get_block(extents[self.axis], extents.stride(self.axis), self.axis + 1,
              FFTDirection.FORWARD)
    return extents

  def output_depth(self, depth):
    if depth is None or depth < self.axis + 1:
      raise ValueError(
        f"A transform along axis {self.axis} needs depth {self.axis + 1}, "
        f"got {depth}."
      )
    return depth

  def apply(self, src, out):
    out.assign(src)
    transform_axis(out, self.axis)


class Abs(Processor):
  """Modulus of every element, as a plain float array."""

  def output_depth(self, depth):
    return None

  def output_dtype(self, dtype):
    return np.float64

  def apply(self, src, out):
    if src.depth is None:
      out.data[...] = np.abs(src.data)
    else:
      out.data[...] = np.sqrt(mc.squared_norm(src.data))


class Real(Processor):
  """Real (depth 0) coefficient of every element, as a plain float array."""

  def output_depth(self, depth):
    return None

  def output_dtype(self, dtype):
    return np.float64

  def apply(self, src, out):
    out.data[...] = src.data if src.depth is None else src.data[..., 0]


class Node:
  """One stage of a processing graph.

  A source node wraps an input array. Every other node applies its
  processor to the output of its parent.
  """

  def __init__(self, parent, processor: Processor | None = None):
    self._parent = parent
    self._processor = processor
    if processor is None:
      self.extents = parent.extents
      self.depth = parent.depth
      self.dtype = parent.dtype
    else:
      self.extents = processor.output_extents(parent.extents)
      self.depth = processor.output_depth(parent.depth)
      self.dtype = processor.output_dtype(parent.dtype)

  @classmethod
  def source(cls, array: Array) -> "Node":
    """A node producing `array` itself."""
    return cls(array)

  def __call__(self) -> Array:
    if self._processor is None:
      return self._parent
    src = self._parent()
    out = Array(self.extents, dtype=self.dtype, depth=self.depth)
    self._processor.apply(src, out)
    return out

  def then(self, processor: Processor) -> "Node":
    return Node(self, processor)

  def zerofill(self, axis: int = 0, num: int = 1) -> "Node":
    return self.then(ZeroFill(axis, num))

  def fft(self, axis: int = 0) -> "Node":
    return self.then(AxisFFT(axis))

  def abs(self) -> "Node":
    return self.then(Abs())

  def real(self) -> "Node":
    return self.then(Real())

  def passthrough(self) -> "Node":
    return self.then(Pass())
