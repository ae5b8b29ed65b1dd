""" Mixed-Radix Fast Fourier Transform
----------------------------------
An in-place Cooley-Tukey FFT over multicomplex data for any length whose
prime factors are 2, 3 or 5.

A transform of length N at stride s is a tree of plan nodes. Each general
node splits N = N1 * N2, with N1 the smallest of 2, 3, 5 dividing N, and:

  1. runs N1 sub-transforms of length N2 at stride N1 * s,
  2. multiplies x[s * (n1 + N1 * k2)] by the twiddle factor W(n1)**k2,
  3. runs N2 sub-transforms of length N1 at stride s,
  4. applies a fixed shuffle that restores natural frequency order.

Lengths 2, 3 and 5 are closed-form leaf kernels. Twiddle powers come from
the trigonometric recurrence w <- w - dw * w rather than from direct
evaluation. Every node runs over a whole batch of start offsets at once, so
a multidimensional array is transformed along an axis in a single call.

The phase depth selects the imaginary unit of the transform: a transform of
phase depth d rotates data in the plane of R and I(d). Transforming each
axis of a multidimensional array at its own depth keeps the frequency
encodings of the axes independent. The inverse transform is unnormalised.
"""
import enum
import functools
import logging

import numpy as np

from . import scalar as mc
from . import trig
from .array import Array
from .scalar import Scalar
from .views import Vector

logger = logging.getLogger(__name__)

RADICES = (2, 3, 5)

# Primes recognised by `factors`.
_PRIMES = (2, 3, 5, 7, 11, 13, 17)


class FFTDirection(enum.IntEnum):
  """Sign of the exponent in the transform kernel."""
  FORWARD = -1
  INVERSE = 1


def next_factor(n: int) -> int:
  """Smallest radix in `RADICES` dividing `n`.

  Raises:
    ValueError: If no supported radix divides `n`.
  """
  for p in RADICES:
    if n % p == 0:
      return p
  raise ValueError(f"Transform length {n} is not divisible by 2, 3 or 5.")


def factors(n: int) -> tuple[int, ...]:
  """Prime factorisation of `n` in ascending order, over primes up to 17.

  Raises:
    ValueError: If `n` has a prime factor above 17.
  """
  out = []
  while n > 1:
    for p in _PRIMES:
      if n % p == 0:
        out.append(p)
        n //= p
        break
    else:
      raise ValueError(f"{n} has a prime factor larger than {_PRIMES[-1]}.")
  return tuple(out)


def is_smooth(n: int) -> bool:
  """Whether `n` >= 2 has no prime factors other than 2, 3 and 5."""
  if n < 2:
    return False
  for p in RADICES:
    while n % p == 0:
      n //= p
  return n == 1


@functools.lru_cache(maxsize=None)
def shuffle_swaps(rows: int, cols: int, stride: int = 1) -> tuple[tuple[int, int], ...]:
  """Swaps that transpose a column-major rows-by-cols block into row-major order.

  Position i * cols + j of the block holds element j * rows + i. Each swap
  moves the element that belongs at position i into place by following the
  permutation cycle, and positions are scaled by `stride`.
  """
  holds = np.arange(rows * cols).reshape(cols, rows).T.ravel().tolist()
  where = [0] * len(holds)
  for pos, elem in enumerate(holds):
    where[elem] = pos
  swaps = []
  for i, elem in enumerate(holds):
    if elem == i:
      continue
    j = where[i]
    swaps.append((stride * i, stride * j))
    holds[j] = elem
    where[elem] = j
  return tuple(swaps)


@functools.lru_cache(maxsize=None)
def shuffle_permutation(rows: int, cols: int) -> np.ndarray:
  """The swaps of `shuffle_swaps` as a single gather: out = x[perm].

  Output position j * rows + i reads input position i * cols + j.
  """
  perm = np.arange(rows * cols).reshape(rows, cols).T.ravel()
  perm.flags.writeable = False
  return perm


def _embed(values: np.ndarray, depth: int) -> np.ndarray:
  """Places complex values in the plane of R and I(depth)."""
  out = np.zeros(values.shape + (1 << depth,))
  out[..., 0] = values.real
  out[..., 1 << (depth - 1)] = values.imag
  return out


def twiddle_table(n1: int, n2: int, depth: int, direction: FFTDirection) -> np.ndarray:
  """Twiddle factors W(a)**k for a in [1, n1) and k in [0, n2).

  Powers are generated by the recurrence w <- w - dw * w from w = R, where
  dw = alpha R - beta I with alpha = 2 (dir sin(a pi / n))**2 and
  beta = dir sin(2 a pi / n). Every value lies in the plane of R and I(depth),
  whose product rule is complex multiplication, so the recurrence runs in
  Python complex arithmetic before the result is embedded.

  Returns:
    Coefficients of shape (n1 - 1, n2, 2**depth).
  """
  n = n1 * n2
  table = np.empty((n1 - 1, n2), dtype=np.complex128)
  for a in range(1, n1):
    sp2 = direction * trig.sin_v(a, n)
    beta = direction * trig.sin_v(2 * a, n)
    alpha = 2 * sp2 * sp2
    dw = complex(alpha, -beta)
    w = 1 + 0j
    for k in range(n2):
      table[a - 1, k] = w
      w -= dw * w
  return _embed(table, depth)


class Block:
  """A plan node transforming length-`n` sequences spaced by `stride`."""

  factor = None

  def __init__(self, n: int, stride: int, depth: int, direction: FFTDirection):
    self.n = n
    self.stride = stride
    self.depth = depth
    self.direction = FFTDirection(direction)
    self._widened = {}

  def _at_width(self, table: np.ndarray, width: int) -> np.ndarray:
    """`table` promoted to the coefficient width of the data."""
    out = self._widened.get(width)
    if out is None:
      out = mc.promote(table, mc.depth_of(width))
      self._widened[width] = out
    return out

  def __call__(self, x: np.ndarray, offsets: np.ndarray) -> None:
    """Transforms in place the sequences starting at each of `offsets`.

    Args:
      x: Buffer of shape (M, 2**D) with D >= the phase depth.
      offsets: 1-D integer array of start positions.
    """
    raise NotImplementedError

  def __repr__(self) -> str:
    return (
      f"{type(self).__name__}(n={self.n}, stride={self.stride}, "
      f"depth={self.depth}, direction={self.direction.name})"
    )


class ButterflyBlock(Block):
  """Length-2 transform: (x0, x1) -> (x0 + x1, x0 - x1)."""

  factor = 2

  def __call__(self, x, offsets):
    second = offsets + self.stride
    a = x[offsets]
    b = x[second]
    x[offsets] = a + b
    x[second] = a - b


class SmallPrimeBlock(Block):
  """Closed-form length-3 or length-5 transform.

  Output j is x0 + sum_k x_k w_{jk}, where w_m is exp(dir 2 pi m / n) built
  from `Scalar.expm` (forward) or `Scalar.exp` (inverse).
  """

  def __init__(self, n, stride, depth, direction):
    super().__init__(n, stride, depth, direction)
    self.factor = n
    unit = Scalar.expm if self.direction is FFTDirection.FORWARD else Scalar.exp
    self.constants = np.stack([
      np.stack([unit(2 * j * k, n, depth).coeffs for k in range(1, n)])
      for j in range(1, n)
    ])

  def __call__(self, x, offsets):
    pos = offsets[:, None] + self.stride * np.arange(self.n)
    values = x[pos]
    x0 = values[:, 0]
    rest = values[:, 1:]
    w = self._at_width(self.constants, x.shape[-1])
    mixed = mc.multiply(rest[:, None, :, :], w[None]).sum(axis=2)
    x[pos[:, 0]] = x0 + rest.sum(axis=1)
    x[pos[:, 1:]] = x0[:, None] + mixed


class CooleyTukeyBlock(Block):
  """General node splitting n = n1 * n2."""

  def __init__(self, n, stride, depth, direction):
    super().__init__(n, stride, depth, direction)
    self.n1 = next_factor(n)
    self.n2 = n // self.n1
    self.factor = self.n1
    self.s1 = stride
    self.s2 = self.n1 * stride
    self.blk1 = get_block(self.n1, self.s1, depth, self.direction)
    self.blk2 = get_block(self.n2, self.s2, depth, self.direction)
    self.twiddles = twiddle_table(self.n1, self.n2, depth, self.direction)
    self.perm = shuffle_permutation(self.n2, self.n1)
    self._twiddle_pos = stride * (
      np.arange(1, self.n1)[:, None] + self.n1 * np.arange(self.n2)[None, :]
    )

  def __call__(self, x, offsets):
    n1, n2 = self.n1, self.n2
    self.blk2(x, (offsets[:, None] + self.s1 * np.arange(n1)).ravel())

    pos = offsets[:, None, None] + self._twiddle_pos[None]
    w = self._at_width(self.twiddles, x.shape[-1])
    x[pos] = mc.multiply(x[pos], w[None])

    self.blk1(x, (offsets[:, None] + self.s2 * np.arange(n2)).ravel())

    span = self.stride * np.arange(self.n)
    x[offsets[:, None] + span] = x[offsets[:, None] + self.stride * self.perm]


@functools.lru_cache(maxsize=None)
def get_block(n: int, stride: int, depth: int, direction: FFTDirection) -> Block:
  """Memoised plan node for one (length, stride, depth, direction).

  Raises:
    ValueError: If `n` is not 2/3/5-smooth or `depth` < 1.
  """
  if depth < 1:
    raise ValueError(f"Transforms need a phase depth of at least 1, got {depth}.")
  if not is_smooth(n):
    raise ValueError(f"Transform length {n} must be a product of 2, 3 and 5.")
  if n == 2:
    block = ButterflyBlock(n, stride, depth, direction)
  elif n in (3, 5):
    block = SmallPrimeBlock(n, stride, depth, direction)
  else:
    block = CooleyTukeyBlock(n, stride, depth, direction)
  logger.debug(
    "Built FFT plan node n=%d stride=%d depth=%d direction=%s factor=%d",
    n, stride, depth, FFTDirection(direction).name, block.factor,
  )
  return block


def _as_buffer(x: np.ndarray) -> np.ndarray:
  """Views a raw ndarray as an (M, 2**D) float64 coefficient buffer."""
  if np.iscomplexobj(x):
    if x.dtype != np.complex128 or x.ndim != 1 or not x.flags.c_contiguous:
      raise ValueError("Complex buffers must be contiguous 1-D complex128 arrays.")
    return x.view(np.float64).reshape(-1, 2)
  if x.dtype != np.float64 or x.ndim != 2:
    raise ValueError(
      f"Expected a (M, 2**D) float64 buffer, got {x.dtype} of shape {x.shape}."
    )
  mc.depth_of(x.shape[1])
  return x


class Transform:
  """In-place FFT of a fixed length, direction and phase depth.

  Args:
    n: Transform length; must be a product of 2, 3 and 5.
    direction: `FFTDirection.FORWARD` or `FFTDirection.INVERSE`.
    depth: Phase depth, the multicomplex level whose imaginary unit carries
      the transform.
  """

  def __init__(
    self,
    n: int,
    direction: FFTDirection = FFTDirection.FORWARD,
    depth: int = 1,
  ):
    self.n = int(n)
    self.direction = FFTDirection(direction)
    self.depth = int(depth)
    # Builds and validates the plan.
    self._block = get_block(self.n, 1, self.depth, self.direction)

  def __call__(self, x, offset: int = 0, stride: int = 1):
    """Transforms `x` in place and returns it.

    Args:
      x: A one-dimensional `Array`, a `Vector` view, or a raw ndarray buffer
        (a 1-D complex128 array or a (M, 2**D) float64 array).
      offset: Start position within a raw buffer. Must stay 0 for arrays
        and views, which carry their own layout.
      stride: Element spacing within a raw buffer. Must stay 1 for arrays
        and views.

    Raises:
      ValueError: If the data is not an array, view or ndarray, or is too
        short or too shallow for this transform.
    """
    if isinstance(x, (Array, Vector)) and (offset, stride) != (0, 1):
      raise ValueError("offset and stride apply only to raw ndarray buffers.")
    if isinstance(x, Vector):
      buf, offset, stride, length = x.array.flat, x.offset, x.stride, x.length
      self._check_depth(x.depth)
    elif isinstance(x, Array):
      if x.ndims != 1:
        raise ValueError("Use transform_axis() for multidimensional arrays.")
      self._check_depth(x.depth)
      buf, length = x.flat, x.size
    elif isinstance(x, np.ndarray):
      buf = _as_buffer(x)
      if offset < 0 or stride < 1 or offset + stride * (self.n - 1) >= buf.shape[0]:
        raise ValueError(
          f"A {buf.shape[0]}-element buffer cannot hold {self.n} elements at "
          f"offset {offset} and stride {stride}."
        )
      length = self.n
    else:
      raise ValueError(
        f"Cannot transform {type(x).__name__} in place; pass an Array, a "
        f"Vector or an ndarray."
      )
    if length != self.n:
      raise ValueError(f"Expected {self.n} elements, got {length}.")
    if mc.depth_of(buf.shape[-1]) < self.depth:
      raise ValueError(
        f"Data of depth {mc.depth_of(buf.shape[-1])} cannot carry a "
        f"depth-{self.depth} transform."
      )
    block = self._block if stride == 1 else get_block(
      self.n, stride, self.depth, self.direction
    )
    block(buf, np.array([offset]))
    return x

  def _check_depth(self, depth: int | None):
    if depth is None or depth < self.depth:
      raise ValueError(
        f"Array depth {depth} cannot carry a depth-{self.depth} transform."
      )


class Forward(Transform):
  """Forward transform, exponent sign -1."""

  def __init__(self, n: int, depth: int = 1):
    super().__init__(n, FFTDirection.FORWARD, depth)


class Inverse(Transform):
  """Unnormalised inverse transform, exponent sign +1."""

  def __init__(self, n: int, depth: int = 1):
    super().__init__(n, FFTDirection.INVERSE, depth)


def transform_axis(
  array,
  axis: int,
  direction: FFTDirection = FFTDirection.FORWARD,
  depth: int | None = None,
):
  """Transforms every vector of `array` along `axis` in place.

  Args:
    array: Multicomplex `Array`.
    axis: Axis to transform.
    direction: Transform direction.
    depth: Phase depth; defaults to `axis + 1`.

  Returns:
    `array`.
  """
  axis = array.extents.check_axis(axis)
  depth = axis + 1 if depth is None else depth
  if array.depth is None or array.depth < depth:
    raise ValueError(
      f"Array depth {array.depth} cannot carry a depth-{depth} transform."
    )
  block = get_block(array.extents[axis], array.extents.stride(axis), depth, direction)
  block(array.flat, array.vector_offsets(axis))
  return array
