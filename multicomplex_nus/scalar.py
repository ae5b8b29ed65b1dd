""" Multicomplex Scalar Algebra
---------------------------
A multicomplex number of depth D holds 2**D real coefficients and is built
by repeated complex doubling: the first half of the coefficients is the
"real" depth D-1 part and the second half is the "imag" depth D-1 part.
Depth 0 is a plain real and depth 1 is an ordinary complex number.

Values are stored as float64 arrays whose trailing axis holds the
coefficients, so the kernels below act on whole arrays of multicomplex
numbers at once. `Scalar` wraps a single coefficient vector and gives it
value semantics and operators.
"""
import enum
import numbers

import numpy as np

from . import trig


class Ordering(enum.Enum):
  """Outcome of comparing two multicomplex values."""
  LESS = -1
  EQUAL = 0
  GREATER = 1
  EQUIVALENT = 2


def depth_of(n_coeffs: int) -> int:
  """Returns the depth matching a coefficient count.

  Args:
    n_coeffs: Number of real coefficients.

  Returns:
    The depth D such that 2**D == n_coeffs.

  Raises:
    ValueError: If `n_coeffs` is not a positive power of two.
  """
  n_coeffs = int(n_coeffs)
  if n_coeffs < 1 or n_coeffs & (n_coeffs - 1):
    raise ValueError(
      f"Coefficient count must be a power of two, got {n_coeffs}."
    )
  return n_coeffs.bit_length() - 1


def promote(a: np.ndarray, depth: int) -> np.ndarray:
  """Zero-pads the coefficient axis of `a` up to `2**depth` entries.

  Lower-depth coefficients land in the leading indices, which embeds the
  lower-depth algebra in the higher-depth one.
  """
  a = np.asarray(a, dtype=np.float64)
  n = 1 << depth
  have = a.shape[-1]
  if have == n:
    return a
  if have > n:
    raise ValueError(
      f"Cannot promote depth {depth_of(have)} values to depth {depth}."
    )
  pad = [(0, 0)] * (a.ndim - 1) + [(0, n - have)]
  return np.pad(a, pad)


def _align(a: np.ndarray, b: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
  n = max(a.shape[-1], b.shape[-1])
  depth = depth_of(n)
  return promote(a, depth), promote(b, depth)


def multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
  """Multicomplex product of two coefficient arrays.

  Applies (ar, ai)(br, bi) = (ar br - ai bi, ar bi + ai br) recursively down
  to depth 0. Leading axes broadcast. Operands of different depth are
  promoted to the larger one.

  Args:
    a: Coefficient array of shape (..., 2**Da).
    b: Coefficient array of shape (..., 2**Db).

  Returns:
    The product, with 2**max(Da, Db) coefficients.
  """
  a = np.asarray(a, dtype=np.float64)
  b = np.asarray(b, dtype=np.float64)
  if a.shape[-1] != b.shape[-1]:
    a, b = _align(a, b)
  n = a.shape[-1]
  if n == 1:
    return a * b
  h = n // 2
  ar, ai = a[..., :h], a[..., h:]
  br, bi = b[..., :h], b[..., h:]
  return np.concatenate(
    [multiply(ar, br) - multiply(ai, bi), multiply(ar, bi) + multiply(ai, br)],
    axis=-1,
  )


def conjugate(a: np.ndarray) -> np.ndarray:
  """Negates the top-level imaginary part at every depth: ~(re, im) = (~re, -~im)."""
  a = np.asarray(a, dtype=np.float64)
  n = a.shape[-1]
  if n == 1:
    return a.copy()
  h = n // 2
  return np.concatenate([conjugate(a[..., :h]), -conjugate(a[..., h:])], axis=-1)


def inverse(a: np.ndarray) -> np.ndarray:
  """Multiplicative inverse.

  With reinv = inverse(re*re + im*im), the inverse is (re*reinv, -im*reinv).
  The caller guarantees the value is not singular.
  """
  a = np.asarray(a, dtype=np.float64)
  n = a.shape[-1]
  if n == 1:
    return 1.0 / a
  h = n // 2
  re, im = a[..., :h], a[..., h:]
  reinv = inverse(multiply(re, re) + multiply(im, im))
  return np.concatenate([multiply(re, reinv), -multiply(im, reinv)], axis=-1)


def squared_norm(a: np.ndarray) -> np.ndarray:
  """Depth-0 coefficient of a * ~a, one value per multicomplex entry."""
  a = np.asarray(a, dtype=np.float64)
  return multiply(a, conjugate(a))[..., 0]


def unit(depth: int, position: int = 0) -> np.ndarray:
  """Coefficient vector with a single one at `position`."""
  c = np.zeros(1 << depth, dtype=np.float64)
  c[position] = 1.0
  return c


def as_coeffs(value, depth: int) -> np.ndarray:
  """Converts a value to a depth-`depth` coefficient vector.

  Reals fill coefficient 0. Python complex numbers fill coefficients 0 and 1,
  the real and first imaginary axes. Scalars and coefficient sequences are
  promoted.
  """
  if isinstance(value, Scalar):
    return promote(value.coeffs, depth)
  if isinstance(value, numbers.Real):
    c = np.zeros(1 << depth, dtype=np.float64)
    c[0] = value
    return c
  if isinstance(value, numbers.Complex):
    if depth < 1:
      raise ValueError("Complex values need depth 1 or more.")
    c = np.zeros(1 << depth, dtype=np.float64)
    c[0], c[1] = value.real, value.imag
    return c
  return promote(np.asarray(value, dtype=np.float64).reshape(-1), depth)


class Scalar:
  """A single multicomplex number.

  The coefficient vector may alias an array's storage, in which case the
  in-place operators write through to that array.
  """
  __slots__ = ("_c",)

  # Keep numpy from broadcasting over the coefficients in mixed arithmetic.
  __array_ufunc__ = None

  def __init__(self, *coeffs: float):
    if not coeffs:
      raise ValueError("A scalar needs at least one coefficient.")
    depth_of(len(coeffs))
    self._c = np.array(coeffs, dtype=np.float64)

  @classmethod
  def from_coeffs(cls, coeffs, copy: bool = True) -> "Scalar":
    """Wraps a 1-D coefficient vector, copying it unless `copy` is False."""
    arr = np.asarray(coeffs, dtype=np.float64)
    if arr.ndim != 1:
      raise ValueError(f"Expected a 1-D coefficient vector, got shape {arr.shape}.")
    depth_of(arr.shape[0])
    obj = cls.__new__(cls)
    obj._c = arr.copy() if copy else arr
    return obj

  @classmethod
  def from_parts(cls, real: "Scalar", imag: "Scalar") -> "Scalar":
    """Builds a depth D+1 value from two depth-D halves."""
    re, im = _align(real.coeffs, imag.coeffs)
    return cls.from_coeffs(np.concatenate([re, im]), copy=False)

  @classmethod
  def zeros(cls, depth: int) -> "Scalar":
    return cls.from_coeffs(np.zeros(1 << depth), copy=False)

  @classmethod
  def R(cls, depth: int) -> "Scalar":
    """Unit value along the real axis."""
    return cls.from_coeffs(unit(depth), copy=False)

  @classmethod
  def I(cls, depth: int) -> "Scalar":
    """Unit value along the top-level imaginary axis of `depth`."""
    if depth < 1:
      raise ValueError("Depth 0 values have no imaginary unit.")
    return cls.from_coeffs(unit(depth, 1 << (depth - 1)), copy=False)

  @classmethod
  def exp(cls, m: int, n: int, depth: int) -> "Scalar":
    """Returns cos(m pi / n) R + sin(m pi / n) I."""
    return cls.from_coeffs(
      trig.cos_v(m, n) * unit(depth) + trig.sin_v(m, n) * cls.I(depth).coeffs,
      copy=False,
    )

  @classmethod
  def expm(cls, m: int, n: int, depth: int) -> "Scalar":
    """Returns cos(m pi / n) R - sin(m pi / n) I."""
    return cls.from_coeffs(
      trig.cos_v(m, n) * unit(depth) - trig.sin_v(m, n) * cls.I(depth).coeffs,
      copy=False,
    )

  @property
  def coeffs(self) -> np.ndarray:
    return self._c

  @property
  def depth(self) -> int:
    return depth_of(self._c.shape[0])

  @property
  def real(self) -> "Scalar":
    return Scalar.from_coeffs(self._c[:self._half()], copy=False)

  @property
  def imag(self) -> "Scalar":
    return Scalar.from_coeffs(self._c[self._half():], copy=False)

  def _half(self) -> int:
    if self._c.shape[0] == 1:
      raise ValueError("Depth 0 values have no real/imag decomposition.")
    return self._c.shape[0] // 2

  def __getitem__(self, i: int) -> float:
    return float(self._c[i])

  def __setitem__(self, i: int, value: float):
    self._c[i] = value

  def __iter__(self):
    return iter(self._c.tolist())

  def copy(self) -> "Scalar":
    return Scalar.from_coeffs(self._c)

  def promote(self, depth: int) -> "Scalar":
    return Scalar.from_coeffs(promote(self._c, depth), copy=False)

  def squared_norm(self) -> float:
    return float(squared_norm(self._c))

  def norm(self) -> float:
    return float(np.sqrt(squared_norm(self._c)))

  def inverse(self) -> "Scalar":
    return Scalar.from_coeffs(inverse(self._c), copy=False)

  def compare(self, other: "Scalar") -> Ordering:
    """Orders by squared norm, then checks for exact coefficient equality."""
    a, b = _align(self._c, _to_scalar(other)._c)
    na, nb = squared_norm(a), squared_norm(b)
    if na < nb:
      return Ordering.LESS
    if na > nb:
      return Ordering.GREATER
    if np.array_equal(a, b):
      return Ordering.EQUAL
    return Ordering.EQUIVALENT

  # Arithmetic.

  def _binary(self, other, kernel, real_kernel):
    if isinstance(other, Scalar):
      return Scalar.from_coeffs(kernel(*_align(self._c, other._c)), copy=False)
    if isinstance(other, numbers.Real):
      return Scalar.from_coeffs(real_kernel(self._c, float(other)), copy=False)
    return NotImplemented

  def __add__(self, other):
    return self._binary(other, np.add, _add_real)

  __radd__ = __add__

  def __sub__(self, other):
    return self._binary(other, np.subtract, lambda c, r: _add_real(c, -r))

  def __rsub__(self, other):
    if isinstance(other, numbers.Real):
      return Scalar.from_coeffs(_add_real(-self._c, float(other)), copy=False)
    return NotImplemented

  def __mul__(self, other):
    return self._binary(other, multiply, np.multiply)

  __rmul__ = __mul__

  def __truediv__(self, other):
    return self._binary(
      other, lambda a, b: multiply(a, inverse(b)), np.true_divide
    )

  def __rtruediv__(self, other):
    if isinstance(other, numbers.Real):
      return Scalar.from_coeffs(inverse(self._c) * float(other), copy=False)
    return NotImplemented

  def _inplace(self, result):
    if result is NotImplemented:
      return result
    if result._c.shape != self._c.shape:
      raise ValueError(
        f"In-place update would change depth {self.depth} to {result.depth}."
      )
    self._c[...] = result._c
    return self

  def __iadd__(self, other):
    return self._inplace(self.__add__(other))

  def __isub__(self, other):
    return self._inplace(self.__sub__(other))

  def __imul__(self, other):
    return self._inplace(self.__mul__(other))

  def __itruediv__(self, other):
    return self._inplace(self.__truediv__(other))

  def __neg__(self):
    return Scalar.from_coeffs(-self._c, copy=False)

  def __pos__(self):
    return self.copy()

  def __invert__(self):
    return Scalar.from_coeffs(conjugate(self._c), copy=False)

  # Comparison.

  def __eq__(self, other):
    if not isinstance(other, (Scalar, numbers.Real)):
      return NotImplemented
    return self.compare(other) is Ordering.EQUAL

  def __ne__(self, other):
    if not isinstance(other, (Scalar, numbers.Real)):
      return NotImplemented
    return self.compare(other) is not Ordering.EQUAL

  def __lt__(self, other):
    return self.compare(other) is Ordering.LESS

  def __gt__(self, other):
    return self.compare(other) is Ordering.GREATER

  def __le__(self, other):
    return self.compare(other) in (Ordering.LESS, Ordering.EQUAL)

  def __ge__(self, other):
    return self.compare(other) in (Ordering.GREATER, Ordering.EQUAL)

  __hash__ = None

  def __repr__(self) -> str:
    return _format(self._c)


def _add_real(c: np.ndarray, r: float) -> np.ndarray:
  out = np.array(c, dtype=np.float64)
  out[0] += r
  return out


def _to_scalar(value) -> Scalar:
  if isinstance(value, Scalar):
    return value
  if isinstance(value, numbers.Real):
    return Scalar(float(value))
  raise TypeError(f"Cannot compare a Scalar with {type(value).__name__}.")


def _format(c: np.ndarray) -> str:
  if c.shape[0] == 1:
    return repr(float(c[0]))
  h = c.shape[0] // 2
  return f"({_format(c[:h])}, {_format(c[h:])})"
