""" Series Trigonometry
-------------------
Sine and cosine of rational multiples of pi, evaluated from truncated
Taylor series. The FFT plans seed their twiddle constants from these
functions, so every table is built from the same deterministic values.
"""
import functools
import math

PI = 3.14159265358979323846264338327950288

# Highest term order kept in the series.
MAX_ORDER = 32


def _reduce(x: float) -> tuple[float, int]:
  """Folds |x| into [0, pi], counting the half-turns that were removed."""
  t = abs(x)
  turns = 0
  while t > PI:
    t -= PI
    turns += 1
  return t, turns


def cos(x: float) -> float:
  """Cosine from the Taylor series up to order `MAX_ORDER`.

  Args:
    x: Argument in radians.

  Returns:
    The cosine of `x`.
  """
  t, turns = _reduce(x)
  mxsq = -t * t
  total = 1.0
  xk = mxsq
  for k in range(2, MAX_ORDER + 1, 2):
    total += xk / math.factorial(k)
    xk *= mxsq
  return -total if turns % 2 else total


def sin(x: float) -> float:
  """Sine from the Taylor series up to order `MAX_ORDER`.

  Args:
    x: Argument in radians.

  Returns:
    The sine of `x`.
  """
  t, turns = _reduce(x)
  mxsq = -t * t
  total = 0.0
  xk = t
  for k in range(1, MAX_ORDER + 1, 2):
    total += xk / math.factorial(k)
    xk *= mxsq
  if x < 0:
    turns += 1
  return -total if turns % 2 else total


@functools.lru_cache(maxsize=None)
def cos_v(m: int, n: int) -> float:
  """Returns cos(m * pi / n)."""
  return cos(m * PI / n)


@functools.lru_cache(maxsize=None)
def sin_v(m: int, n: int) -> float:
  """Returns sin(m * pi / n)."""
  return sin(m * PI / n)
