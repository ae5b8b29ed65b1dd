""" Iterative Soft Thresholding
---------------------------
Reconstruction of a spectrum from non-uniformly sampled time-domain data.
Each iteration masks the residual to the sampled positions, moves it to
the frequency domain, adds it to the running spectral estimate and shrinks
that estimate toward zero by a threshold that decays geometrically.
"""
import logging
from dataclasses import dataclass

import numpy as np

from . import scalar as mc
from .array import Array
from .fft import Forward, Inverse
from .schedule import Schedule

logger = logging.getLogger(__name__)


@dataclass
class ReconstructionOptions:
  """Options for iterative soft thresholding.

  Attributes:
    iterations: Number of iterations.
    mu: Per-iteration threshold reduction factor, in (0, 1).
    depth: Multicomplex depth of the data.
  """
  iterations: int = 500
  mu: float = 0.98
  depth: int = 1


def soft_threshold(array: Array, thresh: float) -> Array:
  """Shrinks every element toward zero in place.

  Elements with |z| > thresh are scaled by (1 - thresh / |z|); all others
  become zero.
  """
  flat = array.flat
  if array.depth is None:
    norms = np.abs(flat)
  else:
    norms = np.sqrt(mc.squared_norm(flat))
  keep = norms > thresh
  ratio = np.divide(thresh, norms, out=np.zeros_like(norms), where=keep)
  scale = np.where(keep, 1.0 - ratio, 0.0)
  if array.depth is None:
    flat *= scale
  else:
    flat *= scale[:, None]
  return array


def spectrum(x: Array) -> Array:
  """Forward transform of a copy of the one-dimensional array `x`."""
  out = Array.like(x)
  out.assign(x)
  return Forward(x.size)(out)


def reconstruct(
  observed: Array,
  schedule: Schedule,
  options: ReconstructionOptions | None = None,
) -> Array:
  """Reconstructs the full time-domain signal from scheduled samples.

  Args:
    observed: One-dimensional multicomplex array of the N measured values.
    schedule: Schedule of the N sampled positions within the dense length.
    options: Iteration options.

  Returns:
    The time-domain estimate; its forward transform is the spectrum.

  Raises:
    ValueError: If the schedule is not one-dimensional or the depth of
      `observed` does not match the options.
  """
  if options is None:
    options = ReconstructionOptions()
  if schedule.extents.ndims != 1:
    raise ValueError("Reconstruction supports one-dimensional schedules.")
  if observed.depth != options.depth:
    raise ValueError(
      f"Observed data has depth {observed.depth}, expected {options.depth}."
    )
  n = schedule.extents.count
  fwd = Forward(n)
  inv = Inverse(n)

  b = schedule.insert(observed)
  x = Array.like(b)
  dx = Array.like(b)
  fx = Array.like(b)

  dx.assign(b)
  fwd(dx)
  thresh = options.mu * dx.max().norm()

  for it in range(1, options.iterations + 1):
    dx.assign(b - x)
    dx *= schedule
    fwd(dx)
    fx += dx

    soft_threshold(fx, thresh)

    x.assign(fx / n)
    inv(x)

    logger.debug("Iteration %d: threshold %.6g", it, thresh)
    thresh *= options.mu

  logger.info(
    "Finished %d iterations over %d of %d points; final threshold %.6g",
    options.iterations, len(schedule), n, thresh,
  )
  return x
