import numpy as np
import scipy.fft
from absl.testing import parameterized
from absl.testing import absltest
from multicomplex_nus import Array, FFTDirection, Forward, Inverse, Transform, Vector
from multicomplex_nus import fft
from multicomplex_nus import transform_axis

SMOOTH_LENGTHS = (2, 3, 4, 5, 6, 8, 9, 10, 12, 15, 16, 18, 20, 24, 25, 27, 30,
                  32, 45, 60, 64, 81, 96, 100, 125, 128, 243, 256, 360, 1024)


def random_complex(rng, shape):
  return rng.normal(size=shape) + 1j * rng.normal(size=shape)

def embed(values, depth, position):
  """Complex values in the plane of R and the unit at coefficient `position`."""
  out = np.zeros(values.shape + (1 << depth,))
  out[..., 0] = values.real
  out[..., position] = values.imag
  return out


class TestFactors(parameterized.TestCase):

  @parameterized.parameters(
    (2, (2,)), (45, (3, 3, 5)), (360, (2, 2, 2, 3, 3, 5)),
    (7 * 11 * 13 * 17, (7, 11, 13, 17)), (1, ()),
  )
  def test_factors(self, n, expected):
    self.assertEqual(fft.factors(n), expected)

  def test_large_prime_is_refused(self):
    with self.assertRaises(ValueError):
      fft.factors(2 * 19)

  @parameterized.parameters((12, 2), (45, 3), (25, 5))
  def test_next_factor(self, n, expected):
    self.assertEqual(fft.next_factor(n), expected)

  def test_next_factor_needs_small_radix(self):
    with self.assertRaises(ValueError):
      fft.next_factor(49)

  def test_is_smooth(self):
    self.assertTrue(fft.is_smooth(2))
    self.assertTrue(fft.is_smooth(3 * 5 * 5 * 16))
    self.assertFalse(fft.is_smooth(1))
    self.assertFalse(fft.is_smooth(14))


class TestPlanPieces(parameterized.TestCase):

  def test_shuffle(self):
    np.testing.assert_array_equal(fft.shuffle_permutation(2, 2), [0, 2, 1, 3])
    self.assertEqual(fft.shuffle_swaps(2, 2, 3), ((3, 6),))

  @parameterized.parameters((2, 3), (3, 2), (4, 5), (5, 3), (2, 8))
  def test_shuffle_transposes(self, rows, cols):
    """Output position j * rows + i reads input position i * cols + j."""
    perm = fft.shuffle_permutation(rows, cols)
    expected = np.arange(rows * cols).reshape(rows, cols).T.ravel()
    np.testing.assert_array_equal(perm, expected)

  @parameterized.parameters((2, 3), (3, 2), (4, 5), (5, 3), (2, 8), (16, 27))
  def test_swaps_agree_with_gather(self, rows, cols):
    perm = np.arange(rows * cols)
    for a, b in fft.shuffle_swaps(rows, cols):
      perm[a], perm[b] = perm[b], perm[a]
    np.testing.assert_array_equal(perm, fft.shuffle_permutation(rows, cols))

  def test_large_shuffle(self):
    rows, cols = 2, 32768
    perm = fft.shuffle_permutation(rows, cols)
    self.assertEqual(perm[1], cols)
    self.assertEqual(perm[rows * cols - 2], cols - 1)
    swaps = fft.shuffle_swaps(rows, cols)
    self.assertLess(len(swaps), rows * cols)
    self.assertTrue(all(a < b for a, b in swaps))

  @parameterized.parameters(
    (2, 8, 1, FFTDirection.FORWARD),
    (3, 5, 1, FFTDirection.INVERSE),
    (5, 20, 2, FFTDirection.FORWARD),
  )
  def test_twiddle_table(self, n1, n2, depth, direction):
    table = fft.twiddle_table(n1, n2, depth, direction)
    self.assertEqual(table.shape, (n1 - 1, n2, 1 << depth))
    a = np.arange(1, n1)[:, None]
    k = np.arange(n2)[None, :]
    expected = np.exp(int(direction) * 2j * np.pi * a * k / (n1 * n2))
    np.testing.assert_allclose(table, embed(expected, depth, 1 << (depth - 1)), atol=1e-12)

  def test_plan_nodes_are_memoised(self):
    a = fft.get_block(60, 1, 1, FFTDirection.FORWARD)
    b = fft.get_block(60, 1, 1, FFTDirection.FORWARD)
    self.assertIs(a, b)
    self.assertIsInstance(a, fft.CooleyTukeyBlock)
    self.assertEqual((a.n1, a.n2), (2, 30))
    self.assertIs(a.blk2, fft.get_block(30, 2, 1, FFTDirection.FORWARD))

  def test_plan_construction_is_logged(self):
    with self.assertLogs("multicomplex_nus.fft", level="DEBUG") as logs:
      fft.get_block(10, 97, 1, FFTDirection.INVERSE)
    self.assertTrue(any("n=10 stride=97" in line for line in logs.output))


class TestTransform(parameterized.TestCase):

  def test_constant_input(self):
    x = Array(4, [(1, 0)] * 4, depth=1)
    Forward(4)(x)
    np.testing.assert_allclose(x.flat, [[4, 0], [0, 0], [0, 0], [0, 0]], atol=1e-12)

  @parameterized.parameters(*SMOOTH_LENGTHS)
  def test_matches_reference_forward(self, n):
    rng = np.random.default_rng(n)
    x = random_complex(rng, n)
    buf = x.copy()
    Forward(n)(buf)
    np.testing.assert_allclose(buf, scipy.fft.fft(x), atol=1e-9 * n)

  @parameterized.parameters(3, 8, 30, 125)
  def test_matches_reference_inverse(self, n):
    rng = np.random.default_rng(n)
    x = random_complex(rng, n)
    buf = x.copy()
    Inverse(n)(buf)
    np.testing.assert_allclose(buf, n * scipy.fft.ifft(x), atol=1e-9 * n)

  @parameterized.parameters(1, 2, 3)
  def test_phase_depth_plane(self, depth):
    """Data in the plane of R and I(depth) transforms like complex data."""
    n = 24
    rng = np.random.default_rng(depth)
    x = random_complex(rng, n)
    a = Array(n, depth=depth)
    a.data[...] = embed(x, depth, 1 << (depth - 1))
    Transform(n, FFTDirection.FORWARD, depth)(a)
    np.testing.assert_allclose(
      a.flat, embed(scipy.fft.fft(x), depth, 1 << (depth - 1)), atol=1e-9
    )

  @parameterized.product(depth=(1, 2, 3), n=(6, 16, 45))
  def test_round_trip(self, depth, n):
    rng = np.random.default_rng(n + depth)
    a = Array(n, depth=3)
    a.data[...] = rng.normal(size=a.data.shape)
    original = a.data.copy()
    Forward(n, depth)(a)
    Inverse(n, depth)(a)
    np.testing.assert_allclose(a.flat / n, original, atol=1e-10)

  def test_vector_views(self):
    rng = np.random.default_rng(7)
    x = random_complex(rng, (3, 4))
    a = Array((3, 4), depth=1)
    a.data[...] = embed(x, 1, 1)

    Forward(4)(Vector(a, 1, (1, 0)))
    Forward(3)(Vector(a, 0, (0, 2)))
    expected = x.copy()
    expected[1] = scipy.fft.fft(expected[1])
    expected[:, 2] = scipy.fft.fft(expected[:, 2])
    np.testing.assert_allclose(a.data, embed(expected, 1, 1), atol=1e-12)

  def test_strided_buffer(self):
    rng = np.random.default_rng(3)
    x = random_complex(rng, 12)
    buf = x.copy()
    Forward(4)(buf, offset=1, stride=3)
    expected = x.copy()
    expected[1::3] = scipy.fft.fft(x[1::3])
    np.testing.assert_allclose(buf, expected, atol=1e-12)

  def test_coefficient_buffer(self):
    rng = np.random.default_rng(4)
    x = random_complex(rng, 10)
    buf = embed(x, 2, 2)
    Forward(10, depth=2)(buf)
    np.testing.assert_allclose(buf, embed(scipy.fft.fft(x), 2, 2), atol=1e-12)

  @parameterized.parameters(7, 14, 22, 1)
  def test_unsupported_length(self, n):
    with self.assertRaises(ValueError):
      Forward(n)

  def test_invalid_depth(self):
    with self.assertRaises(ValueError):
      Transform(8, depth=0)
    with self.assertRaises(ValueError):
      Forward(4, depth=2)(Array(4, depth=1))
    with self.assertRaises(ValueError):
      Forward(4)(Array(4))
    with self.assertRaises(ValueError):
      Forward(4, depth=2)(np.zeros(4, dtype=np.complex128))

  def test_invalid_shapes(self):
    with self.assertRaises(ValueError):
      Forward(8)(Array(4, depth=1))
    with self.assertRaises(ValueError):
      Forward(4)(Array((4, 4), depth=1))
    with self.assertRaises(ValueError):
      Forward(4)(np.zeros(6, dtype=np.complex128), offset=1, stride=2)
    with self.assertRaises(ValueError):
      Forward(4)(np.zeros((4, 3)))

  def test_sequences_are_refused(self):
    for data in ([1.0, 2.0, 3.0, 4.0], [(1, 0), (0, 0), (0, 0), (0, 0)]):
      before = list(data)
      with self.assertRaises(ValueError):
        Forward(4)(data)
      with self.assertRaises(ValueError):
        Forward(4)(tuple(data))
      self.assertEqual(data, before)

  @parameterized.parameters((1, 1), (0, 2))
  def test_layout_arguments_need_raw_buffer(self, offset, stride):
    a = Array(8, depth=1)
    with self.assertRaises(ValueError):
      Forward(4)(a, offset=offset, stride=stride)
    with self.assertRaises(ValueError):
      Forward(8)(a, offset=offset, stride=stride)
    with self.assertRaises(ValueError):
      Forward(4)(Vector(a, 0, (0,)), offset=offset, stride=stride)


class TestTransformAxis(parameterized.TestCase):

  @parameterized.parameters(0, 1)
  def test_single_axis(self, axis):
    rng = np.random.default_rng(axis)
    x = random_complex(rng, (6, 10))
    a = Array((6, 10), depth=axis + 1)
    a.data[...] = embed(x, axis + 1, 1 << axis)
    transform_axis(a, axis)
    np.testing.assert_allclose(
      a.data, embed(scipy.fft.fft(x, axis=axis), axis + 1, 1 << axis), atol=1e-9
    )

  def test_explicit_depth(self):
    rng = np.random.default_rng(11)
    x = random_complex(rng, (4, 5, 6))
    a = Array((4, 5, 6), depth=1)
    a.data[...] = embed(x, 1, 1)
    transform_axis(a, 1, FFTDirection.INVERSE, depth=1)
    expected = 5 * scipy.fft.ifft(x, axis=1)
    np.testing.assert_allclose(a.data, embed(expected, 1, 1), atol=1e-9)

  def test_bicomplex_two_dimensional(self):
    """Real data transformed along both axes separates the two phase planes."""
    rng = np.random.default_rng(5)
    x = rng.normal(size=(8, 6))
    a = Array((8, 6), depth=2)
    a.data[..., 0] = x
    transform_axis(a, 0)
    transform_axis(a, 1)

    f = scipy.fft.fft2(x)
    g = 6 * scipy.fft.ifft(scipy.fft.fft(x, axis=0), axis=1)
    expected = np.stack([
      (f.real + g.real) / 2,
      (f.imag + g.imag) / 2,
      (f.imag - g.imag) / 2,
      (g.real - f.real) / 2,
    ], axis=-1)
    np.testing.assert_allclose(a.data, expected, atol=1e-9)

  def test_axis_depth_is_checked(self):
    with self.assertRaises(ValueError):
      transform_axis(Array((4, 4), depth=1), 1)
    with self.assertRaises(ValueError):
      transform_axis(Array((4, 4)), 0)
    with self.assertRaises(ValueError):
      transform_axis(Array((4, 4), depth=2), 2)


if __name__ == "__main__":
  absltest.main()
