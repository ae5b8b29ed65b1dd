import numpy as np
from absl.testing import parameterized
from absl.testing import absltest
from multicomplex_nus import Array, Index, Matrix, Scalar, Vector, dot
from multicomplex_nus.dot import Dot


class TestVector(parameterized.TestCase):
  """Vector views over a 3x3x3 array."""

  def setUp(self):
    super().setUp()
    self.x = Array((3, 3, 3), dtype=int)
    for i in range(3):
      for j in range(3):
        for k in range(3):
          self.x[i, j, k] = 500000 + 100 * i + 10 * j + k
    self.idx = Index(self.x.extents)

  def test_default_view_runs_along_first_axis(self):
    v = Vector(self.x)
    self.assertLen(v, 3)
    for i in range(3):
      self.assertEqual(v[i], self.x[i, 0, 0])

  @parameterized.parameters(0, 1, 2)
  def test_axis(self, axis):
    v = Vector(self.x, axis, (0, 0, 0))
    for i in range(3):
      coords = [0, 0, 0]
      coords[axis] = i
      self.assertEqual(v[i], self.x[tuple(coords)])

  def test_start_index(self):
    v = Vector(self.x, 2, Index(self.x.extents, (2, 1, 0)))
    self.assertEqual([v[k] for k in range(3)], [500210, 500211, 500212])

  def test_subscript_writes_through(self):
    v = Vector(self.x, 1, self.idx)
    for i in range(3):
      v[i] = -v[i]
    self.assertEqual([v[i] for i in range(3)], [-500000, -500010, -500020])
    self.assertEqual(self.x[0, 1, 0], -500010)
    self.assertEqual(self.x[0, 2, 0], -500020)

  def test_shift(self):
    u = Vector(self.x, 1, self.idx)
    v = u + 1
    self.assertEqual(v[0], u[1])
    self.assertEqual(v[1], u[2])
    self.assertEqual(v[1], self.x[0, 2, 0])

  def test_assign_sequence(self):
    v = Vector(self.x, 0, (0, 1, 1))
    v.assign([1, 2, 3])
    self.assertEqual([self.x[i, 1, 1] for i in range(3)], [1, 2, 3])
    self.assertEqual(self.x[0, 0, 0], 500000)
    self.assertEqual(v.values().tolist(), [1, 2, 3])

  def test_multicomplex_elements(self):
    x = Array((2, 2), [(1, 2), (3, 4), (5, 6), (7, 8)], depth=1)
    v = Vector(x, 0, (0, 1))
    np.testing.assert_allclose(v[1].coeffs, [7, 8])
    v[0] = Scalar(0, 1)
    np.testing.assert_allclose(x.flat[1], [0, 1])
    v.assign([1, Scalar(2, 2)])
    np.testing.assert_allclose(x.flat[[1, 3]], [[1, 0], [2, 2]])


class TestMatrix(parameterized.TestCase):
  """Matrix views and dot products."""

  def setUp(self):
    super().setUp()
    self.x = Array((3, 3, 3), dtype=int)
    for i in range(3):
      for j in range(3):
        for k in range(3):
          self.x[i, j, k] = 500000 + 100 * i + 10 * j + k

  @parameterized.named_parameters(
    ("01", 0, 1, lambda i, j: (i, j, 0)),
    ("02", 0, 2, lambda i, j: (i, 0, j)),
    ("12", 1, 2, lambda i, j: (0, i, j)),
  )
  def test_axes(self, axis1, axis2, where):
    A = Matrix(self.x, axis1, axis2)
    self.assertEqual(A.shape, (3, 3))
    for i in range(3):
      for j in range(3):
        self.assertEqual(A[i, j], self.x[where(i, j)])

  def test_subscript_writes_through(self):
    A = Matrix(self.x, 1, 2)
    for k in range(3):
      A[k, k] = -A[k, k]
    self.assertEqual(self.x[0, 0, 0], -500000)
    self.assertEqual(self.x[0, 1, 1], -500011)
    self.assertEqual(self.x[0, 2, 2], -500022)

  def test_same_axis_is_refused(self):
    with self.assertRaises(ValueError):
      Matrix(self.x, 1, 1)

  def test_matrix_matrix_product(self):
    A = Array((2, 3), [1, 2, 3, 4, 5, 6], dtype=int)
    B = Array((3, 2), [6, 5, 4, 3, 2, 1], dtype=int)
    C = Array((2, 2), dtype=int)
    Matrix(C).assign(Matrix(A) @ Matrix(B))
    self.assertEqual(C.flat.tolist(), [20, 14, 56, 41])

  def test_matrix_vector_product(self):
    A = Array((2, 3), [1, 2, 3, 4, 5, 6], dtype=int)
    x = Array(3, [7, 8, 9], dtype=int)
    y = Array(2, dtype=int)
    Vector(y).assign(Matrix(A) @ Vector(x))
    self.assertEqual(y.flat.tolist(), [50, 122])

  def test_vector_matrix_product(self):
    A = Array((2, 3), [1, 2, 3, 4, 5, 6], dtype=int)
    y = Array(2, [50, 122], dtype=int)
    x = Array(3, dtype=int)
    Vector(x).assign(Vector(y) @ Matrix(A))
    self.assertEqual(x.flat.tolist(), [538, 710, 882])

  def test_array_products(self):
    A = Array((2, 3), [1, 2, 3, 4, 5, 6], dtype=int)
    x = Array(3, [7, 8, 9], dtype=int)
    y = Array(2, dtype=int)
    z = Array(3, dtype=int)
    y.assign(dot(A, x))
    self.assertEqual(y.flat.tolist(), [50, 122])
    z.assign(y @ A)
    self.assertEqual(z.flat.tolist(), [538, 710, 882])
    self.assertEqual(dot(x, z), 17384)
    self.assertEqual(A.flat.tolist(), [1, 2, 3, 4, 5, 6])

  def test_single_entry(self):
    A = Array((2, 3), [1, 2, 3, 4, 5, 6], dtype=int)
    B = Array((3, 2), [6, 5, 4, 3, 2, 1], dtype=int)
    product = dot(A, B)
    self.assertIsInstance(product, Dot)
    self.assertEqual(product.shape, (2, 2))
    self.assertEqual(product.dot(1, 0), 56)

  def test_product_over_strided_views(self):
    A = Matrix(self.x, 0, 2, (0, 1, 0))
    v = Vector(self.x, 1, (2, 0, 1))
    expected = np.array([[self.x[i, 1, k] for k in range(3)] for i in range(3)])
    w = np.array([self.x[2, j, 1] for j in range(3)])
    out = Array(3, dtype=int)
    out.assign(A @ v)
    self.assertEqual(out.flat.tolist(), (expected @ w).tolist())

  def test_multicomplex_product(self):
    A = Array((2, 2), [(0, 1), 0, 0, (0, 1)], depth=1)
    x = Array(2, [(1, 2), (3, 4)], depth=1)
    y = Array(2, depth=1)
    y.assign(A @ x)
    np.testing.assert_allclose(y.flat, [[-2, 1], [-4, 3]])
    value = dot(x, x)
    np.testing.assert_allclose(value.coeffs, [-10, 28])

  def test_mismatched_products(self):
    A = Array((2, 3))
    with self.assertRaises(ValueError):
      dot(A, A)
    with self.assertRaises(ValueError):
      dot(self.x, Array(3))
    with self.assertRaises(TypeError):
      dot(A, [1, 2, 3])
    with self.assertRaises(ValueError):
      Array(3).assign(dot(A, Array(3)))


if __name__ == "__main__":
  absltest.main()
