import numpy as np
from multicomplex_nus import Array, Node


def run_proc_example():
  """Zero-fill a small complex array along both axes and keep its real part."""
  print("--- Processing Graph Example ---")

  x = Array((3, 3), depth=1)
  for i in range(3):
    for j in range(3):
      x[i, j] = (i + 1, j + 1)

  # Build the graph; shapes are checked here, before any data flows.
  graph = Node.source(x).zerofill().zerofill(1).real()
  y = graph()

  print("x:")
  for i in range(3):
    print(",  ".join(str(x[i, j]) for j in range(3)))
  print()

  print("y:")
  with np.printoptions(precision=3, suppress=True):
    print(y.data)

  # The same input through a 2-D spectrum and its modulus.
  freq = Node.source(x).zerofill().zerofill(1).fft(0).abs()()
  print("\n|fft along axis 0|:")
  with np.printoptions(precision=3, suppress=True):
    print(freq.data)

if __name__ == "__main__":
  run_proc_example()
