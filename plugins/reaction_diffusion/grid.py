"""
Two-Channel Concentration Grid

A cols x rows lattice holding chemical A and chemical B concentrations,
indexed grid[i][j] with i along x (columns) and j along y (rows).

Two lattices exist at all times: "current" (read by the stencil) and
"next" (written by it). swap() exchanges their roles by flipping an
index into preallocated (2, cols, rows) stacks, so no data is copied.

Direct access via get()/set() does not wrap. Only stencil consumers wrap
their neighbor lookups around the torus.
"""

import numpy as np


class ConcentrationGrid:

    def __init__(self, cols, rows, dtype=np.float64):
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Grid dimensions must be positive: {cols}x{rows}")
        self.cols = cols
        self.rows = rows
        self._a = np.ones((2, cols, rows), dtype=dtype)
        self._b = np.zeros((2, cols, rows), dtype=dtype)
        self._current = 0
        self.generation = 0

    # --- Buffer views ---

    @property
    def a(self):
        return self._a[self._current]

    @property
    def b(self):
        return self._b[self._current]

    @property
    def next_a(self):
        return self._a[1 - self._current]

    @property
    def next_b(self):
        return self._b[1 - self._current]

    def swap(self):
        """Next becomes current; old current becomes the next write target."""
        self._current = 1 - self._current
        self.generation += 1

    # --- Cell access ---

    def _check(self, i, j):
        if not (0 <= i < self.cols and 0 <= j < self.rows):
            raise IndexError(
                f"Cell ({i}, {j}) outside {self.cols}x{self.rows} grid"
            )

    def get(self, i, j):
        self._check(i, j)
        return float(self.a[i, j]), float(self.b[i, j])

    def set(self, i, j, a, b):
        self._check(i, j)
        self.a[i, j] = a
        self.b[i, j] = b

    def dimensions(self):
        return self.cols, self.rows

    def reset(self, seed=None):
        """Fill both buffers with a=1, b=0, then apply an optional seed(grid)."""
        self._a[:] = 1.0
        self._b[:] = 0.0
        self._current = 0
        self.generation = 0
        if seed is not None:
            seed(self)

    @property
    def stats(self):
        """Return current grid statistics."""
        b = self.b
        return {
            "generation": self.generation,
            "mean_a": float(self.a.mean()),
            "mean_b": float(b.mean()),
            "mass": float(b.sum()),
            "b_pct": float((b > 0.01).sum()) / b.size * 100,
        }
