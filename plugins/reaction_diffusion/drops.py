"""
Drops: localized deposits of chemical B

PerturbationInjector writes a solid disk of B = 1 into the current grid.
Used for the startup seed, pointer clicks and random drops.

RandomDropper decides when a timed random drop is due and where it lands.
"""

import math
import numpy as np


class PerturbationInjector:

    def __init__(self, grid):
        self.grid = grid

    def inject(self, center_x, center_y, radius):
        """Set B = 1 for every cell strictly within radius of the center.

        The center is floored to a cell. Only the bounding box
        [c - r - 1, c + r + 1] clipped to the grid is visited; drops do not
        wrap across the periodic seam.

        Returns the number of cells touched.
        """
        grid = self.grid
        cx = math.floor(center_x)
        cy = math.floor(center_y)
        r_sq = radius * radius

        i0 = max(0, math.floor(cx - radius - 1))
        i1 = min(grid.cols - 1, math.ceil(cx + radius + 1))
        j0 = max(0, math.floor(cy - radius - 1))
        j1 = min(grid.rows - 1, math.ceil(cy + radius + 1))
        if i0 > i1 or j0 > j1:
            return 0

        I, J = np.ogrid[i0:i1 + 1, j0:j1 + 1]
        mask = (I - cx) ** 2 + (J - cy) ** 2 < r_sq
        grid.b[i0:i1 + 1, j0:j1 + 1][mask] = 1.0
        return int(mask.sum())


class RandomDropper:
    """Timed random drops at uniformly random positions.

    Radius is drawn from [5, 15), matching the interactive "add drop" action.
    """

    MIN_RADIUS = 5.0
    RADIUS_SPREAD = 10.0

    def __init__(self, interval=1.0, rng=None):
        self.interval = interval
        self.rng = rng if rng is not None else np.random.default_rng()
        self.last_drop = None

    def reset(self, now):
        self.last_drop = now

    def due(self, now):
        """True when at least `interval` seconds passed since the last drop."""
        if self.last_drop is None:
            self.last_drop = now
            return False
        return now - self.last_drop > self.interval

    def pick(self, cols, rows):
        """Return (x, y, radius) for one random drop."""
        x = self.rng.random() * cols
        y = self.rng.random() * rows
        radius = self.MIN_RADIUS + self.rng.random() * self.RADIUS_SPREAD
        return x, y, radius

    def drop(self, injector, now=None):
        """Inject one random drop and restart the interval timer."""
        grid = injector.grid
        x, y, radius = self.pick(grid.cols, grid.rows)
        injector.inject(x, y, radius)
        if now is not None:
            self.last_drop = now
        return x, y, radius
