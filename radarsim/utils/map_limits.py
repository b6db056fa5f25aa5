"""
    Cartesian rectangle (km, relative to the radar site) that bounds where
    new traffic may appear.
"""

import numpy as np


class MapLimits:
    def __init__(self, min_x, max_x, min_y, max_y):
        if min_x > max_x or min_y > max_y:
            raise ValueError(f"Degenerate limits: x [{min_x}, {max_x}], y [{min_y}, {max_y}]")
        self.min_x = min_x
        self.max_x = max_x
        self.min_y = min_y
        self.max_y = max_y

    def x_extent(self):
        return self.max_x - self.min_x

    def y_extent(self):
        return self.max_y - self.min_y

    def absolute_position(self, x_rel, y_rel):
        """Convert relative [0,1] coordinates to km."""
        x = np.clip(x_rel, 0, 1) * self.x_extent() + self.min_x
        y = np.clip(y_rel, 0, 1) * self.y_extent() + self.min_y
        return float(x), float(y)

    def random_position(self, rng):
        """Uniformly distributed point inside the rectangle."""
        return self.absolute_position(rng.random(), rng.random())

    def in_boundary(self, x, y):
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y
