import logging

import numpy as np

from colors import Pixel
from rasterizers import to_int

logger = logging.getLogger(__name__)


class PixelGrid:
    """
    The editable pixel document: a fixed ``height x width`` grid of optional RGBA cells.

    Cells live in three numpy planes: ``rgb`` (uint8), ``alpha`` (float in
    [0, 1]) and ``painted``. A cell whose ``painted`` flag is False reads back
    as None, which is not the same thing as a painted cell with alpha 0.
    """
    def __init__(self, width, height):
        width = to_int(width)
        height = to_int(height)
        if width is None or height is None or width <= 0 or height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.rgb = np.zeros((height, width, 3), dtype=np.uint8)
        self.alpha = np.zeros((height, width), dtype=np.float64)
        self.painted = np.zeros((height, width), dtype=bool)

    def __repr__(self):
        return f"PixelGrid({self.width}x{self.height}, painted={int(self.painted.sum())})"

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        if (self.width, self.height) != (other.width, other.height):
            return False
        if not np.array_equal(self.painted, other.painted):
            return False
        mask = self.painted
        return (
            np.array_equal(self.rgb[mask], other.rgb[mask])
            and np.array_equal(self.alpha[mask], other.alpha[mask])
        )

    def copy(self):
        """Returns an independent copy of the grid."""
        clone = PixelGrid.__new__(PixelGrid)
        clone.width = self.width
        clone.height = self.height
        clone.rgb = self.rgb.copy()
        clone.alpha = self.alpha.copy()
        clone.painted = self.painted.copy()
        return clone

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def _cell(self, x, y):
        x = to_int(x)
        y = to_int(y)
        if x is None or y is None or not self.in_bounds(x, y):
            return None
        return x, y

    def set_pixel(self, x, y, color):
        """Writes one cell; a None colour erases it. Out-of-range writes are ignored."""
        cell = self._cell(x, y)
        if cell is None:
            return
        x, y = cell
        if color is None:
            self.rgb[y, x] = 0
            self.alpha[y, x] = 0.0
            self.painted[y, x] = False
            return
        self.rgb[y, x] = (color[0], color[1], color[2])
        self.alpha[y, x] = color[3]
        self.painted[y, x] = True

    def get_pixel(self, x, y):
        """Reads one cell, returning None for empty or out-of-range cells."""
        cell = self._cell(x, y)
        if cell is None:
            return None
        x, y = cell
        if not self.painted[y, x]:
            return None
        r, g, b = self.rgb[y, x]
        return Pixel(int(r), int(g), int(b), float(self.alpha[y, x]))

    def apply(self, points, color):
        """Writes ``color`` (or erases, for None) at every point; returns the count written."""
        written = 0
        for point in points:
            if len(point) < 2:
                continue
            cell = self._cell(point[0], point[1])
            if cell is None:
                continue
            self.set_pixel(cell[0], cell[1], color)
            written += 1
        return written

    def clear(self):
        """Empties every cell."""
        self.rgb[:] = 0
        self.alpha[:] = 0.0
        self.painted[:] = False

    def is_empty(self):
        return not self.painted.any()

    def has_transparency(self):
        """True when any cell is unpainted or painted with alpha below 1."""
        return bool((~self.painted).any() or (self.alpha[self.painted] < 1.0).any())

    def to_rgba_array(self):
        """Returns an (h, w, 4) uint8 buffer; unpainted cells are fully transparent."""
        buffer = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        buffer[..., :3] = self.rgb
        buffer[..., 3] = np.floor(self.alpha * 255 + 0.5).astype(np.uint8)
        buffer[~self.painted] = 0
        return buffer

    def to_rows(self):
        """Serialises the grid as ``[height][width]`` of ``{r, g, b, a}`` dicts or None."""
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                pixel = self.get_pixel(x, y)
                row.append(pixel.to_dict() if pixel is not None else None)
            rows.append(row)
        return rows

    @classmethod
    def from_rows(cls, rows, width, height):
        """Builds a grid from the JSON pixel shape. Missing rows or cells stay empty."""
        if not isinstance(rows, list):
            raise ValueError("pixels must be a list of rows")
        grid = cls(width, height)
        for y, row in enumerate(rows[:grid.height]):
            if not isinstance(row, list):
                continue
            for x, cell in enumerate(row[:grid.width]):
                if isinstance(cell, dict):
                    grid.set_pixel(x, y, Pixel.from_dict(cell))
        logger.debug("Loaded %r", grid)
        return grid
