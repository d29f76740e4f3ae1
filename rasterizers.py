"""Shape rasterizers.

Every function takes plain grid coordinates and returns the integer cells the
shape covers. Nothing here knows about a canvas or document. Coordinates are
coerced with :func:`to_int`; if any of them is not a finite number the result
is empty, so callers can treat an empty result as "nothing to paint".
"""
import math
from typing import List, Optional, Set, Tuple

Point = Tuple[int, int]

# Fixed sample density for quadratic curves. 200 samples keep consecutive
# cells connected for any grid the editor allows (at most 256 cells across).
CURVE_STEPS = 200


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def to_int(value) -> Optional[int]:
    """Round ``value`` to the nearest integer, or return None if it is not finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(v):
        return None
    return round_half_up(v)


def _coerce(*values) -> Optional[List[int]]:
    ints = [to_int(v) for v in values]
    if any(v is None for v in ints):
        return None
    return ints


def line(x0, y0, x1, y1) -> List[Point]:
    """Bresenham line from (x0, y0) to (x1, y1), both endpoints included.

    The cells are always traced from the lexicographically smaller endpoint,
    so swapping the endpoints yields the same cells in reverse order.
    """
    coords = _coerce(x0, y0, x1, y1)
    if coords is None:
        return []
    x0, y0, x1, y1 = coords
    if (x0, y0) > (x1, y1):
        return _bresenham(x1, y1, x0, y0)[::-1]
    return _bresenham(x0, y0, x1, y1)


def _bresenham(x0: int, y0: int, x1: int, y1: int) -> List[Point]:
    points = []
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        points.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return points


def circle(cx, cy, r) -> Set[Point]:
    """Midpoint circle outline centred on (cx, cy). A negative radius is empty."""
    coords = _coerce(cx, cy, r)
    if coords is None:
        return set()
    cx, cy, r = coords
    if r < 0:
        return set()

    points: Set[Point] = set()
    x, y, err = r, 0, 1 - r
    while x >= y:
        points.update((
            (cx + x, cy + y), (cx + y, cy + x),
            (cx - y, cy + x), (cx - x, cy + y),
            (cx - x, cy - y), (cx - y, cy - x),
            (cx + y, cy - x), (cx + x, cy - y),
        ))
        y += 1
        if err < 0:
            err += 2 * y + 1
        else:
            x -= 1
            err += 2 * (y - x) + 1
    return points


def _bounds(x0, y0, x1, y1):
    coords = _coerce(x0, y0, x1, y1)
    if coords is None:
        return None
    x0, y0, x1, y1 = coords
    min_x, max_x = sorted((x0, x1))
    min_y, max_y = sorted((y0, y1))
    return min_x, min_y, max_x, max_y


def rect_outline(x0, y0, x1, y1) -> Set[Point]:
    """Border cells of the box spanned by two corners, in any order."""
    box = _bounds(x0, y0, x1, y1)
    if box is None:
        return set()
    min_x, min_y, max_x, max_y = box
    points: Set[Point] = set()
    for x in range(min_x, max_x + 1):
        points.add((x, min_y))
        points.add((x, max_y))
    for y in range(min_y, max_y + 1):
        points.add((min_x, y))
        points.add((max_x, y))
    return points


def rect_filled(x0, y0, x1, y1) -> Set[Point]:
    """Every cell of the box spanned by two corners."""
    box = _bounds(x0, y0, x1, y1)
    if box is None:
        return set()
    min_x, min_y, max_x, max_y = box
    return {
        (x, y)
        for y in range(min_y, max_y + 1)
        for x in range(min_x, max_x + 1)
    }


def quadratic_curve(x0, y0, cx, cy, x1, y1) -> List[Point]:
    """Quadratic Bezier from (x0, y0) to (x1, y1) with control point (cx, cy).

    The curve is sampled at CURVE_STEPS + 1 evenly spaced values of t, each
    sample is snapped to its nearest cell and runs of the same cell collapse
    to a single entry.
    """
    coords = _coerce(x0, y0, cx, cy, x1, y1)
    if coords is None:
        return []
    x0, y0, cx, cy, x1, y1 = coords
    points: List[Point] = []
    for i in range(CURVE_STEPS + 1):
        t = i / CURVE_STEPS
        u = 1 - t
        xt = u * u * x0 + 2 * u * t * cx + t * t * x1
        yt = u * u * y0 + 2 * u * t * cy + t * t * y1
        cell = (round_half_up(xt), round_half_up(yt))
        if not points or points[-1] != cell:
            points.append(cell)
    return points


def distance_radius(x0, y0, x1, y1) -> int:
    """Radius for a circle dragged from (x0, y0) to (x1, y1)."""
    return round_half_up(math.hypot(x1 - x0, y1 - y0))
