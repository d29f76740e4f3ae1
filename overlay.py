"""Freehand accent strokes drawn on top of the pixel grid."""
import logging
import math
import secrets
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from colors import Pixel

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


def uid() -> str:
    """Short random identifier for overlay paths and projects."""
    return secrets.token_hex(4)[:7]


@dataclass
class OverlayPath:
    id: str
    points: List[Point] = field(default_factory=list)
    color: Pixel = Pixel(255, 255, 255, 1.0)
    width: float = 1

    def copy(self) -> "OverlayPath":
        return OverlayPath(self.id, list(self.points), self.color, self.width)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "points": [{"x": x, "y": y} for x, y in self.points],
            "color": self.color.to_dict(),
            "width": self.width,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OverlayPath":
        if not isinstance(data, dict):
            raise ValueError(f"overlay path must be an object, got {data!r}")
        points = [(int(p["x"]), int(p["y"])) for p in data.get("points", [])]
        color = data.get("color")
        return cls(
            id=str(data.get("id") or uid()),
            points=points,
            color=Pixel.from_dict(color) if isinstance(color, dict) else Pixel(255, 255, 255, 1.0),
            width=_stroke_width(data.get("width")),
        )


def _stroke_width(value) -> float:
    """Validates a stored stroke width; a missing width means 1."""
    if value is None:
        return 1
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"stroke width must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"stroke width must be positive, got {value!r}")
    return value


class OverlayStore:
    """
    Ordered list of overlay paths with at most one open stroke.

    A stroke is opened by :meth:`begin_stroke` and grows through
    :meth:`extend_current_stroke` until :meth:`end_stroke`.
    """

    def __init__(self, paths: Optional[List[OverlayPath]] = None) -> None:
        self.paths: List[OverlayPath] = list(paths or [])
        self._current: Optional[OverlayPath] = None

    def __iter__(self) -> Iterator[OverlayPath]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def __eq__(self, other) -> bool:
        if not isinstance(other, OverlayStore):
            return NotImplemented
        return self.paths == other.paths

    @property
    def current(self) -> Optional[OverlayPath]:
        return self._current

    def begin_stroke(self, point: Point, color: Pixel, width: float) -> OverlayPath:
        path = OverlayPath(uid(), [tuple(point)], color, width)
        self.paths.append(path)
        self._current = path
        logger.debug("Began overlay stroke %s at %s", path.id, point)
        return path

    def extend_current_stroke(self, point: Point) -> None:
        if self._current is None:
            return
        self._current.points.append(tuple(point))

    def end_stroke(self) -> None:
        self._current = None

    def clear(self) -> None:
        self.paths.clear()
        self._current = None

    def copy(self) -> "OverlayStore":
        """Independent copy of every path. The copy has no open stroke."""
        return OverlayStore([path.copy() for path in self.paths])

    def to_list(self) -> List[dict]:
        return [path.to_dict() for path in self.paths]

    @classmethod
    def from_list(cls, items) -> "OverlayStore":
        if not items:
            return cls()
        if not isinstance(items, list):
            raise ValueError("overlayPaths must be a list")
        return cls([OverlayPath.from_dict(item) for item in items])
