"""Pointer-gesture interpretation for the drawing tools.

A gesture is one pointer-down, any number of pointer-moves and a pointer-up.
Cancel and leave end a gesture without committing its pending shape. While a
gesture is active, events from any other pointer id are ignored.

Every pointer-down except the picker's pushes a history snapshot before the
tool does anything, including tools that only commit on pointer-up. A drag
that is then cancelled leaves an undo step that changes nothing.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import rasterizers
from colors import Pixel

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


class Tool(Enum):
    STAMP = "stamp"
    PENCIL = "pencil"
    ERASER = "eraser"
    LINE = "line"
    RECT = "rect"
    CIRCLE = "circle"
    CURVE = "curve"
    ACCENT = "accent"
    PICKER = "picker"


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position relative to the top-left of the drawing surface."""
    pointer_id: int
    x: float
    y: float


@dataclass
class Surface:
    """Rendered size of the drawing surface, in the same units as PointerEvent."""
    width: float
    height: float

    def cell_at(self, event: PointerEvent, grid_width: int, grid_height: int) -> Point:
        cell_w = (self.width or grid_width) / grid_width
        cell_h = (self.height or grid_height) / grid_height
        try:
            x = math.floor(event.x / cell_w)
            y = math.floor(event.y / cell_h)
        except (ValueError, OverflowError):
            return 0, 0
        return _clamp(x, 0, grid_width - 1), _clamp(y, 0, grid_height - 1)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass
class ToolState:
    tool: Tool = Tool.STAMP
    color: Pixel = Pixel(255, 102, 204, 1.0)
    fill_shapes: bool = False
    accent_width: float = 1
    active_pointer: Optional[int] = None
    dragging: bool = False
    anchor: Optional[Point] = None
    preview: Optional[List[Point]] = None
    # Curve tool only: start point, then control point, collected across pointer-ups.
    curve_anchors: List[Point] = field(default_factory=list)


class ToolController:
    """
    Turns pointer events into edits of a document under the selected tool.

    The controller never holds on to a document: each event handler is given
    the current document and history, so an undo that swaps the document in
    between gestures is picked up automatically. Handlers return True when the
    document was modified.
    """

    def __init__(self, state: Optional[ToolState] = None, surface: Optional[Surface] = None) -> None:
        self.state = state or ToolState()
        self.surface = surface

    def select_tool(self, tool: Tool) -> None:
        """Switches tools, dropping any preview, drag and curve anchors."""
        tool = Tool(tool)
        self.state.tool = tool
        self.state.curve_anchors.clear()
        self._reset_gesture()
        logger.debug("Selected tool %s", tool.value)

    def cell_at(self, event: PointerEvent, document) -> Point:
        surface = self.surface or Surface(document.width, document.height)
        return surface.cell_at(event, document.width, document.height)

    def pointer_down(self, event: PointerEvent, document, history) -> bool:
        state = self.state
        if state.active_pointer is not None and state.active_pointer != event.pointer_id:
            return False
        state.active_pointer = event.pointer_id
        state.dragging = True
        pos = self.cell_at(event, document)
        state.anchor = pos
        tool = state.tool
        if tool is not Tool.PICKER:
            history.push_snapshot(document)

        if tool is Tool.STAMP:
            state.preview = [pos]
        elif tool is Tool.PENCIL:
            return self._paint(document, [pos], state.color)
        elif tool is Tool.ERASER:
            return self._paint(document, [pos], None)
        elif tool is Tool.ACCENT:
            document.overlay.begin_stroke(pos, state.color, state.accent_width)
            return True
        elif tool is Tool.PICKER:
            picked = document.grid.get_pixel(*pos)
            if picked is not None:
                state.color = picked
                logger.debug("Picked colour %s at %s", picked, pos)
        return False

    def pointer_move(self, event: PointerEvent, document, history=None) -> bool:
        state = self.state
        if not state.dragging or state.active_pointer != event.pointer_id:
            return False
        pos = self.cell_at(event, document)
        tool = state.tool
        anchor = state.anchor

        if tool is Tool.STAMP:
            state.preview = [pos]
        elif tool in (Tool.PENCIL, Tool.ERASER):
            if anchor is None or anchor == pos:
                return False
            points = rasterizers.line(anchor[0], anchor[1], pos[0], pos[1])
            state.anchor = pos
            return self._paint(document, points, None if tool is Tool.ERASER else state.color)
        elif tool is Tool.ACCENT:
            document.overlay.extend_current_stroke(pos)
            return True
        elif tool is Tool.CURVE:
            state.preview = self._curve_points(pos)
        elif anchor is not None:
            state.preview = self._shape_points(anchor, pos)
        return False

    def pointer_up(self, event: PointerEvent, document, history=None) -> bool:
        state = self.state
        if state.active_pointer != event.pointer_id:
            return False
        if not state.dragging:
            state.active_pointer = None
            return False
        pos = self.cell_at(event, document)
        tool = state.tool
        anchor = state.anchor
        changed = False

        if tool is Tool.STAMP:
            changed = self._paint(document, [pos], state.color)
        elif tool in (Tool.LINE, Tool.RECT, Tool.CIRCLE) and anchor is not None:
            changed = self._paint(document, self._shape_points(anchor, pos), state.color)
        elif tool is Tool.CURVE:
            if len(state.curve_anchors) < 2:
                state.curve_anchors.append(pos)
            else:
                start, control = state.curve_anchors
                points = rasterizers.quadratic_curve(start[0], start[1], control[0], control[1], pos[0], pos[1])
                changed = self._paint(document, points, state.color)
                state.curve_anchors.clear()
        elif tool is Tool.ACCENT:
            document.overlay.end_stroke()

        self._reset_gesture()
        return changed

    def pointer_cancel(self, event: PointerEvent, document=None) -> None:
        if self.state.active_pointer != event.pointer_id:
            return
        self._abort(document)

    def pointer_leave(self, event: PointerEvent, document=None) -> None:
        state = self.state
        if not state.dragging:
            return
        if state.active_pointer is not None and state.active_pointer != event.pointer_id:
            return
        self._abort(document)

    def _abort(self, document) -> None:
        if document is not None:
            document.overlay.end_stroke()
        self._reset_gesture()

    def _reset_gesture(self) -> None:
        self.state.active_pointer = None
        self.state.dragging = False
        self.state.anchor = None
        self.state.preview = None

    def _shape_points(self, anchor: Point, pos: Point) -> List[Point]:
        tool = self.state.tool
        if tool is Tool.LINE:
            return rasterizers.line(anchor[0], anchor[1], pos[0], pos[1])
        if tool is Tool.RECT:
            shape = rasterizers.rect_filled if self.state.fill_shapes else rasterizers.rect_outline
            return sorted(shape(anchor[0], anchor[1], pos[0], pos[1]))
        if tool is Tool.CIRCLE:
            radius = rasterizers.distance_radius(anchor[0], anchor[1], pos[0], pos[1])
            return sorted(rasterizers.circle(anchor[0], anchor[1], radius))
        return []

    def _curve_points(self, pos: Point) -> Optional[List[Point]]:
        anchors = self.state.curve_anchors
        if len(anchors) == 1:
            start = anchors[0]
            return rasterizers.line(start[0], start[1], pos[0], pos[1])
        if len(anchors) == 2:
            (sx, sy), (cx, cy) = anchors
            return rasterizers.quadratic_curve(sx, sy, cx, cy, pos[0], pos[1])
        return None

    @staticmethod
    def _paint(document, points, color) -> bool:
        written = document.grid.apply(points, color)
        if written:
            logger.debug("Wrote %d cells", written)
        return bool(written)
