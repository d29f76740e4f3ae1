import logging
import sys
import time
from typing import Optional, Tuple

import numpy as np
from asciimatics.effects import Effect
from asciimatics.event import KeyboardEvent, MouseEvent
from asciimatics.exceptions import ResizeScreenError
from asciimatics.scene import Scene
from asciimatics.screen import Screen

from colors import hex_to_rgba
from config import EditorConfig
from editor import Editor
from exporters import ExportFormat, render_image
from logging_config import LoggingConfig
from storage import JsonFileProjectStore
from tools import Surface, Tool
from ui import UIFrame

logger = logging.getLogger(__name__)

MOUSE_POINTER_ID = 1

# Grid lines are drawn over empty cells only.
GRID_COLOR = (48, 48, 64, 255)

TOOL_KEYS = {str(i + 1): tool for i, tool in enumerate(Tool)}


# Simple 8-colour mapping from RGBA to nearest basic terminal colour index.
def _rgb_to_colour_index(r: int, g: int, b: int) -> int:
    # Threshold values chosen for basic distinction.
    if r > 200 and g > 200 and b > 200:
        return Screen.COLOUR_WHITE
    if r > 200 and g < 100 and b < 100:
        return Screen.COLOUR_RED
    if g > 200 and r < 100 and b < 100:
        return Screen.COLOUR_GREEN
    if b > 200 and r < 100 and g < 100:
        return Screen.COLOUR_BLUE
    if r > 200 and g > 200 and b < 100:
        return Screen.COLOUR_YELLOW
    if r > 200 and b > 200 and g < 150:
        return Screen.COLOUR_MAGENTA
    if g > 200 and b > 200 and r < 100:
        return Screen.COLOUR_CYAN
    return Screen.COLOUR_BLACK


def fit_scale(grid_width: int, grid_height: int, cols: int, rows: int) -> int:
    """Largest whole zoom at which the grid fits ``cols`` x ``rows`` half-block cells."""
    return max(1, min(cols // max(1, grid_width), (rows * 2) // max(1, grid_height)))


def compose_frame(editor: Editor, scale: int) -> np.ndarray:
    """Renders the document, grid lines and the live tool preview as an (h, w, 4) array."""
    frame = np.array(render_image(editor.document, scale, background=(0, 0, 0)))
    if editor.show_grid and scale >= 2:
        empty = ~editor.document.grid.painted
        empty = empty.repeat(scale, axis=0).repeat(scale, axis=1)
        lines = np.zeros(empty.shape, dtype=bool)
        lines[::scale, :] = True
        lines[:, ::scale] = True
        frame[lines & empty] = GRID_COLOR
    preview = editor.preview
    if preview:
        color = editor.color
        for x, y in preview:
            if 0 <= x < editor.document.width and 0 <= y < editor.document.height:
                frame[y * scale:(y + 1) * scale, x * scale:(x + 1) * scale] = (color.r, color.g, color.b, 255)
    return frame


def update_surface(editor: Editor, area: Optional[Tuple[int, int]] = None) -> Surface:
    """Sizes the pointer surface to the grid at the current zoom, capped to fit ``area``."""
    if area is not None:
        fit = fit_scale(editor.document.width, editor.document.height, *area)
        editor.scale = min(editor.scale, fit)
    surface = Surface(editor.document.width * editor.scale, editor.document.height * editor.scale)
    editor.tools.surface = surface
    return surface


def half_block_render(screen, frame):
    """Renders an RGBA frame to the screen using half-blocks."""
    height, width = frame.shape[:2]
    # Each character cell covers two pixel rows: upper (y) and lower (y+1).
    for y in range(0, min(height, screen.height * 2), 2):
        row = y // 2
        for x in range(min(width, screen.width)):
            upper_pixel = frame[y, x]
            lower_pixel = frame[y + 1, x] if y + 1 < height else upper_pixel

            fg = _rgb_to_colour_index(int(upper_pixel[0]), int(upper_pixel[1]), int(upper_pixel[2]))
            bg = _rgb_to_colour_index(int(lower_pixel[0]), int(lower_pixel[1]), int(lower_pixel[2]))

            # If both halves share the same colour, draw a full-block for crisper output.
            if fg == bg:
                screen.print_at('█', x, row, colour=fg, bg=bg)
            else:
                screen.print_at('▀', x, row, colour=fg, bg=bg)


class CanvasEffect(Effect):
    """Asciimatics Effect that renders the editor's document using half-block chars."""

    def __init__(self, screen: Screen, editor: Editor, area: Tuple[int, int]):
        super().__init__(screen)
        self._editor = editor
        self._area = area

    def reset(self):
        # Nothing to reset between scene restarts.
        pass

    def stop_frame(self):
        # Run indefinitely; Scene duration is -1.
        return 0

    def _update(self, frame_no):
        update_surface(self._editor, self._area)
        half_block_render(self._screen, compose_frame(self._editor, self._editor.scale))


class PointerTracker:
    """Turns asciimatics mouse reports into editor pointer events."""

    def __init__(self, editor: Editor):
        self.editor = editor
        self.drawing = False
        self.last_pos: Optional[Tuple[float, float]] = None

    def handle(self, event: MouseEvent, on_canvas: bool):
        # Two pixel rows per character row.
        pos = (event.x, event.y * 2)
        if event.buttons & MouseEvent.LEFT_CLICK:
            if not on_canvas:
                if self.drawing:
                    self.editor.pointer_leave(MOUSE_POINTER_ID, *pos)
                    self.drawing = False
                return
            if not self.drawing:
                self.drawing = True
                self.editor.pointer_down(MOUSE_POINTER_ID, *pos)
            else:
                self.editor.pointer_move(MOUSE_POINTER_ID, *pos)
            self.last_pos = pos
        elif self.drawing:
            self.drawing = False
            self.editor.pointer_up(MOUSE_POINTER_ID, *(self.last_pos or pos))


def handle_key(editor: Editor, key_code: int, ui=None) -> bool:
    """Applies a key binding; returns False when the user asked to quit."""
    if key_code in (ord('q'), ord('Q')):
        return False
    if key_code == Screen.ctrl("z"):
        editor.undo()
    elif key_code == Screen.ctrl("y"):
        editor.redo()
    elif key_code == Screen.ctrl("s"):
        editor.save()
    elif key_code == Screen.ctrl("e"):
        editor.export(ExportFormat.PNG)
    elif key_code == Screen.ctrl("n"):
        editor.new_document()
    elif key_code in (ord('+'), ord('=')):
        editor.zoom(editor.config.scale_step)
    elif key_code == ord('-'):
        editor.zoom(-editor.config.scale_step)
    elif key_code in (ord('g'), ord('G')):
        editor.toggle_grid()
    elif key_code in (ord('f'), ord('F')):
        editor.set_fill_shapes(not editor.tools.state.fill_shapes)
    elif key_code in (ord('c'), ord('C')):
        cycle_color(editor, 1 if key_code == ord('c') else -1)
    elif 0 <= key_code < 0x110000 and chr(key_code) in TOOL_KEYS:
        editor.select_tool(TOOL_KEYS[chr(key_code)])
    else:
        return True
    if ui is not None:
        ui.sync(editor)
    return True


def cycle_color(editor: Editor, step: int):
    palette = editor.config.palette
    if not palette:
        return
    hexes = [hex_to_rgba(h)[:3] for _, h in palette]
    current = tuple(editor.color[:3])
    index = hexes.index(current) if current in hexes else -1
    _, value = palette[(index + step) % len(palette)]
    editor.set_color(value)


def main(screen, config: EditorConfig):
    canvas_width = screen.width - screen.width // 4
    editor = Editor(config, store=JsonFileProjectStore(config.store_path))
    area = (canvas_width, screen.height)
    editor.scale = fit_scale(editor.document.width, editor.document.height, *area)
    update_surface(editor, area)
    ui = UIFrame(screen, editor)
    tracker = PointerTracker(editor)

    canvas_effect = CanvasEffect(screen, editor, area)
    screen.set_scenes([Scene([canvas_effect, ui], duration=-1)])

    while True:
        # Event handling ----------------------------------------------------
        event = screen.get_event()

        # Let the UI consume the event first (e.g., button clicks).
        event = ui.process_event(event)

        if isinstance(event, KeyboardEvent):
            if not handle_key(editor, event.key_code, ui):
                return
        elif isinstance(event, MouseEvent):
            ui.has_focus = event.x >= canvas_width
            surface = update_surface(editor, area)
            on_canvas = event.x < surface.width and event.y * 2 < surface.height
            tracker.handle(event, on_canvas and not ui.has_focus)

        # ------------------------------------------------------------------
        # Draw the next frame for the Scene (canvas effect + UI).
        screen.draw_next_frame()

        # Cap the frame-rate to ~30 FPS to reduce flicker and CPU usage.
        time.sleep(1 / 30)


def run():
    config = EditorConfig()
    LoggingConfig.setup_logging(config.log_dir, console=False)
    while True:
        try:
            Screen.wrapper(main, arguments=[config])
            sys.exit(0)
        except ResizeScreenError:
            logger.info("Terminal resized, restarting screen")


if __name__ == "__main__":
    run()
