from asciimatics.event import MouseEvent
from asciimatics.screen import Screen

from editor import Editor
from config import EditorConfig
from main import (
    GRID_COLOR,
    PointerTracker,
    compose_frame,
    cycle_color,
    fit_scale,
    handle_key,
    update_surface,
)
from tools import Surface, Tool


def make_editor():
    return Editor(EditorConfig(grid_width=8, grid_height=8))


def test_fit_scale():
    assert fit_scale(8, 8, 80, 20) == 5
    assert fit_scale(40, 40, 30, 10) == 1


def test_compose_frame_shows_preview():
    editor = make_editor()
    editor.select_tool(Tool.LINE)
    editor.pointer_down(1, 0, 0)
    editor.pointer_move(1, 3, 0)
    frame = compose_frame(editor, 2)
    assert frame.shape == (16, 16, 4)
    color = editor.color
    assert tuple(frame[0, 6]) == (color.r, color.g, color.b, 255)
    assert tuple(frame[11, 11]) == (0, 0, 0, 255)


def test_handle_key_bindings():
    editor = make_editor()
    assert handle_key(editor, ord("3"))
    assert editor.tool is Tool.ERASER
    handle_key(editor, ord("f"))
    assert editor.tools.state.fill_shapes
    editor.select_tool(Tool.STAMP)
    editor.pointer_down(1, 1, 1)
    editor.pointer_up(1, 1, 1)
    handle_key(editor, Screen.ctrl("z"))
    assert editor.document.grid.is_empty()
    handle_key(editor, Screen.ctrl("y"))
    assert not editor.document.grid.is_empty()
    assert not handle_key(editor, ord("q"))


def test_cycle_color_walks_palette():
    editor = make_editor()
    palette = editor.config.palette
    cycle_color(editor, 1)
    assert editor.color[:3] == tuple(int(palette[1][1][i:i + 2], 16) for i in (1, 3, 5))
    cycle_color(editor, -1)
    cycle_color(editor, -1)
    assert editor.color[:3] == tuple(int(palette[-1][1][i:i + 2], 16) for i in (1, 3, 5))


def test_pointer_tracker_drives_gestures():
    editor = make_editor()
    editor.tools.surface = Surface(16, 16)
    editor.select_tool(Tool.PENCIL)
    tracker = PointerTracker(editor)
    tracker.handle(MouseEvent(0, 0, MouseEvent.LEFT_CLICK), on_canvas=True)
    tracker.handle(MouseEvent(6, 0, MouseEvent.LEFT_CLICK), on_canvas=True)
    tracker.handle(MouseEvent(6, 0, 0), on_canvas=True)
    assert not tracker.drawing
    cells = {(x, 0) for x in range(4)}
    assert all(editor.document.grid.get_pixel(x, y) is not None for x, y in cells)
    assert len(editor.history.past) == 1


def test_grid_lines_drawn_over_empty_cells():
    editor = make_editor()
    editor.pointer_down(1, 1, 0)
    editor.pointer_up(1, 1, 0)
    frame = compose_frame(editor, 4)
    assert tuple(frame[0, 0]) == GRID_COLOR
    assert tuple(frame[4, 5]) == GRID_COLOR
    assert tuple(frame[5, 5]) == (0, 0, 0, 255)
    color = editor.color
    assert tuple(frame[0, 4]) == (color.r, color.g, color.b, 255)


def test_grid_toggle_and_zoom_keys():
    editor = make_editor()
    editor.scale = 3
    handle_key(editor, ord("g"))
    assert not editor.show_grid
    assert tuple(compose_frame(editor, editor.scale)[0, 0]) == (0, 0, 0, 255)
    handle_key(editor, ord("+"))
    assert editor.scale == 3 + editor.config.scale_step
    handle_key(editor, ord("-"))
    handle_key(editor, ord("-"))
    assert editor.scale == 3 - editor.config.scale_step


def test_update_surface_follows_zoom():
    editor = make_editor()
    editor.scale = 2
    assert update_surface(editor) == Surface(16, 16)
    editor.select_tool(Tool.STAMP)
    editor.pointer_down(1, 5, 5)
    editor.pointer_up(1, 5, 5)
    assert editor.document.grid.get_pixel(2, 2) is not None
    editor.zoom(1)
    update_surface(editor)
    assert editor.tools.surface == Surface(24, 24)


def test_zoom_is_capped_to_the_canvas_area():
    editor = make_editor()
    editor.scale = 2
    editor.zoom(10)
    surface = update_surface(editor, (40, 12))
    assert editor.scale == 3
    assert surface == Surface(24, 24)
