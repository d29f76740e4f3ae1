import json

import pytest

from colors import Pixel
from config import EditorConfig
from editor import Editor
from storage import MemoryProjectStore, ProjectImportError
from tools import Tool


def stamp(editor, x, y):
    editor.pointer_down(1, x, y)
    editor.pointer_up(1, x, y)


def test_defaults_from_config():
    editor = Editor(EditorConfig(grid_width=1000, grid_height=2, color="#00ff00", alpha=0.5))
    assert (editor.document.width, editor.document.height) == (256, 4)
    assert editor.color == Pixel(0, 255, 0, 0.5)
    assert editor.tool is Tool.STAMP


def test_on_change_called_for_edits():
    calls = []
    editor = Editor(EditorConfig(grid_width=8, grid_height=8), on_change=calls.append)
    stamp(editor, 1, 1)
    assert len(calls) == 2
    assert calls[-1] is editor


def test_undo_redo_swap_documents(editor):
    stamp(editor, 1, 1)
    stamp(editor, 2, 2)
    after = editor.document.snapshot()
    assert editor.undo()
    assert editor.undo()
    assert editor.document.grid.is_empty()
    assert not editor.undo()
    assert editor.redo()
    assert editor.redo()
    assert editor.document == after
    assert not editor.redo()


def test_edit_after_undo_drops_redo(editor):
    stamp(editor, 1, 1)
    editor.undo()
    stamp(editor, 3, 3)
    assert not editor.redo()
    assert editor.document.grid.get_pixel(1, 1) is None


def test_set_color_keeps_alpha(editor):
    editor.set_alpha(0.25)
    editor.set_color("#0000ff")
    assert editor.color == Pixel(0, 0, 255, 0.25)
    stamp(editor, 0, 0)
    assert editor.document.grid.get_pixel(0, 0) == Pixel(0, 0, 255, 0.25)


def test_picker_updates_editor_colour(editor):
    editor.set_color("#123456")
    stamp(editor, 4, 4)
    editor.set_color("#ffffff")
    editor.select_tool("picker")
    stamp(editor, 4, 4)
    assert editor.color[:3] == (0x12, 0x34, 0x56)


def test_settings_are_clamped(editor):
    editor.set_accent_width(99)
    assert editor.tools.state.accent_width == 6
    editor.set_accent_width(0)
    assert editor.tools.state.accent_width == 1
    editor.zoom(100)
    assert editor.scale == editor.config.max_scale
    editor.zoom(-100)
    assert editor.scale == editor.config.min_scale


def test_new_document_resets_history(editor):
    stamp(editor, 1, 1)
    editor.new_document(2, 300)
    assert (editor.document.width, editor.document.height) == (4, 256)
    assert editor.document.grid.is_empty()
    assert not editor.undo()


def test_save_and_load(editor):
    stamp(editor, 5, 5)
    assert editor.save("Pet")
    saved_id = editor.project_id
    editor.new_document(8, 8)
    assert editor.load("Pet")
    assert editor.project_id == saved_id
    assert editor.document.width == 16
    assert editor.document.grid.get_pixel(5, 5) is not None
    assert [p["name"] for p in editor.list_projects()] == ["Pet"]
    assert editor.delete(saved_id)
    assert editor.list_projects() == []


def test_load_missing_leaves_document(editor):
    stamp(editor, 1, 1)
    before = editor.document.snapshot()
    assert not editor.load("nope")
    assert editor.document == before
    assert editor.undo()


def test_import_json_replaces_document(editor):
    payload = {"w": 4, "h": 3, "pixels": [[None, {"r": 1, "g": 2, "b": 3, "a": 1}]], "overlayPaths": []}
    document = editor.import_json(json.dumps(payload))
    assert editor.document is document
    assert (document.width, document.height) == (4, 3)
    assert document.grid.get_pixel(1, 0) == Pixel(1, 2, 3, 1.0)


def test_failed_import_leaves_state_untouched(editor):
    stamp(editor, 1, 1)
    before = editor.document.snapshot()
    with pytest.raises(ProjectImportError):
        editor.import_json('{"gridW": 4}')
    assert editor.document == before
    assert editor.undo()


def test_export_uses_default_name(editor, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    stamp(editor, 0, 0)
    path = editor.export("svg")
    assert path.name == "gridpaint.svg"
    assert (tmp_path / "gridpaint.svg").exists()


def test_import_with_bad_overlay_leaves_state_untouched(editor):
    stamp(editor, 1, 1)
    before = editor.document.snapshot()
    payload = {"w": 2, "h": 2, "pixels": [[None, None]], "overlayPaths": [5]}
    with pytest.raises(ProjectImportError):
        editor.import_json(json.dumps(payload))
    assert editor.document == before


def test_list_projects_returns_summaries(editor):
    editor.save("Pet")
    [meta] = editor.list_projects()
    assert set(meta) == {"id", "name", "updated", "gridW", "gridH"}
    assert (meta["name"], meta["gridW"], meta["gridH"]) == ("Pet", 16, 16)


def test_export_project_can_be_imported(editor, tmp_path):
    editor.select_tool("accent")
    editor.pointer_down(1, 0, 0)
    editor.pointer_move(1, 3, 3)
    editor.pointer_up(1, 3, 3)
    editor.select_tool("stamp")
    stamp(editor, 2, 1)
    path = editor.export_project(tmp_path / "pet.json")
    exported = editor.document.snapshot()
    editor.new_document()
    editor.import_json(path.read_text(encoding="utf-8"))
    assert editor.document == exported
