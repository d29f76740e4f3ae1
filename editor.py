"""
Editing session: the command interface used by the terminal UI.

The editor owns the current :class:`~document.Document`, its undo history and
the tool controller. It never redraws anything itself; a caller that wants to
refresh after each change passes ``on_change``.
"""
import logging
from pathlib import Path

from colors import Pixel, hex_to_rgba
from config import EditorConfig
from document import Document
from exporters import ExportFormat, write_export
from history import History
from storage import (
    MemoryProjectStore,
    ProjectImportError,
    document_from_project,
    export_project_json,
    import_project_json,
    make_project,
    project_meta,
)
from tools import PointerEvent, Tool, ToolController, ToolState

logger = logging.getLogger(__name__)


class Editor:
    def __init__(self, config=None, store=None, on_change=None):
        self.config = config or EditorConfig()
        self.store = store if store is not None else MemoryProjectStore()
        self.on_change = on_change
        width = self.config.clamp_grid(self.config.grid_width)
        height = self.config.clamp_grid(self.config.grid_height)
        self.document = Document.new(width, height)
        self.history = History(self.config.history_limit)
        self.tools = ToolController(ToolState(
            color=hex_to_rgba(self.config.color, self.config.alpha),
            fill_shapes=self.config.fill_shapes,
            accent_width=self.config.accent_width,
        ))
        self.project_name = self.config.project_name
        self.project_id = None
        self.scale = self.config.scale
        self.show_grid = self.config.show_grid

    def _changed(self):
        if self.on_change is not None:
            self.on_change(self)

    # -- tool settings -------------------------------------------------

    @property
    def tool(self):
        return self.tools.state.tool

    @property
    def color(self):
        return self.tools.state.color

    @property
    def preview(self):
        return self.tools.state.preview

    def select_tool(self, tool):
        self.tools.select_tool(Tool(tool))
        self._changed()

    def set_color(self, color):
        """Accepts a hex string (keeping the current alpha) or a Pixel."""
        if isinstance(color, Pixel):
            self.tools.state.color = color
        else:
            self.tools.state.color = hex_to_rgba(color, self.tools.state.color.a)
        self._changed()

    def set_alpha(self, alpha):
        self.tools.state.color = self.tools.state.color.with_alpha(alpha)
        self._changed()

    def set_accent_width(self, width):
        self.tools.state.accent_width = max(1, min(self.config.max_accent_width, int(width)))

    def set_fill_shapes(self, fill):
        self.tools.state.fill_shapes = bool(fill)

    def zoom(self, delta):
        self.scale = max(self.config.min_scale, min(self.config.max_scale, self.scale + delta))
        self._changed()

    def toggle_grid(self):
        self.show_grid = not self.show_grid
        self._changed()

    # -- pointer input -------------------------------------------------

    def pointer_down(self, pointer_id, x, y):
        self.tools.pointer_down(PointerEvent(pointer_id, x, y), self.document, self.history)
        self._changed()

    def pointer_move(self, pointer_id, x, y):
        self.tools.pointer_move(PointerEvent(pointer_id, x, y), self.document, self.history)
        self._changed()

    def pointer_up(self, pointer_id, x, y):
        self.tools.pointer_up(PointerEvent(pointer_id, x, y), self.document, self.history)
        self._changed()

    def pointer_cancel(self, pointer_id, x=0, y=0):
        self.tools.pointer_cancel(PointerEvent(pointer_id, x, y), self.document)
        self._changed()

    def pointer_leave(self, pointer_id, x=0, y=0):
        self.tools.pointer_leave(PointerEvent(pointer_id, x, y), self.document)
        self._changed()

    # -- history -------------------------------------------------------

    def undo(self):
        previous = self.history.undo(self.document)
        if previous is None:
            return False
        self.document = previous
        self._changed()
        return True

    def redo(self):
        following = self.history.redo(self.document)
        if following is None:
            return False
        self.document = following
        self._changed()
        return True

    # -- documents and projects ------------------------------------------

    def _replace_document(self, document):
        self.document = document
        self.history.clear()
        self.tools.select_tool(self.tools.state.tool)
        self._changed()

    def new_document(self, width=None, height=None):
        """Starts an empty document; sizes are clamped to the configured range."""
        width = self.config.clamp_grid(self.document.width if width is None else width)
        height = self.config.clamp_grid(self.document.height if height is None else height)
        self._replace_document(Document.new(width, height))
        logger.info("New %dx%d document", width, height)

    def save(self, name=None):
        if name:
            self.project_name = name
        project = make_project(self.document, self.project_name, self.project_id)
        ok = self.store.save_project(project)
        if ok:
            self.project_id = project["id"]
        return ok

    def load(self, id_or_name):
        """Loads a stored project. Returns False, leaving the session as it was, on failure."""
        project = self.store.load_project(id_or_name)
        if project is None:
            logger.warning("Project %r not found", id_or_name)
            return False
        try:
            document = document_from_project(project)
        except ProjectImportError as e:
            logger.warning("Stored project %r is unreadable: %s", id_or_name, e)
            return False
        self.project_name = project.get("name", self.project_name)
        self.project_id = project.get("id")
        self._replace_document(document)
        logger.info("Loaded project %r", self.project_name)
        return True

    def delete(self, id_or_name):
        return self.store.delete_project(id_or_name)

    def list_projects(self):
        """Summaries of the stored projects, without their pixel data."""
        return [project_meta(p) for p in self.store.list_projects()]

    def import_json(self, text):
        """Replaces the document with an imported project; raises ProjectImportError."""
        try:
            data = import_project_json(text)
            document = document_from_project(data)
        except ProjectImportError as e:
            logger.warning("Import rejected: %s", e)
            raise
        if data.get("name"):
            self.project_name = data["name"]
        self._replace_document(document)
        return document

    def export_project(self, path):
        """Writes the current document as a project file that import_json reads back."""
        path = Path(path)
        project = make_project(self.document, self.project_name, self.project_id)
        path.write_text(export_project_json(project), encoding="utf-8")
        logger.info("Exported project %r to %s", self.project_name, path)
        return path

    def export(self, fmt, path=None):
        fmt = ExportFormat(fmt)
        if path is None:
            path = Path(self.config.export_basename + fmt.extension)
        return write_export(self.document, fmt, path, background=self.config.jpeg_background)
