"""
Project persistence.

Projects are plain dicts of the form
``{id, name, updated, gridW, gridH, pixels, overlayPaths}`` where ``updated``
is epoch milliseconds. Stores implement the four-method :class:`ProjectStore`
contract; failures are logged and reported through the return value, never
raised into the editor.
"""
import json
import logging
import time
from pathlib import Path
from typing import List, Optional, Protocol

from document import Document, payload_dimensions
from overlay import uid

logger = logging.getLogger(__name__)


class ProjectImportError(Exception):
    """Raised when a project file cannot be parsed or is missing required fields."""


class StorageError(Exception):
    """Raised by a store when its backing storage cannot be read or written."""


class ProjectStore(Protocol):
    def list_projects(self) -> List[dict]: ...

    def save_project(self, project: dict) -> bool: ...

    def load_project(self, id_or_name: str) -> Optional[dict]: ...

    def delete_project(self, id_or_name: str) -> bool: ...


def make_project(document: Document, name: str, project_id: Optional[str] = None) -> dict:
    """Builds the project record for ``document``."""
    return {
        "id": project_id or uid(),
        "name": name,
        "updated": int(time.time() * 1000),
        "gridW": document.width,
        "gridH": document.height,
        "pixels": document.grid.to_rows(),
        "overlayPaths": document.overlay.to_list(),
    }


def project_meta(project: dict) -> dict:
    return {key: project.get(key) for key in ("id", "name", "updated", "gridW", "gridH")}


def _matches(project: dict, id_or_name: str) -> bool:
    return project.get("id") == id_or_name or project.get("name") == id_or_name


class MemoryProjectStore:
    """Keeps projects in a list; used by tests and headless sessions."""

    def __init__(self):
        self._projects: List[dict] = []

    def list_projects(self) -> List[dict]:
        return [dict(p) for p in self._projects]

    def save_project(self, project: dict) -> bool:
        _upsert(self._projects, json.loads(json.dumps(project)))
        return True

    def load_project(self, id_or_name: str) -> Optional[dict]:
        for project in self._projects:
            if _matches(project, id_or_name):
                return json.loads(json.dumps(project))
        return None

    def delete_project(self, id_or_name: str) -> bool:
        self._projects = [p for p in self._projects if not _matches(p, id_or_name)]
        return True


class JsonFileProjectStore:
    """
    Keeps every saved project in one JSON file.

    Saving replaces an existing project with the same name or id, otherwise the
    project is appended. The file is rewritten through a temporary sibling so
    a failed write leaves the previous list intact.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> List[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        return data if isinstance(data, list) else []

    def _write(self, projects: List[dict]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(projects), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def list_projects(self) -> List[dict]:
        try:
            return self._read()
        except StorageError as e:
            logger.error("Error listing projects: %s", e)
            return []

    def save_project(self, project: dict) -> bool:
        try:
            projects = self._read()
            _upsert(projects, project)
            self._write(projects)
        except StorageError as e:
            logger.error("Error saving project: %s", e)
            return False
        logger.info("Saved project %r", project.get("name"))
        return True

    def load_project(self, id_or_name: str) -> Optional[dict]:
        try:
            projects = self._read()
        except StorageError as e:
            logger.error("Error loading project: %s", e)
            return None
        for project in projects:
            if _matches(project, id_or_name):
                return project
        return None

    def delete_project(self, id_or_name: str) -> bool:
        try:
            projects = [p for p in self._read() if not _matches(p, id_or_name)]
            self._write(projects)
        except StorageError as e:
            logger.error("Error deleting project: %s", e)
            return False
        logger.info("Deleted project %r", id_or_name)
        return True


def _upsert(projects: List[dict], project: dict) -> None:
    for i, existing in enumerate(projects):
        if existing.get("name") == project.get("name") or existing.get("id") == project.get("id"):
            projects[i] = project
            return
    projects.append(project)


def export_project_json(project: dict) -> str:
    return json.dumps(project, indent=2)


def import_project_json(text) -> dict:
    """Parses a project or plain JSON export, raising ProjectImportError when it is unusable."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ProjectImportError(f"Failed to import file: {e}") from e
    if not isinstance(data, dict):
        raise ProjectImportError("Invalid project file format")
    width, height = payload_dimensions(data)
    if not width or not height or not data.get("pixels"):
        raise ProjectImportError("Invalid project structure")
    return data


def document_from_project(project: dict) -> Document:
    """Rebuilds a document from a project or JSON export dict."""
    try:
        return Document.from_payload(project)
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        raise ProjectImportError(f"Failed to import file: {e}") from e
