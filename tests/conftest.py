import pytest

from colors import Pixel
from config import EditorConfig
from document import Document
from editor import Editor
from history import History
from storage import MemoryProjectStore
from tools import ToolController

RED = Pixel(255, 0, 0, 1.0)


@pytest.fixture
def document():
    return Document.new(8, 8)


@pytest.fixture
def history():
    return History()


@pytest.fixture
def controller():
    return ToolController()


@pytest.fixture
def editor():
    config = EditorConfig(grid_width=16, grid_height=16)
    return Editor(config, store=MemoryProjectStore())
