from canvas import PixelGrid
from overlay import OverlayStore


class Document:
    """
    The editable document: a pixel grid plus the overlay strokes drawn over it.
    """
    def __init__(self, grid, overlay=None):
        self.grid = grid
        self.overlay = overlay if overlay is not None else OverlayStore()

    @classmethod
    def new(cls, width, height):
        """Creates an empty document of the given size."""
        return cls(PixelGrid(width, height))

    @property
    def width(self):
        return self.grid.width

    @property
    def height(self):
        return self.grid.height

    def __eq__(self, other):
        if not isinstance(other, Document):
            return NotImplemented
        return self.grid == other.grid and self.overlay == other.overlay

    def __repr__(self):
        return f"Document({self.width}x{self.height}, overlay_paths={len(self.overlay)})"

    def snapshot(self):
        """Returns a deep copy sharing no mutable state with this document."""
        return Document(self.grid.copy(), self.overlay.copy())

    def to_payload(self):
        """The ``{w, h, pixels, overlayPaths}`` shape used by JSON and HTML exports."""
        return {
            "w": self.width,
            "h": self.height,
            "pixels": self.grid.to_rows(),
            "overlayPaths": self.overlay.to_list(),
        }

    @classmethod
    def from_payload(cls, data):
        width, height = payload_dimensions(data)
        grid = PixelGrid.from_rows(data.get("pixels"), width, height)
        return cls(grid, OverlayStore.from_list(data.get("overlayPaths")))


def payload_dimensions(data):
    """Grid size of a project or JSON export; ``w``/``h`` win over ``gridW``/``gridH``."""
    return data.get("w") or data.get("gridW"), data.get("h") or data.get("gridH")
