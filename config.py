from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

DATA_DIR = Path.home() / ".gridpaint"


@dataclass
class EditorConfig:
    grid_width: int = 40
    grid_height: int = 40
    min_grid: int = 4
    max_grid: int = 256
    # Zoom, in screen units per grid cell.
    scale: int = 40
    min_scale: int = 1
    max_scale: int = 40
    scale_step: int = 1
    color: str = "#ff66cc"
    alpha: float = 1.0
    accent_width: int = 1
    max_accent_width: int = 6
    fill_shapes: bool = False
    show_grid: bool = True
    # None keeps every undo step.
    history_limit: Optional[int] = None
    project_name: str = "My Pixel Pet"
    store_path: Path = DATA_DIR / "projects.json"
    log_dir: Path = DATA_DIR / "logs"
    export_basename: str = "gridpaint"
    jpeg_background: Tuple[int, int, int] = (0, 0, 0)
    palette: List[Tuple[str, str]] = field(
        default_factory=lambda: [
            ("Pink", "#ff66cc"),
            ("Red", "#ff0000"),
            ("Green", "#00ff00"),
            ("Blue", "#0000ff"),
            ("Yellow", "#ffff00"),
            ("Cyan", "#00ffff"),
            ("Magenta", "#ff00ff"),
            ("White", "#ffffff"),
            ("Black", "#000000"),
        ]
    )

    def clamp_grid(self, value) -> int:
        try:
            value = int(value)
        except (TypeError, ValueError):
            value = 16
        return max(self.min_grid, min(self.max_grid, value))
