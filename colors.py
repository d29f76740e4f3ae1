"""Colour values and conversions shared by the editor, exporters and UI."""
from typing import NamedTuple, Optional


class Pixel(NamedTuple):
    """A painted cell: 8-bit RGB plus a continuous alpha in [0, 1]."""
    r: int
    g: int
    b: int
    a: float = 1.0

    @classmethod
    def from_dict(cls, data: dict) -> "Pixel":
        return cls(
            _clamp_channel(data.get("r", 0)),
            _clamp_channel(data.get("g", 0)),
            _clamp_channel(data.get("b", 0)),
            _clamp_alpha(data.get("a", 1.0)),
        )

    def to_dict(self) -> dict:
        return {"r": int(self.r), "g": int(self.g), "b": int(self.b), "a": float(self.a)}

    def with_alpha(self, alpha: float) -> "Pixel":
        return self._replace(a=_clamp_alpha(alpha))


def _clamp_channel(value) -> int:
    return max(0, min(255, int(value)))


def _clamp_alpha(value) -> float:
    return max(0.0, min(1.0, float(value)))


def hex_to_rgba(hex_color: Optional[str], alpha: float = 1.0) -> Pixel:
    """Parse ``#rgb`` / ``#rrggbb`` (leading ``#`` optional) into a Pixel."""
    if not hex_color:
        return Pixel(255, 0, 255, _clamp_alpha(alpha))
    s = str(hex_color).lstrip("#")
    if len(s) == 3:
        full = "".join(ch * 2 for ch in s)
    else:
        full = s.rjust(6, "0")[:6]
    value = int(full, 16)
    return Pixel((value >> 16) & 255, (value >> 8) & 255, value & 255, _clamp_alpha(alpha))


def rgba_to_hex(pixel) -> str:
    r, g, b = pixel[0], pixel[1], pixel[2]
    return "#{:02x}{:02x}{:02x}".format(_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))


def rgba_css(pixel: Pixel) -> str:
    return f"rgba({pixel.r},{pixel.g},{pixel.b},{format_alpha(pixel.a)})"


def format_alpha(a: float) -> str:
    # 1.0 -> "1", 0.5 -> "0.5"
    return f"{float(a):g}"
