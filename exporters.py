"""Export a document as PNG, JPEG, SVG, JSON or a self-contained HTML page."""
import json
import logging
from enum import Enum
from pathlib import Path

from PIL import Image, ImageDraw

from colors import format_alpha, rgba_css, rgba_to_hex

logger = logging.getLogger(__name__)

# Overlay strokes are drawn this many times larger and then downsampled,
# which gives them anti-aliased edges.
SUPERSAMPLE = 4


class ExportFormat(Enum):
    PNG = "png"
    JPG = "jpg"
    SVG = "svg"
    JSON = "json"
    HTML = "html"

    @property
    def extension(self):
        return "." + self.value


def render_image(document, scale=1, background=None):
    """
    Composites the grid and overlay strokes into an RGBA image.

    The grid is upscaled ``scale`` times with nearest-neighbour sampling.
    Overlay strokes pass through cell centres and are anti-aliased. With a
    ``background`` RGB tuple the result is flattened onto that colour.
    """
    scale = max(1, int(scale))
    grid = document.grid
    size = (grid.width * scale, grid.height * scale)
    image = Image.fromarray(grid.to_rgba_array())
    if scale > 1:
        image = image.resize(size, Image.Resampling.NEAREST)

    strokes = [path for path in document.overlay if len(path.points) >= 2]
    if strokes:
        image = Image.alpha_composite(image, _render_strokes(strokes, size, scale))

    if background is not None:
        base = Image.new("RGBA", size, tuple(background[:3]) + (255,))
        image = Image.alpha_composite(base, image)
    return image


def _render_strokes(strokes, size, scale):
    factor = scale * SUPERSAMPLE
    layer = Image.new("RGBA", (size[0] * SUPERSAMPLE, size[1] * SUPERSAMPLE), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    for path in strokes:
        color = path.color
        fill = (color.r, color.g, color.b, int(color.a * 255 + 0.5))
        width = max(1, int(float(path.width) * factor + 0.5))
        coords = [((x + 0.5) * factor, (y + 0.5) * factor) for x, y in path.points]
        draw.line(coords, fill=fill, width=width, joint="curve")
        # round caps
        radius = width / 2
        for cx, cy in (coords[0], coords[-1]):
            draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=fill)
    return layer.resize(size, Image.Resampling.BOX)


def export_png(document, fp, scale=1):
    render_image(document, scale).save(fp, format="PNG")


def export_jpeg(document, fp, scale=1, background=(0, 0, 0)):
    """Saves a JPEG; transparent cells are flattened onto ``background``."""
    render_image(document, scale, background=background).convert("RGB").save(fp, format="JPEG", quality=95)


def export_svg(document):
    grid = document.grid
    rects = []
    for y in range(grid.height):
        for x in range(grid.width):
            pixel = grid.get_pixel(x, y)
            if pixel is None:
                continue
            rects.append(
                f'<rect x="{x}" y="{y}" width="1" height="1" '
                f'fill="{rgba_to_hex(pixel)}" fill-opacity="{format_alpha(pixel.a)}" />'
            )
    paths = []
    for path in document.overlay:
        d = " ".join(
            f"{'L' if i else 'M'} {x + 0.5:g} {y + 0.5:g}" for i, (x, y) in enumerate(path.points)
        )
        paths.append(
            f'<path d="{d}" fill="none" stroke="{rgba_css(path.color)}" '
            f'stroke-width="{path.width or 1}" stroke-linecap="round" stroke-linejoin="round" />'
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {grid.width} {grid.height}" '
        'shape-rendering="crispEdges">\n'
        + "\n".join(rects) + "\n"
        + "\n".join(paths) + "\n"
        "</svg>"
    )


def export_json(document):
    return json.dumps(document.to_payload(), separators=(",", ":"))


_HTML_TEMPLATE = """<!DOCTYPE html>
<html><head><meta charset="utf-8"/><title>{title}</title><style>body{{background:#0b0b12;color:#eee;font-family:ui-sans-serif,system-ui;margin:0;display:grid;place-items:center;height:100svh}}</style></head><body><canvas id="c" width="{w}" height="{h}" style="image-rendering:pixelated"></canvas><script>
const data={payload};
const c=document.getElementById('c');const ctx=c.getContext('2d');const img=ctx.createImageData(data.w,data.h);
for(let y=0;y<data.h;y++){{for(let x=0;x<data.w;x++){{const i=(y*data.w+x)*4;const p=data.pixels[y][x];if(!p){{img.data[i+3]=0;continue;}}img.data[i]=p.r;img.data[i+1]=p.g;img.data[i+2]=p.b;img.data[i+3]=Math.round(p.a*255);}}}}
ctx.putImageData(img,0,0);
if(data.overlayPaths&&data.overlayPaths.length){{ctx.imageSmoothingEnabled=true;for(const p of data.overlayPaths){{if(!p.points.length)continue;ctx.beginPath();ctx.lineWidth=p.width||1;ctx.lineJoin='round';ctx.lineCap='round';ctx.strokeStyle='rgba('+p.color.r+','+p.color.g+','+p.color.b+','+p.color.a+')';const s=p.points[0];ctx.moveTo(s.x+0.5,s.y+0.5);for(let i=1;i<p.points.length;i++){{const pt=p.points[i];ctx.lineTo(pt.x+0.5,pt.y+0.5);}}ctx.stroke();}}}}
</script></body></html>"""


def export_html(document, title="Pixel Pet Snippet"):
    """A standalone page that redraws the document from its embedded JSON payload."""
    # "</" inside the payload would close the script element early
    payload = export_json(document).replace("</", "<\\/")
    return _HTML_TEMPLATE.format(
        title=title.replace("<", "&lt;"), w=document.width, h=document.height, payload=payload
    )


def write_export(document, fmt, path, scale=1, background=(0, 0, 0)):
    """Writes ``document`` to ``path`` in the given format and returns the path."""
    fmt = ExportFormat(fmt)
    path = Path(path)
    if fmt is ExportFormat.PNG:
        export_png(document, path, scale)
    elif fmt is ExportFormat.JPG:
        export_jpeg(document, path, scale, background)
    elif fmt is ExportFormat.SVG:
        path.write_text(export_svg(document), encoding="utf-8")
    elif fmt is ExportFormat.JSON:
        path.write_text(export_json(document), encoding="utf-8")
    elif fmt is ExportFormat.HTML:
        path.write_text(export_html(document), encoding="utf-8")
    logger.info("Exported %s to %s", fmt.value, path)
    return path
