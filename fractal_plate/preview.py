"""
2-D previews of an outline and its triangulation.

The PNG drawing covers the [-0.5, 0.5] square, which is exactly the area the
mesh UVs map onto, so the same picture doubles as the plate's texture.
"""

from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.collections import PolyCollection
from matplotlib.figure import Figure
from matplotlib.patches import Polygon as PolygonPatch
from PIL import Image
from shapely.geometry import Polygon

BACKGROUND = "#202020"


# ----------------------------
# SVG
# ----------------------------

def write_svg(outline, triangles, path: str):
    pts = np.asarray(outline, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        Path(path).write_text("<svg xmlns='http://www.w3.org/2000/svg'></svg>")
        return
    minx, miny, maxx, maxy = Polygon(pts).bounds
    w = maxx - minx
    h = maxy - miny

    def ring_to_path(coords):
        coords = [tuple(c) for c in coords]
        if coords[0] != coords[-1]:
            coords.append(coords[0])
        d = f"M {coords[0][0]-minx:.5f} {maxy-coords[0][1]:.5f} "
        for x, y in coords[1:]:
            d += f"L {x-minx:.5f} {maxy-y:.5f} "
        d += "Z "
        return d

    tri_paths = " ".join(ring_to_path(pts[list(t)]) for t in np.asarray(triangles, dtype=np.int64).reshape(-1, 3))
    outline_path = ring_to_path(pts)
    stroke = max(w, h) / 300.0

    svg = f"""<svg xmlns="http://www.w3.org/2000/svg" width="600" height="{600 * h / max(w, 1e-12):.0f}" viewBox="0 0 {w:.5f} {h:.5f}">
  <path d="{tri_paths}" fill="blue" fill-opacity="0.3" stroke="red" stroke-width="{stroke:.5f}" />
  <path d="{outline_path}" fill="none" stroke="black" stroke-width="{stroke * 3:.5f}" />
</svg>
"""
    Path(path).write_text(svg, encoding="utf-8")


# ----------------------------
# Raster (matplotlib)
# ----------------------------

def _draw(outline, triangles, size_px: int) -> Figure:
    pts = np.asarray(outline, dtype=np.float64).reshape(-1, 2)
    tris = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)

    dpi = 100
    fig = Figure(figsize=(size_px / dpi, size_px / dpi), dpi=dpi, facecolor=BACKGROUND)
    FigureCanvasAgg(fig)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_facecolor(BACKGROUND)
    ax.set_xlim(-0.5, 0.5)
    ax.set_ylim(-0.5, 0.5)
    ax.set_aspect("equal")
    ax.axis("off")

    if len(tris):
        ax.add_collection(PolyCollection(pts[tris], facecolors="blue", edgecolors="red", linewidths=1, alpha=0.3))
    if len(pts) >= 3:
        ax.add_patch(PolygonPatch(pts, closed=True, fill=False, edgecolor="white", linewidth=3, alpha=0.3))
    if len(pts):
        ax.scatter(pts[:, 0], pts[:, 1], s=25, color="white", zorder=3)
    return fig


def write_png(outline, triangles, path: str, size_px: int = 600):
    fig = _draw(outline, triangles, size_px)
    fig.savefig(path, dpi=fig.dpi, facecolor=fig.get_facecolor())


def render_texture(outline, triangles, size_px: int = 600) -> Image.Image:
    fig = _draw(outline, triangles, size_px)
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=fig.dpi, facecolor=fig.get_facecolor())
    buf.seek(0)
    return Image.open(buf).convert("RGB")
