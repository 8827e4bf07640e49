"""
Polygon triangulation.

The default backend clips ears greedily: on every pass it takes the convex,
empty corner whose angle is closest to 120 degrees, which keeps slivers out
of the fan. It is cubic in the point count and meant for the few hundred
points the outline generator produces. `triangulate_earcut` offers the
mapbox earcut implementation for comparison and larger inputs.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

import mapbox_earcut as earcut
import numpy as np

from .errors import InvalidArgumentError, PreconditionError, TriangulationError
from .outline import as_points, ring_area
from .vec2 import Vec2

logger = logging.getLogger(__name__)

TARGET_ANGLE = math.pi / 1.5

BACKENDS = ("greedy", "earcut")


# ----------------------------
# Corner tests
# ----------------------------

def corner_angle(v1: Vec2, v2: Vec2) -> float:
    """Angle swept counter-clockwise from v1 to v2, in [0, 2*pi)."""
    a = v1.normalize()
    b = v2.normalize()
    sin = a.cross(b)
    cos = max(-1.0, min(1.0, a.dot(b)))
    if sin >= 0:
        return math.acos(cos)
    return 2 * math.pi - math.acos(cos)


def _is_same_side(a: Vec2, b: Vec2, p1: Vec2, p2: Vec2) -> bool:
    v1 = b.sub(a)
    c1 = v1.cross(p1.sub(a))
    c2 = v1.cross(p2.sub(a))
    return c1 * c2 >= 0


def is_point_in_triangle(a: Vec2, b: Vec2, c: Vec2, p: Vec2) -> bool:
    # closed triangle: points on an edge count as inside
    return _is_same_side(a, b, c, p) and _is_same_side(b, c, a, p) and _is_same_side(c, a, b, p)


def _contains_other_point(points: List[Vec2], working: Sequence[int], tri: Tuple[int, int, int]) -> bool:
    ip, ic, i_n = tri
    p, c, n = points[ip], points[ic], points[i_n]
    for index in working:
        if index in tri:
            continue
        if is_point_in_triangle(p, c, n, points[index]):
            return True
    return False


def _check_outline(outline) -> np.ndarray:
    pts = np.asarray(outline, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise PreconditionError(f"Outline must be an (N, 2) array, got shape {pts.shape}")
    if len(pts) < 3:
        raise PreconditionError(f"Outline needs at least 3 points, got {len(pts)}")
    return pts


def _freeze(triangles) -> np.ndarray:
    tri = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    tri.flags.writeable = False
    return tri


# ----------------------------
# Greedy ear selection
# ----------------------------

def triangulate(outline) -> np.ndarray:
    """
    Triangulate a simple polygon into N - 2 counter-clockwise triangles.

    Ears are searched along the clockwise traversal of the outline, so a
    counter-clockwise outline (the generator's output) is walked in reverse.
    Returned indices always refer to the outline as given.
    """
    pts = _check_outline(outline)
    points = as_points(pts)
    n = len(points)

    if ring_area(pts) > 0:
        working = list(range(n - 1, -1, -1))
    else:
        working = list(range(n))

    triangles: List[Tuple[int, int, int]] = []
    while len(working) > 2:
        m = len(working)
        best_diff = math.inf
        best_pos: Optional[int] = None
        best_tri: Optional[Tuple[int, int, int]] = None

        for pos in range(m):
            ip = working[pos - 1]
            ic = working[pos]
            i_n = working[(pos + 1) % m]
            c = points[ic]
            angle = corner_angle(points[ip].sub(c), points[i_n].sub(c))
            diff = abs(angle - TARGET_ANGLE)
            if angle >= math.pi or diff >= best_diff:
                continue
            if _contains_other_point(points, working, (ip, ic, i_n)):
                continue
            best_diff = diff
            best_pos = pos
            best_tri = (i_n, ic, ip)

        if best_pos is None or best_tri is None:
            raise TriangulationError(
                f"No ear found with {m} points remaining; the outline is probably self-intersecting."
            )
        del working[best_pos]
        triangles.append(best_tri)

    logger.debug("Greedy triangulation: %d points -> %d triangles", n, len(triangles))
    return _freeze(triangles)


# ----------------------------
# earcut backend
# ----------------------------

def _tri_signed_area(a, b, c) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def triangulate_earcut(outline) -> np.ndarray:
    pts = _check_outline(outline)
    # earcut refuses read-only buffers such as generated outlines
    coords = np.array(pts, dtype=np.float64, order="C")
    ring_ends = np.asarray([len(coords)], dtype=np.uint32)

    if hasattr(earcut, "triangulate_float64"):
        tri = earcut.triangulate_float64(coords, ring_ends)
    elif hasattr(earcut, "triangulate"):
        tri = earcut.triangulate(coords, ring_ends)
    else:
        raise TriangulationError("mapbox_earcut installed but API not recognized.")

    tri = np.asarray(tri, dtype=np.int64).reshape(-1, 3)
    if len(tri) != len(coords) - 2:
        raise TriangulationError(
            f"earcut returned {len(tri)} triangles for {len(coords)} points; the outline is probably not simple."
        )

    oriented = tri.copy()
    for i in range(oriented.shape[0]):
        ia, ib, ic = oriented[i]
        if _tri_signed_area(coords[ia], coords[ib], coords[ic]) < 0:
            oriented[i] = [ia, ic, ib]
    return _freeze(oriented)


def triangulate_with(outline, backend: str = "greedy") -> np.ndarray:
    if backend == "greedy":
        return triangulate(outline)
    if backend == "earcut":
        return triangulate_earcut(outline)
    raise InvalidArgumentError(f"Unknown triangulation backend {backend!r}; expected one of {BACKENDS}")
