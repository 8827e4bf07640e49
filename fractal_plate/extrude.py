"""
Extrusion of a triangulated outline into a closed, beveled solid.

Vertex layout: front cap ring, back cap ring, then the intermediate bevel
rings in ascending order. Every ring has one vertex per outline point, so
ring k occupies a contiguous block of N vertices and all rings share the same
planar UVs.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import trimesh
from trimesh.visual import TextureVisuals

from .errors import DegenerateGeometryError, InvalidArgumentError, PreconditionError
from .outline import as_points

logger = logging.getLogger(__name__)

UV_OFFSET = (0.5, 0.5)


@dataclass
class MeshBuffers:
    """
    Index-aligned mesh buffers.

    `indices` keeps the construction layout: front cap triangles as
    triangulated, back cap swapped, then side walls. In that layout the caps
    are wound against the side walls. `oriented_indices()` flips both caps so
    that, for a counter-clockwise outline, every face is wound outward; `flat()`
    and `to_trimesh` use that form.
    """

    positions: np.ndarray  # (V, 3) float32
    uvs: np.ndarray        # (V, 2) float32
    indices: np.ndarray    # (F, 3) uint32
    cap_faces: int = 0     # triangles per cap

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def face_count(self) -> int:
        return int(self.indices.shape[0])

    def oriented_indices(self) -> np.ndarray:
        faces = np.array(self.indices, dtype=np.uint32)
        caps = 2 * self.cap_faces
        faces[:caps] = faces[:caps][:, [0, 2, 1]]
        return faces

    def flat(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Contiguous 1-D position, uv and outward-wound index arrays as a GPU upload expects them."""
        return (
            np.ascontiguousarray(self.positions, dtype=np.float32).ravel(),
            np.ascontiguousarray(self.uvs, dtype=np.float32).ravel(),
            np.ascontiguousarray(self.oriented_indices(), dtype=np.uint32).ravel(),
        )


# ----------------------------
# Bevel rings
# ----------------------------

def bevel_directions(outline) -> np.ndarray:
    """
    Outward corner bisector for every outline point.

    The bisector of (p - c) and (n - c) is flipped by the sign of their cross
    product so that it points away from the polygon on both convex and
    reflex corners of a counter-clockwise outline.
    """
    points = as_points(outline)
    n = len(points)
    out = np.zeros((n, 2), dtype=np.float64)
    for j, c in enumerate(points):
        v_cp = points[j - 1].sub(c)
        v_cn = points[(j + 1) % n].sub(c)
        sin = v_cp.cross(v_cn)
        if sin == 0.0:
            raise DegenerateGeometryError(f"Outline point {j} is a straight or folded corner; no bevel direction.")
        o = v_cp.add(v_cn).normalize().multiply(math.copysign(1.0, sin))
        out[j] = (o.x, o.y)
    return out


def _oval(a: float, b: float, phase: float) -> Tuple[float, float]:
    return a * math.cos(phase), b * math.sin(phase)


def bevel_ring(outline, directions: np.ndarray, thickness: float, ring: int, bevel_rings: int) -> np.ndarray:
    pts = np.asarray(outline, dtype=np.float64).reshape(-1, 2)
    phase = math.pi / bevel_rings * (ring + 1)
    x, y = _oval(thickness / 2, thickness / 2, phase)
    xy = pts + directions * y
    return np.column_stack([xy, np.full(len(pts), -x, dtype=np.float64)])


def stitch_rings(ring_a, ring_b) -> np.ndarray:
    """Two triangles per outline edge between two equally sized index rings."""
    a = np.asarray(ring_a, dtype=np.int64)
    b = np.asarray(ring_b, dtype=np.int64)
    if a.shape != b.shape:
        raise InvalidArgumentError(f"Rings must have the same length ({len(a)} != {len(b)})")
    a_next = np.roll(a, -1)
    b_next = np.roll(b, -1)
    first = np.column_stack([a, a_next, b_next])
    second = np.column_stack([a, b_next, b])
    return np.stack([first, second], axis=1).reshape(-1, 3)


# ----------------------------
# Extrusion
# ----------------------------

def _check_inputs(outline, triangles) -> Tuple[np.ndarray, np.ndarray]:
    pts = np.asarray(outline, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2 or len(pts) < 3:
        raise PreconditionError(f"Outline must be an (N, 2) array with N >= 3, got shape {pts.shape}")
    tri = np.asarray(triangles, dtype=np.int64)
    if tri.ndim != 2 or tri.shape[1] != 3 or len(tri) == 0:
        raise PreconditionError(f"Triangulation must be a non-empty (T, 3) array, got shape {tri.shape}")
    if tri.min() < 0 or tri.max() >= len(pts):
        raise PreconditionError(
            f"Triangle indices must lie in [0, {len(pts)}), got [{tri.min()}, {tri.max()}]"
        )
    return pts, tri


def extrude(outline, triangles, thickness: float, bevel_rings: int) -> MeshBuffers:
    if thickness <= 0:
        raise InvalidArgumentError(f"thickness must be positive, got {thickness}")
    if bevel_rings < 1:
        raise InvalidArgumentError(f"bevel_rings must be >= 1, got {bevel_rings}")
    pts, tri = _check_inputs(outline, triangles)
    n = len(pts)
    half = thickness / 2

    front = np.column_stack([pts, np.full(n, -half)])
    back = np.column_stack([pts, np.full(n, half)])
    front_tris = tri
    back_tris = tri[:, [0, 2, 1]] + n

    directions = bevel_directions(pts)
    rings: List[np.ndarray] = [bevel_ring(pts, directions, thickness, k, bevel_rings) for k in range(bevel_rings - 1)]

    base = np.arange(n, dtype=np.int64)
    ring_indices = [base] + [base + 2 * n + k * n for k in range(bevel_rings - 1)] + [base + n]
    side = [stitch_rings(a, b) for a, b in zip(ring_indices[:-1], ring_indices[1:])]

    positions = np.vstack([front, back] + rings).astype(np.float32)
    indices = np.vstack([front_tris, back_tris] + side).astype(np.uint32)
    uvs = np.tile(pts + np.asarray(UV_OFFSET), (bevel_rings + 1, 1)).astype(np.float32)

    logger.debug(
        "Extruded %d points: thickness=%g rings=%d -> %d vertices, %d faces",
        n, thickness, bevel_rings, len(positions), len(indices),
    )
    return MeshBuffers(positions=positions, uvs=uvs, indices=indices, cap_faces=len(tri))


# ----------------------------
# Renderer handoff
# ----------------------------

def smooth_vertex_normals(positions, faces) -> np.ndarray:
    """Average of the unit normals of the faces around each vertex."""
    v = np.asarray(positions, dtype=np.float64)
    f = np.asarray(faces, dtype=np.int64)
    face_n = np.cross(v[f[:, 1]] - v[f[:, 0]], v[f[:, 2]] - v[f[:, 0]])
    lengths = np.linalg.norm(face_n, axis=1, keepdims=True)
    face_n = np.divide(face_n, lengths, out=np.zeros_like(face_n), where=lengths > 0)

    acc = np.zeros_like(v)
    for k in range(3):
        np.add.at(acc, f[:, k], face_n)
    norms = np.linalg.norm(acc, axis=1, keepdims=True)
    return np.divide(acc, norms, out=np.zeros_like(acc), where=norms > 0)


def to_trimesh(buffers: MeshBuffers, texture=None) -> trimesh.Trimesh:
    """
    Wrap the buffers in a trimesh for export.

    Vertices are not merged so UVs stay aligned. Faces come from
    `oriented_indices()`; `fix_normals` still runs for clockwise outlines,
    whose bevel bulges inward.
    """
    visual = TextureVisuals(uv=buffers.uvs, image=texture)
    mesh = trimesh.Trimesh(
        vertices=buffers.positions.astype(np.float64),
        faces=buffers.oriented_indices().astype(np.int64),
        visual=visual,
        process=False,
    )
    mesh.fix_normals()
    mesh.vertex_normals = smooth_vertex_normals(mesh.vertices, mesh.faces)
    return mesh


def is_closed_manifold(faces) -> bool:
    """True when every undirected edge is shared by exactly two faces."""
    f = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if len(f) == 0:
        return False
    edges = np.sort(np.vstack([f[:, [0, 1]], f[:, [1, 2]], f[:, [2, 0]]]), axis=1)
    _, counts = np.unique(edges, axis=0, return_counts=True)
    return bool(np.all(counts == 2))
