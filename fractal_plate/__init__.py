from .config import PlateConfig, load_config
from .errors import (
    DegenerateGeometryError,
    GeometryError,
    InvalidArgumentError,
    PreconditionError,
    TriangulationError,
)
from .extrude import MeshBuffers, extrude, is_closed_manifold, smooth_vertex_normals, to_trimesh
from .outline import generate_outline, ring_area
from .pipeline import Plate, build_plate
from .triangulate import triangulate, triangulate_earcut
from .vec2 import Vec2

__all__ = [
    "DegenerateGeometryError",
    "GeometryError",
    "InvalidArgumentError",
    "MeshBuffers",
    "Plate",
    "PlateConfig",
    "PreconditionError",
    "TriangulationError",
    "Vec2",
    "build_plate",
    "extrude",
    "generate_outline",
    "is_closed_manifold",
    "load_config",
    "ring_area",
    "smooth_vertex_normals",
    "to_trimesh",
    "triangulate",
    "triangulate_earcut",
]
