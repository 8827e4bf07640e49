from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from shapely.geometry import LinearRing

from .config import PlateConfig
from .errors import DegenerateGeometryError, InvalidArgumentError
from .extrude import MeshBuffers, extrude
from .outline import generate_outline
from .triangulate import triangulate_with

logger = logging.getLogger(__name__)


@dataclass
class Plate:
    outline: np.ndarray
    triangles: np.ndarray
    mesh: MeshBuffers
    attempts: int = 1


def _check_simple(outline: np.ndarray) -> None:
    if len(outline) < 3:
        return
    if not LinearRing(outline).is_simple:
        raise DegenerateGeometryError(f"Generated outline of {len(outline)} points self-intersects.")


def build_plate(config: PlateConfig, rng=None) -> Plate:
    """
    Generate, triangulate and extrude one plate.

    Degenerate outlines are re-rolled from the same random source up to
    `config.attempts` times; the last failure is raised.
    """
    config.validate()
    if rng is None:
        rng = np.random.default_rng(config.seed)

    for attempt in range(1, config.attempts + 1):
        outline = generate_outline(
            config.divisions, config.depth, rng=rng, radius=config.radius, jitter=config.jitter
        )
        try:
            if config.require_simple:
                _check_simple(outline)
            triangles = triangulate_with(outline, config.backend)
            mesh = extrude(outline, triangles, config.thickness, config.bevel_rings)
        except DegenerateGeometryError as e:
            logger.warning("Attempt %d/%d failed: %s", attempt, config.attempts, e)
            if attempt == config.attempts:
                raise
            continue
        logger.debug("Plate built on attempt %d: %d points, %d faces", attempt, len(outline), mesh.face_count)
        return Plate(outline=outline, triangles=triangles, mesh=mesh, attempts=attempt)

    raise InvalidArgumentError(f"attempts must be >= 1, got {config.attempts}")
