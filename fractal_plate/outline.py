"""
Recursive outline generator.

A regular star of `divisions / 2` lobes is laid around the center; every lobe
contributes two corner points and, between them, a half-size copy of the
whole pattern pushed outwards along the lobe direction. Corner points are
jittered by a small random amount so each plate is different.
"""

from __future__ import annotations

import logging
import math
from typing import List

import numpy as np

from .errors import InvalidArgumentError
from .vec2 import Vec2

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 1 / 7


def ring_area(coords) -> float:
    """Signed shoelace area, positive for counter-clockwise rings."""
    pts = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def _random_angle_diff(rng, divisions: int, jitter: float) -> float:
    # added to cos/sin before scaling, not a true rotation
    return (rng.random() - 0.5) * math.pi * 2 / divisions * 0.5 * jitter


def _corner(rng, center: Vec2, radius: float, angle: float, divisions: int, jitter: float) -> Vec2:
    dx = _random_angle_diff(rng, divisions, jitter)
    dy = _random_angle_diff(rng, divisions, jitter)
    return Vec2(math.cos(angle) + dx, math.sin(angle) + dy).multiply(radius).add(center)


def _gen_points_recursive(
    rng,
    center: Vec2,
    radius: float,
    divisions: int,
    start_angle: float,
    depth: int,
    jitter: float,
) -> List[Vec2]:
    if depth == 0:
        return []
    d_angle = math.pi * 2 / divisions
    points: List[Vec2] = []
    for i in range(divisions // 2):
        angle = i * d_angle * 2 + start_angle
        v_angle = Vec2(math.cos(angle), math.sin(angle)).multiply(radius)
        v_next = _corner(rng, center, radius, angle - d_angle / 2, divisions, jitter)
        child = _gen_points_recursive(
            rng,
            center.add(v_angle.multiply(2)),
            radius / 2,
            divisions,
            angle - math.pi + d_angle,
            depth - 1,
            jitter,
        )
        v_prev = _corner(rng, center, radius, angle + d_angle / 2, divisions, jitter)
        points.append(v_next)
        points.extend(child)
        points.append(v_prev)
    return points


def generate_outline(
    divisions: int,
    depth: int,
    rng=None,
    radius: float = DEFAULT_RADIUS,
    jitter: float = 1.0,
) -> np.ndarray:
    """
    Generate a closed outline as a read-only (N, 2) float64 array.

    rng: anything with a `random()` method returning floats in [0, 1)
         (numpy Generator, random.Random). Defaults to a fresh numpy Generator.
    jitter: scale of the random corner displacement; 0 gives the exact
            regular pattern.
    """
    if divisions < 2 or divisions % 2 != 0:
        raise InvalidArgumentError(f"divisions must be an even integer >= 2, got {divisions}")
    if depth < 0:
        raise InvalidArgumentError(f"depth must be >= 0, got {depth}")
    if radius <= 0:
        raise InvalidArgumentError(f"radius must be positive, got {radius}")
    if rng is None:
        rng = np.random.default_rng()

    points = _gen_points_recursive(rng, Vec2(0.0, 0.0), radius, divisions, 0.0, depth, jitter)
    outline = np.array([(p.x, p.y) for p in points], dtype=np.float64).reshape(-1, 2)
    outline.flags.writeable = False
    logger.debug("Generated outline: divisions=%d depth=%d points=%d", divisions, depth, len(outline))
    return outline


def as_points(outline) -> List[Vec2]:
    return [Vec2(float(x), float(y)) for x, y in np.asarray(outline, dtype=np.float64).reshape(-1, 2)]
