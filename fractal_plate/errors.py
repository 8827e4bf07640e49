"""Exceptions raised by the outline, triangulation and extrusion stages."""

from __future__ import annotations


class GeometryError(Exception):
    pass


class InvalidArgumentError(GeometryError, ValueError):
    """A parameter is out of range (odd divisions, non-positive thickness, ...)."""


class PreconditionError(GeometryError, ValueError):
    """Input buffers do not fit together (too few points, bad indices)."""


class DegenerateGeometryError(GeometryError, RuntimeError):
    """The geometry itself cannot be processed (zero-length vector, no ear)."""


class TriangulationError(DegenerateGeometryError):
    pass
