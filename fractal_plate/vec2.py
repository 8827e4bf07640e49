from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from .errors import DegenerateGeometryError


@dataclass(frozen=True)
class Vec2:
    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def add(self, v: "Vec2") -> "Vec2":
        return Vec2(self.x + v.x, self.y + v.y)

    def sub(self, v: "Vec2") -> "Vec2":
        return Vec2(self.x - v.x, self.y - v.y)

    def multiply(self, s: float) -> "Vec2":
        return Vec2(self.x * s, self.y * s)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Vec2":
        n = self.length()
        if n == 0.0:
            raise DegenerateGeometryError(f"Cannot normalize zero-length vector {self!r}")
        return Vec2(self.x / n, self.y / n)

    def dot(self, v: "Vec2") -> float:
        return self.x * v.x + self.y * v.y

    def cross(self, v: "Vec2") -> float:
        """z component of the 3-D cross product; positive when v is counter-clockwise of self."""
        return self.x * v.y - v.x * self.y
