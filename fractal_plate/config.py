from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from .errors import InvalidArgumentError
from .outline import DEFAULT_RADIUS
from .triangulate import BACKENDS


@dataclass
class PlateConfig:
    divisions: int = 6
    depth: int = 3
    radius: float = DEFAULT_RADIUS
    thickness: float = 0.05
    bevel_rings: int = 6
    jitter: float = 1.0
    seed: Optional[int] = None
    backend: str = "greedy"  # greedy, earcut
    attempts: int = 1
    require_simple: bool = True

    def validate(self) -> "PlateConfig":
        if self.divisions < 2 or self.divisions % 2 != 0:
            raise InvalidArgumentError(f"divisions must be an even integer >= 2, got {self.divisions}")
        if self.depth < 0:
            raise InvalidArgumentError(f"depth must be >= 0, got {self.depth}")
        if self.radius <= 0:
            raise InvalidArgumentError(f"radius must be positive, got {self.radius}")
        if self.thickness <= 0:
            raise InvalidArgumentError(f"thickness must be positive, got {self.thickness}")
        if self.bevel_rings < 1:
            raise InvalidArgumentError(f"bevel_rings must be >= 1, got {self.bevel_rings}")
        if self.jitter < 0:
            raise InvalidArgumentError(f"jitter must be >= 0, got {self.jitter}")
        if self.backend not in BACKENDS:
            raise InvalidArgumentError(f"backend must be one of {BACKENDS}, got {self.backend!r}")
        if self.attempts < 1:
            raise InvalidArgumentError(f"attempts must be >= 1, got {self.attempts}")
        return self


_TYPES = {
    "divisions": int,
    "depth": int,
    "radius": float,
    "thickness": float,
    "bevel_rings": int,
    "jitter": float,
    "backend": str,
    "attempts": int,
    "require_simple": bool,
}


def _is_int(value) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


def _check_type(key: str, value):
    kind = _TYPES[key]
    if kind is bool:
        ok = isinstance(value, bool)
    elif kind is int:
        ok = _is_int(value)
    elif kind is float:
        ok = _is_int(value) or isinstance(value, float)
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise InvalidArgumentError(f"{key} must be of type {kind.__name__}, got {value!r}")
    return float(value) if kind is float else value


def config_from_dict(data) -> PlateConfig:
    if not isinstance(data, dict):
        raise InvalidArgumentError("Plate config must be a JSON object.")
    known = {f.name for f in fields(PlateConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidArgumentError(f"Unknown plate config keys: {', '.join(unknown)}")

    values = {}
    for key, raw in data.items():
        if key == "seed":
            if raw is not None and not _is_int(raw):
                raise InvalidArgumentError(f"seed must be an integer or null, got {raw!r}")
            values[key] = raw
        else:
            values[key] = _check_type(key, raw)
    return PlateConfig(**values).validate()


def load_config(path: str) -> PlateConfig:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return config_from_dict(data)
