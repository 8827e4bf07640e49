"""
fractal-plate

Generates a fractal outline, triangulates it and writes a beveled 3D plate.

Examples:
  fractal-plate --out plate.stl
  fractal-plate --divisions 8 --depth 2 --seed 7 --texture --out plate.glb
  fractal-plate --config plate.json --debug-png plate.png --out plate.obj
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path

from .config import PlateConfig, load_config
from .errors import GeometryError
from .extrude import to_trimesh
from .pipeline import build_plate
from .preview import render_texture, write_png, write_svg
from .triangulate import BACKENDS

_OVERRIDES = (
    "divisions",
    "depth",
    "radius",
    "thickness",
    "bevel_rings",
    "jitter",
    "seed",
    "backend",
    "attempts",
)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Generate a beveled 3D plate from a recursive fractal outline.")
    p.add_argument("--config", type=str, default=None, help="Path to JSON plate config. Flags below override it.")

    # Outline
    p.add_argument("--divisions", type=int, default=None, help="Even number of corners per level (default 6).")
    p.add_argument("--depth", type=int, default=None, help="Recursion depth of the outline (default 3).")
    p.add_argument("--radius", type=float, default=None, help="Radius of the top-level star (default 1/7).")
    p.add_argument("--jitter", type=float, default=None,
                   help="Scale of the random corner displacement. 0 gives the regular pattern.")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible plates.")
    p.add_argument("--attempts", type=int, default=None,
                   help="Re-roll the outline this many times when it turns out degenerate.")
    p.add_argument("--allow-self-intersection", action="store_true",
                   help="Skip the simple-polygon check and let triangulation decide.")

    # Triangulation / extrusion
    p.add_argument("--backend", type=str, default=None, choices=list(BACKENDS), help="Triangulation backend.")
    p.add_argument("--thickness", type=float, default=None, help="Plate thickness (default 0.05).")
    p.add_argument("--bevel-rings", type=int, default=None, help="Number of bevel divisions (default 6).")

    # Output / debug
    p.add_argument("--out", type=str, required=True, help="Output mesh path (.stl, .obj, .glb, .ply).")
    p.add_argument("--texture", action="store_true", help="Embed the 2D drawing as texture (OBJ/GLB).")
    p.add_argument("--scale-to-width", type=float, default=0.0, help="Scale the mesh to this X extent.")
    p.add_argument("--debug-svg", type=str, default=None, help="Write SVG of outline and triangles.")
    p.add_argument("--debug-png", type=str, default=None, help="Write PNG of outline and triangles.")
    p.add_argument("--verbose", action="store_true", help="Log pipeline details.")
    return p.parse_args(argv)


def _resolve_config(args) -> PlateConfig:
    cfg = load_config(args.config) if args.config else PlateConfig()
    overrides = {}
    for name in _OVERRIDES:
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    if args.allow_self_intersection:
        overrides["require_simple"] = False
    return dataclasses.replace(cfg, **overrides).validate()


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.config and not Path(args.config).exists():
        raise SystemExit(f"Config file not found: {args.config}")

    try:
        cfg = _resolve_config(args)
        plate = build_plate(cfg)
    except GeometryError as e:
        raise SystemExit(f"Plate generation failed: {e}")

    print(f"Outline: {len(plate.outline)} points, {len(plate.triangles)} triangles (attempt {plate.attempts})")

    if args.debug_svg:
        write_svg(plate.outline, plate.triangles, args.debug_svg)
        print(f"Wrote SVG: {args.debug_svg}")
    if args.debug_png:
        write_png(plate.outline, plate.triangles, args.debug_png)
        print(f"Wrote PNG: {args.debug_png}")

    texture = render_texture(plate.outline, plate.triangles) if args.texture else None
    mesh = to_trimesh(plate.mesh, texture=texture)

    if args.scale_to_width and args.scale_to_width > 0:
        w = mesh.extents[0]
        if w > 1e-9:
            mesh.apply_scale(args.scale_to_width / w)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    mesh.export(out_path.as_posix())

    print(f"Wrote mesh: {out_path.resolve()}")
    print(f"Vertices: {len(mesh.vertices)}  Faces: {len(mesh.faces)}")
    print(f"Extents: {mesh.extents}")


if __name__ == "__main__":
    main()
