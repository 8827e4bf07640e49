import json

import pytest
import trimesh

from fractal_plate.cli import main


def test_writes_stl(tmp_path, capsys):
    out = tmp_path / "plate.stl"
    main(["--divisions", "4", "--depth", "1", "--jitter", "0", "--thickness", "0.1",
          "--bevel-rings", "2", "--out", str(out)])
    assert out.exists()
    mesh = trimesh.load(str(out))
    assert mesh.is_watertight
    assert "Wrote mesh" in capsys.readouterr().out


def test_config_file_with_overrides(tmp_path, capsys):
    config = tmp_path / "plate.json"
    config.write_text(json.dumps({"divisions": 8, "depth": 2, "seed": 4}))
    out = tmp_path / "nested" / "plate.stl"
    svg = tmp_path / "plate.svg"
    main(["--config", str(config), "--depth", "1", "--out", str(out), "--debug-svg", str(svg)])
    assert out.exists()
    assert svg.exists()
    assert "Outline: 8 points, 6 triangles" in capsys.readouterr().out


def test_textured_glb(tmp_path):
    out = tmp_path / "plate.glb"
    png = tmp_path / "plate.png"
    main(["--depth", "2", "--seed", "1", "--texture", "--debug-png", str(png), "--out", str(out)])
    assert out.stat().st_size > 0
    assert png.exists()


def test_scale_to_width(tmp_path, capsys):
    out = tmp_path / "plate.stl"
    main(["--divisions", "4", "--depth", "1", "--jitter", "0", "--scale-to-width", "50", "--out", str(out)])
    mesh = trimesh.load(str(out))
    assert mesh.extents[0] == pytest.approx(50.0, rel=1e-4)


def test_invalid_divisions_exit(tmp_path):
    with pytest.raises(SystemExit, match="divisions"):
        main(["--divisions", "5", "--out", str(tmp_path / "plate.stl")])


def test_missing_config_exit(tmp_path):
    with pytest.raises(SystemExit, match="Config file not found"):
        main(["--config", str(tmp_path / "nope.json"), "--out", str(tmp_path / "plate.stl")])
