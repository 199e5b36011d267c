# tests/test_image_io.py
import json

import numpy as np
import pytest
from PIL import Image

from floss_map.image_io import (
    downsample_to_grid,
    grid_size_for_detail,
    load_image_rgba,
    pillow_resample_from_name,
    pixel_size_for_detail,
    save_pattern_png,
    write_report_json,
)
from floss_map.materials import build_material_summary
from floss_map.palette_data import construct_palette


def test_detail_maps_to_pixel_size():
    assert pixel_size_for_detail(1) == 24
    assert pixel_size_for_detail(50) == 13
    assert pixel_size_for_detail(100) == 1
    # clamped
    assert pixel_size_for_detail(0) == 24
    assert pixel_size_for_detail(500) == 1


def test_grid_size_never_collapses_to_zero():
    assert grid_size_for_detail(260, 130, 50) == (20, 10)
    assert grid_size_for_detail(5, 5, 1) == (1, 1)


def test_downsample_to_grid():
    rgba = np.zeros((130, 260, 4), dtype=np.uint8)
    rgba[..., 3] = 255
    grid = downsample_to_grid(rgba, 50, pillow_resample_from_name("box"))
    assert grid.shape == (10, 20, 4)
    assert grid.dtype == np.uint8
    assert downsample_to_grid(rgba, 100) is rgba

    with pytest.raises(TypeError):
        downsample_to_grid(rgba[..., :3], 50)


def test_unknown_resample_name():
    with pytest.raises(ValueError):
        pillow_resample_from_name("sharpest")


def test_load_rgb_image_as_rgba(tmp_path):
    path = tmp_path / "in.png"
    Image.new("RGB", (7, 3), color=(10, 20, 30)).save(path)
    rgba = load_image_rgba(path)
    assert rgba.shape == (3, 7, 4)
    assert rgba[0, 0].tolist() == [10, 20, 30, 255]


def test_save_pattern_png_scales_each_stitch(tmp_path):
    rgb = np.array([[[0, 0, 0], [255, 255, 255]]], dtype=np.uint8)
    out = save_pattern_png(tmp_path / "out.jpg", rgb, scale=3)
    assert out.suffix == ".png"
    with Image.open(out) as im:
        assert im.size == (6, 3)
        assert im.getpixel((4, 1))[:3] == (255, 255, 255)


def test_write_report_json(tmp_path):
    summary = build_material_summary({"310": 3}, construct_palette(), total_cells=3, width=3, height=1)
    path = write_report_json(tmp_path / "r.json", summary, {"source": "x.png"})
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["totalCells"] == 3
    assert data["entries"][0]["id"] == "310"
    assert data["source"] == "x.png"
