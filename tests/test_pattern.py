# tests/test_pattern.py
import numpy as np
import pytest

from floss_map.matching import match_nearest_grey
from floss_map.palette_data import construct_palette
from floss_map.pattern import (
    PatternSettings,
    build_pattern,
    build_pattern_from_buffer,
    match_cells,
)


@pytest.fixture(scope="module")
def palette():
    return construct_palette()


def _grid_of(palette, ids, shape):
    h, w = shape
    grid = np.full((h, w, 4), 255, dtype=np.uint8)
    for i, cid in enumerate(ids):
        grid[i // w, i % w, :3] = palette.by_id(cid).rgb
    return grid


def test_single_pass_histogram(palette):
    grid = _grid_of(palette, ["310", "310", "321", "5200"], (2, 2))
    matched = match_cells(grid, palette)
    counts = {e.id: e.count for e in matched.histogram}
    assert counts == {"310": 2, "321": 1, "5200": 1}
    assert matched.indices.shape == (2, 2)
    assert matched.fallback_cells == 0


def test_no_cap_keeps_every_colour(palette):
    grid = _grid_of(palette, ["310", "321", "700", "5200"], (2, 2))
    pattern = build_pattern(grid, palette, PatternSettings(max_colors=0))
    assert pattern.mapping == {}
    assert pattern.summary.colour_count == 4
    assert pattern.summary.total_cells == 4
    assert pattern.id_grid(palette) == [["310", "321"], ["700", "5200"]]


def test_overrides_apply_before_counting(palette):
    grid = _grid_of(palette, ["310", "310", "321", "5200"], (2, 2))
    settings = PatternSettings(max_colors=0, overrides={"310": "5200", "321": "321"})
    pattern = build_pattern(grid, palette, settings)
    assert {e.id: e.count for e in pattern.histogram} == {"321": 1, "5200": 3}
    assert pattern.overrides == {"310": "5200"}


def test_reduction_caps_the_final_grid(palette):
    ids = [c.id for c in palette][:24]
    grid = _grid_of(palette, ids, (4, 6))
    pattern = build_pattern(grid, palette, PatternSettings(max_colors=6))
    used = {cid for row in pattern.id_grid(palette) for cid in row}
    assert len(used) <= 6
    assert pattern.summary.colour_count == len(used)
    assert all(src != dst for src, dst in pattern.mapping.items())
    assert sum(e.count for e in pattern.summary.entries) == 24


def test_kmeans_pipeline_is_reproducible(palette):
    rng = np.random.default_rng(4)
    grid = rng.integers(0, 256, size=(12, 12, 4), dtype=np.uint8)
    grid[..., 3] = 255
    settings = PatternSettings(max_colors=5, strategy="kmeans")
    a = build_pattern(grid, palette, settings, rng=np.random.default_rng(1))
    b = build_pattern(grid, palette, settings, rng=np.random.default_rng(1))
    assert a.mapping == b.mapping
    assert np.array_equal(a.indices, b.indices)
    assert a.summary.colour_count <= 5


def test_unusable_cells_are_drawn_white(palette, capsys):
    grid = np.array([[[np.nan, 0.0, 0.0], [0.0, 0.0, 0.0]]])
    pattern = build_pattern(grid, palette, PatternSettings(max_colors=0))
    assert pattern.id_grid(palette) == [["5200", "310"]]
    assert pattern.fallback_cells == 1
    assert "[warn]" in capsys.readouterr().out


def test_grey_mode_matches_by_brightness(palette):
    grid = np.array([[[255, 0, 0, 255]]], dtype=np.uint8)
    pattern = build_pattern(grid, palette, PatternSettings(max_colors=0, match_mode="grey"))
    assert pattern.id_grid(palette)[0][0] == match_nearest_grey(palette, 255, 0, 0).id


def test_transparent_cells_are_still_stitched(palette):
    grid = _grid_of(palette, ["310", "5200"], (1, 2))
    grid[0, 0, 3] = 0
    pattern = build_pattern(grid, palette, PatternSettings(max_colors=0))
    assert pattern.summary.total_cells == 2
    assert pattern.summary.colour_count == 2


def test_flat_buffer_input(palette):
    buf = bytes([0, 0, 0, 255] * 3 + [255, 255, 255, 255] * 3)
    pattern = build_pattern_from_buffer(buf, 3, 2, palette, PatternSettings(max_colors=0))
    assert pattern.id_grid(palette) == [["310"] * 3, ["5200"] * 3]
    symbols = pattern.symbol_grid(palette)
    assert symbols[0][0] == pattern.summary.symbol_of("310")
    assert pattern.rgb(palette)[1, 0].tolist() == [255, 255, 255]

    with pytest.raises(ValueError):
        build_pattern_from_buffer(buf[:-4], 3, 2, palette)


def test_bad_shape_is_rejected(palette):
    with pytest.raises(ValueError):
        build_pattern(np.zeros((4, 4), dtype=np.uint8), palette)


def test_kmeans_cap_holds_for_fully_transparent_grid(palette):
    rng = np.random.default_rng(8)
    grid = rng.integers(0, 256, size=(20, 20, 4), dtype=np.uint8)
    grid[..., 3] = 0
    settings = PatternSettings(max_colors=5, strategy="kmeans")
    pattern = build_pattern(grid, palette, settings, rng=np.random.default_rng(0))
    assert pattern.summary.colour_count <= 5
    assert pattern.summary.total_cells == 400
