# tests/test_colour_select.py
import numpy as np
import pytest

from floss_map.colour_select import (
    compute_collapse_mapping,
    reduce_palette,
    select_kept,
    sort_histogram,
)
from floss_map.constants import ANCHOR_IDS
from floss_map.core_types import HistogramEntry, ReferenceColor
from floss_map.palette_data import ReferencePalette, construct_palette


@pytest.fixture(scope="module")
def palette():
    return construct_palette()


def _histogram(palette, counts):
    return [HistogramEntry.from_reference(palette.by_id(cid), n) for cid, n in counts.items()]


def _non_anchor_ids(palette, n):
    return [c.id for c in palette if c.id not in ANCHOR_IDS][:n]


def _final_ids(histogram, mapping):
    return {mapping.get(e.id, e.id) for e in histogram}


def test_scenario_two_anchors_and_top_colour():
    pal = ReferencePalette(
        [
            ReferenceColor("X", 0, 0, 0, "anchor dark"),
            ReferenceColor("Y", 255, 255, 255, "anchor light"),
            ReferenceColor("A", 200, 0, 0, "red"),
            ReferenceColor("B", 190, 10, 0, "red 2"),
            ReferenceColor("C", 20, 20, 20, "near black"),
            ReferenceColor("D", 240, 240, 240, "near white"),
            ReferenceColor("E", 150, 0, 0, "dark red"),
            ReferenceColor("F", 10, 0, 0, "black red"),
        ]
    )
    hist = _histogram(pal, {"A": 50, "B": 30, "C": 10, "D": 5, "E": 3, "F": 2})

    kept = select_kept(hist, 3, pal, anchors=["X", "Y"])
    assert [k.id for k in kept] == ["X", "Y", "A"]

    mapping = reduce_palette(hist, 3, pal, anchors=["X", "Y"])
    assert mapping == {"B": "A", "C": "X", "D": "Y", "E": "A", "F": "X"}


def test_no_reduction_when_already_small(palette):
    hist = _histogram(palette, {"310": 5, "321": 3, "700": 1})
    assert reduce_palette(hist, 5, palette) == {}
    assert reduce_palette(hist, 3, palette) == {}


def test_disabled_or_empty_input_gives_empty_mapping(palette):
    hist = _histogram(palette, {cid: 1 for cid in _non_anchor_ids(palette, 10)})
    assert reduce_palette(hist, 0, palette) == {}
    assert reduce_palette(hist, -3, palette) == {}
    assert reduce_palette([], 5, palette) == {}


def test_bound_and_no_self_mapping(palette):
    rng = np.random.default_rng(5)
    ids = _non_anchor_ids(palette, 30) + ["310"]
    hist = _histogram(palette, {cid: int(n) for cid, n in zip(ids, rng.integers(1, 500, len(ids)))})
    for max_colors in (1, 3, 5, 8, 12):
        mapping = reduce_palette(hist, max_colors, palette)
        assert len(_final_ids(hist, mapping)) <= max_colors
        assert all(src != dst for src, dst in mapping.items())


def test_anchors_win_over_frequency(palette):
    ids = _non_anchor_ids(palette, 20)
    hist = _histogram(palette, {cid: 100 for cid in ids})
    mapping = reduce_palette(hist, 5, palette)
    assert set(mapping) == set(ids)
    assert set(mapping.values()) <= set(ANCHOR_IDS)


def test_anchor_truncation_keeps_declared_order(palette):
    hist = _histogram(palette, {cid: 10 for cid in _non_anchor_ids(palette, 12)})
    kept = select_kept(hist, 2, palette)
    assert [k.id for k in kept] == ANCHOR_IDS[:2]
    assert set(reduce_palette(hist, 2, palette).values()) <= set(ANCHOR_IDS[:2])


def test_anchor_in_histogram_is_not_kept_twice(palette):
    ids = _non_anchor_ids(palette, 10)
    counts = {"310": 1000}
    counts.update({cid: 50 - i for i, cid in enumerate(ids)})
    hist = _histogram(palette, counts)
    kept = [k.id for k in select_kept(hist, 7, palette)]
    assert kept == ANCHOR_IDS + ids[:2]
    assert "310" not in reduce_palette(hist, 7, palette)


def test_sort_histogram_breaks_ties_by_id(palette):
    hist = _histogram(palette, {"700": 5, "321": 5, "310": 9})
    assert [e.id for e in sort_histogram(hist)] == ["310", "321", "700"]


def test_histogram_mapping_input_is_accepted(palette):
    hist = _histogram(palette, {cid: 1 for cid in _non_anchor_ids(palette, 8)})
    as_dict = {e.id: e for e in hist}
    assert reduce_palette(as_dict, 6, palette) == reduce_palette(hist, 6, palette)


def test_kmeans_strategy_keeps_colours_near_centroids(palette):
    pixels = np.zeros((4, 4, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    pixels[:, 2:, :3] = 255
    hist = _histogram(palette, {"310": 8, "5200": 7, "3865": 1})
    mapping = compute_collapse_mapping(
        "kmeans", hist, 2, palette, pixels=pixels, rng=np.random.default_rng(0)
    )
    assert mapping == {"3865": "5200"}


def test_kmeans_strategy_needs_pixels(palette):
    hist = _histogram(palette, {cid: 1 for cid in _non_anchor_ids(palette, 4)})
    with pytest.raises(ValueError):
        compute_collapse_mapping("kmeans", hist, 2, palette)


def test_unknown_strategy_is_rejected(palette):
    with pytest.raises(ValueError):
        compute_collapse_mapping("median-cut", [], 3, palette)


def test_anchor_missing_from_store_is_dropped(palette):
    hist = _histogram(palette, {cid: 10 - i for i, cid in enumerate(_non_anchor_ids(palette, 8))})
    kept = [k.id for k in select_kept(hist, 3, palette, anchors=["NOPE", "310"])]
    assert kept[0] == "310"
    assert "NOPE" not in kept
    mapping = reduce_palette(hist, 3, palette, anchors=["NOPE", "310"])
    assert "NOPE" not in mapping.values()
    assert len(_final_ids(hist, mapping)) <= 3


def test_kmeans_without_opaque_pixels_still_respects_the_cap(palette):
    ids = _non_anchor_ids(palette, 12)
    hist = _histogram(palette, {cid: 1 for cid in ids})
    pixels = np.zeros((6, 6, 4), dtype=np.uint8)
    pixels[..., :3] = 120
    mapping = compute_collapse_mapping(
        "kmeans", hist, 5, palette, pixels=pixels, rng=np.random.default_rng(0)
    )
    assert len(_final_ids(hist, mapping)) <= 5
    assert set(mapping.values()) <= set(ANCHOR_IDS)
