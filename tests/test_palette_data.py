# tests/test_palette_data.py
import numpy as np
import pytest

from floss_map.constants import ANCHOR_IDS
from floss_map.core_types import ReferenceColor, hex_to_rgb, rgb_to_hex
from floss_map.palette_data import PALETTE, ReferencePalette, construct_palette, load_palette_csv


def test_builtin_palette_has_anchors_and_white():
    palette = construct_palette()
    assert len(palette) == len(PALETTE)
    for anchor_id in ANCHOR_IDS:
        assert anchor_id in palette
    assert palette.by_id("310").rgb == (0, 0, 0)
    assert palette.white().id == "5200"


def test_builtin_ids_are_unique():
    ids = [row[0] for row in PALETTE]
    assert len(ids) == len(set(ids))


def test_lookup_preserves_store_order():
    palette = construct_palette()
    assert palette.all()[0].id == PALETTE[0][0]
    assert palette.index_of("310") == [row[0] for row in PALETTE].index("310")
    assert palette.by_id("no-such-thread") is None
    assert palette.index_of("no-such-thread") is None


def test_duplicate_id_returns_first_entry():
    palette = ReferencePalette(
        [
            ReferenceColor("A", 1, 2, 3, "first"),
            ReferenceColor("A", 9, 9, 9, "second"),
        ]
    )
    assert palette.by_id("A").name == "first"


def test_white_falls_back_to_nearest_white_entry():
    palette = ReferencePalette(
        [
            ReferenceColor("K", 0, 0, 0, "black"),
            ReferenceColor("W", 250, 250, 250, "almost white"),
        ],
        white_id="missing",
    )
    assert palette.white().id == "W"


def test_empty_palette_has_no_white():
    with pytest.raises(LookupError):
        ReferencePalette([]).white()


def test_rgb_array_is_read_only():
    arr = construct_palette().rgb_array()
    assert arr.dtype == np.uint8
    assert arr.shape == (len(PALETTE), 3)
    with pytest.raises(ValueError):
        arr[0, 0] = 1


def test_hex_helpers():
    assert hex_to_rgb("#ff8000") == (255, 128, 0)
    assert hex_to_rgb("00ff00") == (0, 255, 0)
    assert rgb_to_hex((255, 128, 0)) == "#ff8000"
    with pytest.raises(ValueError):
        hex_to_rgb("#12345")


def test_load_palette_csv_rgb_columns(tmp_path):
    path = tmp_path / "pal.csv"
    path.write_text("id,r,g,b,name\nK,0,0,0,Black\nW,255,255,255,White\n", encoding="utf-8")
    palette = load_palette_csv(path, white_id="W")
    assert [c.id for c in palette] == ["K", "W"]
    assert palette.white().name == "White"


def test_load_palette_csv_hex_columns(tmp_path):
    path = tmp_path / "pal.csv"
    path.write_text("id,hex,name\nR,#ff0000,Red\nG,00ff00,Green\n", encoding="utf-8")
    palette = load_palette_csv(path)
    assert palette.by_id("G").rgb == (0, 255, 0)


def test_load_palette_csv_rejects_bad_input(tmp_path):
    bad_header = tmp_path / "bad.csv"
    bad_header.write_text("code,colour\n1,red\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_palette_csv(bad_header)

    out_of_range = tmp_path / "range.csv"
    out_of_range.write_text("id,r,g,b,name\nX,0,300,0,Too green\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_palette_csv(out_of_range)
