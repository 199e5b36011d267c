# tests/test_materials.py
import pytest

from floss_map.constants import SYMBOLS
from floss_map.materials import (
    assign_symbols,
    build_material_summary,
    estimated_hours,
    material_report_lines,
    skeins_needed,
)
from floss_map.palette_data import construct_palette


def test_skeins_round_up():
    assert skeins_needed(0) == 0
    assert skeins_needed(1) == 1
    assert skeins_needed(2000) == 1
    assert skeins_needed(2001) == 2


def test_symbols_follow_sorted_ids_and_cycle():
    symbols = assign_symbols(["700", "310", "5200", "310"])
    assert symbols == {"310": "A", "5200": "B", "700": "C"}

    many = assign_symbols([f"id{i:03d}" for i in range(len(SYMBOLS) + 2)])
    assert many["id000"] == SYMBOLS[0]
    assert many[f"id{len(SYMBOLS):03d}"] == SYMBOLS[0]


def test_summary_orders_by_count_and_skips_unknown_ids():
    palette = construct_palette()
    summary = build_material_summary(
        {"310": 10, "5200": 2500, "321": 10, "ghost": 7, "700": 0},
        palette,
        total_cells=2520,
        width=60,
        height=42,
    )
    assert [e.id for e in summary.entries] == ["5200", "310", "321"]
    assert summary.entries[0].skeins == 2
    assert summary.symbol_of("310") == "A"
    with pytest.raises(KeyError):
        summary.symbol_of("700")

    report = summary.to_dict()
    assert report["totalCells"] == 2520
    assert (report["width"], report["height"]) == (60, 42)
    assert set(report["entries"][0]) == {"id", "r", "g", "b", "name", "count", "symbol", "skeins"}


def test_time_estimate_and_report_lines():
    assert estimated_hours(250) == pytest.approx(2.5)
    summary = build_material_summary({"310": 250}, construct_palette(), total_cells=250)
    lines = material_report_lines(summary)
    assert "Black" in lines[0]
    assert lines[-1].startswith("Total stitches: 250")
    assert "2.5 hrs" in lines[-1]


def test_empty_counts_give_empty_summary():
    summary = build_material_summary({}, construct_palette(), total_cells=0)
    assert summary.entries == ()
    assert summary.colour_count == 0
