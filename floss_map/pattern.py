# floss_map/pattern.py
from __future__ import annotations

"""
Stitch-grid pipeline.

One matching pass over unique cell colours yields per-cell palette indices
and the usage histogram; manual overrides are applied to that result. A
second, pure pass applies the computed collapse mapping and counts
materials. Nearest searches run once per unique colour, never per cell.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

from .collapse import apply_mapping_to_indices, sanitize_mapping
from .colour_select import compute_collapse_mapping
from .constants import DEFAULT_DETAIL, DEFAULT_MAX_COLORS, DEFAULT_MAX_ITERATIONS
from .core_types import (
    CollapseMapping,
    HistogramEntry,
    U8Image,
    U8Rgba,
    rgba_from_buffer,
)
from .materials import MaterialSummary, build_material_summary
from .matching import MatchMode, match_rows
from .mode import ReductionStrategy, reduction_enabled
from .palette_data import ReferencePalette
from .utils import (
    debug_log,
    key_value_pairs_to_string,
    unique_colours_with_inverse,
    warn,
)


@dataclass(frozen=True)
class PatternSettings:
    """Everything that, when changed, requires a full recomputation."""

    detail: int = DEFAULT_DETAIL  # consumed by image_io.downsample_to_grid
    max_colors: Optional[int] = DEFAULT_MAX_COLORS
    strategy: ReductionStrategy = "anchored"
    match_mode: MatchMode = "colour"
    overrides: Mapping[str, str] = field(default_factory=dict)
    max_iterations: int = DEFAULT_MAX_ITERATIONS


@dataclass(frozen=True)
class MatchPass:
    indices: np.ndarray  # int32 [H,W] palette indices, overrides applied
    histogram: Tuple[HistogramEntry, ...]
    fallback_cells: int
    override_misses: int


@dataclass(frozen=True)
class StitchPattern:
    width: int
    height: int
    indices: np.ndarray  # int32 [H,W] final palette indices
    histogram: Tuple[HistogramEntry, ...]  # before collapse
    mapping: CollapseMapping  # computed collapse only
    overrides: CollapseMapping
    summary: MaterialSummary
    fallback_cells: int = 0

    def id_grid(self, palette: ReferencePalette) -> List[List[str]]:
        return [[palette[int(i)].id for i in row] for row in self.indices]

    def symbol_grid(self, palette: ReferencePalette) -> List[List[str]]:
        symbols = {e.id: e.symbol for e in self.summary.entries}
        return [[symbols[palette[int(i)].id] for i in row] for row in self.indices]

    def rgb(self, palette: ReferencePalette) -> U8Image:
        """uint8 [H,W,3] recoloured grid."""
        return palette.rgb_array()[self.indices]


def _as_cell_grid(cells: np.ndarray) -> np.ndarray:
    arr = np.asarray(cells)
    if arr.ndim != 3 or arr.shape[-1] not in (3, 4):
        raise ValueError(f"expected [H,W,3] or [H,W,4] cells, got shape {arr.shape}")
    return arr


def _pixels_for_sampling(cells: np.ndarray) -> U8Rgba:
    """uint8 RGBA copy suitable for the quantizer's sampler."""
    h, w = cells.shape[:2]
    out = np.full((h, w, 4), 255, dtype=np.uint8)
    rgb = np.nan_to_num(cells[..., :3].astype(np.float64), nan=255.0, posinf=255.0, neginf=0.0)
    out[..., :3] = np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)
    if cells.shape[-1] == 4:
        alpha = np.nan_to_num(cells[..., 3].astype(np.float64), nan=0.0)
        out[..., 3] = np.clip(alpha, 0, 255).astype(np.uint8)
    return out


def match_cells(
    cells: np.ndarray,
    palette: ReferencePalette,
    overrides: Optional[Mapping[str, str]] = None,
    mode: MatchMode = "colour",
) -> MatchPass:
    """
    Match every cell to the palette and count usage.

    Cells are [H,W,3] or [H,W,4]; alpha is ignored here. Overrides are
    applied before counting so the histogram reflects them.
    """
    grid = _as_cell_grid(cells)
    h, w = grid.shape[:2]
    uniq, counts, inverse = unique_colours_with_inverse(grid[..., :3])

    idx_u, fallback_rows = match_rows(palette, uniq, mode)
    fallback_cells = 0
    if fallback_rows:
        finite = np.isfinite(uniq.astype(np.float64)).all(axis=1)
        fallback_cells = int(counts[~finite].sum())

    idx_u, misses = apply_mapping_to_indices(idx_u, overrides or {}, palette)
    cell_idx = idx_u[inverse].reshape(h, w).astype(np.int32, copy=False)

    per_palette = np.bincount(cell_idx.ravel(), minlength=len(palette))
    histogram = tuple(
        HistogramEntry.from_reference(palette[int(i)], int(per_palette[i]))
        for i in np.flatnonzero(per_palette)
    )
    return MatchPass(cell_idx, histogram, fallback_cells, misses)


def _final_counts(indices: np.ndarray, palette: ReferencePalette) -> Dict[str, int]:
    per_palette = np.bincount(indices.ravel(), minlength=len(palette))
    return {palette[int(i)].id: int(per_palette[i]) for i in np.flatnonzero(per_palette)}


def build_pattern(
    cells: np.ndarray,
    palette: ReferencePalette,
    settings: PatternSettings = PatternSettings(),
    *,
    rng: Optional[np.random.Generator] = None,
    debug: bool = False,
) -> StitchPattern:
    """
    Full recomputation for one request:
      match -> overrides -> histogram -> collapse mapping -> final grid -> materials
    """
    grid = _as_cell_grid(cells)
    h, w = grid.shape[:2]
    overrides = sanitize_mapping(settings.overrides)

    matched = match_cells(grid, palette, overrides, settings.match_mode)
    if matched.fallback_cells:
        warn(f"{matched.fallback_cells:,} cell(s) had unusable colour data; drawn as {palette.white().name}")
    if matched.override_misses:
        warn(f"{matched.override_misses} override(s) reference unknown colours; skipped")

    mapping: CollapseMapping = {}
    if reduction_enabled(settings.max_colors):
        mapping = compute_collapse_mapping(
            settings.strategy,
            matched.histogram,
            int(settings.max_colors),  # type: ignore[arg-type]
            palette,
            pixels=_pixels_for_sampling(grid) if settings.strategy == "kmeans" else None,
            rng=rng,
            max_iterations=settings.max_iterations,
            debug=debug,
        )

    final_idx, _ = apply_mapping_to_indices(matched.indices, mapping, palette)
    summary = build_material_summary(
        _final_counts(final_idx, palette), palette, total_cells=h * w, width=w, height=h
    )

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Grid", f"{w}x{h}"),
                    ("Match", settings.match_mode),
                    ("Matched colours", len(matched.histogram)),
                    ("Overrides", len(overrides)),
                    ("Final colours", summary.colour_count),
                ]
            )
        )

    return StitchPattern(
        width=w,
        height=h,
        indices=final_idx,
        histogram=matched.histogram,
        mapping=mapping,
        overrides=overrides,
        summary=summary,
        fallback_cells=matched.fallback_cells,
    )


def build_pattern_from_buffer(
    data: Union[bytes, bytearray, np.ndarray],
    width: int,
    height: int,
    palette: ReferencePalette,
    settings: PatternSettings = PatternSettings(),
    *,
    rng: Optional[np.random.Generator] = None,
    debug: bool = False,
) -> StitchPattern:
    """Same as build_pattern for a flat row-major RGBA buffer."""
    return build_pattern(
        rgba_from_buffer(data, width, height), palette, settings, rng=rng, debug=debug
    )


__all__ = [
    "PatternSettings",
    "MatchPass",
    "StitchPattern",
    "match_cells",
    "build_pattern",
    "build_pattern_from_buffer",
]
