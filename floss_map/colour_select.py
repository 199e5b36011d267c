# floss_map/colour_select.py
from __future__ import annotations

"""
Palette reduction.

Exports:
  resolve_anchors(palette, anchors) -> list[ReferenceColor]
  sort_histogram(histogram) -> list[HistogramEntry]
  select_kept(histogram, max_colors, palette, anchors) -> list[Swatch]
  collapse_to_kept(histogram, kept) -> CollapseMapping
  reduce_palette(histogram, max_colors, palette, anchors) -> CollapseMapping
  reduce_by_quantization(histogram, max_colors, palette, pixels, rng) -> CollapseMapping
  compute_collapse_mapping(strategy, histogram, max_colors, palette, ...) -> CollapseMapping

Strategies:
  "anchored": keep the anchor colours (black, white, cyan, magenta, yellow)
              first, then the most used colours. This favours structural
              contrast over exact histogram coverage; it is a product choice.
  "kmeans":   keep the reference colours nearest to K-means centroids of the
              raw pixels.
Both collapse every other histogram colour onto its nearest kept colour.

Edge policy (both strategies):
  max_colors <= 0        -> {} (no reduction)
  empty histogram        -> {}
  distinct <= max_colors -> {} (nothing to collapse)
"""

import math
from typing import Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np

from .constants import ANCHOR_IDS, DEFAULT_MAX_ITERATIONS
from .core_types import CollapseMapping, HistogramEntry, ReferenceColor, squared_distance
from .matching import match_nearest
from .mode import ReductionStrategy
from .palette_data import ReferencePalette
from .quantize import PixelInput, quantize
from .utils import debug_log, key_value_pairs_to_string

Swatch = Union[ReferenceColor, HistogramEntry]
HistogramInput = Union[Iterable[HistogramEntry], Mapping[str, HistogramEntry]]


def _entries(histogram: HistogramInput) -> List[HistogramEntry]:
    if isinstance(histogram, Mapping):
        return list(histogram.values())
    return list(histogram)


def resolve_anchors(
    palette: ReferencePalette, anchors: Sequence[str] = ANCHOR_IDS
) -> List[ReferenceColor]:
    """Anchor colours in declared order; duplicates and unknown ids dropped."""
    out: List[ReferenceColor] = []
    seen = set()
    for anchor_id in anchors:
        colour = palette.by_id(anchor_id)
        if colour is None or colour.id in seen:
            continue
        out.append(colour)
        seen.add(colour.id)
    return out


def sort_histogram(histogram: HistogramInput) -> List[HistogramEntry]:
    """Most used first; ties by id ascending."""
    return sorted(_entries(histogram), key=lambda e: (-e.count, e.id))


def select_kept(
    histogram: HistogramInput,
    max_colors: int,
    palette: ReferencePalette,
    anchors: Sequence[str] = ANCHOR_IDS,
) -> List[Swatch]:
    """
    Kept set for the anchored strategy.

    Anchors come first in declared order, then histogram entries by usage,
    until max_colors. With fewer slots than anchors a prefix of the anchors
    is kept.
    """
    if max_colors <= 0:
        return []
    kept: List[Swatch] = list(resolve_anchors(palette, anchors))
    if len(kept) >= max_colors:
        return kept[:max_colors]

    kept_ids = {k.id for k in kept}
    for entry in sort_histogram(histogram):
        if len(kept) >= max_colors:
            break
        if entry.id in kept_ids:
            continue
        kept.append(entry)
        kept_ids.add(entry.id)
    return kept


def nearest_swatch(rgb: Sequence[float], kept: Sequence[Swatch]) -> Swatch:
    """Nearest kept colour; ties go to the earlier kept entry."""
    best = kept[0]
    best_d = math.inf
    for swatch in kept:
        d = squared_distance(rgb, swatch.rgb)
        if d < best_d:
            best, best_d = swatch, d
    return best


def collapse_to_kept(histogram: HistogramInput, kept: Sequence[Swatch]) -> CollapseMapping:
    """Map every histogram entry outside `kept` onto its nearest kept colour."""
    if not kept:
        return {}
    kept_ids = {k.id for k in kept}
    mapping: CollapseMapping = {}
    for entry in sort_histogram(histogram):
        if entry.id in kept_ids:
            continue
        mapping[entry.id] = nearest_swatch(entry.rgb, kept).id
    return mapping


def _needs_reduction(entries: List[HistogramEntry], max_colors: int) -> bool:
    if max_colors <= 0 or not entries:
        return False
    return len({e.id for e in entries}) > max_colors


def reduce_palette(
    histogram: HistogramInput,
    max_colors: int,
    palette: ReferencePalette,
    anchors: Sequence[str] = ANCHOR_IDS,
) -> CollapseMapping:
    """Anchored greedy reduction to at most max_colors colours."""
    entries = _entries(histogram)
    if not _needs_reduction(entries, max_colors):
        return {}
    kept = select_kept(entries, max_colors, palette, anchors)
    return collapse_to_kept(entries, kept)


def reduce_by_quantization(
    histogram: HistogramInput,
    max_colors: int,
    palette: ReferencePalette,
    pixels: Optional[PixelInput],
    rng: Optional[np.random.Generator] = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    anchors: Sequence[str] = ANCHOR_IDS,
) -> CollapseMapping:
    """
    Reduction whose kept set is the reference colours nearest to K-means
    centroids of the raw pixels (deduplicated, centroid slot order).

    When no pixel is opaque enough to sample, the anchored kept set is used
    so the cap still holds.
    """
    entries = _entries(histogram)
    if not _needs_reduction(entries, max_colors):
        return {}
    if pixels is None:
        raise ValueError("kmeans reduction needs the raw pixel data")

    kept: List[Swatch] = []
    kept_ids = set()
    for centroid in quantize(pixels, max_colors, max_iterations, rng):
        colour = match_nearest(palette, centroid.r, centroid.g, centroid.b)
        if colour.id not in kept_ids:
            kept.append(colour)
            kept_ids.add(colour.id)
    if not kept:
        kept = select_kept(entries, max_colors, palette, anchors)
    return collapse_to_kept(entries, kept)


def compute_collapse_mapping(
    strategy: ReductionStrategy,
    histogram: HistogramInput,
    max_colors: int,
    palette: ReferencePalette,
    *,
    pixels: Optional[PixelInput] = None,
    rng: Optional[np.random.Generator] = None,
    anchors: Sequence[str] = ANCHOR_IDS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    debug: bool = False,
) -> CollapseMapping:
    """Single entry point for every reduction strategy."""
    histogram = _entries(histogram)
    if strategy == "anchored":
        mapping = reduce_palette(histogram, max_colors, palette, anchors)
    elif strategy == "kmeans":
        mapping = reduce_by_quantization(
            histogram, max_colors, palette, pixels, rng, max_iterations, anchors
        )
    else:
        raise ValueError(f"unknown reduction strategy {strategy!r}")

    if debug:
        entries = sort_histogram(histogram)
        targets = sorted(set(mapping.values()))
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Strategy", strategy),
                    ("Max colours", int(max_colors)),
                    ("Histogram", len(entries)),
                    ("Collapsed", len(mapping)),
                    ("Targets", len(targets)),
                ]
            )
        )
        total = sum(e.count for e in entries) or 1
        for e in entries[:12]:
            mark = "->" + mapping[e.id] if e.id in mapping else "*"
            debug_log(f"  {e.id:>6}  share={e.count / total:.1%}  {mark}")

    return mapping


__all__ = [
    "Swatch",
    "resolve_anchors",
    "sort_histogram",
    "select_kept",
    "nearest_swatch",
    "collapse_to_kept",
    "reduce_palette",
    "reduce_by_quantization",
    "compute_collapse_mapping",
]
