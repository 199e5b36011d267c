# floss_map/collapse.py
from __future__ import annotations

"""
Collapse mapping helpers.

A collapse mapping is a plain dict of source id -> target id. Manual
overrides and reducer output share this type.

Functions:
  sanitize_mapping(mapping) -> CollapseMapping
  compose_mappings(first, then) -> CollapseMapping
  apply_mapping(colour, mapping, palette) -> ReferenceColor
  mapping_lookup_table(mapping, palette) -> (lut, misses)
  apply_mapping_to_indices(indices, mapping, palette) -> (indices, misses)
  override_from_rgb(palette, source_id, rgb) -> CollapseMapping
  parse_override_pairs(["SRC=DST", ...]) -> CollapseMapping

Application is a single lookup per cell, never transitive. Targets missing
from the store are skipped and the cell keeps its colour.
"""

from typing import Iterable, Mapping, Sequence, Tuple

import numpy as np

from .core_types import CollapseMapping, ReferenceColor
from .matching import match_nearest
from .palette_data import ReferencePalette


def sanitize_mapping(mapping: Mapping[str, str]) -> CollapseMapping:
    """Copy with self-mappings removed and ids coerced to str."""
    return {str(src): str(dst) for src, dst in mapping.items() if str(src) != str(dst)}


def compose_mappings(first: Mapping[str, str], then: Mapping[str, str]) -> CollapseMapping:
    """
    Mapping equivalent to applying `first` and then `then`.

    Each id resolves through at most one entry of each mapping. Entries that
    end where they started are dropped. The result is meant for single-lookup
    application: a target may also appear as a source, e.g.
    compose({"A": "B"}, {"C": "A"}) == {"A": "B", "C": "A"}.
    """
    out: CollapseMapping = {}
    for src in list(first.keys()) + [k for k in then.keys() if k not in first]:
        mid = first.get(src, src)
        dst = then.get(mid, mid)
        if dst != src:
            out[src] = dst
    return out


def apply_mapping(
    colour: ReferenceColor, mapping: Mapping[str, str], palette: ReferencePalette
) -> ReferenceColor:
    """Mapped colour, or the input when unmapped or the target is unknown."""
    target_id = mapping.get(colour.id)
    if target_id is None:
        return colour
    target = palette.by_id(target_id)
    return colour if target is None else target


def mapping_lookup_table(
    mapping: Mapping[str, str], palette: ReferencePalette
) -> Tuple[np.ndarray, int]:
    """
    Palette-index lookup table for a mapping.

    Returns:
      lut: int32 [P], lut[i] is the index cells at palette index i become
      misses: mapping entries skipped because source or target is not in the store
    """
    lut = np.arange(len(palette), dtype=np.int32)
    misses = 0
    for src_id, dst_id in mapping.items():
        i = palette.index_of(src_id)
        j = palette.index_of(dst_id)
        if i is None or j is None:
            misses += 1
            continue
        lut[i] = j
    return lut, misses


def apply_mapping_to_indices(
    indices: np.ndarray, mapping: Mapping[str, str], palette: ReferencePalette
) -> Tuple[np.ndarray, int]:
    """Apply a mapping to an array of palette indices."""
    if not mapping:
        return indices, 0
    lut, misses = mapping_lookup_table(mapping, palette)
    return lut[indices], misses


def override_from_rgb(
    palette: ReferencePalette, source_id: str, rgb: Sequence[float]
) -> CollapseMapping:
    """
    Override that redraws `source_id` as the reference colour nearest a picked
    RGB. Empty when the pick lands on the source itself.
    """
    picked = match_nearest(palette, rgb[0], rgb[1], rgb[2])
    if picked.id == source_id:
        return {}
    return {source_id: picked.id}


def parse_override_pairs(pairs: Iterable[str]) -> CollapseMapping:
    """Parse CLI 'SRC=DST' pairs. Raises ValueError on malformed input."""
    out: CollapseMapping = {}
    for raw in pairs:
        src, sep, dst = raw.partition("=")
        src, dst = src.strip(), dst.strip()
        if not sep or not src or not dst:
            raise ValueError(f"override must look like SRC=DST, got {raw!r}")
        out[src] = dst
    return sanitize_mapping(out)


__all__ = [
    "sanitize_mapping",
    "compose_mappings",
    "apply_mapping",
    "mapping_lookup_table",
    "apply_mapping_to_indices",
    "override_from_rgb",
    "parse_override_pairs",
]
