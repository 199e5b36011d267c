# floss_map/__init__.py
"""
floss_map package.

Purpose:
  Turn images into DMC cross-stitch patterns: match colours to thread,
  reduce the thread count, and list the materials. See floss_pattern.py for CLI.

Public API:
  match_nearest      : nearest reference colour for one RGB triple.
  reduce_palette     : anchored greedy reduction to a collapse mapping.
  quantize           : K-means dominant colours of raw RGBA pixels.
  build_pattern      : full grid pipeline (match, overrides, reduce, materials).
  palette_data       : built-in DMC table, ReferencePalette, CSV loader.
  core_types         : shared types (ReferenceColor, HistogramEntry, Centroid).
  collapse           : mapping helpers (apply, compose, overrides).
  materials          : skeins, symbols and the material summary.
  image_io           : Pillow loading, grid downsampling, PNG/JSON output.
  utils              : shared helpers (unique colours, logging).

Quick start:
  from floss_map import construct_palette, build_pattern, PatternSettings
  palette = construct_palette()
  pattern = build_pattern(rgba_grid, palette, PatternSettings(max_colors=12))
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import collapse
from . import colour_select
from . import core_types
from . import image_io
from . import materials
from . import palette_data
from . import utils

from .colour_select import compute_collapse_mapping, reduce_palette
from .core_types import Centroid, HistogramEntry, ReferenceColor
from .matching import match_nearest, match_nearest_grey
from .palette_data import PALETTE, ReferencePalette, construct_palette
from .pattern import PatternSettings, StitchPattern, build_pattern
from .quantize import quantize

__all__ = [
    "__version__",
    "collapse",
    "colour_select",
    "core_types",
    "image_io",
    "materials",
    "palette_data",
    "utils",
    "PALETTE",
    "ReferencePalette",
    "construct_palette",
    "ReferenceColor",
    "HistogramEntry",
    "Centroid",
    "match_nearest",
    "match_nearest_grey",
    "reduce_palette",
    "compute_collapse_mapping",
    "quantize",
    "PatternSettings",
    "StitchPattern",
    "build_pattern",
]
