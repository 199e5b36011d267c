# floss_map/constants.py
"""
Global tunables used across the project.

- Anchor colours kept by every anchored reduction
- Matcher fallback id
- Quantizer sampling knobs
- Material estimates (skeins, stitching time) and chart symbols
- Grid / CLI defaults
"""
from __future__ import annotations

from typing import List

# ==========================
# Reference palette anchors
# ==========================
BLACK_ID: str = "310"
WHITE_ID: str = "5200"  # Snow White; also the matcher's fail-closed default

# Declared order matters: when max_colors is smaller than this list the
# reducer keeps a prefix of it.
ANCHOR_IDS: List[str] = [
    BLACK_ID,
    WHITE_ID,
    "996",  # Electric Blue Medium (cyan)
    "602",  # Cranberry Medium (magenta)
    "444",  # Lemon Dark (yellow)
]

# =================
# Quantizer (KMEANS)
# =================
SAMPLE_BUDGET: int = 2000
OPAQUE_ALPHA_MIN: int = 128  # alpha must be strictly above this
DEFAULT_MAX_ITERATIONS: int = 5

# ===========
# Matcher
# ===========
MATCH_CHUNK_ROWS: int = 4096

# ===================
# Materials / chart
# ===================
STITCHES_PER_SKEIN: int = 2000  # 2 strands on 14-count aida
STITCHES_PER_HOUR: int = 100
SYMBOLS: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789#*@+"

# ============
# Grid / CLI
# ============
DEFAULT_MAX_COLORS: int = 15
DEFAULT_DETAIL: int = 50
DETAIL_MIN: int = 1
DETAIL_MAX: int = 100
MAX_PIXEL_SIZE: int = 25
MIN_PIXEL_SIZE: int = 1
OUTPUT_SUFFIX: str = "_pattern"
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif"}
