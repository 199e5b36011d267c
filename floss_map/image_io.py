# floss_map/image_io.py
from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np
from PIL import Image, ImageCms, ImageOps

from .constants import DETAIL_MAX, DETAIL_MIN, MAX_PIXEL_SIZE, MIN_PIXEL_SIZE
from .core_types import U8Image, U8Rgba, assert_u8_image_rgba
from .materials import MaterialSummary

"""
Image I/O helpers: RGBA loading in sRGB, stitch-grid downsampling, pattern
PNG output and the JSON material report.
"""


def pillow_resample_from_name(name: str) -> Image.Resampling:
    """Map a string to a Pillow resampling filter enum."""
    if name == "nearest":
        return Image.Resampling.NEAREST
    if name == "box":
        return Image.Resampling.BOX
    if name == "bilinear":
        return Image.Resampling.BILINEAR
    if name == "bicubic":
        return Image.Resampling.BICUBIC
    if name == "lanczos":
        return Image.Resampling.LANCZOS
    raise ValueError(f"unknown resample filter {name!r}")


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")
    if not icc_bytes:
        return im.convert("RGBA")
    try:
        src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
        dst_prof = ImageCms.createProfile("sRGB")
        im2 = ImageCms.profileToProfile(
            im.convert("RGBA"),
            src_prof,
            dst_prof,
            renderingIntent=ImageCms.Intent.PERCEPTUAL,
            outputMode="RGBA",
        )
    except (ImageCms.PyCMSError, OSError, ValueError):
        # Broken or unsupported profile: use the pixels as they are.
        return im.convert("RGBA")
    return im.convert("RGBA") if im2 is None else im2


def load_image_rgba(path: Path) -> U8Rgba:
    """Load any Pillow-readable image as uint8 [H,W,4] sRGB."""
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgba(im0)
        return np.array(im, dtype=np.uint8)


def pixel_size_for_detail(detail: int) -> int:
    """
    Source pixels per stitch for a detail level.

    1 is the coarsest (25 px per stitch), 100 the finest (1 px per stitch).
    Out-of-range levels are clamped.
    """
    d = max(DETAIL_MIN, min(DETAIL_MAX, int(detail)))
    span = MAX_PIXEL_SIZE - MIN_PIXEL_SIZE
    return max(MIN_PIXEL_SIZE, int(np.floor(MAX_PIXEL_SIZE - (d / 100.0) * span)))


def grid_size_for_detail(width: int, height: int, detail: int) -> Tuple[int, int]:
    """(cols, rows) of the stitch grid; never smaller than 1x1."""
    ps = pixel_size_for_detail(detail)
    return max(1, width // ps), max(1, height // ps)


def downsample_to_grid(
    rgba: U8Rgba, detail: int, resample: Image.Resampling = Image.Resampling.BOX
) -> U8Rgba:
    """Resize an RGBA image to one pixel per stitch."""
    arr = assert_u8_image_rgba(rgba)
    h, w = arr.shape[:2]
    cols, rows = grid_size_for_detail(w, h, detail)
    if (cols, rows) == (w, h):
        return arr
    im = Image.fromarray(arr)
    return np.array(im.resize((cols, rows), resample=resample), dtype=np.uint8)


def save_pattern_png(path: Path, rgb: U8Image, scale: int = 1) -> Path:
    """
    Save the recoloured grid. Each stitch becomes a `scale` x `scale` block.
    Non-PNG suffixes are replaced with .png.
    """
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    h, w = rgb.shape[:2]
    out = np.full((h, w, 4), 255, dtype=np.uint8)
    out[..., :3] = rgb
    if scale > 1:
        out = np.repeat(np.repeat(out, scale, axis=0), scale, axis=1)
    Image.fromarray(out).save(path)
    return path


def write_report_json(path: Path, summary: MaterialSummary, extra: Optional[Dict[str, Any]] = None) -> Path:
    payload = summary.to_dict()
    if extra:
        payload.update(extra)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path


__all__ = [
    "pillow_resample_from_name",
    "load_image_rgba",
    "pixel_size_for_detail",
    "grid_size_for_detail",
    "downsample_to_grid",
    "save_pattern_png",
    "write_report_json",
]
