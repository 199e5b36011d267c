#!/usr/bin/env python3
"""
floss_pattern.py
Turn images into DMC cross-stitch patterns.

Usage:
  python floss_pattern.py INPUT --detail D --max-colors K --strategy [anchored|kmeans]
                          [--grey] [--override SRC=DST ...] [--palette-csv FILE]
                          [--scale S] [--report] [--seed N] --debug

Pipeline:
  load -> downsample to one pixel per stitch -> match every cell to the nearest
  thread -> manual overrides -> reduce to K colours -> material list.

Strategies:
  anchored : keep black, white, cyan, magenta and yellow, then the most used
             threads. Favours contrast over exact histogram coverage.
  kmeans   : keep the threads nearest to K-means centroids of the grid.

Output:
  <stem>_pattern.png next to INPUT (or in --outdir), one block per stitch.
  With --report also <stem>_pattern.json holding the material summary.
"""

from __future__ import annotations

import argparse
import io
import os
import sys
import threading
import time
from contextlib import contextmanager, redirect_stdout
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

import numpy as np

from floss_map.collapse import parse_override_pairs
from floss_map.constants import (
    DEFAULT_DETAIL,
    DEFAULT_MAX_COLORS,
    DEFAULT_MAX_ITERATIONS,
    IMAGE_EXTS,
    OUTPUT_SUFFIX,
)
from floss_map.image_io import (
    downsample_to_grid,
    load_image_rgba,
    pillow_resample_from_name,
    pixel_size_for_detail,
    save_pattern_png,
    write_report_json,
)
from floss_map.materials import material_report_lines
from floss_map.mode import STRATEGY_CHOICES, resolve_strategy
from floss_map.palette_data import ReferencePalette, construct_palette, load_palette_csv
from floss_map.pattern import PatternSettings, build_pattern
from floss_map.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

# CLI args & small helpers


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for pattern generation.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        detail: 1 (coarse) .. 100 (fine)
        max_colors: colour cap; 0 keeps every matched thread
        strategy: reduction strategy name
        grey: match by brightness only
        override: list of "SRC=DST" strings
        palette_csv: optional custom palette
        scale: output pixels per stitch
        resample: downsampling filter name
        report: also write the JSON material report
        seed: optional seed for the K-means re-seeding rng
        jobs: parallel file workers
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="floss_pattern",
        description="Turn image(s) into DMC cross-stitch patterns with a material list.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--detail",
        type=int,
        default=DEFAULT_DETAIL,
        help="Detail level 1-100. Higher means more, smaller stitches.",
    )
    parser.add_argument(
        "--max-colors",
        type=int,
        default=DEFAULT_MAX_COLORS,
        help="Thread colour cap. 0 keeps every matched colour.",
    )
    parser.add_argument(
        "--strategy",
        default="anchored",
        help=f"Reduction strategy: {', '.join(STRATEGY_CHOICES)}.",
    )
    parser.add_argument(
        "--grey", action="store_true", help="Black and white: match by brightness"
    )
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        metavar="SRC=DST",
        help="Redraw thread SRC as thread DST. Repeatable.",
    )
    parser.add_argument(
        "--palette-csv",
        type=Path,
        default=None,
        help="Custom palette CSV (id,r,g,b,name or id,hex,name)",
    )
    parser.add_argument(
        "--scale", type=int, default=10, help="Output pixels per stitch"
    )
    parser.add_argument(
        "--resample",
        choices=["nearest", "box", "bilinear", "bicubic", "lanczos"],
        default="box",
        help="Downsampling filter.",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=DEFAULT_MAX_ITERATIONS,
        help="K-means refinement cap",
    )
    parser.add_argument(
        "--report", action="store_true", help="Write <stem>_pattern.json"
    )
    parser.add_argument("--seed", type=int, default=None, help="K-means rng seed")
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def _settings_from_args(args: argparse.Namespace) -> PatternSettings:
    """Raises ValueError on an unknown strategy or malformed override."""
    return PatternSettings(
        detail=args.detail,
        max_colors=args.max_colors,
        strategy=resolve_strategy(args.strategy),
        match_mode="grey" if args.grey else "colour",
        overrides=parse_override_pairs(args.override),
        max_iterations=args.max_iterations,
    )


def _load_palette(csv_path: Optional[Path]) -> ReferencePalette:
    if csv_path is None:
        return construct_palette()
    return load_palette_csv(csv_path)


# Per-file processing


def _process_single_image(
    src_path: Path,
    outdir: Optional[Path],
    palette: ReferencePalette,
    settings: PatternSettings,
    resample_name: str,
    scale: int,
    write_report: bool,
    seed: Optional[int],
    debug: bool,
) -> None:
    """
    Process a single image path end-to-end:
      load -> downsample -> pattern -> save -> report.
    """
    t_start = time.perf_counter()
    base_dir = outdir if outdir is not None else src_path.parent
    out_path = base_dir / f"{src_path.stem}{OUTPUT_SUFFIX}.png"

    print_banner(src_path.name)

    rgba = load_image_rgba(src_path)
    height0, width0 = rgba.shape[:2]
    grid = downsample_to_grid(
        rgba, settings.detail, pillow_resample_from_name(resample_name)
    )
    height, width = grid.shape[:2]
    t_grid = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width0}x{height0}"),
                    ("Pixel size", pixel_size_for_detail(settings.detail)),
                    ("Grid", f"{width}x{height}"),
                    ("Resample", resample_name),
                ]
            )
        )

    rng = np.random.default_rng(seed)
    pattern = build_pattern(grid, palette, settings, rng=rng, debug=debug)
    t_pattern = time.perf_counter()

    out_path = save_pattern_png(out_path, pattern.rgb(palette), scale=max(1, scale))
    if write_report:
        write_report_json(
            out_path.with_suffix(".json"),
            pattern.summary,
            {"source": src_path.name, "mapping": pattern.mapping, "overrides": pattern.overrides},
        )
    t_save = time.perf_counter()

    log(f"Wrote {out_path.name} | grid={width}x{height} | colours={pattern.summary.colour_count}")
    log("Materials:")
    for line in material_report_lines(pattern.summary):
        log(line)

    if debug:
        debug_log(
            f"Total {format_total_duration_compact(t_save - t_start)}  "
            f"(load={format_seconds_compact(t_grid - t_start)}, "
            f"pattern={format_seconds_compact(t_pattern - t_grid)}, "
            f"save={format_seconds_compact(t_save - t_pattern)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_save - t_start)}")


class _PerThreadStdout(io.TextIOBase):
    """stdout stand-in: writes go to the calling thread's buffer, else to `fallback`."""

    def __init__(self, fallback: TextIO):
        self._fallback = fallback
        self._local = threading.local()

    def _target(self) -> TextIO:
        buf = getattr(self._local, "buf", None)
        return self._fallback if buf is None else buf

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        return self._target().write(text)

    def flush(self) -> None:
        self._target().flush()

    @contextmanager
    def capture(self) -> Iterator[io.StringIO]:
        self._local.buf = io.StringIO()
        try:
            yield self._local.buf
        finally:
            del self._local.buf


def _process_one_captured(out: _PerThreadStdout, path: Path, *args) -> str:
    """
    Process a single file with stdout capture.

    Useful for concurrent execution where output should be printed in order.
    """
    with out.capture() as buf:
        _process_single_image(path, *args)
        return buf.getvalue()


def _list_images(folder: Path) -> List[Path]:
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[List[str]] = None) -> None:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    try:
        settings = _settings_from_args(args)
        palette = _load_palette(args.palette_csv)
    except (ValueError, OSError) as e:
        error(str(e))
        sys.exit(2)

    print_config_line(
        "run",
        [
            ("Detail", settings.detail),
            ("Max colours", settings.max_colors),
            ("Strategy", settings.strategy),
            ("Match", settings.match_mode),
            ("Palette", len(palette)),
            ("Jobs", args.jobs),
        ],
        debug=False,
    )
    if args.debug and settings.overrides:
        debug_log(f"overrides: {settings.overrides}")

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        sys.exit(2)
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)

    common = (
        args.outdir,
        palette,
        settings,
        args.resample,
        args.scale,
        args.report,
        args.seed,
        args.debug,
    )

    try:
        if not src.is_dir():
            _process_single_image(src, *common)
            return

        files = _list_images(src)
        if args.debug:
            debug_log(
                key_value_pairs_to_string(
                    [("Images", len(files)), ("Jobs", args.jobs), ("CPU cores", os.cpu_count() or 1)]
                )
            )
        if args.jobs <= 1:
            for p in files:
                _process_single_image(p, *common)
        else:
            proxy = _PerThreadStdout(sys.stdout)
            with redirect_stdout(proxy), ThreadPoolExecutor(max_workers=args.jobs) as ex:
                futures = [
                    ex.submit(_process_one_captured, proxy, p, *common) for p in files
                ]
                blocks = [f.result() for f in futures]
            print("".join(blocks), end="", flush=True)
    except (ValueError, TypeError, OSError) as e:
        error(str(e))
        sys.exit(2)


if __name__ == "__main__":
    main()
