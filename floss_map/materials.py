# floss_map/materials.py
from __future__ import annotations

"""
Material list for a finished stitch grid.

Each used thread colour gets a chart symbol, a stitch count and a skein
estimate. Skeins assume 6-strand floss stitched with 2 strands on 14-count
aida (about 2000 stitches per skein).
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .constants import STITCHES_PER_HOUR, STITCHES_PER_SKEIN, SYMBOLS
from .core_types import ColourId, rgb_to_hex
from .palette_data import ReferencePalette


@dataclass(frozen=True)
class MaterialEntry:
    id: ColourId
    r: int
    g: int
    b: int
    name: str
    count: int
    symbol: str
    skeins: int

    @property
    def hex(self) -> str:
        return rgb_to_hex((self.r, self.g, self.b))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "r": self.r,
            "g": self.g,
            "b": self.b,
            "name": self.name,
            "count": self.count,
            "symbol": self.symbol,
            "skeins": self.skeins,
        }


@dataclass(frozen=True)
class MaterialSummary:
    entries: Tuple[MaterialEntry, ...] = field(default_factory=tuple)
    total_cells: int = 0
    width: int = 0
    height: int = 0

    @property
    def colour_count(self) -> int:
        return len(self.entries)

    @property
    def estimated_hours(self) -> float:
        return estimated_hours(self.total_cells)

    def symbol_of(self, colour_id: ColourId) -> str:
        for entry in self.entries:
            if entry.id == colour_id:
                return entry.symbol
        raise KeyError(colour_id)

    def to_dict(self) -> Dict[str, Any]:
        """Report shape consumed by exporters."""
        return {
            "entries": [e.to_dict() for e in self.entries],
            "totalCells": self.total_cells,
            "width": self.width,
            "height": self.height,
        }


def skeins_needed(count: int, per_skein: int = STITCHES_PER_SKEIN) -> int:
    """Whole skeins needed for `count` stitches."""
    if count <= 0:
        return 0
    return int(math.ceil(count / float(per_skein)))


def estimated_hours(total_cells: int, per_hour: int = STITCHES_PER_HOUR) -> float:
    return total_cells / float(per_hour)


def assign_symbols(colour_ids: Iterable[ColourId], alphabet: str = SYMBOLS) -> Dict[ColourId, str]:
    """Symbols by sorted id, cycling through the alphabet when it runs out."""
    ordered = sorted(set(colour_ids))
    return {cid: alphabet[i % len(alphabet)] for i, cid in enumerate(ordered)}


def build_material_summary(
    counts: Mapping[ColourId, int],
    palette: ReferencePalette,
    total_cells: int,
    width: int = 0,
    height: int = 0,
) -> MaterialSummary:
    """
    Summarise final per-colour counts.

    Ids with no count, or unknown to the store, are left out. Entries are
    ordered by count descending, then id.
    """
    used = {cid: int(n) for cid, n in counts.items() if int(n) > 0 and cid in palette}
    symbols = assign_symbols(used.keys())
    entries: List[MaterialEntry] = []
    for cid, n in sorted(used.items(), key=lambda kv: (-kv[1], kv[0])):
        colour = palette[palette.index_of(cid)]  # type: ignore[index]
        entries.append(
            MaterialEntry(
                id=colour.id,
                r=colour.r,
                g=colour.g,
                b=colour.b,
                name=colour.name,
                count=n,
                symbol=symbols[cid],
                skeins=skeins_needed(n),
            )
        )
    return MaterialSummary(tuple(entries), int(total_cells), int(width), int(height))


def material_report_lines(summary: MaterialSummary) -> List[str]:
    """Human-readable rows for the CLI."""
    lines = [
        f"  {e.symbol}  {e.id:>6}  {e.hex}  {e.name}: {e.count:,} stitches, {e.skeins} skein(s)"
        for e in summary.entries
    ]
    lines.append(
        f"Total stitches: {summary.total_cells:,}  "
        f"Colours: {summary.colour_count}  "
        f"Est. time: {summary.estimated_hours:.1f} hrs"
    )
    return lines


__all__ = [
    "MaterialEntry",
    "MaterialSummary",
    "skeins_needed",
    "estimated_hours",
    "assign_symbols",
    "build_material_summary",
    "material_report_lines",
]
