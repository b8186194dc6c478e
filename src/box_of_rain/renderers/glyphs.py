"""Glyph tables for box borders, arrowheads, corners and junction merging.

Everything here is immutable lookup data. The junction tables are derived
from the set of directions each line-drawing glyph connects, which keeps the
merge rules auditable: merging two glyphs yields the glyph that connects the
union of their directions.
"""

from __future__ import annotations

from dataclasses import dataclass

from box_of_rain.ir.types import BorderStyle, Side

# ─── Borders ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BorderGlyphs:
    """Corner, horizontal and vertical glyphs of one border style."""

    tl: str
    tr: str
    bl: str
    br: str
    h: str
    v: str


BORDERS: dict[BorderStyle, BorderGlyphs] = {
    BorderStyle.Single: BorderGlyphs("┌", "┐", "└", "┘", "─", "│"),
    BorderStyle.Double: BorderGlyphs("╔", "╗", "╚", "╝", "═", "║"),
    BorderStyle.Bold: BorderGlyphs("┏", "┓", "┗", "┛", "━", "┃"),
    BorderStyle.Rounded: BorderGlyphs("╭", "╮", "╰", "╯", "─", "│"),
    BorderStyle.Dashed: BorderGlyphs("┌", "┐", "└", "┘", "┄", "┆"),
}

SHADOW_CHAR = "░"
STRIKE_MARK = "\u0336"

# Glyphs a disabled overlay never strikes through.
STRUCTURE_CHARS: frozenset[str] = frozenset(
    ch for g in BORDERS.values() for ch in (g.tl, g.tr, g.bl, g.br, g.h, g.v)
) | {SHADOW_CHAR}


def border_glyphs(style: BorderStyle | str) -> BorderGlyphs:
    """Glyph set for ``style``; unknown styles fall back to single lines."""
    return BORDERS.get(style, BORDERS[BorderStyle.Single])


# ─── Connectors ─────────────────────────────────────────────────────────────

H_LINE = "─"
V_LINE = "│"

# Arrowheads point into the target box: entering its left side points right.
ARROW_HEADS: dict[Side, str] = {
    Side.Left: "▶",
    Side.Right: "◀",
    Side.Top: "▼",
    Side.Bottom: "▲",
}

# First turn of an L or U route, keyed by (horizontal dir, vertical dir).
FIRST_CORNERS: dict[tuple[int, int], str] = {
    (1, 1): "┐",
    (1, -1): "┘",
    (-1, 1): "┌",
    (-1, -1): "└",
}

# Second turn of an L route: the vertical run hands back to a horizontal run
# continuing in the same horizontal direction.
L_SECOND_CORNERS: dict[tuple[int, int], str] = {
    (1, 1): "└",
    (1, -1): "┌",
    (-1, 1): "┘",
    (-1, -1): "┐",
}

# Second turn of a U route: the horizontal run heads back the way it came.
U_SECOND_CORNERS: dict[tuple[int, int], str] = {
    (1, 1): "┘",
    (1, -1): "┐",
    (-1, 1): "└",
    (-1, -1): "┌",
}

# ─── Junction Merging ───────────────────────────────────────────────────────

# l/r/u/d: which neighbours a glyph connects to.
LINKS: dict[str, frozenset[str]] = {
    "─": frozenset("lr"),
    "│": frozenset("ud"),
    "┐": frozenset("ld"),
    "┌": frozenset("rd"),
    "┘": frozenset("lu"),
    "└": frozenset("ru"),
    "┬": frozenset("lrd"),
    "┴": frozenset("lru"),
    "┤": frozenset("lud"),
    "├": frozenset("rud"),
    "┼": frozenset("lrud"),
}

_GLYPH_FOR_LINKS: dict[frozenset[str], str] = {links: glyph for glyph, links in LINKS.items()}

CORNERS: frozenset[str] = frozenset("┐┌┘└")

# Glyphs where a route turns or branches; plain lines are excluded.
TURNS: frozenset[str] = frozenset(g for g, links in LINKS.items() if links not in (LINKS["─"], LINKS["│"]))


def _union(existing: str, incoming: str) -> str:
    return _GLYPH_FOR_LINKS[LINKS[existing] | LINKS[incoming]]


# (existing glyph, incoming corner) → merged glyph. A corner landing on any
# connector glyph keeps both: ─ + ┐ → ┬, ┐ + ┘ → ┤, │ + └ → ├, ┬ + ┘ → ┼.
CORNER_MERGES: dict[tuple[str, str], str] = {
    (existing, corner): _union(existing, corner) for existing in LINKS for corner in CORNERS
}

# (existing glyph, incoming run glyph) → merged glyph. A straight run only
# merges into glyphs where another route turns or branches; plain lines and
# box borders under it are overwritten by the run.
RUN_MERGES: dict[tuple[str, str], str] = {
    (existing, run): _union(existing, run) for existing in TURNS for run in (H_LINE, V_LINE)
}


def merge_corner(existing: str, corner: str) -> str:
    """Glyph to draw when ``corner`` lands on a cell holding ``existing``."""
    return CORNER_MERGES.get((existing, corner), corner)


def merge_run(existing: str, run: str) -> str:
    """Glyph to draw when a straight ``run`` glyph crosses ``existing``."""
    return RUN_MERGES.get((existing, run), run)
