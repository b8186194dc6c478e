"""Connection router — draws arrows between boxes onto a shared canvas.

Routing shapes, chosen in priority order:
  1. Vertical  — both sides top/bottom: one vertical run.
  2. U-shaped  — same left/right side on both ends, different rows: the route
                 swings around the outermost box on that side.
  3. Straight  — source and destination on the same row.
  4. L-shaped  — horizontal, vertical, horizontal with two turns.

Every cell a route touches is merged with what is already on the canvas
(see ``glyphs.merge_run`` / ``glyphs.merge_corner``), so routes drawn later
join earlier ones with tee and cross glyphs instead of cutting through them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from box_of_rain.canvas import Canvas
from box_of_rain.geometry import Point, ResolvedBox, get_anchor, resolve_box
from box_of_rain.ir.types import Connection, DiagramNode, Side
from box_of_rain.logging import get_logger
from box_of_rain.renderers.glyphs import (
    ARROW_HEADS,
    FIRST_CORNERS,
    H_LINE,
    L_SECOND_CORNERS,
    TURNS,
    U_SECOND_CORNERS,
    V_LINE,
    merge_corner,
    merge_run,
)

logger = get_logger(__name__)

DEFAULT_ARROW = "▶"
LABEL_CLEARANCE: int = 4  # label length + padding + one fill glyph each side

_SIDE_VALUES = {s.value for s in Side}


class RouteShape(str, Enum):
    Vertical = "vertical"
    UShape = "u"
    Straight = "straight"
    LShape = "l"


@dataclass(frozen=True)
class Route:
    """A connection resolved to anchor points and a routing shape."""

    conn: Connection
    src: Point
    dst: Point
    from_side: Side | str
    to_side: Side | str
    shape: RouteShape

    @property
    def h_dir(self) -> int:
        return 1 if self.dst.x > self.src.x else -1

    @property
    def y_dir(self) -> int:
        return 1 if self.dst.y > self.src.y else -1


# ─── Side Detection & Shape Selection ───────────────────────────────────────


def _side(value: Side | str | None, default: Side) -> Side | str:
    if value is None:
        return default
    if value in _SIDE_VALUES:
        return Side(value)
    return value


def detect_sides(conn: Connection, src: ResolvedBox, dst: ResolvedBox) -> tuple[Side | str, Side | str]:
    """Pick exit and entry sides.

    Explicit sides win; a missing one defaults to right (exit) or left
    (entry). With neither given, the dominant axis between the box centres
    decides: vertical sides when |dy| > |dx|, horizontal otherwise.
    """
    if conn.from_side is not None or conn.to_side is not None:
        return _side(conn.from_side, Side.Right), _side(conn.to_side, Side.Left)

    dx = (dst.abs_x + dst.width / 2) - (src.abs_x + src.width / 2)
    dy = (dst.abs_y + dst.height / 2) - (src.abs_y + src.height / 2)
    if abs(dy) > abs(dx):
        return (Side.Bottom, Side.Top) if dy > 0 else (Side.Top, Side.Bottom)
    return (Side.Right, Side.Left) if dx > 0 else (Side.Left, Side.Right)


def _select_shape(from_side: Side | str, to_side: Side | str, src: Point, dst: Point) -> RouteShape:
    vertical_sides = (Side.Top, Side.Bottom)
    if from_side in vertical_sides and to_side in vertical_sides:
        return RouteShape.Vertical
    if from_side == to_side and from_side in (Side.Left, Side.Right) and src.y != dst.y:
        return RouteShape.UShape
    if src.y == dst.y:
        return RouteShape.Straight
    return RouteShape.LShape


def route_connection(
    conn: Connection,
    boxes: list[DiagramNode],
    index: dict[str, ResolvedBox] | None = None,
) -> Route | None:
    """Resolve ``conn`` against the tree; None when an endpoint id is unknown."""
    if index is not None:
        src_box = index.get(conn.from_id)
        dst_box = index.get(conn.to_id)
    else:
        src_box = resolve_box(conn.from_id, boxes)
        dst_box = resolve_box(conn.to_id, boxes)
    if src_box is None or dst_box is None:
        return None

    from_side, to_side = detect_sides(conn, src_box, dst_box)
    src = get_anchor(src_box, from_side)
    dst = get_anchor(dst_box, to_side)
    return Route(
        conn=conn,
        src=src,
        dst=dst,
        from_side=from_side,
        to_side=to_side,
        shape=_select_shape(from_side, to_side, src, dst),
    )


# ─── Shared Turn Column ─────────────────────────────────────────────────────


def default_mid_x(route: Route) -> int:
    return (route.src.x + route.dst.x) // 2


def shared_mid_x(route: Route, siblings: list[Route]) -> int:
    """Column where an L-shaped route turns.

    Siblings are routes leaving the same anchor in the same horizontal
    direction. Normally a route turns halfway. When any labeled L-shaped
    sibling needs its label to sit between the turn and its destination
    and the halfway column leaves too little room, every sibling turns at
    the most source-ward column any of them needs, so they share one
    vertical run.
    """
    own = default_mid_x(route)
    h = route.h_dir
    l_routes = [r for r in siblings if r.shape is RouteShape.LShape]
    required = [
        (r, r.dst.x - h * (len(r.conn.label) + LABEL_CLEARANCE)) for r in l_routes if r.conn.label
    ]
    # a column outside the open span cannot make the label fit
    required = [(r, req) for r, req in required if h * (req - r.src.x) > 0 and h * (r.dst.x - req) > 0]
    if not any(h * (req - default_mid_x(r)) < 0 for r, req in required):
        return own

    candidates = [default_mid_x(r) for r in l_routes] + [req for _, req in required]
    if h > 0:
        mid = min(candidates)
        return min(max(mid, route.src.x + 1), route.dst.x - 1)
    mid = max(candidates)
    return max(min(mid, route.src.x - 1), route.dst.x + 1)


def sibling_routes(
    route: Route,
    connections: list[Connection],
    boxes: list[DiagramNode],
    index: dict[str, ResolvedBox] | None = None,
) -> list[Route]:
    """Routes from ``connections`` sharing ``route``'s source anchor and direction."""
    group: list[Route] = []
    for conn in connections:
        if conn.from_id != route.conn.from_id:
            continue
        other = route if conn is route.conn else route_connection(conn, boxes, index)
        if other is None or other.src != route.src or other.h_dir != route.h_dir:
            continue
        group.append(other)
    if not any(r is route for r in group):
        group.append(route)
    return group


# ─── Drawing Primitives ─────────────────────────────────────────────────────


def _run(canvas: Canvas, x: int, y: int, glyph: str) -> None:
    canvas.set(x, y, merge_run(canvas.get(x, y), glyph))


def _corner(canvas: Canvas, x: int, y: int, corner: str) -> None:
    canvas.set(x, y, merge_corner(canvas.get(x, y), corner))


def place_label(canvas: Canvas, label: str, first: int, last: int, y: int) -> None:
    """Write `` label `` centred over the cells first..last of row ``y``.

    When the segment has room, at least one fill glyph is kept on each side.
    """
    padded = f" {label} "
    start = (first + last + 1) // 2 - len(padded) // 2
    if last - first + 1 >= len(padded) + 2:
        start = max(start, first + 1)
        start = min(start, last - len(padded))
    canvas.write_text(start, y, padded)


def _label_dropped(route: Route) -> None:
    logger.debug(
        "label %r does not fit on %s route %s -> %s",
        route.conn.label,
        route.shape.value,
        route.conn.from_id,
        route.conn.to_id,
    )


def _place_in_segment(canvas: Canvas, route: Route, a: int, b: int, y: int) -> bool:
    """Place the label over the open cells strictly between columns a and b."""
    label = route.conn.label or ""
    if abs(b - a) - 1 < len(label) + 2:
        return False
    lo, hi = sorted((a, b))
    place_label(canvas, label, lo + 1, hi - 1, y)
    return True


# ─── Shapes ─────────────────────────────────────────────────────────────────


def _draw_vertical(canvas: Canvas, route: Route, arrow: str) -> None:
    src, dst = route.src, route.dst
    x = (src.x + dst.x + 1) // 2
    top, bottom = sorted((src.y, dst.y))
    for row in range(top, bottom + 1):
        _run(canvas, x, row, V_LINE)
    canvas.set(x, dst.y, arrow)
    if route.conn.label:
        canvas.write_text(x + 2, (top + bottom) // 2, route.conn.label)


def _draw_u(canvas: Canvas, route: Route, arrow: str, boxes: list[DiagramNode]) -> None:
    src, dst = route.src, route.dst
    d = 1 if route.from_side == Side.Right else -1
    v = route.y_dir

    if d > 0:
        edges = [(b.x or 0) + (b.width or 0) + (2 if b.shadow else 0) for b in boxes]
        extend = max([src.x, dst.x, *edges]) + 1
    else:
        extend = min([src.x, dst.x, *[(b.x or 0) for b in boxes]]) - 1

    for col in range(src.x + d, extend, d):
        _run(canvas, col, src.y, H_LINE)
    _corner(canvas, extend, src.y, FIRST_CORNERS[(d, v)])
    for row in range(src.y + v, dst.y, v):
        _run(canvas, extend, row, V_LINE)
    _corner(canvas, extend, dst.y, U_SECOND_CORNERS[(d, v)])
    for col in range(extend - d, dst.x, -d):
        _run(canvas, col, dst.y, H_LINE)
    canvas.set(dst.x, dst.y, arrow)

    if route.conn.label:
        if abs(extend - src.x) >= abs(extend - dst.x):
            placed = _place_in_segment(canvas, route, src.x, extend, src.y)
        else:
            placed = _place_in_segment(canvas, route, dst.x, extend, dst.y)
        if not placed:
            _label_dropped(route)


def _free_segments(canvas: Canvas, first: int, last: int, y: int, reserved: set[int]) -> list[tuple[int, int]]:
    segments: list[tuple[int, int]] = []
    start: int | None = None
    for col in range(first, last + 1):
        blocked = col in reserved or canvas.get(col, y) in TURNS
        if blocked:
            if start is not None:
                segments.append((start, col - 1))
                start = None
        elif start is None:
            start = col
    if start is not None:
        segments.append((start, last))
    return segments


def _draw_straight(canvas: Canvas, route: Route, arrow: str, reserved: set[int]) -> None:
    src, dst = route.src, route.dst
    lo, hi = sorted((src.x, dst.x))
    for col in range(lo + 1, hi):
        _run(canvas, col, src.y, H_LINE)
    canvas.set(dst.x, dst.y, arrow)

    label = route.conn.label
    if not label:
        return
    segments = _free_segments(canvas, lo + 1, hi - 1, src.y, reserved)
    if segments == [(lo + 1, hi - 1)] or lo + 1 > hi - 1:
        place_label(canvas, label, lo + 1, hi - 1, src.y)
        return
    # Keep clear of junctions: use the longest stretch between them.
    if segments:
        first, last = max(segments, key=lambda s: s[1] - s[0])
        if last - first + 1 >= len(label) + 2:
            place_label(canvas, label, first, last, src.y)
            return
    _label_dropped(route)


def _draw_l(canvas: Canvas, route: Route, arrow: str, mid_x: int) -> None:
    src, dst = route.src, route.dst
    h, v = route.h_dir, route.y_dir

    for col in range(src.x + h, mid_x, h):
        _run(canvas, col, src.y, H_LINE)
    _corner(canvas, mid_x, src.y, FIRST_CORNERS[(h, v)])
    for row in range(src.y + v, dst.y, v):
        _run(canvas, mid_x, row, V_LINE)
    _corner(canvas, mid_x, dst.y, L_SECOND_CORNERS[(h, v)])
    for col in range(mid_x + h, dst.x, h):
        _run(canvas, col, dst.y, H_LINE)
    canvas.set(dst.x, dst.y, arrow)

    if route.conn.label:
        placed = _place_in_segment(canvas, route, mid_x, dst.x, dst.y) or _place_in_segment(
            canvas, route, src.x, mid_x, src.y
        )
        if not placed:
            _label_dropped(route)


# ─── Public Entry Point ─────────────────────────────────────────────────────


def draw_connection(
    canvas: Canvas,
    conn: Connection,
    boxes: list[DiagramNode],
    siblings: list[Connection] | None = None,
    index: dict[str, ResolvedBox] | None = None,
) -> None:
    """Route and draw one connection.

    Args:
        canvas: Canvas already holding the boxes.
        conn: The connection to draw.
        boxes: Top-level boxes; endpoint ids are searched in the whole tree.
        siblings: All connections of the diagram. Those leaving the same
            anchor share one turn column with ``conn``.
        index: Optional precomputed ``index_boxes`` map for id lookups.

    A connection with an unknown endpoint, or one from a box to itself, is
    skipped without drawing anything.
    """
    if conn.from_id == conn.to_id:
        logger.debug("skipping self-loop on %s", conn.from_id)
        return
    route = route_connection(conn, boxes, index)
    if route is None:
        logger.debug("skipping connection %s -> %s: endpoint not found", conn.from_id, conn.to_id)
        return

    arrow = ARROW_HEADS.get(route.to_side, DEFAULT_ARROW)

    if route.shape is RouteShape.Vertical:
        _draw_vertical(canvas, route, arrow)
        return
    if route.shape is RouteShape.UShape:
        _draw_u(canvas, route, arrow, boxes)
        return

    group = sibling_routes(route, siblings, boxes, index) if siblings else [route]
    if route.shape is RouteShape.Straight:
        reserved = {shared_mid_x(r, group) for r in group if r.shape is RouteShape.LShape}
        _draw_straight(canvas, route, arrow, reserved)
    else:
        _draw_l(canvas, route, arrow, shared_mid_x(route, group))
