"""Tests for renderers/connection.py — route shapes, junction merging, labels, shared turn columns."""

from __future__ import annotations

from box_of_rain.canvas import Canvas
from box_of_rain.geometry import Point
from box_of_rain.ir.types import ChildBoxes, Connection, DiagramNode, Side, TextLine
from box_of_rain.renderers.box import draw_box
from box_of_rain.renderers.connection import (
    RouteShape,
    draw_connection,
    route_connection,
    shared_mid_x,
    sibling_routes,
)

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_box(box_id: str, x: int, y: int, w: int = 5, h: int = 3) -> DiagramNode:
    """Create a positioned top-level box."""
    return DiagramNode(id=box_id, x=x, y=y, width=w, height=h)


def make_canvas(boxes: list[DiagramNode], w: int, h: int) -> Canvas:
    """Create a canvas with ``boxes`` already drawn."""
    c = Canvas(w, h)
    for box in boxes:
        draw_box(c, box)
    return c


def conn(src: str, dst: str, label: str | None = None, **sides) -> Connection:
    return Connection(from_id=src, to_id=dst, label=label, **sides)


# ─── Shape Selection ──────────────────────────────────────────────────────────


class TestRouteSelection:
    """Side detection and routing-shape choice."""

    def test_same_row_is_straight(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 15, 0)]
        route = route_connection(conn("a", "b"), boxes)
        assert route is not None
        assert route.shape is RouteShape.Straight
        assert (route.from_side, route.to_side) == (Side.Right, Side.Left)
        assert (route.src, route.dst) == (Point(5, 1), Point(14, 1))

    def test_offset_rows_is_l_shaped(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 15, 6)]
        route = route_connection(conn("a", "b"), boxes)
        assert route is not None
        assert route.shape is RouteShape.LShape

    def test_dominant_vertical_axis(self) -> None:
        boxes = [make_box("a", 0, 0, 10), make_box("b", 0, 8, 10)]
        route = route_connection(conn("a", "b"), boxes)
        assert route is not None
        assert route.shape is RouteShape.Vertical
        assert (route.from_side, route.to_side) == (Side.Bottom, Side.Top)

    def test_leftward(self) -> None:
        boxes = [make_box("a", 20, 0), make_box("b", 0, 0)]
        route = route_connection(conn("a", "b"), boxes)
        assert route is not None
        assert (route.from_side, route.to_side) == (Side.Left, Side.Right)

    def test_same_side_is_u_shaped(self) -> None:
        boxes = [make_box("a", 5, 0, 10), make_box("b", 5, 5, 10)]
        route = route_connection(conn("a", "b", from_side=Side.Right, to_side=Side.Right), boxes)
        assert route is not None
        assert route.shape is RouteShape.UShape

    def test_one_explicit_side_defaults_the_other(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 0, 8)]
        route = route_connection(conn("a", "b", from_side=Side.Bottom), boxes)
        assert route is not None
        assert (route.from_side, route.to_side) == (Side.Bottom, Side.Left)

    def test_missing_endpoint(self) -> None:
        assert route_connection(conn("a", "zzz"), [make_box("a", 0, 0)]) is None


# ─── Literal Scenarios ────────────────────────────────────────────────────────


class TestRouteShapes:
    """Exact glyph positions for each routing shape."""

    def test_straight(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 15, 0)]
        c = make_canvas(boxes, 25, 5)
        draw_connection(c, conn("a", "b"), boxes)
        assert c.get(6, 1) == "─"
        assert c.get(14, 1) == "▶"
        assert c.row(1) == "│   │ ────────▶│   │     "

    def test_straight_leftward_arrow_at_destination(self) -> None:
        boxes = [make_box("a", 20, 0), make_box("b", 0, 0)]
        c = Canvas(30, 5)
        draw_connection(c, conn("a", "b"), boxes)
        assert c.get(5, 1) == "◀"
        assert c.get(18, 1) == "─"
        assert c.get(19, 1) == " "

    def test_l_shaped(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 15, 6)]
        c = make_canvas(boxes, 25, 12)
        draw_connection(c, conn("a", "b"), boxes)
        assert c.get(14, 7) == "▶"
        assert c.get(9, 1) == "┐"
        assert all(c.get(9, row) == "│" for row in range(2, 7))
        assert c.get(9, 7) == "└"
        assert c.get(8, 1) == "─"
        assert c.get(10, 7) == "─"

    def test_l_shaped_upward(self) -> None:
        boxes = [make_box("a", 0, 6), make_box("b", 15, 0)]
        c = Canvas(25, 12)
        draw_connection(c, conn("a", "b"), boxes)
        assert c.get(9, 7) == "┘"
        assert c.get(9, 1) == "┌"
        assert c.get(14, 1) == "▶"

    def test_u_shaped(self) -> None:
        boxes = [make_box("a", 5, 0, 10), make_box("b", 5, 5, 10)]
        c = make_canvas(boxes, 25, 10)
        draw_connection(c, conn("a", "b", from_side=Side.Right, to_side=Side.Right), boxes)
        assert c.get(15, 5 + 3 // 2) == "◀"
        assert c.get(16, 1) == "┐"
        assert c.get(16, 6) == "┘"

    def test_u_shaped_right_going_down(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 0, 5)]
        c = make_canvas(boxes, 15, 10)
        draw_connection(c, conn("a", "b", from_side=Side.Right, to_side=Side.Right), boxes)
        assert c.get(6, 1) == "┐", "first corner: right then down"
        assert c.get(6, 6) == "┘", "second corner: down then left"

    def test_u_shaped_right_going_up(self) -> None:
        boxes = [make_box("a", 0, 5), make_box("b", 0, 0)]
        c = make_canvas(boxes, 15, 10)
        draw_connection(c, conn("a", "b", from_side=Side.Right, to_side=Side.Right), boxes)
        assert c.get(6, 6) == "┘", "first corner: right then up"
        assert c.get(6, 1) == "┐", "second corner: up then left"

    def test_u_shaped_left(self) -> None:
        boxes = [make_box("a", 5, 0), make_box("b", 5, 5)]
        c = make_canvas(boxes, 15, 10)
        draw_connection(c, conn("a", "b", from_side=Side.Left, to_side=Side.Left), boxes)
        assert c.get(3, 1) == "┌"
        assert c.get(3, 6) == "└"
        assert c.get(4, 6) == "▶"

    def test_u_shape_clears_shadows(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 0, 5)]
        boxes[0].shadow = True
        c = make_canvas(boxes, 15, 10)
        draw_connection(c, conn("a", "b", from_side=Side.Right, to_side=Side.Right), boxes)
        assert c.get(8, 1) == "┐"

    def test_vertical(self) -> None:
        boxes = [make_box("a", 0, 0, 10), make_box("b", 0, 8, 10)]
        c = make_canvas(boxes, 20, 12)
        draw_connection(c, conn("a", "b", label="ok"), boxes)
        assert all(c.get(5, row) == "│" for row in range(3, 7))
        assert c.get(5, 7) == "▼"
        assert c.get(7, 5) + c.get(8, 5) == "ok"

    def test_unknown_side_uses_left_anchor_and_default_arrow(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 15, 0)]
        c = Canvas(25, 5)
        draw_connection(c, conn("a", "b", from_side="diagonal", to_side="diagonal"), boxes)
        assert c.get(14, 1) == "▶"

    def test_missing_ids_draw_nothing(self) -> None:
        boxes = [make_box("a", 0, 0)]
        c = make_canvas(boxes, 25, 5)
        before = c.to_string()
        draw_connection(c, conn("a", "nonexistent"), boxes)
        draw_connection(c, conn("nonexistent", "a"), boxes)
        assert c.to_string() == before

    def test_self_loop_draws_nothing(self) -> None:
        boxes = [DiagramNode(id="a", x=0, y=0, width=12, height=5, content=TextLine("Alpha"))]
        c = make_canvas(boxes, 25, 7)
        before = c.to_string()
        draw_connection(c, conn("a", "a"), boxes)
        assert c.to_string() == before
        assert "Alpha" in c.row(2)

    def test_nested_endpoint(self) -> None:
        child = make_box("child", 2, 1, 10, 3)
        parent = DiagramNode(id="parent", x=0, y=0, width=20, height=7)
        parent.content = ChildBoxes([child])
        boxes = [parent, make_box("other", 40, 2, 10, 3)]
        route = route_connection(conn("child", "other"), boxes)
        assert route is not None
        assert route.src == Point(13, 3)


# ─── Junctions ────────────────────────────────────────────────────────────────


class TestJunctions:
    """Routes from one source share cells and merge into tee glyphs."""

    def setup_method(self) -> None:
        self.boxes = [
            make_box("gateway", 0, 0, 10),
            make_box("auth", 20, 0, 10),
            make_box("orders", 20, 6, 10),
        ]
        self.conns = [conn("gateway", "auth"), conn("gateway", "orders")]

    def test_tee_when_straight_drawn_first(self) -> None:
        c = make_canvas(self.boxes, 35, 12)
        for cn in self.conns:
            draw_connection(c, cn, self.boxes, siblings=self.conns)
        assert c.get(14, 1) == "┬"

    def test_tee_when_l_drawn_first(self) -> None:
        c = make_canvas(self.boxes, 35, 12)
        for cn in reversed(self.conns):
            draw_connection(c, cn, self.boxes, siblings=self.conns)
        assert c.get(14, 1) == "┬"

    def test_branch_keeps_vertical_run(self) -> None:
        c = make_canvas(self.boxes, 35, 12)
        for cn in self.conns:
            draw_connection(c, cn, self.boxes, siblings=self.conns)
        assert c.get(14, 4) == "│"
        assert c.get(14, 7) == "└"
        assert c.get(19, 7) == "▶"


class TestSharedMidX:
    """Labeled L-shaped siblings pull the shared turn column toward the source."""

    def setup_method(self) -> None:
        self.boxes = [
            make_box("s", 0, 4, 10),
            make_box("t1", 40, 0, 10),
            make_box("t2", 40, 8, 10),
        ]
        self.conns = [conn("s", "t1", label="a very long label"), conn("s", "t2")]

    def test_siblings_share_source_and_direction(self) -> None:
        route = route_connection(self.conns[1], self.boxes)
        assert route is not None
        group = sibling_routes(route, self.conns, self.boxes)
        assert len(group) == 2

    def test_shifted_column(self) -> None:
        route = route_connection(self.conns[1], self.boxes)
        assert route is not None
        group = sibling_routes(route, self.conns, self.boxes)
        # t1 needs 17 + 4 columns before its arrowhead at 39: turn at 18, not 24.
        assert shared_mid_x(route, group) == 18

    def test_unlabeled_siblings_keep_default(self) -> None:
        conns = [conn("s", "t1"), conn("s", "t2")]
        route = route_connection(conns[0], self.boxes)
        assert route is not None
        assert shared_mid_x(route, sibling_routes(route, conns, self.boxes)) == 24

    def test_unreachable_label_keeps_default(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 12, 4)]
        route = route_connection(conn("a", "b", label="toolong"), boxes)
        assert route is not None
        # 11 - (7 + 4) = 0 lies left of the source anchor at 5: turn halfway.
        assert shared_mid_x(route, [route]) == 8

    def test_drawn_routes_share_one_column(self) -> None:
        c = make_canvas(self.boxes, 55, 14)
        for cn in self.conns:
            draw_connection(c, cn, self.boxes, siblings=self.conns)
        assert c.get(18, 5) == "┤"
        assert c.get(18, 1) == "┌"
        assert c.get(18, 9) == "└"
        assert "a very long label" in c.row(1)

    def test_without_siblings_turns_halfway(self) -> None:
        c = make_canvas(self.boxes, 55, 14)
        draw_connection(c, self.conns[1], self.boxes)
        assert c.get(24, 5) == "┐"


# ─── Labels ───────────────────────────────────────────────────────────────────


class TestLabels:
    """Labels are padded, centred and never overwrite corners."""

    def test_straight_label_centred_with_clearance(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 20, 0)]
        c = Canvas(30, 5)
        draw_connection(c, conn("a", "b", label="HTTPS"), boxes)
        assert c.row(1)[6:20] == "─── HTTPS ───▶"

    def test_straight_label_keeps_fill_glyph_before_it(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 14, 0)]
        c = Canvas(25, 5)
        draw_connection(c, conn("a", "b", label="ab"), boxes)
        assert c.row(1)[6:14] == "─ ab ──▶"

    def test_straight_label_fills_tight_gap(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 14, 0)]
        c = Canvas(25, 5)
        draw_connection(c, conn("a", "b", label="abcd"), boxes)
        assert c.row(1)[6:14] == " abcd ─▶"

    def test_l_label_on_destination_segment(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 30, 6)]
        c = Canvas(40, 12)
        draw_connection(c, conn("a", "b", label="db"), boxes)
        assert c.row(7)[18:30] == "─── db ────▶"
        assert c.get(17, 7) == "└"

    def test_l_label_dropped_when_it_does_not_fit(self) -> None:
        boxes = [make_box("a", 0, 0), make_box("b", 12, 4)]
        c = Canvas(20, 10)
        draw_connection(c, conn("a", "b", label="toolong"), boxes)
        assert "toolong" not in c.to_string()
        assert c.get(8, 1) == "┐"
        assert c.get(8, 5) == "└"

    def test_straight_label_avoids_junction(self) -> None:
        boxes = [
            make_box("gateway", 0, 0, 10),
            make_box("auth", 40, 0, 10),
            make_box("orders", 40, 6, 10),
        ]
        conns = [conn("gateway", "orders"), conn("gateway", "auth", label="login")]
        c = make_canvas(boxes, 55, 12)
        for cn in conns:
            draw_connection(c, cn, boxes, siblings=conns)
        row = c.row(1)
        assert c.get(24, 1) == "┬"
        assert "login" in row
        assert row.index("login") > 24
