"""Auto-layout — fills in missing positions and sizes for a whole diagram.

Pipeline:
  1. Copy the tree (the caller's tree is never touched).
  2. Size every top-level box, laying out containers bottom-up.
  3. Layer top-level boxes by longest path over the connections between
     them, attributing nested endpoints to their top-level ancestor.
  4. Order each layer by the median position of its predecessors.
  5. Assign coordinates column by column, centre columns vertically, and
     size the canvas around the result.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from box_of_rain.config import LayoutOptions
from box_of_rain.ir.types import Connection, DiagramNode, clone, collect_connections, iter_boxes
from box_of_rain.layout.containers import auto_size_box, layout_children, shadow_h, shadow_w
from box_of_rain.layout.layering import (
    build_graph,
    compute_layer_gaps,
    group_layers,
    longest_path_layers,
    order_layers,
)
from box_of_rain.logging import get_logger

logger = get_logger(__name__)

# Disconnected top-level boxes beyond this count wrap into a grid.
GRID_WRAP_THRESHOLD: int = 4
GRID_MAX_COLUMNS: int = 4

TOP_MARGIN: int = 1  # leaves room for labels above the first row


def is_fully_explicit(diagram: DiagramNode) -> bool:
    """True when the canvas and every box at every depth have explicit geometry."""
    if diagram.width is None or diagram.height is None:
        return False
    return all(box.has_geometry for box in iter_boxes(diagram.children))


def auto_size_canvas(diagram: DiagramNode) -> None:
    """Size the canvas to the bounding box of the top-level boxes, shadows included."""
    max_x = 0
    max_y = 0
    for box in diagram.children:
        max_x = max(max_x, (box.x or 0) + (box.width or 0) + shadow_w(box))
        max_y = max(max_y, (box.y or 0) + (box.height or 0) + shadow_h(box))
    if diagram.width is None:
        diagram.width = max_x + 2
    if diagram.height is None:
        diagram.height = max_y + 1


def top_level_owners(boxes: list[DiagramNode]) -> dict[str, str]:
    """Map every box id in the tree to the id of its top-level ancestor.

    Top-level ids take precedence over nested boxes reusing the same id.
    """
    owners: dict[str, str] = {b.id: b.id for b in boxes if b.id is not None}
    for box in boxes:
        if box.id is None:
            continue
        for nested in iter_boxes(box.children):
            if nested.id is not None:
                owners.setdefault(nested.id, box.id)
    return owners


def top_level_connections(conns: list[Connection], owners: dict[str, str]) -> list[Connection]:
    """Lift connections to top-level endpoints, dropping those inside one box."""
    lifted: list[Connection] = []
    for conn in conns:
        src = owners.get(conn.from_id)
        tgt = owners.get(conn.to_id)
        if src is None or tgt is None or src == tgt:
            continue
        lifted.append(
            Connection(from_id=src, to_id=tgt, label=conn.label, from_side=conn.from_side, to_side=conn.to_side)
        )
    return lifted


def _wrap_grid(boxes: list[DiagramNode], opts: LayoutOptions) -> None:
    """Place disconnected boxes row-major on a grid of at most four columns."""
    cols = min(GRID_MAX_COLUMNS, math.ceil(math.sqrt(len(boxes))))
    rows = math.ceil(len(boxes) / cols)
    col_w = [0] * cols
    row_h = [0] * rows
    for i, box in enumerate(boxes):
        r, c = divmod(i, cols)
        col_w[c] = max(col_w[c], (box.width or 0) + shadow_w(box))
        row_h[r] = max(row_h[r], (box.height or 0) + shadow_h(box))

    logger.debug("wrapping %d disconnected boxes into %d x %d grid", len(boxes), rows, cols)
    for i, box in enumerate(boxes):
        r, c = divmod(i, cols)
        if box.x is None:
            box.x = sum(col_w[:c]) + c * opts.default_h_gap
        if box.y is None:
            box.y = TOP_MARGIN + sum(row_h[:r]) + r * opts.v_gap


def _assign_columns(
    layers: list[list[DiagramNode]],
    gaps: list[int],
    opts: LayoutOptions,
) -> None:
    cur_x = 0
    column_heights: list[int] = []
    auto_y: list[list[DiagramNode]] = []
    for group, gap in zip(layers, gaps):
        cur_y = TOP_MARGIN
        max_w = 0
        placed: list[DiagramNode] = []
        for box in group:
            if box.x is None:
                box.x = cur_x
            if box.y is None:
                box.y = cur_y
                placed.append(box)
            cur_y += (box.height or 0) + shadow_h(box) + opts.v_gap
            max_w = max(max_w, (box.width or 0) + shadow_w(box))
        column_heights.append(cur_y - opts.v_gap)
        auto_y.append(placed)
        cur_x += max_w + gap

    # Centre shorter columns against the tallest one.
    tallest = max(column_heights, default=0)
    for placed, height in zip(auto_y, column_heights):
        offset = (tallest - height) // 2
        if offset > 0:
            for box in placed:
                box.y = (box.y or 0) + offset


def auto_layout(
    diagram: DiagramNode,
    options: LayoutOptions | Mapping[str, Any] | None = None,
) -> DiagramNode:
    """Return a copy of ``diagram`` where every box has x, y, width and height.

    Explicit values are kept. Cycles, self-loops and connections to unknown
    ids never raise; they fall back to default placement.

    Args:
        diagram: Root node of the diagram.
        options: ``LayoutOptions``, a mapping of option keys, or None.

    Returns:
        A new, fully positioned tree.
    """
    opts = LayoutOptions.coerce(options)
    tree = clone(diagram)
    if is_fully_explicit(tree):
        return tree

    boxes = tree.children
    conns = collect_connections(tree)

    for box in boxes:
        if box.children:
            layout_children(box, conns, opts)
        auto_size_box(box, opts)

    if all(b.x is not None and b.y is not None for b in boxes):
        auto_size_canvas(tree)
        return tree

    owners = top_level_owners(boxes)
    top_conns = top_level_connections(conns, owners)
    graph = build_graph(boxes, [(c.from_id, c.to_id) for c in top_conns])
    layers = group_layers(boxes, longest_path_layers(graph))

    if graph.number_of_edges() == 0 and len(layers) == 1 and len(layers[0]) > 1:
        if len(layers[0]) > GRID_WRAP_THRESHOLD:
            _wrap_grid(layers[0], opts)
            auto_size_canvas(tree)
            return tree
        # Spread disconnected boxes into a row instead of one column.
        layers = [[box] for box in layers[0]]

    layers = order_layers(layers, top_conns)
    gaps = compute_layer_gaps(layers, top_conns, opts.default_h_gap)
    _assign_columns(layers, gaps, opts)

    auto_size_canvas(tree)
    return tree
