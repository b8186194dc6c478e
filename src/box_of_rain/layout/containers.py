"""Container layout — sizes boxes and places children inside their parent.

Runs bottom-up: the deepest containers are laid out first so every child
already has its final size when its parent positions it.
"""

from __future__ import annotations

import math

from box_of_rain.config import LayoutOptions
from box_of_rain.ir.types import ChildDirection, Connection, DiagramNode
from box_of_rain.layout.layering import build_graph, compute_layer_gaps, group_layers, longest_path_layers

# Spacing between children of a horizontally laid out container.
CHILD_H_GAP: int = 5
CHILD_V_GAP: int = 1

# Equalize sibling widths when the narrowest is at least this share of the widest.
EQUALIZE_RATIO: float = 0.7

SHADOW_W: int = 2
SHADOW_H: int = 1


def shadow_w(box: DiagramNode) -> int:
    return SHADOW_W if box.shadow else 0


def shadow_h(box: DiagramNode) -> int:
    return SHADOW_H if box.shadow else 0


def auto_size_box(box: DiagramNode, opts: LayoutOptions) -> None:
    """Fill in a missing width/height from text content and title."""
    lines = box.text_lines or []
    longest = max((len(line) for line in lines), default=0)
    title_len = len(box.title) if box.title else 0
    if box.width is None:
        box.width = max(longest + 4, title_len + 6, opts.min_box_width)
    if box.height is None:
        box.height = max(len(lines) + 2, opts.min_box_height)


def equalize_widths(boxes: list[DiagramNode]) -> None:
    """Give auto-sized siblings of similar width the same width."""
    if len(boxes) < 2:
        return
    widths = [b.width or 0 for b in boxes]
    if min(widths) >= max(widths) * EQUALIZE_RATIO:
        for box in boxes:
            box.width = max(widths)


def _layout_vertical(children: list[DiagramNode], conns: list[Connection], opts: LayoutOptions) -> None:
    if any(c.label for c in conns):
        gap = 3
    elif conns:
        gap = 2
    else:
        gap = 1
    cur_y = opts.pad_top
    for child in children:
        if child.x is None:
            child.x = opts.pad_left
        if child.y is None:
            child.y = cur_y
        cur_y += (child.height or 0) + gap


def _layout_horizontal(children: list[DiagramNode], conns: list[Connection], opts: LayoutOptions) -> None:
    graph = build_graph(children, [(c.from_id, c.to_id) for c in conns])
    layers = group_layers(children, longest_path_layers(graph, break_cycles=False))
    gaps = compute_layer_gaps(layers, conns, CHILD_H_GAP)

    cur_x = opts.pad_left
    for group, gap in zip(layers, gaps):
        cur_y = opts.pad_top
        max_w = 0
        for child in group:
            if child.x is None:
                child.x = cur_x
            if child.y is None:
                child.y = cur_y
            cur_y += (child.height or 0) + CHILD_V_GAP
            max_w = max(max_w, child.width or 0)
        cur_x += max_w + gap


def _fit_parent(parent: DiagramNode, children: list[DiagramNode], conns: list[Connection]) -> None:
    if parent.width is None:
        max_right = max((c.x or 0) + (c.width or 0) + shadow_w(c) for c in children)
        width = max_right + 4
        if parent.child_direction == ChildDirection.Vertical:
            # Labels of stacked children sit beside the vertical run at mid-width.
            max_child_w = max(c.width or 0 for c in children)
            for conn in conns:
                if conn.label:
                    width = max(width, math.ceil(max_child_w / 2) + len(conn.label) + 8)
        if parent.title:
            width = max(width, len(parent.title) + 6)
        parent.width = width
    if parent.height is None:
        max_bottom = max((c.y or 0) + (c.height or 0) + shadow_h(c) for c in children)
        parent.height = max_bottom + 2


def layout_children(parent: DiagramNode, all_connections: list[Connection], opts: LayoutOptions) -> None:
    """Size and position ``parent``'s children, then size ``parent`` around them.

    Args:
        parent: A container; nodes without child boxes are left untouched.
        all_connections: Every connection in the diagram. Those joining two
            direct children of ``parent`` drive the layout.
        opts: Spacing and minimum sizes.
    """
    children = parent.children
    if not children:
        return

    auto_width = [c for c in children if c.width is None]
    for child in children:
        if child.children:
            layout_children(child, all_connections, opts)
        auto_size_box(child, opts)
    equalize_widths(auto_width)

    child_ids = {c.id for c in children if c.id is not None}
    intra = [c for c in all_connections if c.from_id in child_ids and c.to_id in child_ids]

    if parent.child_direction == ChildDirection.Vertical:
        _layout_vertical(children, intra, opts)
    else:
        _layout_horizontal(children, intra, opts)

    _fit_parent(parent, children, intra)
