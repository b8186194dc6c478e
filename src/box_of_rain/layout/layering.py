"""Layering — longest-path layer assignment, median ordering and label-aware gaps.

Boxes are nodes of an ``nx.DiGraph`` keyed by box id; connections between
them are edges. Boxes without an id cannot take part in connections and
always sit in layer 0.
"""

from __future__ import annotations

from collections import deque

import networkx as nx

from box_of_rain.ir.types import Connection, DiagramNode
from box_of_rain.logging import get_logger

logger = get_logger(__name__)

LABEL_GAP_PADDING: int = 4  # label plus a padding space and a fill glyph each side


def build_graph(boxes: list[DiagramNode], edges: list[tuple[str, str]]) -> nx.DiGraph:
    """Build the layering graph.

    Nodes are added in document order, which is the tie-break order for
    every later step. Self-loops and edges to unknown ids are dropped;
    duplicate edges collapse into one.
    """
    g: nx.DiGraph = nx.DiGraph()
    for box in boxes:
        if box.id is not None and box.id not in g:
            g.add_node(box.id)
    for src, tgt in edges:
        if src != tgt and src in g and tgt in g:
            g.add_edge(src, tgt)
    return g


def longest_path_layers(graph: nx.DiGraph, break_cycles: bool = True) -> dict[str, int]:
    """Assign each node the length of the longest path reaching it.

    Kahn's algorithm over in-degrees. Nodes on a cycle never reach in-degree
    zero; with ``break_cycles`` the pending node with the smallest remaining
    in-degree (document order on ties) is released at the layer its processed
    predecessors already give it, or layer 0. Edges back into already
    processed nodes are ignored, so breaking a cycle never moves a node
    that has been placed.

    Without ``break_cycles`` nodes on cycles are left out of the result.
    """
    in_deg: dict[str, int] = {n: graph.in_degree(n) for n in graph.nodes}
    layers: dict[str, int] = {}
    done: set[str] = set()
    queue: deque[str] = deque(n for n in graph.nodes if in_deg[n] == 0)
    for node in queue:
        layers[node] = 0

    while True:
        while queue:
            cur = queue.popleft()
            done.add(cur)
            for nxt in graph.successors(cur):
                if nxt in done:
                    continue
                layers[nxt] = max(layers.get(nxt, 0), layers[cur] + 1)
                in_deg[nxt] -= 1
                if in_deg[nxt] == 0:
                    queue.append(nxt)

        if not break_cycles:
            break
        pending = [n for n in graph.nodes if n not in done]
        if not pending:
            break
        seed = min(pending, key=lambda n: in_deg[n])
        layers.setdefault(seed, 0)
        logger.debug("breaking cycle at %r (layer %d)", seed, layers[seed])
        queue.append(seed)

    return layers


def group_layers(boxes: list[DiagramNode], layer_of: dict[str, int]) -> list[list[DiagramNode]]:
    """Group boxes by layer, keeping document order inside each layer.

    Empty layers are dropped so the result has no holes.
    """
    buckets: dict[int, list[DiagramNode]] = {}
    for box in boxes:
        layer = layer_of.get(box.id, 0) if box.id is not None else 0
        buckets.setdefault(layer, []).append(box)
    return [buckets[k] for k in sorted(buckets)]


def median_key(box: DiagramNode, conns: list[Connection], prev_order: dict[str, int]) -> float:
    """Upper median of the previous-layer positions of ``box``'s predecessors.

    Boxes with no predecessor in the previous layer get +inf so they sort last.
    """
    positions = sorted(
        prev_order[c.from_id] for c in conns if c.to_id == box.id and c.from_id in prev_order
    )
    if box.id is None or not positions:
        return float("inf")
    return positions[len(positions) // 2]


def order_layers(layers: list[list[DiagramNode]], conns: list[Connection]) -> list[list[DiagramNode]]:
    """Sort each layer after the first by the median of its predecessors.

    The sort is stable, so boxes with equal keys keep document order.
    """
    ordered = [list(layers[0])] if layers else []
    for layer in layers[1:]:
        prev_order = {b.id: i for i, b in enumerate(ordered[-1]) if b.id is not None}
        ordered.append(sorted(layer, key=lambda b, p=prev_order: median_key(b, conns, p)))
    return ordered


def compute_layer_gaps(layers: list[list[DiagramNode]], conns: list[Connection], default_gap: int) -> list[int]:
    """Gap after each layer, widened to fit labels of one-step forward edges.

    Only labeled connections going exactly one layer forward count. Routes
    that exit and enter on the same side swing around the outside and
    never cross the gap.

    Returns:
        One gap per layer: ``max(default_gap, longest_label + 4)`` after layers
        with a labeled edge, ``default_gap`` after the rest.
    """
    layer_of: dict[str, int] = {}
    for i, layer in enumerate(layers):
        for box in layer:
            if box.id is not None:
                layer_of[box.id] = i

    widest: dict[int, int] = {}
    for conn in conns:
        if not conn.label:
            continue
        src = layer_of.get(conn.from_id)
        tgt = layer_of.get(conn.to_id)
        if src is None or tgt is None or tgt - src != 1:
            continue
        if conn.from_side is not None and conn.to_side is not None and conn.from_side == conn.to_side:
            continue
        widest[src] = max(widest.get(src, 0), len(conn.label))

    return [
        max(default_gap, widest[i] + LABEL_GAP_PADDING) if i in widest else default_gap
        for i in range(len(layers))
    ]
