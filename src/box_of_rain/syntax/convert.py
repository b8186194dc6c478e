"""Mermaid AST → diagram IR conversion."""

from __future__ import annotations

from box_of_rain.ir.types import (
    BorderStyle,
    ChildBoxes,
    ChildDirection,
    Connection,
    Content,
    DiagramNode,
    Side,
    TextLine,
    TextLines,
)
from box_of_rain.syntax.types import Direction, FlowchartAST, FlowEdge, FlowNode, NodeShape, SequenceAST, Subgraph

SHAPE_BORDERS: dict[NodeShape, BorderStyle] = {
    NodeShape.Rectangle: BorderStyle.Single,
    NodeShape.Rounded: BorderStyle.Rounded,
    NodeShape.Stadium: BorderStyle.Rounded,
    NodeShape.Subroutine: BorderStyle.Double,
    NodeShape.Cylinder: BorderStyle.Double,
    NodeShape.Circle: BorderStyle.Bold,
    NodeShape.Hexagon: BorderStyle.Bold,
    NodeShape.Diamond: BorderStyle.Dashed,
}

SHADOW_CLASS = "shadow"

_SIDES = {s.value: s for s in Side}


def child_direction(direction: Direction) -> ChildDirection:
    if direction in (Direction.LR, Direction.RL):
        return ChildDirection.Horizontal
    return ChildDirection.Vertical


def is_reversed(direction: Direction) -> bool:
    return direction in (Direction.RL, Direction.BT)


def _text_content(text: str) -> Content:
    lines = text.split("\n")
    if len(lines) == 1:
        return TextLine(lines[0])
    return TextLines(lines)


def _boxes(children: list[DiagramNode], reverse: bool) -> Content:
    if not children:
        return None
    return ChildBoxes(children[::-1] if reverse else children)


# ─── Flowchart ──────────────────────────────────────────────────────────────


def node_to_box(node: FlowNode) -> DiagramNode:
    return DiagramNode(
        id=node.id,
        content=_text_content(node.text),
        border=SHAPE_BORDERS.get(node.shape, BorderStyle.Single),
        shadow=SHADOW_CLASS in node.classes,
    )


def edge_to_connection(edge: FlowEdge) -> Connection:
    """Convert an edge; route sides that are not a valid ``Side`` are dropped."""
    return Connection(
        from_id=edge.from_id,
        to_id=edge.to_id,
        label=edge.label,
        from_side=_SIDES.get(edge.from_side) if edge.from_side else None,
        to_side=_SIDES.get(edge.to_side) if edge.to_side else None,
    )


def member_ids(sg: Subgraph) -> set[str]:
    """Ids of the nodes in ``sg`` and all of its nested subgraphs."""
    ids = {n.id for n in sg.nodes}
    for child in sg.subgraphs:
        ids |= member_ids(child)
    return ids


def _split_edges(edges: list[FlowEdge], subgraphs: list[Subgraph]) -> tuple[list[FlowEdge], list[list[FlowEdge]]]:
    """Hand each edge to the first subgraph holding both endpoints.

    Returns:
        ``(unclaimed, per_subgraph)`` where ``per_subgraph[i]`` belongs to
        ``subgraphs[i]``.
    """
    members = [member_ids(sg) for sg in subgraphs]
    per_subgraph: list[list[FlowEdge]] = [[] for _ in subgraphs]
    unclaimed: list[FlowEdge] = []
    for edge in edges:
        for ids, bucket in zip(members, per_subgraph):
            if edge.from_id in ids and edge.to_id in ids:
                bucket.append(edge)
                break
        else:
            unclaimed.append(edge)
    return unclaimed, per_subgraph


def _subgraph_to_box(sg: Subgraph, direction: Direction, edges: list[FlowEdge]) -> DiagramNode:
    own, nested = _split_edges(edges, sg.subgraphs)
    children = [node_to_box(n) for n in sg.nodes]
    children.extend(_subgraph_to_box(child, direction, e) for child, e in zip(sg.subgraphs, nested))
    return DiagramNode(
        id=sg.id,
        content=_boxes(children, is_reversed(direction)),
        border=BorderStyle.Double,
        title=sg.title,
        shadow=SHADOW_CLASS in sg.classes,
        child_direction=child_direction(direction),
        connections=[edge_to_connection(e) for e in own],
    )


def flowchart_to_diagram(ast: FlowchartAST) -> DiagramNode:
    """Convert a flowchart AST into a diagram tree.

    Subgraphs become double-bordered containers titled with the subgraph
    title. An edge is attached to the innermost subgraph holding both of its
    endpoints; the rest become top-level connections.
    """
    in_subgraph: set[str] = set()
    for sg in ast.subgraphs:
        in_subgraph |= member_ids(sg)

    top, nested = _split_edges(ast.edges, ast.subgraphs)
    children = [node_to_box(n) for n in ast.nodes if n.id not in in_subgraph]
    children.extend(_subgraph_to_box(sg, ast.direction, e) for sg, e in zip(ast.subgraphs, nested))

    return DiagramNode(
        content=_boxes(children, is_reversed(ast.direction)),
        child_direction=child_direction(ast.direction),
        connections=[edge_to_connection(e) for e in top],
    )


# ─── Sequence ───────────────────────────────────────────────────────────────


def sequence_to_diagram(ast: SequenceAST) -> DiagramNode:
    """One box per participant, one connection per message, stacked vertically."""
    boxes = [
        DiagramNode(
            id=p.id,
            content=TextLine(p.alias or p.id),
            border=BorderStyle.Rounded if p.is_actor else BorderStyle.Single,
        )
        for p in ast.participants
    ]
    conns = [Connection(from_id=m.from_id, to_id=m.to_id, label=m.label or None) for m in ast.messages]
    return DiagramNode(
        content=_boxes(boxes, reverse=False),
        child_direction=ChildDirection.Vertical,
        connections=conns,
    )
