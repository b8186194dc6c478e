"""Diagram IR — the recursive box tree shared by front-ends, layout and renderers.

A diagram and every box inside it are the same type, ``DiagramNode``. Box
content is a tagged union resolved once when the tree is built:

  - ``TextLine``   — a single line of text
  - ``TextLines``  — several lines of text
  - ``ChildBoxes`` — nested boxes (the node is a container)

Coordinates of a child are relative to its parent's interior, so absolute
positions are only derived at resolution/render time.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ─── Enums ──────────────────────────────────────────────────────────────────


class BorderStyle(str, Enum):
    """Border glyph family of a box."""

    Single = "single"
    Double = "double"
    Bold = "bold"
    Rounded = "rounded"
    Dashed = "dashed"


class Side(str, Enum):
    """Edge of a box where a connection starts or ends."""

    Left = "left"
    Right = "right"
    Top = "top"
    Bottom = "bottom"


class ChildDirection(str, Enum):
    """How a container lays out its children."""

    Horizontal = "horizontal"
    Vertical = "vertical"


# ─── Content Variants ───────────────────────────────────────────────────────


@dataclass
class TextLine:
    """One line of text content."""

    text: str


@dataclass
class TextLines:
    """Multi-line text content, one string per row."""

    lines: list[str]


@dataclass
class ChildBoxes:
    """Nested child boxes."""

    boxes: list[DiagramNode]


Content = TextLine | TextLines | ChildBoxes | None


# ─── Tree Nodes ─────────────────────────────────────────────────────────────


@dataclass
class Connection:
    """A directed, optionally labeled edge between two box ids."""

    from_id: str
    to_id: str
    label: str | None = None
    from_side: Side | None = None
    to_side: Side | None = None


@dataclass
class DiagramNode:
    """A box, or the whole diagram when used as the root."""

    id: str | None = None
    content: Content = None
    border: BorderStyle = BorderStyle.Single
    title: str | None = None
    shadow: bool = False
    disabled: bool = False
    child_direction: ChildDirection = ChildDirection.Horizontal
    x: int | None = None
    y: int | None = None
    width: int | None = None
    height: int | None = None
    connections: list[Connection] = field(default_factory=list)

    @property
    def children(self) -> list[DiagramNode]:
        """Nested boxes, or an empty list for leaves and empty boxes."""
        if isinstance(self.content, ChildBoxes):
            return self.content.boxes
        return []

    @property
    def text_lines(self) -> list[str] | None:
        """Text content as a list of rows, or None when the node holds no text."""
        if isinstance(self.content, TextLine):
            return [self.content.text]
        if isinstance(self.content, TextLines):
            return self.content.lines or None
        return None

    @property
    def is_container(self) -> bool:
        return bool(self.children)

    @property
    def has_geometry(self) -> bool:
        return None not in (self.x, self.y, self.width, self.height)


# ─── Tree Helpers ───────────────────────────────────────────────────────────


def iter_boxes(boxes: list[DiagramNode]) -> Iterator[DiagramNode]:
    """Yield every box depth-first, parents before their children."""
    for box in boxes:
        yield box
        yield from iter_boxes(box.children)


def collect_connections(node: DiagramNode) -> list[Connection]:
    """Collect the connections declared anywhere in the tree, in document order."""
    conns = list(node.connections)
    for child in node.children:
        conns.extend(collect_connections(child))
    return conns


def clone_connection(conn: Connection) -> Connection:
    return Connection(
        from_id=conn.from_id,
        to_id=conn.to_id,
        label=conn.label,
        from_side=conn.from_side,
        to_side=conn.to_side,
    )


def clone(node: DiagramNode) -> DiagramNode:
    """Return a structural copy of the tree; the copy shares no mutable state."""
    content: Content
    if isinstance(node.content, ChildBoxes):
        content = ChildBoxes([clone(child) for child in node.content.boxes])
    elif isinstance(node.content, TextLines):
        content = TextLines(list(node.content.lines))
    elif isinstance(node.content, TextLine):
        content = TextLine(node.content.text)
    else:
        content = None

    return DiagramNode(
        id=node.id,
        content=content,
        border=node.border,
        title=node.title,
        shadow=node.shadow,
        disabled=node.disabled,
        child_direction=node.child_direction,
        x=node.x,
        y=node.y,
        width=node.width,
        height=node.height,
        connections=[clone_connection(c) for c in node.connections],
    )


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def connection_to_dict(conn: Connection) -> dict[str, Any]:
    out: dict[str, Any] = {"from": conn.from_id, "to": conn.to_id}
    if conn.label is not None:
        out["label"] = conn.label
    if conn.from_side is not None:
        out["fromSide"] = _plain(conn.from_side)
    if conn.to_side is not None:
        out["toSide"] = _plain(conn.to_side)
    return out


def to_dict(node: DiagramNode) -> dict[str, Any]:
    """Serialize a tree to the camelCase mapping form accepted by ``parse_diagram``.

    Unset optional fields and false flags are omitted, so the output of a
    freshly parsed tree stays close to the document it came from.
    """
    out: dict[str, Any] = {}
    if node.id is not None:
        out["id"] = node.id
    if isinstance(node.content, TextLine):
        out["children"] = node.content.text
    elif isinstance(node.content, TextLines):
        out["children"] = list(node.content.lines)
    elif isinstance(node.content, ChildBoxes):
        out["children"] = [to_dict(child) for child in node.content.boxes]
    out["border"] = _plain(node.border)
    if node.title is not None:
        out["title"] = node.title
    if node.shadow:
        out["shadow"] = True
    if node.disabled:
        out["disabled"] = True
    if _plain(node.child_direction) != ChildDirection.Horizontal.value:
        out["childDirection"] = _plain(node.child_direction)
    for key in ("x", "y", "width", "height"):
        value = getattr(node, key)
        if value is not None:
            out[key] = value
    if node.connections:
        out["connections"] = [connection_to_dict(c) for c in node.connections]
    return out
