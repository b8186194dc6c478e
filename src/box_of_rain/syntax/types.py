"""Mermaid AST types — output of the flowchart and sequence parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MermaidParseError(ValueError):
    """Raised when Mermaid text is empty or of an unsupported diagram type."""


# ─── Flowchart ──────────────────────────────────────────────────────────────


class Direction(str, Enum):
    LR = "LR"
    RL = "RL"
    TD = "TD"
    TB = "TB"
    BT = "BT"


class NodeShape(str, Enum):
    Rectangle = "rect"
    Rounded = "rounded"
    Stadium = "stadium"
    Subroutine = "subroutine"
    Cylinder = "cylinder"
    Circle = "circle"
    Diamond = "diamond"
    Hexagon = "hexagon"


class EdgeStyle(str, Enum):
    Solid = "solid"
    Dotted = "dotted"
    Thick = "thick"


@dataclass
class FlowNode:
    id: str
    text: str
    shape: NodeShape = NodeShape.Rectangle
    classes: list[str] = field(default_factory=list)


@dataclass
class FlowEdge:
    from_id: str
    to_id: str
    style: EdgeStyle = EdgeStyle.Solid
    has_arrow: bool = True
    label: str | None = None
    # Raw values from %% @route directives; validated during conversion.
    from_side: str | None = None
    to_side: str | None = None


@dataclass
class Subgraph:
    id: str
    title: str | None = None
    nodes: list[FlowNode] = field(default_factory=list)
    edges: list[FlowEdge] = field(default_factory=list)
    subgraphs: list[Subgraph] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)


@dataclass
class FlowchartAST:
    direction: Direction = Direction.TD
    nodes: list[FlowNode] = field(default_factory=list)
    edges: list[FlowEdge] = field(default_factory=list)
    subgraphs: list[Subgraph] = field(default_factory=list)


# ─── Sequence ───────────────────────────────────────────────────────────────


class MessageStyle(str, Enum):
    Solid = "solid"
    Dashed = "dashed"


class MessageArrow(str, Enum):
    Head = "head"
    Cross = "cross"
    Open = "open"


@dataclass
class Participant:
    id: str
    alias: str | None = None
    is_actor: bool = False


@dataclass
class Message:
    from_id: str
    to_id: str
    label: str = ""
    style: MessageStyle = MessageStyle.Solid
    arrow: MessageArrow = MessageArrow.Head


@dataclass
class SequenceAST:
    participants: list[Participant] = field(default_factory=list)
    messages: list[Message] = field(default_factory=list)
