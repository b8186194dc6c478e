"""Input schema — validates JSON/YAML diagram documents and builds the IR tree.

Documents use the camelCase keys of the published format::

    {
      "children": [
        {"id": "api", "children": ["API", "Server"], "border": "bold"},
        {"id": "db", "children": "Database"}
      ],
      "connections": [{"from": "api", "to": "db", "label": "SQL"}]
    }

``children`` is a string (one line of text), a list of strings (several
lines) or a list of nodes (nested boxes). The shape is resolved once here
into ``TextLine`` / ``TextLines`` / ``ChildBoxes``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

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
    to_dict,
)


class DiagramValidationError(ValueError):
    """Raised when a diagram document does not match the schema."""


# ─── Models ─────────────────────────────────────────────────────────────────


class ConnectionSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    label: Optional[str] = None
    from_side: Optional[Side] = Field(default=None, alias="fromSide")
    to_side: Optional[Side] = Field(default=None, alias="toSide")

    def to_connection(self) -> Connection:
        return Connection(
            from_id=self.from_,
            to_id=self.to,
            label=self.label,
            from_side=self.from_side,
            to_side=self.to_side,
        )


class NodeSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    children: Optional[Union[str, list[Union[str, NodeSpec]]]] = None
    border: Optional[BorderStyle] = None
    title: Optional[str] = None
    shadow: Optional[bool] = None
    disabled: Optional[bool] = None
    child_direction: Optional[ChildDirection] = Field(default=None, alias="childDirection")
    x: Optional[int] = None
    y: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    connections: Optional[list[ConnectionSpec]] = None

    def content(self) -> Content:
        if self.children is None:
            return None
        if isinstance(self.children, str):
            return TextLine(self.children)
        nodes = [c for c in self.children if isinstance(c, NodeSpec)]
        if nodes:
            # Any nested node makes the list a box list; stray strings are dropped.
            return ChildBoxes([n.to_node() for n in nodes])
        if not self.children:
            return None
        return TextLines([c for c in self.children if isinstance(c, str)])

    def to_node(self) -> DiagramNode:
        return DiagramNode(
            id=self.id,
            content=self.content(),
            border=self.border or BorderStyle.Single,
            title=self.title,
            shadow=bool(self.shadow),
            disabled=bool(self.disabled),
            child_direction=self.child_direction or ChildDirection.Horizontal,
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            connections=[c.to_connection() for c in self.connections or []],
        )


NodeSpec.model_rebuild()


# ─── Legacy Format ──────────────────────────────────────────────────────────

_LEGACY_CHILD_KEYS = ("content", "boxes")


def migrate(data: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite legacy keys into the current format.

    Older documents used ``boxes`` (a list of nodes) or ``content`` (text)
    where ``children`` is used now. Returns a new mapping; ``data`` is not
    modified.
    """
    node = dict(data)
    if node.get("children") is None:
        for key in _LEGACY_CHILD_KEYS:
            if key in node:
                node["children"] = node.pop(key)
                break
    children = node.get("children")
    if isinstance(children, list):
        node["children"] = [migrate(c) if isinstance(c, Mapping) else c for c in children]
    return node


# ─── Entry Point ────────────────────────────────────────────────────────────


def _format_errors(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        problems.append(f"{loc}: {err['msg']}")
    return "invalid diagram: " + "; ".join(problems)


def parse_diagram(data: Mapping[str, Any]) -> DiagramNode:
    """Validate a diagram document and convert it to a ``DiagramNode`` tree.

    Raises:
        DiagramValidationError: If the document is not a mapping or does not
            match the schema (unknown border, connection without ``from``, ...).
    """
    if not isinstance(data, Mapping):
        raise DiagramValidationError(f"invalid diagram: expected a mapping, got {type(data).__name__}")
    try:
        spec = NodeSpec.model_validate(migrate(data))
    except ValidationError as exc:
        raise DiagramValidationError(_format_errors(exc)) from exc
    return spec.to_node()


def diagram_to_dict(node: DiagramNode) -> dict[str, Any]:
    """Serialize a tree back to the document form ``parse_diagram`` accepts."""
    return to_dict(node)
