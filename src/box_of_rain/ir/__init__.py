"""Diagram IR — the box tree and its input schema."""

from box_of_rain.ir.schema import DiagramValidationError, diagram_to_dict, migrate, parse_diagram
from box_of_rain.ir.types import (
    BorderStyle,
    ChildBoxes,
    ChildDirection,
    Connection,
    DiagramNode,
    Side,
    TextLine,
    TextLines,
    clone,
    collect_connections,
    to_dict,
)

__all__ = [
    "BorderStyle",
    "ChildBoxes",
    "ChildDirection",
    "Connection",
    "DiagramNode",
    "DiagramValidationError",
    "Side",
    "TextLine",
    "TextLines",
    "clone",
    "collect_connections",
    "diagram_to_dict",
    "migrate",
    "parse_diagram",
    "to_dict",
]
