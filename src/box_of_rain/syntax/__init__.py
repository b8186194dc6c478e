"""Mermaid front-end — flowchart and sequence diagrams to the diagram IR."""

from __future__ import annotations

import re

from box_of_rain.ir.types import DiagramNode
from box_of_rain.syntax.convert import flowchart_to_diagram, sequence_to_diagram
from box_of_rain.syntax.flowchart import COMMENT_RE, parse_flowchart
from box_of_rain.syntax.sequence import parse_sequence
from box_of_rain.syntax.types import FlowchartAST, MermaidParseError, SequenceAST

FLOWCHART_RE = re.compile(r"^(?:flowchart|graph)\b")
SEQUENCE_RE = re.compile(r"^sequenceDiagram\b")


def detect_type(text: str) -> str:
    """Return the first non-empty, non-comment line of ``text``.

    Raises:
        MermaidParseError: If there is no such line.
    """
    for raw in text.splitlines():
        line = COMMENT_RE.sub("", raw).strip()
        if line:
            return line
    raise MermaidParseError("Empty mermaid diagram")


def parse_mermaid(text: str) -> DiagramNode:
    """Parse Mermaid text into a diagram tree, detecting the diagram type.

    Raises:
        MermaidParseError: If the text is empty or not a flowchart or
            sequence diagram.
    """
    first = detect_type(text)
    if FLOWCHART_RE.match(first):
        return flowchart_to_diagram(parse_flowchart(text))
    if SEQUENCE_RE.match(first):
        return sequence_to_diagram(parse_sequence(text))
    raise MermaidParseError(f"Unsupported diagram type: {first}")


__all__ = [
    "FlowchartAST",
    "MermaidParseError",
    "SequenceAST",
    "flowchart_to_diagram",
    "parse_flowchart",
    "parse_mermaid",
    "parse_sequence",
    "sequence_to_diagram",
]
