"""Public API — parse, lay out and render diagrams in one call."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from box_of_rain.config import LayoutOptions
from box_of_rain.ir.schema import parse_diagram
from box_of_rain.ir.types import DiagramNode
from box_of_rain.layout.engine import auto_layout
from box_of_rain.renderers.svg import render_svg
from box_of_rain.renderers.text import TextRenderer
from box_of_rain.syntax import parse_mermaid

FORMATS = ("json", "yaml", "mermaid")

FORMAT_BY_SUFFIX: dict[str, str] = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".mmd": "mermaid",
    ".mermaid": "mermaid",
}


def detect_format(path: str | Path | None, default: str = "json") -> str:
    """Guess the input format from a file suffix."""
    if path is None:
        return default
    return FORMAT_BY_SUFFIX.get(Path(path).suffix.lower(), default)


def load_diagram(source: str, fmt: str = "json") -> DiagramNode:
    """Parse diagram source text in the given format.

    Args:
        source: JSON, YAML or Mermaid text.
        fmt: One of ``"json"``, ``"yaml"``, ``"mermaid"``.

    Raises:
        ValueError: For an unknown format, invalid JSON, a document that
            fails validation, or Mermaid text that cannot be parsed.
        yaml.YAMLError: If YAML source cannot be parsed.
    """
    if fmt == "mermaid":
        return parse_mermaid(source)
    if fmt == "yaml":
        data = yaml.safe_load(source)
    elif fmt == "json":
        data = json.loads(source)
    else:
        raise ValueError(f"unknown input format {fmt!r}, expected one of {', '.join(FORMATS)}")
    return parse_diagram(data)


def layout_diagram(
    diagram: DiagramNode | Mapping[str, Any],
    options: LayoutOptions | Mapping[str, Any] | None = None,
) -> DiagramNode:
    """Validate (when given a mapping) and auto-layout a diagram."""
    tree = parse_diagram(diagram) if isinstance(diagram, Mapping) else diagram
    return auto_layout(tree, options)


def render(
    diagram: DiagramNode | Mapping[str, Any],
    options: LayoutOptions | Mapping[str, Any] | None = None,
) -> str:
    """Render a diagram to box-drawing text.

    Args:
        diagram: A ``DiagramNode`` tree or a document mapping (validated
            with ``parse_diagram``).
        options: Layout options.

    Returns:
        The rendered text: trailing spaces trimmed, common indent removed.

    Raises:
        DiagramValidationError: If a mapping does not match the schema.
    """
    return TextRenderer().render(layout_diagram(diagram, options))


def render_mermaid(text: str, options: LayoutOptions | Mapping[str, Any] | None = None) -> str:
    """Parse Mermaid text and render it to box-drawing text."""
    return render(parse_mermaid(text), options)


__all__ = [
    "FORMATS",
    "detect_format",
    "layout_diagram",
    "load_diagram",
    "render",
    "render_mermaid",
    "render_svg",
]
