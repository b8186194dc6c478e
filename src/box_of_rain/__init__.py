"""box-of-rain — declarative box diagrams rendered as box-drawing text or SVG."""

__version__ = "0.1.0"

from box_of_rain.api import (  # noqa: E402
    detect_format,
    layout_diagram,
    load_diagram,
    render,
    render_mermaid,
    render_svg,
)
from box_of_rain.canvas import Canvas  # noqa: E402
from box_of_rain.config import LayoutOptions, SvgOptions, load_options  # noqa: E402
from box_of_rain.ir import (  # noqa: E402
    BorderStyle,
    ChildBoxes,
    ChildDirection,
    Connection,
    DiagramNode,
    DiagramValidationError,
    Side,
    TextLine,
    TextLines,
    diagram_to_dict,
    migrate,
    parse_diagram,
)
from box_of_rain.layout import auto_layout  # noqa: E402
from box_of_rain.syntax import MermaidParseError, parse_mermaid  # noqa: E402

__all__ = [
    "BorderStyle",
    "Canvas",
    "ChildBoxes",
    "ChildDirection",
    "Connection",
    "DiagramNode",
    "DiagramValidationError",
    "LayoutOptions",
    "MermaidParseError",
    "Side",
    "SvgOptions",
    "TextLine",
    "TextLines",
    "auto_layout",
    "detect_format",
    "diagram_to_dict",
    "layout_diagram",
    "load_diagram",
    "load_options",
    "migrate",
    "parse_diagram",
    "parse_mermaid",
    "render",
    "render_mermaid",
    "render_svg",
]
