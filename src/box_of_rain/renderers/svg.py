"""SVG renderer — wraps rendered diagram text in a themed SVG document.

The text is treated as opaque lines: one ``<text>`` element per line in a
monospace font, on a rounded background that follows the viewer's light or
dark colour scheme.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from box_of_rain.config import SvgOptions
from box_of_rain.ir.types import DiagramNode
from box_of_rain.renderers.text import TextRenderer


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _num(value: float) -> str:
    """Format a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_svg(text: str, options: SvgOptions | Mapping[str, Any] | None = None) -> str:
    """Wrap rendered text in an SVG document.

    Args:
        text: Output of the text renderer.
        options: ``SvgOptions``, a mapping of option keys, or None.

    Returns:
        SVG markup. Width is ``ceil(longest_line * char_width) + 2 * padding``;
        height is ``lines * line_height + 2 * padding``.
    """
    opts = SvgOptions.coerce(options)
    lines = text.split("\n")
    max_len = max(len(line) for line in lines)

    width = _num(math.ceil(max_len * opts.char_width) + opts.padding * 2)
    height = _num(len(lines) * opts.line_height + opts.padding * 2)
    pad = _num(opts.padding)

    text_els = "\n".join(
        f'  <text x="{pad}" y="{_num(opts.padding + (i + 1) * opts.line_height)}" '
        f'xml:space="preserve">{_escape(line)}</text>'
        for i, line in enumerate(lines)
    )

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}" width="{width}" height="{height}">\n'
        "  <style>\n"
        "    text {\n"
        f"      font-family: {opts.font_family};\n"
        f"      font-size: {_num(opts.font_size)}px;\n"
        "      line-height: 1;\n"
        f"      fill: {opts.light_fg};\n"
        "    }\n"
        "    @media (prefers-color-scheme: dark) {\n"
        f"      text {{ fill: {opts.dark_fg}; }}\n"
        f"      .bg {{ fill: {opts.dark_bg}; }}\n"
        "    }\n"
        "  </style>\n"
        f'  <rect class="bg" width="100%" height="100%" fill="{opts.light_bg}" rx="{_num(opts.border_radius)}" />\n'
        f"{text_els}\n"
        "</svg>"
    )


class SvgRenderer:
    """SVG renderer — draws a laid-out diagram as text, then wraps it in SVG."""

    def __init__(self, options: SvgOptions | Mapping[str, Any] | None = None) -> None:
        self.options = SvgOptions.coerce(options)

    def render(self, diagram: DiagramNode) -> str:
        return render_svg(TextRenderer().render(diagram), self.options)
