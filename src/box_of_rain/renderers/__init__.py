"""Renderers — text canvas drawing and the SVG wrapper."""

from box_of_rain.renderers.base import Renderer
from box_of_rain.renderers.box import draw_box
from box_of_rain.renderers.connection import draw_connection
from box_of_rain.renderers.svg import SvgRenderer, render_svg
from box_of_rain.renderers.text import TextRenderer

__all__ = ["Renderer", "SvgRenderer", "TextRenderer", "draw_box", "draw_connection", "render_svg"]
