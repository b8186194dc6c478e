"""Text renderer — draws a laid-out diagram onto a character grid."""

from __future__ import annotations

from box_of_rain.canvas import Canvas
from box_of_rain.geometry import index_boxes
from box_of_rain.ir.types import DiagramNode, collect_connections
from box_of_rain.renderers.box import draw_box
from box_of_rain.renderers.connection import draw_connection

DEFAULT_WIDTH: int = 80
DEFAULT_HEIGHT: int = 20


class TextRenderer:
    """Text renderer — consumes a positioned diagram tree, produces box-drawing text.

    Boxes are drawn first, parents before children, then every connection
    in document order so later routes merge into earlier ones.
    """

    def render(self, diagram: DiagramNode) -> str:
        width = DEFAULT_WIDTH if diagram.width is None else diagram.width
        height = DEFAULT_HEIGHT if diagram.height is None else diagram.height
        canvas = Canvas(width, height)
        boxes = diagram.children
        connections = collect_connections(diagram)

        for box in boxes:
            draw_box(canvas, box)

        index = index_boxes(boxes)
        for conn in connections:
            draw_connection(canvas, conn, boxes, siblings=connections, index=index)

        return canvas.to_string()
