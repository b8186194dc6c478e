"""Box renderer — borders, shadow, title, centred text, nested boxes, disabled overlay."""

from __future__ import annotations

from box_of_rain.canvas import Canvas
from box_of_rain.geometry import center_text
from box_of_rain.ir.types import DiagramNode
from box_of_rain.renderers.glyphs import SHADOW_CHAR, STRIKE_MARK, STRUCTURE_CHARS, border_glyphs


def _draw_shadow(canvas: Canvas, x: int, y: int, w: int, h: int) -> None:
    for row in range(y + 1, y + h + 1):
        canvas.set(x + w, row, SHADOW_CHAR)
        canvas.set(x + w + 1, row, SHADOW_CHAR)
    for col in range(x + 1, x + w + 2):
        canvas.set(col, y + h, SHADOW_CHAR)


def _draw_disabled(canvas: Canvas, x: int, y: int, w: int, h: int) -> None:
    for col in range(x + 1, x + w - 1):
        ch = canvas.get(col, y)
        if ch != " " and ch not in STRUCTURE_CHARS:
            canvas.set(col, y, ch + STRIKE_MARK)
    for row in range(y + 1, y + h - 1):
        for col in range(x + 1, x + w - 1):
            if canvas.get(col, row) == " ":
                canvas.set(col, row, SHADOW_CHAR)


def draw_box(canvas: Canvas, box: DiagramNode, offset_x: int = 0, offset_y: int = 0) -> None:
    """Draw ``box`` and its nested children onto ``canvas``.

    Args:
        canvas: Target grid.
        box: A box with concrete geometry. Its x/y are relative to the offset.
        offset_x: Absolute column of the parent's interior origin.
        offset_y: Absolute row of the parent's interior origin.
    """
    x = offset_x + (box.x or 0)
    y = offset_y + (box.y or 0)
    w = box.width or 0
    h = box.height or 0
    g = border_glyphs(box.border)

    if box.shadow:
        _draw_shadow(canvas, x, y, w, h)

    # Top and bottom borders
    for row, left, right in ((y, g.tl, g.tr), (y + h - 1, g.bl, g.br)):
        canvas.set(x, row, left)
        for col in range(x + 1, x + w - 1):
            canvas.set(col, row, g.h)
        canvas.set(x + w - 1, row, right)

    # Side borders; shadow cells left inside the interior by an earlier
    # sibling are cleared so nested boxes stay clean.
    for row in range(y + 1, y + h - 1):
        canvas.set(x, row, g.v)
        canvas.set(x + w - 1, row, g.v)
        for col in range(x + 1, x + w - 1):
            if canvas.get(col, row) == SHADOW_CHAR:
                canvas.set(col, row, " ")

    if box.title:
        label = f" {box.title} "
        canvas.set(x + 2, y, g.h)
        canvas.write_text(x + 3, y, label)
        for col in range(x + 3 + len(label), x + w - 1):
            canvas.set(col, y, g.h)

    lines = box.text_lines
    if lines:
        start_row = y + (h - len(lines)) // 2
        for i, line in enumerate(lines):
            canvas.write_text(x + 2, start_row + i, center_text(line, w - 4))

    # Children go before the disabled overlay so the overlay covers them too.
    for child in box.children:
        draw_box(canvas, child, x + 1, y + 1)

    if box.disabled:
        _draw_disabled(canvas, x, y, w, h)
