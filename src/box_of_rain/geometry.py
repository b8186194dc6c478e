"""Geometry helpers — absolute box resolution, anchor points and text centering."""

from __future__ import annotations

from dataclasses import dataclass

from box_of_rain.ir.types import DiagramNode, Side


@dataclass(frozen=True)
class Point:
    """A 2D point in character coordinates (column, row)."""

    x: int
    y: int


@dataclass(frozen=True)
class ResolvedBox:
    """A box together with its absolute canvas position."""

    box: DiagramNode
    abs_x: int
    abs_y: int

    @property
    def width(self) -> int:
        return self.box.width or 0

    @property
    def height(self) -> int:
        return self.box.height or 0


def resolve_box(
    box_id: str,
    boxes: list[DiagramNode],
    parent_abs_x: int = 0,
    parent_abs_y: int = 0,
) -> ResolvedBox | None:
    """Find a box by id anywhere in the tree.

    The search is depth-first: a box is checked before its children, and a
    box's whole subtree before its next sibling. Every nesting level adds one
    cell of offset for the parent's border.

    Returns:
        The resolved box, or None when no box carries ``box_id``.
    """
    for box in boxes:
        abs_x = parent_abs_x + (box.x or 0)
        abs_y = parent_abs_y + (box.y or 0)
        if box.id == box_id:
            return ResolvedBox(box=box, abs_x=abs_x, abs_y=abs_y)
        found = resolve_box(box_id, box.children, abs_x + 1, abs_y + 1)
        if found is not None:
            return found
    return None


def index_boxes(
    boxes: list[DiagramNode],
    parent_abs_x: int = 0,
    parent_abs_y: int = 0,
    index: dict[str, ResolvedBox] | None = None,
) -> dict[str, ResolvedBox]:
    """Build an id → ResolvedBox map in one pass.

    The first box found in ``resolve_box`` search order wins for duplicate ids,
    so lookups agree with ``resolve_box``.
    """
    if index is None:
        index = {}
    for box in boxes:
        abs_x = parent_abs_x + (box.x or 0)
        abs_y = parent_abs_y + (box.y or 0)
        if box.id is not None and box.id not in index:
            index[box.id] = ResolvedBox(box=box, abs_x=abs_x, abs_y=abs_y)
        index_boxes(box.children, abs_x + 1, abs_y + 1, index)
    return index


def get_anchor(resolved: ResolvedBox, side: Side | str) -> Point:
    """Return the cell just outside ``side`` of the box, centred along that edge."""
    x, y = resolved.abs_x, resolved.abs_y
    w, h = resolved.width, resolved.height
    if side == Side.Right:
        return Point(x + w, y + h // 2)
    if side == Side.Top:
        return Point(x + w // 2, y - 1)
    if side == Side.Bottom:
        return Point(x + w // 2, y + h)
    return Point(x - 1, y + h // 2)


def center_text(text: str, width: int) -> str:
    """Pad ``text`` to ``width`` cells, centred; an odd spare cell goes to the right.

    Text that does not fit is truncated.
    """
    if len(text) >= width:
        return text[: max(width, 0)]
    left = (width - len(text)) // 2
    return " " * left + text + " " * (width - len(text) - left)
