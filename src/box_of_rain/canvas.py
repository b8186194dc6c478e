"""Canvas — a fixed-size 2D character grid.

Reads and writes outside the grid are silently ignored so that slightly
imprecise layouts degrade into clipped output instead of errors.
"""

from __future__ import annotations


class Canvas:
    """A width × height grid of single-cell strings, initialised to spaces."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(width, 0)
        self.height = max(height, 0)
        self.grid: list[list[str]] = [[" "] * self.width for _ in range(self.height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set(self, x: int, y: int, ch: str) -> None:
        if self.in_bounds(x, y):
            self.grid[y][x] = ch

    def get(self, x: int, y: int) -> str:
        if self.in_bounds(x, y):
            return self.grid[y][x]
        return " "

    def write_text(self, x: int, y: int, text: str) -> None:
        """Write ``text`` left-to-right starting at (x, y), clipping at the edges."""
        for i, ch in enumerate(text):
            self.set(x + i, y, ch)

    def row(self, y: int) -> str:
        if 0 <= y < self.height:
            return "".join(self.grid[y])
        return ""

    def to_string(self) -> str:
        """Serialize the grid.

        Trailing whitespace is trimmed from every row, then the smallest
        leading indent shared by all non-empty rows is removed so the drawing
        is flush left.
        """
        lines = ["".join(cells).rstrip() for cells in self.grid]
        indents = [len(line) - len(line.lstrip(" ")) for line in lines if line]
        min_indent = min(indents, default=0)
        if min_indent > 0:
            lines = [line[min_indent:] for line in lines]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string()
