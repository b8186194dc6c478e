"""Tests for canvas.py — bounds-safe grid access and serialization."""

from __future__ import annotations

from box_of_rain.canvas import Canvas


class TestCanvasAccess:
    """set/get/write_text behaviour, including out-of-bounds access."""

    def test_dimensions(self) -> None:
        c = Canvas(10, 5)
        assert c.width == 10
        assert c.height == 5

    def test_initialised_with_spaces(self) -> None:
        c = Canvas(3, 2)
        assert c.get(0, 0) == " "
        assert c.get(2, 1) == " "

    def test_set_then_get(self) -> None:
        c = Canvas(5, 5)
        c.set(2, 3, "X")
        assert c.get(2, 3) == "X"

    def test_out_of_bounds_set_is_ignored(self) -> None:
        c = Canvas(5, 5)
        for x, y in [(-1, 0), (0, -1), (5, 0), (0, 5)]:
            c.set(x, y, "X")
        assert all(ch == " " for row in c.grid for ch in row), "no cell should change"

    def test_out_of_bounds_get_returns_space(self) -> None:
        c = Canvas(5, 5)
        assert c.get(-1, 0) == " "
        assert c.get(100, 100) == " "

    def test_write_text_is_sequential_and_clipped(self) -> None:
        c = Canvas(5, 1)
        c.write_text(2, 0, "Hi!!")
        assert c.row(0) == "  Hi!"

    def test_negative_size_gives_empty_canvas(self) -> None:
        c = Canvas(-3, -1)
        assert c.width == 0
        assert c.height == 0
        assert c.to_string() == ""


class TestCanvasToString:
    """Serialization trims trailing space and common indent."""

    def test_trims_trailing_whitespace(self) -> None:
        c = Canvas(10, 2)
        c.set(0, 0, "A")
        c.set(0, 1, "B")
        assert c.to_string() == "A\nB"

    def test_strips_common_indent(self) -> None:
        c = Canvas(10, 2)
        c.set(3, 0, "X")
        c.set(4, 1, "Y")
        assert c.to_string() == "X\n Y"

    def test_blank_rows_do_not_limit_indent(self) -> None:
        c = Canvas(6, 3)
        c.set(2, 0, "A")
        c.set(2, 2, "B")
        assert c.to_string() == "A\n\nB"

    def test_all_blank_canvas(self) -> None:
        assert Canvas(3, 2).to_string() == "\n"

    def test_str_matches_to_string(self) -> None:
        c = Canvas(4, 1)
        c.write_text(1, 0, "ok")
        assert str(c) == c.to_string() == "ok"
