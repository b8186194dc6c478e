"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from box_of_rain.ir.types import DiagramNode


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, diagram: DiagramNode) -> str:
        """Render a laid-out diagram to an output string."""
        ...
