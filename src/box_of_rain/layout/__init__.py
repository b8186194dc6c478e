"""Layout — auto-sizing and auto-positioning of diagram trees."""

from box_of_rain.layout.containers import auto_size_box, layout_children
from box_of_rain.layout.engine import auto_layout
from box_of_rain.layout.layering import compute_layer_gaps, longest_path_layers

__all__ = [
    "auto_layout",
    "auto_size_box",
    "compute_layer_gaps",
    "layout_children",
    "longest_path_layers",
]
