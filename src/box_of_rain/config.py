"""
Configuration models for layout and SVG output.

Options can be constructed programmatically, from mappings using either the
camelCase keys of the JSON diagram format or the snake_case field names, or
loaded from a YAML/JSON options file.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, TypeVar

import yaml

from box_of_rain.logging import get_logger

logger = get_logger(__name__)

_T = TypeVar("_T", "LayoutOptions", "SvgOptions")


def _from_mapping(cls: type[_T], data: Mapping[str, Any], aliases: Mapping[str, str]) -> _T:
    names = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = aliases.get(key, key)
        if name not in names:
            logger.debug("ignoring unknown %s key %r", cls.__name__, key)
            continue
        kwargs[name] = value
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

_LAYOUT_ALIASES = {
    "defaultHGap": "default_h_gap",
    "vGap": "v_gap",
    "padLeft": "pad_left",
    "padTop": "pad_top",
    "minBoxWidth": "min_box_width",
    "minBoxHeight": "min_box_height",
}


@dataclass(frozen=True)
class LayoutOptions:
    """
    Spacing and minimum sizes used by auto-layout.

    Example YAML:
        layout:
          defaultHGap: 4
          minBoxWidth: 14
    """

    default_h_gap: int = 3  # Columns between top-level layers
    v_gap: int = 2  # Rows between boxes stacked in one top-level layer
    pad_left: int = 2  # Container interior left padding
    pad_top: int = 1  # Container interior top padding
    min_box_width: int = 12
    min_box_height: int = 5

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"layout option {f.name} must be a non-negative integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LayoutOptions:
        """Create options from a mapping; unrecognized keys are ignored."""
        return _from_mapping(cls, data, _LAYOUT_ALIASES)

    @classmethod
    def coerce(cls, value: LayoutOptions | Mapping[str, Any] | None) -> LayoutOptions:
        if value is None:
            return cls()
        if isinstance(value, LayoutOptions):
            return value
        return cls.from_dict(value)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# SVG
# ---------------------------------------------------------------------------

_SVG_ALIASES = {
    "fontSize": "font_size",
    "charWidth": "char_width",
    "lineHeight": "line_height",
    "lightBg": "light_bg",
    "lightFg": "light_fg",
    "darkBg": "dark_bg",
    "darkFg": "dark_fg",
    "fontFamily": "font_family",
    "borderRadius": "border_radius",
}


@dataclass(frozen=True)
class SvgOptions:
    """Font metrics and colours of the SVG wrapper."""

    font_size: float = 14
    char_width: float = 8.41  # Advance width of one monospace cell, in px
    line_height: float = 14
    padding: float = 16
    light_bg: str = "#f6f8fa"
    light_fg: str = "#24292f"
    dark_bg: str = "#161b22"
    dark_fg: str = "#e6edf3"
    font_family: str = "'SFMono-Regular', Menlo, Monaco, 'Courier New', monospace"
    border_radius: float = 6

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SvgOptions:
        """Create options from a mapping; unrecognized keys are ignored."""
        return _from_mapping(cls, data, _SVG_ALIASES)

    @classmethod
    def coerce(cls, value: SvgOptions | Mapping[str, Any] | None) -> SvgOptions:
        if value is None:
            return cls()
        if isinstance(value, SvgOptions):
            return value
        return cls.from_dict(value)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Options files
# ---------------------------------------------------------------------------


def load_options(path: str | Path) -> tuple[LayoutOptions, SvgOptions]:
    """Load layout and SVG options from a YAML or JSON file.

    The file holds optional ``layout`` and ``svg`` sections.

    Raises:
        ValueError: If the file is not a mapping or holds invalid values.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"options file {path} must contain a mapping")
    layout = data.get("layout") or {}
    svg = data.get("svg") or {}
    if not isinstance(layout, dict) or not isinstance(svg, dict):
        raise ValueError(f"options file {path}: 'layout' and 'svg' must be mappings")
    return LayoutOptions.from_dict(layout), SvgOptions.from_dict(svg)
