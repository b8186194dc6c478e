"""
Command-line interface for box-of-rain.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from box_of_rain import __version__
from box_of_rain.api import detect_format, layout_diagram, load_diagram, render, render_svg
from box_of_rain.config import LayoutOptions, SvgOptions, load_options
from box_of_rain.ir.schema import diagram_to_dict, parse_diagram
from box_of_rain.logging import get_logger, setup_logging

logger = get_logger(__name__)

EPILOG = """\
Usage:
  box-of-rain diagram.json                 # JSON input
  box-of-rain diagram.yaml                 # YAML input
  box-of-rain diagram.mmd                  # Mermaid input (.mmd, .mermaid)
  box-of-rain --mermaid notes.txt          # Force Mermaid parsing
  box-of-rain --svg diagram.json           # SVG output
  box-of-rain --config style.yaml FILE     # Layout/SVG options file
  box-of-rain --example

Stdin:
  Without FILE the diagram is read from standard input. The format is
  JSON unless --yaml or --mermaid is given:
    cat diagram.yaml | box-of-rain --yaml

Diagram format (positions and sizes are optional; auto-layout fills them in):
  {
    "children": [
      {"id": "api", "children": ["API", "Server"], "border": "double", "shadow": true},
      {"id": "db", "children": "Database", "title": "Storage"}
    ],
    "connections": [{"from": "api", "to": "db", "label": "SQL"}]
  }

children can be a string (one line of text), a list of strings (several
lines) or a list of objects (nested boxes).
"""

EXAMPLE_DIAGRAM: dict[str, Any] = {
    "children": [
        {"id": "fe", "children": ["Frontend"], "border": "rounded"},
        {"id": "api", "children": ["API Server"], "border": "bold", "shadow": True},
        {"id": "db", "children": ["Database"], "border": "double"},
        {"id": "cache", "children": ["Cache"], "border": "rounded"},
    ],
    "connections": [
        {"from": "fe", "to": "api", "label": "HTTPS"},
        {"from": "api", "to": "db", "label": "SQL"},
        {"from": "api", "to": "cache", "label": "GET/SET"},
    ],
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="box-of-rain",
        description="Generate ASCII box diagrams from JSON, YAML or Mermaid",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", nargs="?", help="Diagram file (reads stdin when omitted)")
    parser.add_argument("--svg", action="store_true", help="Wrap the output in SVG")
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument("--mermaid", action="store_true", help="Parse input as Mermaid")
    fmt.add_argument("--yaml", action="store_true", help="Parse input as YAML")
    parser.add_argument("--config", metavar="PATH", help="YAML/JSON file with 'layout' and 'svg' options")
    parser.add_argument("--dump-layout", action="store_true", help="Print the laid-out diagram as JSON")
    parser.add_argument("--example", action="store_true", help="Render the built-in example diagram")
    parser.add_argument("--version", action="store_true", help="Print the version and exit")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug logging)",
    )
    return parser


def _input_format(args: argparse.Namespace) -> str:
    if args.mermaid:
        return "mermaid"
    if args.yaml:
        return "yaml"
    return detect_format(args.file)


def _read_source(args: argparse.Namespace) -> str:
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    return sys.stdin.read()


def run(args: argparse.Namespace) -> str:
    """Produce the output text for parsed arguments."""
    layout_opts, svg_opts = LayoutOptions(), SvgOptions()
    if args.config:
        layout_opts, svg_opts = load_options(args.config)

    if args.example:
        diagram = parse_diagram(EXAMPLE_DIAGRAM)
    else:
        fmt = _input_format(args)
        logger.debug("reading %s as %s", args.file or "<stdin>", fmt)
        diagram = load_diagram(_read_source(args), fmt)

    if args.dump_layout:
        return json.dumps(diagram_to_dict(layout_diagram(diagram, layout_opts)), indent=2, ensure_ascii=False)

    text = render(diagram, layout_opts)
    return render_svg(text, svg_opts) if args.svg else text


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging based on verbosity
    if args.verbose:
        setup_logging("DEBUG")
    else:
        setup_logging("WARNING")

    if args.version:
        print(__version__)
        return 0

    if not args.file and not args.example and sys.stdin.isatty():
        parser.print_help()
        return 0

    try:
        output = run(args)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(output)
    return 0
