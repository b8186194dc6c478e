"""Flowchart parser — Mermaid ``flowchart``/``graph`` text to a FlowchartAST.

Line oriented. Each line is one of:
  - ``%% @route A --> B fromSide=.. toSide=..`` (routing directive)
  - ``subgraph ...`` / ``end``
  - ``;``-separated statements: node definitions and (chained) edges

Everything after ``%%`` on other lines is a comment.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from box_of_rain.syntax.types import (
    Direction,
    EdgeStyle,
    FlowchartAST,
    FlowEdge,
    FlowNode,
    NodeShape,
    Subgraph,
)

# ─── Patterns ───────────────────────────────────────────────────────────────

HEADER_RE = re.compile(r"^(?:flowchart|graph)(?:\s+(LR|RL|TD|TB|BT))?\s*;?\s*$")
COMMENT_RE = re.compile(r"%%.*$")
ROUTE_RE = re.compile(r"%%\s*@route\s+(\S+?)\s*(?:-->|---)\s*(\S+)\s+(.*)")
FROM_SIDE_RE = re.compile(r"fromSide=(\S+)")
TO_SIDE_RE = re.compile(r"toSide=(\S+)")
CLASS_SUFFIX_RE = re.compile(r":::([A-Za-z_][A-Za-z0-9_-]*)\s*$")
BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
BARE_ID_RE = re.compile(r"^\w[\w ]*$")
PIPE_LABEL_RE = re.compile(r"^\s*\|([^|]+)\|\s*")
INLINE_LABEL_RE = re.compile(r"^(.*?)--\s+(.+?)\s*$")
SUBGRAPH_TITLE_RE = re.compile(r"^(\S+)\s*\[(.+)\]$")

# Longest delimiters first.
SHAPES: list[tuple[str, str, NodeShape]] = [
    ("[[", "]]", NodeShape.Subroutine),
    ("([", "])", NodeShape.Stadium),
    ("[(", ")]", NodeShape.Cylinder),
    ("((", "))", NodeShape.Circle),
    ("{{", "}}", NodeShape.Hexagon),
    ("{", "}", NodeShape.Diamond),
    ("[", "]", NodeShape.Rectangle),
    ("(", ")", NodeShape.Rounded),
]

# Longest first; at one position the first listed pattern wins.
EDGES: list[tuple[str, EdgeStyle, bool]] = [
    ("==>", EdgeStyle.Thick, True),
    ("-.->", EdgeStyle.Dotted, True),
    ("-->", EdgeStyle.Solid, True),
    ("===", EdgeStyle.Thick, False),
    ("-.-", EdgeStyle.Dotted, False),
    ("---", EdgeStyle.Solid, False),
]

_OPENERS = "[({"
_CLOSERS = "])}"


# ─── Parse Context ──────────────────────────────────────────────────────────


@dataclass
class _RouteDirective:
    from_id: str
    to_id: str
    from_side: str | None
    to_side: str | None


@dataclass
class _Context:
    nodes: dict[str, FlowNode] = field(default_factory=dict)
    edges: list[FlowEdge] = field(default_factory=list)
    subgraphs: list[Subgraph] = field(default_factory=list)
    stack: list[Subgraph] = field(default_factory=list)
    owned: set[str] = field(default_factory=set)  # node ids already placed in a subgraph
    routes: list[_RouteDirective] = field(default_factory=list)
    subgraph_count: int = 0

    @property
    def current(self) -> Subgraph | None:
        return self.stack[-1] if self.stack else None

    def claim(self, node: FlowNode) -> None:
        """Put ``node`` in the open subgraph unless a subgraph already holds it."""
        sg = self.current
        if sg is not None and node.id not in self.owned:
            sg.nodes.append(node)
            self.owned.add(node.id)


# ─── Helpers ────────────────────────────────────────────────────────────────


def strip_quotes(s: str) -> str:
    if len(s) >= 2 and s.startswith('"') and s.endswith('"'):
        return s[1:-1]
    return s


def strip_classes(s: str) -> tuple[str, list[str]]:
    """Split trailing ``:::cls`` suffixes off ``s``."""
    classes: list[str] = []
    rest = s
    while True:
        m = CLASS_SUFFIX_RE.search(rest)
        if m is None:
            break
        classes.insert(0, m.group(1))
        rest = rest[: m.start()]
    return rest, classes


def find_edge(text: str) -> tuple[int, str, EdgeStyle, bool] | None:
    """Find the leftmost edge token outside brackets and quotes.

    Returns:
        ``(index, token, style, has_arrow)`` or None when ``text`` has no edge.
    """
    depth = 0
    quoted = False
    for i, ch in enumerate(text):
        if ch == '"':
            quoted = not quoted
            continue
        if quoted:
            continue
        if ch in _OPENERS:
            depth += 1
            continue
        if ch in _CLOSERS:
            depth = max(depth - 1, 0)
            continue
        if depth:
            continue
        for token, style, has_arrow in EDGES:
            if text.startswith(token, i):
                return i, token, style, has_arrow
    return None


# ─── Statements ─────────────────────────────────────────────────────────────


def _parse_node(segment: str, ctx: _Context) -> str | None:
    """Register the node defined or referenced by ``segment`` and return its id."""
    stripped, classes = strip_classes(segment.strip())
    text = stripped.strip()
    if not text:
        return None

    for open_, close, shape in SHAPES:
        start = text.find(open_)
        if start <= 0 or not text.endswith(close) or len(text) - len(close) < start + len(open_):
            continue
        node_id = text[:start].strip()
        if not node_id:
            continue
        label = BR_RE.sub("\n", strip_quotes(text[start + len(open_) : len(text) - len(close)].strip()))
        node = ctx.nodes.get(node_id)
        if node is None:
            node = FlowNode(id=node_id, text=label, shape=shape, classes=classes)
            ctx.nodes[node_id] = node
        else:
            node.text = label
            node.shape = shape
            node.classes.extend(c for c in classes if c not in node.classes)
        ctx.claim(node)
        return node_id

    if not BARE_ID_RE.match(text):
        return None
    node = ctx.nodes.get(text)
    if node is None:
        node = FlowNode(id=text, text=text, classes=classes)
        ctx.nodes[text] = node
        ctx.claim(node)
    else:
        node.classes.extend(c for c in classes if c not in node.classes)
    return text


def _parse_statement(stmt: str, ctx: _Context) -> None:
    parts: list[str] = []
    links: list[tuple[EdgeStyle, bool, str | None]] = []

    remaining = stmt
    while True:
        found = find_edge(remaining)
        if found is None:
            parts.append(remaining.strip())
            break
        idx, token, style, has_arrow = found

        left = remaining[:idx]
        label: str | None = None
        inline = INLINE_LABEL_RE.match(left)
        if inline:
            left, label = inline.group(1), inline.group(2).strip()
        parts.append(left.strip())

        remaining = remaining[idx + len(token) :]
        if label is None:
            pipe = PIPE_LABEL_RE.match(remaining)
            if pipe:
                label = pipe.group(1).strip()
                remaining = remaining[pipe.end() :]
        links.append((style, has_arrow, label))

    if not links:
        _parse_node(stmt, ctx)
        return

    ids = [_parse_node(p, ctx) for p in parts]
    for i, (style, has_arrow, label) in enumerate(links):
        src, tgt = ids[i], ids[i + 1]
        if src is None or tgt is None:
            continue
        edge = FlowEdge(from_id=src, to_id=tgt, style=style, has_arrow=has_arrow, label=label or None)
        if ctx.current is not None:
            ctx.current.edges.append(edge)
        ctx.edges.append(edge)


def _open_subgraph(rest: str, ctx: _Context) -> None:
    body, classes = strip_classes(rest.strip())
    body = body.strip()
    titled = SUBGRAPH_TITLE_RE.match(body)
    if titled:
        sg_id = titled.group(1)
        title: str | None = strip_quotes(titled.group(2).strip())
    elif body:
        title = strip_quotes(body)
        sg_id = re.sub(r"\s+", "_", title)
    else:
        sg_id = f"subgraph_{ctx.subgraph_count}"
        title = None
    ctx.subgraph_count += 1

    sg = Subgraph(id=sg_id, title=title, classes=classes)
    if ctx.current is not None:
        ctx.current.subgraphs.append(sg)
    else:
        ctx.subgraphs.append(sg)
    ctx.stack.append(sg)


def _parse_line(raw: str, ctx: _Context) -> None:
    route = ROUTE_RE.search(raw)
    if route:
        props = route.group(3)
        from_side = FROM_SIDE_RE.search(props)
        to_side = TO_SIDE_RE.search(props)
        ctx.routes.append(
            _RouteDirective(
                from_id=route.group(1),
                to_id=route.group(2),
                from_side=from_side.group(1) if from_side else None,
                to_side=to_side.group(1) if to_side else None,
            )
        )
        return

    line = COMMENT_RE.sub("", raw).strip()
    if not line:
        return
    if line == "subgraph" or line.startswith(("subgraph ", "subgraph\t")):
        _open_subgraph(line[len("subgraph") :], ctx)
        return
    if line.rstrip(";").strip() == "end":
        if ctx.stack:
            ctx.stack.pop()
        return

    for stmt in line.split(";"):
        stmt = stmt.strip()
        if stmt:
            _parse_statement(stmt, ctx)


# ─── Entry Point ────────────────────────────────────────────────────────────


def parse_flowchart(text: str) -> FlowchartAST:
    """Parse Mermaid flowchart text.

    Lines before the ``flowchart``/``graph`` header are ignored. A header
    without a direction means top-down. When no header is found every line
    is parsed as a statement.

    Args:
        text: Mermaid source.

    Returns:
        The AST with nodes in first-mention order and edges in source order.
    """
    lines = text.splitlines()
    direction = Direction.TD
    start = 0
    for i, raw in enumerate(lines):
        m = HEADER_RE.match(COMMENT_RE.sub("", raw).strip())
        if m:
            if m.group(1):
                direction = Direction(m.group(1))
            start = i + 1
            break

    ctx = _Context()
    for raw in lines[start:]:
        _parse_line(raw, ctx)

    for route in ctx.routes:
        for edge in ctx.edges:
            if edge.from_id == route.from_id and edge.to_id == route.to_id:
                if route.from_side:
                    edge.from_side = route.from_side
                if route.to_side:
                    edge.to_side = route.to_side

    return FlowchartAST(
        direction=direction,
        nodes=list(ctx.nodes.values()),
        edges=ctx.edges,
        subgraphs=ctx.subgraphs,
    )
