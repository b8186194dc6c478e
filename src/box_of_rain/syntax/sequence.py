"""Sequence parser — Mermaid ``sequenceDiagram`` text to a SequenceAST."""

from __future__ import annotations

import re

from box_of_rain.syntax.flowchart import COMMENT_RE, strip_quotes
from box_of_rain.syntax.types import Message, MessageArrow, MessageStyle, Participant, SequenceAST

HEADER = "sequenceDiagram"
PARTICIPANT_RE = re.compile(r"^(participant|actor)\s+(.+)$")
ALIAS_RE = re.compile(r"^(\S+)\s+as\s+(.+)$")

# Block and annotation statements carry no participants or messages.
SKIPPED_KEYWORDS = frozenset(
    {
        "note", "loop", "alt", "else", "opt", "par", "and", "end", "rect",
        "critical", "break", "activate", "deactivate", "autonumber", "title",
    }
)

# Longest first so ``-->>`` is not read as ``->>``.
ARROWS: list[tuple[str, MessageStyle, MessageArrow]] = [
    ("-->>", MessageStyle.Dashed, MessageArrow.Head),
    ("->>", MessageStyle.Solid, MessageArrow.Head),
    ("--x", MessageStyle.Dashed, MessageArrow.Cross),
    ("-x", MessageStyle.Solid, MessageArrow.Cross),
    ("--)", MessageStyle.Dashed, MessageArrow.Open),
    ("-)", MessageStyle.Solid, MessageArrow.Open),
]


def _parse_message(line: str) -> Message | None:
    for token, style, arrow in ARROWS:
        idx = line.find(token)
        if idx < 0:
            continue
        src = line[:idx].strip()
        rest = line[idx + len(token) :].strip()
        tgt, _, label = rest.partition(":")
        # Activation markers: A->>+B, B-->>-A
        tgt = tgt.strip().lstrip("+-").strip()
        if src and tgt:
            return Message(from_id=src, to_id=tgt, label=label.strip(), style=style, arrow=arrow)
    return None


def parse_sequence(text: str) -> SequenceAST:
    """Parse Mermaid sequence diagram text.

    Lines before the ``sequenceDiagram`` header are ignored, as are lines
    that are neither declarations nor messages (notes, loops, activations).
    Participants appear in declaration order, then in order of first use.
    """
    ast = SequenceAST()
    known: set[str] = set()

    def ensure(pid: str, alias: str | None = None, is_actor: bool = False) -> None:
        if pid not in known:
            known.add(pid)
            ast.participants.append(Participant(id=pid, alias=alias, is_actor=is_actor))

    started = False
    for raw in text.splitlines():
        line = COMMENT_RE.sub("", raw).strip()
        if not line:
            continue
        if line == HEADER:
            started = True
            continue
        if not started:
            continue

        decl = PARTICIPANT_RE.match(line)
        if decl:
            is_actor = decl.group(1) == "actor"
            rest = decl.group(2).strip()
            aliased = ALIAS_RE.match(rest)
            if aliased:
                ensure(aliased.group(1), strip_quotes(aliased.group(2).strip()), is_actor)
            else:
                ensure(strip_quotes(rest), is_actor=is_actor)
            continue

        if line.split(maxsplit=1)[0].lower() in SKIPPED_KEYWORDS:
            continue

        msg = _parse_message(line)
        if msg is not None:
            ensure(msg.from_id)
            ensure(msg.to_id)
            ast.messages.append(msg)

    return ast
