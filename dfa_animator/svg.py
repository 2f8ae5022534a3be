from __future__ import annotations

from pathlib import Path
from typing import List, Optional
from xml.sax.saxutils import escape

from .automata import Automaton
from .geometry import Point, Segment
from .layout import (
    ACCEPT_RING,
    EDGE_COLOR,
    OUTLINE,
    STATE_RADIUS,
    Frame,
    LoopEdge,
    layout_frame,
)

STATE_FONT_SIZE = 24
EDGE_FONT_SIZE = 18


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _point(p: Point) -> str:
    return f"{_fmt(p.x)},{_fmt(p.y)}"


def _segment(segment: Segment, color: str) -> str:
    return (
        f'  <line x1="{_fmt(segment.start.x)}" y1="{_fmt(segment.start.y)}" '
        f'x2="{_fmt(segment.end.x)}" y2="{_fmt(segment.end.y)}" stroke="{color}" stroke-width="2"/>'
    )


def _text(anchor: Point, text: str, size: int) -> str:
    # Anchors are top-left corners of the glyph box, like the canvas backend.
    return (
        f'  <text x="{_fmt(anchor.x)}" y="{_fmt(anchor.y)}" font-family="Arial" '
        f'font-size="{size}" dominant-baseline="hanging">{escape(text)}</text>'
    )


def frame_to_svg(frame: Frame, *, width: int = 600, height: int = 400) -> str:
    """Return an SVG document drawing one layout frame."""
    lines: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">',
        f'  <rect width="{width}" height="{height}" fill="#ffffff"/>',
    ]

    for node in frame.nodes:
        lines.append(
            f'  <circle cx="{_fmt(node.center.x)}" cy="{_fmt(node.center.y)}" r="{_fmt(node.radius)}" '
            f'fill="{node.fill}" stroke="{OUTLINE}" stroke-width="2"/>'
        )
        if node.ring_radius is not None:
            lines.append(
                f'  <circle cx="{_fmt(node.center.x)}" cy="{_fmt(node.center.y)}" r="{_fmt(node.ring_radius)}" '
                f'fill="none" stroke="{ACCEPT_RING}" stroke-width="4"/>'
            )
        lines.append(_text(node.label_anchor, node.state, STATE_FONT_SIZE))

    for edge in frame.edges:
        if isinstance(edge, LoopEdge):
            lines.append(
                f'  <path d="M {_point(edge.start)} Q {_point(edge.control)} {_point(edge.end)}" '
                f'fill="none" stroke="{EDGE_COLOR}" stroke-width="2"/>'
            )
        else:
            lines.append(_segment(Segment(edge.start, edge.end), EDGE_COLOR))
        for barb in edge.head:
            lines.append(_segment(barb, EDGE_COLOR))
        lines.append(_text(edge.label_anchor, edge.transition.symbol, EDGE_FONT_SIZE))

    lines.append("</svg>")
    return "\n".join(lines)


def automaton_to_svg(
    automaton: Automaton,
    *,
    current: Optional[str] = None,
    radius: float = STATE_RADIUS,
    width: int = 600,
    height: int = 400,
) -> str:
    return frame_to_svg(layout_frame(automaton, current, radius), width=width, height=height)


def write_svg(automaton: Automaton, path: str, **kwargs) -> str:
    """Write an SVG snapshot of the automaton at `path` and return the path."""
    svg = automaton_to_svg(automaton, **kwargs)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(svg + "\n")
    return path
