"""Edge and node geometry for drawing an automaton.

Everything here is a pure function of state positions, the transition list
and the constants below, so a frame can be recomputed on every tick without
caching. Coordinates are screen coordinates: y grows downwards, so "above a
state" means a smaller y.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .automata import Automaton, Transition
from .geometry import (
    Point,
    Segment,
    arrowhead,
    direction,
    midpoint,
    perpendicular_offset,
    point_on_circle,
)

STATE_RADIUS = 40.0
PARALLEL_OFFSET = 20.0
HEAD_LENGTH = 10.0
HEAD_SPREAD = math.pi / 7
LABEL_NUDGE = 10.0

LOOP_ELEVATION = 150.0
LOOP_INSET = 10.0
LOOP_DROP = 25.0
LOOP_HEAD_DROP = 23.0
LOOP_LABEL_RISE = 70.0
LOOP_LABEL_NUDGE = 5.0

ACCEPT_RING_GAP = 5.0
STATE_LABEL_NUDGE = 12.0

ACTIVE_FILL = "#00ff00"
IDLE_FILL = "#66ccff"
ACCEPT_RING = "#ff0000"
OUTLINE = "#000000"
EDGE_COLOR = "#ff3300"


@dataclass(frozen=True)
class StraightEdge:
    transition: Transition
    start: Point
    end: Point
    head: Tuple[Segment, Segment]
    label_anchor: Point

    @property
    def midpoint(self) -> Point:
        return midpoint(self.start, self.end)


@dataclass(frozen=True)
class LoopEdge:
    transition: Transition
    start: Point
    control: Point
    end: Point
    head: Tuple[Segment, Segment]
    label_anchor: Point


EdgeGeometry = Union[StraightEdge, LoopEdge]


@dataclass(frozen=True)
class NodeGeometry:
    state: str
    center: Point
    radius: float
    fill: str
    ring_radius: Optional[float]
    label_anchor: Point

    @property
    def accepting(self) -> bool:
        return self.ring_radius is not None


@dataclass(frozen=True)
class Frame:
    nodes: Tuple[NodeGeometry, ...]
    edges: Tuple[EdgeGeometry, ...]
    current: Optional[str] = None


def straight_edge(
    transition: Transition,
    source: Point,
    target: Point,
    radius: float,
    offset: float = PARALLEL_OFFSET,
) -> StraightEdge:
    angle = direction(source, target)
    dx, dy = perpendicular_offset(angle, offset)
    # Opposite edges have angles pi apart, so their offsets point opposite ways.
    start = point_on_circle(source, radius, angle).shifted(dx, dy)
    end = point_on_circle(target, radius, angle + math.pi).shifted(dx, dy)
    head = arrowhead(end, direction(start, end), HEAD_LENGTH, HEAD_SPREAD)
    middle = midpoint(start, end)
    return StraightEdge(
        transition=transition,
        start=start,
        end=end,
        head=head,
        label_anchor=middle.shifted(-LABEL_NUDGE, -LABEL_NUDGE),
    )


def loop_edge(transition: Transition, center: Point, radius: float) -> LoopEdge:
    inset = radius - LOOP_INSET
    start = center.shifted(inset, -LOOP_DROP)
    control = center.shifted(0.0, -LOOP_ELEVATION)
    end = center.shifted(-inset, -LOOP_DROP)
    tip = center.shifted(-inset, -LOOP_HEAD_DROP)
    return LoopEdge(
        transition=transition,
        start=start,
        control=control,
        end=end,
        head=arrowhead(tip, math.pi, HEAD_LENGTH, HEAD_SPREAD),
        label_anchor=center.shifted(-LOOP_LABEL_NUDGE, -LOOP_LABEL_RISE),
    )


def layout_edges(
    positions: Mapping[str, Sequence[float]],
    radius: float,
    transitions: Iterable[Transition],
    offset: float = PARALLEL_OFFSET,
) -> List[EdgeGeometry]:
    """Geometry for every transition, in the order given.

    Edges between the same pair of states in opposite directions are pushed
    apart by `offset`. Two or more edges for the same ordered pair share the
    same line and overlap.
    """
    edges: List[EdgeGeometry] = []
    for transition in transitions:
        source = Point(*positions[transition.source])
        if transition.is_loop:
            edges.append(loop_edge(transition, source, radius))
            continue
        target = Point(*positions[transition.target])
        edges.append(straight_edge(transition, source, target, radius, offset))
    return edges


def node_fill(state: str, current: Optional[str]) -> str:
    return ACTIVE_FILL if state == current else IDLE_FILL


def layout_nodes(
    positions: Mapping[str, Sequence[float]],
    radius: float,
    current: Optional[str],
    accept_states: Iterable[str],
) -> List[NodeGeometry]:
    accepting = set(accept_states)
    nodes: List[NodeGeometry] = []
    for state, coords in positions.items():
        center = Point(*coords)
        nodes.append(
            NodeGeometry(
                state=state,
                center=center,
                radius=radius,
                fill=node_fill(state, current),
                ring_radius=radius + ACCEPT_RING_GAP if state in accepting else None,
                label_anchor=center.shifted(-STATE_LABEL_NUDGE, -STATE_LABEL_NUDGE),
            )
        )
    return nodes


def layout_frame(
    automaton: Automaton,
    current: Optional[str] = None,
    radius: float = STATE_RADIUS,
) -> Frame:
    """Everything a drawing backend needs for one render pass."""
    positions = automaton.positions
    nodes = layout_nodes(positions, radius, current, automaton.accept_states)
    edges = layout_edges(positions, radius, automaton.transitions)
    return Frame(nodes=tuple(nodes), edges=tuple(edges), current=current)
