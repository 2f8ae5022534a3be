import math

import pytest

from dfa_animator.automata import Transition
from dfa_animator.geometry import Point, arrowhead, midpoint, point_on_circle, quadratic_points
from dfa_animator.layout import (
    ACTIVE_FILL,
    HEAD_LENGTH,
    IDLE_FILL,
    LOOP_ELEVATION,
    PARALLEL_OFFSET,
    STATE_RADIUS,
    LoopEdge,
    StraightEdge,
    layout_edges,
    layout_frame,
    layout_nodes,
)

POSITIONS = {"a": (100.0, 100.0), "b": (300.0, 100.0), "c": (300.0, 300.0)}


def test_straight_edge_is_clipped_and_offset():
    (edge,) = layout_edges(POSITIONS, 40, [Transition("a", "b", "x")])
    assert isinstance(edge, StraightEdge)
    # theta = 0: offset vector is (0, -20), i.e. drawn above the centre line.
    assert edge.start.x == pytest.approx(140.0)
    assert edge.start.y == pytest.approx(80.0)
    assert edge.end.x == pytest.approx(260.0)
    assert edge.end.y == pytest.approx(80.0)
    assert edge.label_anchor.x == pytest.approx(190.0)
    assert edge.label_anchor.y == pytest.approx(70.0)


def test_endpoints_sit_on_circle_before_offset():
    (edge,) = layout_edges(POSITIONS, 40, [Transition("a", "c", "x")], offset=0)
    for point, center in ((edge.start, POSITIONS["a"]), (edge.end, POSITIONS["c"])):
        assert math.hypot(point.x - center[0], point.y - center[1]) == pytest.approx(40.0)


def test_opposite_edges_do_not_overlap():
    forward, backward = layout_edges(
        POSITIONS, STATE_RADIUS, [Transition("a", "c", "0"), Transition("c", "a", "1")]
    )
    separation = math.hypot(
        forward.midpoint.x - backward.midpoint.x, forward.midpoint.y - backward.midpoint.y
    )
    assert separation == pytest.approx(2 * PARALLEL_OFFSET)
    assert forward.label_anchor != backward.label_anchor


def test_same_direction_duplicates_share_a_line():
    first, second = layout_edges(POSITIONS, 40, [Transition("a", "b", "0"), Transition("a", "b", "1")])
    assert first.start == second.start
    assert first.end == second.end


def test_arrowhead_barbs():
    (edge,) = layout_edges(POSITIONS, 40, [Transition("a", "b", "x")])
    for barb in edge.head:
        assert barb.start == edge.end
        length = math.hypot(barb.end.x - barb.start.x, barb.end.y - barb.start.y)
        assert length == pytest.approx(HEAD_LENGTH)
        # pointing right, so the barbs trail to the left
        assert barb.end.x < edge.end.x
    upper, lower = sorted(edge.head, key=lambda barb: barb.end.y)
    assert upper.end.y < edge.end.y < lower.end.y


def test_self_loop_rises_above_state():
    (edge,) = layout_edges(POSITIONS, 40, [Transition("b", "b", "1")])
    assert isinstance(edge, LoopEdge)
    assert edge.control == Point(300.0, 100.0 - LOOP_ELEVATION)
    assert edge.control.y < POSITIONS["b"][1]
    assert edge.start == Point(330.0, 75.0)
    assert edge.end == Point(270.0, 75.0)
    assert edge.label_anchor == Point(295.0, 30.0)
    tip = Point(270.0, 77.0)
    for barb in edge.head:
        assert barb.start == tip
        # leftward arrow: barbs trail to the right
        assert barb.end.x > tip.x


def test_layout_is_repeatable(example):
    positions = example.positions
    first = layout_edges(positions, STATE_RADIUS, example.transitions)
    second = layout_edges(positions, STATE_RADIUS, example.transitions)
    assert first == second
    assert len(first) == len(example.transitions)


def test_example_opposite_pairs_are_separated(example):
    edges = layout_edges(example.positions, STATE_RADIUS, example.transitions)
    by_pair = {(edge.transition.source, edge.transition.target): edge for edge in edges}
    for (source, target), edge in by_pair.items():
        back = by_pair.get((target, source))
        if source == target or back is None:
            continue
        gap = math.hypot(edge.midpoint.x - back.midpoint.x, edge.midpoint.y - back.midpoint.y)
        assert gap > 1.0


def test_nodes_highlight_and_rings():
    nodes = {node.state: node for node in layout_nodes(POSITIONS, 40, "b", ["c"])}
    assert nodes["b"].fill == ACTIVE_FILL
    assert nodes["a"].fill == IDLE_FILL
    assert nodes["c"].ring_radius == 45
    assert nodes["a"].ring_radius is None
    assert nodes["a"].label_anchor == Point(88.0, 88.0)


def test_frame_tracks_current_state(example):
    frame = layout_frame(example, "q4")
    assert frame.current == "q4"
    assert [node.state for node in frame.nodes if node.fill == ACTIVE_FILL] == ["q4"]
    assert [node.state for node in frame.nodes if node.accepting] == ["q3"]
    assert len(frame.edges) == 12
    assert layout_frame(example, "q4") == frame


def test_geometry_helpers():
    assert point_on_circle(Point(0, 0), 2, math.pi / 2).y == pytest.approx(2)
    assert midpoint(Point(0, 0), Point(4, 2)) == Point(2, 1)
    first, second = arrowhead(Point(0, 0), 0.0, 10, math.pi / 7)
    assert first.end.x == pytest.approx(-10 * math.cos(math.pi / 7))
    assert first.end.y == pytest.approx(10 * math.sin(math.pi / 7))
    assert second.end.y == pytest.approx(-first.end.y)
    points = quadratic_points(Point(0, 0), Point(5, -10), Point(10, 0), steps=4)
    assert points[0] == Point(0, 0)
    assert points[-1] == Point(10, 0)
    assert points[2] == Point(5, -5)
