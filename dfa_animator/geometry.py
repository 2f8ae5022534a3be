from __future__ import annotations

import math
from typing import List, NamedTuple, Tuple


class Point(NamedTuple):
    x: float
    y: float

    def shifted(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


class Segment(NamedTuple):
    start: Point
    end: Point


def point_on_circle(center: Point, radius: float, angle: float) -> Point:
    """Return the point on the circle around `center` at `angle` radians."""
    return Point(center.x + radius * math.cos(angle), center.y + radius * math.sin(angle))


def perpendicular_offset(angle: float, distance: float) -> Tuple[float, float]:
    return distance * math.sin(angle), -distance * math.cos(angle)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def direction(a: Point, b: Point) -> float:
    return math.atan2(b.y - a.y, b.x - a.x)


def arrowhead(tip: Point, angle: float, length: float, spread: float) -> Tuple[Segment, Segment]:
    """Two barbs trailing back from `tip` for a line travelling at `angle`."""
    first = Segment(tip, point_on_circle(tip, -length, angle - spread))
    second = Segment(tip, point_on_circle(tip, -length, angle + spread))
    return first, second


def quadratic_points(start: Point, control: Point, end: Point, steps: int = 16) -> List[Point]:
    """Sample a quadratic Bezier curve into `steps + 1` points."""
    points: List[Point] = []
    for i in range(steps + 1):
        t = i / steps
        u = 1 - t
        points.append(
            Point(
                u * u * start.x + 2 * u * t * control.x + t * t * end.x,
                u * u * start.y + 2 * u * t * control.y + t * t * end.y,
            )
        )
    return points
