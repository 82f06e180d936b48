"""Plane geometry helpers working on point coordinates.

The routines here are pure functions over :class:`~angle_solver.model.Point`
records.  Angles are measured in radians unless a name says otherwise;
degree values exposed to the solver are always the smaller of the two arcs
between two rays.  Helpers return ``None`` when the requested construction
is degenerate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from .model import Point

Vector = Tuple[float, float]

_EPS = 1e-12
TWO_PI = 2.0 * math.pi
MIN_ANGLE_RADIANS = 0.1
MAX_ANGLE_DEGREES = 179


def _sub(a: Point, b: Point) -> Vector:
    return (a.x - b.x, a.y - b.y)


def _dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _cross(a: Vector, b: Vector) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _norm(vec: Vector) -> float:
    return math.hypot(vec[0], vec[1])


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def direction(origin: Point, target: Point) -> float:
    """Return the polar angle of the ray ``origin -> target`` in ``(-pi, pi]``."""

    return math.atan2(target.y - origin.y, target.x - origin.x)


def normalize_angle(angle: float) -> float:
    """Map ``angle`` into ``[0, 2*pi)``."""

    result = math.fmod(angle, TWO_PI)
    if result < 0:
        result += TWO_PI
    if result >= TWO_PI:
        result -= TWO_PI
    return result


def angle_between_degrees(vertex: Point, p1: Point, p2: Point) -> float:
    """Return the smaller arc between rays ``vertex->p1`` and ``vertex->p2``."""

    diff = normalize_angle(direction(vertex, p2) - direction(vertex, p1))
    if diff > math.pi:
        diff = TWO_PI - diff
    return math.degrees(diff)


def ray_sine(vertex: Point, p1: Point, p2: Point) -> float:
    v1 = _sub(p1, vertex)
    v2 = _sub(p2, vertex)
    denom = _norm(v1) * _norm(v2)
    if denom <= _EPS:
        return 0.0
    return abs(_cross(v1, v2)) / denom


def are_collinear(p1: Point, p2: Point, p3: Point, tolerance: float = 0.01) -> bool:
    """Positional collinearity test, scale free.

    ``tolerance`` is the sine of the angle at ``p2`` below which the three
    points are considered to lie on one line.  Coincident points count as
    collinear.
    """

    return ray_sine(p2, p1, p3) <= tolerance


def is_between(point: Point, a: Point, b: Point, tolerance: float = 0.01) -> bool:
    """Return ``True`` when ``point`` lies on segment ``ab`` strictly inside it."""

    if not are_collinear(a, point, b, tolerance):
        return False
    return _dot(_sub(a, point), _sub(b, point)) < 0


def is_point_on_circle(point: Point, center_x: float, center_y: float, radius: float, threshold: float = 5.0) -> bool:
    return abs(math.hypot(point.x - center_x, point.y - center_y) - radius) <= threshold


def are_opposite_rays(vertex: Point, p1: Point, p2: Point, tolerance_degrees: float = 1.0) -> bool:
    """Return ``True`` when ``p1`` and ``p2`` lie on opposite sides of ``vertex`` on one line."""

    diff = normalize_angle(direction(vertex, p2) - direction(vertex, p1))
    return abs(math.degrees(diff) - 180.0) <= tolerance_degrees


@dataclass
class AngleGeometry:
    start_angle: float
    end_angle: float
    degrees: int
    radius: int


def angle_geometry(vertex: Point, p1: Point, p2: Point, scale: float = 1.0) -> Optional[AngleGeometry]:
    """Return the drawing/ground-truth data for the smaller arc at ``vertex``.

    ``None`` means the rays are too close to each other (at most
    :data:`MIN_ANGLE_RADIANS`) or nearly opposite (rounded value of at least
    :data:`MAX_ANGLE_DEGREES` degrees).
    """

    start = direction(vertex, p1)
    end = direction(vertex, p2)
    diff = normalize_angle(end - start)
    if diff > math.pi:
        diff = TWO_PI - diff
        start, end = end, start

    degrees = round_half_up(math.degrees(diff))
    if not (MIN_ANGLE_RADIANS < diff < math.pi) or degrees >= MAX_ANGLE_DEGREES:
        return None

    radius = round_half_up((25 + degrees / 10) * scale)
    return AngleGeometry(start_angle=start, end_angle=end, degrees=degrees, radius=radius)


def sort_line_points(point_ids: Sequence[str], points: Mapping[str, Point]) -> List[str]:
    """Order collinear points along their line, by x first and y as tie-break.

    Points are projected onto the direction between the two farthest points, so
    nearly vertical lines with rounded coordinates still come out in order.
    """

    ids = [pid for pid in dict.fromkeys(point_ids) if pid in points]
    if len(ids) < 2:
        return ids

    anchor_a, anchor_b, best = ids[0], ids[1], -1.0
    for i, first in enumerate(ids):
        for second in ids[i + 1:]:
            dist = distance(points[first], points[second])
            if dist > best:
                anchor_a, anchor_b, best = first, second, dist

    origin = points[anchor_a]
    axis = _sub(points[anchor_b], origin)
    if axis[0] < -_EPS or (abs(axis[0]) <= _EPS and axis[1] < 0):
        axis = (-axis[0], -axis[1])

    def _position(pid: str) -> float:
        return _dot(_sub(points[pid], origin), axis)

    return sorted(ids, key=_position)


def collinear_chains(points: Mapping[str, Point], adjacency: Mapping[str, Sequence[str]], tolerance: float = 0.01) -> List[List[str]]:
    """Return every ``[a, b, c]`` where edges ``a-b`` and ``b-c`` continue straight through ``b``."""

    chains: List[List[str]] = []
    for middle, neighbours in adjacency.items():
        if middle not in points:
            continue
        ordered = sorted(pid for pid in neighbours if pid in points)
        for i, first in enumerate(ordered):
            for last in ordered[i + 1:]:
                if is_between(points[middle], points[first], points[last], tolerance):
                    chains.append([first, middle, last])
    return chains
