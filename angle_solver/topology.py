"""Adjacency, line and triangle derivation from raw points and edges.

Everything here is a pure function of the current points, edges and lines:
topology is recomputed whenever the geometry changes rather than patched.
The one documented side effect is :func:`reveal_hidden_angles`, which flips
``hide`` on angle records that became relevant after triangle discovery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .angles import find_overlapping_angles, triangle_angles
from .geometry import are_collinear, collinear_chains, sort_line_points
from .logging_utils import apply_debug_logging
from .model import Angle, Edge, Line, Point, Triangle, triangle_key

logger = logging.getLogger(__name__)

Adjacency = Dict[str, Set[str]]


@dataclass
class Topology:
    adjacency: Adjacency
    lines: List[Line] = field(default_factory=list)
    triangles: List[Triangle] = field(default_factory=list)


def build_adjacency(edges: Iterable[Edge], point_ids: Optional[Iterable[str]] = None) -> Adjacency:
    """Symmetric neighbour map built from edges only.

    Edges touching unknown points (when ``point_ids`` is given) or joining a
    point to itself are ignored.
    """

    known = set(point_ids) if point_ids is not None else None
    adjacency: Adjacency = {}
    for edge in edges:
        a, b = edge.points
        if a == b:
            continue
        if known is not None and (a not in known or b not in known):
            logger.warning("Ignoring edge %s with unknown endpoint", edge.id)
            continue
        adjacency.setdefault(a, set()).add(b)
        adjacency.setdefault(b, set()).add(a)
    return adjacency


def has_direct_edge(p1: str, p2: str, adjacency: Mapping[str, Set[str]]) -> bool:
    return p2 in adjacency.get(p1, ())


def are_connected_via_line(p1: str, p2: str, lines: Sequence[Line], adjacency: Mapping[str, Set[str]]) -> bool:
    """True when a line holds both points and every step between them is an edge."""

    for line in lines:
        first = line.index(p1)
        second = line.index(p2)
        if first < 0 or second < 0:
            continue
        lo, hi = sorted((first, second))
        if all(has_direct_edge(line.points[i], line.points[i + 1], adjacency) for i in range(lo, hi)):
            return True
    return False


def are_connected(p1: str, p2: str, adjacency: Mapping[str, Set[str]], lines: Sequence[Line]) -> bool:
    return has_direct_edge(p1, p2, adjacency) or are_connected_via_line(p1, p2, lines, adjacency)


def _on_common_line(points: Sequence[str], lines: Sequence[Line]) -> bool:
    return any(line.contains(*points) for line in lines)


def _merge_groups(groups: List[List[str]]) -> List[List[str]]:
    merged = [list(dict.fromkeys(group)) for group in groups]
    changed = True
    while changed:
        changed = False
        for i in range(len(merged)):
            for j in range(i + 1, len(merged)):
                if len(set(merged[i]) & set(merged[j])) >= 2:
                    merged[i] = list(dict.fromkeys(merged[i] + merged[j]))
                    del merged[j]
                    changed = True
                    break
            if changed:
                break
    return merged


def derive_lines(
    points: Mapping[str, Point],
    adjacency: Mapping[str, Set[str]],
    lines: Sequence[Line] = (),
    *,
    tolerance: float = 0.01,
) -> List[Line]:
    """Return the maximal collinear groups formed by ``lines`` and straight edge chains.

    Groups sharing two points describe the same line and are merged.  Groups
    with fewer than three known points are dropped and every group is ordered
    with :func:`~angle_solver.geometry.sort_line_points`.  Existing line ids are
    kept for the group that absorbed them.
    """

    sources: List[List[str]] = [list(line.points) for line in lines]
    sources.extend(collinear_chains(points, adjacency, tolerance))
    merged = _merge_groups(sources)

    result: List[Line] = []
    used_ids: Set[str] = set()
    for group in merged:
        ordered = sort_line_points(group, points)
        if len(ordered) < 3:
            continue
        line_id = next(
            (line.id for line in lines if line.id not in used_ids and set(line.points) <= set(ordered)),
            "",
        )
        if not line_id:
            counter = len(result)
            while f"line-{counter}" in used_ids or any(line.id == f"line-{counter}" for line in lines):
                counter += 1
            line_id = f"line-{counter}"
        used_ids.add(line_id)
        result.append(Line(id=line_id, points=ordered))
    return result


def find_triangles(
    adjacency: Mapping[str, Set[str]],
    lines: Sequence[Line],
    points: Optional[Mapping[str, Point]] = None,
    *,
    tolerance: float = 0.01,
) -> List[Triangle]:
    """Enumerate triangles as canonical sorted tuples.

    A triple qualifies when its three pairs are connected (directly or along
    a line) and it is not collinear, either per a known line or, when
    ``points`` is supplied, by position.  A second pass walks every line and
    adds apex points connected to two points of it, even when the segment
    between those two points is not drawn.
    """

    def _degenerate(triple: Sequence[str]) -> bool:
        if _on_common_line(triple, lines):
            return True
        if points is not None and all(pid in points for pid in triple):
            a, b, c = (points[pid] for pid in triple)
            return are_collinear(a, b, c, tolerance)
        return False

    found: Dict[Triangle, None] = {}
    point_ids = list(adjacency)
    for a, b, c in combinations(point_ids, 3):
        if not (
            are_connected(a, b, adjacency, lines)
            and are_connected(b, c, adjacency, lines)
            and are_connected(a, c, adjacency, lines)
        ):
            continue
        if _degenerate((a, b, c)):
            continue
        found.setdefault(triangle_key((a, b, c)), None)

    for line in lines:
        for apex in point_ids:
            if apex in line.points:
                continue
            for i, base1 in enumerate(line.points):
                for base2 in line.points[i + 1:]:
                    key = triangle_key((apex, base1, base2))
                    if key in found:
                        continue
                    if not (
                        are_connected(apex, base1, adjacency, lines)
                        and are_connected(apex, base2, adjacency, lines)
                    ):
                        continue
                    if _degenerate((apex, base1, base2)):
                        continue
                    found[key] = None

    return list(found)


def reveal_hidden_angles(angles: Sequence[Angle], triangles: Sequence[Triangle], lines: Sequence[Line]) -> List[Angle]:
    """Unhide hidden angles that belong to a triangle or sit on a line.

    Angles with an overlapping twin (same vertex, one shared ray, the other
    ray pointing the same way) stay hidden.  Returns the angles that changed.
    """

    by_vertex: Dict[str, List[Angle]] = {}
    for angle in angles:
        by_vertex.setdefault(angle.point_id, []).append(angle)

    in_triangle: Set[int] = set()
    for triangle in triangles:
        for angle in triangle_angles(triangle, by_vertex, lines):
            in_triangle.add(id(angle))

    revealed: List[Angle] = []
    for angle in angles:
        if not angle.hide:
            continue
        on_line = any(angle.point_id in line.points for line in lines)
        if id(angle) not in in_triangle and not on_line:
            continue
        if find_overlapping_angles(angle, by_vertex[angle.point_id], lines):
            continue
        angle.hide = False
        revealed.append(angle)
    if revealed:
        logger.info("Revealed %d hidden angle(s)", len(revealed))
    return revealed


def build_topology(
    points: Sequence[Point],
    edges: Sequence[Edge],
    lines: Sequence[Line] = (),
    *,
    derive: bool = True,
    tolerance: float = 0.01,
) -> Topology:
    by_id = {point.id: point for point in points}
    adjacency = build_adjacency(edges, by_id)
    if derive:
        lines = derive_lines(by_id, adjacency, lines, tolerance=tolerance)
    else:
        lines = [Line(id=line.id, points=sort_line_points(line.points, by_id)) for line in lines]
        lines = [line for line in lines if len(line.points) >= 3]
    triangles = find_triangles(adjacency, lines, by_id, tolerance=tolerance)
    logger.info(
        "Topology: %d point(s), %d line(s), %d triangle(s)",
        len(by_id),
        len(lines),
        len(triangles),
    )
    return Topology(adjacency=adjacency, lines=list(lines), triangles=triangles)


apply_debug_logging(globals(), logger=logger)
