"""Rays around a vertex and the ways their angles tile an arc.

A :class:`RayFan` orders the rays of all angle records at one vertex
counter-clockwise and answers which chains of angles cover a given arc.
An angle can only be used for the step ``i -> j`` when its smaller arc runs
counter-clockwise from ray ``i`` to ray ``j``, so every chain returned is a
geometric tiling of the arc it spans.  Sub-results are memoized on
``(start_index, end_index)``; fans with more than ``max_rays`` rays only use
chains of neighbouring rays.
"""

from __future__ import annotations

import math
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from .geometry import are_opposite_rays, direction, distance, normalize_angle
from .model import Angle, Line, Point

Chain = Tuple[Angle, ...]


class RayFan:
    def __init__(
        self,
        vertex: Point,
        angles: Sequence[Angle],
        points: Mapping[str, Point],
        *,
        max_rays: int = 12,
    ) -> None:
        self.vertex = vertex
        self.angles = [angle for angle in angles if all(ray in points for ray in angle.sidepoints)]
        self.points = points
        self.max_rays = max_rays

        rays = list(dict.fromkeys(ray for angle in self.angles for ray in angle.sidepoints))
        rays.sort(key=lambda ray: (normalize_angle(direction(vertex, points[ray])), distance(vertex, points[ray])))
        self.rays: List[str] = rays
        self.directions: List[float] = [normalize_angle(direction(vertex, points[ray])) for ray in rays]
        self.index: Dict[str, int] = {ray: idx for idx, ray in enumerate(rays)}

        self._pairs: Dict[FrozenSet[str], Angle] = {}
        for angle in self.angles:
            self._pairs.setdefault(frozenset(angle.sidepoints), angle)
        self._memo: Dict[Tuple[int, int], Tuple[Chain, ...]] = {}

    def __len__(self) -> int:
        return len(self.rays)

    @property
    def exhaustive(self) -> bool:
        return len(self.rays) <= self.max_rays

    def find_angle(self, ray1: str, ray2: str) -> Optional[Angle]:
        return self._pairs.get(frozenset((ray1, ray2)))

    def arc(self, angle: Angle) -> Optional[Tuple[int, int]]:
        """Ray indices ``(i, j)`` such that ``angle`` runs counter-clockwise from ``i`` to ``j``."""

        first = self.index.get(angle.sidepoints[0])
        second = self.index.get(angle.sidepoints[1])
        if first is None or second is None:
            return None
        span = normalize_angle(self.directions[second] - self.directions[first])
        return (first, second) if span <= math.pi else (second, first)

    def step_angle(self, start: int, end: int) -> Optional[Angle]:
        angle = self.find_angle(self.rays[start], self.rays[end])
        if angle is None or self.arc(angle) != (start, end):
            return None
        return angle

    def decompositions(self, start: int, end: int) -> Tuple[Chain, ...]:
        """All chains of angles covering the counter-clockwise arc ``start -> end``."""

        if start == end:
            return ((),)
        key = (start, end)
        cached = self._memo.get(key)
        if cached is not None:
            return cached

        count = len(self.rays)
        steps = (end - start) % count
        reach = steps if self.exhaustive else 1
        chains: List[Chain] = []
        for step in range(1, reach + 1):
            middle = (start + step) % count
            angle = self.step_angle(start, middle)
            if angle is None:
                continue
            for rest in self.decompositions(middle, end):
                chains.append((angle,) + rest)
        if not self.exhaustive and steps > 1:
            # the direct angle still counts as its own one-piece chain
            direct = self.step_angle(start, end)
            if direct is not None:
                chains.append((direct,))
        result = tuple(chains)
        self._memo[key] = result
        return result

    def composed_groups(self) -> List[Tuple[Angle, Chain]]:
        """Pairs ``(parent, children)`` where 2+ children tile the parent's arc."""

        groups: List[Tuple[Angle, Chain]] = []
        count = len(self.rays)
        for parent in self.angles:
            arc = self.arc(parent)
            if arc is None:
                continue
            start, end = arc
            if (end - start) % count < 2:
                continue
            for children in self.decompositions(start, end):
                if len(children) >= 2:
                    groups.append((parent, children))
        return groups

    def elementary_cycle(self) -> List[Angle]:
        cycle: List[Angle] = []
        count = len(self.rays)
        for idx in range(count):
            angle = self.step_angle(idx, (idx + 1) % count)
            if angle is not None:
                cycle.append(angle)
        return cycle

    def is_closed(self) -> bool:
        return len(self.rays) >= 3 and len(self.elementary_cycle()) == len(self.rays)

    def circle_partitions(self) -> List[Chain]:
        """Every chain of 3+ angles going once around the vertex, elementary cycle first."""

        count = len(self.rays)
        elementary = tuple(self.elementary_cycle())
        partitions: List[Chain] = []
        seen = set()
        if len(elementary) == count and count >= 3:
            partitions.append(elementary)
            seen.add(frozenset(angle.id for angle in elementary))
        if not self.exhaustive:
            return partitions

        for start in range(count):
            for step in range(1, count):
                middle = (start + step) % count
                first = self.step_angle(start, middle)
                if first is None:
                    continue
                for rest in self.decompositions(middle, start):
                    chain = (first,) + rest
                    if len(chain) < 3:
                        continue
                    key = frozenset(angle.id for angle in chain)
                    if key in seen:
                        continue
                    seen.add(key)
                    partitions.append(chain)
        return partitions

    def are_opposite(self, first: int, second: int, lines: Sequence[Line]) -> bool:
        """True when rays ``first`` and ``second`` continue each other through the vertex."""

        ray1 = self.rays[first]
        ray2 = self.rays[second]
        vertex_id = self.vertex.id
        for line in lines:
            if line.contains(vertex_id, ray1, ray2):
                idx = line.index(vertex_id)
                if (line.index(ray1) - idx) * (line.index(ray2) - idx) < 0:
                    return True
        return are_opposite_rays(self.vertex, self.points[ray1], self.points[ray2])


def straight_partitions(fan: RayFan, line: Line) -> List[Chain]:
    """Chains of angles running from one side of ``line`` to the other through the fan vertex.

    Empty unless the vertex lies strictly inside ``line``.  Each chain covers
    one half-plane and therefore tiles a straight angle.
    """

    vertex_id = fan.vertex.id
    position = line.index(vertex_id)
    if position <= 0 or position >= len(line.points) - 1:
        return []
    before = [fan.index[pid] for pid in line.points[:position] if pid in fan.index]
    after = [fan.index[pid] for pid in line.points[position + 1:] if pid in fan.index]
    if not before or not after:
        return []

    chains: List[Chain] = []
    seen = set()
    for first in before:
        for second in after:
            for start, end in ((first, second), (second, first)):
                for chain in fan.decompositions(start, end):
                    if not chain:
                        continue
                    key = frozenset(angle.id for angle in chain)
                    if key in seen:
                        continue
                    seen.add(key)
                    chains.append(chain)
    return chains


def build_fans(
    angles_by_vertex: Mapping[str, Sequence[Angle]],
    points: Mapping[str, Point],
    *,
    max_rays: int = 12,
    min_angles: int = 2,
) -> Dict[str, RayFan]:
    fans: Dict[str, RayFan] = {}
    for vertex, angles in angles_by_vertex.items():
        if vertex not in points or len(angles) < min_angles:
            continue
        fans[vertex] = RayFan(points[vertex], angles, points, max_rays=max_rays)
    return fans
