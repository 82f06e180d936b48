"""Creation and lookup of angle records."""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .geometry import angle_geometry
from .model import Angle, AngleValue, Line, Point, angle_name

logger = logging.getLogger(__name__)

AngleKey = Tuple[str, FrozenSet[str]]


class AngleRegistry:
    """Keeps at most one angle record per vertex and unordered ray pair.

    New records get their ground truth (``calculated_value``), arc bounds and
    drawing radius from point coordinates.  Requests that would produce a
    duplicate, a straight angle along a known line, or a degenerate arc are
    ignored and :meth:`create_angle` returns ``None``.
    """

    def __init__(
        self,
        points: Mapping[str, Point],
        lines: Sequence[Line] = (),
        angles: Optional[Iterable[Angle]] = None,
        *,
        scale: float = 1.0,
    ) -> None:
        self.points = points
        self.lines = list(lines)
        self.scale = scale
        self.angles: List[Angle] = []
        self._by_key: Dict[AngleKey, Angle] = {}
        for angle in angles or ():
            if angle.key not in self._by_key:
                self._by_key[angle.key] = angle
                self.angles.append(angle)

    def __len__(self) -> int:
        return len(self.angles)

    def __iter__(self):
        return iter(self.angles)

    def find(self, vertex: str, ray1: str, ray2: str) -> Optional[Angle]:
        return self._by_key.get((vertex, frozenset((ray1, ray2))))

    def is_straight(self, vertex: str, ray1: str, ray2: str) -> bool:
        return any(line.contains(vertex, ray1, ray2) for line in self.lines)

    def create_angle(
        self,
        vertex: str,
        ray1: str,
        ray2: str,
        *,
        value: AngleValue = None,
        label: str = "",
        target: bool = False,
        hide: bool = False,
    ) -> Optional[Angle]:
        if len({vertex, ray1, ray2}) != 3:
            return None
        if vertex not in self.points or ray1 not in self.points or ray2 not in self.points:
            logger.warning("Cannot create angle %s: unknown point", angle_name(vertex, ray1, ray2))
            return None
        if self.find(vertex, ray1, ray2) is not None:
            return None
        if self.is_straight(vertex, ray1, ray2):
            return None

        geometry = angle_geometry(self.points[vertex], self.points[ray1], self.points[ray2], self.scale)
        if geometry is None:
            return None

        angle = Angle(
            point_id=vertex,
            sidepoints=(ray1, ray2),
            value=value,
            calculated_value=float(geometry.degrees),
            label=label,
            start_angle=geometry.start_angle,
            end_angle=geometry.end_angle,
            radius=float(geometry.radius),
            hide=hide,
            target=target,
        )
        self._by_key[angle.key] = angle
        self.angles.append(angle)
        return angle

    def create_all_angles(self, adjacency: Mapping[str, Iterable[str]]) -> List[Angle]:
        """Create every valid angle between two neighbours of each point.

        Candidates at a vertex are created largest first.
        """

        created: List[Angle] = []
        for vertex, neighbours in adjacency.items():
            if vertex not in self.points:
                continue
            ordered = sorted(pid for pid in neighbours if pid in self.points)
            candidates = []
            for i, ray1 in enumerate(ordered):
                for ray2 in ordered[i + 1:]:
                    if self.find(vertex, ray1, ray2) is not None or self.is_straight(vertex, ray1, ray2):
                        continue
                    geometry = angle_geometry(self.points[vertex], self.points[ray1], self.points[ray2], self.scale)
                    if geometry is not None:
                        candidates.append((geometry.degrees, ray1, ray2))
            candidates.sort(key=lambda item: -item[0])
            for _, ray1, ray2 in candidates:
                angle = self.create_angle(vertex, ray1, ray2)
                if angle is not None:
                    created.append(angle)
        if created:
            logger.info("Created %d angle(s) from adjacency", len(created))
        return created

    def by_vertex(self) -> Dict[str, List[Angle]]:
        grouped: Dict[str, List[Angle]] = {}
        for angle in self.angles:
            grouped.setdefault(angle.point_id, []).append(angle)
        return grouped
