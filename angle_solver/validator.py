"""Cross-checks a proposed angle value against the relations it takes part in."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .angles import get_angle_value, sum_of_calculated, triangle_angles
from .config import SolverConfig, get_solver_config
from .fans import Chain, RayFan, build_fans
from .model import Angle, SolveData, ValidationResult

logger = logging.getLogger(__name__)

SupplementaryGroup = Tuple[Sequence[Angle], float]


def _known_total(angles: Sequence[Angle]) -> Optional[float]:
    total = 0.0
    for angle in angles:
        value = get_angle_value(angle)
        if value is None:
            return None
        total += value
    return total


class ConstraintValidator:
    """Rejects values contradicting composed, triangle or full-circle relations.

    The relations are read from the geometry once; the values are read at
    validation time, so the validator always sees the latest commits.
    """

    def __init__(
        self,
        data: SolveData,
        *,
        config: Optional[SolverConfig] = None,
        fans: Optional[Mapping[str, RayFan]] = None,
    ) -> None:
        self.config = config or get_solver_config()
        self.tolerance = self.config.validation_tolerance
        by_vertex = data.angle_maps_by_point_id()
        if fans is None:
            fans = build_fans(by_vertex, data.points_by_id, max_rays=self.config.max_fan_rays)

        self._composed: Dict[str, List[Tuple[Angle, Chain]]] = {}
        self._circles: Dict[str, List[Angle]] = {}
        for vertex, fan in fans.items():
            if len(fan) < 3:
                continue
            for parent, children in fan.composed_groups():
                gap = abs((parent.calculated_value or 0.0) - sum_of_calculated(children))
                if gap > self.config.composed_gate:
                    continue
                for angle in (parent,) + children:
                    self._composed.setdefault(angle.id, []).append((parent, children))
            if fan.is_closed():
                cycle = fan.elementary_cycle()
                if abs(sum_of_calculated(cycle) - 360.0) <= self.config.full_circle_gate:
                    self._circles[vertex] = cycle

        self.triangle_groups: List[List[Angle]] = []
        self._triangles: Dict[str, List[List[Angle]]] = {}
        for triangle in data.triangles:
            angles = triangle_angles(triangle, by_vertex, data.lines)
            self.triangle_groups.append(angles)
            if len(angles) != 3 or len({angle.id for angle in angles}) != 3:
                continue
            for angle in angles:
                self._triangles.setdefault(angle.id, []).append(angles)

    def _mismatch(self, value: float, expected: float) -> bool:
        return abs(value - expected) > self.tolerance

    def check_composed(self, angle: Angle, value: float) -> ValidationResult:
        for parent, children in self._composed.get(angle.id, ()):
            if angle is parent:
                expected = _known_total(children)
                if expected is not None and self._mismatch(value, expected):
                    return ValidationResult(
                        False, f"{angle.name}={value:g} but its parts sum to {expected:g}"
                    )
                continue
            parent_value = get_angle_value(parent)
            others = _known_total([child for child in children if child is not angle])
            if parent_value is None or others is None:
                continue
            expected = parent_value - others
            if self._mismatch(value, expected):
                return ValidationResult(
                    False, f"{angle.name}={value:g} but {parent.name} leaves {expected:g}"
                )
        return ValidationResult(True)

    def check_triangles(self, angle: Angle, value: float) -> ValidationResult:
        for angles in self._triangles.get(angle.id, ()):
            others = _known_total([other for other in angles if other is not angle])
            if others is None:
                continue
            expected = 180.0 - others
            if self._mismatch(value, expected):
                names = ", ".join(other.name for other in angles)
                return ValidationResult(False, f"triangle ({names}) needs {angle.name}={expected:g}")
        return ValidationResult(True)

    def check_full_circle(self, angle: Angle, value: float) -> ValidationResult:
        cycle = self._circles.get(angle.point_id)
        if not cycle or not any(other is angle for other in cycle):
            return ValidationResult(True)
        others = _known_total([other for other in cycle if other is not angle])
        if others is None:
            return ValidationResult(True)
        expected = 360.0 - others
        if self._mismatch(value, expected):
            return ValidationResult(False, f"full circle at {angle.point_id} needs {angle.name}={expected:g}")
        return ValidationResult(True)

    def check_supplementary(
        self, angle: Angle, value: float, groups: Sequence[SupplementaryGroup]
    ) -> ValidationResult:
        for members, sum_to in groups:
            if not any(member is angle for member in members):
                continue
            others = _known_total([member for member in members if member is not angle])
            if others is None:
                continue
            expected = sum_to - others
            if self._mismatch(value, expected):
                return ValidationResult(False, f"{angle.name}={value:g} breaks a {sum_to:g}° group")
        return ValidationResult(True)

    def validate(
        self,
        angle: Angle,
        value: float,
        supplementary_groups: Optional[Sequence[SupplementaryGroup]] = None,
    ) -> ValidationResult:
        for result in (
            self.check_composed(angle, value),
            self.check_triangles(angle, value),
            self.check_full_circle(angle, value),
        ):
            if not result.valid:
                return result
        if supplementary_groups:
            return self.check_supplementary(angle, value, supplementary_groups)
        return ValidationResult(True)


def triangles_consistent(groups: Sequence[Sequence[Angle]], tolerance: float = 10.0) -> bool:
    """True when at least one triangle is complete and every triangle sums to 180."""

    complete = 0
    for angles in groups:
        if len(angles) != 3:
            continue
        total = _known_total(angles)
        if total is None or abs(total - 180.0) > tolerance:
            return False
        complete += 1
    return complete > 0


def all_triangles_valid(groups: Sequence[Sequence[Angle]], tolerance: float = 10.0) -> bool:
    """True when every triangle has three solved angles summing to 180.

    A triangle missing one of its angle records counts as unsolved.
    """

    for angles in groups:
        if len(angles) != 3:
            logger.debug("Triangle %s is missing an angle record", [angle.name for angle in angles])
            return False
        total = _known_total(angles)
        if total is None or abs(total - 180.0) > tolerance:
            logger.debug("Triangle %s is unsolved or inconsistent", [angle.name for angle in angles])
            return False
    return True
