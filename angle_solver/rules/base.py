"""Shared read view for the rule modules and the single place values are committed."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Set

from ..angles import format_degrees, is_solved
from ..config import SolverConfig, get_solver_config
from ..fans import RayFan, build_fans
from ..model import Angle, SetAngleHook, SolveData, SolverHistoryItem
from ..validator import ConstraintValidator

logger = logging.getLogger(__name__)

STRAIGHT = 180.0
FULL_TURN = 360.0


class RuleContext:
    """What a rule may read (scene, fans, validator) and how it may write.

    Rules never assign ``angle.value`` themselves: :meth:`commit` and
    :meth:`commit_all` refuse solved angles, out-of-range or non-finite values
    and anything the :class:`~angle_solver.validator.ConstraintValidator`
    rejects, so values only ever go from unknown to known.
    """

    def __init__(
        self,
        data: SolveData,
        *,
        set_angle: Optional[SetAngleHook] = None,
        config: Optional[SolverConfig] = None,
    ) -> None:
        self.data = data
        self.config = config or get_solver_config()
        self.points = data.points_by_id
        self.lines = data.lines
        self.angles_by_vertex: Dict[str, List[Angle]] = data.angle_maps_by_point_id()
        self.fans: Dict[str, RayFan] = build_fans(
            self.angles_by_vertex, self.points, max_rays=self.config.max_fan_rays
        )
        self.history: List[SolverHistoryItem] = []
        self._set_angle = set_angle
        self._validator: Optional[ConstraintValidator] = None
        self._warned: Set[str] = set()

    def warn_once(self, key: str, message: str, *args: object) -> None:
        if key in self._warned:
            return
        self._warned.add(key)
        logger.warning(message, *args)

    @property
    def validator(self) -> ConstraintValidator:
        if self._validator is None:
            self._validator = ConstraintValidator(self.data, config=self.config, fans=self.fans)
        return self._validator

    def fan(self, vertex: str) -> Optional[RayFan]:
        return self.fans.get(vertex)

    def _acceptable(self, angle: Angle, value: float, upper: float) -> bool:
        if is_solved(angle):
            return False
        if not math.isfinite(value) or not (0.0 < value < upper):
            logger.debug("Discarding %s=%s: outside (0, %g)", angle.name, value, upper)
            return False
        result = self.validator.validate(angle, value)
        if not result.valid:
            logger.debug("Validator rejected %s=%s: %s", angle.name, format_degrees(value), result.violation)
            return False
        return True

    def _record(self, angle: Angle, value: float, reason: str, rule: str) -> None:
        angle.value = value
        self.history.append(SolverHistoryItem(angle=angle, message=reason, method=rule))
        logger.debug("%s: %s=%s (%s)", rule, angle.name, format_degrees(value), reason)
        if self._set_angle is not None:
            self._set_angle(angle, reason, rule)

    def commit(
        self,
        angle: Angle,
        value: float,
        reason: str,
        rule: str,
        *,
        upper: float = FULL_TURN,
    ) -> bool:
        value = _snap(value)
        if not self._acceptable(angle, value, upper):
            return False
        self._record(angle, value, reason, rule)
        return True

    def commit_all(
        self,
        angles: Sequence[Angle],
        value: float,
        reason: str,
        rule: str,
        *,
        upper: float = FULL_TURN,
    ) -> bool:
        """Assign ``value`` to every angle, or to none of them."""

        value = _snap(value)
        pending = [angle for angle in angles if not is_solved(angle)]
        if not pending:
            return False
        if not all(self._acceptable(angle, value, upper) for angle in pending):
            return False
        for angle in pending:
            self._record(angle, value, reason, rule)
        return True


def _snap(value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        return value
    nearest = round(value)
    if abs(value - nearest) < 1e-9:
        return float(nearest)
    return value
