"""Interior angles of a triangle sum to 180°.

Besides the plain single-unknown case, equal-radius markers drawn as circles
and shared labels identify equilateral and isosceles triangles.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from ..angles import format_degrees, get_angle_value, have_same_labels, sum_of_known, triangle_angles, unsolved
from ..logging_utils import apply_debug_logging
from ..model import Angle, Circle, Triangle
from .base import STRAIGHT, RuleContext

logger = logging.getLogger(__name__)

RULE_NAME = "triangle_angle_sum"


def is_equilateral_by_label(angles: Sequence[Angle]) -> bool:
    return len(angles) == 3 and have_same_labels(angles)


def is_equilateral_by_circles(triangle: Triangle, circles: Sequence[Circle]) -> bool:
    """Two circles centred at two vertices make all three sides radii."""

    if len(circles) < 2:
        return False
    for first in circles:
        if first.center_point not in triangle:
            continue
        for second in circles:
            if second is first or second.center_point == first.center_point or second.center_point not in triangle:
                continue
            (third,) = [pid for pid in triangle if pid not in (first.center_point, second.center_point)]
            if third not in first.points_on_line or third not in second.points_on_line:
                continue
            first_through_second = second.center_point in first.points_on_line
            second_through_first = first.center_point in second.points_on_line
            same_radius = math.isclose(first.radius, second.radius, rel_tol=1e-6)
            if (first_through_second and second_through_first) or (
                same_radius and (first_through_second or second_through_first)
            ):
                return True
    return False


def isosceles_vertex_angle(triangle: Triangle, angles: Sequence[Angle], circle: Circle) -> Optional[Angle]:
    """The apex angle when ``circle`` is centred at one vertex and passes through the other two."""

    if circle.center_point not in triangle:
        return None
    others = [pid for pid in triangle if pid != circle.center_point]
    if not all(pid in circle.points_on_line for pid in others):
        return None
    return next((angle for angle in angles if angle.point_id == circle.center_point), None)


def _solve_isosceles(ctx: RuleContext, triangle: Triangle, angles: List[Angle]) -> bool:
    for circle in ctx.data.circles:
        apex = isosceles_vertex_angle(triangle, angles, circle)
        if apex is None:
            continue
        base = [angle for angle in angles if angle is not apex]
        apex_value = get_angle_value(apex)
        if apex_value is not None:
            value = (STRAIGHT - apex_value) / 2
            reason = f"isosceles at {apex.point_id}: base angles are (180° - {format_degrees(apex_value)}°) / 2"
            if ctx.commit_all(base, value, reason, RULE_NAME, upper=STRAIGHT):
                return True
            continue

        known_base = next((angle for angle in base if get_angle_value(angle) is not None), None)
        if known_base is None:
            continue
        base_value = get_angle_value(known_base)
        other_base = base[1] if known_base is base[0] else base[0]
        changed = ctx.commit(
            other_base, base_value, f"isosceles at {apex.point_id}: equal to {known_base.name}", RULE_NAME,
            upper=STRAIGHT,
        )
        apex_guess = STRAIGHT - 2 * base_value
        if ctx.commit(
            apex, apex_guess, f"isosceles at {apex.point_id}: 180° - 2 × {format_degrees(base_value)}°", RULE_NAME,
            upper=STRAIGHT,
        ):
            changed = True
        if changed:
            return True
    return False


def _solve_triangle(ctx: RuleContext, triangle: Triangle, angles: List[Angle]) -> bool:
    unknown = unsolved(angles)
    if not unknown:
        return False
    known_sum = sum_of_known(angles)
    label = "".join(triangle)

    if len(unknown) == 1:
        value = STRAIGHT - known_sum
        reason = f"triangle {label}: 180° - {format_degrees(known_sum)}°"
        return ctx.commit(unknown[0], value, reason, RULE_NAME, upper=STRAIGHT)

    if is_equilateral_by_label(angles) or is_equilateral_by_circles(triangle, ctx.data.circles):
        return ctx.commit_all(unknown, 60.0, f"triangle {label} is equilateral", RULE_NAME, upper=STRAIGHT)

    if len(unknown) == 2 and have_same_labels(unknown):
        value = (STRAIGHT - known_sum) / 2
        reason = f"triangle {label}: two angles labelled {unknown[0].label}"
        return ctx.commit_all(unknown, value, reason, RULE_NAME, upper=STRAIGHT)

    return _solve_isosceles(ctx, triangle, angles)


def apply_triangle_angle_sum(ctx: RuleContext) -> bool:
    changed = False
    for triangle in ctx.data.triangles:
        angles = triangle_angles(triangle, ctx.angles_by_vertex, ctx.lines)
        if len(angles) != 3 or len({angle.id for angle in angles}) != 3:
            ctx.warn_once(
                "triangle:" + "".join(triangle),
                "Triangle %s has %d resolvable angle(s), skipping",
                "".join(triangle),
                len(angles),
            )
            continue
        if _solve_triangle(ctx, triangle, angles):
            changed = True
    return changed


apply_debug_logging(globals(), logger=logger)
