"""Angles going once around a vertex sum to 360°.

Only vertices whose rays are closed by an elementary cycle of angles, and
whose calculated values add up to roughly a full turn, are considered.  Every
partition of the turn (elementary or with composed pieces) is solved for a
single unknown or a block of equally labelled unknowns; contiguous parts whose
complement is known are solved against the remainder.  Vertices with exactly
four rays formed by two crossing lines also get vertical-angle equality.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from ..angles import format_degrees, get_angle_value, have_same_labels, sum_of_calculated, sum_of_known, unsolved
from ..fans import RayFan
from ..logging_utils import apply_debug_logging
from ..model import Angle
from .base import FULL_TURN, STRAIGHT, RuleContext

logger = logging.getLogger(__name__)

RULE_NAME = "full_angle_sum"


def _solve_group(ctx: RuleContext, group: Sequence[Angle], sum_to: float, vertex: str) -> bool:
    unknown = unsolved(group)
    if not unknown:
        return False
    remaining = sum_to - sum_of_known(group)

    if len(unknown) == 1:
        reason = f"angles around {vertex} leave {format_degrees(remaining)}° for {unknown[0].name}"
        return ctx.commit(unknown[0], remaining, reason, RULE_NAME, upper=FULL_TURN)

    labels: Dict[str, List[Angle]] = {}
    for angle in unknown:
        if angle.label:
            labels.setdefault(angle.label, []).append(angle)
    for label, members in labels.items():
        if len(members) != len(unknown):
            continue
        value = remaining / len(members)
        reason = f"angles around {vertex} leave {format_degrees(remaining)}° for {len(members)} × {label}"
        return ctx.commit_all(members, value, reason, RULE_NAME, upper=STRAIGHT)
    return False


def _solve_vertical_angles(ctx: RuleContext, fan: RayFan, cycle: Sequence[Angle]) -> bool:
    changed = False
    crossing = fan.are_opposite(0, 2, ctx.lines) and fan.are_opposite(1, 3, ctx.lines)
    if crossing:
        for first, second in ((cycle[0], cycle[2]), (cycle[1], cycle[3])):
            for known, other in ((first, second), (second, first)):
                value = get_angle_value(known)
                if value is None:
                    continue
                reason = f"vertical angle to {known.name}"
                if ctx.commit(other, value, reason, RULE_NAME, upper=STRAIGHT):
                    changed = True

    for idx in range(4):
        adjacent = (cycle[idx], cycle[(idx + 1) % 4])
        opposite = [cycle[(idx + 2) % 4], cycle[(idx + 3) % 4]]
        if unsolved(adjacent) or len(unsolved(opposite)) != 2 or not have_same_labels(opposite):
            continue
        value = (FULL_TURN - sum_of_known(adjacent)) / 2
        reason = f"{adjacent[0].name} + {adjacent[1].name} known, {opposite[0].label} fills the rest"
        if ctx.commit_all(opposite, value, reason, RULE_NAME, upper=STRAIGHT):
            changed = True
    return changed


def apply_full_angle_sum(ctx: RuleContext) -> bool:
    changed = False
    gate = ctx.config.full_circle_gate
    for vertex, fan in ctx.fans.items():
        if len(ctx.angles_by_vertex.get(vertex, ())) < 3 or not fan.is_closed():
            continue
        cycle = fan.elementary_cycle()
        if abs(sum_of_calculated(cycle) - FULL_TURN) > gate:
            logger.debug("Vertex %s is not a full circle (calculated %.1f)", vertex, sum_of_calculated(cycle))
            continue

        partitions = [
            part for part in fan.circle_partitions() if abs(sum_of_calculated(part) - FULL_TURN) <= gate
        ]
        for part in partitions:
            if _solve_group(ctx, part, FULL_TURN, vertex):
                changed = True

        for part in partitions:
            size = len(part)
            for start in range(size):
                for length in range(1, size):
                    subset = [part[(start + i) % size] for i in range(length)]
                    complement = [part[(start + i) % size] for i in range(length, size)]
                    if unsolved(complement):
                        continue
                    sum_to = FULL_TURN - sum_of_known(complement)
                    if 0.0 < sum_to < FULL_TURN and _solve_group(ctx, subset, sum_to, vertex):
                        changed = True

        if len(cycle) == 4 and _solve_vertical_angles(ctx, fan, cycle):
            changed = True
    return changed


apply_debug_logging(globals(), logger=logger)
