"""Angles tiling one side of a line at an interior vertex sum to 180°."""

from __future__ import annotations

import logging
from typing import List

from ..angles import format_degrees, have_same_labels, sum_of_calculated, sum_of_known, unsolved
from ..fans import Chain, straight_partitions
from ..logging_utils import apply_debug_logging
from .base import STRAIGHT, RuleContext

logger = logging.getLogger(__name__)

RULE_NAME = "supplementary_angles"


def supplementary_groups(ctx: RuleContext) -> List[Chain]:
    """Chains of angles spanning from one side of a line to the other at a vertex."""

    groups: List[Chain] = []
    for vertex, fan in ctx.fans.items():
        for line in ctx.lines:
            for chain in straight_partitions(fan, line):
                if abs(sum_of_calculated(chain) - STRAIGHT) > ctx.config.straight_gate:
                    logger.debug("Skipping chain at %s: calculated sum is off", vertex)
                    continue
                groups.append(chain)
    return groups


def apply_supplementary_angles(ctx: RuleContext) -> bool:
    changed = False
    for group in supplementary_groups(ctx):
        unknown = unsolved(group)
        if not unknown:
            continue
        known_sum = sum_of_known(group)
        names = " + ".join(angle.name for angle in group)

        if len(unknown) == 1:
            value = STRAIGHT - known_sum
            reason = f"{names} = 180° on a line, so {unknown[0].name} = {format_degrees(value)}°"
            if ctx.commit(unknown[0], value, reason, RULE_NAME, upper=STRAIGHT):
                changed = True
            continue

        if have_same_labels(unknown):
            value = (STRAIGHT - known_sum) / len(unknown)
            reason = f"{names} = 180° on a line with equal angles {unknown[0].label}"
            if ctx.commit_all(unknown, value, reason, RULE_NAME, upper=STRAIGHT):
                changed = True
    return changed


apply_debug_logging(globals(), logger=logger)
