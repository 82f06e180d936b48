"""An angle split by inner rays equals the sum of its parts."""

from __future__ import annotations

import logging
from typing import List, Tuple

from ..angles import format_degrees, get_angle_value, sum_of_calculated, sum_of_known, unsolved
from ..fans import Chain
from ..logging_utils import apply_debug_logging
from ..model import Angle
from .base import STRAIGHT, RuleContext

logger = logging.getLogger(__name__)

RULE_NAME = "composed_angles"


def composed_relations(ctx: RuleContext) -> List[Tuple[Angle, Chain]]:
    relations: List[Tuple[Angle, Chain]] = []
    for fan in ctx.fans.values():
        if len(fan) < 3:
            continue
        for parent, children in fan.composed_groups():
            if abs((parent.calculated_value or 0.0) - sum_of_calculated(children)) > ctx.config.composed_gate:
                continue
            relations.append((parent, children))
    return relations


def _solve_relation(ctx: RuleContext, parent: Angle, children: Chain) -> bool:
    parent_value = get_angle_value(parent)
    unknown = unsolved(children)
    parts = " + ".join(child.name for child in children)

    if parent_value is None:
        if unknown:
            return False
        total = sum_of_known(children)
        return ctx.commit(parent, total, f"{parent.name} = {parts}", RULE_NAME, upper=STRAIGHT)

    if not unknown:
        return False
    known_sum = sum_of_known(children)
    if len(unknown) == 1:
        value = parent_value - known_sum
        reason = f"{parent.name} = {parts}, so {unknown[0].name} = {format_degrees(value)}°"
        return ctx.commit(unknown[0], value, reason, RULE_NAME, upper=STRAIGHT)

    label = unknown[0].label
    if not label:
        return False
    labelled = [child for child in unknown if child.label == label]
    if len(labelled) != len(unknown):
        return False
    value = (parent_value - known_sum) / len(labelled)
    reason = f"{parent.name} = {parts} with equal parts {label}"
    return ctx.commit_all(labelled, value, reason, RULE_NAME, upper=STRAIGHT)


def apply_composed_angles(ctx: RuleContext) -> bool:
    changed = False
    for parent, children in composed_relations(ctx):
        if _solve_relation(ctx, parent, children):
            changed = True
    return changed


apply_debug_logging(globals(), logger=logger)
