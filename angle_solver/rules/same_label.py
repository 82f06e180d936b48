"""Angles carrying the same label are equal."""

from __future__ import annotations

import logging
from typing import Dict, List

from ..angles import format_degrees, get_angle_value
from ..logging_utils import apply_debug_logging
from ..model import Angle
from .base import RuleContext

logger = logging.getLogger(__name__)

RULE_NAME = "same_label_angles"


def apply_same_label_angles(ctx: RuleContext) -> bool:
    label_values: Dict[str, float] = {}
    pending: List[Angle] = []
    for angle in ctx.data.angles:
        if not angle.label:
            continue
        value = get_angle_value(angle)
        if value is None:
            pending.append(angle)
        else:
            label_values.setdefault(angle.label, value)

    changed = False
    for angle in pending:
        value = label_values.get(angle.label)
        if value is None:
            continue
        reason = f"label {angle.label} is already {format_degrees(value)}°"
        if ctx.commit(angle, value, reason, RULE_NAME):
            changed = True
    return changed


apply_debug_logging(globals(), logger=logger)
