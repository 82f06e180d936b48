"""Redundant records of one geometric angle share value and label.

Splitting an edge leaves several records at a vertex whose rays point the
same way (e.g. ``∠CAD`` and ``∠CAB`` when ``D`` lies on ``AB``).  They are
grouped with :func:`~angle_solver.angles.find_same_angle_groups`; a known
value fills the unknown members and, unless disabled through
``SolverConfig.propagate_same_angle_labels``, a label is copied onto members
without one.
"""

from __future__ import annotations

import logging

from ..angles import find_same_angle_groups, format_degrees, get_angle_value
from ..logging_utils import apply_debug_logging
from .base import RuleContext

logger = logging.getLogger(__name__)

RULE_NAME = "same_angles"


def apply_same_angles(ctx: RuleContext) -> bool:
    changed = False
    for angles in ctx.angles_by_vertex.values():
        if len(angles) < 2:
            continue
        for group in find_same_angle_groups(angles, ctx.lines):
            if ctx.config.propagate_same_angle_labels:
                source = next((angle for angle in group if angle.label), None)
                if source is not None:
                    for angle in group:
                        if not angle.label:
                            angle.label = source.label
                            logger.debug("%s takes label %s from %s", angle.name, source.label, source.name)
                            changed = True

            known = next((angle for angle in group if get_angle_value(angle) is not None), None)
            if known is None:
                continue
            value = get_angle_value(known)
            for angle in group:
                if angle is known:
                    continue
                reason = f"same angle as {known.name} ({format_degrees(value)}°)"
                if ctx.commit(angle, value, reason, RULE_NAME):
                    changed = True
    return changed


apply_debug_logging(globals(), logger=logger)
