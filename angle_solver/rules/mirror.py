"""Vertical angles at the crossing of two lines are equal."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..angles import find_equivalent_angle, format_degrees, get_angle_value, is_solved, sum_of_known
from ..logging_utils import apply_debug_logging
from ..model import Angle, Line
from .base import FULL_TURN, STRAIGHT, RuleContext

logger = logging.getLogger(__name__)

RULE_NAME = "mirror_angle"

AnglePair = Tuple[Optional[Angle], Optional[Angle]]


@dataclass
class Crossing:
    """Two lines through ``vertex`` and the two vertical pairs they form.

    ``pairs[0]`` holds the angles (before1, before2) and (after1, after2);
    ``pairs[1]`` holds (before1, after2) and (after1, before2).  The first
    entries of both pairs are adjacent and together make a straight angle.
    """

    vertex: str
    lines: Tuple[Line, Line]
    pairs: Tuple[AnglePair, AnglePair]


def _neighbours(line: Line, vertex: str) -> Optional[Tuple[str, str]]:
    idx = line.index(vertex)
    if idx <= 0 or idx >= len(line.points) - 1:
        return None
    return line.points[idx - 1], line.points[idx + 1]


def find_crossings(ctx: RuleContext) -> List[Crossing]:
    crossings: List[Crossing] = []
    if len(ctx.lines) < 2:
        return crossings
    for vertex, angles in ctx.angles_by_vertex.items():
        if len(angles) < 2:
            continue
        through = [line for line in ctx.lines if _neighbours(line, vertex) is not None]
        for i, first in enumerate(through):
            for second in through[i + 1:]:
                before1, after1 = _neighbours(first, vertex)
                before2, after2 = _neighbours(second, vertex)

                def lookup(ray1: str, ray2: str) -> Optional[Angle]:
                    return find_equivalent_angle(angles, vertex, ray1, ray2, ctx.lines)

                pairs = (
                    (lookup(before1, before2), lookup(after1, after2)),
                    (lookup(before1, after2), lookup(after1, before2)),
                )
                crossings.append(Crossing(vertex=vertex, lines=(first, second), pairs=pairs))
    return crossings


def _solve_crossing(ctx: RuleContext, crossing: Crossing) -> bool:
    changed = False
    for first, second in crossing.pairs:
        if first is None or second is None:
            continue
        for known, other in ((first, second), (second, first)):
            value = get_angle_value(known)
            if value is None:
                continue
            reason = f"vertical angle to {known.name} ({format_degrees(value)}°)"
            if ctx.commit(other, value, reason, RULE_NAME, upper=STRAIGHT):
                changed = True

    complete = [pair for pair in crossing.pairs if pair[0] is not None and pair[1] is not None]
    if len(complete) != 2:
        return changed
    open_pairs = [pair for pair in complete if not is_solved(pair[0]) and not is_solved(pair[1])]
    known_pairs = [pair for pair in complete if is_solved(pair[0]) and is_solved(pair[1])]
    if len(open_pairs) == 1 and len(known_pairs) == 1:
        value = (FULL_TURN - sum_of_known(known_pairs[0])) / 2
        reason = f"angles at {crossing.vertex} sum to 360°"
        if ctx.commit_all(list(open_pairs[0]), value, reason, RULE_NAME, upper=STRAIGHT):
            changed = True
    return changed


def apply_mirror_angle(ctx: RuleContext) -> bool:
    changed = False
    for crossing in find_crossings(ctx):
        if _solve_crossing(ctx, crossing):
            changed = True
    return changed


apply_debug_logging(globals(), logger=logger)
