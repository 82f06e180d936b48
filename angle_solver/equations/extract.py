"""Restate the deduction rules as linear equations over angle names."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..angles import (
    find_same_angle_groups,
    get_angle_value,
    have_same_labels,
    sum_of_calculated,
    sum_of_known,
    triangle_angles,
    unsolved,
)
from ..config import SolverConfig
from ..model import Angle, SolveData
from ..rules import FULL_TURN, STRAIGHT, RuleContext
from ..rules.composed import composed_relations
from ..rules.mirror import find_crossings
from ..rules.supplementary import supplementary_groups
from ..rules.triangle_sum import is_equilateral_by_circles, is_equilateral_by_label, isosceles_vertex_angle
from .expr import Eq, Var, const, difference, label, render, sum_of, var

logger = logging.getLogger(__name__)


def _name(angle: Angle) -> Var:
    return var(angle.name)


def _equal(first: Angle, second: Angle) -> Eq:
    return Eq(_name(first), _name(second))


def _sums_to(angles: Sequence[Angle], value: float) -> Eq:
    return Eq(sum_of(_name(angle) for angle in angles), const(value))


def _triangle_equations(ctx: RuleContext, out: List[Eq]) -> None:
    for triangle in ctx.data.triangles:
        angles = triangle_angles(triangle, ctx.angles_by_vertex, ctx.lines)
        if len(angles) == 3 and len({angle.id for angle in angles}) == 3:
            out.append(_sums_to(angles, STRAIGHT))


def _partial_sums(group: Sequence[Angle], sum_to: float, out: List[Eq]) -> None:
    """``subset = sum_to - Σ complement`` for contiguous subsets with a known complement."""

    size = len(group)
    for start in range(size):
        for length in range(1, size):
            subset = group[start:start + length]
            if len(subset) != length:
                continue
            complement = [angle for angle in group if not any(angle is member for member in subset)]
            if unsolved(complement) or not unsolved(subset):
                continue
            out.append(Eq(sum_of(_name(angle) for angle in subset), const(sum_to - sum_of_known(complement))))


def _supplementary_equations(ctx: RuleContext, out: List[Eq]) -> None:
    for group in supplementary_groups(ctx):
        out.append(_sums_to(group, STRAIGHT))
        _partial_sums(group, STRAIGHT, out)


def _composed_equations(ctx: RuleContext, out: List[Eq]) -> None:
    for parent, children in composed_relations(ctx):
        out.append(Eq(_name(parent), sum_of(_name(child) for child in children)))
        parent_value = get_angle_value(parent)
        unknown = unsolved(children)
        if parent_value is not None and len(unknown) == 1:
            known = [child for child in children if child is not unknown[0]]
            out.append(
                Eq(
                    _name(unknown[0]),
                    difference(const(parent_value), [const(get_angle_value(child)) for child in known]),
                )
            )


def _same_angle_equations(ctx: RuleContext, out: List[Eq]) -> None:
    for angles in ctx.angles_by_vertex.values():
        for group in find_same_angle_groups(angles, ctx.lines):
            for other in group[1:]:
                out.append(_equal(group[0], other))


def _same_label_equations(ctx: RuleContext, out: List[Eq]) -> None:
    by_label: Dict[str, List[Angle]] = {}
    for angle in ctx.data.angles:
        if angle.label:
            by_label.setdefault(angle.label, []).append(angle)
    for members in by_label.values():
        for other in members[1:]:
            out.append(_equal(members[0], other))


def _isosceles_equations(ctx: RuleContext, out: List[Eq]) -> None:
    for triangle in ctx.data.triangles:
        angles = triangle_angles(triangle, ctx.angles_by_vertex, ctx.lines)
        if len(angles) != 3:
            continue
        if is_equilateral_by_label(angles) or is_equilateral_by_circles(triangle, ctx.data.circles):
            out.append(_equal(angles[0], angles[1]))
            out.append(_equal(angles[1], angles[2]))
            out.append(Eq(_name(angles[0]), const(60)))
            continue
        for circle in ctx.data.circles:
            apex = isosceles_vertex_angle(triangle, angles, circle)
            if apex is None:
                continue
            base = [angle for angle in angles if angle is not apex]
            out.append(_equal(base[0], base[1]))
            out.append(Eq(_name(apex), difference(const(STRAIGHT), [_name(angle) for angle in base])))
        for i, first in enumerate(angles):
            for second in angles[i + 1:]:
                if have_same_labels([first, second]):
                    out.append(_equal(first, second))


def _mirror_equations(ctx: RuleContext, out: List[Eq]) -> None:
    for crossing in find_crossings(ctx):
        for first, second in crossing.pairs:
            if first is not None and second is not None:
                out.append(_equal(first, second))
        members = [angle for pair in crossing.pairs for angle in pair]
        if all(angle is not None for angle in members):
            out.append(_sums_to(members, FULL_TURN))
            out.append(_sums_to([crossing.pairs[0][0], crossing.pairs[1][0]], STRAIGHT))


def _full_circle_equations(ctx: RuleContext, out: List[Eq]) -> None:
    gate = ctx.config.full_circle_gate
    for vertex, fan in ctx.fans.items():
        if len(ctx.angles_by_vertex.get(vertex, ())) < 3 or not fan.is_closed():
            continue
        if abs(sum_of_calculated(fan.elementary_cycle()) - FULL_TURN) > gate:
            continue
        for part in fan.circle_partitions():
            if abs(sum_of_calculated(part) - FULL_TURN) <= gate:
                out.append(_sums_to(part, FULL_TURN))


def _known_values(ctx: RuleContext, out: List[Eq]) -> None:
    for angle in ctx.data.angles:
        value = get_angle_value(angle)
        if value is not None:
            out.append(Eq(_name(angle), const(value)))


def _label_assignments(ctx: RuleContext, out: List[Eq]) -> None:
    for angle in ctx.data.angles:
        if angle.label:
            out.append(Eq(_name(angle), label(angle.label)))


def deduplicate(equations: Sequence[Eq]) -> List[Eq]:
    seen = set()
    unique: List[Eq] = []
    for equation in equations:
        text = render(equation)
        if text in seen:
            continue
        seen.add(text)
        unique.append(equation)
    return unique


def extract_relations(data: SolveData, *, config: Optional[SolverConfig] = None) -> List[Eq]:
    """Every relation the rules know about, as typed equations in a stable order."""

    ctx = RuleContext(data, config=config)
    equations: List[Eq] = []
    for builder in (
        _triangle_equations,
        _supplementary_equations,
        _composed_equations,
        _same_angle_equations,
        _same_label_equations,
        _isosceles_equations,
        _mirror_equations,
        _full_circle_equations,
        _known_values,
        _label_assignments,
    ):
        builder(ctx, equations)
    unique = deduplicate(equations)
    logger.info("Extracted %d equation(s) (%d before de-duplication)", len(unique), len(equations))
    return unique


def extract_equations(data: SolveData, *, config: Optional[SolverConfig] = None) -> List[str]:
    return [render(equation) for equation in extract_relations(data, config=config)]
