"""Collapse provably equal angles into short symbols."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence

from ..angles import find_same_angle_groups
from ..config import SolverConfig
from ..model import SolveData
from ..rules import RuleContext
from ..rules.mirror import find_crossings
from .expr import ANGLE, Eq, Var, render
from .extract import deduplicate

logger = logging.getLogger(__name__)


class UnionFind:
    def __init__(self) -> None:
        self._parent: Dict[Hashable, Hashable] = {}

    def find(self, item: Hashable) -> Hashable:
        parent = self._parent.setdefault(item, item)
        if parent == item:
            return item
        root = self.find(parent)
        self._parent[item] = root
        return root

    def union(self, first: Hashable, second: Hashable) -> None:
        root_a = self.find(first)
        root_b = self.find(second)
        if root_a != root_b:
            self._parent[root_b] = root_a


def symbol_for_index(index: int) -> str:
    """``a`` .. ``z`` for the first 26 groups, then ``a0`` .. ``a9``, ``b0`` and so on."""

    if index < 26:
        return chr(97 + index)
    base, number = divmod(index - 26, 10)
    return chr(97 + base % 26) + str(number)


@dataclass
class SimplifiedEquations:
    equations: List[Eq]
    mapping: Dict[str, str] = field(default_factory=dict)
    reverse_mapping: Dict[str, List[str]] = field(default_factory=dict)

    def rendered(self) -> List[str]:
        return [render(equation) for equation in self.equations]


def equal_angle_groups(data: SolveData, *, config: Optional[SolverConfig] = None) -> List[List[str]]:
    """Angle names grouped by same-ray mirrors, shared labels and vertical pairs.

    Groups with two or more members come first, ordered by their earliest
    angle; singletons follow in angle order.
    """

    ctx = RuleContext(data, config=config)
    union = UnionFind()
    for angle in data.angles:
        union.find(angle.name)

    for angles in ctx.angles_by_vertex.values():
        for group in find_same_angle_groups(angles, ctx.lines):
            for other in group[1:]:
                union.union(group[0].name, other.name)

    first_by_label: Dict[str, str] = {}
    for angle in data.angles:
        if not angle.label:
            continue
        anchor = first_by_label.setdefault(angle.label, angle.name)
        union.union(anchor, angle.name)

    for crossing in find_crossings(ctx):
        for first, second in crossing.pairs:
            if first is not None and second is not None:
                union.union(first.name, second.name)

    members: Dict[Hashable, List[str]] = {}
    for angle in data.angles:
        members.setdefault(union.find(angle.name), []).append(angle.name)
    grouped = [names for names in members.values() if len(names) > 1]
    singles = [names for names in members.values() if len(names) == 1]
    return grouped + singles


def simplify_equations(
    equations: Sequence[Eq], data: SolveData, *, config: Optional[SolverConfig] = None
) -> SimplifiedEquations:
    mapping: Dict[str, str] = {}
    reverse_mapping: Dict[str, List[str]] = {}
    for index, names in enumerate(equal_angle_groups(data, config=config)):
        symbol = symbol_for_index(index)
        reverse_mapping[symbol] = list(names)
        for name in names:
            mapping[name] = symbol

    def _rename(variable: Var) -> Optional[str]:
        if variable.kind != ANGLE:
            return None
        return mapping.get(variable.name)

    renamed = deduplicate([equation.rename(_rename) for equation in equations])
    logger.info("Simplified %d angle(s) into %d symbol(s)", len(mapping), len(reverse_mapping))
    return SimplifiedEquations(equations=renamed, mapping=mapping, reverse_mapping=reverse_mapping)
