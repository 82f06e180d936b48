"""Deduction rules, in the order the solver applies them."""

from typing import Callable, NamedTuple, Tuple

from .base import FULL_TURN, STRAIGHT, RuleContext
from .composed import apply_composed_angles
from .full_circle import apply_full_angle_sum
from .mirror import apply_mirror_angle
from .same_angles import apply_same_angles
from .same_label import apply_same_label_angles
from .supplementary import apply_supplementary_angles
from .triangle_sum import apply_triangle_angle_sum


class Rule(NamedTuple):
    name: str
    apply: Callable[[RuleContext], bool]
    # rough difficulty weight added to the solver score when the rule fires
    score: int


RULES: Tuple[Rule, ...] = (
    Rule("same_label_angles", apply_same_label_angles, 1),
    Rule("same_angles", apply_same_angles, 0),
    Rule("supplementary_angles", apply_supplementary_angles, 2),
    Rule("full_angle_sum", apply_full_angle_sum, 2),
    Rule("triangle_angle_sum", apply_triangle_angle_sum, 3),
    Rule("composed_angles", apply_composed_angles, 2),
    Rule("mirror_angle", apply_mirror_angle, 1),
)

__all__ = [
    "FULL_TURN",
    "RULES",
    "STRAIGHT",
    "Rule",
    "RuleContext",
    "apply_composed_angles",
    "apply_full_angle_sum",
    "apply_mirror_angle",
    "apply_same_angles",
    "apply_same_label_angles",
    "apply_supplementary_angles",
    "apply_triangle_angle_sum",
]
