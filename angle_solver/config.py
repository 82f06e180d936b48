"""Configuration helpers for the deduction engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Tolerances and limits shared by the rule modules and the validator."""

    max_iterations: int = 100
    # |Σ - 180| allowed for a solved triangle to count as consistent
    triangle_tolerance: float = 10.0
    # mismatch allowed by the constraint validator before it rejects a value
    validation_tolerance: float = 0.5
    # |Σ calculated - 360| allowed for a vertex to be treated as a closed circle
    full_circle_gate: float = 30.0
    # |parent - Σ children| (calculated values) allowed for a composed relation
    composed_gate: float = 15.0
    # |Σ calculated - 180| allowed for a straight-angle group
    straight_gate: float = 15.0
    # vertices with more rays only use elementary decompositions
    max_fan_rays: int = 12
    # sine of the smallest angle still treated as "not collinear"
    collinear_tolerance: float = 0.01
    propagate_same_angle_labels: bool = True
    angle_radius_scale: float = 1.0


_SOLVER_CONFIG = SolverConfig()


def get_solver_config() -> SolverConfig:
    return copy.deepcopy(_SOLVER_CONFIG)


def set_solver_config(config: SolverConfig) -> None:
    global _SOLVER_CONFIG
    _SOLVER_CONFIG = copy.deepcopy(config)
