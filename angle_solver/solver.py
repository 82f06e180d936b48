"""Fixed-point loop over the deduction rules."""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .angles import is_solved, unsolved
from .config import get_solver_config
from .equations.linear import EquationSolveResult, solve_with_equations
from .model import Angle, SetAngleHook, SolveData, SolveOptions, SolveResult, SolverState
from .rules import RULES, RuleContext
from .validator import all_triangles_valid, triangles_consistent

logger = logging.getLogger(__name__)


def solve(
    data: SolveData,
    options: Optional[SolveOptions] = None,
    *,
    set_angle: Optional[SetAngleHook] = None,
) -> SolveResult:
    """Run every rule in order until nothing changes or a stop condition holds.

    The loop stops when no angle is unknown, when every triangle is complete
    and consistent and all target angles are solved, or after
    ``max_iterations`` passes (a warning is logged and the partial result is
    returned).  Values are filled in place on ``data.angles``.
    """

    options = options or SolveOptions()
    config = options.config or get_solver_config()
    max_iterations = options.max_iterations if options.max_iterations is not None else config.max_iterations
    hook = set_angle or options.set_angle

    started = time.perf_counter()
    ctx = RuleContext(data, set_angle=hook, config=config)
    triangle_groups = ctx.validator.triangle_groups
    targets = data.targets()

    state = SolverState.RUNNING
    iterations = 0
    score = 0
    while state is SolverState.RUNNING:
        if not unsolved(data.angles):
            state = SolverState.CONVERGED
            break
        if triangles_consistent(triangle_groups, config.triangle_tolerance) and all(
            is_solved(angle) for angle in targets
        ):
            state = SolverState.CONVERGED
            break
        if iterations >= max_iterations:
            state = SolverState.MAX_ITERATIONS_REACHED
            logger.warning("Solver stopped after %d iteration(s) without converging", iterations)
            break

        iterations += 1
        changed = False
        for rule in RULES:
            if rule.apply(ctx):
                changed = True
                score += rule.score
        if not changed:
            state = SolverState.CONVERGED

    elapsed = (time.perf_counter() - started) * 1000.0
    result = SolveResult(
        is_valid=all_triangles_valid(triangle_groups, config.triangle_tolerance),
        solved=bool(targets) and all(is_solved(angle) for angle in targets),
        all_solved=bool(data.angles) and not unsolved(data.angles),
        score=score,
        iterations=iterations,
        execution_time=elapsed,
        state=state,
        history=list(ctx.history),
    )
    logger.info(
        "Solver %s after %d iteration(s): %d/%d angle(s) known, score=%d",
        state.value,
        iterations,
        len(data.angles) - len(unsolved(data.angles)),
        len(data.angles),
        score,
    )
    return result


@dataclass
class CombinedSolveResult:
    """Outcome of running the rules and the linear equation system side by side.

    ``rules`` and ``equations`` are ``None`` when the scene has no target
    angle and nothing was run.  ``angles`` holds the rule engine's copy of the
    angles with the deduced values filled in.
    """

    solved: bool
    score: int
    execution_time: float
    rules: Optional[SolveResult] = None
    equations: Optional[EquationSolveResult] = None
    angles: List[Angle] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "solved": self.solved,
            "score": self.score,
            "executionTime": self.execution_time,
            "rules": self.rules.to_dict() if self.rules is not None else None,
            "equations": self.equations.to_dict() if self.equations is not None else None,
        }


def solve_all(data: SolveData, options: Optional[SolveOptions] = None) -> CombinedSolveResult:
    """Solve with the deduction rules and with the equation system.

    Each method works on its own deep copy of ``data``, so the caller's
    angles are left untouched.  The scene counts as solved when either
    method solves every target; the score is the rule score, or the equation
    score when the rules scored nothing.
    """

    options = options or SolveOptions()
    if not data.targets():
        logger.info("No target angles, skipping solve")
        return CombinedSolveResult(solved=False, score=0, execution_time=0.0)

    config = options.config or get_solver_config()
    rules_data = copy.deepcopy(data)
    rules = solve(rules_data, options)
    equations = solve_with_equations(copy.deepcopy(data), config=config)
    return CombinedSolveResult(
        solved=rules.solved or equations.solved,
        score=rules.score or equations.score,
        execution_time=rules.execution_time + equations.execution_time,
        rules=rules,
        equations=equations,
        angles=rules_data.angles,
    )
