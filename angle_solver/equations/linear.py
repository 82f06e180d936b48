"""Linear solve of the extracted equations.

This is an alternative to the rule engine: every relation is linear in the
angle symbols, so the system is assembled into ``A x = b`` and handed to
numpy.  A rank comparison detects contradictions and the null space of ``A``
tells which symbols are pinned down uniquely; symbols with a non-zero
null-space component stay free.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
from scipy.linalg import null_space

from ..config import SolverConfig
from ..model import SolveData
from .expr import Eq, Var, parse_equation
from .extract import extract_relations
from .simplify import simplify_equations
from .wolfram import clean_relations

logger = logging.getLogger(__name__)

UNIQUE = "unique"
PARTIAL = "partial"
INCONSISTENT = "inconsistent"
EMPTY = "empty"


@dataclass
class LinearSolution:
    status: str
    values: Dict[str, float] = field(default_factory=dict)
    free_variables: List[str] = field(default_factory=list)
    rank: int = 0

    @property
    def consistent(self) -> bool:
        return self.status != INCONSISTENT


def _clean_number(value: float) -> float:
    nearest = round(value)
    if abs(value - nearest) < 1e-7:
        return float(nearest)
    return round(float(value), 7)


def solve_linear_equations(equations: Sequence[Union[Eq, str]], *, tolerance: float = 1e-8) -> LinearSolution:
    """Solve equations given as :class:`Eq` objects or as text such as ``"a+b=180"``."""

    parsed = [parse_equation(equation) if isinstance(equation, str) else equation for equation in equations]
    forms = [equation.linear_form() for equation in parsed]
    variables: List[Var] = []
    for coefficients, _ in forms:
        for variable in coefficients:
            if variable not in variables:
                variables.append(variable)

    if not variables:
        if any(abs(constant) > tolerance for _, constant in forms):
            return LinearSolution(status=INCONSISTENT)
        return LinearSolution(status=EMPTY)

    column = {variable: idx for idx, variable in enumerate(variables)}
    matrix = np.zeros((len(forms), len(variables)))
    rhs = np.zeros(len(forms))
    for row, (coefficients, constant) in enumerate(forms):
        for variable, coefficient in coefficients.items():
            matrix[row, column[variable]] = coefficient
        rhs[row] = constant

    rank = int(np.linalg.matrix_rank(matrix))
    augmented_rank = int(np.linalg.matrix_rank(np.column_stack([matrix, rhs])))
    if augmented_rank > rank:
        logger.info("Equation system is inconsistent (rank %d vs %d)", rank, augmented_rank)
        return LinearSolution(status=INCONSISTENT, rank=rank)

    solution, *_ = np.linalg.lstsq(matrix, rhs, rcond=None)
    basis = null_space(matrix)
    if basis.size:
        determined = np.all(np.abs(basis) < tolerance, axis=1)
    else:
        determined = np.ones(len(variables), dtype=bool)

    values: Dict[str, float] = {}
    free: List[str] = []
    for idx, variable in enumerate(variables):
        if determined[idx]:
            values[variable.name] = _clean_number(float(solution[idx]))
        else:
            free.append(variable.name)
    status = UNIQUE if not free else PARTIAL
    return LinearSolution(status=status, values=values, free_variables=free, rank=rank)


@dataclass
class EquationSolveResult:
    solved: bool
    all_solved: bool
    score: int
    execution_time: float
    solution: Dict[str, float] = field(default_factory=dict)
    linear: Optional[LinearSolution] = None

    @property
    def status(self) -> str:
        return self.linear.status if self.linear is not None else EMPTY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "solved": self.solved,
            "allSolved": self.all_solved,
            "score": self.score,
            "executionTime": self.execution_time,
            "values": dict(self.solution),
        }


def solve_with_equations(data: SolveData, *, config: Optional[SolverConfig] = None) -> EquationSolveResult:
    """Solve the scene algebraically and report values per angle name.

    Angles are not modified; the caller decides whether to adopt the values.
    """

    started = time.perf_counter()
    relations = extract_relations(data, config=config)
    simplified = simplify_equations(relations, data, config=config)
    system = clean_relations(simplified.equations)
    linear = solve_linear_equations(system)

    solution: Dict[str, float] = {}
    for symbol, value in linear.values.items():
        for name in simplified.reverse_mapping.get(symbol, ()):
            solution[name] = value

    targets = data.targets()
    elapsed = (time.perf_counter() - started) * 1000.0
    logger.info("Equation solve: %s, %d/%d angle(s) determined", linear.status, len(solution), len(data.angles))
    return EquationSolveResult(
        solved=bool(targets) and linear.consistent and all(angle.name in solution for angle in targets),
        all_solved=bool(data.angles) and linear.consistent and all(angle.name in solution for angle in data.angles),
        score=len(linear.values),
        execution_time=elapsed,
        solution=solution,
        linear=linear,
    )
