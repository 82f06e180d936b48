from .expr import Const, Eq, EquationError, Sum, Term, Var, parse_equation, render
from .extract import extract_equations, extract_relations
from .linear import EquationSolveResult, LinearSolution, solve_linear_equations, solve_with_equations
from .simplify import SimplifiedEquations, simplify_equations, symbol_for_index
from .wolfram import (
    EquationExtractionResult,
    clean_equations,
    extract_equations_with_wolfram,
    greek_to_words,
    wolfram_url,
)

__all__ = [
    "Const",
    "Eq",
    "EquationError",
    "EquationExtractionResult",
    "EquationSolveResult",
    "LinearSolution",
    "SimplifiedEquations",
    "Sum",
    "Term",
    "Var",
    "clean_equations",
    "extract_equations",
    "extract_equations_with_wolfram",
    "extract_relations",
    "greek_to_words",
    "parse_equation",
    "render",
    "simplify_equations",
    "solve_linear_equations",
    "solve_with_equations",
    "symbol_for_index",
    "wolfram_url",
]
