from .config import SolverConfig, get_solver_config, set_solver_config
from .model import (
    Angle,
    Circle,
    Edge,
    Line,
    Point,
    SolveData,
    SolveOptions,
    SolveResult,
    SolverHistoryItem,
    SolverState,
    ValidationResult,
)
from .angles import get_angle_value, is_solved
from .topology import Topology, build_topology, derive_lines, find_triangles
from .registry import AngleRegistry
from .validator import ConstraintValidator
from .solver import CombinedSolveResult, solve, solve_all
from .scene import Scene, SceneValidationError, dump_angles, load_scene, load_scene_file, validate_scene_data
from .equations import (
    EquationExtractionResult,
    EquationSolveResult,
    extract_equations,
    extract_equations_with_wolfram,
    simplify_equations,
    solve_linear_equations,
    solve_with_equations,
)

__all__ = [
    'SolverConfig',
    'get_solver_config',
    'set_solver_config',
    'Angle',
    'Circle',
    'Edge',
    'Line',
    'Point',
    'SolveData',
    'SolveOptions',
    'SolveResult',
    'SolverHistoryItem',
    'SolverState',
    'ValidationResult',
    'get_angle_value',
    'is_solved',
    'Topology',
    'build_topology',
    'derive_lines',
    'find_triangles',
    'AngleRegistry',
    'ConstraintValidator',
    'CombinedSolveResult',
    'solve',
    'solve_all',
    'Scene',
    'SceneValidationError',
    'dump_angles',
    'load_scene',
    'load_scene_file',
    'validate_scene_data',
    'EquationExtractionResult',
    'EquationSolveResult',
    'extract_equations',
    'extract_equations_with_wolfram',
    'simplify_equations',
    'solve_linear_equations',
    'solve_with_equations',
]
