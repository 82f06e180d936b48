"""Core data structures shared by the topology builder, rules and solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple, Union

from .config import SolverConfig

PointId = str
AngleValue = Union[float, int, str, None]
Triangle = Tuple[str, str, str]


def triangle_key(points: Iterable[str]) -> Triangle:
    """Return the canonical sorted tuple for a triangle given as any iterable."""

    ordered = tuple(sorted(points))
    if len(ordered) != 3 or len(set(ordered)) != 3:
        raise ValueError(f"triangle needs three distinct points, got {ordered!r}")
    return ordered  # type: ignore[return-value]


def angle_id(vertex: str, ray1: str, ray2: str) -> str:
    first, second = sorted((ray1, ray2))
    return f"{vertex}-{first}-{second}"


def angle_name(vertex: str, ray1: str, ray2: str) -> str:
    return f"∠{ray1}{vertex}{ray2}"


@dataclass
class Point:
    id: PointId
    x: float
    y: float
    hide: bool = False


@dataclass
class Edge:
    points: Tuple[PointId, PointId]
    id: str = ""
    hide: bool = False

    def __post_init__(self) -> None:
        self.points = (self.points[0], self.points[1])
        if not self.id:
            self.id = "-".join(sorted(self.points))

    @property
    def key(self) -> FrozenSet[PointId]:
        return frozenset(self.points)


@dataclass
class Line:
    """Ordered sequence of three or more collinear points."""

    id: str
    points: List[PointId]

    def index(self, point: PointId) -> int:
        try:
            return self.points.index(point)
        except ValueError:
            return -1

    def contains(self, *points: PointId) -> bool:
        return all(point in self.points for point in points)


@dataclass
class Circle:
    id: str
    center_point: PointId
    center_x: float
    center_y: float
    radius: float
    points_on_line: List[PointId] = field(default_factory=list)
    hide: bool = False


@dataclass(eq=False)
class Angle:
    """Angle record at ``point_id`` between the rays towards ``sidepoints``.

    Records compare by identity; two records denote the same geometric angle
    when :attr:`key` matches.  ``calculated_value`` holds the degree measure
    taken from coordinates and is never changed by solving.
    """

    point_id: PointId
    sidepoints: Tuple[PointId, PointId]
    id: str = ""
    name: str = ""
    value: AngleValue = None
    calculated_value: Optional[float] = None
    label: str = ""
    start_angle: float = 0.0
    end_angle: float = 0.0
    radius: float = 0.0
    hide: bool = False
    target: bool = False

    def __post_init__(self) -> None:
        self.sidepoints = (self.sidepoints[0], self.sidepoints[1])
        if not self.id:
            self.id = angle_id(self.point_id, *self.sidepoints)
        if not self.name:
            self.name = angle_name(self.point_id, *self.sidepoints)

    @property
    def key(self) -> Tuple[PointId, FrozenSet[PointId]]:
        return self.point_id, frozenset(self.sidepoints)

    def has_rays(self, ray1: PointId, ray2: PointId) -> bool:
        return frozenset((ray1, ray2)) == frozenset(self.sidepoints)

    def other_ray(self, ray: PointId) -> Optional[PointId]:
        if self.sidepoints[0] == ray:
            return self.sidepoints[1]
        if self.sidepoints[1] == ray:
            return self.sidepoints[0]
        return None

    def __repr__(self) -> str:
        return f"Angle({self.name}, value={self.value!r}, label={self.label!r})"


SetAngleHook = Callable[[Angle, str, str], None]


@dataclass
class SolveData:
    """Everything the rule modules read: angles plus derived topology."""

    angles: List[Angle]
    points: List[Point]
    lines: List[Line] = field(default_factory=list)
    triangles: List[Triangle] = field(default_factory=list)
    circles: List[Circle] = field(default_factory=list)
    adjacent_points: Dict[PointId, Set[PointId]] = field(default_factory=dict)
    points_by_id: Dict[PointId, Point] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.triangles = list(dict.fromkeys(triangle_key(tri) for tri in self.triangles))
        self.points_by_id = {point.id: point for point in self.points}

    def angle_maps_by_point_id(self) -> Dict[PointId, List[Angle]]:
        grouped: Dict[PointId, List[Angle]] = {}
        for angle in self.angles:
            grouped.setdefault(angle.point_id, []).append(angle)
        return grouped

    def targets(self) -> List[Angle]:
        return [angle for angle in self.angles if angle.target]


@dataclass
class SolveOptions:
    set_angle: Optional[SetAngleHook] = None
    max_iterations: Optional[int] = None
    config: Optional[SolverConfig] = None


class SolverState(str, Enum):
    RUNNING = "running"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max-iterations-reached"


@dataclass
class SolverHistoryItem:
    angle: Angle
    message: str
    method: str


@dataclass
class SolveResult:
    is_valid: bool
    solved: bool
    all_solved: bool
    score: int
    iterations: int
    execution_time: float
    state: SolverState = SolverState.CONVERGED
    history: List[SolverHistoryItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "solved": self.solved,
            "allSolved": self.all_solved,
            "score": self.score,
            "iterations": self.iterations,
            "executionTime": self.execution_time,
            "state": self.state.value,
            "history": [
                {"angle": item.angle.name, "message": item.message, "method": item.method}
                for item in self.history
            ],
        }


@dataclass
class ValidationResult:
    valid: bool
    violation: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid
