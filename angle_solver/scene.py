"""Enrichment: turn a normalized geometry mapping into solver input.

The accepted input is the in-memory data model written as plain JSON-like
data::

    {
      "points":    [{"id": "A", "x": 0, "y": 0}, ...],
      "edges":     [{"points": ["A", "B"]}, ...],
      "lines":     [["A", "D", "B"], ...],
      "circles":   [{"id": "c1", "centerPoint": "A", "pointsOnLine": ["B", "C"]}],
      "angles":    [{"pointId": "B", "sidepoints": ["A", "C"], "value": 50}],
      "triangles": [["A", "B", "C"], ...]            # optional
    }

Tuples are accepted as shorthand for points ``(id, x, y)``, edges ``(a, b)``
and lines.  Structural problems raise :class:`SceneValidationError`;
references to unknown points are logged and skipped.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from .angles import coerce_degrees, get_angle_value
from .config import SolverConfig, get_solver_config
from .geometry import distance, is_point_on_circle, sort_line_points
from .model import Angle, Circle, Edge, Line, Point, SolveData, Triangle, triangle_key
from .registry import AngleRegistry
from .topology import build_topology, reveal_hidden_angles

logger = logging.getLogger(__name__)


class SceneValidationError(ValueError):
    """Raised when scene data is structurally unusable."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass
class Scene:
    points: List[Point]
    edges: List[Edge]
    lines: List[Line]
    circles: List[Circle]
    angles: List[Angle]
    triangles: List[Triangle]
    adjacency: Dict[str, Set[str]] = field(default_factory=dict)

    @property
    def points_by_id(self) -> Dict[str, Point]:
        return {point.id: point for point in self.points}

    def solve_data(self) -> SolveData:
        return SolveData(
            angles=self.angles,
            points=self.points,
            lines=self.lines,
            triangles=self.triangles,
            circles=self.circles,
            adjacent_points=self.adjacency,
        )

    def angle(self, vertex: str, ray1: str, ray2: str) -> Optional[Angle]:
        wanted = frozenset((ray1, ray2))
        return next(
            (angle for angle in self.angles if angle.point_id == vertex and frozenset(angle.sidepoints) == wanted),
            None,
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _point_fields(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, (list, tuple)) and len(raw) == 3:
        return {"id": raw[0], "x": raw[1], "y": raw[2]}
    return None


def _edge_points(raw: Any) -> Optional[Sequence[Any]]:
    if isinstance(raw, Mapping):
        return raw.get("points")
    if isinstance(raw, (list, tuple)):
        return raw
    return None


def _line_points(raw: Any) -> Optional[Sequence[Any]]:
    if isinstance(raw, Mapping):
        return raw.get("points")
    if isinstance(raw, (list, tuple)):
        return raw
    return None


def validate_scene_data(data: Mapping[str, Any]) -> List[str]:
    """Return a list of structural problems; empty when the data is usable."""

    errors: List[str] = []
    if not isinstance(data, Mapping):
        return ["scene data must be a mapping"]

    raw_points = data.get("points")
    if not isinstance(raw_points, (list, tuple)):
        return ["'points' must be a list"]
    seen: Set[str] = set()
    for idx, raw in enumerate(raw_points):
        fields = _point_fields(raw)
        if fields is None:
            errors.append(f"point #{idx} must be a mapping or (id, x, y)")
            continue
        pid = fields.get("id")
        if not isinstance(pid, str) or not pid:
            errors.append(f"point #{idx} needs a non-empty string id")
            continue
        if pid in seen:
            errors.append(f"duplicate point id {pid!r}")
        seen.add(pid)
        if not _is_number(fields.get("x")) or not _is_number(fields.get("y")):
            errors.append(f"point {pid!r} needs numeric x and y")

    for idx, raw in enumerate(data.get("edges") or ()):
        pair = _edge_points(raw)
        if pair is None or len(pair) != 2 or not all(isinstance(pid, str) for pid in pair):
            errors.append(f"edge #{idx} must reference two point ids")

    for idx, raw in enumerate(data.get("lines") or ()):
        members = _line_points(raw)
        if members is None or not all(isinstance(pid, str) for pid in members):
            errors.append(f"line #{idx} must be a list of point ids")

    for idx, raw in enumerate(data.get("circles") or ()):
        if not isinstance(raw, Mapping) or not isinstance(raw.get("centerPoint"), str):
            errors.append(f"circle #{idx} needs a centerPoint id")
            continue
        for key in ("centerX", "centerY", "radius"):
            if raw.get(key) is not None and not _is_number(raw[key]):
                errors.append(f"circle #{idx} needs a numeric {key}")
        on_circle = raw.get("pointsOnLine") or ()
        if not isinstance(on_circle, (list, tuple)) or not all(isinstance(pid, str) for pid in on_circle):
            errors.append(f"circle #{idx} pointsOnLine must be a list of point ids")

    for idx, raw in enumerate(data.get("angles") or ()):
        if not isinstance(raw, Mapping):
            errors.append(f"angle #{idx} must be a mapping")
            continue
        sidepoints = raw.get("sidepoints")
        if not isinstance(raw.get("pointId"), str):
            errors.append(f"angle #{idx} needs a pointId")
        if (
            not isinstance(sidepoints, (list, tuple))
            or len(sidepoints) != 2
            or not all(isinstance(pid, str) for pid in sidepoints)
        ):
            errors.append(f"angle #{idx} needs two sidepoints")

    for idx, raw in enumerate(data.get("triangles") or ()):
        if (
            not isinstance(raw, (list, tuple, set, frozenset))
            or not all(isinstance(pid, str) for pid in raw)
            or len(set(raw)) != 3
        ):
            errors.append(f"triangle #{idx} must list three distinct point ids")
    return errors


def _normalize_value(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Split the raw ``value`` into a numeric value and a label.

    A symbolic value such as ``"α"`` becomes the label when no label is set.
    """

    value = raw.get("value")
    label = raw.get("label") or ""
    if value is None or value == "":
        return {"value": None, "label": label}
    number = coerce_degrees(value)
    if number is not None:
        return {"value": number, "label": label}
    if isinstance(value, str) and not label:
        label = value
    return {"value": None, "label": label}


def _build_points(raw_points: Iterable[Any]) -> List[Point]:
    points = []
    for raw in raw_points:
        fields = _point_fields(raw)
        points.append(
            Point(id=fields["id"], x=float(fields["x"]), y=float(fields["y"]), hide=bool(fields.get("hide", False)))
        )
    return points


def _build_edges(raw_edges: Iterable[Any], known: Mapping[str, Point]) -> List[Edge]:
    edges: List[Edge] = []
    seen: Set[frozenset] = set()
    for raw in raw_edges:
        a, b = _edge_points(raw)
        if a == b:
            continue
        if a not in known or b not in known:
            logger.warning("Skipping edge %s-%s: unknown point", a, b)
            continue
        key = frozenset((a, b))
        if key in seen:
            continue
        seen.add(key)
        extra = raw if isinstance(raw, Mapping) else {}
        edges.append(Edge(points=(a, b), id=str(extra.get("id") or ""), hide=bool(extra.get("hide", False))))
    return edges


def _build_lines(raw_lines: Iterable[Any], known: Mapping[str, Point]) -> List[Line]:
    lines: List[Line] = []
    for idx, raw in enumerate(raw_lines):
        members = [pid for pid in _line_points(raw) if pid in known]
        line_id = raw.get("id") if isinstance(raw, Mapping) and raw.get("id") else f"line-{idx}"
        lines.append(Line(id=str(line_id), points=sort_line_points(members, known)))
    return lines


def _build_circles(raw_circles: Iterable[Any], known: Mapping[str, Point]) -> List[Circle]:
    circles: List[Circle] = []
    for idx, raw in enumerate(raw_circles):
        center = raw["centerPoint"]
        if center not in known:
            logger.warning("Skipping circle %s: unknown center %s", raw.get("id"), center)
            continue
        on_circle = [pid for pid in raw.get("pointsOnLine") or () if pid in known and pid != center]
        center_x = float(raw.get("centerX", known[center].x))
        center_y = float(raw.get("centerY", known[center].y))
        radius = raw.get("radius")
        if radius is None:
            radius = distance(known[center], known[on_circle[0]]) if on_circle else 0.0
        for pid in on_circle:
            if not is_point_on_circle(known[pid], center_x, center_y, float(radius)):
                logger.warning("Point %s is listed on circle %s but lies off it", pid, raw.get("id"))
        circles.append(
            Circle(
                id=str(raw.get("id") or f"circle-{idx}"),
                center_point=center,
                center_x=center_x,
                center_y=center_y,
                radius=float(radius),
                points_on_line=on_circle,
                hide=bool(raw.get("hide", False)),
            )
        )
    return circles


def load_scene(
    data: Mapping[str, Any],
    *,
    create_missing_angles: bool = False,
    derive_lines: bool = True,
    config: Optional[SolverConfig] = None,
) -> Scene:
    """Validate ``data`` and build the enriched :class:`Scene`.

    Lines are completed with straight edge chains unless ``derive_lines`` is
    false, triangles are discovered unless listed explicitly, and with
    ``create_missing_angles`` every valid angle between neighbouring edges is
    registered in addition to the listed ones.
    """

    errors = validate_scene_data(data)
    if errors:
        raise SceneValidationError(errors)
    config = config or get_solver_config()

    points = _build_points(data["points"])
    by_id = {point.id: point for point in points}
    edges = _build_edges(data.get("edges") or (), by_id)
    given_lines = _build_lines(data.get("lines") or (), by_id)
    topology = build_topology(
        points, edges, given_lines, derive=derive_lines, tolerance=config.collinear_tolerance
    )

    registry = AngleRegistry(by_id, topology.lines, scale=config.angle_radius_scale)
    for raw in data.get("angles") or ():
        vertex = raw["pointId"]
        ray1, ray2 = raw["sidepoints"]
        normalized = _normalize_value(raw)
        angle = registry.create_angle(
            vertex,
            ray1,
            ray2,
            value=normalized["value"],
            label=normalized["label"],
            target=bool(raw.get("target", False)),
            hide=bool(raw.get("hide", False)),
        )
        if angle is None:
            logger.warning("Skipping angle %s at %s: duplicate or degenerate", f"{ray1}{vertex}{ray2}", vertex)
    if create_missing_angles:
        registry.create_all_angles(topology.adjacency)

    if data.get("triangles"):
        triangles = [triangle_key(raw) for raw in data["triangles"] if all(pid in by_id for pid in raw)]
    else:
        triangles = topology.triangles

    circles = _build_circles(data.get("circles") or (), by_id)
    angles = list(registry.angles)
    reveal_hidden_angles(angles, triangles, topology.lines)

    logger.info(
        "Loaded scene: %d point(s), %d edge(s), %d line(s), %d angle(s), %d triangle(s), %d circle(s)",
        len(points),
        len(edges),
        len(topology.lines),
        len(angles),
        len(triangles),
        len(circles),
    )
    return Scene(
        points=points,
        edges=edges,
        lines=topology.lines,
        circles=circles,
        angles=angles,
        triangles=triangles,
        adjacency=topology.adjacency,
    )


def load_scene_file(path: Union[str, Path], **kwargs: Any) -> Scene:
    with open(path, encoding="utf-8") as fin:
        data = json.load(fin)
    return load_scene(data, **kwargs)


def dump_angles(angles: Iterable[Angle]) -> List[Dict[str, Any]]:
    return [
        {
            "id": angle.id,
            "name": angle.name,
            "pointId": angle.point_id,
            "sidepoints": list(angle.sidepoints),
            "value": get_angle_value(angle),
            "calculatedValue": angle.calculated_value,
            "label": angle.label or None,
            "target": angle.target,
        }
        for angle in angles
    ]
