"""Helpers for reading angle values and relating angle records to each other."""

from __future__ import annotations

import math
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .model import Angle, Line, Triangle

GREEK_LETTERS: Tuple[Tuple[str, str], ...] = (
    ("α", "alpha"),
    ("β", "beta"),
    ("γ", "gamma"),
    ("δ", "delta"),
    ("ε", "epsilon"),
    ("ζ", "zeta"),
    ("η", "eta"),
    ("θ", "theta"),
    ("ι", "iota"),
    ("κ", "kappa"),
    ("λ", "lambda"),
    ("μ", "mu"),
    ("ν", "nu"),
    ("ξ", "xi"),
    ("ο", "omicron"),
    ("π", "pi"),
    ("ρ", "rho"),
    ("σ", "sigma"),
    ("τ", "tau"),
    ("υ", "upsilon"),
    ("φ", "phi"),
    ("χ", "chi"),
    ("ψ", "psi"),
    ("ω", "omega"),
)


def coerce_degrees(value: object) -> Optional[float]:
    """Return ``value`` as degrees or ``None`` when it is not a usable number.

    Empty values, symbolic labels and zero all count as unknown.
    """

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def get_angle_value(angle: Angle) -> Optional[float]:
    return coerce_degrees(angle.value)


def is_solved(angle: Angle) -> bool:
    return get_angle_value(angle) is not None


def unsolved(angles: Iterable[Angle]) -> List[Angle]:
    return [angle for angle in angles if not is_solved(angle)]


def sum_of_known(angles: Iterable[Angle]) -> float:
    total = 0.0
    for angle in angles:
        value = get_angle_value(angle)
        if value is not None:
            total += value
    return total


def sum_of_calculated(angles: Iterable[Angle]) -> float:
    return sum(angle.calculated_value or 0.0 for angle in angles)


def have_same_labels(angles: Sequence[Angle]) -> bool:
    if not angles:
        return False
    label = angles[0].label
    return bool(label) and all(angle.label == label for angle in angles)


def format_degrees(value: float) -> str:
    rounded = round(value)
    if abs(value - rounded) < 1e-9:
        return str(int(rounded))
    return f"{value:.7f}".rstrip("0").rstrip(".")


def is_same_ray(p1: str, p2: str, vertex: str, lines: Sequence[Line]) -> bool:
    """Two rays from ``vertex`` coincide when they point at the same point, or
    when both points lie strictly on the same side of ``vertex`` on one line."""

    if p1 == p2:
        return True
    for line in lines:
        if not line.contains(vertex, p1, p2):
            continue
        vertex_index = line.index(vertex)
        first = line.index(p1)
        second = line.index(p2)
        if (first < vertex_index and second < vertex_index) or (first > vertex_index and second > vertex_index):
            return True
    return False


def are_same_angle(first: Angle, second: Angle, lines: Sequence[Line]) -> bool:
    if first.point_id != second.point_id:
        return False
    vertex = first.point_id
    a1, a2 = first.sidepoints
    b1, b2 = second.sidepoints
    return (is_same_ray(a1, b1, vertex, lines) and is_same_ray(a2, b2, vertex, lines)) or (
        is_same_ray(a1, b2, vertex, lines) and is_same_ray(a2, b1, vertex, lines)
    )


def find_same_angle_groups(angles: Sequence[Angle], lines: Sequence[Line]) -> List[List[Angle]]:
    groups: List[List[Angle]] = []
    for index, angle in enumerate(angles):
        group = [angle]
        for other in angles[index + 1:]:
            if are_same_angle(angle, other, lines):
                group.append(other)
        if len(group) > 1:
            groups.append(group)
    return groups


def find_angle(angles: Iterable[Angle], vertex: str, ray1: str, ray2: str) -> Optional[Angle]:
    for angle in angles:
        if angle.point_id == vertex and angle.has_rays(ray1, ray2):
            return angle
    return None


def find_equivalent_angle(
    angles: Sequence[Angle], vertex: str, ray1: str, ray2: str, lines: Sequence[Line]
) -> Optional[Angle]:
    """Return the record for the angle ``ray1-vertex-ray2``.

    An exact ray match wins; otherwise any record at ``vertex`` whose rays are
    the same rays (see :func:`is_same_ray`) is accepted.
    """

    exact = find_angle(angles, vertex, ray1, ray2)
    if exact is not None:
        return exact
    for angle in angles:
        if angle.point_id != vertex:
            continue
        s1, s2 = angle.sidepoints
        if (is_same_ray(s1, ray1, vertex, lines) and is_same_ray(s2, ray2, vertex, lines)) or (
            is_same_ray(s1, ray2, vertex, lines) and is_same_ray(s2, ray1, vertex, lines)
        ):
            return angle
    return None


def triangle_angles(
    triangle: Triangle, angles_by_vertex: Mapping[str, Sequence[Angle]], lines: Sequence[Line]
) -> List[Angle]:
    """Return the interior angle records of ``triangle`` that could be resolved."""

    found: List[Angle] = []
    for vertex in triangle:
        first, second = [pid for pid in triangle if pid != vertex]
        angle = find_equivalent_angle(angles_by_vertex.get(vertex, ()), vertex, first, second, lines)
        if angle is not None:
            found.append(angle)
    return found


def find_overlapping_angles(angle: Angle, angles: Sequence[Angle], lines: Sequence[Line]) -> List[Angle]:
    """Records at the same vertex sharing one ray whose other ray points the same way."""

    vertex = angle.point_id
    overlapping: List[Angle] = []
    for other in angles:
        if other is angle or other.point_id != vertex:
            continue
        shared = set(angle.sidepoints) & set(other.sidepoints)
        if len(shared) != 1:
            continue
        (ray,) = shared
        mine = angle.other_ray(ray)
        theirs = other.other_ray(ray)
        if mine is not None and theirs is not None and is_same_ray(mine, theirs, vertex, lines):
            overlapping.append(other)
    return overlapping

