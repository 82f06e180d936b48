import math

import pytest

from angle_solver.geometry import (
    angle_between_degrees,
    angle_geometry,
    are_collinear,
    are_opposite_rays,
    collinear_chains,
    direction,
    is_between,
    is_point_on_circle,
    normalize_angle,
    sort_line_points,
)
from angle_solver.model import Point


def P(pid, x, y):
    return Point(pid, x, y)


def test_direction_and_normalize():
    origin = P("O", 0, 0)
    assert direction(origin, P("X", 0, 10)) == pytest.approx(math.pi / 2)
    assert normalize_angle(-math.pi / 2) == pytest.approx(3 * math.pi / 2)
    assert normalize_angle(5 * math.pi) == pytest.approx(math.pi)
    assert 0 <= normalize_angle(-1e-18) < 2 * math.pi


@pytest.mark.parametrize(
    "p1, p2, expected",
    [
        ((10, 0), (0, 10), 90.0),
        ((0, 10), (10, 0), 90.0),
        ((10, 0), (-10, 1e-9), 180.0),
        ((10, 0), (10, -10), 45.0),
    ],
)
def test_angle_between_degrees_uses_smaller_arc(p1, p2, expected):
    vertex = P("O", 0, 0)
    assert angle_between_degrees(vertex, P("A", *p1), P("B", *p2)) == pytest.approx(expected)


def test_collinearity_and_betweenness():
    a, b, c = P("A", 0, 0), P("B", 50, 0.1), P("C", 100, 0)
    assert are_collinear(a, b, c)
    assert not are_collinear(a, P("X", 50, 20), c)
    assert is_between(b, a, c)
    assert not is_between(c, a, b)


def test_angle_geometry_orders_arc_counter_clockwise():
    geometry = angle_geometry(P("O", 0, 0), P("A", 0, 10), P("B", 10, 0))
    assert geometry is not None
    assert geometry.degrees == 90
    assert geometry.start_angle == pytest.approx(0.0)
    assert geometry.end_angle == pytest.approx(math.pi / 2)
    assert geometry.radius == 34


@pytest.mark.parametrize(
    "p2",
    [
        (100, 5),  # ~2.9°, below the minimum arc
        (-100, 1),  # ~179.4°, nearly straight
    ],
)
def test_angle_geometry_rejects_degenerate_arcs(p2):
    assert angle_geometry(P("O", 0, 0), P("A", 100, 0), P("B", *p2)) is None


def test_sort_line_points_orders_by_x_then_y():
    points = {
        "A": P("A", 10, 0),
        "B": P("B", 0, 0),
        "C": P("C", 5, 0),
    }
    assert sort_line_points(["A", "B", "C"], points) == ["B", "C", "A"]

    vertical = {"T": P("T", 0, 10), "M": P("M", 0, 5), "S": P("S", 0, 0)}
    assert sort_line_points(["T", "M", "S"], vertical) == ["S", "M", "T"]


def test_opposite_rays():
    vertex = P("O", 0, 0)
    assert are_opposite_rays(vertex, P("A", 10, 0), P("B", -20, 0.01))
    assert not are_opposite_rays(vertex, P("A", 10, 0), P("B", 0, 10))


def test_point_on_circle_uses_threshold():
    assert is_point_on_circle(P("A", 103, 0), 0, 0, 100)
    assert not is_point_on_circle(P("A", 110, 0), 0, 0, 100)


def test_collinear_chains_follow_edges():
    points = {"A": P("A", 0, 0), "D": P("D", 50, 0), "B": P("B", 100, 0), "C": P("C", 50, 40)}
    adjacency = {"A": {"D"}, "D": {"A", "B", "C"}, "B": {"D"}, "C": {"D"}}
    assert collinear_chains(points, adjacency) == [["A", "D", "B"]]
