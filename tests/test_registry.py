import math

import pytest

from angle_solver.model import Line, Point
from angle_solver.registry import AngleRegistry


def _points():
    return {
        "O": Point("O", 0, 0),
        "A": Point("A", 100, 0),
        "B": Point("B", 100 * math.cos(math.radians(35)), 100 * math.sin(math.radians(35))),
        "C": Point("C", 0, 100),
        "W": Point("W", -100, 0),
    }


def test_create_angle_fills_geometry():
    registry = AngleRegistry(_points())
    angle = registry.create_angle("O", "C", "A", value=90, target=True)
    assert angle is not None
    assert angle.id == "O-A-C"
    assert angle.name == "∠COA"
    assert angle.calculated_value == 90
    assert angle.start_angle == pytest.approx(0.0)
    assert angle.end_angle == pytest.approx(math.pi / 2)
    assert angle.radius == 34
    assert angle.target
    assert registry.find("O", "A", "C") is angle
    assert len(registry) == 1


@pytest.mark.parametrize(
    "vertex, ray1, ray2",
    [
        ("O", "A", "A"),  # repeated point
        ("O", "A", "Z"),  # unknown point
        ("O", "A", "W"),  # straight along the line
    ],
)
def test_create_angle_rejects_invalid_requests(vertex, ray1, ray2):
    registry = AngleRegistry(_points(), [Line("l", ["W", "O", "A"])])
    assert registry.create_angle(vertex, ray1, ray2) is None
    assert len(registry) == 0


def test_create_angle_rejects_duplicates_in_either_order():
    registry = AngleRegistry(_points())
    first = registry.create_angle("O", "A", "B", value=35)
    assert registry.create_angle("O", "B", "A", value=40) is None
    assert list(registry) == [first]
    assert first.value == 35


def test_create_all_angles_largest_first():
    registry = AngleRegistry(_points(), [Line("l", ["W", "O", "A"])])
    created = registry.create_all_angles({"O": {"A", "B", "C", "W"}, "A": {"O"}})
    assert [angle.calculated_value for angle in created] == [145, 90, 90, 55, 35]
    assert registry.find("O", "A", "W") is None
    assert set(registry.by_vertex()) == {"O"}
