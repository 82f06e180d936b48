import math

import pytest

from angle_solver import load_scene


def polar(radius, degrees, origin=(0.0, 0.0)):
    rad = math.radians(degrees)
    return (origin[0] + radius * math.cos(rad), origin[1] + radius * math.sin(rad))


def point(pid, xy):
    return {"id": pid, "x": xy[0], "y": xy[1]}


def triangle_abc_data():
    # A = 70°, B = 50°, C = 60°
    ac = 100 * math.sin(math.radians(50)) / math.sin(math.radians(60))
    return {
        "points": [point("A", (0.0, 0.0)), point("B", (100.0, 0.0)), point("C", polar(ac, 70))],
        "edges": [["A", "B"], ["B", "C"], ["C", "A"]],
        "angles": [
            {"pointId": "A", "sidepoints": ["B", "C"], "value": 70},
            {"pointId": "B", "sidepoints": ["A", "C"], "value": 50},
            {"pointId": "C", "sidepoints": ["A", "B"], "target": True},
        ],
    }


def straight_line_data():
    # D between A and B, ∠ADC = 130°, ∠CDB = 50°
    return {
        "points": [
            point("A", (0.0, 0.0)),
            point("D", (100.0, 0.0)),
            point("B", (200.0, 0.0)),
            point("C", polar(100, 50, origin=(100.0, 0.0))),
        ],
        "edges": [["A", "D"], ["D", "B"], ["D", "C"]],
        "lines": [["A", "D", "B"]],
        "angles": [
            {"pointId": "D", "sidepoints": ["A", "C"], "value": 130},
            {"pointId": "D", "sidepoints": ["B", "C"], "target": True},
        ],
    }


def isosceles_label_data():
    return {
        "points": [point("B", (0.0, 0.0)), point("C", (100.0, 0.0)), point("A", polar(50 / math.cos(math.radians(44)), 44))],
        "edges": [["A", "B"], ["B", "C"], ["C", "A"]],
        "angles": [
            {"pointId": "B", "sidepoints": ["A", "C"], "value": 44, "label": "α"},
            {"pointId": "C", "sidepoints": ["A", "B"], "value": "α"},
            {"pointId": "A", "sidepoints": ["B", "C"], "target": True},
        ],
    }


def crossing_lines_data():
    # lines A-E-B and C-E-D cross at E, ∠AEC = 70°
    return {
        "points": [
            point("E", (0.0, 0.0)),
            point("A", (-100.0, 0.0)),
            point("B", (100.0, 0.0)),
            point("C", polar(100, 110)),
            point("D", polar(100, 290)),
        ],
        "edges": [["A", "E"], ["E", "B"], ["C", "E"], ["E", "D"]],
        "lines": [["A", "E", "B"], ["C", "E", "D"]],
        "angles": [
            {"pointId": "E", "sidepoints": ["A", "C"], "value": 70},
            {"pointId": "E", "sidepoints": ["B", "D"], "target": True},
        ],
    }


def labelled_turn_data():
    # four rays around E, the last two angles share label α
    return {
        "points": [
            point("E", (0.0, 0.0)),
            point("A", polar(100, 0)),
            point("C", polar(100, 80)),
            point("B", polar(100, 150)),
            point("D", polar(100, 255)),
        ],
        "edges": [["E", "A"], ["E", "B"], ["E", "C"], ["E", "D"]],
        "angles": [
            {"pointId": "E", "sidepoints": ["A", "C"], "value": 80},
            {"pointId": "E", "sidepoints": ["C", "B"], "value": 70},
            {"pointId": "E", "sidepoints": ["B", "D"], "label": "α", "target": True},
            {"pointId": "E", "sidepoints": ["D", "A"], "label": "α"},
        ],
    }


def split_angle_data():
    # ∠AOC = 90° split by OB into 35° and 55°
    return {
        "points": [
            point("O", (0.0, 0.0)),
            point("A", (100.0, 0.0)),
            point("B", polar(100, 35)),
            point("C", (0.0, 100.0)),
        ],
        "edges": [["O", "A"], ["O", "B"], ["O", "C"]],
        "angles": [
            {"pointId": "O", "sidepoints": ["A", "C"], "value": 90},
            {"pointId": "O", "sidepoints": ["A", "B"], "value": 35},
            {"pointId": "O", "sidepoints": ["B", "C"], "target": True},
        ],
    }


@pytest.fixture
def triangle_scene():
    return load_scene(triangle_abc_data())


@pytest.fixture
def straight_scene():
    return load_scene(straight_line_data(), create_missing_angles=True)


@pytest.fixture
def isosceles_scene():
    return load_scene(isosceles_label_data())


@pytest.fixture
def crossing_scene():
    return load_scene(crossing_lines_data(), create_missing_angles=True)


@pytest.fixture
def turn_scene():
    return load_scene(labelled_turn_data())


@pytest.fixture
def split_scene():
    return load_scene(split_angle_data(), create_missing_angles=True)
