import json

import pytest

from angle_solver import SceneValidationError, dump_angles, load_scene, load_scene_file, validate_scene_data

from conftest import straight_line_data, triangle_abc_data


def test_load_scene_builds_topology(triangle_scene):
    assert [point.id for point in triangle_scene.points] == ["A", "B", "C"]
    assert triangle_scene.triangles == [("A", "B", "C")]
    assert triangle_scene.adjacency["A"] == {"B", "C"}
    assert triangle_scene.angle("A", "C", "B").calculated_value == 70
    assert triangle_scene.angle("C", "B", "A").target


def test_symbolic_value_becomes_label(isosceles_scene):
    angle = isosceles_scene.angle("C", "A", "B")
    assert angle.value is None
    assert angle.label == "α"


def test_numeric_strings_are_values():
    data = triangle_abc_data()
    data["angles"][0]["value"] = "70"
    scene = load_scene(data)
    assert scene.angle("A", "B", "C").value == 70.0


def test_tuple_shorthand():
    scene = load_scene(
        {
            "points": [("A", 0, 0), ("B", 100, 0), ("C", 0, 100)],
            "edges": [("A", "B"), ("A", "C"), ("B", "A")],
            "angles": [{"pointId": "A", "sidepoints": ("B", "C"), "value": 90}],
        }
    )
    assert len(scene.edges) == 2
    assert scene.angle("A", "B", "C").value == 90


def test_create_missing_angles_and_derived_lines():
    scene = load_scene(straight_line_data(), create_missing_angles=True)
    assert [line.points for line in scene.lines] == [["A", "D", "B"]]
    assert {angle.name for angle in scene.angles} == {"∠ADC", "∠BDC"}


def test_lines_can_be_left_underived():
    data = straight_line_data()
    del data["lines"]
    assert load_scene(data, derive_lines=False).lines == []
    assert len(load_scene(data).lines) == 1


def test_explicit_triangles_override_discovery():
    data = triangle_abc_data()
    data["triangles"] = [["C", "B", "A"]]
    assert load_scene(data).triangles == [("A", "B", "C")]


def test_circles_are_filtered_and_sized():
    data = triangle_abc_data()
    data["circles"] = [{"id": "c", "centerPoint": "A", "pointsOnLine": ["B", "A", "Z"]}]
    (circle,) = load_scene(data).circles
    assert circle.points_on_line == ["B"]
    assert circle.radius == pytest.approx(100)
    assert (circle.center_x, circle.center_y) == (0.0, 0.0)


def test_unknown_references_are_skipped(caplog):
    data = triangle_abc_data()
    data["edges"].append(["A", "Z"])
    data["angles"].append({"pointId": "A", "sidepoints": ["B", "Z"], "value": 10})
    scene = load_scene(data)
    assert len(scene.edges) == 3
    assert len(scene.angles) == 3
    assert "unknown point" in caplog.text


@pytest.mark.parametrize(
    "data, message",
    [
        ({"edges": []}, "'points' must be a list"),
        ({"points": [{"id": "A", "x": 0, "y": 0}, {"id": "A", "x": 1, "y": 1}]}, "duplicate point id"),
        ({"points": [{"id": "A", "x": "0", "y": 0}]}, "numeric x and y"),
        ({"points": [], "edges": [["A"]]}, "edge #0"),
        ({"points": [], "angles": [{"pointId": "A", "sidepoints": ["B"]}]}, "two sidepoints"),
        ({"points": [], "triangles": [["A", "A", "B"]]}, "three distinct"),
        ({"points": [], "circles": [{"id": "c"}]}, "centerPoint"),
        ({"points": [], "circles": [{"id": "c", "centerPoint": "A", "radius": "big"}]}, "numeric radius"),
        ({"points": [], "angles": [{"pointId": "A", "sidepoints": [["B"], "C"]}]}, "two sidepoints"),
        ({"points": [], "triangles": [["A", "B", ["C"]]]}, "three distinct"),
    ],
)
def test_validation_errors(data, message):
    errors = validate_scene_data(data)
    assert any(message in error for error in errors)
    with pytest.raises(SceneValidationError) as excinfo:
        load_scene(data)
    assert excinfo.value.errors == errors
    assert isinstance(excinfo.value, ValueError)


def test_load_scene_file(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(triangle_abc_data(), ensure_ascii=False), encoding="utf-8")
    scene = load_scene_file(path)
    assert len(scene.angles) == 3


def test_dump_angles(isosceles_scene):
    dumped = dump_angles(isosceles_scene.angles)
    assert dumped[1]["pointId"] == "C"
    assert dumped[1]["value"] is None
    assert dumped[1]["label"] == "α"
    assert dumped[0]["value"] == 44
    assert dumped[2]["target"] is True
