from angle_solver.model import Angle
from angle_solver.validator import ConstraintValidator, all_triangles_valid, triangles_consistent


def test_composed_child_must_match_parent(split_scene):
    validator = ConstraintValidator(split_scene.solve_data())
    child = split_scene.angle("O", "B", "C")
    assert validator.validate(child, 55).valid
    result = validator.validate(child, 40)
    assert not result.valid
    assert "∠AOC" in result.violation


def test_composed_parent_must_match_parts(split_scene):
    split_scene.angle("O", "A", "C").value = None
    split_scene.angle("O", "B", "C").value = 55
    validator = ConstraintValidator(split_scene.solve_data())
    assert validator.check_composed(split_scene.angle("O", "A", "C"), 90).valid
    assert not validator.check_composed(split_scene.angle("O", "A", "C"), 100).valid


def test_triangle_check(triangle_scene):
    validator = ConstraintValidator(triangle_scene.solve_data())
    target = triangle_scene.angle("C", "A", "B")
    assert len(validator.triangle_groups) == 1
    assert validator.check_triangles(target, 60).valid
    assert not validator.check_triangles(target, 75).valid


def test_full_circle_check(turn_scene):
    validator = ConstraintValidator(turn_scene.solve_data())
    bed = turn_scene.angle("E", "B", "D")
    dea = turn_scene.angle("E", "D", "A")
    dea.value = 105
    assert validator.check_full_circle(bed, 105).valid
    assert not validator.check_full_circle(bed, 120).valid


def test_supplementary_groups_are_checked_when_given(straight_scene):
    validator = ConstraintValidator(straight_scene.solve_data())
    adc = straight_scene.angle("D", "A", "C")
    bdc = straight_scene.angle("D", "B", "C")
    groups = [((adc, bdc), 180.0)]
    assert validator.validate(bdc, 50, groups).valid
    assert not validator.validate(bdc, 60, groups).valid
    assert validator.validate(bdc, 60).valid


def test_tolerance_comes_from_config(triangle_scene):
    from angle_solver.config import SolverConfig

    validator = ConstraintValidator(triangle_scene.solve_data(), config=SolverConfig(validation_tolerance=20))
    assert validator.check_triangles(triangle_scene.angle("C", "A", "B"), 75).valid


def test_triangle_consistency_helpers():
    a = Angle("A", ("B", "C"), value=60)
    b = Angle("B", ("A", "C"), value=60)
    c = Angle("C", ("A", "B"))
    assert not triangles_consistent([])
    assert all_triangles_valid([])
    assert not all_triangles_valid([[a, b]])
    assert not triangles_consistent([[a, b, c]])
    assert not all_triangles_valid([[a, b, c]])
    c.value = 65
    assert triangles_consistent([[a, b, c]])
    assert all_triangles_valid([[a, b, c]])
    c.value = 80
    assert not all_triangles_valid([[a, b, c]], tolerance=10)
