from urllib.parse import unquote

import pytest

from angle_solver.equations import (
    Eq,
    EquationError,
    extract_equations,
    extract_equations_with_wolfram,
    greek_to_words,
    parse_equation,
    render,
    simplify_equations,
    solve_linear_equations,
    solve_with_equations,
    symbol_for_index,
    wolfram_url,
)
from angle_solver.equations.expr import const, difference, format_number, label, sum_of, var
from angle_solver.equations.extract import extract_relations
from angle_solver.equations.wolfram import WOLFRAM_URL, build_query, clean_equations


def test_render_expressions():
    assert render(Eq(sum_of([var("a"), var("b")]), const(180))) == "a+b=180"
    assert render(Eq(var("x"), difference(const(130), [const(50)]))) == "x=130-50"
    assert render(Eq(var("a"), label("α"))) == "a=α"
    assert format_number(12.5) == "12.5"
    assert format_number(1 / 3) == "0.3333333"
    assert format_number(-0.0) == "0"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a+b=180", "a+b=180"),
        ("a + b + c = 180", "a+b+c=180"),
        ("∠ABC=∠CBD", "∠ABC=∠CBD"),
        ("2*a=b", "2*a=b"),
        ("a=180-b-c", "a=180-b-c"),
    ],
)
def test_parse_then_render(text, expected):
    assert render(parse_equation(text)) == expected


def test_parse_marks_labels():
    equation = parse_equation("∠ABC=α", labels=["α"])
    assert equation.is_label_assignment()
    assert not parse_equation("∠ABC=α").is_label_assignment()


@pytest.mark.parametrize("text", ["a+b", "a=b=c", "=5", "a+=5"])
def test_parse_errors(text):
    with pytest.raises(EquationError):
        parse_equation(text)


def test_linear_form_collects_terms():
    coefficients, constant = parse_equation("a+b+a=360-c").linear_form()
    assert coefficients == {var("a"): 2.0, var("b"): 1.0, var("c"): 1.0}
    assert constant == 360.0


def test_extract_triangle_equations(triangle_scene):
    equations = extract_equations(triangle_scene.solve_data())
    assert "∠BAC+∠ABC+∠ACB=180" in equations
    assert "∠BAC=70" in equations
    assert "∠ABC=50" in equations
    assert len(equations) == len(set(equations))


def test_extract_supplementary_and_partial_sums(straight_scene):
    equations = extract_equations(straight_scene.solve_data())
    assert "∠BDC+∠ADC=180" in equations
    assert "∠BDC=50" in equations
    assert "∠ADC=130" in equations


def test_extract_composed_single_unknown(split_scene):
    equations = extract_equations(split_scene.solve_data())
    assert "∠AOC=∠AOB+∠BOC" in equations
    assert "∠BOC=90-35" in equations


def test_extract_crossing_relations(crossing_scene):
    equations = extract_equations(crossing_scene.solve_data())
    assert "∠AEC=∠BED" in equations
    assert "∠AED=∠BEC" in equations
    assert "∠AEC+∠BED+∠AED+∠BEC=360" in equations


def test_extract_labels(turn_scene):
    relations = extract_relations(turn_scene.solve_data())
    rendered = [render(equation) for equation in relations]
    assert "∠BED=∠DEA" in rendered
    assert "∠BED=α" in rendered
    assert "∠AEC+∠CEB+∠BED+∠DEA=360" in rendered


def test_symbols():
    assert [symbol_for_index(i) for i in (0, 4, 8, 25, 26, 35, 36)] == ["a", "e", "i", "z", "a0", "a9", "b0"]


def test_simplify_merges_labelled_angles(turn_scene):
    data = turn_scene.solve_data()
    simplified = simplify_equations(extract_relations(data), data)
    assert simplified.mapping["∠BED"] == simplified.mapping["∠DEA"] == "a"
    assert simplified.reverse_mapping["a"] == ["∠BED", "∠DEA"]
    assert simplified.mapping["∠AEC"] == "b"
    assert "b+c+a+a=360" in simplified.rendered()
    assert "a=α" in simplified.rendered()
    cleaned = clean_equations(simplified.equations)
    assert "a=α" not in cleaned
    assert "a=a" not in cleaned


def test_simplify_merges_vertical_angles(crossing_scene):
    data = crossing_scene.solve_data()
    simplified = simplify_equations(extract_relations(data), data)
    assert simplified.mapping["∠AEC"] == simplified.mapping["∠BED"]
    assert simplified.mapping["∠AED"] == simplified.mapping["∠BEC"]
    assert simplified.mapping["∠AEC"] != simplified.mapping["∠AED"]


def test_greek_words():
    assert greek_to_words("2*α+β=ω") == "2*alpha+beta=omega"


def test_wolfram_query_and_url():
    assert build_query(["a+b=180", "a=130"], ["b"]) == "solve for b: {a+b=180, a=130}"
    assert build_query(["a=1"]) == "solve {a=1}"
    url = wolfram_url(["a+b=180", "a=130"], ["b"])
    assert url.startswith(WOLFRAM_URL)
    assert " " not in url
    assert unquote(url[len(WOLFRAM_URL):]) == "solve for b: {a+b=180, a=130}"


def test_extract_with_wolfram(straight_scene):
    result = extract_equations_with_wolfram(straight_scene.solve_data())
    assert result.mapping == {"∠ADC": "a", "∠BDC": "b"}
    assert result.simplified == ["b+a=180", "b=50", "a=130"]
    assert unquote(result.wolfram_url[len(WOLFRAM_URL):]) == "solve for b: {b+a=180, b=50, a=130}"


def test_linear_solver_statuses():
    unique = solve_linear_equations(["a+b=180", "a=130"])
    assert unique.status == "unique"
    assert unique.values == {"a": 130.0, "b": 50.0}

    partial = solve_linear_equations(["a+b=180", "c=20"])
    assert partial.status == "partial"
    assert partial.values == {"c": 20.0}
    assert sorted(partial.free_variables) == ["a", "b"]

    inconsistent = solve_linear_equations(["a=1", "a=2"])
    assert inconsistent.status == "inconsistent"
    assert not inconsistent.consistent

    assert solve_linear_equations([]).status == "empty"
    assert solve_linear_equations(["180=180"]).status == "empty"


def test_solve_with_equations(turn_scene):
    outcome = solve_with_equations(turn_scene.solve_data())
    assert outcome.solved
    assert outcome.all_solved
    assert outcome.solution["∠BED"] == pytest.approx(105)
    assert outcome.solution["∠DEA"] == pytest.approx(105)
    assert turn_scene.angle("E", "B", "D").value is None


def test_solve_with_equations_straight_line(straight_scene):
    outcome = solve_with_equations(straight_scene.solve_data())
    assert outcome.linear.status == "unique"
    assert outcome.solution == {"∠ADC": 130.0, "∠BDC": 50.0}
