from angle_solver.model import Angle, Edge, Line, Point
from angle_solver.topology import (
    are_connected,
    build_adjacency,
    build_topology,
    derive_lines,
    find_triangles,
    reveal_hidden_angles,
)


def _cevian_points():
    # triangle ABC with D on BC joined to A
    return [
        Point("A", 50, 80),
        Point("B", 0, 0),
        Point("D", 40, 0),
        Point("C", 100, 0),
    ]


def _cevian_edges():
    return [Edge(("A", "B")), Edge(("A", "C")), Edge(("B", "D")), Edge(("D", "C")), Edge(("A", "D"))]


def test_build_adjacency_is_symmetric_and_skips_unknown_points(caplog):
    adjacency = build_adjacency([Edge(("A", "B")), Edge(("B", "Z")), Edge(("A", "A"))], ["A", "B"])
    assert adjacency == {"A": {"B"}, "B": {"A"}}
    assert "unknown endpoint" in caplog.text


def test_derive_lines_merges_edge_chains_with_given_lines():
    points = {p.id: p for p in _cevian_points()}
    points["E"] = Point("E", 70, 0)
    adjacency = build_adjacency(_cevian_edges(), points)
    lines = derive_lines(points, adjacency, [Line("base", ["E", "C", "B"])])
    assert len(lines) == 1
    assert lines[0].id == "base"
    assert lines[0].points == ["B", "D", "E", "C"]


def test_derive_lines_drops_short_groups_and_names_new_lines():
    points = {p.id: p for p in _cevian_points()}
    adjacency = build_adjacency(_cevian_edges(), points)
    lines = derive_lines(points, adjacency, [Line("short", ["A", "B"])])
    assert [line.id for line in lines] == ["line-0"]
    assert lines[0].points == ["B", "D", "C"]


def test_connection_along_line_requires_every_segment():
    lines = [Line("l", ["B", "D", "C"])]
    adjacency = build_adjacency(_cevian_edges())
    assert are_connected("B", "C", adjacency, lines)
    adjacency["D"].discard("C")
    adjacency["C"].discard("D")
    assert not are_connected("B", "C", adjacency, lines)


def test_find_triangles_with_cevian():
    topology = build_topology(_cevian_points(), _cevian_edges())
    assert [line.points for line in topology.lines] == [["B", "D", "C"]]
    assert set(topology.triangles) == {("A", "B", "C"), ("A", "B", "D"), ("A", "C", "D")}


def test_find_triangles_without_coordinates_uses_lines_only():
    adjacency = build_adjacency([Edge(("A", "B")), Edge(("B", "C")), Edge(("C", "A"))])
    assert find_triangles(adjacency, []) == [("A", "B", "C")]
    assert find_triangles(adjacency, [Line("l", ["A", "B", "C"])]) == []


def test_reveal_hidden_angles_unhides_triangle_angles():
    hidden = Angle("A", ("B", "C"), hide=True)
    elsewhere = Angle("Z", ("X", "Y"), hide=True)
    revealed = reveal_hidden_angles([hidden, elsewhere], [("A", "B", "C")], [])
    assert revealed == [hidden]
    assert hidden.hide is False
    assert elsewhere.hide is True


def test_reveal_hidden_angles_keeps_overlapping_twins_hidden():
    lines = [Line("l", ["A", "D", "B"])]
    wide = Angle("A", ("C", "B"), hide=True)
    narrow = Angle("A", ("C", "D"), hide=True)
    assert reveal_hidden_angles([wide, narrow], [("A", "B", "C")], lines) == []


def test_find_triangles_apex_over_undrawn_base():
    # only A-D of the line A-D-B is drawn, C joins both ends
    points = {"A": Point("A", 0, 0), "D": Point("D", 50, 0), "B": Point("B", 100, 0), "C": Point("C", 50, 80)}
    adjacency = build_adjacency([Edge(("A", "D")), Edge(("C", "A")), Edge(("C", "B"))], points)
    lines = [Line("l", ["A", "D", "B"])]
    assert not are_connected("A", "B", adjacency, lines)
    assert find_triangles(adjacency, lines, points) == [("A", "B", "C")]
