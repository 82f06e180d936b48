import json

import pytest

import angle_solver.__main__ as cli

from conftest import split_angle_data, straight_line_data


def _write_scene(tmp_path, data):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


def test_main_solves_and_writes_report(tmp_path, capsys):
    scene_path = _write_scene(tmp_path, split_angle_data())
    report_path = tmp_path / "out" / "report.json"

    cli.main([str(scene_path), "--create-angles", "--output", str(report_path)])

    out = capsys.readouterr().out
    assert "State: converged" in out
    assert "∠BOC = 55 (target)" in out
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["method"] == "rules"
    assert report["result"]["solved"] is True
    assert {entry["name"]: entry["value"] for entry in report["angles"]}["∠BOC"] == 55


def test_main_prints_equations(tmp_path, capsys):
    scene_path = _write_scene(tmp_path, straight_line_data())

    cli.main([str(scene_path), "--create-angles", "--equations", "--method", "equations"])

    out = capsys.readouterr().out
    assert "b+a=180" in out
    assert "Wolfram|Alpha: https://www.wolframalpha.com/input?i=" in out
    assert "Linear system: unique" in out
    assert "∠BDC = 50" in out


def test_main_passes_iteration_cap(tmp_path, monkeypatch):
    scene_path = _write_scene(tmp_path, split_angle_data())
    seen = []
    real_solve = cli.solve

    def _solve(data, options):
        seen.append(options.max_iterations)
        return real_solve(data, options)

    monkeypatch.setattr(cli, "solve", _solve)
    cli.main([str(scene_path), "--max-iterations", "3"])
    assert seen == [3]


def test_main_rejects_invalid_scene(tmp_path, caplog):
    scene_path = _write_scene(tmp_path, {"points": "nope"})
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(scene_path)])
    assert excinfo.value.code == 1
    assert "'points' must be a list" in caplog.text


def test_main_runs_both_methods(tmp_path, capsys):
    scene_path = _write_scene(tmp_path, split_angle_data())
    report_path = tmp_path / "report.json"

    cli.main([str(scene_path), "--create-angles", "--method", "all", "--output", str(report_path)])

    out = capsys.readouterr().out
    assert "Rule engine:" in out
    assert "Equation system:" in out
    assert "∠BOC = 55 (target)" in out
    assert "Combined solved: True" in out
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["method"] == "all"
    assert report["result"]["rules"]["solved"] is True
    assert {entry["name"]: entry["value"] for entry in report["angles"]}["∠BOC"] == 55
