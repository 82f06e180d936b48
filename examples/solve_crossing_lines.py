"""Example pipeline: two crossing lines, one known angle, find the vertical angle."""

from angle_solver import load_scene, solve

SCENE = {
    "points": [
        {"id": "E", "x": 0, "y": 0},
        {"id": "A", "x": -100, "y": 0},
        {"id": "B", "x": 100, "y": 0},
        {"id": "C", "x": -34.202, "y": 93.969},
        {"id": "D", "x": 34.202, "y": -93.969},
    ],
    "edges": [["A", "E"], ["E", "B"], ["C", "E"], ["E", "D"]],
    "angles": [
        {"pointId": "E", "sidepoints": ["A", "C"], "value": 70},
        {"pointId": "E", "sidepoints": ["B", "D"], "target": True},
    ],
}


def main() -> None:
    scene = load_scene(SCENE, create_missing_angles=True)
    result = solve(scene.solve_data())
    print("Solved:", result.solved)
    print("Iterations:", result.iterations)
    for angle in scene.angles:
        print(f"{angle.name}: {angle.value}")
    for item in result.history:
        print(f"  [{item.method}] {item.angle.name}: {item.message}")


if __name__ == "__main__":
    main()
