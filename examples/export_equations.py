"""Example pipeline: export the equation system of a scene for Wolfram|Alpha."""

from angle_solver import extract_equations_with_wolfram, load_scene

SCENE = {
    "points": [
        {"id": "E", "x": 0, "y": 0},
        {"id": "A", "x": 100, "y": 0},
        {"id": "C", "x": 17.365, "y": 98.481},
        {"id": "B", "x": -86.603, "y": 50},
        {"id": "D", "x": -25.882, "y": -96.593},
    ],
    "edges": [["E", "A"], ["E", "B"], ["E", "C"], ["E", "D"]],
    "angles": [
        {"pointId": "E", "sidepoints": ["A", "C"], "value": 80},
        {"pointId": "E", "sidepoints": ["C", "B"], "value": 70},
        {"pointId": "E", "sidepoints": ["B", "D"], "value": "α", "target": True},
        {"pointId": "E", "sidepoints": ["D", "A"], "value": "α"},
    ],
}


def main() -> None:
    scene = load_scene(SCENE)
    result = extract_equations_with_wolfram(scene.solve_data())
    print("Equations:")
    for equation in result.equations:
        print(" ", equation)
    print("Simplified:")
    for equation in result.simplified:
        print(" ", equation)
    print("Wolfram|Alpha:", result.wolfram_url)


if __name__ == "__main__":
    main()
