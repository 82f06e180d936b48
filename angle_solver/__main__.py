import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from angle_solver import (
    SceneValidationError,
    SolveOptions,
    dump_angles,
    extract_equations_with_wolfram,
    get_solver_config,
    load_scene_file,
    solve,
    solve_all,
    solve_with_equations,
)
from angle_solver.angles import format_degrees, get_angle_value

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _print_angles(angles) -> None:
    print("Angles:")
    for angle in angles:
        value = get_angle_value(angle)
        shown = format_degrees(value) if value is not None else "?"
        marker = " (target)" if angle.target else ""
        label = f" [{angle.label}]" if angle.label else ""
        print(f"  {angle.name}{label} = {shown}{marker}")


def _print_equation_result(outcome) -> None:
    print(f"Linear system: {outcome.status}")
    print(f"Solved: {outcome.solved}")
    print(f"All solved: {outcome.all_solved}")
    print("Values:")
    for name, value in outcome.solution.items():
        print(f"  {name} = {format_degrees(value)}")


def _print_rule_result(result, angles) -> None:
    print(f"State: {result.state.value}")
    print(f"Valid: {result.is_valid}")
    print(f"Solved: {result.solved}")
    print(f"All solved: {result.all_solved}")
    print(f"Score: {result.score}")
    print(f"Iterations: {result.iterations}")
    _print_angles(angles)
    if result.history:
        print("Steps:")
        for item in result.history:
            print(f"  [{item.method}] {item.angle.name}: {item.message}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Deduce unknown angles in a geometry scene")
    parser.add_argument("path", help="Path to the scene JSON file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Upper bound on rule passes (default: from solver config)",
    )
    parser.add_argument(
        "--create-angles",
        action="store_true",
        help="Create every angle between neighbouring edges, not only the listed ones",
    )
    parser.add_argument(
        "--no-derive-lines",
        action="store_true",
        help="Use only the lines listed in the scene",
    )
    parser.add_argument(
        "--equations",
        action="store_true",
        help="Print the extracted equation system and a Wolfram|Alpha link",
    )
    parser.add_argument(
        "--method",
        choices=["rules", "equations", "all"],
        default="rules",
        help="Solve with the deduction rules, the linear equation system or both (default: rules)",
    )
    parser.add_argument(
        "--output",
        help="Write a JSON report to the given path",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    config = get_solver_config()
    logger.info("Loading scene from %s", args.path)
    try:
        scene = load_scene_file(
            args.path,
            create_missing_angles=args.create_angles,
            derive_lines=not args.no_derive_lines,
            config=config,
        )
    except SceneValidationError as exc:
        for error in exc.errors:
            logger.error("Invalid scene: %s", error)
        raise SystemExit(1)

    data = scene.solve_data()
    report: Dict[str, Any] = {"method": args.method}

    if args.equations:
        extraction = extract_equations_with_wolfram(data, config=config)
        print("Equations:")
        for equation in extraction.equations:
            print(f"  {equation}")
        print("Simplified:")
        for equation in extraction.simplified:
            print(f"  {equation}")
        print("Symbols:")
        for symbol, names in extraction.reverse_mapping.items():
            print(f"  {symbol}: {', '.join(names)}")
        print(f"Wolfram|Alpha: {extraction.wolfram_url}")
        report["equations"] = {
            "equations": extraction.equations,
            "simplified": extraction.simplified,
            "mapping": extraction.mapping,
            "wolframUrl": extraction.wolfram_url,
        }

    options = SolveOptions(max_iterations=args.max_iterations, config=config)
    if args.method == "equations":
        outcome = solve_with_equations(data, config=config)
        _print_equation_result(outcome)
        report["result"] = outcome.to_dict()
    elif args.method == "all":
        combined = solve_all(data, options)
        if combined.rules is None or combined.equations is None:
            print("No target angles to solve")
        else:
            print("Rule engine:")
            _print_rule_result(combined.rules, combined.angles)
            print("Equation system:")
            _print_equation_result(combined.equations)
        print(f"Combined solved: {combined.solved}")
        print(f"Combined score: {combined.score}")
        report["result"] = combined.to_dict()
        report["angles"] = dump_angles(combined.angles)
    else:
        result = solve(data, options)
        _print_rule_result(result, data.angles)
        report["result"] = result.to_dict()
        report["angles"] = dump_angles(data.angles)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing report to %s", output_path)
        output_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"Report written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
