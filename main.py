"""
Liquid Sort Solver - Entry Point

Generates (or reads) a liquid sort puzzle, solves it, and prints the pours.

Example:
    python main.py
    python main.py --bottles 6 --colors 4 --height 4 --seed 7
    python main.py --puzzle "[[1, 2], [2, 1], []]" --height 2
    python main.py --strategy best_first --max-states 50000
"""

import sys
import json
import logging
import argparse
from typing import List, Optional

from liquid_sort.settings import clamp_generation_settings, load_settings, save_settings
from liquid_sort.solver import (
    MalformedPuzzle, PuzzleState, Solution, generate_puzzle, get_strategy_names,
    is_solved, normalize_bottles, replay_moves, solve_puzzle
)


logger = logging.getLogger(__name__)

# Exit codes
EXIT_SOLVED = 0
EXIT_NO_SOLUTION = 1
EXIT_MALFORMED = 2


def configure_logging(debug: bool = False) -> None:
    """Log to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("liquid_sort.log", mode='w', encoding='utf-8')  # File output
        ]
    )


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Liquid Sort Solver - Finds a pour sequence that sorts every bottle"
    )
    parser.add_argument("--bottles", "-b", type=int, help="Number of bottles")
    parser.add_argument("--colors", "-c", type=int, help="Number of colors")
    parser.add_argument("--height", "-H", type=int, help="Slots per bottle")
    parser.add_argument("--seed", "-s", type=int, help="Random seed for generation")
    parser.add_argument(
        "--puzzle", "-p",
        help="Bottles as a JSON array of arrays, top slot first, 0 = empty"
    )
    parser.add_argument(
        "--strategy",
        choices=get_strategy_names(),
        help="Search strategy (default from settings)"
    )
    parser.add_argument("--max-states", type=int, help="Search budget in expanded states")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the moves as a JSON list of {from, to, amount} objects"
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Persist the generation values and strategy to config.json"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def _merge_settings(args) -> dict:
    """Apply command line overrides on top of saved settings."""
    settings = load_settings()
    overrides = {
        "bottle_count": args.bottles,
        "color_count": args.colors,
        "bottle_height": args.height,
        "strategy_name": args.strategy,
        "max_states": args.max_states,
    }
    settings.update({key: value for key, value in overrides.items() if value is not None})
    return settings


def _print_solution(start: PuzzleState, solution: Solution) -> None:
    print("Puzzle:")
    print(start)
    print()

    if not solution.has_moves:
        print("Already solved." if is_solved(start) else "No solution found.")
        return

    print(f"Solution ({solution.move_count} moves, "
          f"{solution.metrics.states_explored} states explored, "
          f"{solution.metrics.computation_time_ms:.1f}ms):")
    for i, move in enumerate(solution.moves, start=1):
        print(f"  {i:3d}. pour {move.amount} from bottle {move.source} into bottle {move.target}")
    print()
    print("Result:")
    print(replay_moves(start, solution.moves))


def run(args) -> int:
    """
    Build the puzzle, solve it, and print the outcome.

    Returns:
        Exit code
    """
    settings = _merge_settings(args)

    try:
        if args.puzzle:
            raw_bottles = json.loads(args.puzzle)
            height = args.height or max((len(b) for b in raw_bottles), default=1)
            bottle_count = args.bottles or len(raw_bottles)
        else:
            settings = clamp_generation_settings(settings)
            height = settings["bottle_height"]
            bottle_count = settings["bottle_count"]
            raw_bottles = generate_puzzle(
                bottle_count, settings["color_count"], height, seed=args.seed
            ).to_list()

        start = normalize_bottles(height, bottle_count, raw_bottles)
        solution = solve_puzzle(
            height, bottle_count, raw_bottles,
            strategy_name=settings["strategy_name"],
            max_states=settings["max_states"],
            timeout_sec=settings["timeout_sec"],
            fallback_strategy=settings.get("fallback_strategy")
        )
    except (MalformedPuzzle, json.JSONDecodeError, TypeError) as e:
        logger.error(f"Rejected puzzle: {e}")
        return EXIT_MALFORMED

    if args.save_settings:
        save_settings(settings)

    if args.json:
        print(json.dumps(solution.to_dicts()))
    else:
        _print_solution(start, solution)

    if solution.is_complete:
        return EXIT_SOLVED
    return EXIT_NO_SOLUTION


def main(argv: Optional[List[str]] = None) -> int:
    """Initialize and run the Liquid Sort Solver."""
    args = parse_args(argv)
    configure_logging(args.debug or load_settings().get("debug_enabled", False))
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
