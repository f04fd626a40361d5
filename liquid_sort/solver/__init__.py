"""
Solver Package - Puzzle-solving engine for the liquid sort puzzle.

This package holds the canonical puzzle state, the pour rules, the
puzzle generator, and a pluggable set of search strategies behind a
single solve() entry point.

Public API:
    - PuzzleState: Immutable bottle arrangement
    - Move: One pour (source, target, amount)
    - is_legal_move(), pour_amount(), apply_move(), is_solved(): Pour rules
    - generate_puzzle(): Shuffled starting arrangement
    - solve(), solve_puzzle(): Facade over normalization and search
    - Solution, SolutionMetrics, CachedSolution: Search results
    - SolutionContext: Bounds, cancellation and progress for a search
    - SolverStrategy, create_strategy(), ...: Strategy framework

Usage:
    from liquid_sort.solver import solve, PuzzleState, replay_moves

    bottles = [[1, 2], [2, 1], []]
    moves = solve(bottle_height=2, bottle_count=3, raw_bottles=bottles)

    state = PuzzleState.from_lists([[1, 2], [2, 1], [0, 0]])
    for move in moves:
        state = state.apply_move(move)
        print(f"Pour {move.amount} from bottle {move.source} into {move.target}")
"""

# Core data structures
from .state import EMPTY, PuzzleState
from .move import Move
from .errors import BoundExceeded, InvalidMove, LiquidSortError, MalformedPuzzle
from .rules import (
    apply_move,
    color_counts,
    is_bottle_resolved,
    is_legal_move,
    is_solved,
    pour_amount,
)
from .generator import generate_puzzle
from .solution import CachedSolution, Solution, SolutionMetrics
from .context import DEFAULT_MAX_STATES, SolutionContext

# Strategy framework
from .base import SolverStrategy
from .factory import (
    create_strategy,
    get_strategy_names,
    get_strategy_info,
    get_default_strategy_name,
    register_strategy,
)

# Import strategies to register them
from . import strategies

from .interface import (
    is_solved_input,
    normalize_bottles,
    replay_moves,
    solve,
    solve_puzzle,
    solve_state,
    validate_color_totals,
)

__all__ = [
    # Data structures
    "EMPTY",
    "PuzzleState",
    "Move",
    # Errors
    "LiquidSortError",
    "InvalidMove",
    "MalformedPuzzle",
    "BoundExceeded",
    # Rules
    "is_legal_move",
    "pour_amount",
    "apply_move",
    "is_bottle_resolved",
    "is_solved",
    "color_counts",
    # Generation
    "generate_puzzle",
    # Results
    "Solution",
    "SolutionMetrics",
    "CachedSolution",
    "SolutionContext",
    "DEFAULT_MAX_STATES",
    # Strategy framework
    "SolverStrategy",
    "create_strategy",
    "get_strategy_names",
    "get_strategy_info",
    "get_default_strategy_name",
    "register_strategy",
    # Facade
    "solve",
    "solve_puzzle",
    "solve_state",
    "normalize_bottles",
    "validate_color_totals",
    "replay_moves",
    "is_solved_input",
]
