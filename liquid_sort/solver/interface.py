"""
Solver Interface Module - Entry point for callers holding raw bottle arrays.

Normalizes loosely shaped input into a PuzzleState, checks it is a
well-formed puzzle, and hands it to a search strategy. This is the only
place that repairs input; everything below it treats bad input as a bug.
"""

import logging
import numbers
import time
from typing import Iterable, List, Optional, Sequence

from .context import DEFAULT_MAX_STATES, SolutionContext
from .errors import MalformedPuzzle
from .factory import create_strategy, get_default_strategy_name
from .move import Move
from .rules import color_counts, is_solved
from .solution import Solution
from .state import EMPTY, PuzzleState

logger = logging.getLogger(__name__)


def normalize_bottles(
    bottle_height: int,
    bottle_count: int,
    raw_bottles: Sequence[Sequence[int]]
) -> PuzzleState:
    """
    Build a PuzzleState from caller-supplied bottle arrays.

    Short bottles are padded with EMPTY at the top and long ones keep
    their first bottle_height slots (the top), dropping the bottom
    excess. Empty slots left between units are then packed to the top so
    liquid rests at the bottom. Missing bottles are added empty; surplus
    bottles are dropped.

    Args:
        bottle_height: Slots per bottle (> 0)
        bottle_count: Number of bottles expected
        raw_bottles: Bottle arrays, top slot first, 0 = empty

    Returns:
        Gravity-packed PuzzleState

    Raises:
        MalformedPuzzle: On bad dimensions or non-integer/negative colors
    """
    if bottle_height < 1:
        raise MalformedPuzzle(f"Bottle height must be positive, got {bottle_height}")
    if bottle_count < 0:
        raise MalformedPuzzle(f"Bottle count must not be negative, got {bottle_count}")

    bottles = []
    for index, raw in enumerate(raw_bottles):
        slots = []
        for slot in raw:
            if isinstance(slot, bool) or not isinstance(slot, numbers.Integral):
                raise MalformedPuzzle(f"Bottle {index} holds non-integer color {slot!r}")
            if slot < 0:
                raise MalformedPuzzle(f"Bottle {index} holds negative color {slot}")
            slots.append(int(slot))

        if len(slots) > bottle_height:
            logger.warning(
                f"Bottle {index} has {len(slots)} slots, keeping the top {bottle_height}"
            )
        # Pad at the top, then keep the first bottle_height slots
        slots = ([EMPTY] * (bottle_height - len(slots)) + slots)[:bottle_height]

        units = tuple(slot for slot in slots if slot != EMPTY)
        bottles.append((EMPTY,) * (bottle_height - len(units)) + units)

    if len(bottles) < bottle_count:
        logger.warning(f"Got {len(bottles)} bottles, padding to {bottle_count}")
        bottles.extend((EMPTY,) * bottle_height for _ in range(bottle_count - len(bottles)))
    elif len(bottles) > bottle_count:
        logger.warning(f"Got {len(bottles)} bottles, trimming to {bottle_count}")
        bottles = bottles[:bottle_count]

    return PuzzleState(bottles=tuple(bottles))


def validate_color_totals(state: PuzzleState) -> None:
    """
    Check every color fills exactly one bottle.

    Raises:
        MalformedPuzzle: If some color's unit count differs from capacity
    """
    bad = {
        color: count for color, count in color_counts(state).items()
        if count != state.capacity
    }
    if bad:
        details = ", ".join(f"color {c}: {n}" for c, n in sorted(bad.items()))
        raise MalformedPuzzle(
            f"Each color needs exactly {state.capacity} units ({details})"
        )


def solve_state(
    state: PuzzleState,
    strategy_name: Optional[str] = None,
    max_states: int = DEFAULT_MAX_STATES,
    max_depth: Optional[int] = None,
    timeout_sec: Optional[float] = None,
    fallback_strategy: Optional[str] = None,
    context: Optional[SolutionContext] = None
) -> Solution:
    """
    Run a strategy on an already validated state.

    When the primary strategy stops on its bound and a fallback strategy
    is named, the fallback runs under the same bounds and its result is
    used if it solves the puzzle.

    Args:
        state: Puzzle state to solve
        strategy_name: Registered strategy name (default "bfs")
        max_states: Expansion budget per strategy run
        max_depth: Optional cap on solution length
        timeout_sec: Wall-clock budget; defaults to the strategy's own
        fallback_strategy: Strategy to try after a bound-exceeded result
        context: Prebuilt context (overrides the bound arguments), used
            by callers that need to cancel from another thread

    Returns:
        Solution from the strategy that produced the answer
    """
    name = strategy_name or get_default_strategy_name()
    strategy = create_strategy(name)

    if context is None:
        context = SolutionContext(
            state=state,
            max_states=max_states,
            max_depth=max_depth,
            timeout_sec=timeout_sec if timeout_sec is not None else strategy.timeout_sec
        )

    solution = strategy.solve(context)

    if solution.bound_exceeded and fallback_strategy and fallback_strategy != name:
        logger.info(f"Strategy '{name}' hit its bound, trying '{fallback_strategy}'")
        fallback = create_strategy(fallback_strategy)
        fallback_context = SolutionContext(
            state=state,
            max_states=context.max_states,
            max_depth=context.max_depth,
            cancel_flag=context.cancel_flag,
            timeout_sec=context.timeout_sec,
            progress_callback=context.progress_callback
        )
        fallback_solution = fallback.solve(fallback_context)
        if fallback_solution.is_complete:
            return fallback_solution

    return solution


def solve_puzzle(
    bottle_height: int,
    bottle_count: int,
    raw_bottles: Sequence[Sequence[int]],
    strategy_name: Optional[str] = None,
    max_states: int = DEFAULT_MAX_STATES,
    max_depth: Optional[int] = None,
    timeout_sec: Optional[float] = None,
    fallback_strategy: Optional[str] = None
) -> Solution:
    """
    Normalize raw bottles, validate them, and solve.

    Returns:
        Solution with moves and outcome flags

    Raises:
        MalformedPuzzle: If the normalized input is not a valid puzzle
    """
    start = time.perf_counter()
    state = normalize_bottles(bottle_height, bottle_count, raw_bottles)
    validate_color_totals(state)

    solution = solve_state(
        state,
        strategy_name=strategy_name,
        max_states=max_states,
        max_depth=max_depth,
        timeout_sec=timeout_sec,
        fallback_strategy=fallback_strategy
    )

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Solved {bottle_count}x{bottle_height} puzzle with "
        f"'{solution.metrics.strategy_name}': {solution.move_count} moves, "
        f"complete={solution.is_complete}, {elapsed_ms:.1f}ms"
    )
    return solution


def solve(
    bottle_height: int,
    bottle_count: int,
    raw_bottles: Sequence[Sequence[int]],
    **kwargs
) -> List[Move]:
    """
    Solve a puzzle and return just the move list.

    An empty list means the puzzle was already solved or no solution was
    found within bounds; check is_solved() on the input to tell them
    apart.

    Args:
        bottle_height: Slots per bottle
        bottle_count: Number of bottles
        raw_bottles: Bottle arrays, top slot first, 0 = empty
        **kwargs: Forwarded to solve_puzzle() (strategy_name, max_states, ...)

    Returns:
        Ordered list of moves

    Raises:
        MalformedPuzzle: If the input is not a valid puzzle
    """
    return solve_puzzle(bottle_height, bottle_count, raw_bottles, **kwargs).moves


def replay_moves(state: PuzzleState, moves: Iterable[Move]) -> PuzzleState:
    """
    Apply a move list one pour at a time.

    Raises:
        InvalidMove: If any move is illegal or its amount disagrees with
            the rules at that point
    """
    for move in moves:
        state = state.apply_move(move)
    return state


def is_solved_input(
    bottle_height: int,
    bottle_count: int,
    raw_bottles: Sequence[Sequence[int]]
) -> bool:
    """Normalize raw bottles and report whether they are already solved."""
    return is_solved(normalize_bottles(bottle_height, bottle_count, raw_bottles))


__all__ = [
    "normalize_bottles",
    "validate_color_totals",
    "solve_state",
    "solve_puzzle",
    "solve",
    "replay_moves",
    "is_solved_input",
]
