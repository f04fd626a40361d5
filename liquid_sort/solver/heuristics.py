"""
Heuristics Module - Scores used to order expansion in heuristic strategies.

Correctness never depends on these values; they only decide which
successor a best-first, beam or greedy search looks at next.
"""

from .move import Move
from .rules import fill_level, is_bottle_resolved, top_color
from .state import EMPTY, Bottle, PuzzleState


def bottle_entropy(bottle: Bottle) -> int:
    """
    Disorder of one bottle.

    Empty bottles score 0; otherwise the score doubles with every color
    change between adjacent units, so a single-color bottle scores 1.
    """
    units = [slot for slot in bottle if slot != EMPTY]
    if not units:
        return 0

    entropy = 1
    for upper, lower in zip(units, units[1:]):
        if upper != lower:
            entropy *= 2
    return entropy


def state_entropy(state: PuzzleState) -> int:
    """Sum of bottle entropies."""
    return sum(bottle_entropy(bottle) for bottle in state.bottles)


def move_priority(state: PuzzleState, move: Move) -> int:
    """
    Greedy desirability of a pour (higher is better).

    Completing a bottle, emptying the source and pouring into an empty
    bottle are rewarded, and larger pours break ties.
    """
    source = state.bottles[move.source]
    target = state.bottles[move.target]
    color = top_color(source)
    priority = move.amount

    if fill_level(source) == move.amount:
        priority += 10

    target_level = fill_level(target)
    if target_level == 0:
        priority += 5
    elif (top_color(target) == color
          and all(slot in (EMPTY, color) for slot in target)
          and target_level + move.amount == len(target)):
        priority += 20

    return priority


def is_settled_source(bottle: Bottle) -> bool:
    """True if pouring out of this bottle can only undo progress."""
    return fill_level(bottle) > 0 and is_bottle_resolved(bottle)
