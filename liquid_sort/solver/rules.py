"""
Move Rules Module - Pure legality and transition functions for pours.

Every caller that needs to test or perform a pour goes through these
functions: the search strategies, the solver facade, the play session
and move replay. None of them mutate their inputs.
"""

from collections import Counter
from typing import Dict, Tuple

from .errors import InvalidMove
from .state import EMPTY, Bottle, PuzzleState


def top_index(bottle: Bottle) -> int:
    """
    Index of the topmost filled slot.

    Returns:
        Slot index, or len(bottle) if the bottle is empty
    """
    for index, slot in enumerate(bottle):
        if slot != EMPTY:
            return index
    return len(bottle)


def top_color(bottle: Bottle) -> int:
    """Color of the topmost unit, or EMPTY for an empty bottle."""
    index = top_index(bottle)
    return bottle[index] if index < len(bottle) else EMPTY


def top_run_length(bottle: Bottle) -> int:
    """Length of the contiguous run of the top color."""
    start = top_index(bottle)
    if start == len(bottle):
        return 0

    color = bottle[start]
    run = 0
    for slot in bottle[start:]:
        if slot != color:
            break
        run += 1
    return run


def fill_level(bottle: Bottle) -> int:
    """Number of filled slots."""
    return len(bottle) - top_index(bottle)


def free_space(bottle: Bottle) -> int:
    """Number of empty slots."""
    return top_index(bottle)


def is_gravity_packed(bottle: Bottle) -> bool:
    """True if no empty slot sits below a filled one."""
    start = top_index(bottle)
    return all(slot != EMPTY for slot in bottle[start:])


def _valid_index(state: PuzzleState, index: int) -> bool:
    return 0 <= index < state.bottle_count


def is_legal_move(state: PuzzleState, source: int, target: int) -> bool:
    """
    Test whether pouring from source onto target is allowed.

    A pour is legal when the bottles differ, the source has liquid, the
    target has room, and the target is either empty or topped with the
    same color as the source.

    Args:
        state: Current puzzle state
        source: Index of bottle to pour from
        target: Index of bottle to pour into

    Returns:
        True if the pour is allowed
    """
    if source == target:
        return False
    if not (_valid_index(state, source) and _valid_index(state, target)):
        return False

    from_bottle = state.bottles[source]
    to_bottle = state.bottles[target]

    from_color = top_color(from_bottle)
    if from_color == EMPTY:
        return False
    if free_space(to_bottle) == 0:
        return False

    to_color = top_color(to_bottle)
    return to_color == EMPTY or to_color == from_color


def pour_amount(state: PuzzleState, source: int, target: int) -> int:
    """
    Number of units a legal pour would transfer.

    Returns:
        min(top run of source, free space of target), or 0 if illegal
    """
    if not is_legal_move(state, source, target):
        return 0
    return min(top_run_length(state.bottles[source]),
               free_space(state.bottles[target]))


def _pack(units: Tuple[int, ...], capacity: int) -> Bottle:
    """Left-pad units with EMPTY so liquid rests at the bottom."""
    return (EMPTY,) * (capacity - len(units)) + units


def apply_move(state: PuzzleState, source: int, target: int) -> PuzzleState:
    """
    Pour from source onto target and return the resulting state.

    Args:
        state: Current puzzle state (not modified)
        source: Index of bottle to pour from
        target: Index of bottle to pour into

    Returns:
        New PuzzleState after the pour

    Raises:
        InvalidMove: If pour_amount() is 0 for this pair
    """
    amount = pour_amount(state, source, target)
    if amount == 0:
        raise InvalidMove(source, target)

    capacity = state.capacity
    from_bottle = state.bottles[source]
    to_bottle = state.bottles[target]

    from_units = from_bottle[top_index(from_bottle):]
    to_units = to_bottle[top_index(to_bottle):]
    color = from_units[0]

    bottles = list(state.bottles)
    bottles[source] = _pack(from_units[amount:], capacity)
    bottles[target] = _pack((color,) * amount + to_units, capacity)
    return PuzzleState(bottles=tuple(bottles))


def is_bottle_resolved(bottle: Bottle) -> bool:
    """
    True if the bottle is empty or full with a single color.

    A bottle holding one color but not yet full is not resolved.
    """
    first = bottle[0] if bottle else EMPTY
    if first == EMPTY:
        return all(slot == EMPTY for slot in bottle)
    return all(slot == first for slot in bottle)


def is_solved(state: PuzzleState) -> bool:
    """True if every bottle is resolved."""
    return all(is_bottle_resolved(bottle) for bottle in state.bottles)


def color_counts(state: PuzzleState) -> Dict[int, int]:
    """
    Count units per color across the whole state.

    Returns:
        Mapping of color id to unit count (EMPTY excluded)
    """
    counts: Counter = Counter()
    for bottle in state.bottles:
        counts.update(slot for slot in bottle if slot != EMPTY)
    return dict(counts)
