"""
Puzzle Generator Module - Builds shuffled starting arrangements.

Each color contributes exactly one bottle's worth of units. The units
are shuffled and dealt bottom-up into the first color_count bottles,
and the remaining bottles start empty as working space.
"""

import logging
from typing import List, Optional, Union

import numpy as np

from .state import EMPTY, PuzzleState

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.Generator]


def _make_rng(seed: SeedLike) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def generate_puzzle(
    bottle_count: int,
    color_count: int,
    bottle_height: int,
    seed: SeedLike = None
) -> PuzzleState:
    """
    Generate a shuffled puzzle.

    Range validation of the inputs belongs to the caller; only the
    color_count <= 0 case is handled here (all bottles empty).

    Args:
        bottle_count: Total number of bottles
        color_count: Number of distinct colors (ideally <= bottle_count - 2)
        bottle_height: Slots per bottle
        seed: Optional int seed or numpy Generator for reproducible output

    Returns:
        PuzzleState with bottle_count bottles of bottle_height slots
    """
    if color_count <= 0:
        return PuzzleState.empty(bottle_count, bottle_height)

    if color_count > bottle_count - 2:
        logger.warning(
            f"Generating {color_count} colors for {bottle_count} bottles leaves "
            f"fewer than two empty bottles"
        )

    rng = _make_rng(seed)

    # bottle_height units of every color, shuffled in place (Fisher-Yates)
    units = np.repeat(np.arange(1, color_count + 1), bottle_height)
    rng.shuffle(units)

    bottles: List[tuple] = []
    for i in range(color_count):
        dealt = units[i * bottle_height:(i + 1) * bottle_height]
        # First dealt unit rests at the bottom slot
        bottles.append(tuple(int(color) for color in dealt[::-1]))

    for _ in range(bottle_count - color_count):
        bottles.append((EMPTY,) * bottle_height)

    if len(bottles) < bottle_count:
        logger.warning("Adding extra empty bottles due to configuration mismatch")
        while len(bottles) < bottle_count:
            bottles.append((EMPTY,) * bottle_height)
    elif len(bottles) > bottle_count:
        logger.warning("Trimming extra bottles due to configuration mismatch")
        bottles = bottles[:bottle_count]

    state = PuzzleState(bottles=tuple(bottles))
    logger.debug(
        f"Generated puzzle: {bottle_count} bottles, {color_count} colors, "
        f"height {bottle_height}"
    )
    return state
