"""
Puzzle generator tests

Usage:
    pytest tests/test_generator.py
"""

import logging
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from liquid_sort.solver import EMPTY, color_counts, generate_puzzle
from liquid_sort.solver.rules import is_gravity_packed


def test_generated_shape_and_totals():
    state = generate_puzzle(7, 5, 4, seed=0)

    assert state.bottle_count == 7
    assert state.capacity == 4
    assert color_counts(state) == {color: 4 for color in range(1, 6)}
    assert all(is_gravity_packed(bottle) for bottle in state.bottles)


def test_filled_then_empty_bottles():
    state = generate_puzzle(6, 4, 5, seed=2)

    for bottle in state.bottles[:4]:
        assert EMPTY not in bottle
    for bottle in state.bottles[4:]:
        assert bottle == (EMPTY,) * 5


def test_same_seed_same_puzzle():
    first = generate_puzzle(9, 7, 4, seed=1234)
    second = generate_puzzle(9, 7, 4, seed=1234)
    assert first == second


def test_accepts_numpy_generator():
    rng_a = np.random.default_rng(42)
    rng_b = np.random.default_rng(42)
    assert generate_puzzle(5, 3, 4, seed=rng_a) == generate_puzzle(5, 3, 4, seed=rng_b)


def test_different_seeds_vary():
    puzzles = {generate_puzzle(8, 6, 4, seed=seed) for seed in range(10)}
    assert len(puzzles) > 1


@pytest.mark.parametrize("color_count", [0, -3])
def test_no_colors_gives_empty_bottles(color_count):
    state = generate_puzzle(4, color_count, 3, seed=0)
    assert state.bottle_count == 4
    assert state.count_units() == 0


def test_too_many_colors_trims_to_bottle_count(caplog):
    with caplog.at_level(logging.WARNING):
        state = generate_puzzle(3, 4, 2, seed=1)

    assert state.bottle_count == 3
    assert state.count_units() == 6
    assert "Trimming extra bottles" in caplog.text


def test_crowded_layout_warns(caplog):
    with caplog.at_level(logging.WARNING):
        state = generate_puzzle(5, 4, 3, seed=1)

    assert state.bottle_count == 5
    assert "fewer than two empty bottles" in caplog.text


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
