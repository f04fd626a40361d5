"""
Solver validation tests

Covers:
1. PuzzleState creation, equality and hashing
2. Pour rules (legality, amounts, transitions, resolution)
3. Search strategies and their bounds
4. Solver facade normalization and validation
5. Cached solution playback

Usage:
    pytest tests/test_solver.py
"""

import sys
import time
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from liquid_sort.solver import (
    EMPTY,
    BoundExceeded,
    CachedSolution,
    InvalidMove,
    MalformedPuzzle,
    Move,
    PuzzleState,
    SolutionContext,
    SolverStrategy,
    apply_move,
    color_counts,
    create_strategy,
    generate_puzzle,
    get_default_strategy_name,
    get_strategy_names,
    is_bottle_resolved,
    is_legal_move,
    is_solved,
    is_solved_input,
    normalize_bottles,
    pour_amount,
    register_strategy,
    replay_moves,
    solve,
    solve_puzzle,
    validate_color_totals,
)
from liquid_sort.solver.rules import (
    free_space,
    is_gravity_packed,
    top_color,
    top_run_length,
)
from liquid_sort.solver.heuristics import bottle_entropy, state_entropy


# Two colors, two slots each, one spare bottle
SWAP_PUZZLE = [[1, 2], [2, 1], []]

# Two colors, three slots each, two spare bottles; solvable in six pours
INTERLEAVED_PUZZLE = [[2, 1, 2], [1, 2, 1], [0, 0, 0], [0, 0, 0]]


@register_strategy
class AlwaysBoundedStrategy(SolverStrategy):
    """Gives up immediately, used to exercise the fallback path."""
    name = "test_always_bounded"
    description = "Test helper"

    def solve(self, context: SolutionContext):
        return self._build_solution(
            context.state, [], time.perf_counter(), bound_exceeded=True
        )


def _state(bottles):
    return PuzzleState.from_lists(bottles)


def _reachable_states(start: PuzzleState, limit: int = 200):
    """Collect up to limit states reachable from start, breadth first."""
    seen = [start]
    index = 0
    while index < len(seen) and len(seen) < limit:
        state = seen[index]
        index += 1
        for source in range(state.bottle_count):
            for target in range(state.bottle_count):
                if pour_amount(state, source, target) > 0:
                    successor = apply_move(state, source, target)
                    if successor not in seen:
                        seen.append(successor)
    return seen


# ---------------------------------------------------------------------------
# PuzzleState
# ---------------------------------------------------------------------------

def test_state_equality_and_hash():
    """States with the same bottles are equal and hash alike."""
    bottles = [[0, 1, 2], [1, 2, 1], [0, 0, 2]]
    state = _state(bottles)
    same = _state(bottles)

    assert state == same
    assert hash(state) == hash(same)
    assert len({state, same}) == 1
    assert state.bottle_count == 3
    assert state.capacity == 3
    assert state.count_units() == 6
    assert state.to_list() == bottles


def test_state_bottle_order_matters():
    """Swapping two bottles gives a different state."""
    state = _state([[1, 1], [0, 0]])
    swapped = _state([[0, 0], [1, 1]])
    assert state != swapped
    assert state.diff(swapped) == [0, 1]


def test_state_diff_reports_changed_bottles():
    state = _state([[0, 1], [0, 2], [0, 0]])
    other = _state([[0, 1], [0, 0], [0, 2]])
    assert state.diff(other) == [1, 2]
    assert state.diff(state) == []


def test_state_rejects_ragged_bottles():
    with pytest.raises(MalformedPuzzle):
        _state([[1, 1], [1]])


def test_state_apply_move_checks_amount():
    state = _state(SWAP_PUZZLE[:2] + [[0, 0]])
    after = state.apply_move(Move(0, 2, 1))
    assert after.get_bottle(2) == (0, 1)

    with pytest.raises(InvalidMove):
        state.apply_move(Move(0, 2, 2))


# ---------------------------------------------------------------------------
# Bottle helpers
# ---------------------------------------------------------------------------

def test_bottle_helpers():
    bottle = (0, 3, 3, 1)
    assert top_color(bottle) == 3
    assert top_run_length(bottle) == 2
    assert free_space(bottle) == 1
    assert is_gravity_packed(bottle)

    assert top_color((0, 0, 0)) == EMPTY
    assert top_run_length((0, 0, 0)) == 0
    assert free_space((0, 0, 0)) == 3
    assert not is_gravity_packed((1, 0, 2))


# ---------------------------------------------------------------------------
# Move rules
# ---------------------------------------------------------------------------

RULES_STATE = [
    [0, 1, 1, 2],
    [0, 0, 0, 1],
    [0, 0, 0, 0],
    [2, 2, 2, 2],
]


def test_is_legal_move():
    state = _state(RULES_STATE)

    assert not is_legal_move(state, 0, 0)      # same bottle
    assert not is_legal_move(state, 2, 0)      # empty source
    assert not is_legal_move(state, 0, 3)      # full target
    assert is_legal_move(state, 0, 2)          # empty target
    assert is_legal_move(state, 0, 1)          # matching top color
    assert not is_legal_move(state, 3, 0)      # color mismatch
    assert not is_legal_move(state, 0, 4)      # out of range
    assert not is_legal_move(state, -1, 0)


def test_pour_amount():
    state = _state(RULES_STATE)

    assert pour_amount(state, 0, 1) == 2
    assert pour_amount(state, 0, 2) == 2
    assert pour_amount(state, 0, 3) == 0
    assert pour_amount(state, 1, 0) == 1
    assert pour_amount(state, 3, 0) == 0
    assert pour_amount(state, 3, 2) == 4


def test_pour_amount_capped_by_free_space():
    state = _state([[0, 1, 1, 1], [0, 0, 1, 2]])
    assert pour_amount(state, 0, 1) == 2

    after = apply_move(state, 0, 1)
    assert after.to_list() == [[0, 0, 0, 1], [1, 1, 1, 2]]


def test_apply_move_returns_new_state():
    state = _state(RULES_STATE)
    after = apply_move(state, 0, 1)

    assert after.get_bottle(0) == (0, 0, 0, 2)
    assert after.get_bottle(1) == (0, 1, 1, 1)
    # Predecessor untouched
    assert state.get_bottle(0) == (0, 1, 1, 2)
    assert state.get_bottle(1) == (0, 0, 0, 1)


def test_apply_move_into_empty_bottle():
    state = _state(RULES_STATE)
    after = apply_move(state, 3, 2)
    assert after.get_bottle(2) == (2, 2, 2, 2)
    assert after.get_bottle(3) == (0, 0, 0, 0)


def test_apply_illegal_move_raises():
    state = _state(RULES_STATE)
    with pytest.raises(InvalidMove):
        apply_move(state, 3, 0)
    with pytest.raises(InvalidMove):
        apply_move(state, 2, 1)
    # InvalidMove is a ValueError for callers that only catch builtins
    with pytest.raises(ValueError):
        apply_move(state, 0, 0)


def test_is_bottle_resolved():
    assert is_bottle_resolved((0, 0, 0, 0))
    assert is_bottle_resolved((3, 3, 3, 3))
    assert not is_bottle_resolved((0, 3, 3, 3))   # single color, not full
    assert not is_bottle_resolved((1, 1, 2, 2))


def test_is_solved():
    assert is_solved(_state([[1, 1], [0, 0], [2, 2]]))
    assert not is_solved(_state([[0, 1], [1, 2], [0, 2]]))
    assert not is_solved(_state([[0, 1], [0, 1], [2, 2]]))


def _sorted_layout(bottle_count, color_count, bottle_height):
    """Solved arrangement with the generator's shape: full bottles, then empties."""
    shape = generate_puzzle(bottle_count, color_count, bottle_height, seed=0)
    colors = sorted(color_counts(shape))
    bottles = [[color] * bottle_height for color in colors]
    bottles += [[EMPTY] * bottle_height] * (bottle_count - len(bottles))
    return _state(bottles)


@pytest.mark.parametrize("solved", [
    _state([[1, 1], [0, 0], [2, 2]]),
    _state([[0, 0, 0], [0, 0, 0]]),
    _sorted_layout(7, 5, 4),
    _sorted_layout(5, 3, 3),
])
def test_solved_state_stays_solved(solved):
    """No legal pour out of a solved state breaks it."""
    assert is_solved(solved)
    for source in range(solved.bottle_count):
        for target in range(solved.bottle_count):
            if is_legal_move(solved, source, target):
                assert is_solved(apply_move(solved, source, target))


def test_moves_conserve_units_and_gravity():
    """Every legal pour keeps per-color totals and packed bottles."""
    start = generate_puzzle(5, 3, 3, seed=11)
    totals = color_counts(start)

    for state in _reachable_states(start):
        for source in range(state.bottle_count):
            for target in range(state.bottle_count):
                if not is_legal_move(state, source, target):
                    continue
                after = apply_move(state, source, target)
                assert color_counts(after) == totals
                assert all(is_gravity_packed(bottle) for bottle in after.bottles)


def test_legality_matches_pour_amount():
    """pour_amount() is positive exactly when the pour is legal."""
    start = generate_puzzle(5, 3, 3, seed=5)
    for state in _reachable_states(start, limit=100):
        for source in range(state.bottle_count):
            for target in range(state.bottle_count):
                legal = is_legal_move(state, source, target)
                assert (pour_amount(state, source, target) > 0) == legal


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------

def test_entropy():
    assert bottle_entropy((0, 0, 0)) == 0
    assert bottle_entropy((0, 2, 2)) == 1
    assert bottle_entropy((1, 2, 1)) == 4
    assert state_entropy(_state([[1, 2], [2, 1], [0, 0]])) == 4


# ---------------------------------------------------------------------------
# Search strategies
# ---------------------------------------------------------------------------

def test_strategy_registry():
    names = get_strategy_names()
    for name in ("bfs", "best_first", "beam", "greedy"):
        assert name in names
    assert get_default_strategy_name() == "bfs"

    with pytest.raises(ValueError):
        create_strategy("no_such_strategy")


def test_valid_moves_in_pair_order():
    state = _state([[1, 2], [2, 1], [0, 0]])
    moves = create_strategy("bfs").find_all_valid_moves(state)
    assert moves == [Move(0, 2, 1), Move(1, 2, 1)]


def test_bfs_swap_puzzle():
    """Two bottles of swapped colors and one spare are solved in three pours."""
    moves = solve(2, 3, SWAP_PUZZLE)

    assert moves == [Move(0, 2, 1), Move(1, 0, 1), Move(1, 2, 1)]
    assert [m.to_dict() for m in moves] == [
        {"from": 0, "to": 2, "amount": 1},
        {"from": 1, "to": 0, "amount": 1},
        {"from": 1, "to": 2, "amount": 1},
    ]

    final = replay_moves(normalize_bottles(2, 3, SWAP_PUZZLE), moves)
    assert is_solved(final)


def test_bfs_is_deterministic():
    first = solve(3, 4, INTERLEAVED_PUZZLE)
    second = solve(3, 4, INTERLEAVED_PUZZLE)
    assert first == second
    assert first


def test_already_solved_returns_empty():
    bottles = [[1, 1, 1, 1], []]
    assert is_solved_input(4, 2, bottles)
    assert solve(4, 2, bottles) == []

    single = [[1], [2]]
    assert is_solved_input(1, 2, single)
    assert solve(1, 2, single) == []


def test_bfs_finds_shortest_solution():
    solution = solve_puzzle(3, 4, INTERLEAVED_PUZZLE)

    assert solution.is_complete
    assert solution.move_count <= 6
    assert is_solved(solution.final_state)
    assert solution.states[0] == normalize_bottles(3, 4, INTERLEAVED_PUZZLE)
    assert solution.metrics.strategy_name == "bfs"
    assert solution.metrics.states_explored > 0

    best_first = solve_puzzle(3, 4, INTERLEAVED_PUZZLE, strategy_name="best_first")
    assert best_first.is_complete
    assert solution.move_count <= best_first.move_count


def test_bfs_reports_exhaustion():
    """Two full mixed bottles and no spare: nothing can move."""
    solution = solve_puzzle(2, 2, [[1, 2], [2, 1]])

    assert solution.moves == []
    assert not solution.is_complete
    assert solution.is_exhausted
    assert not solution.bound_exceeded


def test_bfs_state_bound():
    solution = solve_puzzle(2, 3, SWAP_PUZZLE, max_states=1)

    assert solution.moves == []
    assert solution.bound_exceeded
    assert not solution.is_exhausted
    assert solve(2, 3, SWAP_PUZZLE, max_states=1) == []


def test_bfs_depth_bound():
    solution = solve_puzzle(2, 3, SWAP_PUZZLE, max_depth=1)
    assert solution.moves == []
    assert solution.bound_exceeded

    solution = solve_puzzle(2, 3, SWAP_PUZZLE, max_depth=3)
    assert solution.is_complete


def test_bfs_search_raises_bound_exceeded():
    context = SolutionContext(state=normalize_bottles(2, 3, SWAP_PUZZLE), max_states=1)
    with pytest.raises(BoundExceeded) as exc_info:
        create_strategy("bfs").search(context)
    assert exc_info.value.limit == 1


def test_bfs_honours_cancellation():
    context = SolutionContext(state=generate_puzzle(9, 7, 6, seed=3), max_states=10**6)
    context.cancel_flag.set()
    solution = create_strategy("bfs").solve(context)

    assert solution.was_cancelled
    assert solution.moves == []
    assert not solution.is_complete


@pytest.mark.parametrize("name", ["best_first", "beam", "greedy"])
def test_heuristic_strategies_solve_swap_puzzle(name):
    solution = solve_puzzle(2, 3, SWAP_PUZZLE, strategy_name=name)

    assert solution.is_complete
    assert solution.metrics.strategy_name == name
    final = replay_moves(solution.states[0], solution.moves)
    assert is_solved(final)


def test_greedy_follows_priorities():
    solution = solve_puzzle(2, 3, SWAP_PUZZLE, strategy_name="greedy")
    assert solution.moves == [Move(0, 2, 1), Move(1, 0, 1), Move(1, 2, 1)]


def test_heuristic_strategy_never_returns_partial_path():
    solution = solve_puzzle(2, 2, [[1, 2], [2, 1]], strategy_name="greedy")
    assert solution.moves == []
    assert not solution.is_complete


def test_fallback_strategy_used_after_bound():
    solution = solve_puzzle(
        2, 3, SWAP_PUZZLE,
        strategy_name="test_always_bounded",
        fallback_strategy="bfs"
    )
    assert solution.is_complete
    assert solution.metrics.strategy_name == "bfs"

    without = solve_puzzle(2, 3, SWAP_PUZZLE, strategy_name="test_always_bounded")
    assert without.bound_exceeded
    assert without.moves == []


def test_generated_puzzle_search_terminates():
    start = generate_puzzle(4, 2, 3, seed=21)
    solution = solve_puzzle(3, 4, start.to_list())

    assert not solution.bound_exceeded
    assert solution.is_complete or solution.is_exhausted
    if solution.is_complete:
        assert is_solved(replay_moves(start, solution.moves))


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

def test_normalize_pads_and_packs():
    state = normalize_bottles(3, 4, [[1], [2, 1], [1, 0, 2]])
    assert state.to_list() == [
        [0, 0, 1],
        [0, 2, 1],
        [0, 1, 2],
        [0, 0, 0],
    ]


def test_normalize_drops_excess_from_bottom():
    """Long bottles keep their top slots, like the pad-then-slice input path."""
    state = normalize_bottles(3, 2, [[3, 1, 2, 2], [], [0, 0, 0]])
    assert state.to_list() == [[3, 1, 2], [0, 0, 0]]

    assert normalize_bottles(2, 1, [[0, 1, 2]]).to_list() == [[0, 1]]


def test_normalize_packs_after_truncation():
    state = normalize_bottles(3, 1, [[1, 0, 2, 3]])
    assert state.to_list() == [[0, 1, 2]]


@pytest.mark.parametrize("height,count,bottles", [
    (0, 2, [[], []]),
    (2, -1, []),
    (2, 2, [[1, -1], []]),
    (2, 2, [["a"], []]),
    (2, 2, [[True], []]),
])
def test_normalize_rejects_bad_input(height, count, bottles):
    with pytest.raises(MalformedPuzzle):
        normalize_bottles(height, count, bottles)


def test_unbalanced_colors_rejected():
    with pytest.raises(MalformedPuzzle):
        solve(2, 3, [[1, 1], [2], []])

    with pytest.raises(MalformedPuzzle):
        validate_color_totals(_state([[0, 1], [1, 1], [0, 0]]))

    validate_color_totals(_state([[1, 2], [2, 1], [0, 0]]))


def test_replay_rejects_wrong_amount():
    start = normalize_bottles(2, 3, SWAP_PUZZLE)
    with pytest.raises(InvalidMove):
        replay_moves(start, [Move(0, 2, 2)])
    with pytest.raises(InvalidMove):
        replay_moves(start, [Move(2, 0, 1)])


def test_move_dict_conversion():
    move = Move.from_dict({"from": 3, "to": 1, "amount": 2})
    assert move == Move(3, 1, 2)
    assert move.to_dict() == {"from": 3, "to": 1, "amount": 2}
    assert move.pair == (3, 1)


# ---------------------------------------------------------------------------
# Cached solution playback
# ---------------------------------------------------------------------------

def test_cached_solution_playback():
    solution = solve_puzzle(2, 3, SWAP_PUZZLE)
    cached = CachedSolution(solution=solution)

    assert cached.total_moves == 3
    assert cached.current_move == Move(0, 2, 1)
    assert cached.peek_moves(2) == [Move(0, 2, 1), Move(1, 0, 1)]

    state = cached.expected_state_before
    while not cached.is_exhausted:
        state = state.apply_move(cached.current_move)
        assert cached.validate_state_match(state)
        cached.advance()

    assert cached.moves_remaining == 0
    assert cached.current_move is None
    assert cached.advance() is None
    assert is_solved(state)


def test_cached_solution_detects_divergence():
    solution = solve_puzzle(2, 3, SWAP_PUZZLE)
    cached = CachedSolution(solution=solution)

    wrong = apply_move(cached.expected_state_before, 1, 2)
    assert not cached.validate_state_match(wrong)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
