"""
Solution Module - Result of strategy computation and cached solution playback.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .state import PuzzleState
from .move import Move


@dataclass
class SolutionMetrics:
    """
    Performance metrics for solution computation.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        states_explored: Number of states expanded
        states_generated: Number of distinct states discovered
        pruned_branches: Successors dropped by heuristic pruning
        strategy_name: Name of strategy that computed this solution
    """
    computation_time_ms: float = 0.0
    states_explored: int = 0
    states_generated: int = 0
    pruned_branches: int = 0
    strategy_name: str = ""


@dataclass
class Solution:
    """
    Result of a strategy computation.

    An empty move list means either the start state was already solved
    or no solution was found; the flags tell which.

    Attributes:
        moves: Ordered sequence of moves to execute
        is_complete: True if replaying moves solves the puzzle
        was_cancelled: True if stopped by cancellation or timeout
        bound_exceeded: True if the search hit its state/depth budget
        is_exhausted: True if the whole reachable space was searched
            without finding a solved state
        metrics: Performance statistics
        states: Puzzle state after each move (first is initial)
    """
    moves: List[Move] = field(default_factory=list)
    is_complete: bool = False
    was_cancelled: bool = False
    bound_exceeded: bool = False
    is_exhausted: bool = False
    metrics: SolutionMetrics = field(default_factory=SolutionMetrics)
    states: List[PuzzleState] = field(default_factory=list)

    @property
    def move_count(self) -> int:
        """Number of moves in solution."""
        return len(self.moves)

    @property
    def has_moves(self) -> bool:
        """Check if solution has any moves."""
        return len(self.moves) > 0

    @property
    def final_state(self) -> Optional[PuzzleState]:
        """State after the last move, or None if no states recorded."""
        return self.states[-1] if self.states else None

    def to_dicts(self) -> List[dict]:
        """Moves in the external {"from", "to", "amount"} form."""
        return [move.to_dict() for move in self.moves]


@dataclass
class CachedSolution:
    """
    Replay cursor over a Solution.

    The cursor points at the next pour to play. Solution.states holds one
    more entry than Solution.moves, so states[move_index] is the state the
    next pour expects and states[move_index + 1] the state it should leave.

    Attributes:
        solution: Complete solution being replayed
        move_index: Pours already replayed
    """
    solution: Solution
    move_index: int = 0

    @property
    def total_moves(self) -> int:
        return len(self.solution.moves)

    @property
    def moves_remaining(self) -> int:
        return max(0, self.total_moves - self.move_index)

    @property
    def is_exhausted(self) -> bool:
        """True once every pour has been replayed."""
        return self.move_index >= self.total_moves

    @property
    def current_move(self) -> Optional[Move]:
        """Next pour to replay, or None when exhausted."""
        if self.is_exhausted:
            return None
        return self.solution.moves[self.move_index]

    @property
    def expected_state_before(self) -> Optional[PuzzleState]:
        return self._state_at(self.move_index)

    @property
    def expected_state_after(self) -> Optional[PuzzleState]:
        return self._state_at(self.move_index + 1)

    def _state_at(self, index: int) -> Optional[PuzzleState]:
        states = self.solution.states
        return states[index] if index < len(states) else None

    def advance(self) -> Optional[Move]:
        """
        Step past the current pour.

        Returns:
            The pour stepped past, or None if nothing was left
        """
        move = self.current_move
        if move is not None:
            self.move_index += 1
        return move

    def peek_moves(self, count: int = 3) -> List[Move]:
        """Up to count pours starting at the cursor, without advancing."""
        return self.solution.moves[self.move_index:self.move_index + count]

    def validate_state_match(self, actual: PuzzleState) -> bool:
        """
        Check a state observed after playing the current pour.

        Returns:
            True if it equals the state the solver recorded for this step
        """
        expected = self.expected_state_after
        if expected is None or actual.bottle_count != expected.bottle_count:
            return False
        return not actual.diff(expected)
