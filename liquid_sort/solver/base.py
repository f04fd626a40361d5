"""
Base Strategy Module - Abstract base class for solving strategies.
"""

import time
from abc import ABC, abstractmethod
from typing import List

from .state import PuzzleState
from .move import Move
from .context import SolutionContext
from .solution import Solution, SolutionMetrics
from .rules import is_solved, pour_amount


class SolverStrategy(ABC):
    """
    Abstract base class for all solving strategies.

    Subclasses must implement the solve() method and define
    name and description class attributes.

    Attributes:
        name: Short identifier for the strategy
        description: Human-readable description for UI
        timeout_sec: Default timeout for this strategy
    """
    name: str = "base"
    description: str = "Base strategy"
    timeout_sec: float = 30.0

    @abstractmethod
    def solve(self, context: SolutionContext) -> Solution:
        """
        Compute a move sequence that solves the context's state.

        Must periodically check context.is_cancelled() and respect the
        context's max_states / max_depth bounds.

        Args:
            context: Solution context with state, bounds, cancellation

        Returns:
            Solution with moves, outcome flags and metrics
        """
        pass

    def find_all_valid_moves(self, state: PuzzleState) -> List[Move]:
        """
        Find every legal pour from the given state.

        Pairs are enumerated in ascending (source, target) order so that
        every strategy expands successors deterministically.

        Args:
            state: Current puzzle state

        Returns:
            List of Move objects with their maximal pour amounts
        """
        moves = []
        count = state.bottle_count

        for source in range(count):
            for target in range(count):
                if source == target:
                    continue
                amount = pour_amount(state, source, target)
                if amount > 0:
                    moves.append(Move(source, target, amount))

        return moves

    def _check_cancelled(self, context: SolutionContext) -> bool:
        """Convenience method to check cancellation."""
        return context.is_cancelled()

    def _build_solution(
        self,
        initial: PuzzleState,
        moves: List[Move],
        start_time: float,
        states_explored: int = 0,
        states_generated: int = 0,
        pruned_branches: int = 0,
        was_cancelled: bool = False,
        bound_exceeded: bool = False,
        is_exhausted: bool = False
    ) -> Solution:
        """
        Build Solution object from computation results.

        Replays the moves from the initial state to record every
        intermediate state; a move list that does not end in a solved
        state is discarded so callers never receive a partial path.
        """
        states = [initial]
        for move in moves:
            states.append(states[-1].apply_move(move))

        solved = is_solved(states[-1])
        if not solved:
            moves = []
            states = [initial]

        elapsed_ms = (time.perf_counter() - start_time) * 1000

        return Solution(
            moves=list(moves),
            is_complete=solved,
            was_cancelled=was_cancelled,
            bound_exceeded=bound_exceeded,
            is_exhausted=is_exhausted,
            states=states,
            metrics=SolutionMetrics(
                computation_time_ms=elapsed_ms,
                states_explored=states_explored,
                states_generated=states_generated,
                pruned_branches=pruned_branches,
                strategy_name=self.name
            )
        )
