"""
Best-First Strategy - Entropy-ordered search for large puzzles.

Same visited-set bookkeeping as breadth-first search, but the frontier
is a priority queue keyed on how mixed the bottles are. Usually reaches
a solution after far fewer expansions than BFS on big boards, at the
cost of longer solutions.
"""

import heapq
import itertools
import logging
import time
from typing import List, Optional, Tuple

from ..base import SolverStrategy
from ..state import PuzzleState
from ..move import Move
from ..context import SolutionContext
from ..errors import BoundExceeded
from ..heuristics import state_entropy
from ..rules import apply_move, is_solved
from ..solution import Solution
from ..factory import register_strategy
from .bfs import CHECK_INTERVAL, ParentMap, trace_path

logger = logging.getLogger(__name__)


@register_strategy
class BestFirstStrategy(SolverStrategy):
    """
    Greedy best-first search ordered by state entropy.

    Queue entries are ordered by (entropy, depth, insertion order), so
    ties fall back to shallower and then earlier-discovered states and
    the result stays deterministic.

    Parameters:
        depth_weight: Added cost per move already made (0 = pure greedy)
    """
    name = "best_first"
    description = "Best-First (fast) - Expands least mixed states first"
    timeout_sec = 20.0

    def __init__(self, depth_weight: float = 0.0):
        self.depth_weight = depth_weight

    def solve(self, context: SolutionContext) -> Solution:
        start_time = time.perf_counter()
        initial = context.state

        try:
            path, explored, generated, cancelled = self.search(context)
        except BoundExceeded as e:
            logger.info(f"[BestFirst] {e}")
            return self._build_solution(
                initial, [], start_time,
                states_explored=e.states_explored,
                bound_exceeded=True
            )

        if path is not None:
            logger.info(
                f"[BestFirst] Solution found: {len(path)} moves, {explored} states explored"
            )

        return self._build_solution(
            initial, path or [], start_time,
            states_explored=explored,
            states_generated=generated,
            was_cancelled=cancelled,
            is_exhausted=path is None and not cancelled
        )

    def _priority(self, state: PuzzleState, depth: int) -> float:
        return state_entropy(state) + self.depth_weight * depth

    def search(
        self,
        context: SolutionContext
    ) -> Tuple[Optional[List[Move]], int, int, bool]:
        """
        Run the best-first traversal.

        Returns:
            Tuple of (path or None, states_explored, states_generated, cancelled)

        Raises:
            BoundExceeded: If max_states is reached or max_depth cut the space
        """
        initial = context.state
        counter = itertools.count()
        heap: List[Tuple[float, int, int, PuzzleState]] = [
            (self._priority(initial, 0), 0, next(counter), initial)
        ]
        parents: ParentMap = {initial: None}
        explored = 0
        depth_cut = False

        while heap:
            _, depth, _, state = heapq.heappop(heap)

            if is_solved(state):
                return trace_path(parents, state), explored, len(parents), False

            if explored >= context.max_states:
                raise BoundExceeded(explored, context.max_states)

            if explored % CHECK_INTERVAL == 0 and explored:
                if self._check_cancelled(context):
                    return None, explored, len(parents), True
                context.report_progress(
                    min(0.99, explored / context.max_states),
                    f"{explored} states explored"
                )

            explored += 1

            if not context.depth_allowed(depth + 1):
                depth_cut = True
                continue

            for move in self.find_all_valid_moves(state):
                successor = apply_move(state, move.source, move.target)
                if successor in parents:
                    continue
                parents[successor] = (state, move)
                heapq.heappush(
                    heap,
                    (self._priority(successor, depth + 1), depth + 1, next(counter), successor)
                )

        if depth_cut:
            raise BoundExceeded(explored, context.max_depth)

        return None, explored, len(parents), False
