"""
Breadth-First Strategy - Exhaustive shortest-path search over pours.

Explores the state graph level by level with a visited set, so it
always terminates and always finds a solution when one is reachable.
Among several shortest solutions the one found first under ascending
(source, target) enumeration is returned, which keeps results
reproducible.
"""

import logging
import time
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from ..base import SolverStrategy
from ..state import PuzzleState
from ..move import Move
from ..context import SolutionContext
from ..errors import BoundExceeded
from ..rules import apply_move, is_solved
from ..solution import Solution
from ..factory import register_strategy

logger = logging.getLogger(__name__)

# Parent links: state -> (predecessor, move that produced it)
ParentMap = Dict[PuzzleState, Optional[Tuple[PuzzleState, Move]]]

# Pops between cancellation checks and progress reports
CHECK_INTERVAL = 1024


def trace_path(parents: ParentMap, state: PuzzleState) -> List[Move]:
    """Walk parent links back to the root and return moves in play order."""
    path: List[Move] = []
    link = parents[state]
    while link is not None:
        previous, move = link
        path.append(move)
        link = parents[previous]
    path.reverse()
    return path


@register_strategy
class BreadthFirstStrategy(SolverStrategy):
    """
    Breadth-first search with visited-state deduplication.

    Algorithm:
        1. Seed a FIFO frontier and the visited set with the start state
        2. Pop the frontier head; if solved, return its path
        3. Enqueue every unvisited successor, pairs in (source, target) order
        4. Frontier empty: no solution is reachable

    Bounds:
        - context.max_states caps expanded states (BoundExceeded)
        - context.max_depth stops expansion beyond that path length
    """
    name = "bfs"
    description = "Breadth-First (exact) - Shortest solution, exhaustive"
    timeout_sec = 30.0

    def solve(self, context: SolutionContext) -> Solution:
        start_time = time.perf_counter()
        initial = context.state

        try:
            path, explored, generated, cancelled = self.search(context)
        except BoundExceeded as e:
            logger.info(f"[BFS] {e}")
            return self._build_solution(
                initial, [], start_time,
                states_explored=e.states_explored,
                bound_exceeded=True
            )

        if cancelled:
            logger.info(f"[BFS] Cancelled after {explored} states")
        elif path is None:
            logger.info(f"[BFS] Reachable space exhausted: {explored} states, no solution")
        else:
            logger.info(
                f"[BFS] Solution found: {len(path)} moves, {explored} states explored"
            )

        return self._build_solution(
            initial, path or [], start_time,
            states_explored=explored,
            states_generated=generated,
            was_cancelled=cancelled,
            is_exhausted=path is None and not cancelled
        )

    def search(
        self,
        context: SolutionContext
    ) -> Tuple[Optional[List[Move]], int, int, bool]:
        """
        Run the breadth-first traversal.

        Returns:
            Tuple of (path or None, states_explored, states_generated, cancelled)

        Raises:
            BoundExceeded: If max_states is reached, or if max_depth cut
                off part of the space so exhaustion cannot be claimed
        """
        initial = context.state
        frontier: Deque[Tuple[PuzzleState, int]] = deque([(initial, 0)])
        parents: ParentMap = {initial: None}
        explored = 0
        depth_cut = False

        while frontier:
            state, depth = frontier.popleft()

            if is_solved(state):
                return trace_path(parents, state), explored, len(parents), False

            if explored >= context.max_states:
                raise BoundExceeded(explored, context.max_states)

            if explored % CHECK_INTERVAL == 0 and explored:
                if self._check_cancelled(context):
                    return None, explored, len(parents), True
                context.report_progress(
                    min(0.99, explored / context.max_states),
                    f"{explored} states explored, depth {depth}"
                )
                logger.debug(
                    f"[BFS] {explored} explored, {len(frontier)} queued, depth {depth}"
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
                frontier.append((successor, depth + 1))

        if depth_cut:
            raise BoundExceeded(explored, context.max_depth)

        return None, explored, len(parents), False
