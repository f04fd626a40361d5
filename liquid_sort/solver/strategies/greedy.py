"""
Greedy Strategy - Always plays the highest-priority pour.

Fast but incomplete: it can walk into a dead end while a solution
exists. Already-seen states are never revisited, so it cannot cycle.
"""

import time
import logging
from typing import List, Set

from ..base import SolverStrategy
from ..state import PuzzleState
from ..move import Move
from ..context import SolutionContext
from ..heuristics import is_settled_source, move_priority
from ..rules import apply_move, is_solved
from ..solution import Solution
from ..factory import register_strategy

logger = logging.getLogger(__name__)

# Move cap used when the context sets no max_depth
DEFAULT_MAX_MOVES = 200


@register_strategy
class GreedyStrategy(SolverStrategy):
    """
    Greedy strategy picking the pour with the best immediate payoff.

    Pours out of bottles that are already full and single-colored are
    never considered. Among equal priorities the first pour in
    (source, target) order wins.
    """
    name = "greedy"
    description = "Greedy (instant) - Plays the most rewarding pour each step"
    timeout_sec = 1.0

    def solve(self, context: SolutionContext) -> Solution:
        start_time = time.perf_counter()

        initial = context.state
        state = initial
        moves: List[Move] = []
        seen: Set[PuzzleState] = {state}
        states_explored = 0
        max_moves = context.max_depth if context.max_depth is not None else DEFAULT_MAX_MOVES

        while not is_solved(state):
            if self._check_cancelled(context):
                return self._build_solution(
                    initial, [], start_time,
                    states_explored=states_explored,
                    was_cancelled=True
                )

            if len(moves) >= max_moves or states_explored >= context.max_states:
                logger.info(f"[Greedy] Gave up after {len(moves)} moves")
                return self._build_solution(
                    initial, [], start_time,
                    states_explored=states_explored,
                    states_generated=len(seen),
                    bound_exceeded=True
                )

            best_move = None
            best_priority = None
            for move in self.find_all_valid_moves(state):
                if is_settled_source(state.bottles[move.source]):
                    continue
                states_explored += 1
                if apply_move(state, move.source, move.target) in seen:
                    continue
                priority = move_priority(state, move)
                if best_priority is None or priority > best_priority:
                    best_move, best_priority = move, priority

            if best_move is None:
                logger.info(f"[Greedy] Dead end after {len(moves)} moves")
                break

            moves.append(best_move)
            state = apply_move(state, best_move.source, best_move.target)
            seen.add(state)

            context.report_progress(
                min(0.99, len(moves) / max_moves),
                f"{len(moves)} moves played"
            )

        return self._build_solution(
            initial, moves, start_time,
            states_explored=states_explored,
            states_generated=len(seen)
        )
