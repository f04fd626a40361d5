"""
Beam Search Strategy - Bounded-width level search for large puzzles.

Expands the search level by level like BFS but keeps only the
beam_width least mixed states at each level. Memory stays proportional
to the beam, so it copes with boards where BFS would run out of budget,
but it can miss solutions that the pruned branches would have reached.
"""

import time
import logging
from dataclasses import dataclass
from typing import List, Set, Tuple, Optional

from ..base import SolverStrategy
from ..state import PuzzleState
from ..move import Move
from ..context import SolutionContext
from ..heuristics import state_entropy
from ..rules import apply_move, is_solved
from ..solution import Solution
from ..factory import register_strategy

logger = logging.getLogger(__name__)


@dataclass
class BeamNode:
    """
    Node in beam search tree.

    Attributes:
        state: Puzzle state reached
        path: Moves taken to reach this state (as tuple for immutability)
        score: Entropy plus depth penalty (lower is more promising)
        order: Discovery index, breaks score ties deterministically
    """
    state: PuzzleState
    path: Tuple[Move, ...]
    score: float = 0.0
    order: int = 0

    def __lt__(self, other: "BeamNode") -> bool:
        return (self.score, self.order) < (other.score, other.order)

    @property
    def depth(self) -> int:
        """Current depth in search tree."""
        return len(self.path)


@register_strategy
class BeamSearchStrategy(SolverStrategy):
    """
    Level-synchronous beam search ordered by state entropy.

    Algorithm:
        1. Start with the initial state as the only beam node
        2. For each level:
           - Expand every beam node by all legal pours
           - Drop successors seen at any earlier level
           - Stop as soon as a solved successor appears
           - Keep the beam_width lowest-scoring successors
        3. Beam empty: give up

    Parameters:
        beam_width: Candidates kept per level (default 64)
        depth_weight: Score added per move of path length (default 0.0)
    """
    name = "beam"
    description = "Beam Search (bounded) - Keeps the least mixed states per level"
    timeout_sec = 10.0

    def __init__(self, beam_width: int = 64, depth_weight: float = 0.0):
        self.beam_width = beam_width
        self.depth_weight = depth_weight

    def solve(self, context: SolutionContext) -> Solution:
        start_time = time.perf_counter()
        initial = context.state

        if is_solved(initial):
            return self._build_solution(initial, [], start_time)

        root = BeamNode(state=initial, path=())
        root.score = self._calculate_score(root)
        beam = [root]
        seen: Set[PuzzleState] = {initial}
        states_explored = 0
        pruned = 0

        while beam:
            if self._check_cancelled(context):
                return self._build_solution(
                    initial, [], start_time,
                    states_explored=states_explored,
                    states_generated=len(seen),
                    pruned_branches=pruned,
                    was_cancelled=True
                )

            depth = beam[0].depth
            if states_explored >= context.max_states or not context.depth_allowed(depth + 1):
                logger.info(f"[Beam] Bound reached at depth {depth}")
                return self._build_solution(
                    initial, [], start_time,
                    states_explored=states_explored,
                    states_generated=len(seen),
                    pruned_branches=pruned,
                    bound_exceeded=True
                )

            beam, solved_node, explored, dropped = self._expand_beam(beam, seen)
            states_explored += explored
            pruned += dropped

            if solved_node is not None:
                logger.info(
                    f"[Beam] Solution found: {solved_node.depth} moves, "
                    f"{states_explored} states explored"
                )
                return self._build_solution(
                    initial, list(solved_node.path), start_time,
                    states_explored=states_explored,
                    states_generated=len(seen),
                    pruned_branches=pruned
                )

            logger.debug(f"[Beam] Depth {depth + 1}: {len(beam)} nodes kept, {dropped} pruned")

        # Nothing pruned means the whole reachable space was visited
        return self._build_solution(
            initial, [], start_time,
            states_explored=states_explored,
            states_generated=len(seen),
            pruned_branches=pruned,
            is_exhausted=pruned == 0
        )

    def _expand_beam(
        self,
        beam: List[BeamNode],
        seen: Set[PuzzleState]
    ) -> Tuple[List[BeamNode], Optional[BeamNode], int, int]:
        """
        Expand all nodes in beam by one level.

        Args:
            beam: Current beam nodes
            seen: States discovered so far (updated in place)

        Returns:
            Tuple of (new_beam, solved_node or None, states_explored, pruned)
        """
        candidates: List[BeamNode] = []

        for node in beam:
            for move in self.find_all_valid_moves(node.state):
                successor = apply_move(node.state, move.source, move.target)
                if successor in seen:
                    continue
                seen.add(successor)

                child = BeamNode(
                    state=successor,
                    path=node.path + (move,),
                    order=len(candidates)
                )
                if is_solved(successor):
                    return [child], child, len(beam), 0

                child.score = self._calculate_score(child)
                candidates.append(child)

        candidates.sort()
        dropped = max(0, len(candidates) - self.beam_width)
        return candidates[:self.beam_width], None, len(beam), dropped

    def _calculate_score(self, node: BeamNode) -> float:
        """Lower score = more promising path."""
        return state_entropy(node.state) + self.depth_weight * node.depth
