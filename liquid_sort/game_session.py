"""
Game Session Module - Play-state machine around the solver engine.

This module provides the GameSession which holds the puzzle a player is
working on, applies their pours through the move rules, and replays a
cached solver result one step at a time.

Flow:
  - Player pours bottle to bottle (select source, then target)
  - Player may request a solution at any point
  - Solution steps are replayed one pour per call and checked against
    the states the solver expected
  - Any manual pour invalidates the cached solution

For the core solving logic, see the liquid_sort.solver package.
"""

from enum import Enum, auto
from typing import List, Optional
import logging

from liquid_sort.solver import (
    EMPTY, PuzzleState, Move, Solution, CachedSolution, InvalidMove,
    generate_puzzle, is_solved, pour_amount, solve_state,
    validate_color_totals, get_default_strategy_name, DEFAULT_MAX_STATES
)

logger = logging.getLogger(__name__)


__all__ = [
    "SessionState",
    "GameSession",
]


class SessionState(Enum):
    """
    State machine states for a play session.

    States:
        PLAYING: Player is making their own pours
        SOLUTION_READY: A solution is cached, no step replayed yet
        REPLAYING: Solution steps are being replayed
        WON: Every bottle is resolved
    """
    PLAYING = auto()
    SOLUTION_READY = auto()
    REPLAYING = auto()
    WON = auto()


class GameSession:
    """
    Interactive session over one puzzle.

    State Flow:
        PLAYING --request_solution()--> SOLUTION_READY
           ^                                  |
           |                       apply_next_solution_step()
           |                                  |
        pour()/select() <------------------ REPLAYING
                                              |
                                       last step played
                                              |
                                             WON
    """

    def __init__(self, state: Optional[PuzzleState] = None,
                 strategy_name: Optional[str] = None,
                 max_states: int = DEFAULT_MAX_STATES,
                 fallback_strategy: Optional[str] = None):
        """
        Initialize a session.

        Args:
            state: Starting puzzle (empty session if None; call new_game())
            strategy_name: Solving strategy (default "bfs")
            max_states: Search budget for request_solution()
            fallback_strategy: Strategy to try when the search budget runs out
        """
        self.strategy_name = strategy_name or get_default_strategy_name()
        self.max_states = max_states
        self.fallback_strategy = fallback_strategy

        self._state: Optional[PuzzleState] = None
        self._initial: Optional[PuzzleState] = None
        self._session_state = SessionState.PLAYING
        self._selected: Optional[int] = None
        self._cached_solution: Optional[CachedSolution] = None
        self._history: List[Move] = []

        if state is not None:
            self.load(state)

    @property
    def state(self) -> PuzzleState:
        """Current puzzle state."""
        if self._state is None:
            raise RuntimeError("No puzzle loaded; call new_game() or load() first")
        return self._state

    @property
    def initial_state(self) -> Optional[PuzzleState]:
        """Puzzle as it was when loaded."""
        return self._initial

    @property
    def session_state(self) -> SessionState:
        """Get current state machine state."""
        return self._session_state

    @property
    def selected_bottle(self) -> Optional[int]:
        """Bottle currently picked as pour source."""
        return self._selected

    @property
    def history(self) -> List[Move]:
        """Pours applied since the puzzle was loaded."""
        return list(self._history)

    @property
    def cached_solution(self) -> Optional[CachedSolution]:
        """Get current cached solution."""
        return self._cached_solution

    @property
    def is_won(self) -> bool:
        """True if the current state is solved."""
        return self._state is not None and is_solved(self._state)

    @property
    def moves_remaining(self) -> int:
        """Number of moves remaining in cached solution."""
        if self._cached_solution is None:
            return 0
        return self._cached_solution.moves_remaining

    def new_game(self, bottle_count: int, color_count: int, bottle_height: int,
                 seed=None) -> PuzzleState:
        """
        Generate a fresh puzzle and start playing it.

        Returns:
            The generated starting state
        """
        state = generate_puzzle(bottle_count, color_count, bottle_height, seed=seed)
        self.load(state)
        logger.info(
            f"New game: {bottle_count} bottles, {color_count} colors, height {bottle_height}"
        )
        return state

    def load(self, state: PuzzleState) -> None:
        """Start playing the given puzzle."""
        self._state = state
        self._initial = state
        self._selected = None
        self._cached_solution = None
        self._history = []
        self._update_state()

    def reset(self) -> None:
        """Return to the puzzle's starting arrangement."""
        if self._initial is not None:
            self.load(self._initial)
        logger.info("GameSession reset")

    def select(self, bottle_index: int) -> Optional[Move]:
        """
        Handle a click on a bottle.

        The first click selects a non-empty bottle, a second click on the
        same bottle deselects it, and a click on another bottle pours.

        Returns:
            The Move played, or None if nothing was poured
        """
        state = self.state

        if self._selected is None:
            if not 0 <= bottle_index < state.bottle_count:
                logger.info(f"Click on missing bottle {bottle_index} ignored")
                return None
            if any(slot != EMPTY for slot in state.get_bottle(bottle_index)):
                self._selected = bottle_index
            return None

        if self._selected == bottle_index:
            self._selected = None
            return None

        source = self._selected
        self._selected = None
        try:
            return self.pour(source, bottle_index)
        except InvalidMove:
            logger.info(f"Invalid pour {source} -> {bottle_index} ignored")
            return None

    def pour(self, source: int, target: int) -> Move:
        """
        Apply a player's pour.

        Invalidates any cached solution.

        Raises:
            InvalidMove: If the pour is not legal
        """
        state = self.state
        amount = pour_amount(state, source, target)
        if amount == 0:
            raise InvalidMove(source, target)

        move = Move(source, target, amount)
        self._apply(move)

        if self._cached_solution is not None:
            logger.info("Manual pour invalidated cached solution")
            self._cached_solution = None

        self._update_state()
        return move

    def request_solution(self) -> Solution:
        """
        Solve from the current state and cache the result.

        Returns:
            The Solution (moves empty if already solved or none found)

        Raises:
            MalformedPuzzle: If the current state has unbalanced colors
        """
        state = self.state
        validate_color_totals(state)

        solution = solve_state(
            state,
            strategy_name=self.strategy_name,
            max_states=self.max_states,
            fallback_strategy=self.fallback_strategy
        )

        if solution.has_moves:
            self._cached_solution = CachedSolution(solution=solution)
            logger.info(f"Solution cached: {solution.move_count} moves")
        else:
            self._cached_solution = None
            logger.info("No solution moves to cache")

        self._selected = None
        self._update_state()
        return solution

    def apply_next_solution_step(self) -> Optional[Move]:
        """
        Replay the next cached solution move.

        Returns:
            The Move played, or None if there is nothing to replay

        Raises:
            InvalidMove: If the cached move no longer fits the current state
        """
        cached = self._cached_solution
        if cached is None or cached.is_exhausted:
            return None

        expected_before = cached.expected_state_before
        if expected_before is not None and expected_before != self.state:
            raise InvalidMove(
                cached.current_move.source, cached.current_move.target,
                "current state diverged from cached solution"
            )

        move = cached.current_move
        self._apply(move)

        if not cached.validate_state_match(self.state):
            raise InvalidMove(move.source, move.target, "replay produced unexpected state")

        cached.advance()

        logger.info(
            f"Replayed move {cached.move_index}/{cached.total_moves}: {move}"
        )

        self._update_state()
        return move

    def peek_next_moves(self, count: int = 3) -> List[Move]:
        """Preview upcoming solution moves without advancing."""
        if self._cached_solution is None:
            return []
        return self._cached_solution.peek_moves(count)

    def _apply(self, move: Move) -> None:
        self._state = self.state.apply_move(move)
        self._history.append(move)

    def _update_state(self) -> None:
        if self.is_won:
            if self._session_state != SessionState.WON:
                logger.info(f"Puzzle solved in {len(self._history)} moves")
            self._session_state = SessionState.WON
        elif self._cached_solution is not None and not self._cached_solution.is_exhausted:
            if self._cached_solution.move_index == 0:
                self._session_state = SessionState.SOLUTION_READY
            else:
                self._session_state = SessionState.REPLAYING
        else:
            self._session_state = SessionState.PLAYING

    def get_state_string(self) -> str:
        """Get human-readable state string for UI display."""
        state_strings = {
            SessionState.PLAYING: "Playing",
            SessionState.SOLUTION_READY: "Solution Ready",
            SessionState.REPLAYING: "Replaying",
            SessionState.WON: "Solved",
        }
        base = state_strings.get(self._session_state, "Unknown")

        if self._cached_solution is not None and not self._cached_solution.is_exhausted:
            total = self._cached_solution.total_moves
            current = self._cached_solution.move_index + 1
            return f"{base} ({current}/{total})"

        return base
