"""
Solver Worker Module for the Liquid Sort Solver

Provides a background QThread worker that runs one solve off the UI thread.
Communicates with the UI via Qt signals for thread-safe status updates.
"""

import logging
import threading
from typing import Optional

from PyQt5.QtCore import QThread, pyqtSignal

from liquid_sort.solver import (
    DEFAULT_MAX_STATES, LiquidSortError, PuzzleState, SolutionContext,
    create_strategy, get_default_strategy_name, solve_state, validate_color_totals
)


# Configure module logger
logger = logging.getLogger(__name__)


class SolverWorker(QThread):
    """
    Background worker thread for a single solve.

    Signals:
        status_changed(str): Emitted when worker status changes
        progress_changed(float, str): Search progress (0.0-1.0, message)
        solution_ready(object): Emitted with the Solution when search ends
        error_occurred(str): Emitted when the puzzle is rejected or search fails

    Example:
        worker = SolverWorker(state, strategy_name="bfs")
        worker.solution_ready.connect(ui.show_solution)
        worker.start()
        # ...
        worker.request_stop()
        worker.wait()
    """

    # Signals for UI updates (thread-safe)
    status_changed = pyqtSignal(str)
    progress_changed = pyqtSignal(float, str)
    solution_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(str)

    def __init__(self, state: PuzzleState, strategy_name: Optional[str] = None,
                 max_states: int = DEFAULT_MAX_STATES,
                 fallback_strategy: Optional[str] = None,
                 timeout_sec: Optional[float] = None):
        """
        Initialize the solver worker.

        Args:
            state: Puzzle state to solve
            strategy_name: Strategy to run (default "bfs")
            max_states: Search budget
            fallback_strategy: Strategy to try if the budget runs out
            timeout_sec: Wall-clock budget (strategy default if None)
        """
        super().__init__()
        self.state = state
        self.strategy_name = strategy_name or get_default_strategy_name()
        self.max_states = max_states
        self.fallback_strategy = fallback_strategy
        self.timeout_sec = timeout_sec
        self._cancel_flag = threading.Event()
        self._running = False

    def run(self):
        """
        Worker body. Called when thread starts.

        Emits exactly one of solution_ready or error_occurred.
        """
        self._running = True
        logger.info(f"Solver worker started ({self.strategy_name})")
        self.status_changed.emit("Solving")

        try:
            validate_color_totals(self.state)

            timeout = self.timeout_sec
            if timeout is None:
                timeout = create_strategy(self.strategy_name).timeout_sec

            context = SolutionContext(
                state=self.state,
                max_states=self.max_states,
                cancel_flag=self._cancel_flag,
                timeout_sec=timeout,
                progress_callback=self._on_progress
            )
            solution = solve_state(
                self.state,
                strategy_name=self.strategy_name,
                fallback_strategy=self.fallback_strategy,
                context=context
            )
        except (LiquidSortError, ValueError) as e:
            logger.exception("Solver worker failed")
            self.error_occurred.emit(str(e))
            self.status_changed.emit("Error")
        else:
            if solution.is_complete:
                status = f"Solved ({solution.move_count} moves)"
            elif solution.was_cancelled:
                status = "Cancelled"
            elif solution.bound_exceeded:
                status = "No solution within search budget"
            else:
                status = "No solution"
            self.solution_ready.emit(solution)
            self.status_changed.emit(status)
        finally:
            self._running = False
            logger.info("Solver worker stopped")

    def _on_progress(self, percent: float, message: str) -> None:
        self.progress_changed.emit(percent, message)

    def request_stop(self):
        """
        Request the worker to stop.

        The running search notices the cancel flag at its next check and
        returns a cancelled Solution. Use wait() to block until stopped.
        """
        logger.info("Stop requested")
        self._cancel_flag.set()

    def is_running(self) -> bool:
        """True while a solve is in progress."""
        return self._running
