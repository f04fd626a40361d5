"""
Solution Context Module - Shared context for strategy execution.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .state import PuzzleState

# Default cap on states a single search may expand
DEFAULT_MAX_STATES = 200_000


@dataclass
class SolutionContext:
    """
    Shared context passed to strategies containing the puzzle state,
    search bounds, cancellation, and progress reporting.

    Attributes:
        state: Puzzle state to solve
        max_states: Maximum number of states a search may expand
        max_depth: Optional cap on solution length (moves)
        cancel_flag: Threading event for cancellation
        timeout_sec: Maximum computation time in seconds
        start_time: When computation started
        progress_callback: Optional callback for progress updates
    """
    state: PuzzleState
    max_states: int = DEFAULT_MAX_STATES
    max_depth: Optional[int] = None
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    timeout_sec: float = 30.0
    start_time: float = field(default_factory=time.time)
    progress_callback: Optional[Callable[[float, str], None]] = None

    def is_cancelled(self) -> bool:
        """
        Check if cancellation requested or timeout exceeded.

        Returns:
            True if strategy should stop execution
        """
        if self.cancel_flag.is_set():
            return True
        if time.time() - self.start_time > self.timeout_sec:
            return True
        return False

    def depth_allowed(self, depth: int) -> bool:
        """True if a path of this many moves is within max_depth."""
        return self.max_depth is None or depth <= self.max_depth

    def report_progress(self, percent: float, message: str = "") -> None:
        """
        Report progress to the caller.

        Args:
            percent: Progress from 0.0 to 1.0
            message: Optional status message
        """
        if self.progress_callback:
            self.progress_callback(percent, message)

    def elapsed_time(self) -> float:
        """Seconds elapsed since computation started."""
        return time.time() - self.start_time
