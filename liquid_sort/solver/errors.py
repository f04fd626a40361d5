"""
Errors Module - Exception types raised by the liquid sort engine.
"""


class LiquidSortError(Exception):
    """Base class for all engine errors."""


class InvalidMove(LiquidSortError, ValueError):
    """
    A pour was applied that the move rules do not allow.

    Raised by apply_move() and move replay. This is a contract violation
    by the caller, never a recoverable runtime condition.

    Attributes:
        source: Source bottle index
        target: Target bottle index
    """

    def __init__(self, source: int, target: int, reason: str = "illegal pour"):
        self.source = source
        self.target = target
        super().__init__(f"Invalid move {source} -> {target}: {reason}")


class MalformedPuzzle(LiquidSortError, ValueError):
    """Puzzle input has the wrong shape or unbalanced color totals."""


class BoundExceeded(LiquidSortError):
    """
    Search gave up after exhausting its exploration budget.

    Attributes:
        states_explored: Number of states expanded before giving up
        limit: The configured budget that was hit
    """

    def __init__(self, states_explored: int, limit: int):
        self.states_explored = states_explored
        self.limit = limit
        super().__init__(
            f"Search budget exceeded: {states_explored} states explored (limit {limit})"
        )
