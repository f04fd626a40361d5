"""
Puzzle State Module - Immutable bottle arrangement for the liquid sort puzzle.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, TYPE_CHECKING

from .errors import InvalidMove, MalformedPuzzle

if TYPE_CHECKING:
    from .move import Move

# Slot value for an unfilled position
EMPTY = 0

Bottle = Tuple[int, ...]


@dataclass(frozen=True)
class PuzzleState:
    """
    Immutable snapshot of every bottle's contents.

    Uses tuple-of-tuples for hashability and immutability. Each bottle
    lists its slots from the top (index 0, the pour-out end) down to the
    bottom (last index). Slots hold a positive color id or EMPTY.

    Attributes:
        bottles: Tuple of bottles, all of the same capacity
    """
    bottles: Tuple[Bottle, ...]

    def __post_init__(self):
        if self.bottles:
            capacity = len(self.bottles[0])
            for index, bottle in enumerate(self.bottles):
                if len(bottle) != capacity:
                    raise MalformedPuzzle(
                        f"Bottle {index} has {len(bottle)} slots, expected {capacity}"
                    )

    @classmethod
    def from_lists(cls, bottles: Sequence[Sequence[int]]) -> 'PuzzleState':
        """
        Create PuzzleState from nested lists of slot values.

        Args:
            bottles: One list per bottle, top slot first

        Returns:
            PuzzleState instance with immutable bottles

        Raises:
            MalformedPuzzle: If bottles have differing lengths
        """
        return cls(bottles=tuple(tuple(int(slot) for slot in bottle) for bottle in bottles))

    @classmethod
    def empty(cls, bottle_count: int, capacity: int) -> 'PuzzleState':
        """Create a state with every bottle empty."""
        return cls(bottles=tuple((EMPTY,) * capacity for _ in range(bottle_count)))

    def diff(self, other: 'PuzzleState') -> List[int]:
        """
        Find bottles that differ between this state and another.

        Args:
            other: Another PuzzleState to compare against

        Returns:
            Indices of bottles whose contents differ
        """
        if not isinstance(other, PuzzleState):
            raise TypeError("Can only diff against another PuzzleState")

        if self.bottle_count != other.bottle_count:
            raise ValueError(
                f"Cannot diff states with {self.bottle_count} and {other.bottle_count} bottles"
            )

        return [
            index for index, (mine, theirs) in enumerate(zip(self.bottles, other.bottles))
            if mine != theirs
        ]

    def apply_move(self, move: 'Move') -> 'PuzzleState':
        """
        Apply a move to create a new state.

        The move's amount must match what the rules allow; the original
        state is unchanged.

        Raises:
            InvalidMove: If the pour is illegal or the amount disagrees
        """
        from .rules import apply_move, pour_amount

        expected = pour_amount(self, move.source, move.target)
        if expected != move.amount:
            raise InvalidMove(
                move.source, move.target,
                f"amount {move.amount} does not match pourable amount {expected}"
            )
        return apply_move(self, move.source, move.target)

    def count_units(self) -> int:
        """Count non-empty slots across all bottles."""
        return sum(1 for bottle in self.bottles for slot in bottle if slot != EMPTY)

    def get_bottle(self, index: int) -> Bottle:
        """Get the slots of one bottle, top first."""
        return self.bottles[index]

    @property
    def bottle_count(self) -> int:
        """Number of bottles."""
        return len(self.bottles)

    @property
    def capacity(self) -> int:
        """Slots per bottle."""
        return len(self.bottles[0]) if self.bottles else 0

    def __hash__(self):
        """Enable using PuzzleState as dict key or in sets."""
        return hash(self.bottles)

    def __eq__(self, other):
        if not isinstance(other, PuzzleState):
            return False
        return self.bottles == other.bottles

    def to_list(self) -> List[List[int]]:
        """
        Convert to mutable nested list representation.

        Returns:
            One list per bottle, top slot first
        """
        return [list(bottle) for bottle in self.bottles]

    def __str__(self) -> str:
        rows = []
        for level in range(self.capacity):
            rows.append(" ".join(
                f"{bottle[level]:>2}" if bottle[level] != EMPTY else " ."
                for bottle in self.bottles
            ))
        return "\n".join(rows)
