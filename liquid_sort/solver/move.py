"""
Move Module - Represents a single pour between two bottles.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class Move:
    """
    Represents a pour from one bottle onto another.

    The amount is always the full legally pourable run: the top run of
    the source's color, capped by the free space in the target.

    Attributes:
        source: Index of the bottle poured from
        target: Index of the bottle poured into
        amount: Number of units transferred (> 0)
    """
    source: int
    target: int
    amount: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Move':
        """
        Create a Move from the external {"from", "to", "amount"} mapping.

        Args:
            data: Mapping with "from", "to" and "amount" keys

        Returns:
            Move instance
        """
        return cls(source=int(data["from"]), target=int(data["to"]),
                   amount=int(data["amount"]))

    def to_dict(self) -> Dict[str, int]:
        """Convert to the external {"from", "to", "amount"} mapping."""
        return {"from": self.source, "to": self.target, "amount": self.amount}

    @property
    def pair(self) -> tuple:
        """(source, target) pair, the enumeration key used by the search."""
        return (self.source, self.target)

    def __str__(self) -> str:
        return f"{self.source} -> {self.target} ({self.amount})"
