"""
Strategies Package - Concrete strategy implementations.

Import this module to register all built-in strategies.
"""

from .bfs import BreadthFirstStrategy
from .best_first import BestFirstStrategy
from .beam_search import BeamSearchStrategy
from .greedy import GreedyStrategy

__all__ = [
    "BreadthFirstStrategy",
    "BestFirstStrategy",
    "BeamSearchStrategy",
    "GreedyStrategy",
]
