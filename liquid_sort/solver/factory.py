"""
Strategy Factory Module - Registry of search strategies by name.
"""

from typing import Any, Dict, List, Type

from .base import SolverStrategy


# Global registry of strategies
_STRATEGIES: Dict[str, Type[SolverStrategy]] = {}

# Strategy used when none is named
DEFAULT_STRATEGY = "bfs"


def register_strategy(cls: Type[SolverStrategy]) -> Type[SolverStrategy]:
    """
    Class decorator that makes a strategy available by its name.

    Usage:
        @register_strategy
        class DepthLimitedStrategy(SolverStrategy):
            name = "depth_limited"
            ...
    """
    if cls.name in _STRATEGIES and _STRATEGIES[cls.name] is not cls:
        raise ValueError(f"Strategy name already registered: {cls.name}")
    _STRATEGIES[cls.name] = cls
    return cls


def create_strategy(name: str, **kwargs: Any) -> SolverStrategy:
    """
    Instantiate a registered strategy.

    Args:
        name: Strategy name (e.g., "bfs", "best_first")
        **kwargs: Passed to the strategy constructor (e.g. beam_width)

    Returns:
        Strategy instance

    Raises:
        ValueError: If strategy name not found
    """
    try:
        strategy_cls = _STRATEGIES[name]
    except KeyError:
        available = ", ".join(_STRATEGIES)
        raise ValueError(f"Unknown strategy: {name}. Available: {available}") from None
    return strategy_cls(**kwargs)


def get_strategy_names() -> List[str]:
    """Names of all registered strategies, in registration order."""
    return list(_STRATEGIES)


def get_strategy_info() -> List[Dict[str, Any]]:
    """
    Describe every registered strategy.

    Returns:
        List of dicts with 'name', 'description' and 'timeout_sec' keys
    """
    return [
        {"name": cls.name, "description": cls.description, "timeout_sec": cls.timeout_sec}
        for cls in _STRATEGIES.values()
    ]


def get_default_strategy_name() -> str:
    """The breadth-first strategy if registered, else the first one."""
    if DEFAULT_STRATEGY in _STRATEGIES:
        return DEFAULT_STRATEGY
    return next(iter(_STRATEGIES), "")
