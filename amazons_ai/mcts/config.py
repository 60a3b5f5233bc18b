"""
Configuration for the Amazons tree search.

This module defines the configuration parameters for the search, including
the exploration budget, the depth limit and the parallel expansion setup.
"""
from dataclasses import dataclass, field, fields
from typing import Optional, Literal, ClassVar
import os

from amazons_ai.core.constants import (
    DEFAULT_SEARCH_BUDGET, DEFAULT_SEARCH_DEPTH, DEFAULT_SEARCH_WORKERS
)


def _default_workers() -> int:
    return int(os.getenv("AMAZONS_SEARCH_WORKERS", str(DEFAULT_SEARCH_WORKERS)))


@dataclass
class MCTSConfig:
    """
    Configuration parameters for the tree search.

    This class defines all tunable parameters for the search, with
    validation and sensible defaults.
    """
    # Search parameters
    budget: int = DEFAULT_SEARCH_BUDGET
    """Number of exploration passes to run per move decision"""

    max_depth: int = DEFAULT_SEARCH_DEPTH
    """Depth at which a pass stops descending into already expanded nodes"""

    exploration_weight: float = 1.0
    """Multiplier on the exploration bonus of the selection score"""

    time_limit: Optional[float] = None
    """Optional time limit in seconds (None = always run the whole budget)"""

    # Parallelization
    num_workers: int = field(default_factory=_default_workers)
    """Number of parallel workers used to expand a leaf (1 = inline)"""

    parallel_backend: Literal["thread", "process"] = "thread"
    """Executor used for leaf expansion ('thread' or 'process')"""

    parallel_threshold: int = 32
    """Expansions with fewer candidate moves than this run inline"""

    # Constants
    BACKENDS: ClassVar[tuple] = ("thread", "process")

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.budget <= 0:
            raise ValueError("budget must be positive")

        if self.max_depth < 0:
            raise ValueError("max_depth must be non-negative")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must be non-negative")

        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive or None")

        if self.num_workers <= 0:
            raise ValueError("num_workers must be positive")

        if self.parallel_backend not in self.BACKENDS:
            raise ValueError("parallel_backend must be 'thread' or 'process'")

        if self.parallel_threshold < 0:
            raise ValueError("parallel_threshold must be non-negative")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (few shallow passes).

        Returns:
            Fast MCTSConfig object
        """
        return cls(budget=10, max_depth=1)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(budget=500, max_depth=6, parallel_backend="process")

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = ", ".join(f"{name}={value}" for name, value in self.to_dict().items())
        return f"MCTSConfig({params})"
