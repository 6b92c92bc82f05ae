"""Tunable settings for the move selector."""

from dataclasses import dataclass
from typing import Optional

DEFAULT_NODE_BUDGET = 60000

OPENING_STRATEGIES = ("corner", "center", "random")
BUCKET_SCANS = ("every", "first")


@dataclass(frozen=True)
class SolverConfig:
    """
    Settings shared by one MoveSelector across all of its decisions.

    Attributes:
        node_budget: Maximum number of search nodes the combinatorial
            enumerator may visit per decision. Higher values cost more time
            but give better probability estimates on large frontiers.
        opening: How to choose the first move on an untouched board:
            "corner" (top-left), "center", or "random".
        bucket_scan: How the probability phase compares hazard-count buckets
            against the outside-frontier risk.
            "every" (default): compare each bucket's own weight.
            "first": compare the first bucket's weight divided by each
            bucket's combination count, as the legacy solver did.
        seed: Seed for the solver's random generator when none is injected.
    """

    node_budget: int = DEFAULT_NODE_BUDGET
    opening: str = "corner"
    bucket_scan: str = "every"
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.node_budget, bool) or not isinstance(self.node_budget, int):
            raise ValueError("node_budget must be an integer.")
        if self.node_budget <= 0:
            raise ValueError("node_budget must be positive.")
        if self.opening not in OPENING_STRATEGIES:
            raise ValueError('opening must be "corner", "center" or "random".')
        if self.bucket_scan not in BUCKET_SCANS:
            raise ValueError('bucket_scan must be "every" or "first".')
