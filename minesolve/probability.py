"""Risk estimation over enumerated hazard placements."""

import logging
import random
from collections import defaultdict
from dataclasses import dataclass, field
from math import comb
from typing import DefaultDict, Dict, List, Optional, Sequence

import numpy as np

from .board import BoardSnapshot
from .errors import InconsistentBoardError, NoMoveAvailableError
from .frontier import FrontierIndex
from .utils import Cell

logger = logging.getLogger(__name__)


@dataclass
class Estimate:
    """
    Move chosen by the probability phase, with the numbers behind it.

    Attributes:
        move: Cell to reveal.
        strategy: "bucket" (safe cell of a likely combination), "outside"
            (random cell off the frontier), "least_risk" (frontier cell with
            the lowest aggregated hazard probability) or "random" (any
            Unknown cell, when there is nothing to weigh).
        weights: Normalized weight per observed hazard count k.
        expected_inside: Expected number of hazards on the frontier.
        outside_probability: Hazard probability of a cell off the frontier,
            or None if no such cell exists.
    """

    move: Cell
    strategy: str
    weights: Dict[int, float] = field(default_factory=dict)
    expected_inside: float = 0.0
    outside_probability: Optional[float] = None


def binomial_pmf(n: int, k: int, p: float) -> float:
    """Probability of exactly k successes in n trials at rate p."""
    if k < 0 or k > n:
        return 0.0
    return comb(n, k) * p**k * (1.0 - p) ** (n - k)


def group_by_hazard_count(
    combinations: Sequence[Sequence[bool]],
) -> Dict[int, List[Sequence[bool]]]:
    """Group combinations by their number of hazards, in ascending order."""
    buckets: DefaultDict[int, List[Sequence[bool]]] = defaultdict(list)
    for combo in combinations:
        buckets[sum(combo)].append(combo)
    return dict(sorted(buckets.items()))


def bucket_weights(hazard_counts: Sequence[int], trials: int, p: float) -> Dict[int, float]:
    """
    Weigh each observed hazard count by its binomial probability.

    Weights are normalized over the observed counts only, so they describe
    how likely each count is given that some valid combination has it. When
    every observed count has zero probability the weights are uniform.

    Args:
        hazard_counts: Observed hazard counts k, ascending.
        trials: Number of frontier variables.
        p: Hazard rate of a single Unknown cell.

    Returns:
        Mapping k -> weight, summing to 1 (empty if hazard_counts is empty).
    """
    raw = {k: binomial_pmf(trials, k, p) for k in hazard_counts}
    total = sum(raw.values())
    if not raw:
        return {}
    if total <= 0.0:
        logger.debug("All bucket probabilities are zero; using uniform weights")
        return {k: 1.0 / len(raw) for k in raw}
    return {k: w / total for k, w in raw.items()}


def _first_safe_cell(
    combos: Sequence[Sequence[bool]], frontier: FrontierIndex
) -> Optional[Cell]:
    for combo in combos:
        for i, hazard in enumerate(combo):
            if not hazard:
                return frontier.cell_at(i)
    return None


def cell_risks(
    buckets: Dict[int, List[Sequence[bool]]],
    weights: Dict[int, float],
    frontier_size: int,
) -> np.ndarray:
    """Aggregate per-variable hazard probability across weighted buckets."""
    risks = np.zeros(frontier_size, dtype=float)
    for k, combos in buckets.items():
        hits = np.asarray(combos, dtype=float).reshape(len(combos), frontier_size)
        risks += weights[k] * hits.mean(axis=0)
    return risks


def estimate_move(
    board: BoardSnapshot,
    frontier: FrontierIndex,
    combinations: Sequence[Sequence[bool]],
    total_hazards: int,
    known_hazards_count: int,
    rng: random.Random,
    bucket_scan: str = "every",
) -> Estimate:
    """
    Pick the cell least likely to hold a hazard.

    Args:
        board: Normalized board.
        frontier: Frontier index of the normalized board.
        combinations: Valid placements from the enumerator (maybe incomplete).
        total_hazards: Hazards on the whole board.
        known_hazards_count: Hazards already excluded from the board.
        rng: Random generator used for every random choice.
        bucket_scan: "every" compares each bucket's weight with the outside
            risk; "first" compares the first bucket's weight divided by each
            bucket's combination count.

    Returns:
        An Estimate.

    Raises:
        NoMoveAvailableError: If the board has no Unknown cell.
        InconsistentBoardError: If the remaining hazards do not fit the
            Unknown cells.
    """
    unknown_count = board.unknown_count()
    if unknown_count == 0:
        raise NoMoveAvailableError("No unknown cell is left to reveal.")

    remaining = total_hazards - known_hazards_count
    if remaining < 0 or remaining > unknown_count:
        raise InconsistentBoardError(
            f"{remaining} remaining hazards cannot fit {unknown_count} unknown cells."
        )

    size = len(frontier)
    outside_cells = unknown_count - size
    p = remaining / unknown_count

    buckets = group_by_hazard_count(combinations)
    weights = bucket_weights(list(buckets), size, p)
    expected_inside = sum(k * w for k, w in weights.items())

    outside_probability: Optional[float] = None
    if outside_cells > 0:
        outside_probability = (remaining - expected_inside) / outside_cells

    def estimate(move: Cell, strategy: str) -> Estimate:
        logger.debug("Probability phase picked %s by %s", move, strategy)
        return Estimate(move, strategy, weights, expected_inside, outside_probability)

    if outside_probability is not None:
        first_weight = weights[next(iter(weights))] if weights else 0.0
        for k, combos in buckets.items():
            if bucket_scan == "first":
                score = first_weight / len(combos)
            else:
                score = weights[k]
            if score < outside_probability:
                continue
            move = _first_safe_cell(combos, frontier)
            if move is not None:
                return estimate(move, "bucket")

        outside = [cell for cell in board.unknown_cells() if cell not in frontier]
        return estimate(rng.choice(outside), "outside")

    if buckets:
        risks = cell_risks(buckets, weights, size)
        return estimate(frontier.cell_at(int(np.argmin(risks))), "least_risk")

    return estimate(rng.choice(list(board.unknown_cells())), "random")
