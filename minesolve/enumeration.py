"""Budget-bounded enumeration of hazard placements over the frontier."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .board import BoardSnapshot
from .config import DEFAULT_NODE_BUDGET
from .frontier import FrontierIndex

logger = logging.getLogger(__name__)

Combination = Tuple[bool, ...]

# Stack actions
_VISIT = 0
_ASSIGN = 1
_UNDO = 2


@dataclass
class EnumerationResult:
    """
    Combinations found by one enumeration run.

    Attributes:
        combinations: Valid hazard placements, in the order they were found.
        nodes_visited: Search nodes visited; never more than the budget.
        truncated: True if the budget ran out before the search finished, in
            which case combinations is a prefix of the full set and favors
            placements with hazards late in the frontier order.
    """

    combinations: List[Combination] = field(default_factory=list)
    nodes_visited: int = 0
    truncated: bool = False


def _collect_constraints(
    board: BoardSnapshot, frontier: FrontierIndex
) -> Optional[Tuple[List[int], List[List[int]], List[int]]]:
    """
    Gather the revealed-count constraints over frontier variables.

    Returns:
        (targets, constraints_of_variable, sizes), or None if some revealed
        cell needs hazards but has no frontier neighbor left.
    """
    targets: List[int] = []
    sizes: List[int] = []
    constraints_of_variable: List[List[int]] = [[] for _ in range(len(frontier))]

    for cell in board.revealed_cells():
        value = board.value(cell)
        variables = [frontier.index_of(n) for n in board.unknown_neighbors(cell)]
        if not variables:
            if value != 0:
                return None
            continue

        constraint_id = len(targets)
        targets.append(value)
        sizes.append(len(variables))
        for v in variables:
            constraints_of_variable[v].append(constraint_id)

    return targets, constraints_of_variable, sizes


def is_valid_combination(
    board: BoardSnapshot, frontier: FrontierIndex, combination: Sequence[bool]
) -> bool:
    """
    Check a full hazard placement against every revealed count.

    Args:
        board: Normalized board (known hazards already excluded).
        frontier: Frontier index built from that board.
        combination: One boolean per frontier variable, True for a hazard.

    Returns:
        True if every revealed cell sees exactly its count of placed hazards.
    """
    if len(combination) != len(frontier):
        raise ValueError("Combination length must match the frontier size.")

    for cell in board.revealed_cells():
        placed = sum(
            1
            for n in board.unknown_neighbors(cell)
            if combination[frontier.index_of(n)]
        )
        if placed != board.value(cell):
            return False
    return True


def enumerate_combinations(
    board: BoardSnapshot,
    frontier: FrontierIndex,
    node_budget: int = DEFAULT_NODE_BUDGET,
) -> EnumerationResult:
    """
    Enumerate hazard placements over the frontier with branch and bound.

    Each frontier variable is tried as not-hazard first, then hazard. A
    branch is cut as soon as some revealed count is exceeded or can no longer
    be reached, which never removes a valid placement. Every visited node
    costs one unit of node_budget; when it runs out, the search stops at once
    and returns what it has found.

    Args:
        board: Normalized board (known hazards excluded, counts decremented).
        frontier: Frontier index recomputed over that board.
        node_budget: Maximum number of nodes to visit.

    Returns:
        An EnumerationResult.
    """
    if node_budget <= 0:
        raise ValueError("node_budget must be positive.")

    collected = _collect_constraints(board, frontier)
    if collected is None:
        logger.debug("A revealed count has no frontier cell left; no placement exists")
        return EnumerationResult()

    targets, constraints_of_variable, sizes = collected
    size = len(frontier)
    hazards = [0] * len(targets)
    open_cells = list(sizes)
    assignment = [False] * size

    def apply(pos: int, value: bool) -> bool:
        feasible = True
        for c in constraints_of_variable[pos]:
            open_cells[c] -= 1
            if value:
                hazards[c] += 1
            if hazards[c] > targets[c] or hazards[c] + open_cells[c] < targets[c]:
                feasible = False
        return feasible

    def undo(pos: int, value: bool) -> None:
        for c in constraints_of_variable[pos]:
            open_cells[c] += 1
            if value:
                hazards[c] -= 1

    result = EnumerationResult()
    stack: List[Tuple[int, int, bool]] = [(_VISIT, 0, False)]

    while stack:
        action, pos, value = stack.pop()

        if action == _VISIT:
            if result.nodes_visited >= node_budget:
                result.truncated = True
                break
            result.nodes_visited += 1

            if pos == size:
                if all(h == t for h, t in zip(hazards, targets)):
                    result.combinations.append(tuple(assignment))
                continue

            # LIFO: the not-hazard branch is explored first.
            stack.append((_ASSIGN, pos, True))
            stack.append((_ASSIGN, pos, False))

        elif action == _ASSIGN:
            assignment[pos] = value
            if apply(pos, value):
                stack.append((_UNDO, pos, value))
                stack.append((_VISIT, pos + 1, False))
            else:
                undo(pos, value)
                assignment[pos] = False

        else:
            undo(pos, value)
            assignment[pos] = False

    logger.debug(
        "Enumerated %d combinations over %d variables in %d nodes%s",
        len(result.combinations),
        size,
        result.nodes_visited,
        " (truncated)" if result.truncated else "",
    )
    return result
