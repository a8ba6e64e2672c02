"""
Utility functions for D* Lite replanning.
Heuristics, grid movement sets and cost arithmetic shared by the planner modules.
"""

import math
import numbers
from typing import Callable, Hashable, List, Tuple

Heuristic = Callable[[Hashable, Hashable], float]

SQRT2 = math.sqrt(2)


def euclidean(p: Tuple[int, int], q: Tuple[int, int]) -> float:
    """
    Compute Euclidean distance heuristic between two grid points.

    Args:
        p: (x, y) grid coordinate
        q: (x, y) grid coordinate

    Returns:
        Euclidean distance between points
    """
    return math.sqrt((p[0] - q[0]) ** 2 + (p[1] - q[1]) ** 2)


def manhattan(p: Tuple[int, int], q: Tuple[int, int]) -> float:
    """Manhattan distance, consistent for 4-connected unit-cost grids."""
    return float(abs(p[0] - q[0]) + abs(p[1] - q[1]))


def octile(p: Tuple[int, int], q: Tuple[int, int]) -> float:
    """Octile distance, consistent for 8-connected grids with diagonal cost sqrt(2)."""
    dx = abs(p[0] - q[0])
    dy = abs(p[1] - q[1])
    return (SQRT2 - 1) * min(dx, dy) + max(dx, dy)


def zero(p: Hashable, q: Hashable) -> float:
    """Null heuristic; turns the search into an incremental Dijkstra."""
    return 0.0


HEURISTICS = {
    'euclidean': euclidean,
    'manhattan': manhattan,
    'octile': octile,
    'zero': zero,
}


def get_heuristic(name: str) -> Heuristic:
    """
    Look up a named heuristic.

    Args:
        name: One of 'euclidean', 'manhattan', 'octile', 'zero'

    Returns:
        Heuristic callable h(a, b)
    """
    try:
        return HEURISTICS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown heuristic '{name}', expected one of {sorted(HEURISTICS)}") from None


def is_coordinate(node: Hashable) -> bool:
    """True for (x, y) pairs of numbers, the ids the geometric heuristics accept."""
    return (
        isinstance(node, tuple)
        and len(node) == 2
        and all(isinstance(v, numbers.Real) for v in node)
    )


def coordinates_or_zero(heuristic: Heuristic) -> Heuristic:
    """
    Wrap a geometric heuristic so it returns 0.0 for non-coordinate node ids.

    Lets a heuristic picked from settings run on plain graph ids (ints, strings),
    where the search then degrades to incremental Dijkstra.
    """
    def h(p: Hashable, q: Hashable) -> float:
        if is_coordinate(p) and is_coordinate(q):
            return heuristic(p, q)
        return 0.0

    h.__name__ = getattr(heuristic, '__name__', 'heuristic')
    return h


def add_costs(a: float, b: float, infinity: float = math.inf) -> float:
    """
    Add two costs, saturating at the infinity sentinel.

    A finite sentinel must never be exceeded, otherwise unreachable nodes
    would compare as reachable once an edge cost is added on top.
    """
    if a >= infinity or b >= infinity:
        return infinity
    total = a + b
    return infinity if total >= infinity else total


def get_movements_4n(x: int, y: int) -> List[Tuple[int, int]]:
    """
    Get all possible 4-connectivity movements (up, down, left, right).

    Args:
        x: Current x position
        y: Current y position

    Returns:
        List of (x, y) positions for 4-connected neighbors
    """
    return [
        (x + 1, y + 0),
        (x + 0, y + 1),
        (x - 1, y + 0),
        (x + 0, y - 1)
    ]


def get_movements_8n(x: int, y: int) -> List[Tuple[int, int]]:
    """
    Get all possible 8-connectivity movements (including diagonals).

    Args:
        x: Current x position
        y: Current y position

    Returns:
        List of (x, y) positions for 8-connected neighbors
    """
    return [
        (x + 1, y + 0),
        (x + 0, y + 1),
        (x - 1, y + 0),
        (x + 0, y - 1),
        (x + 1, y + 1),
        (x - 1, y + 1),
        (x - 1, y - 1),
        (x + 1, y - 1)
    ]
