"""
Path extraction from converged D* Lite values.

Once the search has converged, the optimal path is recovered greedily by always
moving to the successor s minimizing cost(current, s) + g(s).
"""

import logging
import math
from typing import Hashable, List, Optional, Tuple

from .exceptions import Unreachable
from .graph import Graph
from .node_state import NodeStateTable
from .utils import add_costs

logger = logging.getLogger(__name__)


def next_waypoint(graph: Graph, states: NodeStateTable, current: Hashable, goal: Hashable,
                  infinity: float = math.inf) -> Optional[Hashable]:
    """
    Get the next waypoint to move to from current position.

    Args:
        graph: Graph the search ran on
        states: Converged node states
        current: Current node
        goal: Goal node
        infinity: Unreachable sentinel

    Returns:
        Best successor, or None if current is the goal or every successor is unreachable
    """
    if current == goal:
        return None

    min_cost = infinity
    best_successor = None
    for s, edge_cost in graph.neighbors(current):
        cost = add_costs(edge_cost, states.g(s), infinity)
        if cost < min_cost:
            min_cost = cost
            best_successor = s

    return best_successor


def extract_path(graph: Graph, states: NodeStateTable, start: Hashable, goal: Hashable,
                 infinity: float = math.inf) -> Tuple[List[Hashable], float]:
    """
    Get the full path from start to goal.

    Args:
        graph: Graph the search ran on
        states: Converged node states
        start: Starting node
        goal: Goal node
        infinity: Unreachable sentinel

    Returns:
        (path, cost) with path listing every node from start to goal inclusive

    Raises:
        Unreachable: if no finite path exists or the walk does not reach the goal
    """
    if start == goal:
        return [start], 0.0
    if states.g(start) >= infinity and states.rhs(start) >= infinity:
        raise Unreachable(start, goal)

    path = [start]
    current = start
    total = 0.0

    # Limit path length to prevent infinite loops on non-converged values
    max_steps = max(graph.number_of_nodes(), 1)

    for _ in range(max_steps):
        next_wp = next_waypoint(graph, states, current, goal, infinity)
        if next_wp is None:
            raise Unreachable(start, goal, f"dead end at {current}")

        total = add_costs(total, graph.cost(current, next_wp), infinity)
        path.append(next_wp)
        current = next_wp

        if current == goal:
            return path, total

    raise Unreachable(start, goal, f"no goal after {max_steps} steps (cycle)")


def all_shortest_paths(graph: Graph, states: NodeStateTable, start: Hashable, goal: Hashable,
                       infinity: float = math.inf, limit: int = 100,
                       tolerance: float = 1e-9) -> List[List[Hashable]]:
    """
    Enumerate every optimal path from start to goal.

    A successor is on an optimal path when cost(current, s) + g(s) ties the
    minimum at current. Enumeration stops after `limit` paths.

    Raises:
        Unreachable: if no finite path exists
    """
    if start == goal:
        return [[start]]
    if states.g(start) >= infinity:
        raise Unreachable(start, goal)

    max_depth = max(graph.number_of_nodes(), 1)
    paths: List[List[Hashable]] = []
    stack = [[start]]

    while stack and len(paths) < limit:
        path = stack.pop()
        current = path[-1]
        if current == goal:
            paths.append(path)
            continue
        if len(path) > max_depth:
            continue

        costs = [(s, add_costs(c, states.g(s), infinity)) for s, c in graph.neighbors(current)]
        best = min((cost for _, cost in costs), default=infinity)
        if best >= infinity:
            continue
        # Reversed so the first tie (the greedy choice) is explored first
        for s, cost in reversed(costs):
            if cost - best <= tolerance and s not in path:
                stack.append(path + [s])

    if not paths:
        raise Unreachable(start, goal, "no optimal path could be enumerated")
    logger.debug(f"Enumerated {len(paths)} optimal paths from {start} to {goal}")
    return paths
