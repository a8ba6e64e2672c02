"""
Directed weighted graph consumed by the D* Lite planner.

Costs are mutated only through set_cost; every effective change is recorded as a
pending CostChange so the planner can schedule the affected vertices on its
next replan.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Tuple

from .exceptions import InvalidCost

logger = logging.getLogger(__name__)

Node = Hashable
Edge = Tuple[Node, Node]


@dataclass(frozen=True)
class CostChange:
    """A reported change of a directed edge cost."""
    edge: Edge
    new_cost: float
    old_cost: float = math.inf


class Graph:
    """
    Directed graph with mutable edge costs.

    Missing edges have infinite cost. Successor and predecessor maps are kept in
    step so both directions can be queried in O(degree).
    """

    def __init__(self):
        self._succ: Dict[Node, Dict[Node, float]] = {}
        self._pred: Dict[Node, Dict[Node, float]] = {}
        self._pending: List[CostChange] = []

    def add_node(self, node: Node):
        """Add a node with no edges (no-op if present)."""
        if node not in self._succ:
            self._succ[node] = {}
            self._pred[node] = {}

    def add_edge(self, a: Node, b: Node, cost: float, bidirectional: bool = False):
        """
        Add a directed edge a -> b (and b -> a if bidirectional).

        Args:
            a: Source node
            b: Target node
            cost: Non-negative edge cost, math.inf for impassable
            bidirectional: Also add the reverse edge with the same cost
        """
        self.set_cost(a, b, cost)
        if bidirectional:
            self.set_cost(b, a, cost)

    def nodes(self) -> List[Node]:
        """Get all nodes in insertion order."""
        return list(self._succ)

    def number_of_nodes(self) -> int:
        return len(self._succ)

    def __len__(self) -> int:
        return len(self._succ)

    def __contains__(self, node) -> bool:
        return node in self._succ

    def neighbors(self, node: Node) -> List[Tuple[Node, float]]:
        """
        Get successors of a node along with their directed costs.

        Args:
            node: Node id

        Returns:
            List of (successor, cost) pairs
        """
        return list(self._succ.get(node, {}).items())

    def succ(self, node: Node) -> List[Node]:
        """Get successors of a node."""
        return list(self._succ.get(node, {}))

    def pred(self, node: Node) -> List[Node]:
        """Get predecessors of a node."""
        return list(self._pred.get(node, {}))

    def cost(self, a: Node, b: Node) -> float:
        """Directed cost of a -> b, infinite if there is no such edge."""
        return self._succ.get(a, {}).get(b, math.inf)

    def set_cost(self, a: Node, b: Node, cost: float) -> bool:
        """
        Set the directed cost of a -> b, creating the edge if needed.

        Args:
            a: Source node
            b: Target node
            cost: New cost (non-negative, math.inf for impassable)

        Returns:
            True if the cost changed and a CostChange was recorded

        Raises:
            InvalidCost: if cost is negative or NaN
        """
        cost = float(cost)
        if math.isnan(cost) or cost < 0:
            raise InvalidCost((a, b), cost)

        self.add_node(a)
        self.add_node(b)
        old_cost = self._succ[a].get(b, math.inf)
        known = b in self._succ[a]

        self._succ[a][b] = cost
        self._pred[b][a] = cost

        if known and old_cost == cost:
            return False
        if not known and cost == math.inf:
            # New impassable edge: topology grows but no vertex can depend on it yet
            return False

        self._pending.append(CostChange(edge=(a, b), new_cost=cost, old_cost=old_cost))
        logger.debug(f"Edge {a}->{b} cost {old_cost} -> {cost}")
        return True

    def pending_changes(self) -> List[CostChange]:
        """Cost changes recorded since the last drain."""
        return list(self._pending)

    def drain_changes(self) -> List[CostChange]:
        """Return and clear the pending cost changes."""
        changes, self._pending = self._pending, []
        return changes

    def apply(self, changes: Iterable[CostChange]) -> int:
        """
        Apply externally reported cost changes.

        Effective changes are recorded as pending like any other set_cost call.

        Args:
            changes: Cost-change events; old_cost is ignored and taken from the graph

        Returns:
            Number of edges whose cost actually changed
        """
        changed = 0
        for change in changes:
            a, b = change.edge
            if self.set_cost(a, b, change.new_cost):
                changed += 1
        return changed

    @classmethod
    def from_edges(cls, edges: Iterable[Tuple[Node, Node, float]], bidirectional: bool = False) -> 'Graph':
        """
        Build a graph from (a, b, cost) triples.

        Construction changes are not kept as pending events.
        """
        graph = cls()
        for a, b, cost in edges:
            graph.add_edge(a, b, cost, bidirectional=bidirectional)
        graph.drain_changes()
        return graph
