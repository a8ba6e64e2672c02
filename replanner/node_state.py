"""
Per-node search state for D* Lite.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Hashable, Iterator, Optional, Tuple


class Tag(Enum):
    """Lifecycle tag of a node in the search."""
    NEW = "NEW"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass
class NodeState:
    """Search state of a single node."""
    g: float = math.inf    # Best known cost to goal
    rhs: float = math.inf  # One-step lookahead cost
    tag: Tag = Tag.NEW

    @property
    def consistent(self) -> bool:
        return self.g == self.rhs

    @property
    def overconsistent(self) -> bool:
        """g > rhs: a cheaper path was found (LOWER)."""
        return self.g > self.rhs

    @property
    def underconsistent(self) -> bool:
        """g < rhs: the known path got more expensive (RAISE)."""
        return self.g < self.rhs


class NodeStateTable:
    """
    Table of NodeState entries, created lazily on first access.

    Stored g and rhs values are clamped to [0, infinity] so no reader can observe
    a negative cost or a value past the unreachable sentinel.
    """

    def __init__(self, infinity: float = math.inf):
        self.infinity = infinity
        self._states: Dict[Hashable, NodeState] = {}

    def get(self, node: Hashable) -> NodeState:
        """Get the state of a node, creating it with g=rhs=infinity, NEW."""
        state = self._states.get(node)
        if state is None:
            state = NodeState(g=self.infinity, rhs=self.infinity)
            self._states[node] = state
        return state

    def peek(self, node: Hashable) -> Optional[NodeState]:
        """Get the state of a node without creating it."""
        return self._states.get(node)

    def set(self, node: Hashable, g: Optional[float] = None, rhs: Optional[float] = None,
            tag: Optional[Tag] = None) -> NodeState:
        """
        Update any subset of a node's fields.

        Args:
            node: Node id
            g: New g-value
            rhs: New rhs-value
            tag: New lifecycle tag

        Returns:
            The updated state
        """
        state = self.get(node)
        if g is not None:
            state.g = self._clamp(g)
        if rhs is not None:
            state.rhs = self._clamp(rhs)
        if tag is not None:
            state.tag = tag
        return state

    def g(self, node: Hashable) -> float:
        state = self._states.get(node)
        return self.infinity if state is None else state.g

    def rhs(self, node: Hashable) -> float:
        state = self._states.get(node)
        return self.infinity if state is None else state.rhs

    def is_consistent(self, node: Hashable) -> bool:
        return self.g(node) == self.rhs(node)

    def _clamp(self, value: float) -> float:
        if value >= self.infinity:
            return self.infinity
        return max(0.0, value)

    def reset(self):
        """Forget every node (hard reset)."""
        self._states.clear()

    def items(self) -> Iterator[Tuple[Hashable, NodeState]]:
        return iter(list(self._states.items()))

    def __contains__(self, node) -> bool:
        return node in self._states

    def __len__(self) -> int:
        return len(self._states)
