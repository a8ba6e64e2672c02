"""
Priority queue implementation for D* Lite replanning.

Entries are invalidated lazily: updating or removing a vertex leaves its old heap
entry in place and marks it dead, and dead entries are dropped when they reach
the top of the heap.
"""

import heapq
import itertools
import math
from typing import Dict, Hashable, List, Optional, Tuple


class Priority:
    """Handle lexicographic order of keys for D* Lite."""

    __slots__ = ('k1', 'k2')

    def __init__(self, k1: float, k2: float):
        """
        Initialize priority with two key values.

        Args:
            k1: First key value, min(g, rhs) + heuristic + k_m
            k2: Second key value, min(g, rhs)
        """
        self.k1 = k1
        self.k2 = k2

    def __lt__(self, other):
        """Lexicographic 'lower than' comparison."""
        return self.k1 < other.k1 or (self.k1 == other.k1 and self.k2 < other.k2)

    def __le__(self, other):
        """Lexicographic 'lower than or equal' comparison."""
        return self.k1 < other.k1 or (self.k1 == other.k1 and self.k2 <= other.k2)

    def __eq__(self, other):
        if not isinstance(other, Priority):
            return NotImplemented
        return self.k1 == other.k1 and self.k2 == other.k2

    def __iter__(self):
        return iter((self.k1, self.k2))

    def __repr__(self):
        return f"Priority({self.k1}, {self.k2})"


INFINITE_PRIORITY = Priority(math.inf, math.inf)


class PriorityNode:
    """Handle lexicographic order of vertices in priority queue, FIFO among equal keys."""

    __slots__ = ('priority', 'count', 'vertex', 'alive')

    def __init__(self, priority: Priority, count: int, vertex: Hashable):
        """
        Initialize priority node.

        Args:
            priority: Priority of the vertex
            count: Insertion counter used as tie-breaker
            vertex: Node id
        """
        self.priority = priority
        self.count = count
        self.vertex = vertex
        self.alive = True

    def __lt__(self, other):
        """'Lower than' comparison based on priority, then insertion order."""
        if self.priority == other.priority:
            return self.count < other.count
        return self.priority < other.priority


class PriorityQueue:
    """Min-heap priority queue with lazy deletion for the D* Lite OPEN list."""

    def __init__(self):
        self.heap: List[PriorityNode] = []
        self.entries: Dict[Hashable, PriorityNode] = {}  # vertex -> live entry
        self._counter = itertools.count()
        self.stale_discarded = 0

    def insert_or_update(self, vertex: Hashable, priority: Priority):
        """Insert vertex with priority, superseding any entry it already has."""
        old = self.entries.get(vertex)
        if old is not None:
            old.alive = False
        item = PriorityNode(priority, next(self._counter), vertex)
        self.entries[vertex] = item
        heapq.heappush(self.heap, item)

    def remove(self, vertex: Hashable):
        """Logically remove a vertex; its heap entry is dropped later."""
        item = self.entries.pop(vertex, None)
        if item is not None:
            item.alive = False

    def contains(self, vertex: Hashable) -> bool:
        """Check if vertex has a live entry in the queue."""
        return vertex in self.entries

    def _discard_stale(self):
        while self.heap and not self.heap[0].alive:
            heapq.heappop(self.heap)
            self.stale_discarded += 1

    def peek_min(self) -> Optional[Tuple[Hashable, Priority]]:
        """Get (vertex, priority) with minimum priority without removing it."""
        self._discard_stale()
        if not self.heap:
            return None
        top = self.heap[0]
        return top.vertex, top.priority

    def top(self) -> Optional[Hashable]:
        """Get the vertex with minimum priority without removing it."""
        entry = self.peek_min()
        return None if entry is None else entry[0]

    def top_key(self) -> Priority:
        """Get the minimum priority, or an infinite priority when empty."""
        entry = self.peek_min()
        return INFINITE_PRIORITY if entry is None else entry[1]

    def pop_min(self) -> Optional[Hashable]:
        """Pop the vertex with minimum priority, skipping stale entries."""
        self._discard_stale()
        if not self.heap:
            return None
        item = heapq.heappop(self.heap)
        del self.entries[item.vertex]
        return item.vertex

    def heap_size(self) -> int:
        """Number of physical heap entries, stale ones included."""
        return len(self.heap)

    def clear(self):
        self.heap.clear()
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __contains__(self, vertex) -> bool:
        return vertex in self.entries
