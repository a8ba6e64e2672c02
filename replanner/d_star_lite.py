"""
D* Lite incremental replanning engine.

D* Lite is an incremental heuristic search algorithm that efficiently replans
shortest paths when edge costs change. The search runs backwards from the goal:
g(s) is the best known cost from s to the goal and rhs(s) its one-step
lookahead. Only vertices whose values are affected by a cost change are
re-expanded, so replanning work is proportional to the change instead of the
graph.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Hashable, Iterable, List, Optional, Union

from .config import PlannerSettings, settings
from .exceptions import BudgetExceeded, InconsistentHeuristic, PlannerError, Unreachable
from .graph import CostChange, Graph
from .node_state import NodeStateTable, Tag
from .path_extraction import all_shortest_paths, extract_path, next_waypoint
from .priority_queue import Priority, PriorityQueue
from .utils import Heuristic, add_costs, coordinates_or_zero, get_heuristic

logger = logging.getLogger(__name__)

PATH_FOUND = "PATH_FOUND"
BLOCKED = "BLOCKED"
BUDGET_EXCEEDED = "BUDGET_EXCEEDED"

KEY_TOLERANCE = 1e-9


@dataclass
class PlanResult:
    """Outcome of a planning request."""
    path: List[Hashable] = field(default_factory=list)
    cost: float = math.inf
    status: str = BLOCKED
    diagnostic: str = ""

    @property
    def found(self) -> bool:
        return self.status == PATH_FOUND


def _key_below(key: Priority, reference: Priority) -> bool:
    """Lexicographic key < reference beyond floating point noise."""
    if key.k1 < reference.k1 - KEY_TOLERANCE:
        return True
    return abs(key.k1 - reference.k1) <= KEY_TOLERANCE and key.k2 < reference.k2 - KEY_TOLERANCE


class DStarLite:
    """
    D* Lite incremental shortest path algorithm.

    Owns its node state table and priority queue; cost changes must be applied
    between compute_shortest_path runs, never during one.
    """

    def __init__(
        self,
        graph: Graph,
        s_start: Hashable,
        s_goal: Hashable,
        heuristic: Union[Heuristic, str, None] = None,
        infinity: Optional[float] = None,
        max_iterations: Optional[int] = None,
        check_heuristic: Optional[bool] = None,
        config: Optional[PlannerSettings] = None,
    ):
        """
        Initialize D* Lite planner.

        Args:
            graph: Graph to plan on
            s_start: Start node (current robot position)
            s_goal: Goal node
            heuristic: Callable h(a, b) or heuristic name; must be consistent for optimal paths
            infinity: Unreachable sentinel
            max_iterations: Queue pops allowed per search run (None = from settings)
            check_heuristic: Raise InconsistentHeuristic on key non-monotonicity
            config: Settings providing defaults for unset arguments
        """
        config = config or settings
        if heuristic is None:
            # Settings cannot know the node id type, so non-coordinate ids get h = 0
            heuristic = coordinates_or_zero(get_heuristic(config.heuristic))
        elif isinstance(heuristic, str):
            heuristic = get_heuristic(heuristic)

        self.graph = graph
        self.h: Callable[[Hashable, Hashable], float] = heuristic
        self.infinity = config.infinity if infinity is None else infinity
        self.max_iterations = config.max_iterations if max_iterations is None else max_iterations
        self.check_heuristic = config.check_heuristic if check_heuristic is None else check_heuristic

        self.s_start = s_start
        self.s_goal = s_goal
        self.s_last = s_start
        self.k_m = 0.0  # Accumulated heuristic offset from robot motion

        # Priority queue for vertices to be processed
        self.U = PriorityQueue()
        self.states = NodeStateTable(self.infinity)

        self._searching = False

        # Statistics
        self.total_pops = 0
        self.total_expansions = 0
        self.total_replans = 0
        self.last_run_pops = 0
        self.last_run_expansions = 0

        self.reset()

        logger.info(f"D* Lite initialized: start={s_start}, goal={s_goal}")

    def reset(self):
        """Hard reset: discard all search state and seed the goal."""
        self._ensure_idle("reset")
        self.states.reset()
        self.U.clear()
        self.k_m = 0.0
        self.s_last = self.s_start
        # The fresh search reads the graph as it is now
        self.graph.drain_changes()

        self.states.set(self.s_goal, rhs=0.0, tag=Tag.OPEN)
        self.U.insert_or_update(self.s_goal, self.calculate_key(self.s_goal))

    def g(self, s: Hashable) -> float:
        return self.states.g(s)

    def rhs(self, s: Hashable) -> float:
        return self.states.rhs(s)

    def calculate_key(self, s: Hashable) -> Priority:
        """
        Calculate priority key for a vertex.

        Args:
            s: Vertex id

        Returns:
            Priority with two key values for lexicographic ordering
        """
        k2 = min(self.states.g(s), self.states.rhs(s))
        k1 = add_costs(k2, self.h(self.s_start, s) + self.k_m, self.infinity)
        return Priority(k1, k2)

    def contain(self, u: Hashable) -> bool:
        """Check if vertex is on the OPEN list."""
        state = self.states.peek(u)
        return state is not None and state.tag is Tag.OPEN

    def compute_rhs(self, u: Hashable) -> float:
        """One-step lookahead: min over successors s of c(u, s) + g(s)."""
        min_s = self.infinity
        for s, cost in self.graph.neighbors(u):
            temp = add_costs(cost, self.states.g(s), self.infinity)
            if temp < min_s:
                min_s = temp
        return min_s

    def update_vertex(self, u: Hashable):
        """
        Recompute rhs(u) and requeue u if it is locally inconsistent.

        Args:
            u: Vertex id
        """
        state = self.states.get(u)
        if u != self.s_goal:
            self.states.set(u, rhs=self.compute_rhs(u))

        was_open = state.tag is Tag.OPEN
        if was_open:
            self.U.remove(u)

        if state.g != state.rhs:
            state.tag = Tag.OPEN
            self.U.insert_or_update(u, self.calculate_key(u))
        elif was_open:
            state.tag = Tag.CLOSED

    def compute_shortest_path(self, drain: bool = False) -> int:
        """
        Expand vertices until the start vertex is locally consistent and no
        queued key is smaller than the start's key.

        Args:
            drain: Keep expanding until the queue is empty, making g exact for every vertex

        Returns:
            Number of vertices expanded

        Raises:
            BudgetExceeded: if max_iterations queue pops did not suffice
            InconsistentHeuristic: if check_heuristic is set and keys decrease
        """
        self._ensure_idle("compute_shortest_path")
        self._searching = True
        pops = 0
        expansions = 0
        last_key: Optional[Priority] = None
        try:
            while True:
                top = self.U.peek_min()
                if top is None:
                    break
                u, k_old = top
                if not drain and not (k_old < self.calculate_key(self.s_start)
                                      or self.states.g(self.s_start) != self.states.rhs(self.s_start)):
                    break
                if self.max_iterations is not None and pops >= self.max_iterations:
                    raise BudgetExceeded(pops, self.max_iterations)
                pops += 1

                k_new = self.calculate_key(u)
                if self.check_heuristic and _key_below(k_new, k_old):
                    raise InconsistentHeuristic(u, k_new, k_old)

                if k_old < k_new:
                    # Heuristic origin moved since u was queued
                    self.U.insert_or_update(u, k_new)
                    continue

                if self.check_heuristic and last_key is not None and _key_below(k_old, last_key):
                    raise InconsistentHeuristic(u, k_old, last_key)
                self.U.pop_min()
                last_key = k_old
                expansions += 1

                state = self.states.get(u)
                if state.g > state.rhs:
                    # LOWER: a cheaper path was found
                    self.states.set(u, g=state.rhs, tag=Tag.CLOSED)
                    for s in self.graph.pred(u):
                        self.update_vertex(s)
                elif state.g < state.rhs:
                    # RAISE: invalidate g and let u and its predecessors recompute
                    self.states.set(u, g=self.infinity, tag=Tag.CLOSED)
                    pred = self.graph.pred(u)
                    pred.append(u)
                    for s in pred:
                        self.update_vertex(s)
                else:
                    state.tag = Tag.CLOSED
        finally:
            self._searching = False
            self.total_pops += pops
            self.total_expansions += expansions
            self.last_run_pops = pops
            self.last_run_expansions = expansions

        logger.debug(f"Search converged: {expansions} expansions, {pops} pops, queue={len(self.U)}")
        return expansions

    def update_start(self, new_start: Hashable):
        """
        Update the start position (robot moved).

        Keys already queued are corrected lazily through k_m; g and rhs are untouched.

        Args:
            new_start: New start node
        """
        self._ensure_idle("update_start")
        self.s_start = new_start
        self._shift_origin()

    def update_goal(self, new_goal: Hashable):
        """
        Update the goal position; this discards all search state.

        Args:
            new_goal: New goal node
        """
        old_goal = self.s_goal
        self.s_goal = new_goal
        self.reset()

        logger.info(f"Goal updated: {old_goal} -> {new_goal}")

    def update_map(self, changes: Optional[Iterable[CostChange]] = None) -> int:
        """
        Update D* Lite after edge cost changes and recompute the shortest path.

        Args:
            changes: Cost-change events to apply to the graph first; the graph's
                pending changes are processed either way

        Returns:
            Number of changed edges processed
        """
        self._ensure_idle("update_map")
        if changes:
            self.graph.apply(changes)
        pending = self.graph.drain_changes()
        if not pending:
            return 0

        self._shift_origin()

        for change in pending:
            a, b = change.edge
            self.update_vertex(a)
            self.update_vertex(b)

        self.total_replans += 1
        self.compute_shortest_path()

        logger.debug(f"Map updated: {len(pending)} edge costs changed")
        return len(pending)

    def replan(self, new_start: Optional[Hashable] = None,
               changes: Optional[Iterable[CostChange]] = None):
        """
        Replan path from new start position, optionally with map changes.

        Args:
            new_start: New start node
            changes: Optional cost-change events
        """
        if new_start is not None:
            self.update_start(new_start)

        if not self.update_map(changes):
            self.compute_shortest_path()

    def get_next_waypoint(self, current_position: Optional[Hashable] = None) -> Optional[Hashable]:
        """
        Get the next waypoint to move to from current position.

        Args:
            current_position: Current node, defaults to the start

        Returns:
            Next node, or None if at goal or no path
        """
        current = self.s_start if current_position is None else current_position
        if self.states.g(current) >= self.infinity and current != self.s_goal:
            logger.warning(f"No known path from {current} to {self.s_goal}")
            return None
        return next_waypoint(self.graph, self.states, current, self.s_goal, self.infinity)

    def get_full_path(self, start_position: Optional[Hashable] = None) -> List[Hashable]:
        """
        Get the full path from start to goal.

        Args:
            start_position: Starting node, defaults to the start

        Returns:
            List of nodes from start to goal

        Raises:
            Unreachable: if the goal cannot be reached
        """
        start = self.s_start if start_position is None else start_position
        path, _ = extract_path(self.graph, self.states, start, self.s_goal, self.infinity)
        return path

    def get_all_paths(self, limit: int = 100) -> List[List[Hashable]]:
        """Every optimal path from start to goal (ties included), up to limit."""
        return all_shortest_paths(self.graph, self.states, self.s_start, self.s_goal,
                                  self.infinity, limit=limit)

    def plan(self) -> PlanResult:
        """
        Run the search and extract a path, reporting failures in the result.

        Returns:
            PlanResult with status PATH_FOUND, BLOCKED or BUDGET_EXCEEDED
        """
        try:
            self.compute_shortest_path()
        except BudgetExceeded as e:
            logger.warning(f"Planning incomplete: {e}")
            return PlanResult(path=self._partial_path(), cost=self.infinity,
                              status=BUDGET_EXCEEDED, diagnostic=str(e))

        try:
            path, cost = extract_path(self.graph, self.states, self.s_start, self.s_goal, self.infinity)
        except Unreachable as e:
            logger.warning(f"No path to goal: {e}")
            return PlanResult(path=[], cost=self.infinity, status=BLOCKED, diagnostic=str(e))

        return PlanResult(path=path, cost=cost, status=PATH_FOUND)

    def get_stats(self) -> dict:
        """Get planner statistics."""
        return {
            "start": self.s_start,
            "goal": self.s_goal,
            "k_m": self.k_m,
            "total_pops": self.total_pops,
            "total_expansions": self.total_expansions,
            "total_replans": self.total_replans,
            "last_run_pops": self.last_run_pops,
            "last_run_expansions": self.last_run_expansions,
            "stale_discarded": self.U.stale_discarded,
            "open_count": len(self.U),
            "heap_size": self.U.heap_size(),
            "known_nodes": len(self.states),
        }

    def _shift_origin(self):
        self.k_m += self.h(self.s_last, self.s_start)
        self.s_last = self.s_start

    def _partial_path(self) -> List[Hashable]:
        """Greedy walk over unconverged values, stopping at dead ends or revisits."""
        path = [self.s_start]
        seen = {self.s_start}
        current = self.s_start
        for _ in range(self.graph.number_of_nodes()):
            nxt = next_waypoint(self.graph, self.states, current, self.s_goal, self.infinity)
            if nxt is None or nxt in seen:
                break
            path.append(nxt)
            seen.add(nxt)
            current = nxt
        return path

    def _ensure_idle(self, operation: str):
        if self._searching:
            raise PlannerError(f"{operation} called during compute_shortest_path; apply changes between searches")
