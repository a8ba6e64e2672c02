"""
Error kinds raised by the replanning library.

All of them are recoverable: the engine state stays valid after any of these is
raised, so callers may keep feeding cost changes and replanning.
"""


class PlannerError(Exception):
    """Base class for planner errors."""


class InvalidCost(PlannerError, ValueError):
    """An edge cost was negative or NaN."""

    def __init__(self, edge, cost):
        self.edge = edge
        self.cost = cost
        super().__init__(f"Invalid cost {cost!r} for edge {edge}: costs must be non-negative")


class Unreachable(PlannerError):
    """No finite-cost path exists from start to goal."""

    def __init__(self, start, goal, reason: str = "no finite-cost path"):
        self.start = start
        self.goal = goal
        self.reason = reason
        super().__init__(f"Goal {goal} unreachable from {start}: {reason}")


class BudgetExceeded(PlannerError):
    """The search loop hit its iteration cap before converging."""

    def __init__(self, pops: int, budget: int):
        self.pops = pops
        self.budget = budget
        super().__init__(
            f"Search stopped after {pops} queue pops (budget {budget}); "
            f"graph may be corrupt or the heuristic non-admissible"
        )


class InconsistentHeuristic(PlannerError):
    """Key non-monotonicity detected during expansion."""

    def __init__(self, vertex, key, previous_key):
        self.vertex = vertex
        self.key = key
        self.previous_key = previous_key
        super().__init__(
            f"Heuristic is not consistent: {vertex} has key {key}, "
            f"smaller than previously seen key {previous_key}"
        )
