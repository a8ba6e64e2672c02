"""
D* Lite incremental replanning for graphs with changing edge costs.
"""

from .d_star_lite import DStarLite, PlanResult, PATH_FOUND, BLOCKED, BUDGET_EXCEEDED
from .exceptions import PlannerError, InvalidCost, Unreachable, BudgetExceeded, InconsistentHeuristic
from .graph import Graph, CostChange
from .node_state import NodeState, NodeStateTable, Tag
from .occupancy_grid import OccupancyGrid, OBSTACLE, UNOCCUPIED
from .priority_queue import Priority, PriorityQueue
from .path_extraction import extract_path, next_waypoint, all_shortest_paths

__version__ = "0.1.0"

__all__ = [
    'DStarLite', 'PlanResult', 'PATH_FOUND', 'BLOCKED', 'BUDGET_EXCEEDED',
    'PlannerError', 'InvalidCost', 'Unreachable', 'BudgetExceeded', 'InconsistentHeuristic',
    'Graph', 'CostChange',
    'NodeState', 'NodeStateTable', 'Tag',
    'OccupancyGrid', 'OBSTACLE', 'UNOCCUPIED',
    'Priority', 'PriorityQueue',
    'extract_path', 'next_waypoint', 'all_shortest_paths',
]
