"""
Occupancy grid map adapter for D* Lite replanning.

Turns a 2D occupancy grid into a Graph and translates obstacle changes into edge
cost changes, so the planner only ever sees cost-change events.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

import numpy as np

from .config import settings
from .graph import Graph
from .utils import euclidean, get_movements_4n, get_movements_8n

logger = logging.getLogger(__name__)

OBSTACLE = 255
UNOCCUPIED = 0

Cell = Tuple[int, int]


class OccupancyGrid:
    """
    2D occupancy grid map for pathfinding.
    Stores obstacle information and keeps a bound Graph's edge costs in sync.
    """

    def __init__(self, x_dim: int, y_dim: int, exploration_setting: Optional[str] = None):
        """
        Initialize occupancy grid map.

        Args:
            x_dim: Grid dimension in x direction (rows)
            y_dim: Grid dimension in y direction (columns)
            exploration_setting: '4N' or '8N' connectivity, defaults to settings
        """
        exploration_setting = (exploration_setting or settings.exploration_setting).upper()
        if exploration_setting not in ('4N', '8N'):
            raise ValueError(f"exploration_setting must be '4N' or '8N', got {exploration_setting!r}")

        self.x_dim = x_dim
        self.y_dim = y_dim
        self.map_extents = (x_dim, y_dim)

        # Initialize empty grid (all cells unoccupied)
        self.occupancy_grid_map = np.zeros(self.map_extents, dtype=np.uint8)

        self.exploration_setting = exploration_setting
        self.graph: Optional[Graph] = None
        logger.info(f"OccupancyGrid initialized: {x_dim}x{y_dim} cells, {exploration_setting} connectivity")

    def in_bounds(self, cell: Cell) -> bool:
        """
        Check if coordinates are within grid bounds.

        Args:
            cell: (x, y) grid position

        Returns:
            True if within bounds, False otherwise
        """
        (x, y) = cell
        return 0 <= x < self.x_dim and 0 <= y < self.y_dim

    def is_unoccupied(self, pos: Cell) -> bool:
        """
        Check if a cell is unoccupied (free).

        Args:
            pos: (x, y) grid position

        Returns:
            True if cell is unoccupied, False if obstacle or out of bounds
        """
        (x, y) = (round(pos[0]), round(pos[1]))

        if not self.in_bounds((x, y)):
            return False

        return self.occupancy_grid_map[x][y] == UNOCCUPIED

    def succ(self, vertex: Cell) -> List[Cell]:
        """
        Get in-bounds neighbors of a cell, obstacles included.

        Args:
            vertex: (x, y) grid position

        Returns:
            List of neighbor positions
        """
        (x, y) = vertex

        if self.exploration_setting == '4N':
            movements = get_movements_4n(x=x, y=y)
        else:
            movements = get_movements_8n(x=x, y=y)

        # Alternate neighbor order so ties break in a zig-zag
        if (x + y) % 2 == 0:
            movements.reverse()

        return [node for node in movements if self.in_bounds(node)]

    def edge_cost(self, u: Cell, v: Cell) -> float:
        """Step length between adjacent cells, infinite if either is an obstacle."""
        if not self.is_unoccupied(u) or not self.is_unoccupied(v):
            return math.inf
        return euclidean(u, v)

    def build_graph(self) -> Graph:
        """
        Build a Graph over all cells and bind it to this grid.

        Subsequent obstacle changes are pushed to the graph as cost changes.
        """
        graph = Graph()
        for x in range(self.x_dim):
            for y in range(self.y_dim):
                cell = (x, y)
                graph.add_node(cell)
                for neighbor in self.succ(cell):
                    graph.set_cost(cell, neighbor, self.edge_cost(cell, neighbor))
        graph.drain_changes()
        self.graph = graph
        logger.debug(f"Grid graph built: {graph.number_of_nodes()} nodes")
        return graph

    def _refresh_edges(self, cell: Cell):
        if self.graph is None:
            return
        for neighbor in self.succ(cell):
            cost = self.edge_cost(cell, neighbor)
            self.graph.set_cost(cell, neighbor, cost)
            self.graph.set_cost(neighbor, cell, cost)

    def set_obstacle(self, pos: Cell):
        """
        Mark a cell as an obstacle.

        Args:
            pos: (x, y) grid position
        """
        (x, y) = (round(pos[0]), round(pos[1]))

        if self.in_bounds((x, y)):
            self.occupancy_grid_map[x, y] = OBSTACLE
            self._refresh_edges((x, y))

    def remove_obstacle(self, pos: Cell):
        """
        Mark an obstacle cell as unoccupied.

        Args:
            pos: (x, y) grid position
        """
        (x, y) = (round(pos[0]), round(pos[1]))

        if self.in_bounds((x, y)):
            self.occupancy_grid_map[x, y] = UNOCCUPIED
            self._refresh_edges((x, y))

    def local_observation(self, global_position: Cell, view_range: int = 2) -> Dict[Cell, int]:
        """
        Get local observation around a position (for sensor updates).

        Args:
            global_position: (x, y) robot position in grid
            view_range: How many cells ahead to look

        Returns:
            Dictionary mapping positions to occupancy values
        """
        (px, py) = global_position
        nodes = [
            (x, y)
            for x in range(px - view_range, px + view_range + 1)
            for y in range(py - view_range, py + view_range + 1)
            if self.in_bounds((x, y))
        ]
        return {
            node: UNOCCUPIED if self.is_unoccupied(pos=node) else OBSTACLE
            for node in nodes
        }

    def update_from_sensor_data(self, occupancy_data: np.ndarray) -> List[Cell]:
        """
        Update grid with new occupancy data from sensors.

        Args:
            occupancy_data: Numpy array with same dimensions as grid

        Returns:
            List of changed grid cells (x, y)
        """
        if occupancy_data.shape != self.occupancy_grid_map.shape:
            logger.error(
                f"Occupancy data shape {occupancy_data.shape} doesn't match "
                f"grid shape {self.occupancy_grid_map.shape}"
            )
            return []

        new_grid = np.where(occupancy_data != UNOCCUPIED, OBSTACLE, UNOCCUPIED).astype(np.uint8)
        changed_mask = (self.occupancy_grid_map != new_grid)
        changed_cells = [(int(x), int(y)) for x, y in zip(*changed_mask.nonzero())]

        self.occupancy_grid_map = new_grid
        for cell in changed_cells:
            self._refresh_edges(cell)

        logger.debug(f"Occupancy grid updated from sensor data: {len(changed_cells)} cells changed")
        return changed_cells

    def get_obstacle_count(self) -> int:
        """Get the number of obstacle cells in the grid."""
        return int(np.sum(self.occupancy_grid_map == OBSTACLE))

    def get_unoccupied_count(self) -> int:
        """Get the number of unoccupied cells in the grid."""
        return int(np.sum(self.occupancy_grid_map == UNOCCUPIED))
