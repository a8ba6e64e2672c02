"""Shared fixtures for replanner tests."""

import heapq
import itertools
import math

import numpy as np
import pytest

from replanner.graph import Graph
from replanner.occupancy_grid import OccupancyGrid


def dijkstra_to_goal(graph: Graph, goal):
    """Brute-force cost-to-goal for every node, searching backwards over predecessors."""
    dist = {node: math.inf for node in graph.nodes()}
    dist[goal] = 0.0
    counter = itertools.count()
    heap = [(0.0, next(counter), goal)]
    while heap:
        d, _, u = heapq.heappop(heap)
        if d > dist[u]:
            continue
        for p in graph.pred(u):
            nd = d + graph.cost(p, u)
            if nd < dist[p]:
                dist[p] = nd
                heapq.heappush(heap, (nd, next(counter), p))
    return dist


def assert_cost_equal(actual, expected):
    if math.isinf(expected):
        assert math.isinf(actual)
    else:
        assert actual == pytest.approx(expected, rel=1e-9, abs=1e-9)


def random_graph(rng: np.random.Generator, n_nodes: int = 25, density: float = 0.2) -> Graph:
    """Directed graph on integer ids with integer-valued costs in [1, 9]."""
    graph = Graph()
    for node in range(n_nodes):
        graph.add_node(node)
    for a in range(n_nodes):
        for b in range(n_nodes):
            if a != b and rng.random() < density:
                graph.add_edge(a, b, float(rng.integers(1, 10)))
    graph.drain_changes()
    return graph


@pytest.fixture
def dijkstra():
    return dijkstra_to_goal


@pytest.fixture
def make_grid():
    """Factory for (OccupancyGrid, Graph) pairs with the grid bound to the graph."""
    def _make(x_dim: int = 5, y_dim: int = 5, exploration_setting: str = '4N'):
        grid = OccupancyGrid(x_dim, y_dim, exploration_setting=exploration_setting)
        graph = grid.build_graph()
        return grid, graph
    return _make


@pytest.fixture
def diamond_graph():
    """S -> A -> G and S -> B -> G, the B branch more expensive."""
    return Graph.from_edges([
        ('S', 'A', 1.0),
        ('A', 'G', 1.0),
        ('S', 'B', 1.0),
        ('B', 'G', 3.0),
    ])
