import math

import pytest

from replanner.exceptions import InvalidCost
from replanner.graph import CostChange, Graph


def test_edges_and_queries():
    graph = Graph()
    graph.add_edge('a', 'b', 2.0)
    graph.add_edge('b', 'c', 1.0, bidirectional=True)

    assert graph.cost('a', 'b') == 2.0
    assert graph.cost('b', 'a') == math.inf
    assert graph.cost('c', 'b') == 1.0
    assert graph.cost('a', 'missing') == math.inf
    assert graph.neighbors('b') == [('c', 1.0)]
    assert graph.succ('a') == ['b']
    assert sorted(graph.pred('b')) == ['a', 'c']
    assert graph.nodes() == ['a', 'b', 'c']
    assert len(graph) == graph.number_of_nodes() == 3
    assert 'c' in graph
    assert graph.neighbors('unknown') == []


@pytest.mark.parametrize("cost", [-1.0, float('nan')])
def test_invalid_cost_rejected(cost):
    graph = Graph()
    with pytest.raises(InvalidCost) as excinfo:
        graph.set_cost('a', 'b', cost)
    assert excinfo.value.edge == ('a', 'b')
    assert isinstance(excinfo.value, ValueError)
    assert graph.cost('a', 'b') == math.inf


def test_set_cost_records_only_effective_changes():
    graph = Graph.from_edges([('a', 'b', 1.0)])
    assert graph.pending_changes() == []

    assert graph.set_cost('a', 'b', 1.0) is False
    assert graph.set_cost('a', 'b', math.inf) is True
    assert graph.pending_changes() == [CostChange(edge=('a', 'b'), new_cost=math.inf, old_cost=1.0)]

    changes = graph.drain_changes()
    assert len(changes) == 1
    assert graph.pending_changes() == []


def test_new_impassable_edge_is_not_a_change():
    graph = Graph()
    assert graph.set_cost('a', 'b', math.inf) is False
    assert graph.pending_changes() == []
    assert graph.succ('a') == ['b']

    assert graph.set_cost('a', 'b', 4.0) is True
    assert graph.drain_changes()[0].old_cost == math.inf


def test_apply_external_events():
    graph = Graph.from_edges([('a', 'b', 1.0), ('b', 'c', 1.0)])
    changed = graph.apply([
        CostChange(edge=('a', 'b'), new_cost=5.0),
        CostChange(edge=('b', 'c'), new_cost=1.0),
    ])

    assert changed == 1
    assert graph.cost('a', 'b') == 5.0
    assert [c.edge for c in graph.pending_changes()] == [('a', 'b')]


def test_from_edges_bidirectional():
    graph = Graph.from_edges([(1, 2, 3.0)], bidirectional=True)
    assert graph.cost(1, 2) == graph.cost(2, 1) == 3.0
    assert graph.pending_changes() == []
