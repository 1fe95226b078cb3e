import networkx as nx
import numpy as np
import pytest

from cgsim.data_generator.config_schema import RandomGraphConfig
from cgsim.data_generator.generator.graph import (
    Variable,
    VariableKind,
    adjacency_matrix,
    build_graph,
    causal_ordering,
    get_variable,
    make_mixed_graph,
    measured_nodes,
    parents,
    subgraph,
)
from cgsim.data_generator.generator.random_graph import RandomForwardGraph


def test_variable_validation():
    with pytest.raises(ValueError):
        Variable.discrete("A", 1)
    with pytest.raises(ValueError):
        Variable("X", VariableKind.CONTINUOUS, num_categories=3)
    assert Variable.discrete("A", 2).is_discrete
    assert Variable.continuous("X").is_continuous


def test_make_mixed_graph_is_pure():
    G = build_graph(
        [Variable.continuous("X1"), Variable.continuous("X2"), Variable.continuous("L1", latent=True)],
        [("X1", "X2"), ("L1", "X2")],
    )
    mixed = make_mixed_graph(G, {"X1": 3, "X2": 0, "L1": 2})

    # source graph untouched
    assert get_variable(G, "X1").is_continuous
    assert get_variable(mixed, "X1") == Variable.discrete("X1", 3)
    assert get_variable(mixed, "X2").is_continuous
    assert get_variable(mixed, "L1").latent
    assert list(mixed.nodes) == list(G.nodes)
    assert set(mixed.edges) == set(G.edges)


def test_make_mixed_graph_requires_every_node():
    G = build_graph([Variable.continuous("X1"), Variable.continuous("X2")], [("X1", "X2")])
    with pytest.raises(KeyError):
        make_mixed_graph(G, {"X1": 0})


def test_untyped_nodes_rejected_outside_make_mixed_graph():
    G = nx.DiGraph()
    G.add_edge("X1", "X2")
    with pytest.raises(KeyError):
        get_variable(G, "X1")
    with pytest.raises(KeyError):
        measured_nodes(G)

    mixed = make_mixed_graph(G, {"X1": 2, "X2": 0})
    assert get_variable(mixed, "X1") == Variable.discrete("X1", 2)
    assert get_variable(mixed, "X2") == Variable.continuous("X2")


def test_causal_ordering_and_cycles():
    G = build_graph([Variable.continuous(n) for n in "abc"], [("c", "b"), ("b", "a")])
    assert causal_ordering(G) == ["c", "b", "a"]
    G.add_edge("a", "c")
    with pytest.raises(ValueError):
        causal_ordering(G)


def test_parents_follow_node_order():
    G = build_graph([Variable.continuous(n) for n in "abcd"], [("c", "d"), ("a", "d"), ("b", "d")])
    assert parents(G, "d") == ["a", "b", "c"]
    with pytest.raises(KeyError):
        parents(G, "z")


def test_subgraph_and_adjacency():
    G = build_graph([Variable.continuous(n) for n in "abc"], [("a", "b"), ("b", "c")])
    sub = subgraph(G, ["a", "b"])
    assert list(sub.edges) == [("a", "b")]
    sub.add_edge("b", "a")
    assert not G.has_edge("b", "a")

    adj = adjacency_matrix(G, ["c", "b", "a"])
    assert adj[1, 0] == 1 and adj[2, 1] == 1
    assert adj.sum() == 2


def test_random_forward_graph_shape():
    cfg = RandomGraphConfig(num_measures=8, num_latents=2, avg_degree=3)
    G = RandomForwardGraph().create_graph(cfg, np.random.default_rng(0))

    assert G.number_of_nodes() == 10
    assert nx.is_directed_acyclic_graph(G)
    assert G.number_of_edges() <= round(3 * 10 / 2)
    assert set(measured_nodes(G)) == {f"X{i}" for i in range(1, 9)}
    assert all(get_variable(G, f"L{i}").latent for i in (1, 2))


def test_random_forward_graph_degree_limits():
    cfg = RandomGraphConfig(num_measures=12, avg_degree=6, max_indegree=2, max_outdegree=3)
    G = RandomForwardGraph().create_graph(cfg, np.random.default_rng(1))
    assert max(d for _, d in G.in_degree()) <= 2
    assert max(d for _, d in G.out_degree()) <= 3


def test_random_forward_graph_connected():
    cfg = RandomGraphConfig(num_measures=9, avg_degree=0.5, connected=True)
    G = RandomForwardGraph().create_graph(cfg, np.random.default_rng(3))
    assert nx.is_weakly_connected(G)


def test_random_forward_graph_reproducible():
    cfg = RandomGraphConfig(num_measures=7, avg_degree=2)
    g1 = RandomForwardGraph().create_graph(cfg, np.random.default_rng(11))
    g2 = RandomForwardGraph().create_graph(cfg, np.random.default_rng(11))
    assert list(g1.edges) == list(g2.edges)
