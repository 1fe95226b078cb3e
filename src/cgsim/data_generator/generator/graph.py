"""
Typed variables and pure transformations over mixed causal graphs.

Graphs are ``networkx.DiGraph`` objects keyed by variable name. Every node
carries its :class:`Variable` under the ``variable`` attribute; transformations
always build a new graph and never mutate a variable in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

import networkx as nx
import numpy as np

VARIABLE_ATTR = "variable"


class VariableKind(str, Enum):
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"


@dataclass(frozen=True)
class Variable:
    """A graph node: a name, a kind, and the number of categories if discrete."""
    name: str
    kind: VariableKind = VariableKind.CONTINUOUS
    num_categories: Optional[int] = None
    latent: bool = False

    def __post_init__(self):
        if self.kind == VariableKind.DISCRETE:
            if self.num_categories is None or self.num_categories < 2:
                raise ValueError(f"Discrete variable {self.name!r} needs at least 2 categories")
        elif self.num_categories is not None:
            raise ValueError(f"Continuous variable {self.name!r} cannot have categories")

    @classmethod
    def continuous(cls, name: str, latent: bool = False) -> "Variable":
        return cls(name, VariableKind.CONTINUOUS, None, latent)

    @classmethod
    def discrete(cls, name: str, num_categories: int, latent: bool = False) -> "Variable":
        return cls(name, VariableKind.DISCRETE, num_categories, latent)

    @property
    def is_discrete(self) -> bool:
        return self.kind == VariableKind.DISCRETE

    @property
    def is_continuous(self) -> bool:
        return self.kind == VariableKind.CONTINUOUS

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "num_categories": self.num_categories,
            "latent": self.latent,
        }


def build_graph(variables: Iterable[Variable], edges: Iterable = ()) -> nx.DiGraph:
    """Create a typed graph from variables and (parent, child) name pairs."""
    G = nx.DiGraph()
    for var in variables:
        G.add_node(var.name, **{VARIABLE_ATTR: var})
    for parent, child in edges:
        if parent not in G or child not in G:
            raise KeyError(f"Edge ({parent}, {child}) references an unknown node")
        G.add_edge(parent, child)
    return G


def get_variable(G: nx.DiGraph, name: str) -> Variable:
    """Typed variable of a node; raises KeyError if the node is missing or untyped."""
    if name not in G:
        raise KeyError(f"Node {name!r} is not in the graph")
    var = G.nodes[name].get(VARIABLE_ATTR)
    if var is None:
        raise KeyError(f"Node {name!r} carries no {VARIABLE_ATTR!r} attribute")
    return var


def variables(G: nx.DiGraph) -> List[Variable]:
    return [get_variable(G, name) for name in G.nodes]


def parents(G: nx.DiGraph, name: str) -> List[str]:
    """Parents of ``name`` in the graph's node order."""
    if name not in G:
        raise KeyError(f"Node {name!r} is not in the graph")
    preds = set(G.predecessors(name))
    return [n for n in G.nodes if n in preds]


def causal_ordering(G: nx.DiGraph) -> List[str]:
    """Topological order of the graph; raises ValueError if it has a cycle."""
    try:
        return list(nx.topological_sort(G))
    except nx.NetworkXUnfeasible as e:
        raise ValueError("Graph is cyclic; no causal ordering exists") from e


def make_mixed_graph(G: nx.DiGraph, categories: Dict[str, int]) -> nx.DiGraph:
    """
    Rebuild ``G`` with freshly typed variables.

    Args:
        G: Source graph; untyped nodes are read as measured variables
        categories: Node name -> number of categories, 0 meaning continuous

    Returns:
        New graph with the same node order and edges, re-pointed by name.
    """
    new_vars = []
    for name in G.nodes:
        if name not in categories:
            raise KeyError(f"No kind assigned to node {name!r}")
        old = G.nodes[name].get(VARIABLE_ATTR)
        latent = old.latent if old is not None else False
        k = categories[name]
        if k > 0:
            new_vars.append(Variable.discrete(name, k, latent=latent))
        else:
            new_vars.append(Variable.continuous(name, latent=latent))
    return build_graph(new_vars, G.edges)


def subgraph(G: nx.DiGraph, names: Iterable[str]) -> nx.DiGraph:
    """Induced subgraph as an independent copy."""
    keep = set(names)
    missing = keep - set(G.nodes)
    if missing:
        raise KeyError(f"Nodes {sorted(missing)} are not in the graph")
    return G.subgraph([n for n in G.nodes if n in keep]).copy()


def discrete_nodes(G: nx.DiGraph) -> List[str]:
    return [v.name for v in variables(G) if v.is_discrete]


def continuous_nodes(G: nx.DiGraph) -> List[str]:
    return [v.name for v in variables(G) if v.is_continuous]


def measured_nodes(G: nx.DiGraph) -> List[str]:
    return [v.name for v in variables(G) if not v.latent]


def adjacency_matrix(G: nx.DiGraph, order: Optional[List[str]] = None) -> np.ndarray:
    """Adjacency matrix with ``adj[i, j] = 1`` for ``order[i] -> order[j]``."""
    nodelist = list(order) if order is not None else list(G.nodes)
    return nx.to_numpy_array(G, nodelist=nodelist, dtype=int)
