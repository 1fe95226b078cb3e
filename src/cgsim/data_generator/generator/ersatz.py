"""
Ersatz builder: discrete stand-ins for continuous parents of discrete nodes.

The discrete conditional probability model can only condition on discrete
parents. Each continuous parent of a discrete node is therefore represented in
the discrete sub-graph by a proxy ``Ersatz_<name>`` with 2-4 categories. At
sampling time the proxy's value is the equal-frequency bucket of the live
continuous value.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import networkx as nx
import numpy as np

from .graph import VARIABLE_ATTR, Variable, continuous_nodes, discrete_nodes, get_variable, parents, subgraph

ERSATZ_PREFIX = "Ersatz_"
MIN_ERSATZ_CATEGORIES = 2
MAX_ERSATZ_CATEGORIES = 4


@dataclass
class ErsatzMapping:
    """Bidirectional continuous node <-> discrete proxy association."""
    proxies: Dict[str, Variable] = field(default_factory=dict)
    originals: Dict[str, str] = field(default_factory=dict)

    def __len__(self):
        return len(self.proxies)

    def __contains__(self, name: str) -> bool:
        return name in self.proxies

    def proxy_for(self, name: str) -> Variable:
        return self.proxies[name]

    def original_of(self, proxy_name: str) -> Optional[str]:
        """Continuous node behind a proxy, or None for a genuine discrete node."""
        return self.originals.get(proxy_name)

    def register(self, name: str, proxy: Variable):
        self.proxies[name] = proxy
        self.originals[proxy.name] = name


def build_discrete_graph(G: nx.DiGraph, rng: np.random.Generator) -> Tuple[nx.DiGraph, ErsatzMapping]:
    """
    Discrete sub-graph of the working graph augmented with ersatz proxies.

    Args:
        G: Working mixed graph
        rng: Random source for proxy cardinalities

    Returns:
        (discrete graph, mapping). Edges x -> y with x continuous and y
        discrete appear as Ersatz_x -> y.
    """
    AG = subgraph(G, discrete_nodes(G))
    mapping = ErsatzMapping()

    for y in discrete_nodes(G):
        for x in parents(G, y):
            if not get_variable(G, x).is_continuous:
                continue
            if x not in mapping:
                proxy_name = ERSATZ_PREFIX + x
                if proxy_name in G:
                    raise ValueError(f"Ersatz name {proxy_name!r} collides with an existing node")
                k = int(rng.integers(MIN_ERSATZ_CATEGORIES, MAX_ERSATZ_CATEGORIES + 1))
                proxy = Variable.discrete(proxy_name, k)
                mapping.register(x, proxy)
                AG.add_node(proxy_name, **{VARIABLE_ATTR: proxy})
            AG.add_edge(mapping.proxy_for(x).name, y)

    return AG, mapping


def build_continuous_graph(G: nx.DiGraph) -> nx.DiGraph:
    """Continuous sub-graph of the working graph."""
    return subgraph(G, continuous_nodes(G))
