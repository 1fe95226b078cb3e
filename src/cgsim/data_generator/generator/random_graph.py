"""
Random forward DAG generator.

Nodes are placed in a random causal order and edges are only ever added from
earlier to later nodes, so the result is acyclic by construction.
"""

import logging
from typing import List, Optional

import networkx as nx
import numpy as np

from ..config_schema import GRAPH_PARAMETER_KEYS, RandomGraphConfig
from .graph import Variable, build_graph

logger = logging.getLogger(__name__)


class RandomForwardGraph:
    """Creates random DAGs with measured nodes ``X1..Xn`` and latent nodes ``L1..Lm``."""

    def create_graph(self, config: RandomGraphConfig, rng: Optional[np.random.Generator] = None) -> nx.DiGraph:
        """
        Generate a random DAG.

        Args:
            config: Graph parameters
            rng: Random source (a fresh unseeded one if None)

        Returns:
            Typed graph whose variables are all continuous; kinds are assigned later.
        """
        rng = rng if rng is not None else np.random.default_rng()

        nodes = [Variable.continuous(f"X{i + 1}") for i in range(config.num_measures)]
        nodes += [Variable.continuous(f"L{i + 1}", latent=True) for i in range(config.num_latents)]
        d = len(nodes)

        order = [nodes[k].name for k in rng.permutation(d)]
        pos = {name: k for k, name in enumerate(order)}

        max_edges = d * (d - 1) // 2
        target = min(int(round(config.avg_degree * d / 2)), max_edges)

        indeg = {name: 0 for name in order}
        outdeg = {name: 0 for name in order}
        edges = set()

        def can_add(a: str, b: str) -> bool:
            if (a, b) in edges:
                return False
            if outdeg[a] >= config.max_outdegree or indeg[b] >= config.max_indegree:
                return False
            if indeg[a] + outdeg[a] >= config.max_degree or indeg[b] + outdeg[b] >= config.max_degree:
                return False
            return True

        def add(a: str, b: str):
            edges.add((a, b))
            outdeg[a] += 1
            indeg[b] += 1

        if config.connected:
            # attach each later node to some earlier one
            for j in range(1, d):
                child = order[j]
                candidates = [p for p in order[:j] if can_add(p, child)]
                if candidates:
                    add(candidates[int(rng.integers(0, len(candidates)))], child)

        candidates = [(order[i], order[j]) for i in range(d) for j in range(i + 1, d)]
        for k in rng.permutation(len(candidates)):
            if len(edges) >= target:
                break
            a, b = candidates[k]
            if can_add(a, b):
                add(a, b)

        ordered_edges = sorted(edges, key=lambda e: (pos[e[0]], pos[e[1]]))
        G = build_graph(nodes, ordered_edges)
        logger.debug(f"Created graph with {G.number_of_nodes()} nodes and {G.number_of_edges()} edges")
        return G

    def get_description(self) -> str:
        return "graph constructed by adding random forward edges"

    def get_parameters(self) -> List[str]:
        return list(GRAPH_PARAMETER_KEYS)
