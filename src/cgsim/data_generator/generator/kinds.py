"""
Assignment of continuous/discrete kinds to graph nodes.
"""

import logging
import math
from typing import Dict, List, Optional

import networkx as nx
import numpy as np

from .graph import make_mixed_graph

logger = logging.getLogger(__name__)


def num_discrete_nodes(num_nodes: int, percent_discrete: float) -> int:
    """Number of nodes made discrete: floor(|V| * p / 100)."""
    return int(math.floor(num_nodes * percent_discrete / 100.0))


class KindAssigner:
    """
    Partitions graph nodes into discrete and continuous ones.

    A single random permutation of the node names is drawn the first time a
    graph is seen and reused until :meth:`reset` is called, so repeated
    assignments over the same graph pick the same discrete nodes.
    """

    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        self._order: Optional[List[str]] = None

    @property
    def order(self) -> Optional[List[str]]:
        return None if self._order is None else list(self._order)

    def reset(self):
        self._order = None

    def _permutation(self, G: nx.DiGraph) -> List[str]:
        names = list(G.nodes)
        if self._order is None or set(self._order) != set(names):
            if self._order is not None:
                logger.debug("Node set changed; drawing a new kind permutation")
            self._order = [names[k] for k in self.rng.permutation(len(names))]
        return self._order

    def assign(self, G: nx.DiGraph, percent_discrete: float,
               min_categories: int, max_categories: int) -> Dict[str, int]:
        """
        Map every node name to a number of categories, 0 meaning continuous.

        The first floor(|V| * p / 100) nodes of the cached permutation become
        discrete with a category count drawn uniformly from [min, max].
        """
        order = self._permutation(G)
        n_discrete = num_discrete_nodes(len(order), percent_discrete)

        categories = {}
        for i, name in enumerate(order):
            if i < n_discrete:
                categories[name] = int(self.rng.integers(min_categories, max_categories + 1))
            else:
                categories[name] = 0
        return categories

    def make_mixed(self, G: nx.DiGraph, percent_discrete: float,
                   min_categories: int, max_categories: int) -> nx.DiGraph:
        """Assign kinds and return the freshly typed working graph."""
        categories = self.assign(G, percent_discrete, min_categories, max_categories)
        return make_mixed_graph(G, categories)
