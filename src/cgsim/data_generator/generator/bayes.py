"""
Randomized conditional probability tables over a discrete DAG.
"""

from typing import Dict, List, Sequence

import networkx as nx
import numpy as np

from .graph import get_variable, parents


class BayesIm:
    """
    Conditional probability model for a discrete graph.

    Each node has one probability row per combination of its parents'
    categories. Parents are ordered by their index in :attr:`variables`, and
    the row index of a parent assignment is its mixed-radix value.
    """

    def __init__(self, graph: nx.DiGraph):
        self.graph = graph
        self.variables = [get_variable(graph, name) for name in graph.nodes]
        for var in self.variables:
            if not var.is_discrete:
                raise ValueError(f"Node {var.name!r} is not discrete")

        self._index: Dict[str, int] = {v.name: i for i, v in enumerate(self.variables)}
        self._parents: List[List[int]] = [
            sorted(self._index[p] for p in parents(graph, v.name)) for v in self.variables
        ]
        self._dims: List[List[int]] = [
            [self.variables[p].num_categories for p in pars] for pars in self._parents
        ]
        self._tables: List[np.ndarray] = []
        for i, var in enumerate(self.variables):
            num_rows = int(np.prod(self._dims[i])) if self._dims[i] else 1
            self._tables.append(np.full((num_rows, var.num_categories), 1.0 / var.num_categories))

    @classmethod
    def random(cls, graph: nx.DiGraph, rng: np.random.Generator) -> "BayesIm":
        """Model whose rows are drawn uniformly from the probability simplex."""
        im = cls(graph)
        for table in im._tables:
            rows, cols = table.shape
            table[:, :] = rng.dirichlet(np.ones(cols), size=rows)
        return im

    def node_index(self, name: str) -> int:
        if name not in self._index:
            raise KeyError(f"Node {name!r} is not in the Bayes model")
        return self._index[name]

    def get_parents(self, node_index: int) -> List[int]:
        return list(self._parents[node_index])

    def get_parent_dims(self, node_index: int) -> List[int]:
        return list(self._dims[node_index])

    def get_num_rows(self, node_index: int) -> int:
        return self._tables[node_index].shape[0]

    def get_num_columns(self, node_index: int) -> int:
        return self._tables[node_index].shape[1]

    def get_row_index(self, node_index: int, values: Sequence[int]) -> int:
        dims = self._dims[node_index]
        if len(values) != len(dims):
            raise ValueError(f"Expected {len(dims)} parent values, got {len(values)}")
        row = 0
        for value, dim in zip(values, dims):
            if not 0 <= value < dim:
                raise ValueError(f"Parent value {value} out of range [0, {dim})")
            row = row * dim + int(value)
        return row

    def get_probability(self, node_index: int, row_index: int, category: int) -> float:
        return float(self._tables[node_index][row_index, category])

    def get_probabilities(self, node_index: int, row_index: int) -> np.ndarray:
        return self._tables[node_index][row_index]

    def set_probabilities(self, node_index: int, row_index: int, probabilities: Sequence[float]):
        probs = np.asarray(probabilities, dtype=float)
        if probs.shape != (self.get_num_columns(node_index),):
            raise ValueError("Probability row has the wrong number of categories")
        if np.any(probs < 0) or not np.isclose(probs.sum(), 1.0):
            raise ValueError("Probabilities must be non-negative and sum to 1")
        self._tables[node_index][row_index] = probs
