"""
Structural parameter schema for the continuous sub-graph.

Parameters are opaque handles; their numeric values are drawn lazily by the
parameter cache, once per combination of discrete parent values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import networkx as nx

from .graph import get_variable


class ParamType(str, Enum):
    COEF = "coef"
    MEAN = "mean"
    VAR = "var"
    BETA = "beta"


@dataclass(frozen=True)
class Parameter:
    name: str
    type: ParamType
    node_a: str
    node_b: Optional[str] = None


class SemPm:
    """Mean and variance parameters per node, coefficient and beta per edge."""

    def __init__(self, graph: nx.DiGraph):
        self.graph = graph
        self._means: Dict[str, Parameter] = {}
        self._variances: Dict[str, Parameter] = {}
        self._coefs: Dict[Tuple[str, str], Parameter] = {}
        self._betas: Dict[Tuple[str, str], Parameter] = {}

        for i, name in enumerate(graph.nodes):
            if not get_variable(graph, name).is_continuous:
                raise ValueError(f"Node {name!r} is not continuous")
            self._means[name] = Parameter(f"Mean_{name}", ParamType.MEAN, name)
            self._variances[name] = Parameter(f"T{i + 1}", ParamType.VAR, name, name)

        for i, (x, y) in enumerate(graph.edges):
            self._coefs[(x, y)] = Parameter(f"B{i + 1}", ParamType.COEF, x, y)
            self._betas[(x, y)] = Parameter(f"Beta{i + 1}", ParamType.BETA, x, y)

    def get_mean_parameter(self, node: str) -> Parameter:
        if node not in self._means:
            raise KeyError(f"No mean parameter for node {node!r}")
        return self._means[node]

    def get_variance_parameter(self, node: str) -> Parameter:
        if node not in self._variances:
            raise KeyError(f"No variance parameter for node {node!r}")
        return self._variances[node]

    def get_coef_parameter(self, parent: str, child: str) -> Parameter:
        if (parent, child) not in self._coefs:
            raise KeyError(f"No coefficient parameter for edge {parent} -> {child}")
        return self._coefs[(parent, child)]

    def get_beta_parameter(self, parent: str, child: str) -> Parameter:
        if (parent, child) not in self._betas:
            raise KeyError(f"No beta parameter for edge {parent} -> {child}")
        return self._betas[(parent, child)]

    def get_parameters(self) -> List[Parameter]:
        return (list(self._coefs.values()) + list(self._betas.values())
                + list(self._variances.values()) + list(self._means.values()))
