"""
Conditional Gaussian simulation over random graphs.

One call to :meth:`ConditionalGaussianSimulation.create_data` produces
``num_runs`` data sets. Each run assigns kinds to the graph's nodes, builds the
ersatz-augmented discrete sub-graph and its random conditional probability
tables, builds the continuous parameter schema, and samples a fresh table with
its own parameter and breakpoint caches.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import networkx as nx
import numpy as np
import pandas as pd

from ..config_schema import SIMULATION_PARAMETER_KEYS, SimulationConfig
from .bayes import BayesIm
from .ersatz import build_continuous_graph, build_discrete_graph
from .graph import causal_ordering, discrete_nodes, get_variable, measured_nodes
from .kinds import KindAssigner
from .parameters import ParameterRanges
from .random_graph import RandomForwardGraph
from .sampler import TopologicalSampler
from .sem import SemPm

logger = logging.getLogger(__name__)


class DataType(str, Enum):
    CONTINUOUS = "continuous"
    DISCRETE = "discrete"
    MIXED = "mixed"


@dataclass
class SimulatedDataset:
    """A finished data table, its sequence label, and the graph that generated it."""
    name: str
    data: pd.DataFrame
    graph: nx.DiGraph

    @property
    def discrete_columns(self) -> List[str]:
        kinds = set(discrete_nodes(self.graph))
        return [c for c in self.data.columns if c in kinds]

    def metadata(self) -> dict:
        return {
            "name": self.name,
            "n_samples": int(len(self.data)),
            "columns": list(self.data.columns),
            "discrete_columns": self.discrete_columns,
            "variables": [get_variable(self.graph, n).to_dict() for n in self.graph.nodes],
            "edges": [list(e) for e in self.graph.edges],
            "temporal_order": causal_ordering(self.graph),
        }


def restrict_to_measured(data: pd.DataFrame, graph: nx.DiGraph) -> pd.DataFrame:
    """Drop the columns of latent variables."""
    keep = set(measured_nodes(graph))
    return data[[c for c in data.columns if c in keep]]


def reorder_columns(data: pd.DataFrame, rng: np.random.Generator) -> pd.DataFrame:
    """Random permutation of the table's columns."""
    cols = list(data.columns)
    return data[[cols[k] for k in rng.permutation(len(cols))]]


class ConditionalGaussianSimulation:
    """Mixed discrete/continuous simulation under the conditional Gaussian model."""

    def __init__(self, random_graph: Optional[RandomForwardGraph] = None):
        self.random_graph = random_graph if random_graph is not None else RandomForwardGraph()
        self.data_sets: List[SimulatedDataset] = []
        self.data_type: Optional[DataType] = None
        self.rng: Optional[np.random.Generator] = None
        self.kind_assigner: Optional[KindAssigner] = None

    def create_data(self, config: SimulationConfig, new_model: bool = True) -> None:
        """
        Simulate ``config.num_runs`` data sets.

        Args:
            config: Simulation configuration; validated before anything is drawn
            new_model: If False and data already exists, keep the existing data
        """
        if not new_model and self.data_sets:
            return

        config.validate()
        self.data_type = DataType(config.data_type)
        self.rng = np.random.default_rng(config.seed)
        self.kind_assigner = KindAssigner(self.rng)

        graph = self.random_graph.create_graph(config.graph, self.rng)
        self.data_sets = []

        for i in range(config.num_runs):
            logger.info(f"Simulating dataset #{i + 1}")

            if config.different_graphs and i > 0:
                graph = self.random_graph.create_graph(config.graph, self.rng)
            if config.kind_order_scope == "run":
                self.kind_assigner.reset()

            data, mixed_graph = self.simulate(graph, config)
            if config.randomize_columns:
                data = reorder_columns(data, self.rng)

            self.data_sets.append(SimulatedDataset(name=str(i + 1), data=data, graph=mixed_graph))

    def simulate(self, graph: nx.DiGraph, config: SimulationConfig):
        """
        Sample one data set from ``graph``.

        Returns:
            (data frame, working mixed graph)
        """
        if self.rng is None:
            self.rng = np.random.default_rng(config.seed)
        if self.kind_assigner is None:
            self.kind_assigner = KindAssigner(self.rng)

        mixed = self.kind_assigner.make_mixed(
            graph, config.percent_discrete, config.min_categories, config.max_categories
        )

        discrete_graph, ersatz = build_discrete_graph(mixed, self.rng)
        bayes_im = BayesIm.random(discrete_graph, self.rng)
        sem_pm = SemPm(build_continuous_graph(mixed))

        logger.debug(f"{len(discrete_nodes(mixed))} discrete nodes, {len(ersatz)} ersatz proxies")

        sampler = TopologicalSampler(
            mixed, bayes_im, sem_pm, ersatz,
            ranges=ParameterRanges.from_config(config),
            rng=self.rng,
            sample_size=config.sample_size,
            gamma_low=config.gamma_low,
            gamma_high=config.gamma_high,
        )
        data = sampler.run()

        if not config.save_latent_vars:
            data = restrict_to_measured(data, mixed)
        return data, mixed

    def get_true_graph(self, index: int) -> nx.DiGraph:
        return self.data_sets[index].graph

    def get_data_model(self, index: int) -> pd.DataFrame:
        return self.data_sets[index].data

    def get_dataset(self, index: int) -> SimulatedDataset:
        return self.data_sets[index]

    def get_description(self) -> str:
        return "Conditional Gaussian simulation using " + self.random_graph.get_description()

    def get_parameters(self) -> List[str]:
        parameters = self.random_graph.get_parameters()
        parameters.extend(SIMULATION_PARAMETER_KEYS)
        return parameters

    def get_num_data_models(self) -> int:
        return len(self.data_sets)

    def get_data_type(self) -> Optional[DataType]:
        return self.data_type
