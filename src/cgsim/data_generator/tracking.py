"""
MLflow logging of simulated data sets.
"""

import json

import mlflow

from .generator.utils import make_serializable

DEFAULT_EXPERIMENT = "conditional_gaussian_simulation"


def log_simulation(simulation, config, experiment_name=DEFAULT_EXPERIMENT):
    """Log one MLflow run per data set: config as params, table shape as metrics."""
    mlflow.set_experiment(experiment_name)
    params = make_serializable(config.to_parameters())

    for i in range(simulation.get_num_data_models()):
        dataset = simulation.get_dataset(i)
        with mlflow.start_run(run_name=f"dataset_{dataset.name}"):
            mlflow.log_param("description", simulation.get_description())
            for k, v in params.items():
                mlflow.log_param(k, v)
            mlflow.log_metric("n_samples", dataset.data.shape[0])
            mlflow.log_metric("n_columns", dataset.data.shape[1])
            mlflow.log_metric("n_discrete", len(dataset.discrete_columns))
            mlflow.log_metric("n_edges", dataset.graph.number_of_edges())
            mlflow.log_text(json.dumps(make_serializable(dataset.metadata()), indent=2), "metadata.json")
