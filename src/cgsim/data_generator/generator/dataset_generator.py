"""
Simple, unified dataset generator for causal discovery algorithm testing.
Runs a conditional Gaussian simulation and saves every data set it produces.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from ..config_schema import SimulationConfig
from .simulation import ConditionalGaussianSimulation
from .utils import save_dataset

logger = logging.getLogger(__name__)


def validate_dataset(df: pd.DataFrame) -> tuple[bool, str]:
    """
    Validate dataset for NaN and Inf values.

    Args:
        df: DataFrame to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if len(df) == 0:
        return False, "DataFrame is empty"

    if df.isnull().any().any():
        nan_cols = df.columns[df.isnull().any()].tolist()
        return False, f"Found NaN values in columns: {nan_cols}"

    numeric_cols = df.select_dtypes(include=[np.number])
    if not numeric_cols.empty:
        if np.isinf(numeric_cols).any().any():
            inf_cols = numeric_cols.columns[np.isinf(numeric_cols).any()].tolist()
            return False, f"Found Inf values in columns: {inf_cols}"

    return True, ""


def generate_all_datasets(
    config: SimulationConfig,
    output_dir: str = "cg_datasets",
    index_file: Optional[str] = None,
    train_ratio: Optional[float] = None,
    simulation: Optional[ConditionalGaussianSimulation] = None,
) -> List[str]:
    """
    Simulate ``config.num_runs`` data sets and save them under ``output_dir``.

    Args:
        config: Simulation configuration
        output_dir: Root directory, one sub-directory per data set
        index_file: Index CSV path (default: <output_dir>/index.csv)
        train_ratio: Optional train/test split ratio
        simulation: Simulation to use (a new one if None)

    Returns:
        Paths of the written data CSVs
    """
    simulation = simulation or ConditionalGaussianSimulation()
    Path(output_dir).mkdir(parents=True, exist_ok=True)
    if index_file is None:
        index_file = os.path.join(output_dir, "index.csv")

    logger.info(simulation.get_description())
    simulation.create_data(config)

    written = []
    for i in range(simulation.get_num_data_models()):
        dataset = simulation.get_dataset(i)
        is_valid, message = validate_dataset(dataset.data)
        if not is_valid:
            raise ValueError(f"Dataset {dataset.name} is invalid: {message}")

        base_name = f"dataset_{int(dataset.name):03d}"
        dataset_dir = os.path.join(output_dir, base_name)
        split_seed = None if config.seed is None else config.seed + i
        written.append(save_dataset(dataset, dataset_dir, base_name, index_file, train_ratio, split_seed))
        logger.info(f"[{i + 1}/{config.num_runs}] Saved {base_name} "
                    f"({dataset.data.shape[0]} rows, {dataset.data.shape[1]} columns)")

    return written
