import os

import numpy as np
import pandas as pd
import yaml

from .graph import adjacency_matrix


def append_to_csv(index_fp, row):
    """Append one row to a CSV index file, creating it if necessary."""
    if os.path.exists(index_fp):
        df = pd.read_csv(index_fp)
        df = pd.concat([df, pd.DataFrame([row])], ignore_index=True)
    else:
        df = pd.DataFrame([row])

    # Keep a stable column order
    cols = ["name", "fp_data", "fp_graph", "fp_meta", "split", "n_samples", "n_variables", "n_discrete"]
    df = df[[c for c in cols if c in df.columns] + [c for c in df.columns if c not in cols]]

    os.makedirs(os.path.dirname(os.path.abspath(index_fp)), exist_ok=True)
    df.to_csv(index_fp, index=False)


def make_serializable(obj):
    if isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(v) for v in obj]
    elif isinstance(obj, np.generic):
        return obj.item()
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


def save_dataset(dataset, dataset_dir, base_name=None, index_file=None, train_ratio=None, seed=None):
    """
    Save one simulated dataset.

    Writes ``<base>.csv``, ``<base>_adj_matrix.csv`` (rows and columns in
    causal order), ``<base>_meta.yaml`` and, when ``train_ratio`` is given,
    ``<base>_train.csv`` / ``<base>_test.csv``. If ``index_file`` is given one
    row per written split is appended to it.

    Args:
        dataset: SimulatedDataset to save
        dataset_dir: Directory to save dataset
        base_name: Base name for files (default: dataset_<name>)
        index_file: Index CSV path
        train_ratio: Fraction of rows for the training split, or None for no split
        seed: Seed for the split shuffle

    Returns:
        Path of the data CSV
    """
    os.makedirs(dataset_dir, exist_ok=True)
    base_name = base_name or f"dataset_{dataset.name}"
    dataframe = dataset.data
    metadata = make_serializable(dataset.metadata())

    data_fp = os.path.join(dataset_dir, f"{base_name}.csv")
    graph_fp = os.path.join(dataset_dir, f"{base_name}_adj_matrix.csv")
    meta_fp = os.path.join(dataset_dir, f"{base_name}_meta.yaml")

    dataframe.to_csv(data_fp, index=False)

    order = metadata["temporal_order"]
    pd.DataFrame(adjacency_matrix(dataset.graph, order), index=order, columns=order).to_csv(graph_fp)

    with open(meta_fp, "w") as f:
        yaml.safe_dump(metadata, f, default_flow_style=False, sort_keys=False)

    splits = {"full": dataframe}
    if train_ratio is not None:
        if not 0.0 < train_ratio < 1.0:
            raise ValueError("train_ratio must be in (0, 1)")
        n_train = int(len(dataframe) * train_ratio)
        indices = np.random.default_rng(seed).permutation(len(dataframe))
        splits = {
            "train": dataframe.iloc[indices[:n_train]].reset_index(drop=True),
            "test": dataframe.iloc[indices[n_train:]].reset_index(drop=True),
        }
        for split, df in splits.items():
            df.to_csv(os.path.join(dataset_dir, f"{base_name}_{split}.csv"), index=False)

    if index_file:
        for split, df in splits.items():
            append_to_csv(index_file, dict(
                name=base_name,
                fp_data=data_fp if split == "full" else os.path.join(dataset_dir, f"{base_name}_{split}.csv"),
                fp_graph=graph_fp,
                fp_meta=meta_fp,
                split=split,
                n_samples=len(df),
                n_variables=df.shape[1],
                n_discrete=len(dataset.discrete_columns),
            ))

    return data_fp
