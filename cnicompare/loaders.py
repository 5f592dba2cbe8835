"""CSV loaders for the three input tables.

Each loader checks the configured columns exist, renames them to the
canonical names used throughout the package and returns a fresh frame:

- clusters:      genome_id, cluster_id
- cluster names: cluster_id, cni_species
- NCBI metadata: genome_id, ncbi_organism_name (+ any other assembly fields)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import pandas as pd

from .config import ComparisonConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputTables:
    """The three input relations after column normalization."""

    clusters: pd.DataFrame
    cluster_names: pd.DataFrame
    ncbi_metadata: pd.DataFrame


def read_table(path: Path, columns: Dict[str, str], label: str) -> pd.DataFrame:
    """Read a CSV and rename `columns` (source -> canonical); identifiers are read as strings."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{label} table not found: {path}")

    header = pd.read_csv(path, nrows=0).columns
    missing = set(columns).difference(header)
    if missing:
        raise ValueError(f"{label} table {path} missing required columns: {sorted(missing)}")

    df = pd.read_csv(path, dtype={src: str for src in columns})
    df = df.rename(columns=columns)
    logger.info("Loaded %s table: %d rows from %s", label, len(df), path)
    return df


def load_clusters(config: ComparisonConfig) -> pd.DataFrame:
    df = read_table(
        config.clusters_path,
        {config.genome_column: "genome_id", config.cluster_column: "cluster_id"},
        "cluster assignment",
    )
    return df[["genome_id", "cluster_id"]]


def load_cluster_names(config: ComparisonConfig) -> pd.DataFrame:
    df = read_table(
        config.cluster_names_path,
        {config.names_key_column: "cluster_id", config.cluster_species_column: "cni_species"},
        "cluster species name",
    )
    return df[["cluster_id", "cni_species"]]


def load_ncbi_metadata(config: ComparisonConfig) -> pd.DataFrame:
    # Other assembly-report fields are carried along untouched.
    return read_table(
        config.ncbi_metadata_path,
        {config.ncbi_key_column: "genome_id", config.ncbi_species_column: "ncbi_organism_name"},
        "NCBI metadata",
    )


def load_inputs(config: ComparisonConfig) -> InputTables:
    return InputTables(
        clusters=load_clusters(config),
        cluster_names=load_cluster_names(config),
        ncbi_metadata=load_ncbi_metadata(config),
    )
