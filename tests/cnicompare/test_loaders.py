from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from cnicompare.config import ComparisonConfig
from cnicompare.loaders import load_inputs


def _write_inputs(data_dir: Path, metadata: pd.DataFrame | None = None) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    pd.DataFrame({"accession": ["GCA_1", "GCA_2"], "cluster": ["007", "008"]}).to_csv(
        data_dir / "genome_clusters.csv", index=False
    )
    pd.DataFrame({"cluster": ["007", "008"], "species": ["Listeria monocytogenes", "Escherichia coli"]}).to_csv(
        data_dir / "cluster_species_names.csv", index=False
    )
    if metadata is None:
        metadata = pd.DataFrame(
            {
                "accession": ["GCA_1", "GCA_2"],
                "organism_name": ["Listeria monocytogenes EGD-e", "Escherichia coli K-12"],
                "assembly_level": ["Complete Genome", "Contig"],
            }
        )
    metadata.to_csv(data_dir / "ncbi_assembly_metadata.csv", index=False)


def _config(data_dir: Path) -> ComparisonConfig:
    return ComparisonConfig(
        data_dir=data_dir,
        genome_column="accession",
        cluster_column="cluster",
        cluster_species_column="species",
    )


def test_load_inputs_renames_to_canonical_columns(tmp_path):
    _write_inputs(tmp_path)
    inputs = load_inputs(_config(tmp_path))

    assert inputs.clusters.columns.tolist() == ["genome_id", "cluster_id"]
    assert inputs.cluster_names.columns.tolist() == ["cluster_id", "cni_species"]
    assert {"genome_id", "ncbi_organism_name", "assembly_level"} <= set(inputs.ncbi_metadata.columns)
    # identifiers keep leading zeros
    assert inputs.clusters["cluster_id"].tolist() == ["007", "008"]


def test_missing_column_raises(tmp_path):
    _write_inputs(tmp_path, metadata=pd.DataFrame({"accession": ["GCA_1"], "species": ["Listeria monocytogenes"]}))

    with pytest.raises(ValueError, match="organism_name"):
        load_inputs(_config(tmp_path))


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="genome_clusters.csv"):
        load_inputs(_config(tmp_path / "nowhere"))


def test_per_table_key_columns(tmp_path):
    pd.DataFrame({"genome": ["GCA_1", "GCA_2"], "cluster": ["007", "008"]}).to_csv(
        tmp_path / "genome_clusters.csv", index=False
    )
    pd.DataFrame({"cluster_number": ["007", "008"], "species": ["Listeria monocytogenes", "Escherichia coli"]}).to_csv(
        tmp_path / "cluster_species_names.csv", index=False
    )
    pd.DataFrame(
        {
            "assembly_accession": ["GCA_1", "GCA_2"],
            "organism_name": ["Listeria monocytogenes EGD-e", "Escherichia coli K-12"],
        }
    ).to_csv(tmp_path / "ncbi_assembly_metadata.csv", index=False)
    cfg = ComparisonConfig(
        data_dir=tmp_path,
        genome_column="genome",
        cluster_column="cluster",
        ncbi_genome_column="assembly_accession",
        names_cluster_column="cluster_number",
        cluster_species_column="species",
    )

    inputs = load_inputs(cfg)

    assert inputs.clusters.columns.tolist() == ["genome_id", "cluster_id"]
    assert inputs.cluster_names.columns.tolist() == ["cluster_id", "cni_species"]
    assert inputs.cluster_names["cluster_id"].tolist() == ["007", "008"]
    assert inputs.ncbi_metadata["genome_id"].tolist() == ["GCA_1", "GCA_2"]


def test_per_table_key_columns_default_to_shared_names():
    cfg = ComparisonConfig(genome_column="accession", cluster_column="cluster")

    assert cfg.ncbi_key_column == "accession"
    assert cfg.names_key_column == "cluster"
