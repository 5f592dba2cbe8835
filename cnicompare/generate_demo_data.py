"""
Generate demonstration inputs for the CNI vs NCBI comparison.

This script writes the three flat input tables (cluster assignment,
cluster species names, NCBI assembly metadata) with a realistic mix of
concordant species, split and merged species, NCBI placeholder labels and
one cluster without a species name, so the whole comparison can run
without the real data.

Usage:
    python -m cnicompare.generate_demo_data
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import numpy as np
import pandas as pd

# Configuration
DATA_DIR = Path("data")

# NCBI organism name -> (genome count, {CNI species: fraction})
TAXA_CONFIG: Dict[str, tuple[int, Dict[str, float]]] = {
    # one-to-one
    "Salmonella enterica": (200, {"Salmonella enterica": 1.0}),
    "Listeria monocytogenes": (120, {"Listeria monocytogenes": 1.0}),
    "Bacillus subtilis": (80, {"Bacillus subtilis": 1.0}),
    "Listeria innocua": (40, {"Listeria innocua": 1.0}),
    # NCBI species split by the clustering
    "Escherichia coli": (160, {"Escherichia coli": 0.8, "Escherichia coli_B": 0.2}),
    "Klebsiella pneumoniae": (90, {"Klebsiella pneumoniae": 0.7, "Klebsiella quasipneumoniae": 0.3}),
    # NCBI species merged by the clustering
    "Citrobacter freundii": (50, {"Citrobacter freundii": 1.0}),
    "Citrobacter portucalensis": (20, {"Citrobacter freundii": 1.0}),
    "Escherichia fergusonii": (25, {"Escherichia coli": 1.0}),
}

# Placeholder NCBI labels -> (genome count, {CNI species: fraction})
UNCLASSIFIED_CONFIG: Dict[str, tuple[int, Dict[str, float]]] = {
    "Bacillus sp.": (30, {"Bacillus subtilis": 0.5, "Bacillus velezensis": 0.5}),
    "Enterobacteriaceae bacterium": (15, {"Escherichia coli": 0.4, "Citrobacter freundii": 0.6}),
    "uncultured Klebsiella": (10, {"Klebsiella pneumoniae": 1.0}),
    "Citrobacter": (8, {"Citrobacter freundii": 1.0}),
    "": (12, {"Salmonella enterica": 0.75, "Listeria monocytogenes": 0.25}),
}

# Genomes placed in a cluster that has no species name
N_UNNAMED = 5


def _draw_species(rng: np.random.Generator, mapping: Dict[str, float], n: int) -> np.ndarray:
    names = list(mapping)
    probs = np.array([mapping[k] for k in names], dtype=np.float64)
    return rng.choice(names, size=n, p=probs / probs.sum())


def _organism_name(base: str, i: int, rng: np.random.Generator) -> str:
    if not base:
        return ""
    if base.endswith("sp."):
        return f"{base} {rng.integers(100, 999)}-{i}"
    # Strain suffixes must not split a species after cleanup
    if rng.random() < 0.4:
        return f"{base} strain FDA{i:05d}"
    return base


def generate_demo_dataset(output_dir: Path = DATA_DIR, seed: int = 42, scale: float = 1.0) -> Dict[str, Path]:
    """Generate the three input CSVs and return their paths."""
    print("Generating CNI/NCBI demonstration dataset...")
    print(f"Scale factor: {scale}")

    rng = np.random.default_rng(seed)
    records = []
    counter = 0
    for config in (TAXA_CONFIG, UNCLASSIFIED_CONFIG):
        for base, (n, mapping) in config.items():
            n = max(2, int(n * scale))
            cni = _draw_species(rng, mapping, n)
            for j in range(n):
                counter += 1
                records.append(
                    {
                        "genome_id": f"GCA_{counter:09d}.1",
                        "organism_name": _organism_name(base, counter, rng),
                        "cni_species": cni[j],
                    }
                )
    genomes = pd.DataFrame(records)

    species = sorted(genomes["cni_species"].unique())
    cluster_of = {sp: f"C{i + 1:04d}" for i, sp in enumerate(species)}
    genomes["cluster_id"] = genomes["cni_species"].map(cluster_of)

    unnamed_idx = rng.choice(len(genomes), size=min(N_UNNAMED, len(genomes)), replace=False)
    genomes.loc[unnamed_idx, "cluster_id"] = f"C{len(species) + 1:04d}"

    clusters = genomes[["genome_id", "cluster_id"]]
    names = pd.DataFrame({"cluster_id": list(cluster_of.values()), "species_name": list(cluster_of.keys())})
    metadata = genomes[["genome_id", "organism_name"]].assign(
        assembly_level=rng.choice(["Complete Genome", "Contig", "Scaffold"], size=len(genomes)),
        refseq_category="na",
    )
    metadata.loc[metadata["organism_name"] == "", "organism_name"] = np.nan

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "clusters": output_dir / "genome_clusters.csv",
        "cluster_names": output_dir / "cluster_species_names.csv",
        "ncbi_metadata": output_dir / "ncbi_assembly_metadata.csv",
    }
    clusters.to_csv(paths["clusters"], index=False)
    names.to_csv(paths["cluster_names"], index=False)
    metadata.to_csv(paths["ncbi_metadata"], index=False)
    for path in paths.values():
        print(f"  Saved: {path}")

    print(f"\nTotal genomes: {len(genomes):,}")
    print(f"CNI species: {len(species)} (+1 unnamed cluster)")
    print(f"NCBI placeholder/missing labels: {sum(max(2, int(n * scale)) for n, _ in UNCLASSIFIED_CONFIG.values()):,}")
    print("\nTo run the comparison:")
    print("  python scripts/compare_taxonomies.py")

    return paths


if __name__ == "__main__":
    generate_demo_dataset()
