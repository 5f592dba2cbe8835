from __future__ import annotations

from typing import Iterable, Set, Tuple

import numpy as np
import pandas as pd

DIVERSITY_COLUMNS = ["taxonomy", "species", "n_genomes", "n_counterparts", "inverse_simpson"]


def inverse_simpson(counts: Iterable[float]) -> float:
    """Inverse Simpson index 1 / sum(p_i^2) of a vector of label counts.

    Equals the number of counterpart labels when they are evenly represented
    and exactly 1.0 when a single label is present. Returns NaN for an empty
    or all-zero vector.
    """
    arr = np.asarray(list(counts), dtype=np.float64)
    total = arr.sum() if arr.size else 0.0
    if total <= 0:
        return float("nan")
    p = arr / total
    return float(1.0 / np.sum(p * p))


def species_diversity(df: pd.DataFrame, species_col: str, counterpart_col: str) -> pd.DataFrame:
    """Per-species diversity of counterpart labels among genomes sharing that species."""
    counts = df.groupby([species_col, counterpart_col]).size()
    rows: list[dict[str, object]] = []
    for species, sub in counts.groupby(level=0):
        rows.append(
            {
                "species": species,
                "n_genomes": int(sub.sum()),
                "n_counterparts": int((sub > 0).sum()),
                "inverse_simpson": inverse_simpson(sub.to_numpy()),
            }
        )
    return pd.DataFrame(rows, columns=DIVERSITY_COLUMNS[1:])


def comparable_genomes(genome_table: pd.DataFrame) -> pd.DataFrame:
    """Genomes labeled in both taxonomies."""
    mask = genome_table["classified_ncbi"] & genome_table["cni_species"].notna()
    return genome_table.loc[mask]


def compute_diversity(genome_table: pd.DataFrame) -> pd.DataFrame:
    """Diversity in both directions: NCBI species -> CNI labels and CNI species -> NCBI labels."""
    pairs = comparable_genomes(genome_table)
    ncbi = species_diversity(pairs, "ncbi_species", "cni_species")
    ncbi.insert(0, "taxonomy", "ncbi")
    cni = species_diversity(pairs, "cni_species", "ncbi_species")
    cni.insert(0, "taxonomy", "cni")
    out = pd.concat([ncbi, cni], ignore_index=True)
    return out[DIVERSITY_COLUMNS]


def flag_boring(genome_table: pd.DataFrame, diversity: pd.DataFrame) -> pd.DataFrame:
    """Attach both diversities to each genome and flag perfectly concordant ones.

    A genome is boring when its NCBI species maps to a single CNI species and
    that CNI species maps back to the same single NCBI species.
    """
    ncbi_div = diversity.loc[diversity["taxonomy"] == "ncbi"].set_index("species")["inverse_simpson"]
    cni_div = diversity.loc[diversity["taxonomy"] == "cni"].set_index("species")["inverse_simpson"]

    out = genome_table.copy()
    out["ncbi_diversity"] = out["ncbi_species"].map(ncbi_div)
    out["cni_diversity"] = out["cni_species"].map(cni_div)
    out["boring"] = (
        out["classified_ncbi"].astype(bool)
        & (out["ncbi_diversity"] == 1.0)
        & (out["cni_diversity"] == 1.0)
    )
    return out


def boring_species(flagged: pd.DataFrame) -> Tuple[Set[str], Set[str]]:
    """Return (NCBI species, CNI species) that form perfect one-to-one pairs."""
    boring = flagged.loc[flagged["boring"]]
    return set(boring["ncbi_species"]), set(boring["cni_species"])


def interesting_genomes(flagged: pd.DataFrame) -> pd.DataFrame:
    """Classified genomes whose species pair is not a perfect one-to-one match."""
    mask = flagged["classified_ncbi"].astype(bool) & flagged["cni_species"].notna() & ~flagged["boring"]
    return flagged.loc[mask].copy()
