"""Summary tables derived from the flagged genome table."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import numpy as np
import pandas as pd
from sklearn.metrics import (
    adjusted_rand_score,
    homogeneity_completeness_v_measure,
    normalized_mutual_info_score,
)

from .diversity import comparable_genomes, interesting_genomes

logger = logging.getLogger(__name__)

RECLASSIFICATION_COLUMNS = ["ncbi_species", "cni_species", "n_genomes", "n_cni_for_ncbi", "n_ncbi_for_cni", "relation"]


def unclassified_reassignments(genome_table: pd.DataFrame) -> pd.DataFrame:
    """CNI species receiving NCBI-unclassified genomes, most genomes first."""
    sub = genome_table.loc[~genome_table["classified_ncbi"].astype(bool)]
    cni = sub["cni_species"].fillna("unassigned")
    counts = cni.value_counts()
    out = counts.rename_axis("cni_species").reset_index(name="n_genomes")
    return out.sort_values(["n_genomes", "cni_species"], ascending=[False, True], ignore_index=True)


def reclassifications(flagged: pd.DataFrame) -> pd.DataFrame:
    """(NCBI species, CNI species) pairs among genomes that are not perfectly concordant.

    `relation` tells whether the NCBI species is split across several CNI
    species, merged with other NCBI species into one CNI species, or both.
    """
    sub = interesting_genomes(flagged)
    pairs = sub.groupby(["ncbi_species", "cni_species"]).size().reset_index(name="n_genomes")
    if pairs.empty:
        return pd.DataFrame(columns=RECLASSIFICATION_COLUMNS)

    pairs["n_cni_for_ncbi"] = pairs.groupby("ncbi_species")["cni_species"].transform("nunique").astype(int)
    pairs["n_ncbi_for_cni"] = pairs.groupby("cni_species")["ncbi_species"].transform("nunique").astype(int)
    split = pairs["n_cni_for_ncbi"] > 1
    merge = pairs["n_ncbi_for_cni"] > 1
    pairs["relation"] = np.select(
        [split & merge, split, merge],
        ["split+merge", "split", "merge"],
        default="one-to-one",
    )
    return pairs.sort_values(["n_genomes", "ncbi_species", "cni_species"], ascending=[False, True, True], ignore_index=True)


def concordance_scores(flagged: pd.DataFrame) -> Dict[str, float]:
    """Clustering agreement between the two labelings on genomes labeled in both."""
    pairs = comparable_genomes(flagged)
    if pairs.empty:
        nan = float("nan")
        return {
            "adjusted_rand_index": nan,
            "normalized_mutual_info": nan,
            "homogeneity": nan,
            "completeness": nan,
            "v_measure": nan,
        }

    ncbi = pairs["ncbi_species"].astype(str).to_numpy()
    cni = pairs["cni_species"].astype(str).to_numpy()
    # NCBI is the reference labeling, CNI the predicted clustering.
    homogeneity, completeness, v_measure = homogeneity_completeness_v_measure(ncbi, cni)
    return {
        "adjusted_rand_index": float(adjusted_rand_score(ncbi, cni)),
        "normalized_mutual_info": float(normalized_mutual_info_score(ncbi, cni)),
        "homogeneity": float(homogeneity),
        "completeness": float(completeness),
        "v_measure": float(v_measure),
    }


def overview(flagged: pd.DataFrame) -> pd.DataFrame:
    """One-row table of genome and species totals plus concordance scores."""
    classified = flagged["classified_ncbi"].astype(bool)
    boring = flagged["boring"].astype(bool)
    row: dict[str, object] = {
        "genomes": int(len(flagged)),
        "classified_ncbi": int(classified.sum()),
        "unclassified_ncbi": int((~classified).sum()),
        "boring_genomes": int(boring.sum()),
        "interesting_genomes": int(len(interesting_genomes(flagged))),
        "ncbi_species": int(flagged.loc[classified, "ncbi_species"].nunique()),
        "cni_species": int(flagged["cni_species"].nunique()),
        "boring_species_pairs": int(flagged.loc[boring, "ncbi_species"].nunique()),
    }
    row.update(concordance_scores(flagged))
    return pd.DataFrame([row])


def write_tables(tables: Dict[str, pd.DataFrame], output_dir: Path) -> Dict[str, Path]:
    """Write each table to `<output_dir>/<name>.csv` and return the paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths: Dict[str, Path] = {}
    for name, table in tables.items():
        path = output_dir / f"{name}.csv"
        table.to_csv(path, index=False)
        logger.info("Wrote %s (%d rows) to %s", name, len(table), path)
        paths[name] = path
    return paths
