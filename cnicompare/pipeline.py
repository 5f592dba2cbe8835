from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from pandas.errors import MergeError

from . import plots, summaries
from .config import ComparisonConfig
from .diversity import compute_diversity, flag_boring, interesting_genomes
from .loaders import InputTables, load_inputs
from .taxonomy import annotate_ncbi_labels

logger = logging.getLogger(__name__)

GENOME_COLUMNS = ["genome_id", "cluster_id", "cni_species", "ncbi_organism_name", "ncbi_species", "classified_ncbi"]


def _merge(left: pd.DataFrame, right: pd.DataFrame, on: str, validate: str, label: str) -> pd.DataFrame:
    try:
        return left.merge(right, on=on, how="left", validate=validate)
    except MergeError as exc:
        raise ValueError(f"Duplicate {on} values in {label} table: {exc}") from exc


def build_genome_table(inputs: InputTables, patterns: Optional[List[str]] = None) -> pd.DataFrame:
    """Join the three inputs into one row per clustered genome and annotate NCBI labels."""
    clusters = inputs.clusters
    dupes = clusters["genome_id"].duplicated()
    if dupes.any():
        raise ValueError(
            f"Duplicate genome_id values in cluster assignment table: {sorted(clusters.loc[dupes, 'genome_id'].unique())[:10]}"
        )

    df = _merge(clusters, inputs.cluster_names, "cluster_id", "many_to_one", "cluster species name")
    df = _merge(df, inputs.ncbi_metadata, "genome_id", "one_to_one", "NCBI metadata")

    unnamed = df["cni_species"].isna()
    if unnamed.any():
        logger.warning(
            "%d genomes in %d clusters have no CNI species name",
            int(unnamed.sum()),
            df.loc[unnamed, "cluster_id"].nunique(),
        )
    no_meta = ~df["genome_id"].isin(inputs.ncbi_metadata["genome_id"])
    if no_meta.any():
        logger.warning("%d genomes have no NCBI metadata; treated as unclassified", int(no_meta.sum()))

    df = annotate_ncbi_labels(df, patterns)
    extra = [c for c in df.columns if c not in GENOME_COLUMNS]
    return df[GENOME_COLUMNS + extra]


@dataclass
class ComparisonResult:
    """All derived tables of one run plus the paths written."""

    genome_table: pd.DataFrame
    diversity: pd.DataFrame
    flagged: pd.DataFrame
    interesting: pd.DataFrame
    unclassified: pd.DataFrame
    reclassified: pd.DataFrame
    overview: pd.DataFrame
    outputs: Dict[str, Any] = field(default_factory=dict)
    timing_sec: float = 0.0


class ComparisonPipeline:
    """Load, join, score and plot the CNI vs NCBI species comparison.

    Every run recomputes all derived tables from the input CSVs. Set
    `write_outputs=False` to skip charts and CSVs (useful in tests or
    notebooks that only need the tables).
    """

    def __init__(
        self,
        config: Optional[ComparisonConfig] = None,
        *,
        data_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        write_html: Optional[bool] = None,
    ) -> None:
        self.config = config or ComparisonConfig()
        # Allow kwargs override for convenience
        if data_dir is not None:
            self.config.data_dir = Path(data_dir)
        if output_dir is not None:
            output_dir = Path(output_dir)
            self.config.plots_dir = output_dir / "plots"
            self.config.figures_dir = output_dir / "figures"
            self.config.tables_dir = output_dir / "tables"
        if write_html is not None:
            self.config.write_html = write_html

    # ------------------------------ Public API ------------------------------ #
    def run(self, write_outputs: bool = True) -> ComparisonResult:
        start = time.perf_counter()
        inputs = load_inputs(self.config)
        result = self.analyze(inputs)
        if write_outputs:
            result.outputs = self._write_outputs(result)
        result.timing_sec = float(time.perf_counter() - start)
        logger.info("Comparison finished in %.2fs", result.timing_sec)
        return result

    def analyze(self, inputs: InputTables) -> ComparisonResult:
        genome_table = build_genome_table(inputs, self.config.unclassified_patterns)
        diversity = compute_diversity(genome_table)
        flagged = flag_boring(genome_table, diversity)
        result = ComparisonResult(
            genome_table=genome_table,
            diversity=diversity,
            flagged=flagged,
            interesting=interesting_genomes(flagged),
            unclassified=summaries.unclassified_reassignments(genome_table),
            reclassified=summaries.reclassifications(flagged),
            overview=summaries.overview(flagged),
        )
        self._log_overview(result.overview)
        return result

    # ------------------------------ Internals ------------------------------- #
    def _write_outputs(self, result: ComparisonResult) -> Dict[str, Any]:
        cfg = self.config
        outputs: Dict[str, Any] = {}
        outputs["tables"] = summaries.write_tables(
            {
                "genome_table": result.flagged,
                "species_diversity": result.diversity,
                "unclassified_reassignments": result.unclassified,
                "reclassifications": result.reclassified,
                "overview": result.overview,
            },
            cfg.tables_dir,
        )
        outputs["plots"] = plots.save_diagnostic_charts(
            result.unclassified,
            result.reclassified,
            cfg.plots_dir,
            top_n_unclassified=cfg.top_n_unclassified,
            top_n_reclassified=cfg.top_n_reclassified,
            dpi=cfg.dpi,
        )
        outputs["figure"] = plots.compose_figure(
            result.unclassified,
            result.reclassified,
            cfg.figures_dir,
            cfg.figure_name,
            top_n_unclassified=cfg.top_n_unclassified,
            top_n_reclassified=cfg.top_n_reclassified,
            dpi=cfg.dpi,
        )
        if cfg.write_html:
            outputs["html"] = plots.reclassification_html(
                result.reclassified, Path(cfg.figures_dir) / "reclassifications.html"
            )
        return outputs

    @staticmethod
    def _log_overview(overview: pd.DataFrame) -> None:
        row = overview.iloc[0]
        logger.info(
            "genomes=%d classified=%d unclassified=%d boring=%d interesting=%d",
            row["genomes"],
            row["classified_ncbi"],
            row["unclassified_ncbi"],
            row["boring_genomes"],
            row["interesting_genomes"],
        )
        logger.info(
            "species ncbi=%d cni=%d one_to_one_pairs=%d ARI=%.3f NMI=%.3f",
            row["ncbi_species"],
            row["cni_species"],
            row["boring_species_pairs"],
            row["adjusted_rand_index"],
            row["normalized_mutual_info"],
        )
