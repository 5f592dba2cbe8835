#!/usr/bin/env python3
r"""
Compare the CNI genome-clustering taxonomy against NCBI species labels.

Reads three CSVs (genome -> cluster, cluster -> species name, genome -> NCBI
assembly metadata), joins them, flags NCBI-unclassified genomes and perfectly
concordant ("boring") species, and writes:
- `output/plots/unclassified_reassignments.png` and `output/plots/reclassifications.png`
- `output/figures/taxonomy_comparison.{tiff,pdf}` (two-panel figure)
- `output/figures/reclassifications.html` (interactive bubble chart)
- CSV summaries under `output/tables/`

Example:
    python scripts/compare_taxonomies.py \\
        --data-dir data \\
        --output-dir output \\
        --ncbi-species-column organism_name
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from cnicompare import ComparisonConfig, ComparisonPipeline


def build_parser() -> argparse.ArgumentParser:
    defaults = ComparisonConfig()
    p = argparse.ArgumentParser(description="Compare CNI clustering species against NCBI species labels.")
    p.add_argument("--data-dir", type=Path, default=defaults.data_dir, help="Directory holding the input CSVs.")
    p.add_argument("--clusters-file", default=defaults.clusters_file, help="Genome -> cluster CSV.")
    p.add_argument("--cluster-names-file", default=defaults.cluster_names_file, help="Cluster -> species name CSV.")
    p.add_argument("--ncbi-metadata-file", default=defaults.ncbi_metadata_file, help="NCBI assembly metadata CSV.")
    p.add_argument("--genome-column", default=defaults.genome_column)
    p.add_argument("--cluster-column", default=defaults.cluster_column)
    p.add_argument(
        "--ncbi-genome-column",
        default=None,
        help="Genome key of the NCBI metadata when it differs from --genome-column (e.g. assembly_accession).",
    )
    p.add_argument(
        "--names-cluster-column",
        default=None,
        help="Cluster key of the cluster-names table when it differs from --cluster-column.",
    )
    p.add_argument("--cluster-species-column", default=defaults.cluster_species_column)
    p.add_argument(
        "--ncbi-species-column",
        default=defaults.ncbi_species_column,
        help="Column of the NCBI metadata holding the organism name (default: %(default)s).",
    )
    p.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Root for plots/, figures/ and tables/ (default: output/).",
    )
    p.add_argument("--top-n-unclassified", type=int, default=defaults.top_n_unclassified)
    p.add_argument(
        "--top-n-reclassified",
        type=int,
        default=defaults.top_n_reclassified,
        help="Species pairs shown in the bubble chart; 0 shows all.",
    )
    p.add_argument("--dpi", type=int, default=defaults.dpi)
    p.add_argument("--no-html", action="store_true", help="Skip the interactive HTML chart.")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def config_from_args(args: argparse.Namespace) -> ComparisonConfig:
    cfg = ComparisonConfig(
        data_dir=args.data_dir,
        clusters_file=args.clusters_file,
        cluster_names_file=args.cluster_names_file,
        ncbi_metadata_file=args.ncbi_metadata_file,
        genome_column=args.genome_column,
        cluster_column=args.cluster_column,
        ncbi_genome_column=args.ncbi_genome_column,
        names_cluster_column=args.names_cluster_column,
        cluster_species_column=args.cluster_species_column,
        ncbi_species_column=args.ncbi_species_column,
        top_n_unclassified=args.top_n_unclassified,
        top_n_reclassified=args.top_n_reclassified or None,
        dpi=args.dpi,
        write_html=not args.no_html,
    )
    if args.output_dir is not None:
        cfg.plots_dir = args.output_dir / "plots"
        cfg.figures_dir = args.output_dir / "figures"
        cfg.tables_dir = args.output_dir / "tables"
    return cfg


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(message)s")

    result = ComparisonPipeline(config_from_args(args)).run()

    print(result.overview.T.to_string(header=False))


if __name__ == "__main__":
    main()
