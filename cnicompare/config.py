from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Placeholder markers NCBI uses for genomes without a proper species epithet.
DEFAULT_UNCLASSIFIED_PATTERNS: List[str] = [
    r"\bsp\.",
    r"\bsp$",
    r"\bbacterium\b",
    r"\buncultured\b",
    r"\bunclassified\b",
    r"\bunidentified\b",
    r"\bmetagenome\b",
    r"\bcf\.",  # open nomenclature
    r"\baff\.",
    r"\bspp\.",
    r"^\s*(Candidatus\s+)?\S+\s*$",  # genus-only label
]


@dataclass
class ComparisonConfig:
    """Configuration for ComparisonPipeline.

    Defaults mirror the fixed layout of the analysis: inputs under `data/`,
    charts under `output/plots`, the composed figure under `output/figures`
    and CSV summaries under `output/tables`.
    """

    # Inputs
    data_dir: Path = Path("data")
    clusters_file: str = "genome_clusters.csv"
    cluster_names_file: str = "cluster_species_names.csv"
    ncbi_metadata_file: str = "ncbi_assembly_metadata.csv"

    # Input column names, renamed to canonical names on load
    genome_column: str = "genome_id"
    cluster_column: str = "cluster_id"
    cluster_species_column: str = "species_name"
    ncbi_species_column: str = "organism_name"
    # Per-table key overrides; None -> genome_column / cluster_column
    ncbi_genome_column: Optional[str] = None
    names_cluster_column: Optional[str] = None

    # Outputs
    plots_dir: Path = Path("output/plots")
    figures_dir: Path = Path("output/figures")
    tables_dir: Path = Path("output/tables")
    figure_name: str = "taxonomy_comparison"

    # Controls
    unclassified_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_UNCLASSIFIED_PATTERNS))
    top_n_unclassified: int = 25  # bars shown in the reassignment chart
    top_n_reclassified: Optional[int] = 40  # pairs shown in the bubble chart; None -> all
    dpi: int = 300
    write_html: bool = True  # interactive plotly copy of the bubble chart

    @property
    def clusters_path(self) -> Path:
        return Path(self.data_dir) / self.clusters_file

    @property
    def cluster_names_path(self) -> Path:
        return Path(self.data_dir) / self.cluster_names_file

    @property
    def ncbi_metadata_path(self) -> Path:
        return Path(self.data_dir) / self.ncbi_metadata_file

    @property
    def ncbi_key_column(self) -> str:
        return self.ncbi_genome_column or self.genome_column

    @property
    def names_key_column(self) -> str:
        return self.names_cluster_column or self.cluster_column
