"""Charts for the CNI vs NCBI comparison.

Panel A: CNI species that absorb NCBI-unclassified genomes (bar chart).
Panel B: NCBI -> CNI reclassifications that are not one-to-one (bubble chart).

Drawing functions take an existing Axes so the same code renders the
standalone diagnostic PNGs and the composed two-panel figure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import plotly.graph_objects as go
from matplotlib import pyplot as plt

logger = logging.getLogger(__name__)

RELATION_COLORS = {
    "split": "#1f77b4",
    "merge": "#d62728",
    "split+merge": "#9467bd",
    "one-to-one": "#7f7f7f",
}
BAR_COLOR = "#4d908e"


def _empty_panel(ax, message: str):
    ax.text(0.5, 0.5, message, ha="center", va="center", transform=ax.transAxes, color="#7f7f7f")
    ax.set_xticks([])
    ax.set_yticks([])
    return ax


def _bubble_sizes(counts: pd.Series, max_area: float = 400.0, min_area: float = 20.0) -> pd.Series:
    top = float(counts.max()) if len(counts) else 1.0
    return min_area + (max_area - min_area) * counts.astype(float) / max(top, 1.0)


def plot_unclassified_bar(ax, table: pd.DataFrame, top_n: Optional[int] = 25):
    """Horizontal bars: number of NCBI-unclassified genomes per CNI species."""
    ax.set_title("NCBI-unclassified genomes by CNI species")
    if table.empty:
        return _empty_panel(ax, "No NCBI-unclassified genomes")

    sub = table.head(top_n) if top_n else table
    sub = sub.iloc[::-1]  # largest bar on top
    positions = list(range(len(sub)))
    ax.barh(positions, sub["n_genomes"], color=BAR_COLOR)
    ax.set_yticks(positions)
    ax.set_yticklabels(sub["cni_species"].astype(str), fontsize=7, fontstyle="italic")
    ax.set_xlabel("Genomes")
    ax.set_ylabel("CNI species")
    ax.grid(True, axis="x", alpha=0.3)
    return ax


def plot_reclassification_bubble(ax, table: pd.DataFrame, top_n: Optional[int] = 40):
    """Bubble chart of NCBI species (x) against CNI species (y); area ~ genome count."""
    ax.set_title("Reclassified genomes (NCBI -> CNI)")
    if table.empty:
        return _empty_panel(ax, "All species pairs are one-to-one")

    sub = table.head(top_n) if top_n else table
    ncbi_order = sorted(sub["ncbi_species"].unique())
    cni_order = sorted(sub["cni_species"].unique())
    x = sub["ncbi_species"].map({s: i for i, s in enumerate(ncbi_order)})
    y = sub["cni_species"].map({s: i for i, s in enumerate(cni_order)})
    sizes = _bubble_sizes(sub["n_genomes"])

    for relation, color in RELATION_COLORS.items():
        mask = sub["relation"] == relation
        if not mask.any():
            continue
        ax.scatter(
            x[mask],
            y[mask],
            s=sizes[mask],
            color=color,
            alpha=0.7,
            edgecolors="black",
            linewidths=0.4,
            label=relation,
        )

    ax.set_xticks(range(len(ncbi_order)))
    ax.set_xticklabels(ncbi_order, rotation=90, fontsize=7, fontstyle="italic")
    ax.set_yticks(range(len(cni_order)))
    ax.set_yticklabels(cni_order, fontsize=7, fontstyle="italic")
    ax.set_xlim(-0.5, len(ncbi_order) - 0.5)
    ax.set_ylim(-0.5, len(cni_order) - 0.5)
    ax.set_xlabel("NCBI species")
    ax.set_ylabel("CNI species")
    ax.grid(True, alpha=0.3)
    ax.legend(title="Relation", loc="upper left", bbox_to_anchor=(1.01, 1.0), frameon=True, markerscale=0.5)
    return ax


def save_diagnostic_charts(
    unclassified: pd.DataFrame,
    reclassified: pd.DataFrame,
    plots_dir: Path,
    *,
    top_n_unclassified: Optional[int] = 25,
    top_n_reclassified: Optional[int] = 40,
    dpi: int = 300,
) -> Dict[str, Path]:
    """Render each chart on its own and write it as PNG."""
    plots_dir = Path(plots_dir)
    plots_dir.mkdir(parents=True, exist_ok=True)
    paths: Dict[str, Path] = {}

    fig, ax = plt.subplots(figsize=(8, 7), constrained_layout=True)
    plot_unclassified_bar(ax, unclassified, top_n=top_n_unclassified)
    paths["unclassified_reassignments"] = plots_dir / "unclassified_reassignments.png"
    fig.savefig(paths["unclassified_reassignments"], dpi=dpi)
    plt.close(fig)

    fig, ax = plt.subplots(figsize=(11, 9), constrained_layout=True)
    plot_reclassification_bubble(ax, reclassified, top_n=top_n_reclassified)
    paths["reclassifications"] = plots_dir / "reclassifications.png"
    fig.savefig(paths["reclassifications"], dpi=dpi)
    plt.close(fig)

    for name, path in paths.items():
        logger.info("Wrote %s chart to %s", name, path)
    return paths


def compose_figure(
    unclassified: pd.DataFrame,
    reclassified: pd.DataFrame,
    figures_dir: Path,
    name: str = "taxonomy_comparison",
    *,
    top_n_unclassified: Optional[int] = 25,
    top_n_reclassified: Optional[int] = 40,
    dpi: int = 300,
) -> List[Path]:
    """Compose both charts as panels A and B; export TIFF (LZW) and PDF."""
    figures_dir = Path(figures_dir)
    figures_dir.mkdir(parents=True, exist_ok=True)

    fig, (ax_a, ax_b) = plt.subplots(
        nrows=1,
        ncols=2,
        figsize=(18, 9),
        gridspec_kw={"width_ratios": [1.0, 1.6]},
        constrained_layout=True,
    )
    plot_unclassified_bar(ax_a, unclassified, top_n=top_n_unclassified)
    plot_reclassification_bubble(ax_b, reclassified, top_n=top_n_reclassified)
    for ax, tag in ((ax_a, "A"), (ax_b, "B")):
        ax.text(-0.08, 1.04, tag, transform=ax.transAxes, fontsize=16, fontweight="bold", va="bottom")

    paths = [figures_dir / f"{name}.tiff", figures_dir / f"{name}.pdf"]
    fig.savefig(paths[0], dpi=dpi, facecolor="white", pil_kwargs={"compression": "tiff_lzw"})
    fig.savefig(paths[1], dpi=dpi, facecolor="white")
    plt.close(fig)

    logger.info("Wrote composed figure to %s", ", ".join(str(p) for p in paths))
    return paths


def reclassification_html(table: pd.DataFrame, output_path: Path) -> Path:
    """Interactive Plotly version of the bubble chart with per-pair hover details."""
    fig = go.Figure()
    if table.empty:
        fig.add_annotation(text="All species pairs are one-to-one", showarrow=False)
    else:
        max_n = float(table["n_genomes"].max())
        for relation, color in RELATION_COLORS.items():
            sub = table[table["relation"] == relation]
            if sub.empty:
                continue
            hover = (
                "NCBI: " + sub["ncbi_species"].astype(str)
                + "<br>CNI: " + sub["cni_species"].astype(str)
                + "<br>genomes: " + sub["n_genomes"].astype(str)
            )
            fig.add_trace(
                go.Scatter(
                    x=sub["ncbi_species"],
                    y=sub["cni_species"],
                    mode="markers",
                    marker=dict(
                        size=sub["n_genomes"],
                        sizemode="area",
                        sizeref=2.0 * max_n / (40.0**2),
                        sizemin=4,
                        color=color,
                        opacity=0.75,
                        line=dict(width=0.5, color="black"),
                    ),
                    text=hover,
                    hoverinfo="text",
                    name=relation,
                )
            )
    fig.update_layout(
        title="Reclassified genomes (NCBI -> CNI)",
        template="plotly_white",
        xaxis_title="NCBI species",
        yaxis_title="CNI species",
        height=900,
        width=1200,
    )

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(output_path, include_plotlyjs="cdn")
    logger.info("Wrote interactive reclassification chart to %s", output_path)
    return output_path
