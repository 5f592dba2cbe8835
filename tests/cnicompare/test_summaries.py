from __future__ import annotations

import pandas as pd
import pytest

from cnicompare.diversity import compute_diversity, flag_boring
from cnicompare.summaries import (
    RECLASSIFICATION_COLUMNS,
    concordance_scores,
    overview,
    reclassifications,
    unclassified_reassignments,
    write_tables,
)


def _flagged(rows) -> pd.DataFrame:
    table = pd.DataFrame(rows, columns=["genome_id", "ncbi_species", "cni_species", "classified_ncbi"])
    return flag_boring(table, compute_diversity(table))


MIXED = [
    ("g1", "Listeria monocytogenes", "Listeria monocytogenes", True),
    ("g2", "Listeria monocytogenes", "Listeria monocytogenes", True),
    ("g3", "Escherichia coli", "Escherichia coli", True),
    ("g4", "Escherichia coli", "Escherichia coli", True),
    ("g5", "Escherichia coli", "Escherichia coli_B", True),
    ("g6", "Escherichia fergusonii", "Escherichia coli", True),
    ("g7", None, "Escherichia coli", False),
    ("g8", None, "Escherichia coli", False),
    ("g9", None, "Listeria monocytogenes", False),
    ("g10", None, None, False),
]


def test_unclassified_reassignments_counts_cni_species():
    out = unclassified_reassignments(_flagged(MIXED))

    assert out.columns.tolist() == ["cni_species", "n_genomes"]
    assert out.to_dict("records") == [
        {"cni_species": "Escherichia coli", "n_genomes": 2},
        {"cni_species": "Listeria monocytogenes", "n_genomes": 1},
        {"cni_species": "unassigned", "n_genomes": 1},
    ]


def test_reclassifications_label_split_and_merge():
    out = reclassifications(_flagged(MIXED))

    assert out.columns.tolist() == RECLASSIFICATION_COLUMNS
    relations = {(r.ncbi_species, r.cni_species): (r.n_genomes, r.relation) for r in out.itertuples()}
    assert relations == {
        ("Escherichia coli", "Escherichia coli"): (2, "split+merge"),
        ("Escherichia coli", "Escherichia coli_B"): (1, "split"),
        ("Escherichia fergusonii", "Escherichia coli"): (1, "merge"),
    }
    assert out.iloc[0]["n_genomes"] == 2


def test_reclassifications_empty_when_all_concordant():
    out = reclassifications(_flagged(MIXED[:2]))

    assert out.empty
    assert out.columns.tolist() == RECLASSIFICATION_COLUMNS


def test_concordance_scores_perfect_agreement():
    scores = concordance_scores(
        _flagged(
            [
                ("g1", "A a", "X", True),
                ("g2", "A a", "X", True),
                ("g3", "B b", "Y", True),
            ]
        )
    )
    assert scores["adjusted_rand_index"] == pytest.approx(1.0)
    assert scores["normalized_mutual_info"] == pytest.approx(1.0)
    assert scores["v_measure"] == pytest.approx(1.0)


def test_concordance_scores_nan_without_comparable_genomes():
    scores = concordance_scores(_flagged(MIXED[6:]))
    assert all(pd.isna(v) for v in scores.values())


def test_overview_totals():
    row = overview(_flagged(MIXED)).iloc[0]

    assert row["genomes"] == 10
    assert row["classified_ncbi"] == 6
    assert row["unclassified_ncbi"] == 4
    assert row["boring_genomes"] == 2
    assert row["interesting_genomes"] == 4
    assert row["ncbi_species"] == 3
    assert row["cni_species"] == 3
    assert row["boring_species_pairs"] == 1


def test_write_tables(tmp_path):
    paths = write_tables({"overview": overview(_flagged(MIXED))}, tmp_path / "tables")

    assert paths["overview"] == tmp_path / "tables" / "overview.csv"
    assert pd.read_csv(paths["overview"])["genomes"].tolist() == [10]
