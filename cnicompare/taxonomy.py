"""NCBI species-label cleanup.

A genome counts as NCBI-classified when its organism name is present and
does not match any of the placeholder patterns (``Bacillus sp. X``,
``Firmicutes bacterium CAG:1``, ``uncultured ...``). Classified labels are
truncated to genus + epithet so strain and serovar suffixes do not split a
species.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Pattern

import pandas as pd

from .config import DEFAULT_UNCLASSIFIED_PATTERNS


def compile_patterns(patterns: Optional[Iterable[str]] = None) -> List[Pattern[str]]:
    if patterns is None:
        patterns = DEFAULT_UNCLASSIFIED_PATTERNS
    return [re.compile(p, flags=re.IGNORECASE) for p in patterns]


def _is_missing(label: object) -> bool:
    if label is None or label is pd.NA:
        return True
    if isinstance(label, float) and pd.isna(label):
        return True
    return not str(label).strip()


def is_unclassified(label: object, patterns: Optional[Iterable[str | Pattern[str]]] = None) -> bool:
    """Return True if `label` is missing or matches any unclassified pattern."""
    if _is_missing(label):
        return True
    text = str(label).strip()
    if patterns is None:
        compiled = compile_patterns()
    else:
        compiled = [p if isinstance(p, re.Pattern) else re.compile(p, flags=re.IGNORECASE) for p in patterns]
    return any(p.search(text) for p in compiled)


def clean_species_label(label: object) -> Optional[str]:
    """Truncate an organism name to ``Genus epithet``.

    Brackets around reclassified genera (``[Clostridium] innocuum``) are
    dropped. ``Candidatus`` names keep the prefix plus two tokens.
    """
    if _is_missing(label):
        return None
    tokens = str(label).replace("[", "").replace("]", "").split()
    if not tokens:
        return None
    n_keep = 3 if tokens[0] == "Candidatus" else 2
    return " ".join(tokens[:n_keep])


def annotate_ncbi_labels(
    df: pd.DataFrame,
    patterns: Optional[Iterable[str]] = None,
    label_col: str = "ncbi_organism_name",
) -> pd.DataFrame:
    """Return a copy of `df` with `classified_ncbi` and `ncbi_species` columns.

    `ncbi_species` is missing exactly where `classified_ncbi` is False.
    """
    compiled = compile_patterns(patterns)
    out = df.copy()
    labels = out[label_col]
    out["classified_ncbi"] = ~labels.map(lambda x: is_unclassified(x, compiled)).astype(bool)
    cleaned = labels.map(clean_species_label)
    out["ncbi_species"] = cleaned.where(out["classified_ncbi"])
    return out
