from __future__ import annotations

import importlib.util
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "compare_taxonomies.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("compare_taxonomies", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_defaults_match_config():
    cli = _load_script()
    cfg = cli.config_from_args(cli.build_parser().parse_args([]))

    assert cfg.data_dir == Path("data")
    assert cfg.tables_dir == Path("output/tables")
    assert cfg.top_n_reclassified == 40
    assert cfg.write_html is True
    assert cfg.ncbi_key_column == cfg.genome_column


def test_zero_top_n_reclassified_shows_all_pairs():
    cli = _load_script()
    cfg = cli.config_from_args(cli.build_parser().parse_args(["--top-n-reclassified", "0"]))

    assert cfg.top_n_reclassified is None


def test_output_dir_sets_all_output_subdirectories(tmp_path):
    cli = _load_script()
    args = cli.build_parser().parse_args(["--output-dir", str(tmp_path), "--no-html"])
    cfg = cli.config_from_args(args)

    assert cfg.plots_dir == tmp_path / "plots"
    assert cfg.figures_dir == tmp_path / "figures"
    assert cfg.tables_dir == tmp_path / "tables"
    assert cfg.write_html is False


def test_per_table_key_flags():
    cli = _load_script()
    args = cli.build_parser().parse_args(
        ["--genome-column", "genome", "--ncbi-genome-column", "assembly_accession", "--names-cluster-column", "cluster_number"]
    )
    cfg = cli.config_from_args(args)

    assert cfg.ncbi_key_column == "assembly_accession"
    assert cfg.names_key_column == "cluster_number"
    assert cfg.genome_column == "genome"
