"""Tests for the typer command line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ds_redirect.cli import app
from ds_redirect.logging_utils import PACKAGE_LOGGER_NAME

runner = CliRunner()


@pytest.fixture(autouse=True)
def _detach_cli_handlers():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project folder with settings, a Tau source folder and scratch files."""

    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "settings.yaml").write_text(
        "paths:\n  source_root: ./sources\n  tmp_root: ./trees\n  logs_root: ./logs\n",
        encoding="utf-8",
    )
    tau = tmp_path / "sources" / "Tau"
    tau.mkdir(parents=True)
    (tau / "f1").write_text("original f1", encoding="utf-8")
    (tau / "f2").write_text("original f2", encoding="utf-8")
    (tmp_path / "scratch").mkdir()
    (tmp_path / "scratch" / "f.txt").write_text("scratch f", encoding="utf-8")
    return tmp_path


def _last_line(output: str) -> str:
    return output.strip().splitlines()[-1]


def test_show_config(project: Path) -> None:
    result = runner.invoke(app, ["show-config", "--config-file", str(project / "configs" / "settings.yaml")])
    assert result.exit_code == 0, result.output
    assert "source_root" in result.output
    assert "link_others: true" in result.output


def test_resolve_default_folder(project: Path) -> None:
    result = runner.invoke(app, ["resolve", "Tau", "--config-file", str(project / "configs" / "settings.yaml")])
    assert result.exit_code == 0, result.output
    assert _last_line(result.output) == str((project / "sources" / "Tau").resolve())


def test_build_list_and_purge_trees(project: Path) -> None:
    config = str(project / "configs" / "settings.yaml")
    result = runner.invoke(
        app,
        ["build-tree", "Tau", str(project / "scratch" / "f.txt"), "--dest", "f1", "--config-file", config],
    )
    assert result.exit_code == 0, result.output
    tree = Path(_last_line(result.output))
    assert (tree / "f1").read_text(encoding="utf-8") == "scratch f"
    assert (tree / "f2").read_text(encoding="utf-8") == "original f2"

    listed = runner.invoke(app, ["list-trees", "--config-file", config])
    assert listed.exit_code == 0, listed.output
    assert str(tree) in listed.output

    dry = runner.invoke(app, ["purge-trees", "--dry-run", "--config-file", config])
    assert dry.exit_code == 0, dry.output
    assert tree.exists()

    purged = runner.invoke(app, ["purge-trees", "--config-file", config])
    assert purged.exit_code == 0, purged.output
    assert not tree.exists()


def test_build_tree_without_backfill(project: Path) -> None:
    config = str(project / "configs" / "settings.yaml")
    result = runner.invoke(
        app,
        ["build-tree", "Tau", str(project / "scratch" / "f.txt"), "--no-link-others", "--config-file", config],
    )
    assert result.exit_code == 0, result.output
    tree = Path(_last_line(result.output))
    assert sorted(path.name for path in tree.iterdir()) == ["f.txt"]


def test_build_tree_rejects_mismatched_destinations(project: Path) -> None:
    config = str(project / "configs" / "settings.yaml")
    result = runner.invoke(
        app,
        ["build-tree", "Tau", str(project / "scratch" / "f.txt"), "--dest", "a", "--dest", "b", "--config-file", config],
    )
    assert result.exit_code != 0


def test_build_tree_reports_missing_files(project: Path) -> None:
    config = str(project / "configs" / "settings.yaml")
    result = runner.invoke(app, ["build-tree", "Tau", str(project / "scratch" / "nope.txt"), "--config-file", config])
    assert result.exit_code != 0
    trees = project / "trees"
    assert not trees.exists() or not list(trees.glob("ds_redirect_*"))
