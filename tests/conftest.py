"""Shared fixtures: an isolated settings object, store, and source layout."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from ds_redirect.config import AppSettings, PathsConfig, get_settings
from ds_redirect.store import RedirectionStore, get_store


@pytest.fixture(autouse=True)
def _clean_default_store():
    get_store().clear()
    get_settings.cache_clear()
    yield
    get_store().clear()
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Settings rooted in tmp_path so trees and sources never leave the test folder."""

    return AppSettings(
        paths=PathsConfig(
            source_root=tmp_path / "sources",
            tmp_root=tmp_path / "trees",
            logs_root=tmp_path / "logs",
        ),
        sources={},
    )


@pytest.fixture
def store() -> RedirectionStore:
    return RedirectionStore()


@pytest.fixture
def tau_source(settings: AppSettings) -> Path:
    """Default folder of the Tau type holding f1, f2, sub/f3 and a hidden file."""

    root = settings.paths.source_root / "Tau"
    (root / "sub").mkdir(parents=True)
    (root / "f1").write_text("original f1", encoding="utf-8")
    (root / "f2").write_text("original f2", encoding="utf-8")
    (root / "sub" / "f3").write_text("original f3", encoding="utf-8")
    (root / ".hidden").write_text("dotfile", encoding="utf-8")
    return root


@pytest.fixture
def scratch(tmp_path: Path) -> Path:
    """Files living outside every default source folder."""

    folder = tmp_path / "scratch"
    folder.mkdir()
    (folder / "f.txt").write_text("scratch f", encoding="utf-8")
    (folder / "g.txt").write_text("scratch g", encoding="utf-8")
    (folder / "experiment").mkdir()
    (folder / "experiment" / "f1").write_text("experiment f1", encoding="utf-8")
    return folder


@pytest.fixture
def tree_listing():
    """Relative paths of every entry below a root, following directory symlinks."""

    def listing(root: Path) -> set[str]:
        found: set[str] = set()
        for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
            for name in dirnames + filenames:
                found.add((Path(dirpath) / name).relative_to(root).as_posix())
        return found

    return listing
