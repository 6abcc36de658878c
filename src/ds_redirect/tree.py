"""Materialize temporary source folders out of individually placed files."""

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Sequence

from ds_redirect.errors import DestinationCollisionError
from ds_redirect.scope import Scope
from ds_redirect.targets import Placement
from ds_redirect.utils.paths import link_path, list_entries, parent_folders

LOGGER = logging.getLogger(__name__)

DEFAULT_TREE_PREFIX = "ds_redirect_"


@dataclass(slots=True)
class SyntheticTree:
    """A temporary directory of links standing in for a dataset source folder."""

    path: Path
    links: list[PurePosixPath] = field(default_factory=list)
    copied: list[PurePosixPath] = field(default_factory=list)
    removed: bool = False

    def remove(self) -> None:
        """Delete the tree; calling it again is a no-op."""

        if self.removed:
            return
        self.removed = True
        if self.path.exists():
            # symlinked directories inside are unlinked, never followed
            shutil.rmtree(self.path)
        LOGGER.debug("tree.removed path=%s", self.path)


def _place(
    tree: SyntheticTree,
    relative: PurePosixPath,
    source: Path,
    link_mode: str,
    logger: logging.Logger,
) -> None:
    destination = tree.path.joinpath(*relative.parts)
    if destination.exists() or destination.is_symlink():
        raise DestinationCollisionError(f"destination already exists in synthetic tree: {relative}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    if link_path(source, destination, mode=link_mode, logger=logger):
        tree.copied.append(relative)
    tree.links.append(relative)


def _backfill_entries(placed: Sequence[PurePosixPath], default_source: Path) -> list[PurePosixPath]:
    """Entries of the default source that the placed files do not shadow.

    Only strict ancestors of placed destinations are descended into; a placed
    directory is a link to the caller's folder and must not be written through.
    """

    ancestors: set[PurePosixPath] = set()
    for destination in placed:
        ancestors.update(parent_folders(destination)[:-1])
    reserved = ancestors | set(placed)

    folders = [default_source]
    for prefix in sorted(ancestors, key=lambda item: (len(item.parts), str(item))):
        candidate = default_source.joinpath(*prefix.parts)
        if candidate.is_dir():
            folders.append(candidate)

    entries: list[PurePosixPath] = []
    for folder in folders:
        for entry in list_entries(folder, relative_to=default_source):
            if entry not in reserved:
                entries.append(entry)
    return entries


def build_synthetic_tree(
    placements: Sequence[Placement],
    *,
    link_others: bool,
    default_source: Path,
    scope: Scope,
    tmp_root: Path | None = None,
    link_mode: str = "auto",
    prefix: str = DEFAULT_TREE_PREFIX,
    logger: logging.Logger | None = None,
) -> SyntheticTree:
    """Create a temporary folder holding placements, optionally backfilled from default_source.

    The folder is bound to scope and removed when the scope closes; under the
    global scope it stays on disk. A failure while building removes the
    partial folder before the error propagates.
    """

    effective_logger = logger or LOGGER
    if tmp_root is not None:
        tmp_root.mkdir(parents=True, exist_ok=True)
    if scope.closed:
        raise RuntimeError(f"scope {scope.name!r} is already closed")
    tree = SyntheticTree(path=Path(tempfile.mkdtemp(prefix=prefix, dir=tmp_root)).resolve())

    try:
        scope.bind(tree, tree.remove)
        for placement in placements:
            _place(tree, placement.destination, placement.source, link_mode, effective_logger)

        if link_others:
            if default_source.is_dir():
                placed = [placement.destination for placement in placements]
                for entry in _backfill_entries(placed, default_source):
                    _place(tree, entry, default_source.joinpath(*entry.parts), link_mode, effective_logger)
            else:
                effective_logger.warning(
                    "tree.default_source_missing default_source=%s path=%s",
                    default_source,
                    tree.path,
                )
    except BaseException:
        tree.remove()
        raise

    effective_logger.info(
        "tree.built path=%s placed=%s linked_total=%s copied=%s scope=%s",
        tree.path,
        len(placements),
        len(tree.links),
        len(tree.copied),
        scope.name,
    )
    return tree


def find_leftover_trees(tmp_root: Path | None = None, prefix: str = DEFAULT_TREE_PREFIX) -> list[Path]:
    """List synthetic trees left on disk by global redirections."""

    root = tmp_root if tmp_root is not None else Path(tempfile.gettempdir())
    if not root.exists():
        return []
    return sorted(path for path in root.glob(f"{prefix}*") if path.is_dir() and not path.is_symlink())
