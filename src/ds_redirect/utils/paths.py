"""Path and filesystem helper functions."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path, PurePosixPath

from ds_redirect.errors import SymlinkUnsupportedError

LOGGER = logging.getLogger(__name__)

_SYMLINK_REFUSED_ERRNOS = frozenset({errno.EPERM, errno.EACCES, errno.ENOSYS, errno.EOPNOTSUPP})
_WINDOWS_PRIVILEGE_NOT_HELD = 1314


def parent_folders(relative_path: PurePosixPath) -> list[PurePosixPath]:
    """Return every prefix of a relative path, shortest first, the path included.

    ``a/b/c.txt`` yields ``[a, a/b, a/b/c.txt]``.
    """

    prefixes: list[PurePosixPath] = []
    current = PurePosixPath()
    for part in relative_path.parts:
        current = current / part
        prefixes.append(current)
    return prefixes


def is_within(candidate: Path, root: Path) -> bool:
    """True when candidate equals root or lies below it, after canonicalization."""

    resolved_candidate = candidate.resolve(strict=False)
    resolved_root = root.resolve(strict=False)
    return resolved_candidate == resolved_root or resolved_root in resolved_candidate.parents


def list_entries(directory: Path, relative_to: Path) -> list[PurePosixPath]:
    """List entries of a directory (hidden ones included) relative to a base folder."""

    entries = []
    for entry in sorted(os.listdir(directory)):
        entries.append(PurePosixPath((directory / entry).relative_to(relative_to).as_posix()))
    return entries


def create_symlink(source: Path, destination: Path) -> None:
    """Symlink destination to source, raising SymlinkUnsupportedError if refused."""

    try:
        os.symlink(source, destination, target_is_directory=source.is_dir())
    except NotImplementedError as exc:
        raise SymlinkUnsupportedError(f"symlinks are not supported here: {exc}") from exc
    except OSError as exc:
        refused = exc.errno in _SYMLINK_REFUSED_ERRNOS or getattr(exc, "winerror", None) == _WINDOWS_PRIVILEGE_NOT_HELD
        if not refused:
            raise
        raise SymlinkUnsupportedError(exc.errno, f"symlink refused for {destination}: {exc.strerror}") from exc


def copy_entry(source: Path, destination: Path) -> None:
    """Copy a file or a whole directory to destination."""

    if source.is_dir():
        shutil.copytree(source, destination, symlinks=True)
    else:
        shutil.copy2(source, destination)


def link_path(
    source: Path,
    destination: Path,
    mode: str = "auto",
    logger: logging.Logger | None = None,
) -> bool:
    """Place source at destination; return True when a copy was made instead of a symlink."""

    effective_logger = logger or LOGGER
    if mode == "copy":
        copy_entry(source, destination)
        return True
    try:
        create_symlink(source, destination)
    except SymlinkUnsupportedError as exc:
        if mode == "symlink":
            raise
        effective_logger.warning(
            "tree.symlink_fallback source=%s destination=%s error=%s",
            source,
            destination,
            exc,
        )
        copy_entry(source, destination)
        return True
    return False
