"""In-memory mapping from dataset type to its redirected source folder."""

from __future__ import annotations

import logging
from pathlib import Path

from ds_redirect.scope import GLOBAL_SCOPE, Scope

LOGGER = logging.getLogger(__name__)


class RedirectionStore:
    """Dataset type -> effective source path, with scope-bound save/restore.

    Every non-global set() remembers the value it replaced and binds a restore
    to the scope, so nested scopes unwind to the outer override rather than to
    "no override".
    """

    def __init__(self) -> None:
        self._overrides: dict[str, Path] = {}

    def get(self, dataset_type: str) -> Path | None:
        return self._overrides.get(dataset_type)

    def set(self, dataset_type: str, path: Path | None, scope: Scope = GLOBAL_SCOPE) -> None:
        """Install path as the override for dataset_type; None removes it."""

        previous = self._overrides.get(dataset_type)
        if not scope.is_global:
            scope.bind(
                f"redirection:{dataset_type}",
                lambda: self._restore(dataset_type, previous),
            )
        self._assign(dataset_type, path)

    def snapshot(self) -> dict[str, Path]:
        return dict(self._overrides)

    def clear(self) -> None:
        self._overrides.clear()

    def __contains__(self, dataset_type: object) -> bool:
        return dataset_type in self._overrides

    def __len__(self) -> int:
        return len(self._overrides)

    def _assign(self, dataset_type: str, path: Path | None) -> None:
        if path is None:
            self._overrides.pop(dataset_type, None)
        else:
            self._overrides[dataset_type] = path

    def _restore(self, dataset_type: str, previous: Path | None) -> None:
        LOGGER.debug("store.restore dataset_type=%s path=%s", dataset_type, previous)
        self._assign(dataset_type, previous)


_DEFAULT_STORE = RedirectionStore()


def get_store() -> RedirectionStore:
    """Return the process-wide store read by resolve_source_folder()."""

    return _DEFAULT_STORE
