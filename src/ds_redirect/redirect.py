"""Redirect dataset types to alternative source folders.

Example::

    @scoped
    def tau_experiment():
        redirect("Tau", target="~/TauExperiment")
        # readers now open ~/TauExperiment instead of <source_root>/Tau
        return read_source("Tau")

    tau_experiment()
    # outside the scope Tau resolves to its default folder again

A target may also be a list of files, or a mapping of relative destinations to
files; those are symlinked into a temporary folder that is used instead. With
``link_others`` every other entry of the default folder is symlinked alongside,
so only the named files differ from the original.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ds_redirect.config import AppSettings, get_settings
from ds_redirect.errors import ContainmentViolationError
from ds_redirect.scope import Scope, ScopeName, resolve_scope
from ds_redirect.store import RedirectionStore, get_store
from ds_redirect.targets import TargetSpec, normalize_target
from ds_redirect.tree import SyntheticTree, build_synthetic_tree
from ds_redirect.utils.paths import is_within

LOGGER = logging.getLogger(__name__)


def default_source_folder(dataset_type: str, settings: AppSettings) -> Path:
    """Return the folder a dataset type is read from when nothing redirects it."""

    return settings.source_folder_for(dataset_type).expanduser().resolve(strict=False)


def resolve_source_folder(
    dataset_type: str,
    *,
    settings: AppSettings | None = None,
    store: RedirectionStore | None = None,
) -> Path:
    """Effective source folder: the active redirection, else the configured default."""

    effective_store = store if store is not None else get_store()
    redirected = effective_store.get(dataset_type)
    if redirected is not None:
        return redirected
    return default_source_folder(dataset_type, settings or get_settings())


def redirect(
    dataset_type: str,
    target: TargetSpec | None,
    link_others: bool | None = None,
    scope: ScopeName | Scope = "local",
    *,
    settings: AppSettings | None = None,
    store: RedirectionStore | None = None,
    logger: logging.Logger | None = None,
) -> Path | None:
    """Point dataset_type at target and return the folder now used for it.

    ``target=None`` removes the redirection within the given scope. A single
    existing directory is used as is; anything else is materialized as a
    synthetic tree owned by the scope. ``scope="local"`` binds to the innermost
    ``redirection_scope()``/``@scoped`` block, ``scope="global"`` is permanent.
    """

    effective_logger = logger or LOGGER
    effective_store = store if store is not None else get_store()
    bound_scope = resolve_scope(scope)

    if target is None:
        effective_store.set(dataset_type, None, bound_scope)
        effective_logger.info("redirect.removed dataset_type=%s scope=%s", dataset_type, bound_scope.name)
        return None

    effective_settings = settings or get_settings()
    default_folder = default_source_folder(dataset_type, effective_settings)
    normalized = normalize_target(target, logger=effective_logger)

    tree: SyntheticTree | None = None
    if normalized.kind == "directory" and normalized.directory is not None:
        effective_path = normalized.directory
    else:
        tree = build_synthetic_tree(
            normalized.placements,
            link_others=effective_settings.redirect.link_others if link_others is None else link_others,
            default_source=default_folder,
            scope=bound_scope,
            tmp_root=effective_settings.paths.tmp_root,
            link_mode=effective_settings.redirect.link_mode,
            prefix=effective_settings.redirect.tree_prefix,
            logger=effective_logger,
        )
        effective_path = tree.path

    if is_within(effective_path, default_folder):
        if tree is not None:
            tree.remove()
        raise ContainmentViolationError(
            f"redirect target {effective_path} for {dataset_type!r} lies inside its default source folder {default_folder}"
        )

    effective_store.set(dataset_type, effective_path, bound_scope)
    effective_logger.info(
        "redirect.installed dataset_type=%s path=%s kind=%s scope=%s",
        dataset_type,
        effective_path,
        normalized.kind,
        bound_scope.name,
    )
    return effective_path
