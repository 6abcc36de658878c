"""Runtime redirection of dataset source folders."""

from ds_redirect.errors import (
    ContainmentViolationError,
    DestinationCollisionError,
    InvalidDestinationError,
    NoActiveScopeError,
    PathResolutionError,
    RedirectError,
    SymlinkUnsupportedError,
)
from ds_redirect.redirect import default_source_folder, redirect, resolve_source_folder
from ds_redirect.scope import GLOBAL_SCOPE, Scope, current_scope, redirection_scope, scoped
from ds_redirect.store import RedirectionStore, get_store

__all__ = [
    "ContainmentViolationError",
    "DestinationCollisionError",
    "InvalidDestinationError",
    "NoActiveScopeError",
    "PathResolutionError",
    "RedirectError",
    "SymlinkUnsupportedError",
    "default_source_folder",
    "redirect",
    "resolve_source_folder",
    "GLOBAL_SCOPE",
    "Scope",
    "current_scope",
    "redirection_scope",
    "scoped",
    "RedirectionStore",
    "get_store",
]
