"""Exception hierarchy for source-folder redirection."""

from __future__ import annotations


class RedirectError(Exception):
    """Base class for every redirection failure."""


class PathResolutionError(RedirectError, FileNotFoundError):
    """A supplied target path does not exist."""


class ContainmentViolationError(RedirectError, ValueError):
    """The effective path lies inside the dataset type's default source folder."""


class DestinationCollisionError(RedirectError, FileExistsError):
    """Two destinations collide or a destination already exists in the tree."""


class InvalidDestinationError(RedirectError, ValueError):
    """A destination is absolute, empty, or escapes its tree."""


class SymlinkUnsupportedError(RedirectError, OSError):
    """The platform refused to create a symlink."""


class NoActiveScopeError(RedirectError, RuntimeError):
    """A local redirection was requested outside any redirection scope."""
