"""Shared utility helpers."""

from ds_redirect.utils.paths import (
    copy_entry,
    create_symlink,
    is_within,
    link_path,
    list_entries,
    parent_folders,
)

__all__ = [
    "copy_entry",
    "create_symlink",
    "is_within",
    "link_path",
    "list_entries",
    "parent_folders",
]
