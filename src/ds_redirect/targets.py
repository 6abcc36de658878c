"""Normalize caller-supplied redirect targets into canonical placements."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Literal, Union

from ds_redirect.errors import (
    DestinationCollisionError,
    InvalidDestinationError,
    PathResolutionError,
)

LOGGER = logging.getLogger(__name__)

PathInput = Union[str, "os.PathLike[str]"]
TargetSpec = Union[
    PathInput,
    Mapping[Union[str, None], PathInput],
    Sequence[Union[PathInput, tuple[Union[str, None], PathInput]]],
]
TargetKind = Literal["directory", "files"]


@dataclass(frozen=True, slots=True)
class Placement:
    """One file (or directory) placed at a relative destination of a synthetic tree."""

    destination: PurePosixPath
    source: Path


@dataclass(frozen=True, slots=True)
class NormalizedTarget:
    """Canonical form of a redirect target."""

    kind: TargetKind
    directory: Path | None
    placements: tuple[Placement, ...]


def _raw_pairs(target: TargetSpec) -> list[tuple[str | None, PathInput]]:
    if isinstance(target, (str, os.PathLike)):
        return [(None, target)]
    if isinstance(target, Mapping):
        return [(alias, source) for alias, source in target.items()]
    pairs: list[tuple[str | None, PathInput]] = []
    for item in target:
        if isinstance(item, tuple):
            if len(item) != 2:
                raise InvalidDestinationError(f"target pairs must be (destination, source), got {item!r}")
            alias, source = item
            pairs.append((None if alias is None else str(alias), source))
        else:
            pairs.append((None, item))
    return pairs


def resolve_existing(path: PathInput) -> Path:
    """Canonicalize a path that must exist."""

    candidate = Path(path).expanduser()
    try:
        return candidate.resolve(strict=True)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise PathResolutionError(f"target path does not exist: {candidate}") from exc


def destination_for(alias: str | None, source: Path) -> PurePosixPath:
    """Turn an optional alias into a validated relative destination."""

    if alias is None:
        raw = source.name
    else:
        raw = alias.replace(os.sep, "/")
        if raw.endswith("/"):
            raw = raw + source.name

    if raw.strip() == "":
        raise InvalidDestinationError("destination must not be empty")
    if raw.startswith("/") or PureWindowsPath(raw).anchor:
        raise InvalidDestinationError(f"destination must be relative: {raw!r}")
    destination = PurePosixPath(raw)
    if not destination.parts:
        raise InvalidDestinationError(f"destination must name an entry below the tree root: {raw!r}")
    if ".." in destination.parts:
        raise InvalidDestinationError(f"destination must not escape its tree: {raw!r}")
    return destination


def check_collisions(placements: Sequence[Placement]) -> None:
    """Reject duplicate destinations and destinations nested inside another one."""

    seen: dict[PurePosixPath, Path] = {}
    for placement in placements:
        if placement.destination in seen:
            raise DestinationCollisionError(
                f"destination {placement.destination} requested for both "
                f"{seen[placement.destination]} and {placement.source}"
            )
        seen[placement.destination] = placement.source
    for destination in seen:
        for ancestor in destination.parents:
            if ancestor in seen:
                raise DestinationCollisionError(f"destination {destination} is nested inside destination {ancestor}")


def normalize_target(target: TargetSpec, logger: logging.Logger | None = None) -> NormalizedTarget:
    """Resolve every path of target and decide between directory and file-list redirection."""

    effective_logger = logger or LOGGER
    raw_pairs = _raw_pairs(target)
    if not raw_pairs:
        raise InvalidDestinationError("target must name at least one path")

    resolved = [(alias, resolve_existing(source)) for alias, source in raw_pairs]

    if len(resolved) == 1 and resolved[0][1].is_dir():
        alias, directory = resolved[0]
        if alias is not None:
            effective_logger.debug("targets.alias_ignored alias=%s directory=%s", alias, directory)
        return NormalizedTarget(kind="directory", directory=directory, placements=())

    placements = tuple(
        Placement(destination=destination_for(alias, source), source=source) for alias, source in resolved
    )
    check_collisions(placements)
    return NormalizedTarget(kind="files", directory=None, placements=placements)
