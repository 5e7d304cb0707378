"""Resolve the ordered list of image paths to convert."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from .errors import ConfigError, InputError


def list_directory(directory: Path) -> list[Path]:
    """Return the regular files directly inside *directory*.

    The listing is not recursive. Entries whose type cannot be read are
    skipped. The order is whatever the filesystem returns.

    Raises:
        InputError: If *directory* itself cannot be opened.
    """
    try:
        scanner = os.scandir(directory)
    except OSError as exc:
        raise InputError(f"Could not read directory {directory}: {exc}") from exc

    paths: list[Path] = []
    with scanner:
        for entry in scanner:
            try:
                if entry.is_file():
                    paths.append(Path(entry.path))
            except OSError:
                continue
    return paths


def sort_paths(paths: Iterable[Path]) -> list[Path]:
    """Sort paths lexicographically by their string form."""
    return sorted(paths, key=str)


def resolve_inputs(
    *,
    images: Iterable[Path | str] | None = None,
    directory: Path | str | None = None,
    auto_sort: bool = False,
) -> list[Path]:
    """Turn an explicit image list or a directory into an ordered path list.

    Args:
        images: Explicit image paths, kept in the given order.
        directory: Directory whose direct entries are used.
        auto_sort: Sort the result lexicographically.

    Raises:
        ConfigError: If neither or both of *images* and *directory* are given.
        InputError: If *directory* cannot be read.
    """
    if images is not None and directory is not None:
        raise ConfigError("Pass either a list of images or a directory, not both")

    if images is not None:
        paths = [Path(p) for p in images]
    elif directory is not None:
        paths = list_directory(Path(directory))
    else:
        raise ConfigError("Pass either a list of images or a directory")

    if auto_sort:
        paths = sort_paths(paths)
    return paths
