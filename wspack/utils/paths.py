"""Path utilities for directory walking and containment checks."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path


def normalize(path: Path | str) -> Path:
    """Return an absolute, lexically normalised path (symlinks are kept)."""
    return Path(os.path.abspath(path))


def iter_ancestors(start: Path) -> Iterator[Path]:
    """Yield ``start`` and each of its parents, nearest first."""
    current = normalize(start)
    yield current
    yield from current.parents


def find_up(start: Path, filename: str) -> Path | None:
    """Return the nearest ancestor-or-self of ``start`` containing ``filename``."""
    for directory in iter_ancestors(start):
        if (directory / filename).is_file():
            return directory
    return None


def is_within(path: Path, root: Path) -> bool:
    """Return True when ``path`` is ``root`` or lives below it."""
    return Path(path).is_relative_to(root)


def to_posix_relative(path: Path, base: Path) -> str:
    """Return ``path`` relative to ``base`` with forward slashes."""
    return Path(path).relative_to(base).as_posix()
