"""Ports for computing archive membership and encoding the archive stream."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from wspack.app.ports.workspace import Workspace


class PackListPort(Protocol):
    """Port interface for deciding which files belong in a workspace archive."""

    def gen_pack_list(self, workspace: Workspace) -> list[str]:
        """Return POSIX paths relative to ``workspace.cwd``, lexically sorted."""
        ...


class PackStreamPort(Protocol):
    """Port interface for encoding a file list into a compressed archive."""

    def gen_pack_stream(self, workspace: Workspace, files: list[str]) -> Iterator[bytes]:
        """Return a lazy, single-use iterator over the encoded archive bytes.

        Members are written in the order of ``files``.
        """
        ...
