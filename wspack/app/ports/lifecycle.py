"""Lifecycle port: pack-time script detection and the prepare-for-pack scope."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from wspack.app.ports.report import ReporterPort
from wspack.app.ports.workspace import Workspace


class LifecyclePort(Protocol):
    """Port interface for running workspace lifecycle scripts around packing."""

    def has_pack_scripts(self, workspace: Workspace) -> bool:
        """Return True when ``workspace`` declares pack-time scripts."""
        ...

    def prepare_for_pack(
        self, workspace: Workspace, *, report: ReporterPort
    ) -> AbstractContextManager[None]:
        """Run pre-pack scripts on entry and post-pack scripts exactly once on exit.

        Post-pack scripts also run when a pre-pack script fails.

        Raises:
            LifecycleScriptError: A lifecycle script exited non-zero.
        """
        ...
