"""Installer ports: full dependency install and cached install-state restore."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field

from wspack.app.ports.report import ReporterPort
from wspack.app.ports.workspace import Project

INSTALL_STATE_VERSION = 1


class InstallState(BaseModel):
    """Fingerprint of the project at the time of its last successful install."""

    version: int = Field(INSTALL_STATE_VERSION, description="Install state format version")
    installed_at: str = Field(..., description="ISO 8601 timestamp in UTC")
    lockfile_digest: str | None = Field(
        None, description="SHA-256 of the project lockfile, if one exists"
    )
    manifest_digests: dict[str, str] = Field(
        default_factory=dict,
        description="Workspace relative path -> SHA-256 of its manifest",
    )


class InstallerPort(Protocol):
    """Port interface for populating the project's dependency tree.

    Side effects: Runs the installer (network, filesystem).
    """

    def install(self, project: Project, *, report: ReporterPort) -> Path | None:
        """Install dependencies and return the persisted install-state path.

        Failures go through ``report.report_error``; with a ``ThrowReport`` that
        raises ``InstallError``, otherwise ``None`` is returned.
        """
        ...


class InstallStateRestorerPort(Protocol):
    """Port interface for the cheap, offline restore of a previous install."""

    def restore_install_state(self, project: Project) -> InstallState:
        """Validate and return the persisted install state.

        Raises:
            InstallStateMissingError: No install state (or no dependency tree) exists.
            InstallStateStaleError: The project changed since the last install.
        """
        ...
