"""Dependency installer and persisted install-state adapters."""

from __future__ import annotations

import json
import logging
import shlex
import subprocess
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from wspack.app.errors import InstallStateMissingError, InstallStateStaleError, MessageName
from wspack.app.ports import (
    InstallerPort,
    InstallState,
    InstallStateRestorerPort,
    Project,
    ReporterPort,
)
from wspack.app.ports.installer import INSTALL_STATE_VERSION
from wspack.config import Settings
from wspack.utils.atomic import atomic_write_json
from wspack.utils.hashing import compute_sha256_file, digest_optional_file

logger = logging.getLogger(__name__)


class InstallStateStore(InstallStateRestorerPort):
    """Fingerprint the project after an install and validate it before packing."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def state_path(self, project: Project) -> Path:
        return self._settings.get_install_state_path(project.root)

    def snapshot(self, project: Project) -> InstallState:
        """Compute the current fingerprint of ``project``."""
        lockfile = self._find_lockfile(project.root)
        return InstallState(
            version=INSTALL_STATE_VERSION,
            installed_at=datetime.now(UTC).isoformat(),
            lockfile_digest=digest_optional_file(lockfile),
            manifest_digests={
                workspace.relative_cwd: compute_sha256_file(
                    workspace.cwd / self._settings.manifest_filename
                )
                for workspace in project.workspaces
            },
        )

    def persist(self, project: Project) -> Path:
        """Write the current fingerprint of ``project`` and return its path."""
        path = self.state_path(project)
        atomic_write_json(path, self.snapshot(project).model_dump(mode="json"))
        logger.debug("Persisted install state to %s", path)
        return path

    def restore_install_state(self, project: Project) -> InstallState:
        path = self.state_path(project)
        if not path.is_file():
            raise InstallStateMissingError(
                f"The project in {project.root} doesn't seem to have been installed - "
                "running an install there (or passing --install-if-needed) might help"
            )

        try:
            stored = InstallState.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise InstallStateMissingError(
                f"The install state at {path} is unreadable; run an install again"
            ) from exc

        if stored.version != INSTALL_STATE_VERSION:
            raise InstallStateStaleError(
                f"The install state at {path} was written by an incompatible version; "
                "run an install again"
            )

        if not (project.root / "node_modules").is_dir():
            raise InstallStateMissingError(
                f"No node_modules directory in {project.root}; run an install again"
            )

        current = self.snapshot(project)
        if current.lockfile_digest != stored.lockfile_digest:
            raise InstallStateStaleError(
                f"The lockfile of {project.root} changed since the last install; "
                "run an install again"
            )
        if current.manifest_digests != stored.manifest_digests:
            raise InstallStateStaleError(
                f"Workspace manifests of {project.root} changed since the last install; "
                "run an install again"
            )

        logger.debug("Restored install state from %s (%s)", path, stored.installed_at)
        return stored

    def _find_lockfile(self, root: Path) -> Path | None:
        for name in self._settings.lockfile_names:
            candidate = root / name
            if candidate.is_file():
                return candidate
        return None


class CommandInstaller(InstallerPort):
    """Populate the dependency tree by running the configured install command."""

    def __init__(self, settings: Settings, state_store: InstallStateStore) -> None:
        self._settings = settings
        self._state_store = state_store

    def install(self, project: Project, *, report: ReporterPort) -> Path | None:
        command = shlex.split(self._settings.install_command)
        if not command:
            report.report_error(MessageName.INSTALL_FAILED, "No install command configured")
            return None

        logger.debug("Running install in %s: %s", project.root, command)
        report.report_info(MessageName.UNNAMED, f"Running {shlex.join(command)} in {project.root}")
        try:
            completed = subprocess.run(
                command,
                cwd=project.root,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            report.report_error(
                MessageName.INSTALL_FAILED,
                f"Install command not found: {command[0]}",
            )
            return None

        for line in (completed.stdout or "").splitlines():
            if line.strip():
                report.report_info(MessageName.UNNAMED, line)

        if completed.returncode != 0:
            report.report_error(
                MessageName.INSTALL_FAILED,
                f"{shlex.join(command)} failed with exit code {completed.returncode}",
            )
            return None

        return self._state_store.persist(project)
