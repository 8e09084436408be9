"""Message codes and the error taxonomy surfaced through report sessions."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path


class MessageName(IntEnum):
    """Stable codes attached to reported entries (rendered as ``WP0000``)."""

    UNNAMED = 0
    EXCEPTION = 1
    MISSING_WORKSPACE = 2
    INSTALL_FAILED = 3
    MISSING_INSTALL_STATE = 4
    LIFECYCLE_SCRIPT = 5
    ARCHIVE_FAILED = 6

    @property
    def display_name(self) -> str:
        return f"WP{int(self):04d}"


class ReportError(RuntimeError):
    """Error carrying the message code used when it reaches a report."""

    message_name: MessageName = MessageName.EXCEPTION

    def __init__(self, message: str, *, name: MessageName | None = None) -> None:
        super().__init__(message)
        if name is not None:
            self.message_name = name


class ReportClosedError(RuntimeError):
    """Raised when an entry is emitted on a report that was already closed."""


# Workspace resolution


class ManifestError(ReportError):
    """Raised when a manifest exists but cannot be parsed."""

    message_name = MessageName.MISSING_WORKSPACE


class ProjectNotFoundError(ReportError):
    """Raised when no manifest exists between ``cwd`` and the filesystem root."""

    message_name = MessageName.MISSING_WORKSPACE

    def __init__(self, cwd: Path, manifest_filename: str = "package.json") -> None:
        super().__init__(
            f"No project found in {cwd} (no {manifest_filename} in this directory or its parents)"
        )
        self.cwd = cwd


class WorkspaceRequiredError(ReportError):
    """Raised when ``cwd`` is inside a project but not inside one of its workspaces."""

    message_name = MessageName.MISSING_WORKSPACE

    def __init__(self, project_root: Path, cwd: Path) -> None:
        super().__init__(
            f"This command can only be run from within a workspace of your project "
            f"({cwd} isn't a workspace of {project_root})."
        )
        self.project_root = project_root
        self.cwd = cwd


# Install


class InstallError(ReportError):
    """Raised when the dependency install fails."""

    message_name = MessageName.INSTALL_FAILED


class InstallStateMissingError(ReportError):
    """Raised when no persisted install state can be restored."""

    message_name = MessageName.MISSING_INSTALL_STATE


class InstallStateStaleError(InstallStateMissingError):
    """Raised when the persisted install state no longer matches the project."""


# Packing


class LifecycleScriptError(ReportError):
    """Raised when a pack-time lifecycle script exits non-zero."""

    message_name = MessageName.LIFECYCLE_SCRIPT

    def __init__(self, script: str, exit_code: int, *, log_path: Path | None = None) -> None:
        message = f"{script} script failed (exit code {exit_code})"
        if log_path is not None:
            message += f", logs can be found here: {log_path}"
        super().__init__(message)
        self.script = script
        self.exit_code = exit_code
        self.log_path = log_path


class ArchiveStreamError(ReportError):
    """Raised when generating the archive or writing it to disk fails."""

    message_name = MessageName.ARCHIVE_FAILED

    def __init__(self, target: Path, cause: BaseException) -> None:
        super().__init__(f"Failed to write package archive to {target}: {cause}")
        self.target = target
