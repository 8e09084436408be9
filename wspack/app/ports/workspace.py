"""Workspace resolution port and the manifest/workspace DTOs it produces."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Manifest(BaseModel):
    """Subset of ``package.json`` the pack command reads."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(None, description="Package name, optionally scoped (@scope/name)")
    version: str | None = Field(None, description="Package version string")
    scripts: dict[str, str] = Field(default_factory=dict, description="Lifecycle scripts")
    files: list[str] | None = Field(
        None, description="Allow-list of paths to include in the archive"
    )
    workspaces: list[str] = Field(
        default_factory=list, description="Glob patterns declaring child workspaces"
    )

    @field_validator("workspaces", mode="before")
    @classmethod
    def _unwrap_workspaces(cls, value: Any) -> Any:
        # Also accept the {"packages": [...]} object form.
        if isinstance(value, dict):
            return value.get("packages", [])
        if value is None:
            return []
        return value

    @field_validator("name", "version", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def has_script(self, name: str) -> bool:
        return name in self.scripts


@dataclass(frozen=True, slots=True)
class Workspace:
    """A packable unit: a directory holding its own manifest."""

    cwd: Path
    manifest: Manifest
    project_root: Path

    @property
    def relative_cwd(self) -> str:
        """Workspace location relative to the project root, POSIX style."""
        relative = self.cwd.relative_to(self.project_root).as_posix()
        return relative or "."


@dataclass(slots=True)
class Project:
    """A project root and every workspace it declares (root workspace first)."""

    root: Path
    workspaces: list[Workspace] = field(default_factory=list)

    def try_workspace_by_cwd(self, cwd: Path) -> Workspace | None:
        """Return the workspace located exactly at ``cwd``, if any."""
        for workspace in self.workspaces:
            if workspace.cwd == cwd:
                return workspace
        return None


class WorkspaceResolverPort(Protocol):
    """Port interface for locating the project and workspace around a directory."""

    def find(self, cwd: Path) -> tuple[Project, Workspace]:
        """Return the project and the workspace containing ``cwd``.

        Raises:
            ProjectNotFoundError: No manifest exists in ``cwd`` or its parents.
            WorkspaceRequiredError: The nearest manifest isn't a project workspace.
        """
        ...

    def find_project(self, cwd: Path) -> Project:
        """Return the project containing ``cwd`` without requiring a workspace."""
        ...
