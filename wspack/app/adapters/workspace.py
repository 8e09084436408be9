"""Manifest-backed workspace resolution."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from wspack.app.errors import ManifestError, ProjectNotFoundError, WorkspaceRequiredError
from wspack.app.ports import Manifest, Project, Workspace, WorkspaceResolverPort
from wspack.config import Settings
from wspack.utils.paths import find_up, iter_ancestors, normalize

logger = logging.getLogger(__name__)

IGNORED_WORKSPACE_DIRS = frozenset({"node_modules", ".git"})


def load_manifest(path: Path) -> Manifest:
    """Parse the manifest at ``path``."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Invalid JSON in manifest {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")

    try:
        return Manifest.model_validate(raw)
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest {path}: {exc}") from exc


class ManifestWorkspaceResolver(WorkspaceResolverPort):
    """Locate projects by walking up to the nearest manifest.

    The project root is the nearest directory (at or above the manifest)
    holding both a manifest and a lockfile. Without a lockfile the manifest
    directory is a standalone project. Child workspaces come from the root
    manifest's ``workspaces`` globs.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def _manifest_filename(self) -> str:
        return self._settings.manifest_filename

    def find(self, cwd: Path) -> tuple[Project, Workspace]:
        candidate = self._find_candidate(cwd)
        project = self._load_project(candidate)

        workspace = project.try_workspace_by_cwd(candidate)
        if workspace is None:
            raise WorkspaceRequiredError(project.root, normalize(cwd))

        return project, workspace

    def find_project(self, cwd: Path) -> Project:
        return self._load_project(self._find_candidate(cwd))

    def _find_candidate(self, cwd: Path) -> Path:
        candidate = find_up(cwd, self._manifest_filename)
        if candidate is None:
            raise ProjectNotFoundError(normalize(cwd), self._manifest_filename)
        return candidate

    def _find_project_root(self, candidate: Path) -> Path:
        for directory in iter_ancestors(candidate):
            if not (directory / self._manifest_filename).is_file():
                continue
            if any((directory / lockfile).is_file() for lockfile in self._settings.lockfile_names):
                return directory
        return candidate

    def _load_project(self, candidate: Path) -> Project:
        root = self._find_project_root(candidate)
        root_manifest = load_manifest(root / self._manifest_filename)

        project = Project(root=root)
        project.workspaces.append(Workspace(cwd=root, manifest=root_manifest, project_root=root))

        for workspace_dir in self._expand_workspace_globs(root, root_manifest.workspaces):
            project.workspaces.append(
                Workspace(
                    cwd=workspace_dir,
                    manifest=load_manifest(workspace_dir / self._manifest_filename),
                    project_root=root,
                )
            )

        logger.debug(
            "Resolved project %s with %d workspace(s)", root, len(project.workspaces)
        )
        return project

    def _expand_workspace_globs(self, root: Path, patterns: list[str]) -> list[Path]:
        found: set[Path] = set()
        for pattern in patterns:
            cleaned = pattern.strip().rstrip("/")
            if not cleaned or cleaned.startswith("!"):
                continue
            for match in root.glob(cleaned):
                if not match.is_dir() or match == root:
                    continue
                relative_parts = match.relative_to(root).parts
                if IGNORED_WORKSPACE_DIRS.intersection(relative_parts):
                    continue
                if (match / self._manifest_filename).is_file():
                    found.add(match)
        return sorted(found)
