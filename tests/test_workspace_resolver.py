"""Tests for manifest-backed workspace resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from wspack.app.adapters import ManifestWorkspaceResolver
from wspack.app.adapters.workspace import load_manifest
from wspack.app.errors import (
    ManifestError,
    MessageName,
    ProjectNotFoundError,
    WorkspaceRequiredError,
)
from wspack.config import Settings


@pytest.fixture
def resolver(temp_dir: Path) -> ManifestWorkspaceResolver:
    return ManifestWorkspaceResolver(Settings(data_dir=temp_dir / "appdata"))


def test_standalone_project_resolves_from_subdirectory(
    resolver: ManifestWorkspaceResolver, make_workspace
) -> None:
    root = make_workspace(manifest={"name": "foo", "version": "1.0.0"}, files={"src/a.js": ""})

    project, workspace = resolver.find(root / "src")

    assert project.root == root
    assert workspace.cwd == root
    assert workspace.manifest.name == "foo"
    assert workspace.relative_cwd == "."
    assert project.workspaces[0] is workspace


def test_monorepo_workspace_is_found_from_inside(
    resolver: ManifestWorkspaceResolver, make_workspace
) -> None:
    root = make_workspace(
        manifest={"name": "root", "workspaces": ["packages/*"]},
        files={"yarn.lock": ""},
    )
    make_workspace("project/packages/a", manifest={"name": "@acme/a"}, files={"src/x.js": ""})
    make_workspace("project/packages/b", manifest={"name": "@acme/b"})

    project, workspace = resolver.find(root / "packages" / "a" / "src")

    assert project.root == root
    assert [ws.relative_cwd for ws in project.workspaces] == [".", "packages/a", "packages/b"]
    assert workspace.cwd == root / "packages" / "a"
    assert workspace.manifest.name == "@acme/a"
    assert workspace.project_root == root


def test_workspaces_object_form_is_accepted(
    resolver: ManifestWorkspaceResolver, make_workspace
) -> None:
    root = make_workspace(
        manifest={"name": "root", "workspaces": {"packages": ["libs/*"]}},
        files={"package-lock.json": "{}"},
    )
    make_workspace("project/libs/core", manifest={"name": "core"})

    project = resolver.find_project(root)

    assert [ws.manifest.name for ws in project.workspaces] == ["root", "core"]


def test_undeclared_directory_is_not_a_workspace(
    resolver: ManifestWorkspaceResolver, make_workspace
) -> None:
    root = make_workspace(manifest={"name": "root"}, files={"yarn.lock": ""})
    tool = make_workspace("project/tools/x", manifest={"name": "x"})

    with pytest.raises(WorkspaceRequiredError) as excinfo:
        resolver.find(tool)

    assert excinfo.value.project_root == root
    assert excinfo.value.message_name is MessageName.MISSING_WORKSPACE


def test_missing_manifest_raises_project_not_found(
    resolver: ManifestWorkspaceResolver, temp_dir: Path
) -> None:
    empty = temp_dir / "empty"
    empty.mkdir()

    with pytest.raises(ProjectNotFoundError) as excinfo:
        resolver.find(empty)

    assert excinfo.value.message_name is MessageName.MISSING_WORKSPACE


def test_invalid_manifest_raises_manifest_error(temp_dir: Path) -> None:
    path = temp_dir / "package.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)


def test_non_utf8_manifest_raises_manifest_error(
    resolver: ManifestWorkspaceResolver, temp_dir: Path
) -> None:
    root = temp_dir / "latin1"
    root.mkdir()
    (root / "package.json").write_bytes(b'{"name": "caf\xe9"}')

    with pytest.raises(ManifestError) as excinfo:
        resolver.find(root)

    assert excinfo.value.message_name is MessageName.MISSING_WORKSPACE


def test_blank_name_and_version_are_treated_as_missing(temp_dir: Path) -> None:
    path = temp_dir / "package.json"
    path.write_text('{"name": "  ", "version": "", "scripts": {"prepack": "x"}}', encoding="utf-8")

    manifest = load_manifest(path)

    assert manifest.name is None
    assert manifest.version is None
    assert manifest.has_script("prepack")
