"""Tests for the install-or-restore policy applied before packing."""

from __future__ import annotations

from pathlib import Path

import pytest

from wspack.app.errors import InstallError, InstallStateMissingError, MessageName
from wspack.app.install_state import InstallStateResolver
from wspack.app.ports import InstallState, Manifest, Project, Workspace
from wspack.app.report_channel import ThrowReport


class FakeLifecycle:
    def __init__(self, has_scripts: bool) -> None:
        self.has_scripts = has_scripts

    def has_pack_scripts(self, workspace: Workspace) -> bool:
        return self.has_scripts

    def prepare_for_pack(self, workspace, *, report):  # pragma: no cover - unused
        raise AssertionError("not used")


class FakeInstaller:
    def __init__(self, *, fail: bool = False) -> None:
        self.calls: list[object] = []
        self.fail = fail

    def install(self, project: Project, *, report) -> Path | None:
        self.calls.append(report)
        if self.fail:
            report.report_error(MessageName.INSTALL_FAILED, "npm install failed")
            return None
        return project.root / ".wspack" / "install-state.json"


class FakeRestorer:
    def __init__(self, *, missing: bool = False) -> None:
        self.calls = 0
        self.missing = missing

    def restore_install_state(self, project: Project) -> InstallState:
        self.calls += 1
        if self.missing:
            raise InstallStateMissingError("not installed")
        return InstallState(installed_at="2024-01-01T00:00:00+00:00")


def _project() -> tuple[Project, Workspace]:
    root = Path("/proj")
    workspace = Workspace(cwd=root, manifest=Manifest(name="foo"), project_root=root)
    return Project(root=root, workspaces=[workspace]), workspace


@pytest.mark.parametrize("install_if_needed", [False, True])
def test_no_pack_scripts_touches_nothing(install_if_needed: bool) -> None:
    installer = FakeInstaller()
    restorer = FakeRestorer(missing=True)
    resolver = InstallStateResolver(
        lifecycle=FakeLifecycle(False), installer=installer, restorer=restorer
    )
    project, workspace = _project()

    resolver.ensure_installable(project, workspace, install_if_needed=install_if_needed)

    assert installer.calls == []
    assert restorer.calls == 0


def test_pack_scripts_restore_by_default() -> None:
    installer = FakeInstaller()
    restorer = FakeRestorer()
    resolver = InstallStateResolver(
        lifecycle=FakeLifecycle(True), installer=installer, restorer=restorer
    )
    project, workspace = _project()

    resolver.ensure_installable(project, workspace)

    assert restorer.calls == 1
    assert installer.calls == []


def test_missing_install_state_propagates() -> None:
    resolver = InstallStateResolver(
        lifecycle=FakeLifecycle(True),
        installer=FakeInstaller(),
        restorer=FakeRestorer(missing=True),
    )
    project, workspace = _project()

    with pytest.raises(InstallStateMissingError):
        resolver.ensure_installable(project, workspace)


def test_install_if_needed_runs_installer_with_throwing_report() -> None:
    installer = FakeInstaller()
    restorer = FakeRestorer()
    resolver = InstallStateResolver(
        lifecycle=FakeLifecycle(True), installer=installer, restorer=restorer
    )
    project, workspace = _project()

    resolver.ensure_installable(project, workspace, install_if_needed=True)

    assert len(installer.calls) == 1
    assert isinstance(installer.calls[0], ThrowReport)
    assert restorer.calls == 0


def test_install_failure_raises_install_error() -> None:
    resolver = InstallStateResolver(
        lifecycle=FakeLifecycle(True),
        installer=FakeInstaller(fail=True),
        restorer=FakeRestorer(),
    )
    project, workspace = _project()

    with pytest.raises(InstallError):
        resolver.ensure_installable(project, workspace, install_if_needed=True)
