"""Port interfaces for the wspack application layer.

These protocol interfaces define contracts for adapters.
Services depend on these ports, never on concrete implementations.
"""

__all__ = [
    "InstallState",
    "InstallerPort",
    "InstallStateRestorerPort",
    "LifecyclePort",
    "Manifest",
    "PackListPort",
    "PackStreamPort",
    "Project",
    "ReporterPort",
    "Workspace",
    "WorkspaceResolverPort",
]

from wspack.app.ports.installer import InstallerPort, InstallState, InstallStateRestorerPort
from wspack.app.ports.lifecycle import LifecyclePort
from wspack.app.ports.pack import PackListPort, PackStreamPort
from wspack.app.ports.report import ReporterPort
from wspack.app.ports.workspace import Manifest, Project, Workspace, WorkspaceResolverPort
