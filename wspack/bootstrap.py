"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from wspack.app import ArchivePipeline, InstallStateResolver, PackService
from wspack.app.adapters import (
    CommandInstaller,
    InstallStateStore,
    LifecycleScriptRunner,
    ManifestPackLister,
    ManifestWorkspaceResolver,
    TarballStreamer,
)
from wspack.app.ports import (
    InstallerPort,
    InstallStateRestorerPort,
    LifecyclePort,
    PackListPort,
    PackStreamPort,
    WorkspaceResolverPort,
)
from wspack.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    pack_service: PackService
    pipeline: ArchivePipeline
    install_state: InstallStateResolver
    workspace_resolver: WorkspaceResolverPort
    lifecycle: LifecyclePort
    installer: InstallerPort
    restorer: InstallStateRestorerPort
    pack_lister: PackListPort
    pack_streamer: PackStreamPort


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Instantiate adapters and services for CLI consumption."""

    active_settings = settings or get_settings()

    workspace_resolver = ManifestWorkspaceResolver(active_settings)
    lifecycle = LifecycleScriptRunner(active_settings)
    state_store = InstallStateStore(active_settings)
    installer = CommandInstaller(active_settings, state_store)
    pack_lister = ManifestPackLister(active_settings, workspace_resolver)
    pack_streamer = TarballStreamer(active_settings)

    install_state = InstallStateResolver(
        lifecycle=lifecycle,
        installer=installer,
        restorer=state_store,
    )
    pipeline = ArchivePipeline(
        lifecycle=lifecycle,
        pack_lister=pack_lister,
        pack_streamer=pack_streamer,
    )
    pack_service = PackService(
        settings=active_settings,
        workspace_resolver=workspace_resolver,
        install_state=install_state,
        installer=installer,
        pipeline=pipeline,
    )

    return ApplicationContainer(
        settings=active_settings,
        pack_service=pack_service,
        pipeline=pipeline,
        install_state=install_state,
        workspace_resolver=workspace_resolver,
        lifecycle=lifecycle,
        installer=installer,
        restorer=state_store,
        pack_lister=pack_lister,
        pack_streamer=pack_streamer,
    )
