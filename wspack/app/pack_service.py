"""Pack service orchestrating the ``wspack pack`` and ``wspack install`` commands.

Resolves the workspace, guarantees a usable install state, renders the
archive destination and runs the archive pipeline. All progress flows
through the caller's report session.
"""

from __future__ import annotations

import logging
from pathlib import Path

from wspack.app.errors import MessageName
from wspack.app.install_state import InstallStateResolver
from wspack.app.output_path import render_output_path
from wspack.app.pack_pipeline import ArchivePipeline, PackResult
from wspack.app.ports import InstallerPort, ReporterPort, WorkspaceResolverPort
from wspack.config import Settings
from wspack.utils.paths import normalize

logger = logging.getLogger(__name__)


class PackService:
    """Orchestrates archive creation for the workspace around a directory."""

    def __init__(
        self,
        *,
        settings: Settings,
        workspace_resolver: WorkspaceResolverPort,
        install_state: InstallStateResolver,
        installer: InstallerPort,
        pipeline: ArchivePipeline,
    ):
        """Initialize pack service.

        Args:
            settings: Active configuration (default archive name)
            workspace_resolver: Locates the project/workspace around ``cwd``
            install_state: Install-or-restore policy run before packing
            installer: Dependency installer used by ``install``
            pipeline: Archive pipeline
        """
        self.settings = settings
        self.workspace_resolver = workspace_resolver
        self.install_state = install_state
        self.installer = installer
        self.pipeline = pipeline

    def pack(
        self,
        cwd: Path,
        *,
        report: ReporterPort,
        out: str | None = None,
        dry_run: bool = False,
        install_if_needed: bool = False,
    ) -> PackResult:
        """Create the archive for the workspace containing ``cwd``.

        Args:
            cwd: Directory the command was invoked from
            report: Open report session receiving every entry
            out: Output path template (``%s`` name slug, ``%v`` version)
            dry_run: List archive members without writing the archive
            install_if_needed: Run a full install instead of restoring state

        Returns:
            PackResult describing the listed files and destination
        """
        invocation_cwd = normalize(cwd)
        project, workspace = self.workspace_resolver.find(invocation_cwd)
        logger.debug("Packing workspace %s of project %s", workspace.cwd, project.root)

        self.install_state.ensure_installable(
            project, workspace, install_if_needed=install_if_needed
        )

        target = render_output_path(
            out,
            workspace,
            cwd=invocation_cwd,
            default_filename=self.settings.default_filename,
        )

        return self.pipeline.run(workspace, target, dry_run=dry_run, report=report)

    def install(self, cwd: Path, *, report: ReporterPort) -> Path | None:
        """Install the project containing ``cwd`` and persist its install state.

        Installer output and failures are recorded on ``report``; ``None`` is
        returned when the install failed.
        """
        project = self.workspace_resolver.find_project(normalize(cwd))
        state_path = self.installer.install(project, report=report)
        if state_path is None:
            return None

        report.report_info(MessageName.UNNAMED, f"Install state saved to {state_path}")
        report.report_json({"installState": str(state_path)})
        return state_path
