"""Install-state policy applied before packing."""

from __future__ import annotations

import logging

from wspack.app.ports import (
    InstallerPort,
    InstallStateRestorerPort,
    LifecyclePort,
    Project,
    Workspace,
)
from wspack.app.report_channel import ThrowReport

logger = logging.getLogger(__name__)


class InstallStateResolver:
    """Make the dependency tree available when pack-time scripts need it.

    The resolver never decides whether scripts run; it only picks the
    cheapest way to have ``node_modules`` in place for them.
    """

    def __init__(
        self,
        *,
        lifecycle: LifecyclePort,
        installer: InstallerPort,
        restorer: InstallStateRestorerPort,
    ) -> None:
        self._lifecycle = lifecycle
        self._installer = installer
        self._restorer = restorer

    def ensure_installable(
        self,
        project: Project,
        workspace: Workspace,
        *,
        install_if_needed: bool = False,
    ) -> None:
        """Install or restore dependencies for ``workspace`` if it has pack scripts.

        Raises:
            InstallError: The full install failed.
            InstallStateMissingError: No usable install state could be restored.
        """
        if not self._lifecycle.has_pack_scripts(workspace):
            logger.debug("No pack scripts in %s; install state untouched", workspace.cwd)
            return

        if install_if_needed:
            logger.debug("Pack scripts found in %s; running install", workspace.cwd)
            self._installer.install(project, report=ThrowReport())
        else:
            logger.debug("Pack scripts found in %s; restoring install state", workspace.cwd)
            self._restorer.restore_install_state(project)
