"""Lifecycle script execution around packing (prepack / postpack)."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from wspack.app.errors import LifecycleScriptError, MessageName, ReportError
from wspack.app.ports import LifecyclePort, ReporterPort, Workspace
from wspack.config import Settings

logger = logging.getLogger(__name__)

PREPACK = "prepack"
POSTPACK = "postpack"
PACK_SCRIPTS = (PREPACK, POSTPACK)


class LifecycleScriptRunner(LifecyclePort):
    """Run manifest scripts through the shell inside the workspace directory."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def has_pack_scripts(self, workspace: Workspace) -> bool:
        return any(workspace.manifest.has_script(name) for name in PACK_SCRIPTS)

    @contextmanager
    def prepare_for_pack(self, workspace: Workspace, *, report: ReporterPort) -> Iterator[None]:
        failure: BaseException | None = None
        try:
            self.maybe_execute_script(workspace, PREPACK, report=report)
            yield
        except BaseException as exc:
            failure = exc
            raise
        finally:
            self._run_postpack(workspace, report=report, failure=failure)

    def _run_postpack(
        self, workspace: Workspace, *, report: ReporterPort, failure: BaseException | None
    ) -> None:
        """Run postpack; if it fails on top of ``failure``, record ``failure`` first."""
        try:
            self.maybe_execute_script(workspace, POSTPACK, report=report)
        except LifecycleScriptError:
            if isinstance(failure, ReportError):
                report.report_error(failure.message_name, str(failure))
            elif isinstance(failure, Exception):
                report.report_error(
                    MessageName.EXCEPTION, f"{type(failure).__name__}: {failure}"
                )
            raise

    def maybe_execute_script(
        self, workspace: Workspace, script: str, *, report: ReporterPort
    ) -> None:
        """Run ``script`` if the workspace declares it; raise on non-zero exit."""
        command = workspace.manifest.scripts.get(script)
        if command is None:
            return

        logger.debug("Running %s script in %s: %s", script, workspace.cwd, command)
        completed = subprocess.run(
            command,
            shell=True,
            cwd=workspace.cwd,
            env=self._script_env(workspace, script),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )

        output = completed.stdout or ""
        for line in output.splitlines():
            if line.strip():
                report.report_info(MessageName.LIFECYCLE_SCRIPT, f"[{script}] {line}")

        if completed.returncode != 0:
            log_path = self._write_log(workspace, script, command, output)
            raise LifecycleScriptError(script, completed.returncode, log_path=log_path)

    def _script_env(self, workspace: Workspace, script: str) -> dict[str, str]:
        env = dict(os.environ)
        bin_dir = workspace.project_root / "node_modules" / ".bin"
        env["PATH"] = os.pathsep.join(
            part for part in (str(bin_dir), env.get("PATH", "")) if part
        )
        env["npm_lifecycle_event"] = script
        env["npm_package_name"] = workspace.manifest.name or ""
        env["npm_package_version"] = workspace.manifest.version or ""
        return env

    def _write_log(self, workspace: Workspace, script: str, command: str, output: str) -> Path:
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")
        log_path = self._settings.get_script_log_dir() / f"{script}-{stamp}.log"
        log_path.write_text(
            f"# cwd: {workspace.cwd}\n# command: {command}\n\n{output}",
            encoding="utf-8",
        )
        return log_path
