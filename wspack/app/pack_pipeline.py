"""Archive pipeline: prepare, list, stream and write a workspace archive."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import Future
from pathlib import Path
from typing import BinaryIO, Literal

from pydantic import BaseModel, Field

from wspack.app.errors import ArchiveStreamError, MessageName
from wspack.app.ports import (
    LifecyclePort,
    PackListPort,
    PackStreamPort,
    ReporterPort,
    Workspace,
)

logger = logging.getLogger(__name__)

PipelineState = Literal["start", "preparing", "listed", "streaming", "written", "done"]


class PackResult(BaseModel):
    """Summary of an archive pipeline run."""

    workspace: Path
    target: Path
    files: list[str] = Field(default_factory=list)
    dry_run: bool = False
    written: bool = False
    states: list[PipelineState] = Field(default_factory=list)


class FileSink:
    """Write-side of the archive pipe.

    ``finished`` is a one-shot completion signal: it resolves with the
    target path once every chunk is flushed and the file is closed, or
    carries the error that interrupted the write.
    """

    def __init__(self, target: Path) -> None:
        self.target = Path(target)
        self.finished: Future[Path] = Future()
        self.bytes_written = 0
        self._handle: BinaryIO | None = None

    def open(self) -> None:
        self.target.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.target.open("wb")

    def write(self, chunk: bytes) -> None:
        if self._handle is None:
            raise RuntimeError("FileSink.write() called before open()")
        self._handle.write(chunk)
        self.bytes_written += len(chunk)

    def end(self) -> None:
        """Flush and close the file, then signal completion."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
        self.finished.set_result(self.target)

    def fail(self, exc: BaseException) -> None:
        """Close the file (leaving whatever was written) and signal the error."""
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError:
                logger.warning("Failed to close %s after write error", self.target, exc_info=True)
            self._handle = None
        if not self.finished.done():
            self.finished.set_exception(exc)


def pipe(stream: Iterable[bytes], sink: FileSink) -> Future[Path]:
    """Drain ``stream`` into ``sink``; any failure is delivered through ``sink.finished``."""
    try:
        sink.open()
        for chunk in stream:
            if chunk:
                sink.write(chunk)
        sink.end()
    except Exception as exc:
        sink.fail(exc)
    return sink.finished


class ArchivePipeline:
    """Sequence prepare-for-pack, file listing and archive writing."""

    def __init__(
        self,
        *,
        lifecycle: LifecyclePort,
        pack_lister: PackListPort,
        pack_streamer: PackStreamPort,
    ) -> None:
        self._lifecycle = lifecycle
        self._lister = pack_lister
        self._streamer = pack_streamer

    def run(
        self,
        workspace: Workspace,
        target: Path,
        *,
        dry_run: bool = False,
        report: ReporterPort,
    ) -> PackResult:
        """Pack ``workspace`` into ``target`` (or only list its files when ``dry_run``).

        Every listed file produces one info entry and one ``{"location": ...}``
        JSON entry, in list order, in both modes.

        Raises:
            LifecycleScriptError: A prepack/postpack script failed.
            ArchiveStreamError: The archive could not be generated or written.
        """
        result = PackResult(workspace=workspace.cwd, target=target, dry_run=dry_run)
        self._transition(result, "start")

        self._transition(result, "preparing")
        with self._lifecycle.prepare_for_pack(workspace, report=report):
            report.report_json({"base": str(workspace.cwd)})

            files = self._lister.gen_pack_list(workspace)
            result.files = list(files)
            self._transition(result, "listed")

            for file in files:
                report.report_info(None, file)
                report.report_json({"location": file})

            if not dry_run:
                self._transition(result, "streaming")
                self._write_archive(workspace, files, target)
                result.written = True
                self._transition(result, "written")

        if not dry_run:
            report.report_info(MessageName.UNNAMED, f"Package archive generated in {target}")
            report.report_json({"output": str(target)})

        self._transition(result, "done")
        return result

    def _write_archive(self, workspace: Workspace, files: list[str], target: Path) -> None:
        sink = FileSink(target)
        try:
            stream = self._streamer.gen_pack_stream(workspace, files)
        except Exception as exc:
            raise ArchiveStreamError(target, exc) from exc

        finished = pipe(stream, sink)
        try:
            finished.result()
        except Exception as exc:
            raise ArchiveStreamError(target, exc) from exc

        logger.debug("Wrote %d bytes to %s", sink.bytes_written, target)

    def _transition(self, result: PackResult, state: PipelineState) -> None:
        result.states.append(state)
        logger.debug("Pack pipeline for %s -> %s", result.workspace, state)
