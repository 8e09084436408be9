"""Deterministic gzip tarball encoding, streamed lazily."""

from __future__ import annotations

import logging
import stat
import tarfile
import zlib
from collections.abc import Iterator
from pathlib import Path

from wspack.app.ports import PackStreamPort, Workspace
from wspack.config import Settings

logger = logging.getLogger(__name__)

# 1985-10-26T08:15:00Z; a fixed mtime keeps archives byte-identical across runs.
FIXED_MTIME = 499162500
GZIP_WBITS = 16 + zlib.MAX_WBITS


class _GzipChunkWriter:
    """File-like sink for ``tarfile`` that gzips writes and buffers the output."""

    def __init__(self, level: int) -> None:
        self._compressor = zlib.compressobj(level, zlib.DEFLATED, GZIP_WBITS)
        self._pending: list[bytes] = []

    def write(self, data: bytes) -> int:
        compressed = self._compressor.compress(data)
        if compressed:
            self._pending.append(compressed)
        return len(data)

    def finish(self) -> None:
        self._pending.append(self._compressor.flush())

    def drain(self) -> bytes:
        chunk = b"".join(self._pending)
        self._pending.clear()
        return chunk


class TarballStreamer(PackStreamPort):
    """Encode workspace files as ``<prefix>/<path>`` members of a .tgz stream."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def gen_pack_stream(self, workspace: Workspace, files: list[str]) -> Iterator[bytes]:
        return self._stream(workspace.cwd, list(files))

    def _stream(self, root: Path, files: list[str]) -> Iterator[bytes]:
        writer = _GzipChunkWriter(self._settings.compression_level)
        prefix = self._settings.archive_prefix.strip("/")

        with tarfile.open(fileobj=writer, mode="w|", format=tarfile.PAX_FORMAT) as tar:  # type: ignore[call-overload]
            for relative in files:
                source = root / relative
                with source.open("rb") as handle:
                    tar.addfile(self._tar_info(source, f"{prefix}/{relative}"), handle)
                chunk = writer.drain()
                if chunk:
                    yield chunk

        writer.finish()
        yield writer.drain()
        logger.debug("Encoded %d file(s) from %s", len(files), root)

    def _tar_info(self, source: Path, member_name: str) -> tarfile.TarInfo:
        file_stat = source.stat()
        info = tarfile.TarInfo(member_name)
        info.size = file_stat.st_size
        info.mtime = FIXED_MTIME
        info.mode = 0o755 if file_stat.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH) else 0o644
        info.uid = 0
        info.gid = 0
        info.uname = ""
        info.gname = ""
        return info
