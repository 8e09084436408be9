"""Application layer for wspack.

Services orchestrate the pack command; filesystem, subprocess and archive
side effects are delegated to adapters via port interfaces.
"""

__all__ = [
    "ArchivePipeline",
    "InstallStateResolver",
    "PackResult",
    "PackService",
    "StreamReport",
    "ThrowReport",
]

from wspack.app.install_state import InstallStateResolver
from wspack.app.pack_pipeline import ArchivePipeline, PackResult
from wspack.app.pack_service import PackService
from wspack.app.report_channel import StreamReport, ThrowReport
