"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .installer import CommandInstaller, InstallStateStore
from .lifecycle import LifecycleScriptRunner
from .pack_list import ManifestPackLister
from .tarball import TarballStreamer
from .workspace import ManifestWorkspaceResolver

__all__ = [
    "CommandInstaller",
    "InstallStateStore",
    "LifecycleScriptRunner",
    "ManifestPackLister",
    "ManifestWorkspaceResolver",
    "TarballStreamer",
]
