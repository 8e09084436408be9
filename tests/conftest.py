"""Pytest configuration and fixtures."""

import gc
import json
import shutil
import tempfile
import time
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from wspack.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        # Force garbage collection to release any file handles
        gc.collect()
        # Small delay to allow OS to release file locks
        time.sleep(0.05)
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated wspack settings scoped to tests."""

    import wspack.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    data_dir = temp_dir / "appdata"
    data_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(data_dir=data_dir)

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


WorkspaceFactory = Callable[..., Path]


@pytest.fixture
def make_workspace(temp_dir: Path) -> WorkspaceFactory:
    """Create a directory with a ``package.json`` and optional extra files.

    ``files`` maps POSIX relative paths to text contents.
    """

    def _make(
        relative: str = "project",
        *,
        manifest: dict[str, Any] | None = None,
        files: dict[str, str] | None = None,
    ) -> Path:
        root = temp_dir / relative
        root.mkdir(parents=True, exist_ok=True)
        (root / "package.json").write_text(
            json.dumps(manifest if manifest is not None else {}, indent=2),
            encoding="utf-8",
        )
        for name, content in (files or {}).items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make
