"""Standard library logging setup for the CLI."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_log_level(level: str | int) -> int:
    """Translate a level name (``"debug"``, ``"WARNING"``) into its number.

    Raises:
        ValueError: ``level`` is not a known logging level name.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(level: str | int = "WARNING") -> None:
    """Route ``wspack`` log records to the current stderr at ``level``.

    stdout is reserved for report output (human text or NDJSON). Calling this
    again replaces the handler installed by a previous call.
    """
    resolved = resolve_log_level(level)

    root = logging.getLogger("wspack")
    root.setLevel(resolved)
    for existing in list(root.handlers):
        if getattr(existing, "_wspack_handler", False):
            # Not closed or flushed: its stream may already be gone.
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._wspack_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
