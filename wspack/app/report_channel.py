"""Report sessions shared by human and NDJSON consumers.

A ``StreamReport`` records every entry it receives (info, warning, error and
structured JSON) in call order, renders it for the selected audience, and
derives the process exit code from the number of errors recorded. Sessions
are used as context managers: leaving the block always closes the session,
and any exception raised inside is recorded as an error instead of escaping.
"""

from __future__ import annotations

import json as _json
import logging
import time
from datetime import UTC, datetime
from types import TracebackType
from typing import Any, Literal, TextIO

import typer
from pydantic import BaseModel, Field

from wspack.app.errors import (
    InstallError,
    MessageName,
    ReportClosedError,
    ReportError,
)
from wspack.config import Settings

logger = logging.getLogger(__name__)

EntryKind = Literal["info", "warning", "error", "json"]


class ReportEntry(BaseModel):
    """Single entry recorded by a report session."""

    sequence: int = Field(..., ge=1, description="1-based position in call order")
    timestamp: datetime = Field(..., description="UTC time the entry was recorded")
    kind: EntryKind
    name: MessageName | None = None
    text: str | None = None
    data: dict[str, Any] | None = None


def _format_duration(seconds: float) -> str:
    whole = int(seconds)
    millis = int(round((seconds - whole) * 1000))
    if whole >= 60:
        return f"{whole // 60}m {whole % 60}s"
    return f"{whole}s {millis}ms"


class StreamReport:
    """Report session rendering to ``stdout`` as human text or NDJSON."""

    def __init__(
        self,
        settings: Settings,
        *,
        stdout: TextIO,
        json: bool = False,
        include_footer: bool = True,
    ) -> None:
        self.settings = settings
        self.json = json
        self.include_footer = include_footer
        self._stdout = stdout
        self._entries: list[ReportEntry] = []
        self._reported_errors: set[int] = set()
        self._error_count = 0
        self._warning_count = 0
        self._closed = False
        self._started_at = time.monotonic()

    @classmethod
    def start(
        cls,
        settings: Settings,
        *,
        stdout: TextIO,
        json: bool = False,
        include_footer: bool = True,
    ) -> StreamReport:
        """Open a session; use the result as a context manager."""
        return cls(settings, stdout=stdout, json=json, include_footer=include_footer)

    def __enter__(self) -> StreamReport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        try:
            if isinstance(exc, Exception) and not self._closed:
                self.report_exception_once(exc)
        finally:
            self.close()
        return isinstance(exc, Exception)

    # Introspection

    @property
    def entries(self) -> list[ReportEntry]:
        return list(self._entries)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warning_count(self) -> int:
        return self._warning_count

    @property
    def closed(self) -> bool:
        return self._closed

    def exit_code(self) -> int:
        return 1 if self._error_count > 0 else 0

    # Emission

    def report_info(self, name: MessageName | None, text: str) -> None:
        self._record("info", name=name, text=text)

    def report_warning(self, name: MessageName | None, text: str) -> None:
        self._warning_count += 1
        self._record("warning", name=name, text=text)

    def report_error(self, name: MessageName | None, text: str) -> None:
        self._error_count += 1
        self._record("error", name=name, text=text)

    def report_json(self, data: dict[str, Any]) -> None:
        self._record("json", data=dict(data))

    def report_exception_once(self, exc: BaseException) -> None:
        """Record ``exc`` as an error unless this exact exception was already reported."""
        if id(exc) in self._reported_errors:
            return
        self._reported_errors.add(id(exc))

        if isinstance(exc, ReportError):
            self.report_error(exc.message_name, str(exc))
            return

        logger.exception("Unexpected error during report session", exc_info=exc)
        self.report_error(MessageName.EXCEPTION, f"{type(exc).__name__}: {exc}")

    def close(self) -> int:
        """Finalize the session and return its exit code (idempotent)."""
        if not self._closed:
            self._closed = True
            if self.include_footer and not self.json:
                self._render_footer()
        return self.exit_code()

    # Internals

    def _record(
        self,
        kind: EntryKind,
        *,
        name: MessageName | None = None,
        text: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        if self._closed:
            raise ReportClosedError(f"Cannot report {kind} entry: session already closed")

        entry = ReportEntry(
            sequence=len(self._entries) + 1,
            timestamp=datetime.now(UTC),
            kind=kind,
            name=name,
            text=text,
            data=data,
        )
        self._entries.append(entry)
        self._render(entry)

    def _render(self, entry: ReportEntry) -> None:
        if self.json:
            self._render_json(entry)
        else:
            self._render_human(entry)

    def _render_json(self, entry: ReportEntry) -> None:
        if entry.kind == "json":
            payload: dict[str, Any] = entry.data or {}
        else:
            name = entry.name if entry.name is not None else MessageName.UNNAMED
            payload = {
                "type": entry.kind,
                "name": int(name) if entry.name is not None else None,
                "displayName": name.display_name,
                "data": entry.text,
            }
        typer.echo(_json.dumps(payload, default=str), file=self._stdout)

    def _render_human(self, entry: ReportEntry) -> None:
        if entry.kind == "json":
            return

        name = entry.name if entry.name is not None else MessageName.UNNAMED
        line = f"➤ {name.display_name}: {entry.text}"
        if entry.kind == "error":
            typer.secho(line, file=self._stdout, fg=typer.colors.RED)
        elif entry.kind == "warning":
            typer.secho(line, file=self._stdout, fg=typer.colors.YELLOW)
        else:
            typer.echo(line, file=self._stdout)

    def _render_footer(self) -> None:
        elapsed = _format_duration(time.monotonic() - self._started_at)
        if self._error_count > 0:
            typer.secho(
                f"➤ {MessageName.UNNAMED.display_name}: Failed with errors in {elapsed}",
                file=self._stdout,
                fg=typer.colors.RED,
            )
        elif self._warning_count > 0:
            typer.secho(
                f"➤ {MessageName.UNNAMED.display_name}: Done with warnings in {elapsed}",
                file=self._stdout,
                fg=typer.colors.YELLOW,
            )
        else:
            typer.echo(f"➤ {MessageName.UNNAMED.display_name}: Done in {elapsed}", file=self._stdout)


class ThrowReport:
    """Non-interactive report that aborts on the first reported error."""

    def report_info(self, name: MessageName | None, text: str) -> None:
        logger.debug("%s", text)

    def report_warning(self, name: MessageName | None, text: str) -> None:
        logger.warning("%s", text)

    def report_error(self, name: MessageName | None, text: str) -> None:
        raise InstallError(text, name=name)

    def report_json(self, data: dict[str, Any]) -> None:
        return None
