"""Reporter port shared by the services and adapters that emit progress."""

from __future__ import annotations

from typing import Any, Protocol

from wspack.app.errors import MessageName


class ReporterPort(Protocol):
    """Port interface for anything that accepts report entries.

    Implemented by ``StreamReport`` (rendering session) and ``ThrowReport``
    (raises on the first error).
    """

    def report_info(self, name: MessageName | None, text: str) -> None:
        ...

    def report_warning(self, name: MessageName | None, text: str) -> None:
        ...

    def report_error(self, name: MessageName | None, text: str) -> None:
        ...

    def report_json(self, data: dict[str, Any]) -> None:
        ...
