"""Output path templating for package archives.

``--out`` templates may contain ``%s`` (package name slug) and ``%v``
(package version). Each placeholder is replaced at most once; there is no
escape for a literal ``%s``/``%v``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from wspack.app.ports import Workspace

DEFAULT_FILENAME = "package.tgz"
UNNAMED_IDENT = "package"
UNKNOWN_VERSION = "unknown"


@dataclass(frozen=True, slots=True)
class Ident:
    """Package name split into its optional scope and bare name."""

    scope: str | None
    name: str


def parse_ident(full_name: str) -> Ident:
    """Parse ``@scope/name`` or ``name`` into an :class:`Ident`."""
    if full_name.startswith("@") and "/" in full_name:
        scope, _, name = full_name[1:].partition("/")
        return Ident(scope=scope, name=name)
    return Ident(scope=None, name=full_name)


def slugify_ident(ident: Ident) -> str:
    """Return a filename-safe form of ``ident`` (``@scope/foo`` -> ``@scope-foo``)."""
    if ident.scope:
        return f"@{ident.scope}-{ident.name}"
    return ident.name


def pretty_workspace_ident(workspace: Workspace) -> str:
    if workspace.manifest.name is not None:
        return slugify_ident(parse_ident(workspace.manifest.name))
    return UNNAMED_IDENT


def pretty_workspace_version(workspace: Workspace) -> str:
    if workspace.manifest.version is not None:
        return workspace.manifest.version
    return UNKNOWN_VERSION


def interpolate_output_name(template: str, workspace: Workspace) -> str:
    """Replace the first ``%s`` and the first ``%v`` of ``template``.

    Both positions are located in the original template, so text inserted
    for one placeholder is never scanned for the other.
    """
    replacements = {
        "%s": pretty_workspace_ident(workspace),
        "%v": pretty_workspace_version(workspace),
    }
    positions = sorted(
        (index, placeholder)
        for placeholder in replacements
        if (index := template.find(placeholder)) != -1
    )

    pieces: list[str] = []
    cursor = 0
    for index, placeholder in positions:
        pieces.append(template[cursor:index])
        pieces.append(replacements[placeholder])
        cursor = index + len(placeholder)
    pieces.append(template[cursor:])
    return "".join(pieces)


def render_output_path(
    template: str | None,
    workspace: Workspace,
    *,
    cwd: Path,
    default_filename: str = DEFAULT_FILENAME,
) -> Path:
    """Compute the absolute archive destination.

    A supplied template is resolved against ``cwd`` (the directory the
    command was invoked from). Without a template the archive lands in the
    workspace root as ``default_filename``.
    """
    if template is None:
        return Path(os.path.abspath(workspace.cwd / default_filename))

    interpolated = interpolate_output_name(template, workspace)
    return Path(os.path.abspath(Path(cwd) / interpolated))
