"""Archive membership computed from the manifest and ignore files."""

from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from wspack.app.ports import PackListPort, Workspace, WorkspaceResolverPort
from wspack.config import Settings
from wspack.utils.paths import is_within, to_posix_relative

logger = logging.getLogger(__name__)

ALWAYS_IGNORED_DIRS = frozenset({"node_modules", ".git", ".hg", ".svn"})
ALWAYS_IGNORED_FILES = frozenset(
    {
        ".DS_Store",
        ".npmignore",
        ".gitignore",
        ".npmrc",
        ".yarnrc",
        ".yarnrc.yml",
        "npm-debug.log",
        "yarn-error.log",
    }
)
# Matched case-insensitively against top-level file names.
ALWAYS_INCLUDED_GLOBS = ("readme*", "license*", "licence*", "changelog*")


@dataclass(frozen=True, slots=True)
class IgnoreRule:
    """One line of a gitignore-style file."""

    pattern: str
    negated: bool = False
    directory_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, line: str) -> IgnoreRule | None:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            return None

        negated = stripped.startswith("!")
        if negated:
            stripped = stripped[1:]
        directory_only = stripped.endswith("/")
        stripped = stripped.rstrip("/")
        anchored = stripped.startswith("/") or "/" in stripped
        stripped = stripped.lstrip("/")
        if not stripped:
            return None
        return cls(
            pattern=stripped,
            negated=negated,
            directory_only=directory_only,
            anchored=anchored,
        )

    def matches(self, relative: str, *, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored:
            return match_path_segments(self.pattern.split("/"), relative.split("/"))
        return fnmatch.fnmatchcase(relative.rsplit("/", 1)[-1], self.pattern)


def match_path_segments(pattern: list[str], path: list[str]) -> bool:
    """Match ``path`` segment by segment; a ``**`` segment spans zero or more dirs.

    ``*`` and ``?`` never cross a ``/``.
    """
    if not pattern:
        return not path
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(match_path_segments(rest, path[index:]) for index in range(len(path) + 1))
    if not path:
        return False
    return fnmatch.fnmatchcase(path[0], head) and match_path_segments(rest, path[1:])


def is_ignored(rules: list[IgnoreRule], relative: str, *, is_dir: bool) -> bool:
    """Evaluate ``rules`` in order; the last matching rule wins."""
    ignored = False
    for rule in rules:
        if rule.matches(relative, is_dir=is_dir):
            ignored = not rule.negated
    return ignored


def _normalize_files_entry(entry: str) -> str:
    cleaned = entry.strip().replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return cleaned.strip("/")


def matches_files_field(patterns: list[str], relative: str) -> bool:
    """Return True when ``relative`` is selected by the manifest ``files`` list."""
    for raw in patterns:
        pattern = _normalize_files_entry(raw)
        if not pattern:
            continue
        if relative == pattern or relative.startswith(pattern + "/"):
            return True
        if fnmatch.fnmatchcase(relative, pattern) or fnmatch.fnmatchcase(
            relative, pattern + "/*"
        ):
            return True
    return False


class ManifestPackLister(PackListPort):
    """List workspace files the way package managers select archive contents."""

    def __init__(self, settings: Settings, workspace_resolver: WorkspaceResolverPort) -> None:
        self._settings = settings
        self._resolver = workspace_resolver

    def gen_pack_list(self, workspace: Workspace) -> list[str]:
        root = workspace.cwd
        rules = self._load_ignore_rules(root)
        nested = self._nested_workspaces(workspace)
        files_field = workspace.manifest.files

        selected: list[str] = []
        for current, dirnames, filenames in os.walk(root):
            current_path = Path(current)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if self._keep_dir(root, current_path / name, rules, nested)
            )

            for name in sorted(filenames):
                relative = to_posix_relative(current_path / name, root)
                if self._keep_file(relative, rules, files_field):
                    selected.append(relative)

        selected.sort()
        logger.debug("Pack list for %s has %d file(s)", root, len(selected))
        return selected

    def _keep_dir(
        self, root: Path, path: Path, rules: list[IgnoreRule], nested: list[Path]
    ) -> bool:
        if path.name in ALWAYS_IGNORED_DIRS or path.name == self._settings.state_dir_name:
            return False
        if any(path == workspace_dir for workspace_dir in nested):
            return False
        relative = to_posix_relative(path, root)
        return not is_ignored(rules, relative, is_dir=True)

    def _keep_file(
        self, relative: str, rules: list[IgnoreRule], files_field: list[str] | None
    ) -> bool:
        is_top_level = "/" not in relative
        if is_top_level and self._always_included(relative):
            return True

        name = relative.rsplit("/", 1)[-1]
        if name in ALWAYS_IGNORED_FILES or name in self._settings.lockfile_names:
            return False
        if is_top_level and relative == self._settings.default_filename:
            return False
        if is_ignored(rules, relative, is_dir=False):
            return False
        if files_field is not None:
            return matches_files_field(files_field, relative)
        return True

    def _always_included(self, name: str) -> bool:
        if name == self._settings.manifest_filename:
            return True
        lowered = name.lower()
        return any(fnmatch.fnmatchcase(lowered, pattern) for pattern in ALWAYS_INCLUDED_GLOBS)

    def _load_ignore_rules(self, root: Path) -> list[IgnoreRule]:
        for name in (".npmignore", ".gitignore"):
            ignore_file = root / name
            if not ignore_file.is_file():
                continue
            try:
                lines = ignore_file.read_text(encoding="utf-8").splitlines()
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Could not read %s: %s", ignore_file, exc)
                return []
            return [rule for line in lines if (rule := IgnoreRule.parse(line)) is not None]
        return []

    def _nested_workspaces(self, workspace: Workspace) -> list[Path]:
        project = self._resolver.find_project(workspace.cwd)
        return [
            other.cwd
            for other in project.workspaces
            if other.cwd != workspace.cwd and is_within(other.cwd, workspace.cwd)
        ]
